"""XML sitemap and robots.txt generation.

``/sitemap.xml`` is an index pointing at one sitemap per locale. Each locale
sitemap lists the home page, listings, categories, published posts and
pages, active forums and their topics, with ``hreflang`` alternates for
every URL.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from lxml import etree

from anacan.domain.entities.content import LOCALES, Category, Forum, ForumPost, Page, Post

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"
NSMAP = {None: SITEMAP_NS, "xhtml": XHTML_NS}

DEFAULT_LOCALE = "az"

ROBOTS_DISALLOW = ("/admin/", "/api/", "/profile/", "/login", "/signup", "/forgot-password")


@dataclass
class SitemapEntry:
    """A single ``<url>`` element."""

    path: str
    changefreq: str
    priority: str
    lastmod: date | None = None


@dataclass
class SitemapContent:
    """Content listed in a locale sitemap."""

    posts: list[Post] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    pages: list[Page] = field(default_factory=list)
    forums: list[Forum] = field(default_factory=list)
    forum_posts: list[ForumPost] = field(default_factory=list)


def localized_url(url: str, locale: str) -> str:
    """URL of a page in a locale; the default locale has no query string."""
    if locale == DEFAULT_LOCALE:
        return url
    return f"{url}?lang={locale}"


def _to_date(value: datetime | None) -> date | None:
    return value.date() if value else None


def _tostring(root: etree._Element) -> str:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True).decode(
        "utf-8"
    )


def _sub(parent: etree._Element, tag: str, text: str) -> etree._Element:
    element = etree.SubElement(parent, f"{{{SITEMAP_NS}}}{tag}")
    element.text = text
    return element


def collect_entries(content: SitemapContent) -> list[SitemapEntry]:
    """List sitemap entries in output order."""
    entries = [
        SitemapEntry("", "daily", "1.0"),
        SitemapEntry("/blog", "daily", "0.8"),
    ]

    for category in content.categories:
        entries.append(SitemapEntry(f"/category/{category.slug}", "weekly", "0.8"))

    for post in content.posts:
        entries.append(
            SitemapEntry(
                f"/blog/{post.slug}",
                "monthly",
                "1.0" if post.is_featured else "0.9",
                _to_date(post.last_modified),
            )
        )

    for page in content.pages:
        if page.is_published:
            entries.append(
                SitemapEntry(f"/{page.slug}", "monthly", "0.7", _to_date(page.last_modified))
            )

    entries.append(SitemapEntry("/forums", "daily", "0.8"))

    active_forums = {forum.id: forum for forum in content.forums if forum.is_active}
    for forum in active_forums.values():
        entries.append(
            SitemapEntry(f"/forum/{forum.slug}", "daily", "0.8", _to_date(forum.last_modified))
        )

    for topic in content.forum_posts:
        forum = active_forums.get(topic.forum_id)
        if forum is None:
            continue
        entries.append(
            SitemapEntry(
                f"/forum/{forum.slug}/{topic.id}",
                "weekly",
                "0.7",
                _to_date(topic.last_modified),
            )
        )

    return entries


def build_sitemap_index(base_url: str, today: date | None = None) -> str:
    """Sitemap index referencing every locale sitemap."""
    today = today or date.today()
    root = etree.Element(f"{{{SITEMAP_NS}}}sitemapindex", nsmap=NSMAP)
    for locale in LOCALES:
        sitemap = etree.SubElement(root, f"{{{SITEMAP_NS}}}sitemap")
        _sub(sitemap, "loc", f"{base_url}/sitemap-{locale}.xml")
        _sub(sitemap, "lastmod", today.isoformat())
    return _tostring(root)


def build_language_sitemap(
    locale: str,
    base_url: str,
    content: SitemapContent,
    today: date | None = None,
) -> str:
    """Sitemap of every public URL in one locale.

    Args:
        locale: ``az`` or ``ru``.
        base_url: Scheme and host, without a trailing slash.
        content: Published content to list.
        today: Fallback last modification date.

    Raises:
        ValueError: If the locale is not supported.
    """
    if locale not in LOCALES:
        raise ValueError(f"Unsupported locale: {locale}")
    today = today or date.today()

    root = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap=NSMAP)
    for entry in collect_entries(content):
        url = f"{base_url}{entry.path}"
        element = etree.SubElement(root, f"{{{SITEMAP_NS}}}url")
        _sub(element, "loc", localized_url(url, locale))
        _sub(element, "lastmod", (entry.lastmod or today).isoformat())
        _sub(element, "changefreq", entry.changefreq)
        _sub(element, "priority", entry.priority)

        alternates = [(lang, f"{url}?lang={lang}") for lang in LOCALES]
        alternates.append(("x-default", url))
        for hreflang, href in alternates:
            etree.SubElement(
                element,
                f"{{{XHTML_NS}}}link",
                rel="alternate",
                hreflang=hreflang,
                href=href,
            )
    return _tostring(root)


def build_fallback_sitemap(base_url: str) -> str:
    """Minimal sitemap listing only the home page."""
    root = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap={None: SITEMAP_NS})
    element = etree.SubElement(root, f"{{{SITEMAP_NS}}}url")
    _sub(element, "loc", base_url)
    _sub(element, "changefreq", "daily")
    _sub(element, "priority", "1.0")
    return _tostring(root)


def build_robots_txt(base_url: str) -> str:
    lines = ["User-agent: *", "Allow: /"]
    lines.extend(f"Disallow: {path}" for path in ROBOTS_DISALLOW)
    lines.extend(["", "# Sitemaps", f"Sitemap: {base_url}/sitemap.xml"])
    lines.extend(f"Sitemap: {base_url}/sitemap-{locale}.xml" for locale in LOCALES)
    return "\n".join(lines) + "\n"
