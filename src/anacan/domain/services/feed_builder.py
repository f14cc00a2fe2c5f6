"""RSS 2.0 feed of the latest published posts."""

from datetime import datetime, timezone
from email.utils import format_datetime

from lxml import etree

from anacan.domain.entities.content import LOCALES, Category, Post

ATOM_NS = "http://www.w3.org/2005/Atom"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

FEED_SIZE = 20

CHANNEL_TITLES = {
    "az": "Anacan.az - Müasir Ana Platforması",
    "ru": "Anacan.az - Современная Платформа для Мам",
}

CHANNEL_DESCRIPTIONS = {
    "az": "Azərbaycanın ən müasir ana platforması. Hamiləlikdən uşaq tərbiyəsinə qədər hər şey burada.",
    "ru": "Современная платформа для мам в Азербайджане. Все от беременности до воспитания детей.",
}

LANGUAGE_TAGS = {"az": "az-AZ", "ru": "ru-RU"}


def _text(parent: etree._Element, tag: str, text: str | etree.CDATA, **attrib: str) -> etree._Element:
    element = etree.SubElement(parent, tag, **attrib)
    element.text = text
    return element


def _pub_date(post: Post, fallback: datetime) -> str:
    value = post.published_at or post.created_at or fallback
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value, usegmt=True)


def build_rss_feed(
    posts: list[Post],
    base_url: str,
    locale: str = "az",
    categories: dict[str, Category] | None = None,
    now: datetime | None = None,
) -> str:
    """Render the latest posts as an RSS 2.0 document.

    Args:
        posts: Published posts, newest first. Only the first 20 are used.
        base_url: Public site URL, without a trailing slash.
        locale: ``az`` or ``ru``.
        categories: Categories by ID, used for ``<category>`` names.
        now: Build time, defaults to the current time.

    Raises:
        ValueError: If the locale is not supported.
    """
    if locale not in LOCALES:
        raise ValueError(f"Unsupported locale: {locale}")
    now = now or datetime.now(timezone.utc)
    categories = categories or {}
    build_date = format_datetime(now, usegmt=True)

    rss = etree.Element("rss", version="2.0", nsmap={"atom": ATOM_NS, "content": CONTENT_NS})
    channel = etree.SubElement(rss, "channel")
    _text(channel, "title", CHANNEL_TITLES[locale])
    _text(channel, "link", base_url)
    _text(channel, "description", CHANNEL_DESCRIPTIONS[locale])
    _text(channel, "language", LANGUAGE_TAGS[locale])
    _text(channel, "lastBuildDate", build_date)
    _text(channel, "pubDate", build_date)
    _text(channel, "ttl", "60")
    etree.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        href=f"{base_url}/rss.xml",
        rel="self",
        type="application/rss+xml",
    )
    image = etree.SubElement(channel, "image")
    _text(image, "url", f"{base_url}/logo.png")
    _text(image, "title", "Anacan.az")
    _text(image, "link", base_url)

    for post in posts[:FEED_SIZE]:
        post_url = f"{base_url}/blog/{post.slug}"
        item = etree.SubElement(channel, "item")
        _text(item, "title", etree.CDATA(post.title.get(locale, "")))
        _text(item, "link", post_url)
        _text(item, "guid", post_url, isPermaLink="true")
        _text(item, "description", etree.CDATA(post.excerpt.get(locale, "")))
        _text(item, "pubDate", _pub_date(post, now))
        if post.image_url:
            etree.SubElement(item, "enclosure", url=post.image_url, type="image/jpeg")
        category = categories.get(post.category_id or "")
        if category is not None:
            _text(item, "category", etree.CDATA(category.name.get(locale, "")))

    return etree.tostring(rss, xml_declaration=True, encoding="UTF-8", pretty_print=True).decode(
        "utf-8"
    )
