"""Unit tests for sitemap and robots.txt generation."""

from datetime import date, datetime, timezone

import pytest
from lxml import etree

from anacan.domain.entities.content import Category, Forum, ForumPost, Page, Post
from anacan.domain.services.sitemap_builder import (
    SitemapContent,
    build_fallback_sitemap,
    build_language_sitemap,
    build_robots_txt,
    build_sitemap_index,
    collect_entries,
    localized_url,
)

BASE_URL = "https://anacan.az"
TODAY = date(2024, 3, 1)
NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9", "xhtml": "http://www.w3.org/1999/xhtml"}


def parse(xml: str) -> etree._Element:
    assert xml.startswith("<?xml version='1.0' encoding='UTF-8'?>")
    return etree.fromstring(xml.encode("utf-8"))


@pytest.fixture
def content():
    updated = datetime(2024, 2, 10, 8, 0, tzinfo=timezone.utc)
    return SitemapContent(
        posts=[
            Post(id="p1", slug="ilk-trimestr", title={"az": "İlk"}, is_featured=True, updated_at=updated),
            Post(id="p2", slug="yuxu", title={"az": "Yuxu"}),
        ],
        categories=[Category(id="c1", slug="korpe", name={"az": "Körpə", "ru": "Малыш"})],
        pages=[
            Page(id="pg1", slug="haqqimizda", title={"az": "Haqqımızda"}),
            Page(id="pg2", slug="qaralama", title={"az": "Qaralama"}, is_published=False),
        ],
        forums=[
            Forum(id="f1", slug="hamilelik", name={"az": "Hamiləlik"}),
            Forum(id="f2", slug="arxiv", name={"az": "Arxiv"}, is_active=False),
        ],
        forum_posts=[
            ForumPost(id="t1", forum_id="f1", title="Sual"),
            ForumPost(id="t2", forum_id="f2", title="Köhnə"),
            ForumPost(id="t3", forum_id="missing", title="Yetim"),
        ],
    )


def test_localized_url():
    assert localized_url("https://anacan.az/blog", "az") == "https://anacan.az/blog"
    assert localized_url("https://anacan.az/blog", "ru") == "https://anacan.az/blog?lang=ru"


def test_collect_entries_order_and_priorities(content):
    entries = collect_entries(content)

    assert [(e.path, e.changefreq, e.priority) for e in entries] == [
        ("", "daily", "1.0"),
        ("/blog", "daily", "0.8"),
        ("/category/korpe", "weekly", "0.8"),
        ("/blog/ilk-trimestr", "monthly", "1.0"),
        ("/blog/yuxu", "monthly", "0.9"),
        ("/haqqimizda", "monthly", "0.7"),
        ("/forums", "daily", "0.8"),
        ("/forum/hamilelik", "daily", "0.8"),
        ("/forum/hamilelik/t1", "weekly", "0.7"),
    ]
    assert entries[3].lastmod == date(2024, 2, 10)


def test_sitemap_index():
    root = parse(build_sitemap_index(BASE_URL, today=TODAY))

    assert root.tag == "{http://www.sitemaps.org/schemas/sitemap/0.9}sitemapindex"
    assert root.xpath("sm:sitemap/sm:loc/text()", namespaces=NS) == [
        "https://anacan.az/sitemap-az.xml",
        "https://anacan.az/sitemap-ru.xml",
    ]
    assert root.xpath("sm:sitemap/sm:lastmod/text()", namespaces=NS) == ["2024-03-01"] * 2


def test_default_locale_sitemap(content):
    root = parse(build_language_sitemap("az", BASE_URL, content, today=TODAY))

    locs = root.xpath("sm:url/sm:loc/text()", namespaces=NS)
    assert locs[0] == "https://anacan.az"
    assert "https://anacan.az/blog/ilk-trimestr" in locs
    assert root.xpath("sm:url[2]/sm:lastmod/text()", namespaces=NS) == ["2024-03-01"]
    assert root.xpath("sm:url[4]/sm:lastmod/text()", namespaces=NS) == ["2024-02-10"]


def test_other_locale_sitemap_uses_lang_parameter(content):
    root = parse(build_language_sitemap("ru", BASE_URL, content, today=TODAY))

    locs = root.xpath("sm:url/sm:loc/text()", namespaces=NS)
    assert all(loc.endswith("?lang=ru") for loc in locs)
    assert "https://anacan.az/category/korpe?lang=ru" in locs


def test_every_url_has_hreflang_alternates(content):
    root = parse(build_language_sitemap("az", BASE_URL, content, today=TODAY))

    for url in root.xpath("sm:url", namespaces=NS):
        links = url.xpath("xhtml:link", namespaces=NS)
        assert [link.get("hreflang") for link in links] == ["az", "ru", "x-default"]
        assert all(link.get("rel") == "alternate" for link in links)

    blog = root.xpath("sm:url[2]/xhtml:link", namespaces=NS)
    assert [link.get("href") for link in blog] == [
        "https://anacan.az/blog?lang=az",
        "https://anacan.az/blog?lang=ru",
        "https://anacan.az/blog",
    ]


def test_empty_content_lists_static_urls():
    root = parse(build_language_sitemap("az", BASE_URL, SitemapContent(), today=TODAY))

    assert root.xpath("sm:url/sm:loc/text()", namespaces=NS) == [
        "https://anacan.az",
        "https://anacan.az/blog",
        "https://anacan.az/forums",
    ]


def test_unsupported_locale():
    with pytest.raises(ValueError, match="Unsupported locale"):
        build_language_sitemap("en", BASE_URL, SitemapContent())


def test_fallback_sitemap():
    root = parse(build_fallback_sitemap(BASE_URL))

    assert root.xpath("sm:url/sm:loc/text()", namespaces=NS) == ["https://anacan.az"]
    assert root.xpath("sm:url/sm:priority/text()", namespaces=NS) == ["1.0"]


def test_robots_txt():
    robots = build_robots_txt(BASE_URL)

    assert robots.startswith("User-agent: *\nAllow: /\n")
    assert "Disallow: /admin/\n" in robots
    assert "Sitemap: https://anacan.az/sitemap.xml\n" in robots
    assert robots.endswith("Sitemap: https://anacan.az/sitemap-ru.xml\n")
