"""RSS feed and robots.txt routes."""

import asyncio
from typing import Literal

from fastapi import APIRouter, Query, Response
from fastapi.responses import PlainTextResponse

from anacan.core.config import get_settings
from anacan.domain.services.feed_builder import FEED_SIZE, build_rss_feed
from anacan.domain.services.sitemap_builder import build_robots_txt
from anacan.infrastructure.api.dependencies import ContentServiceDep

router = APIRouter()


@router.get("/rss.xml")
async def rss_feed(
    content: ContentServiceDep,
    lang: Literal["az", "ru"] = Query(default="az"),
) -> Response:
    """Latest published posts as RSS 2.0."""
    site_url = get_settings().site_url.rstrip("/")
    posts, categories = await asyncio.gather(
        content.published_posts(limit=FEED_SIZE),
        content.categories(),
    )
    xml = build_rss_feed(
        posts,
        site_url,
        locale=lang,
        categories={category.id: category for category in categories},
    )
    return Response(
        content=xml,
        media_type="application/rss+xml; charset=utf-8",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt() -> str:
    return build_robots_txt(get_settings().site_url.rstrip("/"))
