"""Sitemap routes.

``/sitemap.xml`` is a static index; the locale sitemaps query the remote
database on every request. Any failure while building a sitemap is answered
with a minimal sitemap listing only the home page.
"""

from fastapi import APIRouter, Response

from anacan.core.config import get_settings
from anacan.core.logging import get_logger
from anacan.domain.services.sitemap_builder import (
    build_fallback_sitemap,
    build_language_sitemap,
    build_sitemap_index,
)
from anacan.infrastructure.api.dependencies import BaseUrl, ContentServiceDep

logger = get_logger(__name__)

router = APIRouter()

XML_MEDIA_TYPE = "application/xml; charset=utf-8"


def xml_response(xml: str, cache: bool = True) -> Response:
    headers = {}
    if cache:
        headers["Cache-Control"] = f"public, max-age={get_settings().sitemap_max_age}"
    return Response(content=xml, media_type=XML_MEDIA_TYPE, headers=headers)


async def language_sitemap(locale: str, base_url: str, content: ContentServiceDep) -> Response:
    try:
        sitemap_content = await content.sitemap_content()
        xml = build_language_sitemap(locale, base_url, sitemap_content)
    except Exception as e:
        logger.error("Error generating sitemap", locale=locale, error=str(e))
        return xml_response(build_fallback_sitemap(base_url), cache=False)
    return xml_response(xml)


@router.get("/sitemap.xml")
async def sitemap_index(base_url: BaseUrl) -> Response:
    """Sitemap index referencing the locale sitemaps."""
    try:
        xml = build_sitemap_index(base_url)
    except Exception as e:
        logger.error("Error generating sitemap index", error=str(e))
        return xml_response(build_fallback_sitemap(base_url), cache=False)
    return xml_response(xml)


@router.get("/sitemap-az.xml")
async def sitemap_az(base_url: BaseUrl, content: ContentServiceDep) -> Response:
    return await language_sitemap("az", base_url, content)


@router.get("/sitemap-ru.xml")
async def sitemap_ru(base_url: BaseUrl, content: ContentServiceDep) -> Response:
    return await language_sitemap("ru", base_url, content)
