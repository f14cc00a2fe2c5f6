"""FastAPI dependencies for the dev server routes."""

from typing import Annotated

from fastapi import Depends, Request

from anacan.core.config import get_settings
from anacan.domain.services.content_service import ContentService


def get_content_service(request: Request) -> ContentService:
    """Content service backed by the app's public remote client."""
    return ContentService(request.app.state.appwrite_client, get_settings().appwrite_database_id)


def get_base_url(request: Request) -> str:
    """Public base URL of the request, honouring ``X-Forwarded-Proto``.

    Falls back to the configured site URL when the request has no Host.
    """
    host = request.headers.get("host")
    if not host:
        return get_settings().site_url.rstrip("/")
    forwarded = request.headers.get("x-forwarded-proto")
    scheme = forwarded.split(",")[0].strip() if forwarded else request.url.scheme
    return f"{scheme}://{host}"


ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
BaseUrl = Annotated[str, Depends(get_base_url)]
