"""API Routes for the Anacan dev server."""

from .feed_router import router as feed_router
from .sitemap_router import router as sitemap_router

__all__ = [
    "feed_router",
    "sitemap_router",
]
