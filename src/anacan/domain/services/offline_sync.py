"""Fill the offline cache from the remote database."""

from dataclasses import dataclass

from anacan.core.logging import get_logger
from anacan.domain.services.content_service import ContentService
from anacan.infrastructure.persistence.offline_cache import (
    POSTS,
    CacheConstraintError,
    OfflineCache,
)

logger = get_logger(__name__)


@dataclass
class OfflineSyncResult:
    written: int = 0
    skipped: int = 0


class OfflineSync:
    """Overwrites cached posts with their current published version."""

    def __init__(self, content: ContentService, cache: OfflineCache) -> None:
        self.content = content
        self.cache = cache

    async def sync_posts(self, limit: int = 500) -> OfflineSyncResult:
        """Cache up to ``limit`` of the newest published posts.

        A post that cannot be cached is logged and skipped.
        """
        result = OfflineSyncResult()
        posts = await self.content.published_posts(limit=limit)

        for post in posts:
            try:
                await self.cache.put(POSTS, post.to_cache_entity())
                result.written += 1
            except CacheConstraintError as e:
                logger.warning("Skipping post", post_id=post.id, slug=post.slug, error=e.message)
                result.skipped += 1

        logger.info("Offline cache synced", written=result.written, skipped=result.skipped)
        return result
