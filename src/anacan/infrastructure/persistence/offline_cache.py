"""Offline cache of posts and reading lists.

A local SQLite database with three partitions: posts (looked up by slug and
category), reading lists, and reading list items (looked up by list). The
store opens lazily on first use. Its schema version is kept in SQLite's
``user_version``; opening a store with an older version creates the missing
tables and indexes without touching existing data.

The cache has no eviction: entries are overwritten on sync and otherwise
kept until deleted.
"""

import asyncio
from typing import Any

from sqlalchemy.exc import IntegrityError

from anacan.core.logging import get_logger
from anacan.infrastructure.persistence.database import (
    DatabaseManager,
    ensure_database_directory,
)
from anacan.infrastructure.persistence.models import (
    CachedPostModel,
    CachedReadingListItemModel,
    CachedReadingListModel,
)
from anacan.infrastructure.persistence.repositories import CachedEntity, CacheRepository

logger = get_logger(__name__)

SCHEMA_VERSION = 1

POSTS = "posts"
READING_LISTS = "reading_lists"
READING_LIST_ITEMS = "reading_list_items"

# Partition name to model and lookup columns (column name to entity field)
PARTITIONS: dict[str, tuple[Any, dict[str, str]]] = {
    POSTS: (CachedPostModel, {"slug": "slug", "category_id": "categoryId"}),
    READING_LISTS: (CachedReadingListModel, {}),
    READING_LIST_ITEMS: (CachedReadingListItemModel, {"list_id": "listId"}),
}


class CacheConstraintError(Exception):
    """Raised when a write violates a uniqueness constraint of the cache."""

    def __init__(self, message: str, partition: str) -> None:
        self.message = message
        self.partition = partition
        super().__init__(message)


class OfflineCache:
    """Durable local key-value store for offline reading.

    Example:
        cache = OfflineCache(DatabaseManager("sqlite+aiosqlite:///./offline.db"))
        await cache.put(POSTS, post)
        post = await cache.get(POSTS, post["id"])
    """

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db
        self._opened = False
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._opened

    async def open(self) -> None:
        """Open the store, upgrading its schema if needed. Safe to call twice."""
        if self._opened:
            return
        async with self._lock:
            if self._opened:
                return
            ensure_database_directory(self.db.database_url)
            version = await self.db.get_user_version()
            if version < SCHEMA_VERSION:
                logger.info(
                    "Upgrading offline cache schema",
                    from_version=version,
                    to_version=SCHEMA_VERSION,
                )
                await self.db.create_tables()
                await self.db.set_user_version(SCHEMA_VERSION)
            self._opened = True

    async def close(self) -> None:
        await self.db.disconnect()
        self._opened = False

    def _partition(self, partition: str) -> tuple[Any, dict[str, str]]:
        try:
            return PARTITIONS[partition]
        except KeyError:
            raise KeyError(f"Unknown cache partition: {partition}") from None

    async def put(self, partition: str, entity: CachedEntity) -> None:
        """Insert or overwrite an entity by its ``id``.

        Raises:
            CacheConstraintError: If a unique lookup value belongs to another entity.
        """
        model, lookups = self._partition(partition)
        await self.open()
        async with self.db.session() as session:
            repo = CacheRepository(session, model, lookups)
            try:
                await repo.put(entity)
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise CacheConstraintError(
                    f"Cannot cache {partition} entity '{entity.get('id')}': {e.orig}",
                    partition,
                ) from e

    async def put_many(self, partition: str, entities: list[CachedEntity]) -> int:
        """Write entities one at a time.

        Each write is its own transaction, so a failure leaves earlier
        entities written.

        Returns:
            Number of entities written.
        """
        for entity in entities:
            await self.put(partition, entity)
        return len(entities)

    async def get(self, partition: str, entity_id: str) -> CachedEntity | None:
        model, lookups = self._partition(partition)
        await self.open()
        async with self.db.session() as session:
            return await CacheRepository(session, model, lookups).get(entity_id)

    async def get_all(self, partition: str) -> list[CachedEntity]:
        model, lookups = self._partition(partition)
        await self.open()
        async with self.db.session() as session:
            return await CacheRepository(session, model, lookups).get_all()

    async def delete(self, partition: str, entity_id: str) -> None:
        model, lookups = self._partition(partition)
        await self.open()
        async with self.db.session() as session:
            await CacheRepository(session, model, lookups).delete(entity_id)
            await session.commit()

    async def find_by(self, partition: str, column: str, value: Any) -> list[CachedEntity]:
        model, lookups = self._partition(partition)
        await self.open()
        async with self.db.session() as session:
            return await CacheRepository(session, model, lookups).find_by(column, value)

    # Posts

    async def save_post(self, post: CachedEntity) -> None:
        await self.put(POSTS, post)

    async def get_post(self, post_id: str) -> CachedEntity | None:
        return await self.get(POSTS, post_id)

    async def get_all_posts(self) -> list[CachedEntity]:
        return await self.get_all(POSTS)

    async def delete_post(self, post_id: str) -> None:
        await self.delete(POSTS, post_id)

    async def get_post_by_slug(self, slug: str) -> CachedEntity | None:
        posts = await self.find_by(POSTS, "slug", slug)
        return posts[0] if posts else None

    async def list_posts_by_category(self, category_id: str) -> list[CachedEntity]:
        return await self.find_by(POSTS, "category_id", category_id)

    # Reading lists

    async def save_reading_list(self, reading_list: CachedEntity) -> None:
        await self.put(READING_LISTS, reading_list)

    async def get_reading_lists(self) -> list[CachedEntity]:
        return await self.get_all(READING_LISTS)

    async def save_reading_list_item(self, item: CachedEntity) -> None:
        await self.put(READING_LIST_ITEMS, item)

    async def list_reading_list_items(self, list_id: str) -> list[CachedEntity]:
        return await self.find_by(READING_LIST_ITEMS, "list_id", list_id)
