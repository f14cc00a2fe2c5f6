"""Local persistence for the offline cache."""

from anacan.infrastructure.persistence.database import Base, DatabaseManager, get_db_manager
from anacan.infrastructure.persistence.offline_cache import (
    POSTS,
    READING_LIST_ITEMS,
    READING_LISTS,
    CacheConstraintError,
    OfflineCache,
)

__all__ = [
    "Base",
    "CacheConstraintError",
    "DatabaseManager",
    "OfflineCache",
    "POSTS",
    "READING_LISTS",
    "READING_LIST_ITEMS",
    "get_db_manager",
]
