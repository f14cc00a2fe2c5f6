"""Repositories for database operations."""

from anacan.infrastructure.persistence.repositories.cache_repository import (
    CachedEntity,
    CacheRepository,
)

__all__ = ["CacheRepository", "CachedEntity"]
