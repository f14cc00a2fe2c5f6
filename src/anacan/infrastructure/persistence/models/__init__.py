"""SQLAlchemy models for the offline cache."""

from anacan.infrastructure.persistence.models.cached_post import CachedPostModel
from anacan.infrastructure.persistence.models.cached_reading_list import (
    CachedReadingListItemModel,
    CachedReadingListModel,
)

__all__ = [
    "CachedPostModel",
    "CachedReadingListItemModel",
    "CachedReadingListModel",
]
