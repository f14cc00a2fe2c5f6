"""Content entities read from the remote document database.

These map raw documents (``$id``, ``$createdAt`` and snake_case fields) to
the shapes used by the sitemap, the feeds and the offline cache.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

LOCALES = ("az", "ru")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp returned by the remote service."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _localized(doc: Mapping[str, Any], prefix: str) -> dict[str, str]:
    return {locale: doc.get(f"{prefix}_{locale}") or "" for locale in LOCALES}


@dataclass
class Post:
    """Published blog post."""

    id: str
    slug: str
    title: dict[str, str]
    excerpt: dict[str, str] = field(default_factory=dict)
    category_id: str | None = None
    author: str = ""
    image_url: str = ""
    read_time: int = 5
    is_featured: bool = False
    status: str = "draft"
    view_count: int = 0
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Post":
        return cls(
            id=doc["$id"],
            slug=doc["slug"],
            title=_localized(doc, "title"),
            excerpt=_localized(doc, "excerpt"),
            category_id=doc.get("category_id"),
            author=doc.get("author_name") or "",
            image_url=doc.get("image_url") or "",
            read_time=doc.get("read_time") or 5,
            is_featured=bool(doc.get("is_featured")),
            status=doc.get("status") or "draft",
            view_count=doc.get("view_count") or 0,
            published_at=parse_timestamp(doc.get("published_at")),
            created_at=parse_timestamp(doc.get("$createdAt")),
            updated_at=parse_timestamp(doc.get("$updatedAt")),
        )

    @property
    def last_modified(self) -> datetime | None:
        return self.updated_at or self.published_at or self.created_at

    def to_cache_entity(self) -> dict[str, Any]:
        """Serialize into the offline cache's post shape."""
        return {
            "id": self.id,
            "slug": self.slug,
            "categoryId": self.category_id,
            "title": self.title,
            "excerpt": self.excerpt,
            "author": self.author,
            "imageUrl": self.image_url,
            "readTime": self.read_time,
            "isFeatured": self.is_featured,
            "status": self.status,
            "viewCount": self.view_count,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class Category:
    """Blog category."""

    id: str
    slug: str
    name: dict[str, str]
    icon: str | None = None
    color: str | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Category":
        return cls(
            id=doc["$id"],
            slug=doc["slug"],
            name=_localized(doc, "name"),
            icon=doc.get("icon"),
            color=doc.get("color"),
        )


@dataclass
class Page:
    """Static page such as About or Contact."""

    id: str
    slug: str
    title: dict[str, str]
    is_published: bool = True
    order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Page":
        # Pages created before the is_published attribute existed count as published
        return cls(
            id=doc["$id"],
            slug=doc["slug"],
            title=_localized(doc, "title"),
            is_published=doc.get("is_published") is not False,
            order=doc.get("order") or 0,
            created_at=parse_timestamp(doc.get("$createdAt")),
            updated_at=parse_timestamp(doc.get("$updatedAt")),
        )

    @property
    def last_modified(self) -> datetime | None:
        return self.updated_at or self.created_at


@dataclass
class Forum:
    """Forum category."""

    id: str
    slug: str
    name: dict[str, str]
    is_active: bool = True
    order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Forum":
        return cls(
            id=doc["$id"],
            slug=doc["slug"],
            name=_localized(doc, "name"),
            is_active=doc.get("is_active") is not False,
            order=doc.get("order") or 0,
            created_at=parse_timestamp(doc.get("$createdAt")),
            updated_at=parse_timestamp(doc.get("$updatedAt")),
        )

    @property
    def last_modified(self) -> datetime | None:
        return self.updated_at or self.created_at


@dataclass
class ForumPost:
    """Topic posted in a forum."""

    id: str
    forum_id: str
    title: str
    is_closed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ForumPost":
        return cls(
            id=doc["$id"],
            forum_id=doc.get("forum_id") or "",
            title=doc.get("title") or "",
            is_closed=bool(doc.get("is_closed")),
            created_at=parse_timestamp(doc.get("$createdAt")),
            updated_at=parse_timestamp(doc.get("$updatedAt")),
        )

    @property
    def last_modified(self) -> datetime | None:
        return self.updated_at or self.created_at
