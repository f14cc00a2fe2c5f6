"""SQLAlchemy model for the cached posts partition."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from anacan.infrastructure.persistence.database import Base


class CachedPostModel(Base):
    """A post stored for offline reading.

    Attributes:
        id: Remote document ID.
        slug: URL slug, unique across cached posts that have one.
        category_id: Category of the post, indexed for category listings.
        payload: The whole post entity as JSON.
        cached_at: When the entry was last written.
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    slug: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True, index=True)
    category_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    cached_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<CachedPostModel(id={self.id}, slug={self.slug})>"
