"""SQLAlchemy models for the cached reading lists and their items."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from anacan.infrastructure.persistence.database import Base


class CachedReadingListModel(Base):
    """A reading list stored for offline use."""

    __tablename__ = "reading_lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    cached_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class CachedReadingListItemModel(Base):
    """A post entry of a cached reading list.

    Items are stored independently of their list; there is no foreign key.
    """

    __tablename__ = "reading_list_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    list_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    cached_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
