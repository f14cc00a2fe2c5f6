"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides session management and engine configuration for the
local SQLite database backing the offline cache.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from anacan.core.config import get_settings
from anacan.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models should inherit from this class to get proper ORM mapping
    and metadata management.
    """

    pass


def is_memory_database(database_url: str) -> bool:
    database = make_url(database_url).database
    return not database or database == ":memory:"


def ensure_database_directory(database_url: str) -> None:
    """Create the parent directory of a SQLite database file."""
    if not database_url.startswith("sqlite") or is_memory_database(database_url):
        return
    db_dir = Path(make_url(database_url).database).parent
    db_dir.mkdir(parents=True, exist_ok=True)


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory and
    provides context managers for database sessions.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """Initialize the database manager.

        Args:
            database_url: SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///./offline.db``.
            echo: Whether to log every SQL statement.
        """
        self.database_url = database_url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Returns:
            AsyncEngine: SQLAlchemy async engine instance.
        """
        if self._engine is None:
            options = {}
            if self.database_url.startswith("sqlite"):
                options["connect_args"] = {"check_same_thread": False}
                # An in-memory database lives only as long as its connection
                if is_memory_database(self.database_url):
                    options["poolclass"] = StaticPool

            self._engine = create_async_engine(self.database_url, echo=self.echo, **options)
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory.

        Returns:
            async_sessionmaker: SQLAlchemy async session factory.
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create missing tables and indexes; existing tables are left intact."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def get_user_version(self) -> int:
        """Read SQLite's ``user_version`` header field."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("PRAGMA user_version"))
            return int(result.scalar() or 0)

    async def set_user_version(self, version: int) -> None:
        async with self.engine.begin() as conn:
            # PRAGMA does not accept bound parameters
            await conn.execute(text(f"PRAGMA user_version = {int(version)}"))

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(CachedPostModel))
                posts = result.scalars().all()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager for the configured offline cache.

    Returns:
        DatabaseManager: Global database manager instance.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(get_settings().offline_cache_url)
    return _db_manager
