"""Repository for one offline cache partition."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from anacan.infrastructure.persistence.database import Base

CachedEntity = dict[str, Any]


class CacheRepository:
    """Key-value operations on a cache table.

    Entities are stored whole in the ``payload`` column. Lookup columns are
    copied from entity fields on every write.
    """

    def __init__(
        self,
        session: AsyncSession,
        model: type[Base],
        lookup_fields: dict[str, str] | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
            model: Cache table model with ``id`` and ``payload`` columns.
            lookup_fields: Column name to entity field for secondary lookups.
        """
        self.session = session
        self.model = model
        self.lookup_fields = lookup_fields or {}

    def _to_model(self, entity: CachedEntity) -> Base:
        if not entity.get("id"):
            raise ValueError(f"Cached {self.model.__tablename__} entity needs an 'id'")
        values = {column: entity.get(field) for column, field in self.lookup_fields.items()}
        return self.model(id=entity["id"], payload=entity, **values)

    async def put(self, entity: CachedEntity) -> None:
        """Insert or replace the entity with the same ID."""
        await self.session.merge(self._to_model(entity))
        await self.session.flush()

    async def get(self, entity_id: str) -> CachedEntity | None:
        """Get an entity by ID.

        Returns:
            The stored entity, or None if absent.
        """
        model = await self.session.get(self.model, entity_id)
        return model.payload if model is not None else None

    async def get_all(self) -> list[CachedEntity]:
        """Get every entity, ordered by ID."""
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return [model.payload for model in result.scalars().all()]

    async def delete(self, entity_id: str) -> None:
        """Delete an entity by ID; deleting an absent ID is a no-op."""
        await self.session.execute(delete(self.model).where(self.model.id == entity_id))

    async def find_by(self, column: str, value: Any) -> list[CachedEntity]:
        """Get entities whose lookup column equals a value, ordered by ID.

        Raises:
            KeyError: If the column is not a lookup column of this partition.
        """
        if column not in self.lookup_fields:
            raise KeyError(column)
        result = await self.session.execute(
            select(self.model)
            .where(getattr(self.model, column) == value)
            .order_by(self.model.id)
        )
        return [model.payload for model in result.scalars().all()]
