"""Seed record entity for demonstration content."""

from dataclasses import dataclass, field
from typing import Any, Mapping

from anacan.domain.entities.schema import PermissionRule


@dataclass(frozen=True)
class SeedRecord:
    """A fixed literal document keyed by a natural uniqueness field.

    Seed records are created once: if a document with the same natural key
    already exists in the target collection, the record is skipped.

    Attributes:
        collection_id: Target collection.
        key_fields: Field names forming the natural key (slug, email or composite).
        data: Document fields that are always written.
        optional_data: Fields written only when the collection has the attribute.
        permissions: Document level permissions; empty inherits the collection's.
    """

    collection_id: str
    key_fields: tuple[str, ...]
    data: Mapping[str, Any]
    optional_data: Mapping[str, Any] = field(default_factory=dict)
    permissions: tuple[PermissionRule, ...] = ()

    def __post_init__(self) -> None:
        if not self.key_fields:
            raise ValueError(f"Seed record for '{self.collection_id}' needs a natural key")
        missing = [key for key in self.key_fields if self.data.get(key) in (None, "")]
        if missing:
            raise ValueError(
                f"Seed record for '{self.collection_id}' is missing natural key "
                f"fields: {', '.join(missing)}"
            )

    @property
    def natural_key(self) -> dict[str, Any]:
        return {key: self.data[key] for key in self.key_fields}

    @property
    def label(self) -> str:
        """Human readable identity used in logs."""
        return "/".join(str(value) for value in self.natural_key.values())

    def document(self, available_attributes: set[str] | None = None) -> dict[str, Any]:
        """Build the document payload.

        Args:
            available_attributes: Attribute keys present in the remote
                collection. Optional fields are included only if listed here.

        Returns:
            Field values to create the document with.
        """
        document = dict(self.data)
        if available_attributes:
            for key, value in self.optional_data.items():
                if key in available_attributes:
                    document[key] = value
        return document
