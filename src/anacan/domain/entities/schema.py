"""Schema entities for declarative collection definitions.

A SchemaDefinition describes one remote collection: its permissions, its
typed attributes and its indexes. Definitions are declared statically in the
catalog and are immutable at run time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AttributeKind(str, Enum):
    """Supported attribute types of the remote document database."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DATETIME = "datetime"
    EMAIL = "email"


class IndexKind(str, Enum):
    """Supported index types."""

    KEY = "key"
    UNIQUE = "unique"
    FULLTEXT = "fulltext"


class SortOrder(str, Enum):
    """Per-attribute sort order of an index."""

    ASC = "ASC"
    DESC = "DESC"


# Kinds for which the size parameter is meaningful
SIZED_KINDS = frozenset({AttributeKind.STRING, AttributeKind.EMAIL})

DEFAULT_STRING_SIZE = 255
MAX_STRING_SIZE = 16777216


@dataclass(frozen=True)
class PermissionRule:
    """A single collection or document permission.

    Attributes:
        action: One of read, create, update, delete or write.
        role: Role the action is granted to, e.g. ``any`` or ``users``.
    """

    action: str
    role: str

    VALID_ACTIONS = frozenset({"read", "create", "update", "delete", "write"})

    def __post_init__(self) -> None:
        if self.action not in self.VALID_ACTIONS:
            raise ValueError(f"Unknown permission action: {self.action}")
        if not self.role:
            raise ValueError("Permission role is required")

    def __str__(self) -> str:
        return f'{self.action}("{self.role}")'


@dataclass(frozen=True)
class AttributeSpec:
    """A typed, named field within a collection schema.

    Attributes:
        key: Attribute key, unique within the collection.
        kind: Attribute type.
        size: Maximum length, only meaningful for string and email kinds.
        required: Whether documents must provide a value.
        default: Default value; must be None when required is True.
        is_array: Whether the attribute holds a list of values.
    """

    key: str
    kind: AttributeKind
    size: int | None = None
    required: bool = False
    default: Any = None
    is_array: bool = False

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Attribute key is required")
        if self.required and self.default is not None:
            raise ValueError(
                f"Attribute '{self.key}' cannot be required and declare a default value"
            )
        if self.size is not None:
            if self.kind not in SIZED_KINDS:
                raise ValueError(
                    f"Attribute '{self.key}' of kind '{self.kind.value}' cannot declare a size"
                )
            if not 1 <= self.size <= MAX_STRING_SIZE:
                raise ValueError(
                    f"Attribute '{self.key}' size must be between 1 and {MAX_STRING_SIZE}"
                )

    @property
    def effective_size(self) -> int | None:
        """Size sent to the remote service (strings default to 255)."""
        if self.kind == AttributeKind.STRING:
            return self.size or DEFAULT_STRING_SIZE
        return self.size


@dataclass(frozen=True)
class IndexSpec:
    """A lookup index over one or more attributes.

    Attributes:
        key: Index key, unique within the collection.
        kind: Index type.
        attribute_keys: Ordered attribute keys covered by the index.
        sort_orders: Optional sort orders parallel to attribute_keys.
    """

    key: str
    kind: IndexKind
    attribute_keys: tuple[str, ...]
    sort_orders: tuple[SortOrder, ...] | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Index key is required")
        if not self.attribute_keys:
            raise ValueError(f"Index '{self.key}' must reference at least one attribute")
        if self.sort_orders is not None and len(self.sort_orders) != len(self.attribute_keys):
            raise ValueError(
                f"Index '{self.key}' sort orders must match its attributes one to one"
            )


@dataclass(frozen=True)
class SchemaDefinition:
    """Declared schema of one remote collection.

    Attributes:
        collection_id: Collection identifier, unique across the catalog.
        display_name: Human readable collection name.
        permissions: Collection level permission rules.
        attributes: Ordered attribute specifications.
        indexes: Ordered index specifications.
    """

    collection_id: str
    display_name: str
    permissions: tuple[PermissionRule, ...]
    attributes: tuple[AttributeSpec, ...]
    indexes: tuple[IndexSpec, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.collection_id:
            raise ValueError("Collection ID is required")
        if not self.display_name:
            raise ValueError("Collection display name is required")

        attribute_keys = [attr.key for attr in self.attributes]
        duplicates = {key for key in attribute_keys if attribute_keys.count(key) > 1}
        if duplicates:
            raise ValueError(
                f"Collection '{self.collection_id}' declares duplicate attributes: "
                f"{', '.join(sorted(duplicates))}"
            )

        index_keys = [index.key for index in self.indexes]
        duplicates = {key for key in index_keys if index_keys.count(key) > 1}
        if duplicates:
            raise ValueError(
                f"Collection '{self.collection_id}' declares duplicate indexes: "
                f"{', '.join(sorted(duplicates))}"
            )

        known = set(attribute_keys)
        for index in self.indexes:
            unknown = [key for key in index.attribute_keys if key not in known]
            if unknown:
                raise ValueError(
                    f"Index '{index.key}' of collection '{self.collection_id}' references "
                    f"unknown attributes: {', '.join(unknown)}"
                )

    def attribute(self, key: str) -> AttributeSpec:
        """Get an attribute specification by key.

        Raises:
            KeyError: If the collection has no such attribute.
        """
        for attr in self.attributes:
            if attr.key == key:
                return attr
        raise KeyError(key)

    @property
    def permission_strings(self) -> list[str]:
        """Permissions in the remote service's string format."""
        return [str(rule) for rule in self.permissions]
