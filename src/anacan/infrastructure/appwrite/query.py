"""Query helpers for the remote document API.

Queries are sent as JSON strings in the ``queries[]`` parameter.
"""

import json
from typing import Any

# Let the service generate a document ID
UNIQUE_ID = "unique()"


class Query:
    """Builders for document list queries."""

    @staticmethod
    def _build(method: str, attribute: str | None = None, values: list[Any] | None = None) -> str:
        query: dict[str, Any] = {"method": method}
        if attribute is not None:
            query["attribute"] = attribute
        if values is not None:
            query["values"] = values
        return json.dumps(query, ensure_ascii=False)

    @classmethod
    def equal(cls, attribute: str, value: Any) -> str:
        values = value if isinstance(value, list) else [value]
        return cls._build("equal", attribute, values)

    @classmethod
    def limit(cls, limit: int) -> str:
        return cls._build("limit", values=[limit])

    @classmethod
    def order_asc(cls, attribute: str) -> str:
        return cls._build("orderAsc", attribute)

    @classmethod
    def order_desc(cls, attribute: str) -> str:
        return cls._build("orderDesc", attribute)
