"""Pytest configuration for all tests."""

import json
from collections import defaultdict, deque
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from anacan.core.config import Settings, get_settings
from anacan.domain.entities.schema import AttributeSpec, IndexSpec
from anacan.infrastructure.appwrite.errors import AppwriteError


class RecordingSleep:
    """Awaitable stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def total(self) -> float:
        return sum(self.delays)


class FakeAppwrite:
    """In-memory stand-in for the remote schema and document service.

    Implements the subset of :class:`AppwriteClient` used by the services.
    Errors queued with :meth:`fail_next` are raised by the next calls of the
    named method, in order.
    """

    def __init__(self) -> None:
        self.databases: dict[str, str] = {}
        self.collections: dict[str, dict[str, Any]] = {}
        self.attributes: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.indexes: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.documents: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.attribute_statuses: dict[str, deque[str]] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.closed = False
        self._failures: dict[str, deque[Exception]] = defaultdict(deque)
        self._next_id = 0

    def fail_next(self, method: str, *errors: Exception) -> None:
        self._failures[method].extend(errors)

    def _call(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if self._failures[method]:
            raise self._failures[method].popleft()

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    async def __aenter__(self) -> "FakeAppwrite":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        self.closed = True

    # Databases

    async def get_database(self, database_id: str) -> dict[str, Any]:
        self._call("get_database", database_id)
        if database_id not in self.databases:
            raise AppwriteError("Database not found", code=404)
        return {"$id": database_id, "name": self.databases[database_id]}

    async def database_exists(self, database_id: str) -> bool:
        try:
            await self.get_database(database_id)
            return True
        except AppwriteError as e:
            if e.is_not_found:
                return False
            raise

    async def create_database(self, database_id: str, name: str) -> dict[str, Any]:
        self._call("create_database", database_id, name)
        if database_id in self.databases:
            raise AppwriteError("Database already exists", code=409)
        self.databases[database_id] = name
        return {"$id": database_id, "name": name}

    # Collections

    async def collection_exists(self, database_id: str, collection_id: str) -> bool:
        self._call("get_collection", database_id, collection_id)
        return collection_id in self.collections

    async def create_collection(
        self, database_id: str, collection_id: str, name: str, permissions: list[str]
    ) -> dict[str, Any]:
        self._call("create_collection", database_id, collection_id, name, permissions)
        if collection_id in self.collections:
            raise AppwriteError("Collection already exists", code=409)
        self.collections[collection_id] = {"name": name, "permissions": permissions}
        return {"$id": collection_id}

    # Attributes

    async def create_attribute(
        self, database_id: str, collection_id: str, spec: AttributeSpec
    ) -> dict[str, Any]:
        self._call("create_attribute", database_id, collection_id, spec.key)
        if spec.key in self.attributes[collection_id]:
            raise AppwriteError("Attribute already exists", code=409)
        attribute = {
            "key": spec.key,
            "type": spec.kind.value,
            "size": spec.effective_size,
            "required": spec.required,
            "default": spec.default,
            "status": "available",
        }
        self.attributes[collection_id][spec.key] = attribute
        return attribute

    async def get_attribute(self, database_id: str, collection_id: str, key: str) -> dict[str, Any]:
        self._call("get_attribute", database_id, collection_id, key)
        if key not in self.attributes[collection_id]:
            raise AppwriteError("Attribute not found", code=404)
        statuses = self.attribute_statuses.get(f"{collection_id}.{key}")
        if statuses:
            return {"key": key, "status": statuses.popleft()}
        return self.attributes[collection_id][key]

    async def list_attributes(self, database_id: str, collection_id: str) -> list[dict[str, Any]]:
        self._call("list_attributes", database_id, collection_id)
        return list(self.attributes[collection_id].values())

    async def delete_attribute(self, database_id: str, collection_id: str, key: str) -> None:
        self._call("delete_attribute", database_id, collection_id, key)
        if key not in self.attributes[collection_id]:
            raise AppwriteError("Attribute not found", code=404)
        del self.attributes[collection_id][key]

    # Indexes

    async def create_index(self, database_id: str, collection_id: str, spec: IndexSpec) -> dict[str, Any]:
        self._call("create_index", database_id, collection_id, spec.key)
        if spec.key in self.indexes[collection_id]:
            raise AppwriteError("Index already exists", code=409)
        missing = [key for key in spec.attribute_keys if key not in self.attributes[collection_id]]
        if missing:
            raise AppwriteError(f"Unknown attribute: {missing[0]}", code=400)
        index = {"key": spec.key, "type": spec.kind.value, "attributes": list(spec.attribute_keys)}
        self.indexes[collection_id][spec.key] = index
        return index

    # Documents

    async def list_documents(
        self, database_id: str, collection_id: str, queries: list[str] | None = None
    ) -> dict[str, Any]:
        self._call("list_documents", database_id, collection_id, tuple(queries or ()))
        documents = list(self.documents[collection_id])
        limit = None
        for raw in queries or []:
            query = json.loads(raw)
            method = query["method"]
            if method == "equal":
                documents = [
                    doc for doc in documents if doc.get(query["attribute"]) in query["values"]
                ]
            elif method == "limit":
                limit = query["values"][0]
            elif method in ("orderAsc", "orderDesc"):
                documents.sort(
                    key=lambda doc: doc.get(query["attribute"]) or 0,
                    reverse=method == "orderDesc",
                )
        total = len(documents)
        if limit is not None:
            documents = documents[:limit]
        return {"total": total, "documents": documents}

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        data: dict[str, Any],
        document_id: str = "unique()",
        permissions: list[str] | None = None,
    ) -> dict[str, Any]:
        self._call("create_document", database_id, collection_id, data, permissions)
        self._next_id += 1
        document = {
            "$id": f"doc{self._next_id}" if document_id == "unique()" else document_id,
            "$createdAt": f"2024-01-{self._next_id:02d}T10:00:00.000+00:00",
            "$updatedAt": f"2024-01-{self._next_id:02d}T10:00:00.000+00:00",
            "$permissions": permissions or [],
            **data,
        }
        self.documents[collection_id].append(document)
        return document

    async def update_document(
        self, database_id: str, collection_id: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        self._call("update_document", database_id, collection_id, document_id, data)
        for document in self.documents[collection_id]:
            if document["$id"] == document_id:
                document.update(data)
                return document
        raise AppwriteError("Document not found", code=404)

    def add_document(self, collection_id: str, **fields: Any) -> dict[str, Any]:
        """Insert a document directly, bypassing call recording."""
        self._next_id += 1
        document = {
            "$id": fields.pop("id", f"doc{self._next_id}"),
            "$createdAt": "2024-01-15T10:00:00.000+00:00",
            "$updatedAt": "2024-02-01T12:30:00.000+00:00",
            **fields,
        }
        self.documents[collection_id].append(document)
        return document


@pytest.fixture
def fake_appwrite() -> FakeAppwrite:
    """In-memory remote service."""
    return FakeAppwrite()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep function that returns immediately and records delays."""
    return RecordingSleep()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with an API key, no delays and a temporary offline cache."""
    return Settings(
        _env_file=None,
        appwrite_endpoint="https://appwrite.test/v1",
        appwrite_project_id="test-project",
        appwrite_database_id="anacan",
        appwrite_api_key="test-api-key",
        retry_base_delay=0,
        retry_max_delay=0,
        collection_settle_delay=0,
        attribute_settle_delay=0,
        index_barrier_delay=0,
        index_settle_delay=0,
        offline_cache_url=f"sqlite+aiosqlite:///{tmp_path / 'offline.db'}",
        log_level="WARNING",
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; start every test from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def api_client(monkeypatch, fake_appwrite):
    """HTTP client for the dev server app, reading content from ``fake_appwrite``.

    The lifespan does not run under ``ASGITransport``, so the remote client is
    placed on the app state directly.
    """
    from anacan.infrastructure.api.app import create_app

    monkeypatch.setenv("ANACAN_ENVIRONMENT", "testing")
    monkeypatch.setenv("ANACAN_SITE_URL", "https://anacan.test")
    monkeypatch.setenv("ANACAN_SITEMAP_MAX_AGE", "600")
    get_settings.cache_clear()

    app = create_app()
    app.state.appwrite_client = fake_appwrite
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
