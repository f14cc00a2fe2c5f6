"""HTTP client for the remote schema and document service.

Wraps ``httpx.AsyncClient`` with the project and API key headers and maps
failures onto :class:`AppwriteError` (the service answered with an error)
and :class:`AppwriteNetworkError` (the request never got an answer).
"""

from typing import Any

import httpx

from anacan.core.logging import get_logger
from anacan.domain.entities.schema import AttributeSpec, IndexSpec
from anacan.infrastructure.appwrite.errors import AppwriteError, AppwriteNetworkError
from anacan.infrastructure.appwrite.query import UNIQUE_ID

logger = get_logger(__name__)

# Transport failures worth retrying
TRANSIENT_ERRORS = (httpx.NetworkError, httpx.TimeoutException, httpx.RemoteProtocolError)


class AppwriteClient:
    """Async client for the databases API.

    Example:
        async with AppwriteClient(endpoint, project_id, api_key) as client:
            await client.get_collection("anacan", "posts")
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: API endpoint, e.g. ``https://fra.cloud.appwrite.io/v1``.
            project_id: Project identifier.
            api_key: Admin API key; omit for public read access.
            timeout: Request timeout in seconds.
            transport: Optional custom transport (used by tests).
        """
        headers = {
            "X-Appwrite-Project": project_id,
            "Content-Type": "application/json",
        }
        if api_key:
            headers["X-Appwrite-Key"] = api_key

        self.endpoint = endpoint.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.endpoint,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Any, admin: bool = True) -> "AppwriteClient":
        """Create a client from application settings.

        Args:
            settings: Application settings.
            admin: Whether to authenticate with the admin API key.
        """
        return cls(
            endpoint=settings.appwrite_endpoint,
            project_id=settings.appwrite_project_id,
            api_key=settings.require_api_key() if admin else settings.appwrite_api_key,
            timeout=settings.request_timeout,
        )

    async def __aenter__(self) -> "AppwriteClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._http.request(method, path, json=json, params=params)
        except TRANSIENT_ERRORS as e:
            logger.debug("Remote request failed", method=method, path=path, error=repr(e))
            raise AppwriteNetworkError(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            message = f"HTTP {response.status_code}"
            error_type = None
            try:
                body = response.json()
                message = body.get("message", message)
                error_type = body.get("type")
            except ValueError:
                pass
            raise AppwriteError(message, code=response.status_code, type=error_type)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    # Databases

    async def get_database(self, database_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/databases/{database_id}")

    async def create_database(self, database_id: str, name: str) -> dict[str, Any]:
        return await self._request(
            "POST", "/databases", json={"databaseId": database_id, "name": name}
        )

    async def database_exists(self, database_id: str) -> bool:
        try:
            await self.get_database(database_id)
            return True
        except AppwriteError as e:
            if e.is_not_found:
                return False
            raise

    # Collections

    async def get_collection(self, database_id: str, collection_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/databases/{database_id}/collections/{collection_id}")

    async def collection_exists(self, database_id: str, collection_id: str) -> bool:
        try:
            await self.get_collection(database_id, collection_id)
            return True
        except AppwriteError as e:
            if e.is_not_found:
                return False
            raise

    async def create_collection(
        self,
        database_id: str,
        collection_id: str,
        name: str,
        permissions: list[str],
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/databases/{database_id}/collections",
            json={
                "collectionId": collection_id,
                "name": name,
                "permissions": permissions,
            },
        )

    # Attributes

    async def create_attribute(
        self, database_id: str, collection_id: str, spec: AttributeSpec
    ) -> dict[str, Any]:
        """Create an attribute of any kind from its specification."""
        payload: dict[str, Any] = {
            "key": spec.key,
            "required": spec.required,
            "array": spec.is_array,
        }
        if spec.effective_size is not None:
            payload["size"] = spec.effective_size
        if spec.default is not None:
            payload["default"] = spec.default

        return await self._request(
            "POST",
            f"/databases/{database_id}/collections/{collection_id}/attributes/{spec.kind.value}",
            json=payload,
        )

    async def get_attribute(self, database_id: str, collection_id: str, key: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/databases/{database_id}/collections/{collection_id}/attributes/{key}"
        )

    async def list_attributes(self, database_id: str, collection_id: str) -> list[dict[str, Any]]:
        response = await self._request(
            "GET", f"/databases/{database_id}/collections/{collection_id}/attributes"
        )
        return response.get("attributes", [])

    async def delete_attribute(self, database_id: str, collection_id: str, key: str) -> None:
        await self._request(
            "DELETE", f"/databases/{database_id}/collections/{collection_id}/attributes/{key}"
        )

    # Indexes

    async def create_index(
        self, database_id: str, collection_id: str, spec: IndexSpec
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "key": spec.key,
            "type": spec.kind.value,
            "attributes": list(spec.attribute_keys),
        }
        if spec.sort_orders is not None:
            payload["orders"] = [order.value for order in spec.sort_orders]

        return await self._request(
            "POST",
            f"/databases/{database_id}/collections/{collection_id}/indexes",
            json=payload,
        )

    # Documents

    async def list_documents(
        self, database_id: str, collection_id: str, queries: list[str] | None = None
    ) -> dict[str, Any]:
        """List documents.

        Returns:
            Response with ``total`` and ``documents`` keys.
        """
        params = {"queries[]": queries} if queries else None
        return await self._request(
            "GET",
            f"/databases/{database_id}/collections/{collection_id}/documents",
            params=params,
        )

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        data: dict[str, Any],
        document_id: str = UNIQUE_ID,
        permissions: list[str] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"documentId": document_id, "data": data}
        if permissions:
            payload["permissions"] = permissions
        return await self._request(
            "POST",
            f"/databases/{database_id}/collections/{collection_id}/documents",
            json=payload,
        )

    async def update_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            f"/databases/{database_id}/collections/{collection_id}/documents/{document_id}",
            json={"data": data},
        )
