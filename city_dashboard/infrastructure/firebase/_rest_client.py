"""Thin read-only Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deployment bundle small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx

from city_dashboard.infrastructure.firebase._rest_encoding import (
    decode_fields,
    document_id,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_COUNT_ALIAS = "count"

DEFAULT_PAGE_SIZE = 300
DEFAULT_TIMEOUT_SECONDS = 30.0


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    params: dict[str, Any] | None = None,
    access_token: str | None = None,
) -> Any:
    """Perform an async request to the Firestore REST API.

    Raises:
        httpx.HTTPStatusError: On any non-2xx response.
        httpx.HTTPError: On transport errors and timeouts.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers, params=params)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    resp.raise_for_status()
    return resp.json() if resp.content else {}


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


def _snapshot(doc: dict) -> DocumentSnapshot:
    return DocumentSnapshot(document_id(doc.get("name", "")), decode_fields(doc.get("fields")))


class _Query:
    """Structured query over one collection id under a parent.

    With all_descendants the query spans every collection with that id below
    the parent (a collection group when the parent is the database root).
    """

    def __init__(
        self,
        client: "FirestoreRESTClient",
        parent: str,
        collection_id: str,
        *,
        all_descendants: bool = False,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._all_descendants = all_descendants
        self._order_by_field: str | None = None
        self._order_direction: str = "ASCENDING"
        self._limit: int | None = None

    def order_by(self, field: str, direction: str = "ASCENDING") -> "_Query":
        self._order_by_field = field
        self._order_direction = direction
        return self

    def limit(self, n: int) -> "_Query":
        self._limit = n
        return self

    def _structured(self) -> dict[str, Any]:
        selector: dict[str, Any] = {"collectionId": self._collection_id}
        if self._all_descendants:
            selector["allDescendants"] = True
        structured: dict[str, Any] = {"from": [selector]}
        if self._order_by_field is not None:
            structured["orderBy"] = [
                {
                    "field": {"fieldPath": self._order_by_field},
                    "direction": self._order_direction,
                }
            ]
        if self._limit is not None:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query via runQuery and yield document snapshots."""
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runQuery",
            method="POST",
            body={"structuredQuery": self._structured()},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield _snapshot(item["document"])

    async def count(self) -> int:
        """Server-side count via runAggregationQuery; documents are not transferred."""
        body = {
            "structuredAggregationQuery": {
                "structuredQuery": self._structured(),
                "aggregations": [{"alias": _COUNT_ALIAS, "count": {}}],
            }
        }
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runAggregationQuery",
            method="POST",
            body=body,
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            fields = item.get("result", {}).get("aggregateFields", {})
            if _COUNT_ALIAS in fields:
                return int(fields[_COUNT_ALIAS].get("integerValue", 0))
        return 0


class DocumentReference:
    """Reference to a single document; only used to reach its sub-collections."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    def collection(self, collection_id: str) -> "CollectionReference":
        return CollectionReference(self._client, f"{self._path}/{collection_id}")


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    @property
    def id(self) -> str:
        return self._path.rsplit("/", 1)[-1]

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    def _query(self) -> _Query:
        parent = self._path.rsplit("/", 1)[0]
        return _Query(self._client, parent, self.id)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        """Start a query ordered on field. Use .limit(), then .stream()."""
        return self._query().order_by(field, direction)

    async def count(self) -> int:
        return await self._query().count()

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List every document in the collection (shallow), following nextPageToken."""
        url = f"{_BASE}/{self._path}"
        params: dict[str, Any] = {"pageSize": self._client.page_size}
        while True:
            out = await _request_async(
                self._client._http,
                url,
                params=params,
                access_token=await self._client.get_token(),
            )
            for doc in out.get("documents", []):
                yield _snapshot(doc)
            token = out.get("nextPageToken")
            if not token:
                return
            params = {"pageSize": self._client.page_size, "pageToken": token}


class FirestoreRESTClient:
    """Lightweight read-only Firestore client using the REST API."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self.page_size = page_size

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")

    def collection_group(self, collection_id: str) -> _Query:
        """Query every collection named collection_id at any depth."""
        return _Query(self, self._prefix, collection_id, all_descendants=True)
