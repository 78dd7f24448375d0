"""Firestore-backed record fetcher (implements IRecordFetcher)."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable

import httpx
from google.auth.exceptions import GoogleAuthError

from city_dashboard.application.dtos.records import CountSelector, RawDocument
from city_dashboard.application.interfaces.record_fetcher import SortDirection
from city_dashboard.domain.exceptions import FetchFailure
from city_dashboard.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
)
from city_dashboard.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


def _reason(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from Firestore"
    if isinstance(exc, httpx.TimeoutException):
        return "Firestore request timed out"
    return str(exc) or type(exc).__name__


class FirestoreRecordFetcher:
    """Read collection snapshots, ordered feeds, and counts from Firestore.

    Every store or transport error becomes FetchFailure naming the source;
    no call is retried.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def _collect(self, source: str, stream: AsyncIterator[DocumentSnapshot]) -> list[RawDocument]:
        try:
            docs = [RawDocument(id=snap.id, data=snap.to_dict()) async for snap in stream]
        except (httpx.HTTPError, GoogleAuthError, ValueError) as e:
            logger.warning("Fetch from %s failed: %s", source, _reason(e))
            raise FetchFailure(source, _reason(e)) from e
        logger.debug("Fetched %s documents from %s", len(docs), source)
        add_span_attributes(source=source, count=len(docs))
        return docs

    async def _count(self, source: str, count: Awaitable[int]) -> int:
        try:
            total = await count
        except (httpx.HTTPError, GoogleAuthError, ValueError) as e:
            logger.warning("Count of %s failed: %s", source, _reason(e))
            raise FetchFailure(source, _reason(e)) from e
        add_span_attributes(source=source, count=total)
        return total

    @traced("firestore.fetch_collection")
    async def fetch_collection(self, name: str) -> list[RawDocument]:
        """Return every document of a top-level collection."""
        return await self._collect(name, self._client.collection(name).stream())

    @traced("firestore.fetch_nested_collection")
    async def fetch_nested_collection(
        self, parent_name: str, parent_id: str, child_name: str
    ) -> list[RawDocument]:
        """Return every document of parent_name/parent_id/child_name."""
        source = f"{parent_name}/{parent_id}/{child_name}"
        coll = self._client.collection(parent_name).document(parent_id).collection(child_name)
        return await self._collect(source, coll.stream())

    @traced("firestore.fetch_fast_count")
    async def fetch_fast_count(self, selector: CountSelector) -> int:
        """Return a server-side count; collection groups when all_descendants is set."""
        if selector.all_descendants:
            query = self._client.collection_group(selector.collection)
            return await self._count(str(selector), query.count())
        return await self._count(
            str(selector), self._client.collection(selector.collection).count()
        )

    @traced("firestore.fetch_ordered_limited")
    async def fetch_ordered_limited(
        self,
        name: str,
        order_field: str,
        direction: SortDirection,
        limit: int,
    ) -> list[RawDocument]:
        """Return at most limit documents of name ordered on order_field."""
        query = self._client.collection(name).order_by(order_field, direction).limit(limit)
        return await self._collect(name, query.stream())
