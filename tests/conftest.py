"""Pytest configuration and fixtures for the city dashboard.

Uses city_dashboard.main:app for HTTP tests. The record fetcher dependency
is overridden with an in-memory fake, so no Firestore credentials are needed.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient

from city_dashboard.api.v1.dependencies import get_record_fetcher
from city_dashboard.application.dtos.records import CountSelector, RawDocument
from city_dashboard.application.services.timestamp_normalizer import normalize_timestamp
from city_dashboard.domain.exceptions import FetchFailure
from city_dashboard.main import app

# Fixed reference instant for pure-component tests.
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)


class FakeRecordFetcher:
    """In-memory IRecordFetcher.

    ``failures`` maps a source (collection name, nested path, or count
    selector string) to the reason its fetch fails. ``calls`` records every
    source requested, in call order.
    """

    def __init__(
        self,
        collections: dict[str, list[RawDocument]] | None = None,
        nested: dict[tuple[str, str, str], list[RawDocument]] | None = None,
        counts: dict[str, int] | None = None,
        failures: dict[str, str] | None = None,
    ) -> None:
        self.collections = collections or {}
        self.nested = nested or {}
        self.counts = counts or {}
        self.failures = failures or {}
        self.calls: list[str] = []

    async def _source(self, source: str) -> None:
        self.calls.append(source)
        await asyncio.sleep(0)
        if source in self.failures:
            raise FetchFailure(source, self.failures[source])

    async def fetch_collection(self, name: str) -> list[RawDocument]:
        await self._source(name)
        return list(self.collections.get(name, []))

    async def fetch_nested_collection(
        self, parent_name: str, parent_id: str, child_name: str
    ) -> list[RawDocument]:
        await self._source(f"{parent_name}/{parent_id}/{child_name}")
        return list(self.nested.get((parent_name, parent_id, child_name), []))

    async def fetch_fast_count(self, selector: CountSelector) -> int:
        await self._source(str(selector))
        return self.counts.get(str(selector), 0)

    async def fetch_ordered_limited(
        self, name: str, order_field: str, direction: str, limit: int
    ) -> list[RawDocument]:
        await self._source(f"recent:{name}")
        docs = [d for d in self.collections.get(name, []) if normalize_timestamp(d.data.get(order_field))]
        docs.sort(
            key=lambda d: normalize_timestamp(d.data.get(order_field)),
            reverse=direction == "DESCENDING",
        )
        return docs[:limit]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_fetcher() -> Callable[..., FakeRecordFetcher]:
    """Factory for FakeRecordFetcher instances."""
    return FakeRecordFetcher


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def use_fetcher():
    """Route the API to a given fetcher; overrides are removed after the test."""

    def _use(fetcher: FakeRecordFetcher) -> FakeRecordFetcher:
        app.dependency_overrides[get_record_fetcher] = lambda: fetcher
        return fetcher

    yield _use
    app.dependency_overrides.pop(get_record_fetcher, None)
