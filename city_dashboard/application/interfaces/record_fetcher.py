"""Record fetcher interface (port) for the application layer.

The dashboard never queries storage directly. It needs four read primitives
and builds every derived view from them. Implementations raise FetchFailure
on any data-source error; they do not retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
    from city_dashboard.application.dtos.records import CountSelector, RawDocument


SortDirection = Literal["ASCENDING", "DESCENDING"]


class IRecordFetcher(Protocol):
    """Protocol for reading collection snapshots and counts (DIP)."""

    async def fetch_collection(self, name: str) -> list[RawDocument]:
        """Return every document of a top-level collection."""

    async def fetch_nested_collection(
        self, parent_name: str, parent_id: str, child_name: str
    ) -> list[RawDocument]:
        """Return every document of the sub-collection child_name under parent_name/parent_id."""

    async def fetch_fast_count(self, selector: CountSelector) -> int:
        """Return a server-side document count (may span nested sub-collections)."""

    async def fetch_ordered_limited(
        self,
        name: str,
        order_field: str,
        direction: SortDirection,
        limit: int,
    ) -> list[RawDocument]:
        """Return at most limit documents of a collection sorted on order_field."""
