"""Application interfaces (ports). Infrastructure implements these."""

from city_dashboard.application.interfaces.record_fetcher import (
    IRecordFetcher,
    SortDirection,
)

__all__ = [
    "IRecordFetcher",
    "SortDirection",
]
