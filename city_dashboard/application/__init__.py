"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the record fetcher interface.
"""

from city_dashboard.application.interfaces import IRecordFetcher
from city_dashboard.application.use_cases import (
    DashboardOptions,
    DashboardSnapshotService,
    ServicesOverviewService,
)

__all__ = [
    "DashboardOptions",
    "DashboardSnapshotService",
    "IRecordFetcher",
    "ServicesOverviewService",
]
