"""Application use cases: one entry point per workflow."""

from city_dashboard.application.use_cases.dashboard import (
    DashboardOptions,
    DashboardSnapshotService,
)
from city_dashboard.application.use_cases.services_overview import (
    ServicesOverviewService,
)

__all__ = [
    "DashboardOptions",
    "DashboardSnapshotService",
    "ServicesOverviewService",
]
