"""Application DTOs (no dependency on the document-store client)."""

from city_dashboard.application.dtos.dashboard import (
    ActivityEvent,
    DashboardSnapshot,
    DashboardStats,
    MonthlyUserStat,
    PartialDashboardSnapshot,
    SectionFailed,
    SectionOk,
    SectionResult,
)
from city_dashboard.application.dtos.records import (
    BusDay,
    BusSchedule,
    CountSelector,
    RawDocument,
    TimestampedRecord,
    UserJoinRecord,
)
from city_dashboard.application.dtos.services_overview import (
    ServiceCategoryOverview,
    SubCategoryGroup,
)

__all__ = [
    "ActivityEvent",
    "BusDay",
    "BusSchedule",
    "CountSelector",
    "DashboardSnapshot",
    "DashboardStats",
    "MonthlyUserStat",
    "PartialDashboardSnapshot",
    "RawDocument",
    "SectionFailed",
    "SectionOk",
    "SectionResult",
    "ServiceCategoryOverview",
    "SubCategoryGroup",
    "TimestampedRecord",
    "UserJoinRecord",
]
