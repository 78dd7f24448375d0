"""DTOs for the dashboard read-model: stats, activity feed, monthly series.

Every type here is an immutable value computed fresh per request and owned by
that request. Nothing is cached or persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Generic, TypeVar

from city_dashboard.domain.enums import ActivityType, CountSource

T = TypeVar("T")


@dataclass(frozen=True)
class DashboardStats:
    """Aggregate counters with a rolling "recent" window.

    Totals for services, properties, users, news and notifications come from
    fast counts; the matching recent counts come from flat snapshots. The
    services total spans the nested ``items`` collections while the recent
    count filters the top-level collection, so ``recent_services_count`` may
    exceed ``total_services``. ``total_sources`` records which primitive
    produced each total.

    ``bus_trips_count`` is a weekly extrapolation (sum of drivers per day
    times seven), not a measured trip count; ``bus_trips_estimated`` is
    always True.
    """

    total_services: int
    total_properties: int
    total_users: int
    total_news_and_notifications: int
    recent_services_count: int
    recent_properties_count: int
    recent_users_count: int
    recent_news_and_notifications_count: int
    emergency_reports_count: int
    bus_trips_count: int
    recent_window_days: int
    bus_trips_estimated: bool = True
    total_sources: Mapping[str, CountSource] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_sources", MappingProxyType(dict(self.total_sources)))


@dataclass(frozen=True)
class ActivityEvent:
    """One entry of the merged recent-activity feed."""

    id: str
    type: ActivityType
    description: str
    time: datetime


@dataclass(frozen=True)
class MonthlyUserStat:
    """New and cumulative users for one calendar month.

    ``cumulative_users`` is the running sum within the measured window only,
    not the lifetime user count. ``month_label`` carries no year; use
    ``year``/``month`` to tell apart equal labels.
    """

    month_label: str
    year: int
    month: int
    new_users_in_month: int
    cumulative_users: int


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything the dashboard renders, computed in one pass."""

    stats: DashboardStats
    recent_activity: list[ActivityEvent]
    monthly_series: list[MonthlyUserStat]
    generated_at: datetime


@dataclass(frozen=True)
class SectionOk(Generic[T]):
    """A dashboard section that was computed."""

    value: T
    ok: bool = True


@dataclass(frozen=True)
class SectionFailed:
    """A dashboard section that could not be computed; ``source`` is the failing input."""

    error_code: str
    message: str
    source: str | None = None
    ok: bool = False


SectionResult = SectionOk[T] | SectionFailed


@dataclass(frozen=True)
class PartialDashboardSnapshot:
    """Per-section results so one failing source only blanks the widgets that need it."""

    stats: SectionResult[DashboardStats]
    recent_activity: SectionResult[list[ActivityEvent]]
    monthly_series: SectionResult[list[MonthlyUserStat]]
    generated_at: datetime
