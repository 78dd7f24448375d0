"""Dashboard counters: totals and rolling-window "recent" counts per record type."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

from city_dashboard.application.dtos.dashboard import DashboardStats
from city_dashboard.application.dtos.records import BusSchedule, TimestampedRecord
from city_dashboard.domain.enums import CountSource, RecordType
from city_dashboard.domain.exceptions import ValidationException
from city_dashboard.shared.utils.datetime import days_ago

DEFAULT_RECENT_WINDOW_DAYS = 30

# Bus schedules list drivers per day; trips are extrapolated to one week.
BUS_TRIPS_WEEK_FACTOR = 7

# Totals that must come from a fast count: the services total spans the nested
# items collections, which a flat snapshot of the categories would undercount.
FAST_COUNT_TOTALS: tuple[RecordType, ...] = (
    RecordType.SERVICE,
    RecordType.PROPERTY,
    RecordType.USER,
    RecordType.NEWS,
    RecordType.NOTIFICATION,
)


def count_recent(records: Sequence[TimestampedRecord], since: datetime) -> int:
    """Count records created at or after ``since``."""
    return sum(1 for record in records if record.created_at >= since)


def estimate_bus_trips(schedules: Sequence[BusSchedule]) -> int:
    """Weekly trip volume heuristic: drivers per day summed over all schedules, times seven."""
    drivers = sum(day.drivers_count for schedule in schedules for day in schedule.days)
    return drivers * BUS_TRIPS_WEEK_FACTOR


class StatsAggregator:
    """Builds DashboardStats from flat snapshots plus fast counts. Pure and synchronous."""

    def aggregate(
        self,
        records: Mapping[RecordType, Sequence[TimestampedRecord]],
        fast_counts: Mapping[RecordType, int],
        now: datetime,
        recent_window_days: int = DEFAULT_RECENT_WINDOW_DAYS,
        bus_schedules: Sequence[BusSchedule] = (),
    ) -> DashboardStats:
        """Compute the stats snapshot.

        Args:
            records: Normalized snapshots per type; missing types count as empty.
            fast_counts: Server-side totals per type; missing types count as 0.
            now: Reference instant for the recent window.
            recent_window_days: Trailing window for "recent" counts.
            bus_schedules: Internal bus schedules for the trip estimate.

        Raises:
            ValidationException: If recent_window_days is not positive.
        """
        if recent_window_days <= 0:
            raise ValidationException(
                "recent_window_days must be positive", field="recent_window_days"
            )
        since = days_ago(now, recent_window_days)

        def recent(record_type: RecordType) -> int:
            return count_recent(records.get(record_type, ()), since)

        def total(record_type: RecordType) -> int:
            return int(fast_counts.get(record_type, 0))

        total_sources = {t.value: CountSource.FAST_COUNT for t in FAST_COUNT_TOTALS}
        total_sources[RecordType.EMERGENCY.value] = CountSource.SNAPSHOT

        return DashboardStats(
            total_services=total(RecordType.SERVICE),
            total_properties=total(RecordType.PROPERTY),
            total_users=total(RecordType.USER),
            total_news_and_notifications=total(RecordType.NEWS)
            + total(RecordType.NOTIFICATION),
            recent_services_count=recent(RecordType.SERVICE),
            recent_properties_count=recent(RecordType.PROPERTY),
            recent_users_count=recent(RecordType.USER),
            recent_news_and_notifications_count=recent(RecordType.NEWS)
            + recent(RecordType.NOTIFICATION),
            emergency_reports_count=len(records.get(RecordType.EMERGENCY, ())),
            bus_trips_count=estimate_bus_trips(bus_schedules),
            recent_window_days=recent_window_days,
            bus_trips_estimated=True,
            total_sources=total_sources,
        )
