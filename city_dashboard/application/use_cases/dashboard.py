"""Dashboard use case: fan out every fetch, fan in, compose one snapshot."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

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
from city_dashboard.application.dtos.records import CountSelector
from city_dashboard.application.services.activity_feed_builder import (
    DEFAULT_ACTIVITY_WINDOW_DAYS,
    DEFAULT_EMERGENCY_FETCH_LIMIT,
    DEFAULT_OUTPUT_LIMIT,
    DEFAULT_PER_SOURCE_FETCH_LIMIT,
    ActivityFeedBuilder,
)
from city_dashboard.application.services.monthly_series_builder import (
    DEFAULT_MONTHS_BACK,
    MonthlySeriesBuilder,
)
from city_dashboard.application.services.record_mapper import (
    to_bus_schedule,
    to_timestamped_records,
    to_user_join_record,
)
from city_dashboard.application.services.stats_aggregator import (
    DEFAULT_RECENT_WINDOW_DAYS,
    StatsAggregator,
)
from city_dashboard.core.constants import (
    COLLECTION_EMERGENCIES,
    COLLECTION_NEWS,
    COLLECTION_NOTIFICATIONS,
    COLLECTION_PROPERTIES,
    COLLECTION_SERVICES,
    COLLECTION_USERS,
    FIELD_CREATED_AT,
    RECORD_COLLECTIONS,
    SUBCOLLECTION_SERVICE_ITEMS,
)
from city_dashboard.domain.enums import Locale, RecordType
from city_dashboard.domain.exceptions import (
    AggregationFailure,
    DashboardException,
    FetchFailure,
)
from city_dashboard.shared.telemetry.tracing import add_span_attributes, traced
from city_dashboard.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from city_dashboard.application.interfaces.record_fetcher import IRecordFetcher

logger = logging.getLogger(__name__)

# Fetch keys. Each is one independent unit of work in the fan-out.
_SNAPSHOT_TYPES: tuple[RecordType, ...] = tuple(RECORD_COLLECTIONS)
_COUNT_SELECTORS: dict[RecordType, CountSelector] = {
    RecordType.SERVICE: CountSelector(SUBCOLLECTION_SERVICE_ITEMS, all_descendants=True),
    RecordType.PROPERTY: CountSelector(COLLECTION_PROPERTIES),
    RecordType.USER: CountSelector(COLLECTION_USERS),
    RecordType.NEWS: CountSelector(COLLECTION_NEWS),
    RecordType.NOTIFICATION: CountSelector(COLLECTION_NOTIFICATIONS),
}
_FEED_COLLECTIONS: dict[RecordType, str] = {
    RecordType.SERVICE: COLLECTION_SERVICES,
    RecordType.PROPERTY: COLLECTION_PROPERTIES,
    RecordType.NEWS: COLLECTION_NEWS,
    RecordType.EMERGENCY: COLLECTION_EMERGENCIES,
}


def _snapshot_key(record_type: RecordType) -> str:
    return f"snapshot:{RECORD_COLLECTIONS[record_type]}"


def _count_key(record_type: RecordType) -> str:
    return f"count:{_COUNT_SELECTORS[record_type]}"


def _feed_key(record_type: RecordType) -> str:
    return f"recent:{_FEED_COLLECTIONS[record_type]}"


_STATS_KEYS = frozenset(
    [_snapshot_key(t) for t in _SNAPSHOT_TYPES] + [_count_key(t) for t in _COUNT_SELECTORS]
)
_ACTIVITY_KEYS = frozenset(_feed_key(t) for t in _FEED_COLLECTIONS)
_MONTHLY_KEYS = frozenset([_snapshot_key(RecordType.USER)])


@dataclass(frozen=True)
class DashboardOptions:
    """Windows and limits for one snapshot. The two windows are independent."""

    recent_window_days: int = DEFAULT_RECENT_WINDOW_DAYS
    activity_window_days: int = DEFAULT_ACTIVITY_WINDOW_DAYS
    per_source_fetch_limit: int = DEFAULT_PER_SOURCE_FETCH_LIMIT
    emergency_fetch_limit: int = DEFAULT_EMERGENCY_FETCH_LIMIT
    activity_output_limit: int = DEFAULT_OUTPUT_LIMIT
    months_back: int = DEFAULT_MONTHS_BACK
    locale: Locale = Locale.AR


async def fan_out(jobs: dict[str, Awaitable[Any]]) -> dict[str, Any]:
    """Run every job concurrently and wait for all of them.

    On the first failure the remaining jobs are cancelled and awaited, then
    the failure is re-raised. Caller cancellation reaches every job through
    gather.
    """
    tasks = {key: asyncio.ensure_future(job) for key, job in jobs.items()}
    try:
        await asyncio.gather(*tasks.values())
    except Exception:
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        raise
    return {key: task.result() for key, task in tasks.items()}


async def _fan_out_settled(jobs: dict[str, Awaitable[Any]]) -> dict[str, Any]:
    """Run every job concurrently; failed jobs map to their exception."""
    keys = list(jobs)
    results = await asyncio.gather(*jobs.values(), return_exceptions=True)
    for key, result in zip(keys, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
    return dict(zip(keys, results))


def _failure_source(exc: BaseException, key: str | None = None) -> str | None:
    if isinstance(exc, FetchFailure):
        return exc.source
    return key


class DashboardSnapshotService:
    """Produce the dashboard read-model from a record fetcher.

    The three builders are pure; all I/O happens in one concurrent fan-out.
    """

    def __init__(
        self,
        fetcher: "IRecordFetcher",
        options: DashboardOptions | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.fetcher = fetcher
        self.options = options or DashboardOptions()
        self.clock = clock
        self.stats_aggregator = StatsAggregator()
        self.activity_builder = ActivityFeedBuilder()
        self.monthly_builder = MonthlySeriesBuilder()

    def _jobs(self) -> dict[str, Awaitable[Any]]:
        jobs: dict[str, Awaitable[Any]] = {}
        for record_type in _SNAPSHOT_TYPES:
            jobs[_snapshot_key(record_type)] = self.fetcher.fetch_collection(
                RECORD_COLLECTIONS[record_type]
            )
        for record_type, selector in _COUNT_SELECTORS.items():
            jobs[_count_key(record_type)] = self.fetcher.fetch_fast_count(selector)
        for record_type, collection in _FEED_COLLECTIONS.items():
            limit = (
                self.options.emergency_fetch_limit
                if record_type is RecordType.EMERGENCY
                else self.options.per_source_fetch_limit
            )
            jobs[_feed_key(record_type)] = self.fetcher.fetch_ordered_limited(
                collection, FIELD_CREATED_AT, "DESCENDING", limit
            )
        return jobs

    def _build_stats(self, results: dict[str, Any], now: datetime) -> DashboardStats:
        records = {
            record_type: to_timestamped_records(results[_snapshot_key(record_type)], now)
            for record_type in _SNAPSHOT_TYPES
            if record_type is not RecordType.BUS_SCHEDULE
        }
        fast_counts = {
            record_type: results[_count_key(record_type)] for record_type in _COUNT_SELECTORS
        }
        schedules = [
            to_bus_schedule(doc) for doc in results[_snapshot_key(RecordType.BUS_SCHEDULE)]
        ]
        return self.stats_aggregator.aggregate(
            records,
            fast_counts,
            now,
            recent_window_days=self.options.recent_window_days,
            bus_schedules=schedules,
        )

    def _build_activity(self, results: dict[str, Any], now: datetime) -> list[ActivityEvent]:
        per_type = {record_type: results[_feed_key(record_type)] for record_type in _FEED_COLLECTIONS}
        return self.activity_builder.build(
            per_type,
            now,
            activity_window_days=self.options.activity_window_days,
            per_source_fetch_limit=self.options.per_source_fetch_limit,
            emergency_fetch_limit=self.options.emergency_fetch_limit,
            output_limit=self.options.activity_output_limit,
            locale=self.options.locale,
        )

    def _build_monthly(self, results: dict[str, Any], now: datetime) -> list[MonthlyUserStat]:
        users = [to_user_join_record(doc) for doc in results[_snapshot_key(RecordType.USER)]]
        return self.monthly_builder.build(
            users,
            now,
            months_back=self.options.months_back,
            locale=self.options.locale,
        )

    @traced("dashboard.produce_snapshot")
    async def produce_snapshot(self) -> DashboardSnapshot:
        """Fetch everything concurrently and compose the snapshot.

        Raises:
            AggregationFailure: If any fetch fails. No partial result is returned.
        """
        jobs = self._jobs()
        try:
            results = await fan_out(jobs)
        except FetchFailure as e:
            logger.warning("Dashboard snapshot aborted: %s", e.message)
            raise AggregationFailure(source=e.source, reason=e.message) from e
        except DashboardException as e:
            logger.warning("Dashboard snapshot aborted: %s", e.message)
            raise AggregationFailure(reason=e.message) from e
        except Exception as e:
            logger.exception("Dashboard snapshot aborted by unexpected error")
            raise AggregationFailure(reason=str(e)) from e

        now = self.clock()
        snapshot = DashboardSnapshot(
            stats=self._build_stats(results, now),
            recent_activity=self._build_activity(results, now),
            monthly_series=self._build_monthly(results, now),
            generated_at=now,
        )
        add_span_attributes(
            fetch_count=len(jobs),
            activity_count=len(snapshot.recent_activity),
        )
        return snapshot

    @traced("dashboard.produce_partial_snapshot")
    async def produce_partial_snapshot(self) -> PartialDashboardSnapshot:
        """Like produce_snapshot, but a failing source only fails the sections that read it."""
        results = await _fan_out_settled(self._jobs())
        now = self.clock()

        def section(keys: Iterable[str], build: Callable[[dict[str, Any], datetime], Any]) -> SectionResult:
            for key in sorted(keys):
                outcome = results[key]
                if isinstance(outcome, BaseException):
                    logger.warning("Dashboard source %s failed: %s", key, outcome)
                    error_code = (
                        outcome.error_code
                        if isinstance(outcome, DashboardException)
                        else "FETCH_FAILURE"
                    )
                    return SectionFailed(
                        error_code=error_code,
                        message=str(outcome),
                        source=_failure_source(outcome, key),
                    )
            return SectionOk(build(results, now))

        return PartialDashboardSnapshot(
            stats=section(_STATS_KEYS, self._build_stats),
            recent_activity=section(_ACTIVITY_KEYS, self._build_activity),
            monthly_series=section(_MONTHLY_KEYS, self._build_monthly),
            generated_at=now,
        )
