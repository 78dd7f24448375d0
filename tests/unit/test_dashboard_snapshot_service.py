"""DashboardSnapshotService: concurrent fan-out, all-or-nothing and partial modes."""

import asyncio
from datetime import timedelta

import pytest

from city_dashboard.application.dtos.dashboard import SectionFailed, SectionOk
from city_dashboard.application.dtos.records import CountSelector, RawDocument
from city_dashboard.application.use_cases.dashboard import (
    DashboardOptions,
    DashboardSnapshotService,
)
from city_dashboard.domain.enums import ActivityType, Locale
from city_dashboard.domain.exceptions import AggregationFailure, FetchFailure


def _service(fetcher, now, **options) -> DashboardSnapshotService:
    return DashboardSnapshotService(fetcher, DashboardOptions(**options), clock=lambda: now)


async def test_empty_store_gives_zeros_and_six_empty_months(make_fetcher, now) -> None:
    snapshot = await _service(make_fetcher(), now).produce_snapshot()

    assert snapshot.stats.total_services == 0
    assert snapshot.stats.recent_news_and_notifications_count == 0
    assert snapshot.stats.bus_trips_count == 0
    assert snapshot.recent_activity == []
    assert len(snapshot.monthly_series) == 6
    assert all(m.cumulative_users == 0 for m in snapshot.monthly_series)
    assert snapshot.generated_at == now


async def test_every_source_is_fetched(make_fetcher, now) -> None:
    fetcher = make_fetcher()
    await _service(fetcher, now).produce_snapshot()

    assert set(fetcher.calls) == {
        "services", "properties", "news", "notifications", "emergencies",
        "buses_internal", "users",
        "items/**", "properties", "users", "news", "notifications",
        "recent:services", "recent:properties", "recent:news", "recent:emergencies",
    }
    assert len(fetcher.calls) == 16


async def test_snapshot_composes_all_sections(make_fetcher, now) -> None:
    fetcher = make_fetcher(
        collections={
            "services": [RawDocument("s1", {"createdAt": now - timedelta(days=1), "name": "Clinic"})],
            "users": [
                RawDocument("u1", {"createdAt": now - timedelta(days=3)}),
                RawDocument("u2", {"joinDate": "2025-02-03T10:00:00Z"}),
            ],
            "buses_internal": [
                RawDocument("b1", {"days": [{"driversCount": 12}, {"driversCount": "8"}]})
            ],
            "emergencies": [RawDocument("e1", {"createdAt": now - timedelta(days=2), "name": "Fire"})],
        },
        counts={"items/**": 42, "users": 2},
    )
    snapshot = await _service(fetcher, now, locale=Locale.EN).produce_snapshot()

    assert snapshot.stats.total_services == 42
    assert snapshot.stats.recent_services_count == 1
    assert snapshot.stats.total_users == 2
    assert snapshot.stats.recent_users_count == 2  # u2 has no createdAt, so fetch time is used
    assert snapshot.stats.bus_trips_count == 140
    assert snapshot.stats.emergency_reports_count == 1
    assert [e.type for e in snapshot.recent_activity] == [
        ActivityType.NEW_SERVICE,
        ActivityType.EMERGENCY_REPORT,
    ]
    assert [m.new_users_in_month for m in snapshot.monthly_series] == [0, 1, 0, 0, 0, 1]


async def test_feed_uses_configured_fetch_limits(make_fetcher, now) -> None:
    news = [
        RawDocument(f"n{i}", {"createdAt": now - timedelta(hours=i), "title": "t"})
        for i in range(6)
    ]
    fetcher = make_fetcher(collections={"news": news})
    snapshot = await _service(
        fetcher, now, per_source_fetch_limit=2, activity_output_limit=5
    ).produce_snapshot()
    assert [e.id for e in snapshot.recent_activity] == ["news-n0", "news-n1"]


async def test_fetch_failure_becomes_aggregation_failure(make_fetcher, now) -> None:
    fetcher = make_fetcher(failures={"items/**": "HTTP 500 from Firestore"})
    with pytest.raises(AggregationFailure) as exc_info:
        await _service(fetcher, now).produce_snapshot()

    exc = exc_info.value
    assert exc.error_code == "AGGREGATION_FAILURE"
    assert exc.details == {"source": "items/**"}
    assert isinstance(exc.__cause__, FetchFailure)


async def test_failure_cancels_in_flight_siblings(make_fetcher, now) -> None:
    cancelled = asyncio.Event()

    class SlowUsers(type(make_fetcher())):
        async def fetch_collection(self, name: str):
            if name == "users":
                try:
                    await asyncio.sleep(30)
                except asyncio.CancelledError:
                    cancelled.set()
                    raise
            return await super().fetch_collection(name)

        async def fetch_fast_count(self, selector: CountSelector) -> int:
            raise FetchFailure(str(selector), "boom")

    with pytest.raises(AggregationFailure):
        await asyncio.wait_for(_service(SlowUsers(), now).produce_snapshot(), timeout=5)
    assert cancelled.is_set()


async def test_unexpected_error_is_wrapped(make_fetcher, now) -> None:
    class Broken(type(make_fetcher())):
        async def fetch_ordered_limited(self, *args, **kwargs):
            raise RuntimeError("socket closed")

    with pytest.raises(AggregationFailure) as exc_info:
        await _service(Broken(), now).produce_snapshot()
    assert "socket closed" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, RuntimeError)


async def test_partial_snapshot_isolates_failing_section(make_fetcher, now) -> None:
    fetcher = make_fetcher(
        collections={"news": [RawDocument("n1", {"createdAt": now, "title": "t"})]},
        failures={"properties": "timeout"},
    )
    partial = await _service(fetcher, now).produce_partial_snapshot()

    assert isinstance(partial.stats, SectionFailed)
    assert partial.stats.ok is False
    assert partial.stats.error_code == "FETCH_FAILURE"
    assert partial.stats.source == "properties"
    assert isinstance(partial.recent_activity, SectionOk)
    assert [e.id for e in partial.recent_activity.value] == ["news-n1"]
    assert isinstance(partial.monthly_series, SectionOk)
    assert len(partial.monthly_series.value) == 6


async def test_partial_snapshot_all_ok(make_fetcher, now) -> None:
    partial = await _service(make_fetcher(), now).produce_partial_snapshot()
    assert partial.stats.ok and partial.recent_activity.ok and partial.monthly_series.ok
    assert partial.generated_at == now
