"""Dashboard API: snapshot (all-or-nothing), partial snapshot, services overview."""

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from city_dashboard.api.v1.dependencies import (
    get_dashboard_snapshot_service,
    get_services_overview_service,
)
from city_dashboard.application.dtos.dashboard import (
    ActivityEvent,
    DashboardStats,
    MonthlyUserStat,
    SectionFailed,
    SectionResult,
)
from city_dashboard.application.use_cases.dashboard import DashboardSnapshotService
from city_dashboard.application.use_cases.services_overview import ServicesOverviewService
from city_dashboard.core.config import Settings, get_settings
from city_dashboard.schemas.dashboard import (
    ActivityItem,
    ActivitySection,
    DashboardResponse,
    DashboardStatsResponse,
    FailedSection,
    MonthlyUsersItem,
    MonthlyUsersSection,
    PartialDashboardResponse,
    SectionError,
    StatsSection,
)
from city_dashboard.schemas.services import (
    ServiceCategoryResponse,
    ServiceItem,
    ServicesOverviewResponse,
    SubCategoryItem,
)

router = APIRouter()


def _stats(stats: DashboardStats) -> DashboardStatsResponse:
    return DashboardStatsResponse(
        total_services=stats.total_services,
        total_properties=stats.total_properties,
        total_users=stats.total_users,
        total_news_and_notifications=stats.total_news_and_notifications,
        recent_services_count=stats.recent_services_count,
        recent_properties_count=stats.recent_properties_count,
        recent_users_count=stats.recent_users_count,
        recent_news_and_notifications_count=stats.recent_news_and_notifications_count,
        emergency_reports_count=stats.emergency_reports_count,
        bus_trips_count=stats.bus_trips_count,
        bus_trips_estimated=stats.bus_trips_estimated,
        recent_window_days=stats.recent_window_days,
        total_sources={key: source.value for key, source in stats.total_sources.items()},
    )


def _activity(events: list[ActivityEvent]) -> list[ActivityItem]:
    return [
        ActivityItem(id=e.id, type=e.type.value, description=e.description, time=e.time)
        for e in events
    ]


def _monthly(series: list[MonthlyUserStat]) -> list[MonthlyUsersItem]:
    return [
        MonthlyUsersItem(
            month=m.month_label,
            year=m.year,
            month_number=m.month,
            new_users=m.new_users_in_month,
            cumulative_users=m.cumulative_users,
        )
        for m in series
    ]


def _failed(section: SectionFailed) -> FailedSection:
    return FailedSection(
        error=SectionError(error=section.error_code, message=section.message, source=section.source)
    )


def _section(
    result: SectionResult, convert: Callable[[Any], Any], wrapper: type[BaseModel]
) -> BaseModel:
    if isinstance(result, SectionFailed):
        return _failed(result)
    return wrapper(value=convert(result.value))


@router.get(
    "",
    response_model=DashboardResponse,
    responses={502: {"description": "A data source failed; no partial snapshot is returned"}},
)
async def get_dashboard(
    service: Annotated[DashboardSnapshotService, Depends(get_dashboard_snapshot_service)],
) -> DashboardResponse:
    """Return stats, the recent-activity feed, and the monthly users series.

    An empty store yields zeros and empty lists (200); a failing source yields
    502 AGGREGATION_FAILURE.
    """
    snapshot = await service.produce_snapshot()
    return DashboardResponse(
        stats=_stats(snapshot.stats),
        recent_activity=_activity(snapshot.recent_activity),
        monthly_users=_monthly(snapshot.monthly_series),
        generated_at=snapshot.generated_at,
    )


@router.get("/partial", response_model=PartialDashboardResponse)
async def get_partial_dashboard(
    service: Annotated[DashboardSnapshotService, Depends(get_dashboard_snapshot_service)],
) -> PartialDashboardResponse:
    """Return the dashboard with each section computed independently."""
    partial = await service.produce_partial_snapshot()
    return PartialDashboardResponse(
        stats=_section(partial.stats, _stats, StatsSection),
        recent_activity=_section(partial.recent_activity, _activity, ActivitySection),
        monthly_users=_section(partial.monthly_series, _monthly, MonthlyUsersSection),
        generated_at=partial.generated_at,
    )


@router.get("/services-overview", response_model=ServicesOverviewResponse)
async def get_services_overview(
    service: Annotated[ServicesOverviewService, Depends(get_services_overview_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    locale: Annotated[str | None, Query(description="ar or en")] = None,
) -> ServicesOverviewResponse:
    """Return services categories with their items grouped by sub-category."""
    code = locale or settings.dashboard_locale
    categories = await service.get_services_overview(locale=code)
    return ServicesOverviewResponse(
        locale=code,
        categories=[
            ServiceCategoryResponse(
                category_id=c.category_id,
                category_label=c.category_label,
                services_count=c.services_count,
                sub_categories=[
                    SubCategoryItem(
                        sub_category=g.sub_category,
                        services=[
                            ServiceItem(id=r.id, created_at=r.created_at, data=r.data)
                            for r in g.services
                        ],
                    )
                    for g in c.sub_categories
                ],
            )
            for c in categories
        ],
    )
