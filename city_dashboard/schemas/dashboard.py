"""Dashboard API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class DashboardStatsResponse(BaseModel):
    """Aggregate counters; totals may come from a fast count or a snapshot (see total_sources)."""

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
    bus_trips_estimated: bool = Field(
        default=True,
        description="Bus trips are a weekly extrapolation (drivers per day x 7), not measured trips.",
    )
    recent_window_days: int
    total_sources: dict[str, str] = Field(
        default_factory=dict,
        description="Per total: 'fast_count' (server-side, may span nested items) or 'snapshot'.",
    )


class ActivityItem(BaseModel):
    """One entry of the recent-activity feed."""

    id: str
    type: str
    description: str
    time: datetime


class MonthlyUsersItem(BaseModel):
    """New and cumulative users for one month of the series."""

    month: str = Field(..., description="Localized month name (no year)")
    year: int
    month_number: int
    new_users: int
    cumulative_users: int = Field(
        ..., description="Running total within the series window, not lifetime users"
    )


class DashboardResponse(BaseModel):
    """Full dashboard snapshot."""

    stats: DashboardStatsResponse
    recent_activity: list[ActivityItem] = Field(default_factory=list)
    monthly_users: list[MonthlyUsersItem] = Field(default_factory=list)
    generated_at: datetime


class SectionError(BaseModel):
    """Why a dashboard section could not be computed."""

    error: str
    message: str
    source: str | None = None


class StatsSection(BaseModel):
    ok: Literal[True] = True
    value: DashboardStatsResponse


class ActivitySection(BaseModel):
    ok: Literal[True] = True
    value: list[ActivityItem]


class MonthlyUsersSection(BaseModel):
    ok: Literal[True] = True
    value: list[MonthlyUsersItem]


class FailedSection(BaseModel):
    ok: Literal[False] = False
    error: SectionError


class PartialDashboardResponse(BaseModel):
    """Dashboard snapshot where each section succeeds or fails on its own."""

    stats: StatsSection | FailedSection
    recent_activity: ActivitySection | FailedSection
    monthly_users: MonthlyUsersSection | FailedSection
    generated_at: datetime
