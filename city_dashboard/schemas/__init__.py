"""Pydantic response schemas for the API."""

from city_dashboard.schemas.dashboard import (
    DashboardResponse,
    DashboardStatsResponse,
    PartialDashboardResponse,
)
from city_dashboard.schemas.health import HealthResponse, ReadinessResponse
from city_dashboard.schemas.services import ServicesOverviewResponse

__all__ = [
    "DashboardResponse",
    "DashboardStatsResponse",
    "HealthResponse",
    "PartialDashboardResponse",
    "ReadinessResponse",
    "ServicesOverviewResponse",
]
