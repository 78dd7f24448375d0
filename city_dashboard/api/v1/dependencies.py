"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the record fetcher and the dashboard use
cases. Routes depend only on these dependencies, not on infra directly;
tests override get_record_fetcher to run without Firestore.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from city_dashboard.application.interfaces.record_fetcher import IRecordFetcher
from city_dashboard.application.use_cases.dashboard import (
    DashboardOptions,
    DashboardSnapshotService,
)
from city_dashboard.application.use_cases.services_overview import ServicesOverviewService
from city_dashboard.core.config import Settings, get_settings
from city_dashboard.domain.enums import Locale
from city_dashboard.domain.exceptions import DataSourceNotConfiguredException
from city_dashboard.infrastructure.firebase.client import get_firestore_client
from city_dashboard.infrastructure.firebase.repositories.record_fetcher_firestore import (
    FirestoreRecordFetcher,
)


def get_record_fetcher() -> IRecordFetcher:
    """Firestore record fetcher; 503 (DATA_SOURCE_NOT_CONFIGURED) without credentials."""
    client = get_firestore_client()
    if client is None:
        raise DataSourceNotConfiguredException()
    return FirestoreRecordFetcher(client)


def get_dashboard_options(
    settings: Annotated[Settings, Depends(get_settings)],
) -> DashboardOptions:
    """Windows and limits from settings."""
    return DashboardOptions(
        recent_window_days=settings.recent_window_days,
        activity_window_days=settings.activity_window_days,
        per_source_fetch_limit=settings.activity_per_source_fetch_limit,
        emergency_fetch_limit=settings.activity_emergency_fetch_limit,
        activity_output_limit=settings.activity_output_limit,
        months_back=settings.monthly_series_months,
        locale=Locale(settings.dashboard_locale),
    )


def get_dashboard_snapshot_service(
    fetcher: Annotated[IRecordFetcher, Depends(get_record_fetcher)],
    options: Annotated[DashboardOptions, Depends(get_dashboard_options)],
) -> DashboardSnapshotService:
    """Dashboard snapshot use case."""
    return DashboardSnapshotService(fetcher, options)


def get_services_overview_service(
    fetcher: Annotated[IRecordFetcher, Depends(get_record_fetcher)],
) -> ServicesOverviewService:
    """Services guide overview use case."""
    return ServicesOverviewService(fetcher)
