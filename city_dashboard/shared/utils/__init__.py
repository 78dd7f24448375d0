"""Shared utilities: UTC datetime helpers."""

from city_dashboard.shared.utils.datetime import (
    add_months,
    days_ago,
    ensure_utc,
    from_timestamp_ms_utc,
    start_of_month,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "from_timestamp_ms_utc",
    "days_ago",
    "start_of_month",
    "add_months",
]
