"""Application services: pure, synchronous builders for the dashboard views."""

from city_dashboard.application.services.activity_feed_builder import ActivityFeedBuilder
from city_dashboard.application.services.monthly_series_builder import MonthlySeriesBuilder
from city_dashboard.application.services.stats_aggregator import StatsAggregator
from city_dashboard.application.services.timestamp_normalizer import (
    normalize_or_now,
    normalize_timestamp,
)

__all__ = [
    "ActivityFeedBuilder",
    "MonthlySeriesBuilder",
    "StatsAggregator",
    "normalize_or_now",
    "normalize_timestamp",
]
