"""Merged recent-activity feed across services, properties, news and emergencies.

Each source arrives pre-sorted (newest first) and pre-limited by the fetcher.
Because the limit is applied before the activity window, a burst of one type
can push older in-window records of that type out of the feed; raise the
per-source fetch limit if that matters.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from city_dashboard.application.dtos.dashboard import ActivityEvent
from city_dashboard.application.dtos.records import RawDocument
from city_dashboard.application.services.localization import (
    describe_activity,
    resolve_locale,
)
from city_dashboard.application.services.timestamp_normalizer import (
    normalize_timestamp,
)
from city_dashboard.domain.enums import ActivityType, Locale, RecordType
from city_dashboard.domain.exceptions import ValidationException
from city_dashboard.shared.utils.datetime import days_ago

DEFAULT_ACTIVITY_WINDOW_DAYS = 7
DEFAULT_PER_SOURCE_FETCH_LIMIT = 10
DEFAULT_EMERGENCY_FETCH_LIMIT = 5
DEFAULT_OUTPUT_LIMIT = 5


@dataclass(frozen=True)
class ActivitySource:
    """How records of one type become feed events."""

    record_type: RecordType
    activity_type: ActivityType
    id_prefix: str
    label_field: str


# Concatenation order; equal timestamps keep this order after the sort.
ACTIVITY_SOURCES: tuple[ActivitySource, ...] = (
    ActivitySource(RecordType.SERVICE, ActivityType.NEW_SERVICE, "service", "name"),
    ActivitySource(RecordType.PROPERTY, ActivityType.NEW_PROPERTY, "property", "title"),
    ActivitySource(RecordType.NEWS, ActivityType.NEWS_PUBLISHED, "news", "title"),
    ActivitySource(RecordType.EMERGENCY, ActivityType.EMERGENCY_REPORT, "emergency", "name"),
)


def _label(data: dict, field: str) -> str:
    value = data.get(field)
    return "" if value is None else str(value)


class ActivityFeedBuilder:
    """Turns per-type recent documents into one time-ordered, capped feed."""

    def build(
        self,
        per_type_recent: Mapping[RecordType, Sequence[RawDocument]],
        now: datetime,
        activity_window_days: int = DEFAULT_ACTIVITY_WINDOW_DAYS,
        per_source_fetch_limit: int = DEFAULT_PER_SOURCE_FETCH_LIMIT,
        emergency_fetch_limit: int = DEFAULT_EMERGENCY_FETCH_LIMIT,
        output_limit: int = DEFAULT_OUTPUT_LIMIT,
        locale: str | Locale = Locale.AR,
    ) -> list[ActivityEvent]:
        """Build the feed.

        Documents without a usable createdAt are dropped (no "now" fallback
        here, an undated record must not jump to the top of the feed).
        Each source is capped at its fetch limit in input order, so a fetcher
        that over-delivers yields the same feed as one that honors the limit.
        """
        if activity_window_days <= 0:
            raise ValidationException(
                "activity_window_days must be positive", field="activity_window_days"
            )
        for name, limit in (
            ("per_source_fetch_limit", per_source_fetch_limit),
            ("emergency_fetch_limit", emergency_fetch_limit),
        ):
            if limit <= 0:
                raise ValidationException(f"{name} must be positive", field=name)
        if output_limit < 0:
            raise ValidationException(
                "output_limit must not be negative", field="output_limit"
            )
        resolved = resolve_locale(locale)
        since = days_ago(now, activity_window_days)

        events: list[ActivityEvent] = []
        for source in ACTIVITY_SOURCES:
            limit = (
                emergency_fetch_limit
                if source.record_type is RecordType.EMERGENCY
                else per_source_fetch_limit
            )
            for doc in list(per_type_recent.get(source.record_type, ()))[:limit]:
                created_at = normalize_timestamp(doc.data.get("createdAt"))
                if created_at is None or created_at < since:
                    continue
                events.append(
                    ActivityEvent(
                        id=f"{source.id_prefix}-{doc.id}",
                        type=source.activity_type,
                        description=describe_activity(
                            source.activity_type,
                            _label(doc.data, source.label_field),
                            resolved,
                        ),
                        time=created_at,
                    )
                )

        # sorted() is stable: ties keep source order, then fetch order.
        events = sorted(events, key=lambda event: event.time, reverse=True)
        return events[:output_limit]
