"""Domain enumerations for the city dashboard.

Enums represent the closed sets of record and activity kinds the dashboard
aggregates over.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RecordType(_ValuesMixin, str, Enum):
    """Kind of ingested business record (one per source collection)."""

    SERVICE = "service"
    PROPERTY = "property"
    NEWS = "news"
    NOTIFICATION = "notification"
    EMERGENCY = "emergency"
    BUS_SCHEDULE = "bus_schedule"
    USER = "user"


class ActivityType(_ValuesMixin, str, Enum):
    """Kind of event shown in the merged recent-activity feed."""

    NEW_SERVICE = "NEW_SERVICE"
    NEW_PROPERTY = "NEW_PROPERTY"
    NEWS_PUBLISHED = "NEWS_PUBLISHED"
    EMERGENCY_REPORT = "EMERGENCY_REPORT"


class CountSource(_ValuesMixin, str, Enum):
    """Which fetch primitive produced a total.

    FAST_COUNT totals may span a nested collection hierarchy; SNAPSHOT totals
    are the length of one flat collection read.
    """

    FAST_COUNT = "fast_count"
    SNAPSHOT = "snapshot"


class Locale(_ValuesMixin, str, Enum):
    """Languages available for activity descriptions and month labels."""

    AR = "ar"
    EN = "en"
