"""
UTC datetime utilities for consistent timezone handling.

Every instant the dashboard compares (record creation, window bounds, month
slots) is timezone-aware UTC. Use these helpers instead of datetime.now().
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def from_timestamp_ms_utc(timestamp_ms: int | float) -> datetime:
    """
    Create a UTC-aware datetime from a millisecond Unix timestamp.
    Common in JavaScript clients that store Date.getTime() values.

    Raises:
        OverflowError, OSError, ValueError: when the value is out of range
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


def days_ago(now: datetime, days: int) -> datetime:
    """Return the lower bound of a trailing window of ``days`` days ending at ``now``."""
    return now - timedelta(days=days)


def start_of_month(dt: datetime) -> datetime:
    """Return midnight UTC on the first day of ``dt``'s calendar month."""
    dt = ensure_utc(dt)
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def add_months(month_start: datetime, months: int) -> datetime:
    """
    Shift a first-of-month datetime by ``months`` calendar months (may be negative).

    Only valid for datetimes already on day 1, so no day clamping is needed.
    """
    index = month_start.year * 12 + (month_start.month - 1) + months
    year, month_zero = divmod(index, 12)
    return month_start.replace(year=year, month=month_zero + 1)
