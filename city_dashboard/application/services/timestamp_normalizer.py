"""Timestamp normalization for heterogeneous stored createdAt/joinDate values.

Documents written by different clients over the years hold creation times as
Firestore timestamps, JavaScript Date.getTime() milliseconds, ISO strings,
or RFC 2822 dates copied from auth metadata.
Everything is coerced to a timezone-aware UTC datetime before any comparison.
Unparsable values become None; they never raise.
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any

from city_dashboard.shared.utils.datetime import ensure_utc, from_timestamp_ms_utc

logger = logging.getLogger(__name__)

# Conversion methods exposed by store-native timestamp types, in lookup order:
# google-cloud-firestore / proto-plus, protobuf Timestamp, JS-style wrappers.
_NATIVE_CONVERSIONS = ("to_datetime", "ToDatetime", "to_date")


def _from_native(raw: Any) -> datetime | None:
    for attr in _NATIVE_CONVERSIONS:
        convert = getattr(raw, attr, None)
        if callable(convert):
            try:
                value = convert()
            except (TypeError, ValueError, OverflowError) as e:
                logger.debug("Timestamp %s() failed on %r: %s", attr, raw, e)
                return None
            return ensure_utc(value) if isinstance(value, datetime) else None
    return None


def _from_string(raw: str) -> datetime | None:
    literal = raw.strip()
    if not literal:
        return None
    if literal.endswith(("Z", "z")):
        literal = literal[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(literal))
    except ValueError:
        pass
    # RFC 2822 / HTTP-date, e.g. auth metadata "Sat, 01 Mar 2025 08:30:15 GMT".
    try:
        return ensure_utc(parsedate_to_datetime(raw.strip()))
    except (TypeError, ValueError, IndexError, OverflowError):
        logger.debug("Unparsable timestamp string: %r", raw)
        return None


def normalize_timestamp(raw: Any) -> datetime | None:
    """Coerce a stored timestamp to a UTC datetime, or None if unusable.

    Rules in priority order:
        1. store-native timestamp objects are converted via their to-date method;
        2. datetimes pass through (naive ones are taken as UTC);
        3. numbers are epoch milliseconds;
        4. strings are parsed as ISO-8601 (trailing Z accepted) or RFC 2822;
        5. anything else, including None, yields None.
    """
    if raw is None:
        return None
    if any(callable(getattr(raw, attr, None)) for attr in _NATIVE_CONVERSIONS):
        return _from_native(raw)
    if isinstance(raw, datetime):
        return ensure_utc(raw)
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return from_timestamp_ms_utc(raw)
        except (OverflowError, OSError, ValueError):
            logger.debug("Epoch milliseconds out of range: %r", raw)
            return None
    if isinstance(raw, str):
        return _from_string(raw)
    return None


def normalize_or_now(raw: Any, now: datetime) -> tuple[datetime, bool]:
    """Normalize raw, falling back to ``now`` when it is unusable.

    Returns:
        (instant, defaulted) where defaulted is True if ``now`` was substituted.
    """
    value = normalize_timestamp(raw)
    if value is None:
        return now, True
    return value, False
