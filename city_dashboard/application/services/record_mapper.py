"""Map raw store documents to typed, normalized records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from city_dashboard.application.dtos.records import (
    BusDay,
    BusSchedule,
    RawDocument,
    TimestampedRecord,
    UserJoinRecord,
)
from city_dashboard.application.services.timestamp_normalizer import (
    normalize_or_now,
    normalize_timestamp,
)

logger = logging.getLogger(__name__)


def to_timestamped_records(
    docs: Iterable[RawDocument], now: datetime
) -> list[TimestampedRecord]:
    """Normalize createdAt on every document, substituting ``now`` when unusable."""
    records: list[TimestampedRecord] = []
    defaulted = 0
    for doc in docs:
        created_at, was_defaulted = normalize_or_now(doc.data.get("createdAt"), now)
        defaulted += was_defaulted
        records.append(
            TimestampedRecord(
                id=doc.id,
                created_at=created_at,
                data=dict(doc.data),
                created_at_defaulted=was_defaulted,
            )
        )
    if defaulted:
        logger.debug("createdAt defaulted to fetch time on %d of %d documents", defaulted, len(records))
    return records


def _drivers_count(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return 0
    return 0


def to_bus_schedule(doc: RawDocument) -> BusSchedule:
    """Build a BusSchedule; malformed days contribute zero drivers."""
    raw_days = doc.data.get("days")
    days: list[BusDay] = []
    if isinstance(raw_days, list):
        for raw_day in raw_days:
            if not isinstance(raw_day, dict):
                continue
            days.append(
                BusDay(
                    drivers_count=_drivers_count(raw_day.get("driversCount")),
                    date=raw_day.get("date"),
                    day=raw_day.get("day"),
                )
            )
    return BusSchedule(id=doc.id, days=tuple(days))


def to_user_join_record(doc: RawDocument) -> UserJoinRecord:
    """Keep both dating fields nullable; the series builder decides what to drop."""
    return UserJoinRecord(
        id=doc.id,
        created_at=normalize_timestamp(doc.data.get("createdAt")),
        join_date=normalize_timestamp(doc.data.get("joinDate")),
    )
