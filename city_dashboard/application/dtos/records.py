"""DTOs for ingested records (no dependency on the document-store client).

Raw documents come out of a record fetcher untouched; the typed records below
are built from them by the snapshot service after timestamp normalization.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RawDocument:
    """One document as returned by the store: its ID and decoded fields."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CountSelector:
    """Target of a fast count.

    With ``all_descendants`` the count spans every sub-collection named
    ``collection`` under any parent (a collection group), so nested items are
    counted without materializing them.
    """

    collection: str
    all_descendants: bool = False

    def __str__(self) -> str:
        return f"{self.collection}/**" if self.all_descendants else self.collection


@dataclass(frozen=True)
class TimestampedRecord:
    """Any ingested entity with a normalized creation instant.

    ``created_at_defaulted`` is True when the stored createdAt was missing or
    unparsable and the fetch time was substituted. Such records count as
    "recent" in stats, so consumers can tell the substitution apart.
    """

    id: str
    created_at: datetime
    data: dict[str, Any] = field(default_factory=dict)
    created_at_defaulted: bool = False


@dataclass(frozen=True)
class BusDay:
    """One day of an internal bus schedule."""

    drivers_count: int
    date: str | None = None
    day: str | None = None


@dataclass(frozen=True)
class BusSchedule:
    """Internal bus schedule document: an ordered sequence of days."""

    id: str
    days: tuple[BusDay, ...] = ()


@dataclass(frozen=True)
class UserJoinRecord:
    """User account reduced to the two instants that can date its sign-up."""

    id: str
    created_at: datetime | None = None
    join_date: datetime | None = None

    @property
    def effective_join(self) -> datetime | None:
        """Join date when present, otherwise creation time."""
        return self.join_date or self.created_at
