from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.COMPLETED, BookingStatus.FAILED)

    def can_transition_to(self, target: "BookingStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.PROCESSING}),
    BookingStatus.PROCESSING: frozenset({BookingStatus.COMPLETED, BookingStatus.FAILED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.FAILED: frozenset(),
}


@dataclass(frozen=True)
class BookingRecord:
    id: int
    uuid: str
    email: str
    status: BookingStatus
    created_at: datetime
    booked_for: datetime | None = None  # only set on a captured slot


def as_utc(value: datetime) -> datetime:
    """Normalise a timestamp to UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
