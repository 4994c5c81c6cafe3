from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from app.application.exceptions import InvalidStatusTransitionError, RecordNotFoundError
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import BookingRecord, BookingStatus, as_utc


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._records: dict[int, BookingRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, email: str) -> BookingRecord:
        with self._lock:
            record = BookingRecord(
                id=self._next_id,
                uuid=str(uuid.uuid4()),
                email=email,
                status=BookingStatus.PENDING,
                created_at=datetime.now(timezone.utc),
            )
            self._records[record.id] = record
            self._next_id += 1
            return record

    def update_status(self, booking_id: int, status: BookingStatus) -> BookingRecord:
        with self._lock:
            current = self._get(booking_id)
            if not current.status.can_transition_to(status):
                raise InvalidStatusTransitionError(
                    f"Booking {booking_id} cannot move from {current.status.value} to {status.value}"
                )
            updated = replace(current, status=status)
            self._records[booking_id] = updated
            return updated

    def update_booked_for(self, booking_id: int, booked_for: datetime) -> BookingRecord:
        with self._lock:
            current = self._get(booking_id)
            if current.status is not BookingStatus.PROCESSING or current.booked_for is not None:
                raise InvalidStatusTransitionError(
                    f"Booking {booking_id} cannot take a booked time in status {current.status.value}"
                )
            updated = replace(current, booked_for=as_utc(booked_for))
            self._records[booking_id] = updated
            return updated

    def find_by_id(self, booking_id: int) -> BookingRecord | None:
        return self._records.get(booking_id)

    def _get(self, booking_id: int) -> BookingRecord:
        record = self._records.get(booking_id)
        if record is None:
            raise RecordNotFoundError(f"No booking found with id: {booking_id}")
        return record
