from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from app.application.booking_runner import BookingJob, BookingRunner
from app.application.exceptions import RunnerSaturatedError
from app.application.ports.booking_store import BookingStorePort
from app.application.utils.form_details import build_form_details
from app.domain.entities.booking import BookingRecord, BookingStatus


class CreateBookingUseCase:
    def __init__(self, store: BookingStorePort, runner: BookingRunner) -> None:
        self._store = store
        self._runner = runner
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        email: str,
        scheduling_url: str,
        guest_emails: Iterable[str] | None = None,
        notes: str | None = None,
    ) -> BookingRecord:
        """Create a PENDING record and queue its automation. Returns without waiting for the browser."""
        if not self._runner.has_capacity():
            raise RunnerSaturatedError("Too many bookings in progress, try again later")

        details = build_form_details(email, guest_emails, notes)
        booking = await asyncio.to_thread(self._store.create, email)
        try:
            self._runner.submit(BookingJob(booking_id=booking.id, scheduling_url=scheduling_url, details=details))
        except RunnerSaturatedError:
            # The queue filled up while the record was being written.
            self._logger.warning("Booking rejected after creation", extra={"booking_id": booking.id})
            await asyncio.to_thread(self._reject, booking.id)
            raise
        self._logger.info("Booking created", extra={"booking_id": booking.id, "status": booking.status.value})
        return booking

    def _reject(self, booking_id: int) -> None:
        self._store.update_status(booking_id, BookingStatus.PROCESSING)
        self._store.update_status(booking_id, BookingStatus.FAILED)
