from __future__ import annotations

import asyncio
import logging

from app.application.ports.booking_store import BookingStorePort
from app.application.ports.scheduling_automation import SchedulingAutomationPort
from app.domain.entities.booking import BookingStatus
from app.domain.entities.form_details import FormDetails
from app.domain.entities.selected_slot import SelectedSlot


class AutomateBookingUseCase:
    """
    Drive one booking attempt end to end.

    The record moves PENDING -> PROCESSING -> COMPLETED | FAILED and the browser
    session is released on every path. Store calls are blocking and run in a worker
    thread so other bookings keep moving on the event loop.
    """

    def __init__(self, store: BookingStorePort, automation: SchedulingAutomationPort) -> None:
        self._store = store
        self._automation = automation
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: int, scheduling_url: str, details: FormDetails) -> SelectedSlot:
        try:
            async with self._automation.open_session() as session:
                await asyncio.to_thread(self._store.update_status, booking_id, BookingStatus.PROCESSING)
                self._logger.info("Booking processing", extra={"booking_id": booking_id, "status": "PROCESSING"})

                await self._automation.navigate(session, scheduling_url)
                date_label = await self._automation.select_date(session)
                slot = await self._automation.select_time_slot(session, date_label)
                self._logger.info(
                    "Slot selected",
                    extra={"booking_id": booking_id, "step": "select_time_slot", "slot": slot.starts_at.isoformat()},
                )

                await self._automation.fill_form(session, details)
                await self._automation.submit(session)

                await asyncio.to_thread(self._store.update_booked_for, booking_id, slot.starts_at)
                await asyncio.to_thread(self._store.update_status, booking_id, BookingStatus.COMPLETED)
                self._logger.info("Booking completed", extra={"booking_id": booking_id, "status": "COMPLETED"})
                return slot
        except Exception as e:
            self._logger.exception("Booking automation failed", extra={"booking_id": booking_id, "error": str(e)})
            await asyncio.to_thread(self._mark_failed, booking_id)
            raise

    def _mark_failed(self, booking_id: int) -> None:
        record = self._store.find_by_id(booking_id)
        if record is None:
            self._logger.error("Cannot mark missing booking as failed", extra={"booking_id": booking_id})
            return
        if record.status.is_terminal:
            self._logger.warning(
                "Booking already finished, leaving status as is",
                extra={"booking_id": booking_id, "status": record.status.value},
            )
            return
        if record.status is BookingStatus.PENDING:
            self._store.update_status(booking_id, BookingStatus.PROCESSING)
        self._store.update_status(booking_id, BookingStatus.FAILED)
        self._logger.info("Booking failed", extra={"booking_id": booking_id, "status": "FAILED"})
