from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.booking import BookingRecord, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def create(self, email: str) -> BookingRecord:
        """Insert a PENDING record with a fresh uuid and creation timestamp."""
        raise NotImplementedError

    @abstractmethod
    def update_status(self, booking_id: int, status: BookingStatus) -> BookingRecord:
        """
        Move a record to ``status``.
        Raises RecordNotFoundError for unknown ids and InvalidStatusTransitionError
        for transitions outside PENDING -> PROCESSING -> COMPLETED | FAILED.
        """
        raise NotImplementedError

    @abstractmethod
    def update_booked_for(self, booking_id: int, booked_for: datetime) -> BookingRecord:
        """Record the captured slot time. Allowed once, while the record is PROCESSING."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, booking_id: int) -> BookingRecord | None:
        raise NotImplementedError
