from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, TypeDecorator, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.application.exceptions import InvalidStatusTransitionError, RecordNotFoundError
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import BookingRecord, BookingStatus, as_utc

logger = logging.getLogger(__name__)

Base = declarative_base()


class UtcDateTime(TypeDecorator):
    """Stores timestamps as naive UTC and hands them back as aware UTC values on every backend."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return as_utc(value)


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, index=True)
    email = Column(String(320), nullable=False)
    status = Column(String(16), nullable=False, default=BookingStatus.PENDING.value)
    created_at = Column(UtcDateTime(), nullable=False)
    booked_for = Column(UtcDateTime(), nullable=True)

    def to_record(self) -> BookingRecord:
        return BookingRecord(
            id=self.id,
            uuid=self.uuid,
            email=self.email,
            status=BookingStatus(self.status),
            created_at=self.created_at,
            booked_for=self.booked_for,
        )


class SqlBookingStore(BookingStorePort):
    """Booking records in a relational database via SQLAlchemy; one short session per call."""

    def __init__(self, database_url: str, *, create_tables: bool = True) -> None:
        self._engine = create_engine(database_url, pool_pre_ping=True)
        self._session_factory = sessionmaker(autoflush=False, bind=self._engine)
        if create_tables:
            Base.metadata.create_all(self._engine)
        logger.info("SQL booking store ready", extra={"url": self._engine.url.render_as_string()})

    def create(self, email: str) -> BookingRecord:
        with self._session_factory() as db:
            row = BookingRow(
                uuid=str(uuid.uuid4()),
                email=email,
                status=BookingStatus.PENDING.value,
                created_at=datetime.now(timezone.utc),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            if row.id is None:
                raise RuntimeError("Failed to create booking - no ID returned")
            return row.to_record()

    def update_status(self, booking_id: int, status: BookingStatus) -> BookingRecord:
        with self._session_factory() as db:
            row = self._get(db, booking_id)
            current = BookingStatus(row.status)
            if not current.can_transition_to(status):
                raise InvalidStatusTransitionError(
                    f"Booking {booking_id} cannot move from {current.value} to {status.value}"
                )
            row.status = status.value
            db.commit()
            db.refresh(row)
            return row.to_record()

    def update_booked_for(self, booking_id: int, booked_for: datetime) -> BookingRecord:
        with self._session_factory() as db:
            row = self._get(db, booking_id)
            if row.status != BookingStatus.PROCESSING.value or row.booked_for is not None:
                raise InvalidStatusTransitionError(
                    f"Booking {booking_id} cannot take a booked time in status {row.status}"
                )
            row.booked_for = booked_for
            db.commit()
            db.refresh(row)
            return row.to_record()

    def find_by_id(self, booking_id: int) -> BookingRecord | None:
        with self._session_factory() as db:
            row = db.get(BookingRow, booking_id)
            return row.to_record() if row is not None else None

    def dispose(self) -> None:
        self._engine.dispose()

    @staticmethod
    def _get(db, booking_id: int) -> BookingRow:
        row = db.get(BookingRow, booking_id)
        if row is None:
            raise RecordNotFoundError(f"No booking found with id: {booking_id}")
        return row
