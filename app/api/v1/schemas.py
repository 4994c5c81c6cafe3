from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.booking import BookingRecord, BookingStatus


class BookingRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    calendly_url: str | None = Field(None, alias="calendlyUrl")
    guest_emails: list[str] | None = Field(None, alias="guestEmails")
    notes: str | None = None


class BookingResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    uuid: str
    email: str
    status: BookingStatus
    created_at: datetime = Field(alias="createdAt")
    booked_for: datetime | None = Field(None, alias="bookedFor")

    @classmethod
    def from_record(cls, record: BookingRecord) -> "BookingResponseSchema":
        return cls(
            id=record.id,
            uuid=record.uuid,
            email=record.email,
            status=record.status,
            created_at=record.created_at,
            booked_for=record.booked_for,
        )
