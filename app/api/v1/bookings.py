from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import BookingRequestSchema, BookingResponseSchema
from app.application.exceptions import RunnerSaturatedError
from app.application.ports.booking_store import BookingStorePort
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.wiring.dependencies import get_booking_store, get_create_booking_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/bookings", status_code=201, response_model=BookingResponseSchema)
async def create_booking(
    req: BookingRequestSchema,
    uc: CreateBookingUseCase = Depends(get_create_booking_use_case),
):
    if not req.email or not req.calendly_url:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: email and calendlyUrl are required",
        )

    try:
        booking = await uc.execute(
            email=req.email,
            scheduling_url=req.calendly_url,
            guest_emails=req.guest_emails,
            notes=req.notes,
        )
    except RunnerSaturatedError as e:
        logger.warning("Booking rejected, runner saturated", extra={"error": str(e)})
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Error creating booking", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to create booking")

    return BookingResponseSchema.from_record(booking)


@router.get("/bookings/{booking_id}", response_model=BookingResponseSchema)
def get_booking(
    booking_id: int,
    store: BookingStorePort = Depends(get_booking_store),
):
    booking = store.find_by_id(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail=f"No booking found with id: {booking_id}")
    return BookingResponseSchema.from_record(booking)
