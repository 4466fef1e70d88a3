from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from studio_booking.api.schemas import (
    BookingCreatedSchema,
    BookingCreateSchema,
    BookingSchema,
    SlotSchema,
)
from studio_booking.application.exceptions import SlotConflictError, StoreError, ValidationError
from studio_booking.application.use_cases.booking import BookingUseCase
from studio_booking.application.use_cases.slots import SlotAvailabilityUseCase
from studio_booking.application.utils.date_parser import parse_iso_date
from studio_booking.wiring.dependencies import get_booking_use_case, get_slot_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/bookings", response_model=BookingCreatedSchema)
def create_booking(
    req: BookingCreateSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        result = uc.create(req.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except SlotConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except StoreError as e:
        logger.exception("Store failed while creating booking", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    return BookingCreatedSchema.from_entity(result.booking, warning=result.warning)


@router.get("/api/bookings", response_model=list[BookingSchema])
def list_bookings(
    date: str | None = Query(None, description="YYYY-MM-DD"),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    booking_date = None
    if date:
        booking_date = parse_iso_date(date)
        if booking_date is None:
            raise HTTPException(status_code=400, detail="date must be formatted YYYY-MM-DD")

    try:
        bookings = uc.list_bookings(date=booking_date)
    except StoreError as e:
        logger.exception("Store failed while listing bookings", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    return [BookingSchema.from_entity(b) for b in bookings]


@router.get("/api/slots", response_model=list[SlotSchema])
def list_slots(
    date: str = Query(..., description="YYYY-MM-DD"),
    timezone: str | None = Query(None, description="IANA zone used to decide which slots are past"),
    uc: SlotAvailabilityUseCase = Depends(get_slot_use_case),
):
    slot_date = parse_iso_date(date)
    if slot_date is None:
        raise HTTPException(status_code=400, detail="date must be formatted YYYY-MM-DD")

    try:
        slots = uc.get_slots(slot_date, timezone=timezone)
    except StoreError as e:
        logger.exception("Store failed while computing slots", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    return [SlotSchema.from_entity(s) for s in slots]
