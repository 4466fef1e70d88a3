from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from studio_booking.application.utils.date_parser import format_iso_date, format_slot_time
from studio_booking.domain.entities.booking import Booking, BookingStatus
from studio_booking.domain.entities.slot import Slot, SlotState


class BookingCreateSchema(BaseModel):
    # Any: the use case validates every field and reports the first bad one as a 400.
    name: Any = None
    email: Any = None
    phone: Any = None
    notes: Any = None
    service: Any = None
    price: Any = None
    date: Any = None
    time: Any = None
    timezone: Any = None


class BookingUpdateSchema(BaseModel):
    id: str | None = None
    status: str | None = None
    notes: str | None = None


class BookingSchema(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    notes: str | None = None
    service: str
    price: float = 0.0
    date: str
    time: str
    timezone: str | None = None
    status: BookingStatus = BookingStatus.pending
    created_at: datetime

    @classmethod
    def from_entity(cls, booking: Booking, **extra) -> "BookingSchema":
        return cls(
            id=booking.id,
            name=booking.name,
            email=booking.email,
            phone=booking.phone,
            notes=booking.notes,
            service=booking.service,
            price=booking.price,
            date=format_iso_date(booking.date),
            time=format_slot_time(booking.time),
            timezone=booking.timezone,
            status=booking.status,
            created_at=booking.created_at,
            **extra,
        )


class BookingCreatedSchema(BookingSchema):
    warning: str | None = None


class SlotSchema(BaseModel):
    date: str
    time: str
    state: SlotState

    @classmethod
    def from_entity(cls, slot: Slot) -> "SlotSchema":
        return cls(date=format_iso_date(slot.date), time=format_slot_time(slot.time), state=slot.state)


class DeleteResponseSchema(BaseModel):
    ok: bool = True
