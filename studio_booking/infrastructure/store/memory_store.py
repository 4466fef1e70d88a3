from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, time, timezone
from typing import Any

from studio_booking.application.exceptions import SlotConflictError
from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.domain.entities.booking import Booking, BookingStatus, NewBooking

UPDATABLE_FIELDS = ("status", "notes")


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()

    def list_bookings(
        self,
        date: date | None = None,
        time: time | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        with self._lock:
            bookings = list(self._bookings.values())
        return filter_bookings(bookings, date=date, time=time, limit=limit)

    def insert_booking(self, booking: NewBooking) -> Booking:
        with self._lock:
            if slot_taken(self._bookings.values(), booking):
                raise SlotConflictError()
            created = new_record(booking)
            self._bookings[created.id] = created
            return created

    def update_booking(self, booking_id: str, fields: dict[str, Any]) -> Booking | None:
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                return None
            updated = apply_update(current, fields)
            self._bookings[booking_id] = updated
            return updated

    def delete_booking(self, booking_id: str) -> bool:
        with self._lock:
            return self._bookings.pop(booking_id, None) is not None


def new_record(booking: NewBooking) -> Booking:
    return Booking(
        id=str(uuid.uuid4()),
        name=booking.name,
        email=booking.email,
        service=booking.service,
        date=booking.date,
        time=booking.time,
        created_at=datetime.now(timezone.utc),
        price=booking.price,
        phone=booking.phone,
        notes=booking.notes,
        timezone=booking.timezone,
        status=BookingStatus.pending,
    )


def apply_update(current: Booking, fields: dict[str, Any]) -> Booking:
    """Only status and notes are mutable; id and created_at never change."""
    changes = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
    if "status" in changes:
        changes["status"] = BookingStatus(changes["status"])
    return replace(current, **changes)


def filter_bookings(
    bookings: list[Booking],
    date: date | None = None,
    time: time | None = None,
    limit: int | None = None,
) -> list[Booking]:
    result = [
        b
        for b in bookings
        if (date is None or b.date == date) and (time is None or b.time == time)
    ]
    result.sort(key=lambda b: b.created_at, reverse=True)
    if limit is not None:
        result = result[:limit]
    return result


def slot_taken(bookings: Iterable[Booking], booking: NewBooking) -> bool:
    return any(b.date == booking.date and b.time == booking.time for b in bookings)
