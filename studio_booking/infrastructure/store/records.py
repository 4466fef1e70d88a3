from __future__ import annotations

from datetime import datetime
from typing import Any

from studio_booking.application.utils.date_parser import (
    format_iso_date,
    format_slot_time,
    parse_iso_date,
    parse_slot_time,
)
from studio_booking.domain.entities.booking import Booking, BookingStatus, NewBooking


def new_booking_to_row(booking: NewBooking) -> dict[str, Any]:
    return {
        "name": booking.name,
        "email": booking.email,
        "phone": booking.phone,
        "notes": booking.notes,
        "service": booking.service,
        "price": booking.price,
        "date": format_iso_date(booking.date),
        "time": format_slot_time(booking.time),
        "timezone": booking.timezone,
    }


def booking_to_row(booking: Booking) -> dict[str, Any]:
    row = {"id": booking.id}
    row.update(
        new_booking_to_row(
            NewBooking(
                name=booking.name,
                email=booking.email,
                service=booking.service,
                date=booking.date,
                time=booking.time,
                price=booking.price,
                phone=booking.phone,
                notes=booking.notes,
                timezone=booking.timezone,
            )
        )
    )
    row["status"] = booking.status.value
    row["created_at"] = booking.created_at.isoformat()
    return row


def booking_from_row(row: dict[str, Any]) -> Booking:
    """Build a Booking from a stored row. Raises ValueError/KeyError on bad data."""
    booking_date = parse_iso_date(row["date"])
    booking_time = parse_slot_time(row["time"])
    if booking_date is None or booking_time is None:
        raise ValueError(f"Invalid date/time in booking {row.get('id')}")

    created_at = row["created_at"]
    if isinstance(created_at, str):
        # Python < 3.11 rejects the trailing Z some backends emit.
        created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

    return Booking(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        service=row["service"],
        date=booking_date,
        time=booking_time,
        created_at=created_at,
        price=float(row.get("price") or 0),
        phone=row.get("phone"),
        notes=row.get("notes"),
        timezone=row.get("timezone"),
        status=BookingStatus(row.get("status") or BookingStatus.pending.value),
    )
