from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from studio_booking.application.exceptions import SlotConflictError, ValidationError
from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.application.utils.date_parser import parse_iso_date, parse_slot_time
from studio_booking.domain.entities.booking import Booking, NewBooking

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_FAILED_WARNING = "Booking saved but confirmation email failed."


@dataclass(frozen=True)
class BookingResult:
    booking: Booking
    warning: str | None = None


class BookingUseCase:
    def __init__(self, store: BookingStorePort, notifier: NotifierPort) -> None:
        self._store = store
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    def create(self, request: Mapping[str, Any]) -> BookingResult:
        """
        Validate, re-check the slot against the store, persist, then try to
        send the confirmation email.

        The store is the source of truth: an email failure is reported as a
        warning on a successful result and never undoes the insert.
        """
        new_booking = self._validate(request)

        existing = self._store.list_bookings(date=new_booking.date, time=new_booking.time, limit=1)
        if existing:
            self._logger.info(
                "Slot already booked",
                extra={
                    "date": new_booking.date.isoformat(),
                    "time": new_booking.time.strftime("%H:%M"),
                    "reason": "pre-check",
                },
            )
            raise SlotConflictError()

        # The store re-checks atomically; a lost race raises SlotConflictError here too.
        booking = self._store.insert_booking(new_booking)
        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "date": booking.date.isoformat(),
                "time": booking.time.strftime("%H:%M"),
                "service": booking.service,
            },
        )

        try:
            self._notifier.send_confirmation(booking)
        except Exception as e:
            self._logger.warning(
                "Confirmation email failed",
                extra={"booking_id": booking.id, "error": str(e)},
            )
            return BookingResult(booking=booking, warning=EMAIL_FAILED_WARNING)

        return BookingResult(booking=booking)

    def list_bookings(self, date: date | None = None) -> list[Booking]:
        """Public read: bookings, optionally for one date, newest first."""
        return self._store.list_bookings(date=date)

    def _validate(self, request: Mapping[str, Any]) -> NewBooking:
        name = _clean(request, "name")
        if not name:
            raise ValidationError("name", "name is required")
        if len(name) < 2:
            raise ValidationError("name", "name must be at least 2 characters")

        email = _clean(request, "email")
        if not email:
            raise ValidationError("email", "email is required")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("email", "email is not a valid address")

        service = _clean(request, "service")
        if not service:
            raise ValidationError("service", "service is required")

        raw_date = _clean(request, "date")
        if not raw_date:
            raise ValidationError("date", "date is required")
        booking_date = parse_iso_date(raw_date)
        if booking_date is None:
            raise ValidationError("date", "date must be formatted YYYY-MM-DD")

        raw_time = _clean(request, "time")
        if not raw_time:
            raise ValidationError("time", "time is required")
        booking_time = parse_slot_time(raw_time)
        if booking_time is None:
            raise ValidationError("time", "time must be formatted HH:MM")

        price = _parse_price(request.get("price"))

        return NewBooking(
            name=name,
            email=email,
            service=service,
            date=booking_date,
            time=booking_time,
            price=price,
            phone=_clean(request, "phone") or None,
            notes=_clean(request, "notes") or None,
            timezone=_clean(request, "timezone") or None,
        )


def _clean(request: Mapping[str, Any], field: str) -> str:
    value = request.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(field, f"{field} must be a string")
    return value.strip()


def _parse_price(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise ValidationError("price", "price must be a number")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("price", "price must be a number")
    if math.isnan(price) or math.isinf(price) or price < 0:
        raise ValidationError("price", "price must be a non-negative number")
    return price
