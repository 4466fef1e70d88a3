from __future__ import annotations

import hmac
import logging
from datetime import date
from typing import Any

from studio_booking.application.exceptions import NotFoundError, Unauthorized, ValidationError
from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.application.utils.date_parser import parse_iso_date
from studio_booking.domain.entities.booking import Booking, BookingStatus


class AdminBookingsUseCase:
    def __init__(self, store: BookingStorePort, admin_password: str | None) -> None:
        self._store = store
        self._admin_password = admin_password or ""
        self._logger = logging.getLogger(__name__)

    def authorize(self, credential: str | None) -> None:
        """
        Credential gate. An unset secret rejects everyone, so a missing
        ADMIN_PASSWORD never opens the admin endpoints.
        """
        if not self._admin_password or not credential:
            raise Unauthorized("Unauthorized")
        if not hmac.compare_digest(credential.encode("utf-8"), self._admin_password.encode("utf-8")):
            self._logger.warning("Admin credential rejected")
            raise Unauthorized("Unauthorized")

    def list(
        self,
        credential: str | None,
        date: date | str | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        self.authorize(credential)
        booking_date = None
        if date is not None and date != "":
            booking_date = parse_iso_date(date)
            if booking_date is None:
                raise ValidationError("date", "date must be formatted YYYY-MM-DD")
        if limit is not None and limit < 1:
            raise ValidationError("limit", "limit must be a positive integer")
        bookings = self._store.list_bookings(date=booking_date, limit=limit)
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    def update(
        self,
        credential: str | None,
        booking_id: str | None,
        status: BookingStatus | str | None = None,
        notes: str | None = None,
    ) -> Booking:
        self.authorize(credential)
        if not booking_id:
            raise ValidationError("id", "id is required")

        fields: dict[str, Any] = {}
        if status is not None and status != "":
            try:
                fields["status"] = BookingStatus(status)
            except ValueError:
                allowed = ", ".join(s.value for s in BookingStatus)
                raise ValidationError("status", f"status must be one of: {allowed}")
        if notes is not None:
            fields["notes"] = notes
        if not fields:
            raise ValidationError("status", "status or notes is required")

        updated = self._store.update_booking(booking_id, fields)
        if updated is None:
            raise NotFoundError(f"Booking {booking_id} not found")

        self._logger.info(
            "Booking updated",
            extra={"booking_id": booking_id, "status": updated.status.value},
        )
        return updated

    def delete(self, credential: str | None, booking_id: str | None) -> None:
        self.authorize(credential)
        if not booking_id:
            raise ValidationError("id", "id is required")

        if not self._store.delete_booking(booking_id):
            raise NotFoundError(f"Booking {booking_id} not found")
        self._logger.info("Booking deleted", extra={"booking_id": booking_id})
