from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, time
from typing import Any

from studio_booking.domain.entities.booking import Booking, NewBooking


class BookingStorePort(ABC):
    @abstractmethod
    def list_bookings(
        self,
        date: date | None = None,
        time: time | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        """Return bookings matching the filters, newest first by created_at."""
        raise NotImplementedError

    @abstractmethod
    def insert_booking(self, booking: NewBooking) -> Booking:
        """
        Persist a new booking with status pending.
        Must raise SlotConflictError if (date, time) is already taken; the
        check and the write are atomic from the caller's point of view.
        """
        raise NotImplementedError

    @abstractmethod
    def update_booking(self, booking_id: str, fields: dict[str, Any]) -> Booking | None:
        """Apply a partial update. Returns None if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def delete_booking(self, booking_id: str) -> bool:
        """Delete permanently. Returns False if the id is unknown."""
        raise NotImplementedError
