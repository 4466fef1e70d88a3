from __future__ import annotations

import json
import logging
import threading
from datetime import date, time
from pathlib import Path
from typing import Any

from studio_booking.application.exceptions import SlotConflictError, StoreError
from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.domain.entities.booking import Booking, NewBooking
from studio_booking.infrastructure.store.memory_store import (
    apply_update,
    filter_bookings,
    new_record,
    slot_taken,
)
from studio_booking.infrastructure.store.records import booking_from_row, booking_to_row


class JsonBookingStore(BookingStorePort):
    """
    Keeps every booking in a single JSON file.

    One lock serializes all reads and writes inside this process, so the
    slot check in insert_booking and the write that follows are atomic.
    Several processes sharing the same file are not coordinated.
    """

    def __init__(self, data_file: str = "./data/bookings.json") -> None:
        self._path = Path(data_file)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def list_bookings(
        self,
        date: date | None = None,
        time: time | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        with self._lock:
            bookings = self._load()
        return filter_bookings(bookings, date=date, time=time, limit=limit)

    def insert_booking(self, booking: NewBooking) -> Booking:
        with self._lock:
            bookings = self._load()
            if slot_taken(bookings, booking):
                raise SlotConflictError()
            created = new_record(booking)
            bookings.append(created)
            self._save(bookings)
            return created

    def update_booking(self, booking_id: str, fields: dict[str, Any]) -> Booking | None:
        with self._lock:
            bookings = self._load()
            for index, current in enumerate(bookings):
                if current.id == booking_id:
                    updated = apply_update(current, fields)
                    bookings[index] = updated
                    self._save(bookings)
                    return updated
            return None

    def delete_booking(self, booking_id: str) -> bool:
        with self._lock:
            bookings = self._load()
            remaining = [b for b in bookings if b.id != booking_id]
            if len(remaining) == len(bookings):
                return False
            self._save(remaining)
            return True

    def _load(self) -> list[Booking]:
        """Load all bookings; a missing file is an empty store."""
        if not self._path.exists():
            return []

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [booking_from_row(item) for item in data.get("bookings", [])]
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError) as e:
            self._logger.error("Failed to read bookings file", extra={"error": str(e)})
            raise StoreError(f"Could not read {self._path}: {e}") from e

    def _save(self, bookings: list[Booking]) -> None:
        """Write to a temp file and rename over the old one."""
        temp_path = self._path.with_suffix(".json.tmp")
        data = {"version": 1, "bookings": [booking_to_row(b) for b in bookings]}

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    self._logger.warning("Could not remove temp file", extra={"reason": str(temp_path)})
            self._logger.error("Failed to write bookings file", extra={"error": str(e)})
            raise StoreError(f"Could not write {self._path}: {e}") from e
