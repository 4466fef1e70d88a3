from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    attended = "attended"
    cancelled = "cancelled"


@dataclass(frozen=True)
class NewBooking:
    """Validated booking payload, before the store assigns id and created_at."""

    name: str
    email: str
    service: str
    date: date
    time: time
    price: float = 0.0
    phone: str | None = None
    notes: str | None = None
    timezone: str | None = None  # client-reported, informational only


@dataclass(frozen=True)
class Booking:
    id: str
    name: str
    email: str
    service: str
    date: date
    time: time
    created_at: datetime
    price: float = 0.0
    phone: str | None = None
    notes: str | None = None
    timezone: str | None = None
    status: BookingStatus = BookingStatus.pending
