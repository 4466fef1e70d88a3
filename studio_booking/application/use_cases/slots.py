from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime, time, timezone as dt_timezone

from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.application.utils.date_parser import safe_timezone
from studio_booking.domain.entities.slot import Slot, SlotState


def operating_hours(start_hour: int, end_hour: int) -> list[time]:
    """Hourly slot starts from opening up to, but not including, closing."""
    start = max(start_hour, 0)
    end = min(end_hour, 24)
    return [time(hour, 0) for hour in range(start, end)]


def compute_slots(
    target_date: date,
    now: datetime,
    booked_times: Iterable[time],
    start_hour: int = 9,
    end_hour: int = 17,
) -> list[Slot]:
    """
    Classify every slot of the operating window for `target_date`.

    `now` is the current wall-clock time in the zone the caller reasons in;
    only its local date and time are compared. A booked slot stays booked
    even when it is also in the past.
    """
    taken = {t.replace(second=0, microsecond=0, tzinfo=None) for t in booked_times}
    today = now.date()
    wall_clock = now.replace(tzinfo=None)

    slots: list[Slot] = []
    for slot_time in operating_hours(start_hour, end_hour):
        if slot_time in taken:
            state = SlotState.booked
        elif target_date == today and datetime.combine(target_date, slot_time) <= wall_clock:
            state = SlotState.past
        else:
            state = SlotState.available
        slots.append(Slot(date=target_date, time=slot_time, state=state))
    return slots


class SlotAvailabilityUseCase:
    def __init__(
        self,
        store: BookingStorePort,
        default_timezone: str = "UTC",
        start_hour: int = 9,
        end_hour: int = 17,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._default_timezone = default_timezone
        self._start_hour = start_hour
        self._end_hour = end_hour
        self._now_provider = now_provider or (lambda: datetime.now(dt_timezone.utc))
        self._logger = logging.getLogger(__name__)

    def get_slots(
        self,
        target_date: date,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> list[Slot]:
        tz = safe_timezone(timezone, self._default_timezone)
        current = (now if now is not None else self._now_provider()).astimezone(tz)

        existing = self._store.list_bookings(date=target_date)
        slots = compute_slots(
            target_date,
            current,
            (booking.time for booking in existing),
            start_hour=self._start_hour,
            end_hour=self._end_hour,
        )
        self._logger.debug(
            "Slots computed",
            extra={"date": target_date.isoformat(), "reason": f"{len(existing)} booked"},
        )
        return slots
