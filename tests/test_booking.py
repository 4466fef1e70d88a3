"""
Tests for booking creation: validation, double-booking protection and
best-effort confirmation emails.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, time

import pytest

from studio_booking.application.exceptions import SlotConflictError, StoreError, ValidationError
from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.application.use_cases.booking import EMAIL_FAILED_WARNING, BookingUseCase
from studio_booking.domain.entities.booking import BookingStatus
from studio_booking.infrastructure.email.mock_notifier import MockNotifier
from studio_booking.infrastructure.store.memory_store import MemoryBookingStore


class FailingNotifier(NotifierPort):
    def send_confirmation(self, booking) -> None:
        raise RuntimeError("smtp down")


class StalePrecheckStore(MemoryBookingStore):
    """Pre-check always sees an empty slot, as if a concurrent insert just landed."""

    def list_bookings(self, date=None, time=None, limit=None):
        if time is not None:
            return []
        return super().list_bookings(date=date, time=time, limit=limit)


class BrokenStore(MemoryBookingStore):
    def insert_booking(self, booking):
        raise StoreError("connection reset")


def _request(**overrides):
    request = {
        "name": "Ana Cruz",
        "email": "ana@example.com",
        "service": "Portrait",
        "date": "2025-03-10",
        "time": "10:00",
    }
    request.update(overrides)
    return request


def test_create_returns_pending_booking():
    store = MemoryBookingStore()
    notifier = MockNotifier()
    use_case = BookingUseCase(store=store, notifier=notifier)

    result = use_case.create(_request())

    booking = result.booking
    assert result.warning is None
    assert booking.status == BookingStatus.pending
    assert booking.id
    assert booking.created_at is not None
    assert booking.date == date(2025, 3, 10)
    assert booking.time == time(10, 0)
    assert booking.price == 0
    assert booking.phone is None
    assert notifier.sent == [booking]


def test_second_booking_for_same_slot_conflicts():
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    use_case.create(_request())

    with pytest.raises(SlotConflictError) as exc_info:
        use_case.create(_request(name="Ben Reyes", email="ben@example.com"))
    assert exc_info.value.message == "That time slot is already booked."


def test_conflict_has_no_side_effects():
    store = MemoryBookingStore()
    notifier = MockNotifier()
    use_case = BookingUseCase(store=store, notifier=notifier)
    use_case.create(_request())

    with pytest.raises(SlotConflictError):
        use_case.create(_request(name="Ben Reyes"))

    assert len(store.list_bookings()) == 1
    assert len(notifier.sent) == 1


def test_same_time_on_another_date_is_fine():
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    use_case.create(_request())
    result = use_case.create(_request(date="2025-03-11"))
    assert result.booking.date == date(2025, 3, 11)


def test_store_rejection_is_treated_as_conflict():
    use_case = BookingUseCase(store=StalePrecheckStore(), notifier=MockNotifier())
    use_case.create(_request())

    with pytest.raises(SlotConflictError):
        use_case.create(_request(name="Ben Reyes"))


def test_concurrent_creates_for_one_slot_only_one_wins():
    store = MemoryBookingStore()
    use_case = BookingUseCase(store=store, notifier=MockNotifier())
    barrier = threading.Barrier(8)

    def attempt(i: int) -> str:
        barrier.wait()
        try:
            use_case.create(_request(name=f"Guest {i}", email=f"guest{i}@example.com"))
            return "ok"
        except SlotConflictError:
            return "conflict"

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(8)))

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7
    assert len(store.list_bookings(date=date(2025, 3, 10), time=time(10, 0))) == 1


def test_notification_failure_keeps_booking_and_warns():
    store = MemoryBookingStore()
    use_case = BookingUseCase(store=store, notifier=FailingNotifier())

    result = use_case.create(_request())

    assert result.warning == EMAIL_FAILED_WARNING
    assert "email failed" in result.warning
    assert [b.id for b in store.list_bookings()] == [result.booking.id]


def test_store_error_propagates():
    use_case = BookingUseCase(store=BrokenStore(), notifier=MockNotifier())
    with pytest.raises(StoreError):
        use_case.create(_request())


def test_optional_fields_are_trimmed_and_kept():
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    result = use_case.create(
        _request(
            name="  Ana Cruz  ",
            phone=" 0917 000 0000 ",
            notes="",
            price=1500,
            timezone="Asia/Manila",
        )
    )
    booking = result.booking
    assert booking.name == "Ana Cruz"
    assert booking.phone == "0917 000 0000"
    assert booking.notes is None
    assert booking.price == 1500.0
    assert booking.timezone == "Asia/Manila"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": None}, "name"),
        ({"name": "   "}, "name"),
        ({"name": " A "}, "name"),
        ({"email": ""}, "email"),
        ({"email": "ana@example"}, "email"),
        ({"email": "ana example.com"}, "email"),
        ({"service": ""}, "service"),
        ({"date": None}, "date"),
        ({"date": "10/03/2025"}, "date"),
        ({"date": "2025-02-30"}, "date"),
        ({"time": ""}, "time"),
        ({"time": "25:00"}, "time"),
        ({"time": "ten"}, "time"),
        ({"price": -1}, "price"),
        ({"price": "free"}, "price"),
        ({"name": 12345}, "name"),
        ({"email": ["ana@example.com"]}, "email"),
        ({"date": 20250310}, "date"),
        ({"notes": {"text": "hi"}}, "notes"),
    ],
)
def test_validation_names_the_failing_field(overrides, field):
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    with pytest.raises(ValidationError) as exc_info:
        use_case.create(_request(**overrides))
    assert exc_info.value.field == field
    assert field in exc_info.value.message


def test_validation_reports_first_failure_in_field_order():
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    with pytest.raises(ValidationError) as exc_info:
        use_case.create({"email": "bad", "time": "10:00"})
    assert exc_info.value.field == "name"

    with pytest.raises(ValidationError) as exc_info:
        use_case.create({"name": "Ana", "email": "bad", "service": ""})
    assert exc_info.value.field == "email"


def test_validation_failure_writes_nothing():
    store = MemoryBookingStore()
    notifier = MockNotifier()
    use_case = BookingUseCase(store=store, notifier=notifier)

    with pytest.raises(ValidationError):
        use_case.create(_request(email="nope"))

    assert store.list_bookings() == []
    assert notifier.sent == []


def test_created_booking_round_trips_through_list():
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    created = use_case.create(_request(price=2500)).booking

    listed = use_case.list_bookings()
    assert len(listed) == 1
    found = listed[0]
    assert found.id == created.id
    assert (found.name, found.email, found.service, found.date, found.time, found.price) == (
        "Ana Cruz",
        "ana@example.com",
        "Portrait",
        date(2025, 3, 10),
        time(10, 0),
        2500.0,
    )
    assert found.status == BookingStatus.pending
    assert found.created_at == created.created_at


def test_list_bookings_filters_by_date():
    use_case = BookingUseCase(store=MemoryBookingStore(), notifier=MockNotifier())
    use_case.create(_request())
    use_case.create(_request(date="2025-03-11"))

    assert [b.date for b in use_case.list_bookings(date=date(2025, 3, 11))] == [date(2025, 3, 11)]
