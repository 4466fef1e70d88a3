"""
Tests for store and notifier selection from settings.
"""

from __future__ import annotations

import tempfile
import threading
import time
from pathlib import Path

import pytest

from studio_booking.core.config import settings
from studio_booking.infrastructure.email.mock_notifier import MockNotifier
from studio_booking.infrastructure.email.resend_notifier import ResendNotifier
from studio_booking.infrastructure.store.json_store import JsonBookingStore
from studio_booking.infrastructure.store.memory_store import MemoryBookingStore
from studio_booking.infrastructure.store.supabase_store import SupabaseBookingStore
from studio_booking.wiring import dependencies


@pytest.fixture(autouse=True)
def fresh_wiring(monkeypatch):
    monkeypatch.setattr(dependencies, "_booking_store", None)
    monkeypatch.setattr(settings, "STORE_PROVIDER", "")
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_KEY", None)
    dependencies.get_notifier.cache_clear()
    yield
    dependencies.get_notifier.cache_clear()


def test_dev_defaults_to_json_store(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setattr(settings, "ENV", "dev")
        monkeypatch.setattr(settings, "BOOKINGS_DATA_FILE", str(Path(tmpdir) / "bookings.json"))
        assert isinstance(dependencies.get_booking_store(), JsonBookingStore)


def test_production_without_supabase_uses_memory(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "prod")
    store = dependencies.get_booking_store()
    assert isinstance(store, MemoryBookingStore)
    assert dependencies.get_booking_store() is store


def test_supabase_credentials_select_supabase(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_KEY", "service-key")
    assert isinstance(dependencies.get_booking_store(), SupabaseBookingStore)


def test_explicit_provider_wins(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")
    monkeypatch.setattr(settings, "STORE_PROVIDER", "memory")
    assert isinstance(dependencies.get_booking_store(), MemoryBookingStore)


def test_unknown_provider_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "STORE_PROVIDER", "redis")
    with pytest.raises(ValueError):
        dependencies.get_booking_store()


def test_notifier_selection(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", None)
    assert isinstance(dependencies.get_notifier(), MockNotifier)

    dependencies.get_notifier.cache_clear()
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    assert isinstance(dependencies.get_notifier(), ResendNotifier)


def test_concurrent_first_calls_share_one_store(monkeypatch):
    class SlowMemoryStore(MemoryBookingStore):
        def __init__(self) -> None:
            time.sleep(0.05)
            super().__init__()

    monkeypatch.setattr(dependencies, "MemoryBookingStore", SlowMemoryStore)
    monkeypatch.setattr(settings, "STORE_PROVIDER", "memory")

    workers = 4
    barrier = threading.Barrier(workers)
    results = []
    results_lock = threading.Lock()

    def first_request() -> None:
        barrier.wait()
        store = dependencies.get_booking_store()
        with results_lock:
            results.append(store)

    threads = [threading.Thread(target=first_request) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == workers
    assert len({id(store) for store in results}) == 1
