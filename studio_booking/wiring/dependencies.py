from functools import lru_cache
import logging
import threading

from studio_booking.core.config import settings
from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.application.use_cases.admin_bookings import AdminBookingsUseCase
from studio_booking.application.use_cases.booking import BookingUseCase
from studio_booking.application.use_cases.slots import SlotAvailabilityUseCase
from studio_booking.infrastructure.email.mock_notifier import MockNotifier
from studio_booking.infrastructure.email.resend_client import ResendClient
from studio_booking.infrastructure.email.resend_notifier import ResendNotifier
from studio_booking.infrastructure.store.json_store import JsonBookingStore
from studio_booking.infrastructure.store.memory_store import MemoryBookingStore
from studio_booking.infrastructure.store.supabase_store import SupabaseBookingStore


_booking_store: BookingStorePort | None = None
# Concurrent first requests must share one store, or the store locks guard nothing.
_booking_store_lock = threading.Lock()


def _store_provider() -> str:
    provider = settings.STORE_PROVIDER.strip().lower()
    if provider:
        return provider
    if settings.SUPABASE_URL and settings.SUPABASE_KEY:
        return "supabase"
    if settings.ENV.lower() in {"dev", "local"}:
        return "json"
    return "memory"


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is not None:
        return _booking_store
    with _booking_store_lock:
        if _booking_store is None:
            provider = _store_provider()
            logger = logging.getLogger(__name__)
            logger.info("Using booking store", extra={"reason": provider})
            if provider == "supabase":
                _booking_store = SupabaseBookingStore()
            elif provider == "json":
                _booking_store = JsonBookingStore(data_file=settings.BOOKINGS_DATA_FILE)
            elif provider == "memory":
                _booking_store = MemoryBookingStore()
            else:
                raise ValueError(f"Unknown STORE_PROVIDER: {provider}")
    return _booking_store


@lru_cache
def get_notifier() -> NotifierPort:
    logger = logging.getLogger(__name__)
    if not settings.RESEND_API_KEY:
        logger.info("Using MockNotifier (RESEND_API_KEY missing)")
        return MockNotifier()

    client = ResendClient(api_key=settings.RESEND_API_KEY)
    return ResendNotifier(
        client=client,
        from_email=settings.FROM_EMAIL,
        studio_name=settings.STUDIO_NAME,
        contact_email=settings.STUDIO_CONTACT_EMAIL,
    )


def get_booking_use_case() -> BookingUseCase:
    return BookingUseCase(store=get_booking_store(), notifier=get_notifier())


def get_slot_use_case() -> SlotAvailabilityUseCase:
    return SlotAvailabilityUseCase(
        store=get_booking_store(),
        default_timezone=settings.STUDIO_TIMEZONE,
        start_hour=settings.SLOT_START_HOUR,
        end_hour=settings.SLOT_END_HOUR,
    )


def get_admin_use_case() -> AdminBookingsUseCase:
    return AdminBookingsUseCase(store=get_booking_store(), admin_password=settings.ADMIN_PASSWORD)
