from functools import lru_cache
import logging
from datetime import date

from app.core.config import settings
from app.application.ports.booking_backend import BookingBackendPort
from app.application.ports.session_store import BookingSessionStorePort
from app.application.use_cases.booking_flow import BookingFlow
from app.application.utils.availability_policy import AvailabilityPolicy, random_policy
from app.domain.entities.widget_options import Language, Theme, WidgetOptions
from app.infrastructure.backend.mock_backend import MockBookingBackend
from app.infrastructure.backend.supabase_backend import SupabaseBookingBackend
from app.infrastructure.store.memory_store import MemoryBookingSessionStore


_session_store: MemoryBookingSessionStore | None = None


def get_session_store() -> BookingSessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemoryBookingSessionStore(ttl_seconds=settings.BOOKING_SESSION_TTL_SECONDS)
    return _session_store


@lru_cache
def get_booking_backend() -> BookingBackendPort:
    logger = logging.getLogger(__name__)
    logger.info("ENV=%s", settings.ENV)

    if not (settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY) or settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockBookingBackend")
        return MockBookingBackend(delay_seconds=settings.BOOKING_SUBMIT_DELAY_SECONDS)

    logger.info("Using SupabaseBookingBackend")
    return SupabaseBookingBackend()


def get_availability_policy() -> AvailabilityPolicy:
    return random_policy(
        ratio=settings.SLOT_AVAILABILITY_RATIO,
        seed=settings.SLOT_AVAILABILITY_SEED,
    )


def default_widget_options() -> WidgetOptions:
    return WidgetOptions(
        theme=Theme(settings.WIDGET_DEFAULT_THEME),
        lang=Language(settings.WIDGET_DEFAULT_LANG),
    )


def build_booking_flow(
    today: date,
    options: WidgetOptions,
    backend: BookingBackendPort,
    policy: AvailabilityPolicy,
) -> BookingFlow:
    return BookingFlow.start(
        backend=backend,
        today=today,
        policy=policy,
        window_days=settings.BOOKING_WINDOW_DAYS,
        opening_hour=settings.BOOKING_OPENING_HOUR,
        closing_hour=settings.BOOKING_CLOSING_HOUR,
        slot_minutes=settings.BOOKING_SLOT_MINUTES,
        options=options,
        submit_timeout_seconds=settings.BOOKING_SUBMIT_TIMEOUT_SECONDS,
    )
