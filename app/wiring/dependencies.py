from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.booking_runner import BookingRunner
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.scheduling_automation import SchedulingAutomationPort
from app.application.use_cases.automate_booking import AutomateBookingUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.infrastructure.browser.calendly_automation import CalendlyAutomation
from app.infrastructure.store.memory_store import MemoryBookingStore
from app.infrastructure.store.sql_store import SqlBookingStore


_booking_store: BookingStorePort | None = None


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is None:
        logger = logging.getLogger(__name__)
        if settings.DATABASE_URL:
            _booking_store = SqlBookingStore(settings.DATABASE_URL)
        else:
            if settings.ENV.lower() not in {"dev", "local", "test"}:
                logger.warning("DATABASE_URL not set; bookings are kept in memory only", extra={"env": settings.ENV})
            _booking_store = MemoryBookingStore()
    return _booking_store


@lru_cache
def get_scheduling_automation() -> SchedulingAutomationPort:
    return CalendlyAutomation(
        headless=settings.BROWSER_HEADLESS,
        timeout=settings.BROWSER_TIMEOUT_SECONDS,
        viewport=(settings.BROWSER_VIEWPORT_WIDTH, settings.BROWSER_VIEWPORT_HEIGHT),
        retries=settings.RETRY_ATTEMPTS,
        retry_delay=settings.RETRY_DELAY_SECONDS,
        confirmation_timeout=settings.CONFIRMATION_TIMEOUT_SECONDS,
        require_confirmation=settings.REQUIRE_CONFIRMATION,
        timezone=ZoneInfo(settings.BOOKING_TIMEZONE),
    )


def get_automate_booking_use_case() -> AutomateBookingUseCase:
    return AutomateBookingUseCase(store=get_booking_store(), automation=get_scheduling_automation())


@lru_cache
def get_booking_runner() -> BookingRunner:
    return BookingRunner(
        get_automate_booking_use_case(),
        workers=settings.MAX_CONCURRENT_BOOKINGS,
        queue_size=settings.BOOKING_QUEUE_SIZE,
    )


def get_create_booking_use_case() -> CreateBookingUseCase:
    return CreateBookingUseCase(store=get_booking_store(), runner=get_booking_runner())
