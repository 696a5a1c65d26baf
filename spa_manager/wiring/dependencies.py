from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from spa_manager.application.ports.appointment_store import AppointmentStorePort
from spa_manager.application.ports.chat_session_store import ChatSessionStorePort
from spa_manager.application.use_cases.booking import BookingUseCase
from spa_manager.application.use_cases.handle_chat_message import HandleChatMessageUseCase
from spa_manager.application.use_cases.interpret_command import InterpretCommandUseCase
from spa_manager.application.use_cases.slot_availability import SlotAvailabilityEngine
from spa_manager.core.config import settings
from spa_manager.infrastructure.store.chat_session_store import MemoryChatSessionStore
from spa_manager.infrastructure.store.json_store import JsonAppointmentStore
from spa_manager.infrastructure.store.memory_store import MemoryAppointmentStore


@lru_cache
def get_appointment_store() -> AppointmentStorePort:
    logger = logging.getLogger(__name__)
    provider = settings.STORE_PROVIDER.lower()
    if provider == "json":
        logger.info("Using JsonAppointmentStore (dir=%s)", settings.STORE_DATA_DIR)
        return JsonAppointmentStore(data_dir=settings.STORE_DATA_DIR)
    if provider != "memory":
        raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")
    logger.info("Using MemoryAppointmentStore")
    return MemoryAppointmentStore()


@lru_cache
def get_chat_session_store() -> ChatSessionStorePort:
    return MemoryChatSessionStore()


@lru_cache
def get_slot_engine() -> SlotAvailabilityEngine:
    return SlotAvailabilityEngine(
        grid_start=settings.SLOT_GRID_START,
        grid_end=settings.SLOT_GRID_END,
        interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        duration_minutes=settings.APPOINTMENT_DURATION_MINUTES,
        min_gap_minutes=settings.MIN_GAP_MINUTES,
        horizon_days=settings.BOOKING_HORIZON_DAYS,
    )


def get_interpret_command_use_case() -> InterpretCommandUseCase:
    return InterpretCommandUseCase()


@lru_cache
def get_booking_use_case() -> BookingUseCase:
    # Cached so the per-date booking locks are shared across requests.
    return BookingUseCase(
        store=get_appointment_store(),
        engine=get_slot_engine(),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
    )


def get_handle_chat_message_use_case() -> HandleChatMessageUseCase:
    return HandleChatMessageUseCase(
        sessions=get_chat_session_store(),
        interpreter=get_interpret_command_use_case(),
        booking=get_booking_use_case(),
        cancel_reason=settings.CHAT_CANCEL_REASON,
    )
