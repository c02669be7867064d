from functools import lru_cache
import logging

from detailbot.core.config import settings
from detailbot.application.ports.message_platform import MessagePlatformPort
from detailbot.application.ports.service_catalog import ServiceCatalogPort
from detailbot.application.use_cases.dialog_engine import DialogEngine
from detailbot.application.use_cases.handle_incoming_event import HandleIncomingEventUseCase
from detailbot.application.use_cases.send_reply import SendReplyUseCase
from detailbot.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from detailbot.infrastructure.line.line_client import LineClient
from detailbot.infrastructure.line.line_platform import LinePlatform
from detailbot.infrastructure.line.message_renderer import LineMessageRenderer
from detailbot.infrastructure.line.mock_platform import MockLinePlatform
from detailbot.infrastructure.store.memory_store import (
    MemoryBookingStore,
    MemorySessionStore,
    MemoryUserMemoryStore,
)


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore()


@lru_cache
def get_booking_store() -> MemoryBookingStore:
    return MemoryBookingStore()


@lru_cache
def get_user_memory_store() -> MemoryUserMemoryStore:
    return MemoryUserMemoryStore()


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


def get_dialog_engine() -> DialogEngine:
    return DialogEngine(
        catalog=get_service_catalog(),
        bookings=get_booking_store(),
        memories=get_user_memory_store(),
    )


@lru_cache
def get_line_platform() -> MessagePlatformPort:
    logger = logging.getLogger(__name__)
    logger.info(
        "LINE_CHANNEL_ACCESS_TOKEN present=%s len=%s",
        bool(settings.LINE_CHANNEL_ACCESS_TOKEN),
        len(settings.LINE_CHANNEL_ACCESS_TOKEN or ""),
    )
    logger.info("ENV=%s", settings.ENV)

    if not settings.LINE_CHANNEL_ACCESS_TOKEN:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockLinePlatform (token missing, ENV=dev/local)")
            return MockLinePlatform()
        raise ValueError("LINE_CHANNEL_ACCESS_TOKEN is required to send LINE replies.")

    logger.info("Using real LinePlatform")
    client = LineClient(
        access_token=settings.LINE_CHANNEL_ACCESS_TOKEN,
        reply_endpoint=settings.LINE_REPLY_ENDPOINT,
        timeout=settings.LINE_HTTP_TIMEOUT_SECONDS,
    )
    return LinePlatform(client=client)


@lru_cache
def get_handle_incoming_event_use_case() -> HandleIncomingEventUseCase:
    return HandleIncomingEventUseCase(
        sessions=get_session_store(),
        engine=get_dialog_engine(),
        renderer=LineMessageRenderer(),
        send_reply=SendReplyUseCase(
            platform=get_line_platform(),
            auto_reply_enabled=settings.AUTO_REPLY_ENABLED,
        ),
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_incoming_event_use_case(),
        "sessions": get_session_store(),
        "bookings": get_booking_store(),
        "memories": get_user_memory_store(),
    }
