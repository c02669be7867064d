"""
Tests for the per-event handler: session persistence, delivery and failure handling.
"""

from __future__ import annotations

import httpx

from detailbot.application.use_cases.dialog_engine import DialogEngine
from detailbot.application.use_cases.handle_incoming_event import HandleIncomingEventUseCase
from detailbot.application.use_cases.send_reply import SendReplyUseCase
from detailbot.domain.entities.directive import EventKind, InboundDirective
from detailbot.domain.entities.service_catalog import VehicleClass
from detailbot.domain.entities.session import BookingStep, Draft, FlowKind, Session
from detailbot.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from detailbot.infrastructure.line.message_renderer import GENERIC_FAILURE_TEXT, LineMessageRenderer
from detailbot.infrastructure.line.mock_platform import MockLinePlatform
from detailbot.infrastructure.store.memory_store import (
    MemoryBookingStore,
    MemorySessionStore,
    MemoryUserMemoryStore,
)


USER = "U" + "1" * 32


class FailingPlatform(MockLinePlatform):
    def reply(self, reply_token, messages):
        raise httpx.ConnectError("unreachable")


def _build(platform=None, auto_reply_enabled: bool = True):
    sessions = MemorySessionStore()
    bookings = MemoryBookingStore()
    engine = DialogEngine(catalog=ServiceCatalogStore(), bookings=bookings, memories=MemoryUserMemoryStore())
    platform = platform or MockLinePlatform()
    use_case = HandleIncomingEventUseCase(
        sessions=sessions,
        engine=engine,
        renderer=LineMessageRenderer(),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=auto_reply_enabled),
    )
    return use_case, sessions, platform


def _text(text: str, token: str = "rt") -> InboundDirective:
    return InboundDirective(identity=USER, kind=EventKind.TEXT, reply_token=token, text=text)


def test_session_is_persisted_between_events():
    use_case, sessions, platform = _build()

    use_case.handle(_text("我要預約"))
    assert sessions.get(USER).step == BookingStep.CATEGORY

    use_case.handle(_text("清潔養護"))
    assert sessions.get(USER).step == BookingStep.SUB_CATEGORY
    assert len(platform.sent) == 2


def test_back_to_idle_deletes_session():
    use_case, sessions, _ = _build()
    use_case.handle(_text("查詢價格"))
    use_case.handle(_text("返回上一階段"))
    assert sessions.get(USER) is None


def test_follow_event_sends_menu():
    use_case, sessions, platform = _build()
    messages = use_case.handle(InboundDirective(identity=USER, kind=EventKind.FOLLOW, reply_token="rt"))
    assert messages[0]["type"] == "template"
    assert platform.sent == [("rt", messages)]
    assert sessions.get(USER) is None


def test_internal_inconsistency_resets_session():
    use_case, sessions, _ = _build()
    sessions.put(
        USER,
        Session(
            flow=FlowKind.BOOKING,
            step=BookingStep.NOTE,
            draft=Draft(category="清潔養護", sub_service="不存在", vehicle_class=VehicleClass.SMALL),
        ),
    )
    messages = use_case.handle(_text("無"))
    assert messages[0]["text"] == GENERIC_FAILURE_TEXT
    assert sessions.get(USER) is None


def test_auto_reply_disabled_skips_delivery():
    use_case, _, platform = _build(auto_reply_enabled=False)
    messages = use_case.handle(_text("你好"))
    assert messages
    assert platform.sent == []


def test_delivery_failure_keeps_turn_state():
    use_case, sessions, _ = _build(platform=FailingPlatform())
    messages = use_case.handle(_text("我要預約"))
    assert messages
    assert sessions.get(USER).step == BookingStep.CATEGORY


class BrokenEngine(DialogEngine):
    def advance(self, session, identity, user_input):
        raise KeyError("boom")


def test_unexpected_error_replies_with_failure_and_resets_session():
    sessions = MemorySessionStore()
    engine = BrokenEngine(catalog=ServiceCatalogStore(), bookings=MemoryBookingStore(), memories=MemoryUserMemoryStore())
    platform = MockLinePlatform()
    use_case = HandleIncomingEventUseCase(
        sessions=sessions,
        engine=engine,
        renderer=LineMessageRenderer(),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=True),
    )
    sessions.put(USER, Session(flow=FlowKind.BOOKING, step=BookingStep.DATE))

    messages = use_case.handle(_text("2025-06-01"))

    assert messages[0]["text"] == GENERIC_FAILURE_TEXT
    assert platform.sent == [("rt", messages)]
    assert sessions.get(USER) is None
