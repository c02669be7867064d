from __future__ import annotations

import logging
import threading
from typing import Any

import httpx

from detailbot.application.exceptions import CatalogInconsistencyError, DialogStateError
from detailbot.application.ports.reply_renderer import ReplyRendererPort
from detailbot.application.ports.session_store import SessionStorePort
from detailbot.application.use_cases.dialog_engine import DialogEngine, DialogResult
from detailbot.application.use_cases.send_reply import SendReplyUseCase
from detailbot.domain.entities.directive import EventKind, InboundDirective
from detailbot.domain.entities.effects import MenuEffect


class HandleIncomingEventUseCase:
    def __init__(
        self,
        sessions: SessionStorePort,
        engine: DialogEngine,
        renderer: ReplyRendererPort,
        send_reply: SendReplyUseCase,
    ) -> None:
        self._sessions = sessions
        self._engine = engine
        self._renderer = renderer
        self._send_reply = send_reply
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, identity: str) -> threading.Lock:
        """Get or create the turn lock for an identity."""
        with self._lock_lock:
            if identity not in self._locks:
                self._locks[identity] = threading.Lock()
            return self._locks[identity]

    def handle(self, directive: InboundDirective) -> list[dict[str, Any]]:
        """Process one inbound event as an atomic turn. Returns the reply messages."""
        with self._get_lock(directive.identity):
            try:
                messages = self._run_turn(directive)
            except Exception as e:
                self._logger.exception(
                    "Unhandled error while processing event",
                    extra={"identity": directive.identity, "event_kind": directive.kind.value, "error": str(e)},
                )
                self._sessions.delete(directive.identity)
                messages = self._renderer.render_failure()

        self._deliver(directive, messages)
        return messages

    def _run_turn(self, directive: InboundDirective) -> list[dict[str, Any]]:
        identity = directive.identity

        if directive.kind == EventKind.FOLLOW:
            self._logger.info("New follower", extra={"identity": identity, "event_kind": directive.kind.value})
            return self._renderer.render(MenuEffect())

        session = self._sessions.get(identity)
        try:
            result: DialogResult = self._engine.advance(session, identity, directive.to_user_input())
        except (CatalogInconsistencyError, DialogStateError) as e:
            self._logger.exception(
                "Dialog internal inconsistency",
                extra={
                    "identity": identity,
                    "flow": session.flow.value if session else None,
                    "step": session.step.value if session else None,
                    "error": str(e),
                },
            )
            self._sessions.delete(identity)
            return self._renderer.render_failure()

        if result.session is None:
            self._sessions.delete(identity)
        else:
            self._sessions.put(identity, result.session)

        self._logger.info(
            "Turn processed",
            extra={
                "identity": identity,
                "event_kind": directive.kind.value,
                "flow": result.session.flow.value if result.session else None,
                "step": result.session.step.value if result.session else None,
            },
        )
        return self._renderer.render(result.effect)

    def _deliver(self, directive: InboundDirective, messages: list[dict[str, Any]]) -> None:
        try:
            self._send_reply.execute(directive.reply_token, messages)
        except httpx.HTTPError as e:
            # Delivery is fire-and-forget; the turn's state changes stand.
            self._logger.error(
                "Reply delivery failed",
                extra={"identity": directive.identity, "error": str(e)},
            )
