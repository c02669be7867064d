from __future__ import annotations

import logging
from typing import Any

from detailbot.application.ports.message_platform import MessagePlatformPort


class MockLinePlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, list[dict[str, Any]]]] = []
        self._logger = logging.getLogger(__name__)

    def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None:
        self.sent.append((reply_token, messages))
        self._logger.info(
            "Mock reply to LINE", extra={"reply_token": reply_token, "message_count": len(messages)}
        )
