from __future__ import annotations

import logging
from typing import Any

from detailbot.application.ports.message_platform import MessagePlatformPort


class SendReplyUseCase:
    def __init__(self, platform: MessagePlatformPort, auto_reply_enabled: bool) -> None:
        self._platform = platform
        self._auto_reply_enabled = auto_reply_enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, reply_token: str | None, messages: list[dict[str, Any]]) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped."""
        if not reply_token or not messages:
            return False
        if not self._auto_reply_enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"reply_token": reply_token, "message_count": len(messages)})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False
        self._platform.reply(reply_token=reply_token, messages=messages)
        return True
