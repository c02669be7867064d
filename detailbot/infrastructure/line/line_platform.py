from __future__ import annotations

from typing import Any

from detailbot.application.ports.message_platform import MessagePlatformPort
from detailbot.infrastructure.line.line_client import LineClient


class LinePlatform(MessagePlatformPort):
    def __init__(self, client: LineClient) -> None:
        self._client = client

    def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None:
        self._client.reply(reply_token=reply_token, messages=messages)
