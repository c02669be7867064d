from __future__ import annotations

import logging
from typing import Any

import httpx


class LineClient:
    def __init__(self, access_token: str, reply_endpoint: str, timeout: float = 10.0) -> None:
        self._access_token = access_token
        self._reply_endpoint = reply_endpoint
        self._client = httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None:
        payload = {
            "replyToken": reply_token,
            # The reply API accepts at most five messages per call.
            "messages": messages[:5],
        }
        headers = {"Authorization": f"Bearer {self._access_token}"}
        resp = self._client.post(self._reply_endpoint, headers=headers, json=payload)
        if resp.status_code >= 400:
            error_body = resp.text
            try:
                error_json = resp.json()
                error_message = error_json.get("message")
                error_details = error_json.get("details")
            except Exception:
                error_message = error_body
                error_details = None

            self._logger.error(
                "LINE reply failed",
                extra={
                    "status": resp.status_code,
                    "error_message": error_message,
                    "error_details": error_details,
                    "message_count": len(payload["messages"]),
                },
            )
            resp.raise_for_status()

    def close(self) -> None:
        self._client.close()
