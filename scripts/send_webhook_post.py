#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any

import httpx
from httpx import ConnectError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from detailbot.infrastructure.line.webhook_verify import compute_signature


def build_payload(user_id: str, text: str | None, postback: str | None) -> dict[str, Any]:
    now_ms = int(time.time() * 1000)
    event: dict[str, Any] = {
        "replyToken": f"rt_{now_ms}",
        "timestamp": now_ms,
        "mode": "active",
        "webhookEventId": f"ev_{now_ms}",
        "source": {"type": "user", "userId": user_id},
    }
    if postback is not None:
        event["type"] = "postback"
        event["postback"] = {"data": postback}
    else:
        event["type"] = "message"
        event["message"] = {"type": "text", "id": f"m_{now_ms}", "text": text or ""}
    return {"destination": "bot", "events": [event]}


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a test LINE webhook POST")
    parser.add_argument("--url", default="http://127.0.0.1:8001/webhooks/line")
    parser.add_argument("--user", default="U" + "0" * 32)
    parser.add_argument("--text", default="查詢價格")
    parser.add_argument("--postback", default=None, help="Send a postback event with this data instead of text")
    parser.add_argument("--channel-secret", default="", help="LINE channel secret for signature")
    args = parser.parse_args()

    payload = build_payload(args.user, args.text, args.postback)
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")

    headers = {"Content-Type": "application/json"}
    if args.channel_secret:
        headers["X-Line-Signature"] = compute_signature(body, args.channel_secret)

    try:
        resp = httpx.post(args.url, content=body, headers=headers, timeout=10.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn detailbot.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(resp.text)


if __name__ == "__main__":
    main()
