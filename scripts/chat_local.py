#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no LINE).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable identity for the session
- Sends your typed messages through the same HandleIncomingEventUseCase
- Prints the current flow/step and the rendered reply messages
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from detailbot.domain.entities.directive import EventKind, InboundDirective, Location
from detailbot.wiring.dependencies import get_container


def _print_header(identity: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"identity: {identity}")
    print("Type your message and press Enter.")
    print("Commands: /submit, /loc <lat> <lon>, /diff <name>, /new, /state, /quit, /help")
    print("-" * 60)


def _print_messages(messages: list[dict[str, Any]]) -> None:
    if not messages:
        print("(no outbound message)")
        return
    for message in messages:
        if message.get("type") == "template":
            template = message["template"]
            print(f"[menu] {template['text']}")
            print("  " + " | ".join(action["label"] for action in template["actions"]))
            continue
        print(message.get("text", ""))
        items = (message.get("quickReply") or {}).get("items") or []
        if items:
            print("  " + " | ".join(item["action"]["label"] for item in items))


def _directive(identity: str, user_text: str) -> InboundDirective:
    token = f"local_{int(time.time() * 1000)}"
    if user_text == "/submit":
        return InboundDirective(identity=identity, kind=EventKind.POSTBACK, reply_token=token, postback_data="CONFIRM_BOOKING")
    if user_text.startswith("/diff "):
        name = user_text.split(" ", 1)[1].strip()
        return InboundDirective(identity=identity, kind=EventKind.POSTBACK, reply_token=token, postback_data=f"DIFF:{name}")
    if user_text.startswith("/loc "):
        parts = user_text.split()
        location = Location(latitude=float(parts[1]), longitude=float(parts[2]))
        return InboundDirective(identity=identity, kind=EventKind.LOCATION, reply_token=token, location=location)
    return InboundDirective(identity=identity, kind=EventKind.TEXT, reply_token=token, text=user_text)


def main() -> None:
    identity = os.getenv("CHAT_IDENTITY", "local_user_1")
    container = get_container()
    use_case = container["use_case"]
    sessions = container["sessions"]
    _print_header(identity)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            _print_header(identity)
            continue
        if cmd == "/new":
            identity = f"local_user_{int(time.time())}"
            print(f"New identity: {identity}")
            continue
        if cmd == "/state":
            session = sessions.get(identity)
            if session is None:
                print("(idle)")
            else:
                print(f"flow={session.flow.value} step={session.step.value}")
                print(session.draft)
            continue

        try:
            directive = _directive(identity, user_text)
        except (IndexError, ValueError) as e:
            print(f"Bad command: {e}")
            continue

        messages = use_case.handle(directive)
        print("\n--- Reply ---")
        _print_messages(messages)
        print("-" * 60)


if __name__ == "__main__":
    main()
