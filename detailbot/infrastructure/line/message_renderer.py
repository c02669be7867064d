from __future__ import annotations

from typing import Any

from detailbot.application.ports.reply_renderer import ReplyRendererPort
from detailbot.application.utils.input_rules import (
    CMD_CHANGE_BOOKING,
    CMD_HUMAN_AGENT,
    CMD_INQUIRE_PRICE,
    CMD_START_BOOKING,
)
from detailbot.domain.entities.effects import (
    Completion,
    Effect,
    Handoff,
    MenuEffect,
    Prompt,
    Rejection,
    SuggestedReply,
)


WELCOME_TEXT = "歡迎使用汽車美容預約系統，請選擇服務："
CONFIRMED_TEXT = "預約已確認！我們將依預約時間提供服務，謝謝您。"
FOLLOW_UP_MENU_TEXT = "請問還需要其他服務嗎？"
GENERIC_FAILURE_TEXT = "發生錯誤，請稍後再試。"

MAX_QUICK_REPLY_ITEMS = 13
MAX_LABEL_LENGTH = 20
MAX_BUTTONS_TEXT_LENGTH = 160


class LineMessageRenderer(ReplyRendererPort):
    def render(self, effect: Effect) -> list[dict[str, Any]]:
        return render(effect)

    def render_failure(self) -> list[dict[str, Any]]:
        return render_failure()


def render(effect: Effect) -> list[dict[str, Any]]:
    """Turn a dialog effect into LINE message objects."""
    if isinstance(effect, Prompt):
        return [render_prompt(effect)]
    if isinstance(effect, Rejection):
        return [text_message(effect.reason), render_prompt(effect.retry_prompt)]
    if isinstance(effect, Completion):
        return [text_message(CONFIRMED_TEXT), main_menu(FOLLOW_UP_MENU_TEXT)]
    if isinstance(effect, MenuEffect):
        if effect.notice:
            return [text_message(effect.notice), main_menu()]
        return [main_menu()]
    if isinstance(effect, Handoff):
        return [text_message(effect.notice)]
    raise TypeError(f"Unsupported effect: {type(effect).__name__}")


def render_failure() -> list[dict[str, Any]]:
    return [text_message(GENERIC_FAILURE_TEXT), main_menu()]


def text_message(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def render_prompt(prompt: Prompt) -> dict[str, Any]:
    message = text_message(prompt.text)
    items: list[dict[str, Any]] = []
    if prompt.expects_location:
        items.append({"type": "action", "action": {"type": "location", "label": "傳送目前位置"}})
    for reply in prompt.suggested_replies:
        items.append({"type": "action", "action": _reply_action(reply)})
    if items:
        message["quickReply"] = {"items": items[:MAX_QUICK_REPLY_ITEMS]}
    return message


def main_menu(intro_text: str | None = None) -> dict[str, Any]:
    text = intro_text or WELCOME_TEXT
    actions = [
        {"type": "message", "label": command, "text": command}
        for command in (CMD_START_BOOKING, CMD_INQUIRE_PRICE, CMD_CHANGE_BOOKING, CMD_HUMAN_AGENT)
    ]
    return {
        "type": "template",
        "altText": "主選單",
        "template": {
            "type": "buttons",
            "text": text[:MAX_BUTTONS_TEXT_LENGTH],
            "actions": actions,
        },
    }


def _reply_action(reply: SuggestedReply) -> dict[str, Any]:
    label = _clip(reply.label)
    if reply.postback:
        return {"type": "postback", "label": label, "data": reply.value, "displayText": reply.label}
    return {"type": "message", "label": label, "text": reply.value}


def _clip(label: str) -> str:
    if len(label) <= MAX_LABEL_LENGTH:
        return label
    return label[: MAX_LABEL_LENGTH - 1] + "…"
