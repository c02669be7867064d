"""
Tests for rendering dialog effects into LINE message objects.
"""

from __future__ import annotations

from detailbot.domain.entities.booking import Booking, TimeSlot
from detailbot.domain.entities.effects import (
    Completion,
    Handoff,
    MenuEffect,
    Prompt,
    Rejection,
    SuggestedReply,
)
from detailbot.domain.entities.service_catalog import VehicleClass
from detailbot.infrastructure.line.message_renderer import (
    CONFIRMED_TEXT,
    GENERIC_FAILURE_TEXT,
    LineMessageRenderer,
    main_menu,
    render_prompt,
)


def test_prompt_renders_quick_replies():
    prompt = Prompt(
        text="請輸入取車地點：",
        suggested_replies=(
            SuggestedReply(label="沿用上次地點", value="台北市中山區"),
            SuggestedReply(label="確認送出", value="CONFIRM_BOOKING", postback=True),
        ),
        expects_location=True,
    )
    message = render_prompt(prompt)

    assert message["type"] == "text"
    assert message["text"] == "請輸入取車地點："
    actions = [item["action"] for item in message["quickReply"]["items"]]
    assert actions[0] == {"type": "location", "label": "傳送目前位置"}
    assert actions[1] == {"type": "message", "label": "沿用上次地點", "text": "台北市中山區"}
    assert actions[2]["type"] == "postback"
    assert actions[2]["data"] == "CONFIRM_BOOKING"


def test_prompt_without_replies_has_no_quick_reply():
    assert render_prompt(Prompt(text="hi")) == {"type": "text", "text": "hi"}


def test_long_labels_are_clipped():
    message = render_prompt(
        Prompt(text="x", suggested_replies=(SuggestedReply(label="沿用上次車號 ABCDEFGHIJKLMNOPQRST", value="v"),))
    )
    label = message["quickReply"]["items"][0]["action"]["label"]
    assert len(label) == 20


def test_rejection_renders_reason_then_prompt():
    renderer = LineMessageRenderer()
    messages = renderer.render(Rejection(reason="電話格式不正確，請重新輸入。", retry_prompt=Prompt(text="請輸入聯絡電話：")))
    assert [m["text"] for m in messages] == ["電話格式不正確，請重新輸入。", "請輸入聯絡電話："]


def test_menu_effect_with_and_without_notice():
    renderer = LineMessageRenderer()
    assert renderer.render(MenuEffect()) == [main_menu()]

    messages = renderer.render(MenuEffect(notice="您的預約已取消。"))
    assert messages[0] == {"type": "text", "text": "您的預約已取消。"}
    assert messages[1]["type"] == "template"
    labels = [action["label"] for action in messages[1]["template"]["actions"]]
    assert labels == ["我要預約", "查詢價格", "更改預約", "聯絡客服"]


def test_completion_and_handoff():
    renderer = LineMessageRenderer()
    booking = Booking(
        owner_identity="U" + "1" * 32,
        phone="0912345678",
        category="清潔養護",
        vehicle_class=VehicleClass.SMALL,
        date="2025-06-01",
        time_slot=TimeSlot.MORNING,
        sub_service="基礎洗車",
    )
    messages = renderer.render(Completion(booking=booking, price=500))
    assert messages[0]["text"] == CONFIRMED_TEXT
    assert messages[1]["template"]["text"] == "請問還需要其他服務嗎？"

    assert renderer.render(Handoff(notice="稍候")) == [{"type": "text", "text": "稍候"}]


def test_failure_messages():
    messages = LineMessageRenderer().render_failure()
    assert messages[0]["text"] == GENERIC_FAILURE_TEXT
    assert messages[1]["type"] == "template"
