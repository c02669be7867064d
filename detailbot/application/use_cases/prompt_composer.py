from __future__ import annotations

from detailbot.application.ports.service_catalog import ServiceCatalogPort
from detailbot.application.ports.user_memory_store import UserMemoryStorePort
from detailbot.application.utils.input_rules import (
    BACK_LABEL,
    CMD_START_BOOKING,
    CONFIRM_POSTBACK,
    DIFF_POSTBACK_PREFIX,
    NO_NOTE_TOKEN,
    OPTION_CANCEL,
    OPTION_MODIFY_DATETIME,
    OPTION_REFILL,
    SUBMIT_TEXT,
)
from detailbot.domain.entities.booking import TimeSlot
from detailbot.domain.entities.effects import Prompt, SuggestedReply
from detailbot.domain.entities.service_catalog import VehicleClass
from detailbot.domain.entities.session import BookingStep, ChangeStep, Draft, FlowKind, PriceStep, Session


BACK = SuggestedReply(label=BACK_LABEL, value=BACK_LABEL)


class PromptComposer:
    """Builds the prompt shown when a session arrives at a step."""

    def __init__(self, catalog: ServiceCatalogPort, memories: UserMemoryStorePort) -> None:
        self._catalog = catalog
        self._memories = memories

    def for_step(self, session: Session, identity: str, price: int | None = None) -> Prompt:
        step = session.step
        draft = session.draft

        if step in (BookingStep.CATEGORY, PriceStep.CATEGORY):
            refill = session.flow == FlowKind.BOOKING and session.editing_on_behalf_of is not None
            return self.category(refill=refill)
        if step in (BookingStep.SUB_CATEGORY, PriceStep.SUB_CATEGORY):
            return self.sub_category(draft.category or "")
        if step in (BookingStep.VEHICLE_CLASS, PriceStep.VEHICLE_CLASS):
            return self.vehicle_class()
        if step == PriceStep.PRICE_SHOWN:
            return self.price_shown(draft, price or 0)
        if step == BookingStep.LICENSE_PLATE:
            return self.license_plate(identity)
        if step == BookingStep.DATE:
            return Prompt(text="請輸入預約日期 (YYYY-MM-DD)：", suggested_replies=(BACK,))
        if step == BookingStep.TIME_SLOT:
            return self.time_slot("請選擇預約時段：")
        if step == BookingStep.PHONE:
            return self.phone(identity)
        if step == BookingStep.PICKUP_LOCATION:
            return self.pickup_location(identity)
        if step == BookingStep.NOTE:
            return Prompt(
                text="請輸入備註（可選填，無則輸入「無」）：",
                suggested_replies=(SuggestedReply(label=NO_NOTE_TOKEN, value=NO_NOTE_TOKEN), BACK),
            )
        if step == BookingStep.CONFIRM:
            return self.summary(draft, price or 0)
        if step == ChangeStep.VERIFY:
            return Prompt(
                text="請輸入您預約時留下的聯絡電話：",
                suggested_replies=(SuggestedReply(label="返回主選單", value=BACK_LABEL),),
            )
        if step == ChangeStep.OPTIONS:
            return self.change_options()
        if step == ChangeStep.MODIFY_DATE:
            return Prompt(text="請輸入新的預約日期 (YYYY-MM-DD)：", suggested_replies=(BACK,))
        if step == ChangeStep.MODIFY_TIME_SLOT:
            return self.time_slot("請選擇新的預約時段：")
        raise ValueError(f"No prompt for step {step!r}")

    def category(self, refill: bool = False) -> Prompt:
        items = [SuggestedReply(label=name, value=name) for name in self._catalog.category_names()]
        items.append(SuggestedReply(label="取消", value=BACK_LABEL))
        text = "請選擇新的服務類別：" if refill else "請選擇服務分類："
        return Prompt(text=text, suggested_replies=tuple(items))

    def sub_category(self, category_name: str) -> Prompt:
        category = self._catalog.get_category(category_name)
        items: list[SuggestedReply] = []
        if category is not None:
            show_diff = len(category.sub_services) > 1
            for sub in category.sub_services:
                items.append(SuggestedReply(label=sub.name, value=sub.name))
                if show_diff:
                    items.append(
                        SuggestedReply(
                            label=f"{sub.name}差異",
                            value=f"{DIFF_POSTBACK_PREFIX}{sub.name}",
                            postback=True,
                        )
                    )
        items.append(BACK)
        return Prompt(text=f"請選擇「{category_name}」的服務項目：", suggested_replies=tuple(items))

    def difference(self, category_name: str) -> Prompt:
        """Difference explanation followed by the sub-service choices again."""
        category = self._catalog.get_category(category_name)
        menu = self.sub_category(category_name)
        if category is None or not category.difference_text:
            return menu
        text = f"{category_name} - 差異說明\n{category.difference_text}\n\n{menu.text}"
        return Prompt(text=text, suggested_replies=menu.suggested_replies)

    def vehicle_class(self) -> Prompt:
        lines = ["請選擇您的車型："]
        items: list[SuggestedReply] = []
        for vehicle_class in VehicleClass:
            lines.append(f"{vehicle_class.label}（{vehicle_class.example}）")
            items.append(SuggestedReply(label=vehicle_class.label, value=vehicle_class.label))
        items.append(BACK)
        return Prompt(text="\n".join(lines), suggested_replies=tuple(items))

    def time_slot(self, text: str) -> Prompt:
        items = [SuggestedReply(label=slot.label, value=slot.label) for slot in TimeSlot]
        items.append(BACK)
        return Prompt(text=text, suggested_replies=tuple(items))

    def license_plate(self, identity: str) -> Prompt:
        memory = self._memories.get(identity)
        items: list[SuggestedReply] = []
        if memory and memory.license_plate:
            items.append(SuggestedReply(label=f"沿用上次車號 {memory.license_plate}", value=memory.license_plate))
        items.append(BACK)
        return Prompt(text="請輸入您的車牌號碼：", suggested_replies=tuple(items))

    def phone(self, identity: str) -> Prompt:
        memory = self._memories.get(identity)
        items: list[SuggestedReply] = []
        if memory and memory.phone:
            items.append(SuggestedReply(label=f"沿用上次電話 {memory.phone}", value=memory.phone))
        items.append(BACK)
        return Prompt(text="請輸入聯絡電話：", suggested_replies=tuple(items))

    def pickup_location(self, identity: str) -> Prompt:
        memory = self._memories.get(identity)
        items: list[SuggestedReply] = []
        if memory and memory.pickup_location:
            items.append(SuggestedReply(label="沿用上次地點", value=memory.pickup_location))
        items.append(BACK)
        return Prompt(text="請輸入取車地點：", suggested_replies=tuple(items), expects_location=True)

    def price_shown(self, draft: Draft, price: int) -> Prompt:
        service = draft.category or ""
        if draft.sub_service:
            service = f"{service} - {draft.sub_service}"
        vehicle = draft.vehicle_class.label if draft.vehicle_class else ""
        return Prompt(
            text=f"{service} ({vehicle}) 的價格為 ${price} 元。",
            suggested_replies=(
                SuggestedReply(label=CMD_START_BOOKING, value=CMD_START_BOOKING),
                SuggestedReply(label="返回", value=BACK_LABEL),
            ),
        )

    def summary(self, draft: Draft, price: int) -> Prompt:
        service = draft.category or ""
        if draft.sub_service:
            service = f"{service} - {draft.sub_service}"
        rows = [
            "預約資訊確認",
            f"服務項目：{service}",
            f"車型：{draft.vehicle_class.label if draft.vehicle_class else ''}",
        ]
        if draft.license_plate:
            rows.append(f"車牌號碼：{draft.license_plate}")
        rows.extend(
            [
                f"日期：{draft.date or ''}",
                f"時段：{draft.time_slot.label if draft.time_slot else ''}",
                f"電話：{draft.phone or ''}",
                f"地點：{draft.pickup_location or '無'}",
                f"備註：{draft.note or '無'}",
                f"金額：${price} 元",
            ]
        )
        return Prompt(
            text="\n".join(rows),
            suggested_replies=(
                SuggestedReply(label=SUBMIT_TEXT, value=CONFIRM_POSTBACK, postback=True),
                BACK,
            ),
        )

    def change_options(self) -> Prompt:
        return Prompt(
            text="請選擇要執行的動作：",
            suggested_replies=(
                SuggestedReply(label=OPTION_REFILL, value=OPTION_REFILL),
                SuggestedReply(label=OPTION_MODIFY_DATETIME, value=OPTION_MODIFY_DATETIME),
                SuggestedReply(label=OPTION_CANCEL, value=OPTION_CANCEL),
                BACK,
            ),
        )
