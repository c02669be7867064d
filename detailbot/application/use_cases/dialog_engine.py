from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from detailbot.application.exceptions import CatalogInconsistencyError, DialogStateError
from detailbot.application.ports.booking_store import BookingStorePort
from detailbot.application.ports.service_catalog import ServiceCatalogPort
from detailbot.application.ports.user_memory_store import UserMemoryStorePort
from detailbot.application.use_cases.lookup import LookupResolver
from detailbot.application.use_cases.pricing import PricingResolver
from detailbot.application.use_cases.prompt_composer import PromptComposer
from detailbot.application.utils import input_rules as rules
from detailbot.application.utils.flow_transition import start_session, transition, with_step
from detailbot.domain.entities.booking import Booking
from detailbot.domain.entities.directive import UserInput
from detailbot.domain.entities.effects import (
    Completion,
    Effect,
    Handoff,
    MenuEffect,
    Prompt,
    Rejection,
)
from detailbot.domain.entities.session import (
    FLOW_STEPS,
    BookingStep,
    ChangeStep,
    Draft,
    FlowKind,
    PriceStep,
    Session,
    Step,
)
from detailbot.domain.entities.user_memory import UserMemory


UNRECOGNIZED_NOTICE = "很抱歉，我無法辨識您的輸入。\n請從以下選單選擇服務："
NOT_FOUND_NOTICE = "查無此電話的預約紀錄，請確認電話輸入正確。"
CANCELLED_NOTICE = "您的預約已取消。"
HANDOFF_NOTICE = "已通知專人客服，我們將盡快與您聯繫。"


@dataclass(frozen=True)
class DialogResult:
    session: Session | None
    effect: Effect


class DialogEngine:
    """
    Advances one identity's session by one turn.
    Reads the catalog, bookings and memories; writes bookings and memories only
    when a flow completes, a booking is changed, or a refill is seeded.
    """

    def __init__(
        self,
        catalog: ServiceCatalogPort,
        bookings: BookingStorePort,
        memories: UserMemoryStorePort,
        pricing: PricingResolver | None = None,
        lookup: LookupResolver | None = None,
        composer: PromptComposer | None = None,
    ) -> None:
        self._catalog = catalog
        self._bookings = bookings
        self._memories = memories
        self._pricing = pricing or PricingResolver(catalog)
        self._lookup = lookup or LookupResolver(bookings)
        self._composer = composer or PromptComposer(catalog, memories)
        self._logger = logging.getLogger(__name__)

    def advance(self, session: Session | None, identity: str, user_input: UserInput) -> DialogResult:
        if session is None:
            return self._idle(identity, user_input)

        if user_input.postback is None and user_input.location is None and rules.is_back(user_input.text):
            return self.back(session, identity)

        if session.flow == FlowKind.BOOKING:
            return self._booking_turn(session, identity, user_input)
        if session.flow == FlowKind.PRICE_INQUIRY:
            return self._price_turn(session, identity, user_input)
        return self._change_turn(session, identity, user_input)

    def prompt_for(self, session: Session, identity: str) -> Prompt:
        price = None
        if session.step in (BookingStep.CONFIRM, PriceStep.PRICE_SHOWN):
            price = self.require_price(session.draft)
        return self._composer.for_step(session, identity, price=price)

    def require_price(self, draft: Draft) -> int:
        if draft.category is None or draft.vehicle_class is None:
            raise DialogStateError("Draft has no category or vehicle class to price")
        price = self._pricing.resolve(draft.category, draft.sub_service, draft.vehicle_class)
        if price is None:
            raise CatalogInconsistencyError(
                f"No price for {draft.category}/{draft.sub_service}/{draft.vehicle_class.value}"
            )
        return price

    # idle

    def _idle(self, identity: str, user_input: UserInput) -> DialogResult:
        text = user_input.text
        if user_input.postback is not None or user_input.location is not None or rules.is_back(text):
            return DialogResult(None, MenuEffect())

        if text == rules.CMD_START_BOOKING:
            return self._enter(start_session(FlowKind.BOOKING), identity)
        if text == rules.CMD_INQUIRE_PRICE:
            return self._enter(start_session(FlowKind.PRICE_INQUIRY), identity)
        if text == rules.CMD_CHANGE_BOOKING:
            own = self._bookings.get(identity)
            if own is not None:
                # Known owner: no need to ask for a phone number.
                return self._enter(
                    Session(flow=FlowKind.CHANGE_BOOKING, step=ChangeStep.OPTIONS, editing_on_behalf_of=identity),
                    identity,
                )
            return self._enter(start_session(FlowKind.CHANGE_BOOKING), identity)
        if text == rules.CMD_HUMAN_AGENT:
            self._logger.info("Human agent requested", extra={"identity": identity})
            return DialogResult(None, Handoff(notice=HANDOFF_NOTICE))

        return DialogResult(None, MenuEffect(notice=UNRECOGNIZED_NOTICE))

    # back navigation

    def back(self, session: Session, identity: str) -> DialogResult:
        previous = self._previous_step(session)
        if previous is None:
            return DialogResult(None, MenuEffect())
        return self._enter(with_step(session, previous), identity)

    def _previous_step(self, session: Session) -> Step | None:
        steps = FLOW_STEPS[session.flow]
        if session.flow == FlowKind.CHANGE_BOOKING:
            if session.step == ChangeStep.MODIFY_DATE:
                return ChangeStep.OPTIONS
            if session.step == ChangeStep.MODIFY_TIME_SLOT:
                return ChangeStep.MODIFY_DATE
            if session.step == ChangeStep.OPTIONS:
                return ChangeStep.VERIFY
            return None

        index = steps.index(session.step)
        while index > 0:
            index -= 1
            candidate = steps[index]
            if candidate in (BookingStep.SUB_CATEGORY, PriceStep.SUB_CATEGORY) and not self._has_sub_services(
                session.draft.category
            ):
                continue
            return candidate
        return None

    # booking flow

    def _booking_turn(self, session: Session, identity: str, user_input: UserInput) -> DialogResult:
        step = session.step
        text = user_input.text

        if step == BookingStep.SUB_CATEGORY and rules.parse_diff_postback(user_input.postback) is not None:
            return DialogResult(session, self._composer.difference(session.draft.category or ""))
        if step == BookingStep.CONFIRM:
            if user_input.location is None and rules.is_submit(text, user_input.postback):
                return self._complete(session, identity)
            return self._reject(session, identity, "請確認預約資訊後按下「確認送出」。")

        if user_input.postback is not None:
            return self._reject(session, identity, "請依照提示輸入。")
        if user_input.location is not None and step != BookingStep.PICKUP_LOCATION:
            return self._reject(session, identity, "請輸入文字訊息。")

        if step in (BookingStep.CATEGORY, BookingStep.SUB_CATEGORY, BookingStep.VEHICLE_CLASS):
            return self._service_selection(session, identity, text, after_vehicle=BookingStep.LICENSE_PLATE)

        if step == BookingStep.LICENSE_PLATE:
            plate = rules.normalize_license_plate(text)
            return self._enter(with_step(session, BookingStep.DATE, license_plate=plate), identity)

        if step == BookingStep.DATE:
            if not rules.is_valid_date(text):
                return self._reject(session, identity, "日期格式不正確，請依 YYYY-MM-DD 格式輸入。")
            return self._enter(with_step(session, BookingStep.TIME_SLOT, date=text.strip()), identity)

        if step == BookingStep.TIME_SLOT:
            slot = rules.parse_time_slot(text)
            if slot is None:
                return self._reject(session, identity, "請選擇預約時段（早上/下午/晚上）。")
            return self._enter(with_step(session, BookingStep.PHONE, time_slot=slot), identity)

        if step == BookingStep.PHONE:
            phone = rules.parse_phone(text)
            if phone is None:
                return self._reject(session, identity, "電話格式不正確，請重新輸入。")
            return self._enter(with_step(session, BookingStep.PICKUP_LOCATION, phone=phone), identity)

        if step == BookingStep.PICKUP_LOCATION:
            location = rules.normalize_pickup_location(text, user_input.location)
            return self._enter(with_step(session, BookingStep.NOTE, pickup_location=location), identity)

        if step == BookingStep.NOTE:
            note = rules.normalize_note(text)
            return self._enter(with_step(session, BookingStep.CONFIRM, note=note), identity)

        raise DialogStateError(f"Unhandled booking step {step!r}")

    def _complete(self, session: Session, identity: str) -> DialogResult:
        draft = session.draft
        if draft.category is None or draft.vehicle_class is None or draft.date is None or draft.time_slot is None:
            raise DialogStateError("Cannot confirm an incomplete draft")
        price = self.require_price(draft)

        owner = session.editing_on_behalf_of or identity
        booking = Booking(
            owner_identity=owner,
            phone=draft.phone or "",
            category=draft.category,
            sub_service=draft.sub_service,
            vehicle_class=draft.vehicle_class,
            license_plate=draft.license_plate or "",
            date=draft.date,
            time_slot=draft.time_slot,
            pickup_location=draft.pickup_location or "",
            note=draft.note or "",
        )
        self._bookings.put(booking)
        self._memories.put(owner, UserMemory.from_booking(booking))
        self._logger.info(
            "Booking confirmed",
            extra={"identity": identity, "owner": owner, "service": booking.service_name},
        )
        return DialogResult(None, Completion(booking=booking, price=price))

    # price inquiry flow

    def _price_turn(self, session: Session, identity: str, user_input: UserInput) -> DialogResult:
        step = session.step
        text = user_input.text

        if step == PriceStep.SUB_CATEGORY and rules.parse_diff_postback(user_input.postback) is not None:
            return DialogResult(session, self._composer.difference(session.draft.category or ""))
        if user_input.postback is not None or user_input.location is not None:
            return self._reject(session, identity, "請依照提示輸入。")

        if step == PriceStep.PRICE_SHOWN:
            if text == rules.CMD_START_BOOKING:
                return self._enter(transition(session, FlowKind.BOOKING), identity)
            return self._reject(session, identity, "請選擇「我要預約」或返回上一階段。")

        return self._service_selection(session, identity, text, after_vehicle=PriceStep.PRICE_SHOWN)

    # shared category -> sub-service -> vehicle class selection

    def _service_selection(self, session: Session, identity: str, text: str, after_vehicle: Step) -> DialogResult:
        booking = session.flow == FlowKind.BOOKING
        sub_step: Step = BookingStep.SUB_CATEGORY if booking else PriceStep.SUB_CATEGORY
        vehicle_step: Step = BookingStep.VEHICLE_CLASS if booking else PriceStep.VEHICLE_CLASS

        if session.step in (BookingStep.CATEGORY, PriceStep.CATEGORY):
            category = self._catalog.get_category(text)
            if category is None:
                return self._reject(session, identity, "請從選單中選擇服務類別。")
            next_step = sub_step if category.has_sub_services else vehicle_step
            return self._enter(with_step(session, next_step, category=category.name, sub_service=None), identity)

        if session.step == sub_step:
            category = self._catalog.get_category(session.draft.category or "")
            if category is None:
                raise DialogStateError("Sub-service step reached without a known category")
            sub = category.find_sub_service(text)
            if sub is None:
                return self._reject(session, identity, "請選擇服務項目。")
            return self._enter(with_step(session, vehicle_step, sub_service=sub.name), identity)

        vehicle_class = rules.parse_vehicle_class(text)
        if vehicle_class is None:
            return self._reject(session, identity, "請從選項中選擇車型。")
        return self._enter(with_step(session, after_vehicle, vehicle_class=vehicle_class), identity)

    # change booking flow

    def _change_turn(self, session: Session, identity: str, user_input: UserInput) -> DialogResult:
        step = session.step
        text = user_input.text

        if user_input.postback is not None or user_input.location is not None:
            return self._reject(session, identity, "請依照提示輸入。")

        if step == ChangeStep.VERIFY:
            found = self._lookup.find_booking(text)
            if found is None:
                return DialogResult(None, MenuEffect(notice=NOT_FOUND_NOTICE))
            located = replace(session, step=ChangeStep.OPTIONS, editing_on_behalf_of=found.owner_identity)
            return self._enter(located, identity)

        located_booking = self._bookings.get(session.editing_on_behalf_of or "")
        if located_booking is None:
            # Booking vanished between turns; same outcome as a lookup miss.
            return DialogResult(None, MenuEffect(notice=NOT_FOUND_NOTICE))

        if step == ChangeStep.OPTIONS:
            if text == rules.OPTION_REFILL:
                self._memories.put(identity, UserMemory.from_booking(located_booking))
                return self._enter(transition(session, FlowKind.BOOKING), identity)
            if text == rules.OPTION_MODIFY_DATETIME:
                return self._enter(with_step(session, ChangeStep.MODIFY_DATE), identity)
            if text == rules.OPTION_CANCEL:
                self._bookings.delete(located_booking.owner_identity)
                self._logger.info(
                    "Booking cancelled",
                    extra={"identity": identity, "owner": located_booking.owner_identity},
                )
                return DialogResult(None, MenuEffect(notice=CANCELLED_NOTICE))
            return self._reject(session, identity, "請從選項中選擇要執行的動作。")

        if step == ChangeStep.MODIFY_DATE:
            if not rules.is_valid_date(text):
                return self._reject(session, identity, "日期格式不正確，請依 YYYY-MM-DD 格式輸入。")
            return self._enter(with_step(session, ChangeStep.MODIFY_TIME_SLOT, date=text.strip()), identity)

        if step == ChangeStep.MODIFY_TIME_SLOT:
            slot = rules.parse_time_slot(text)
            if slot is None:
                return self._reject(session, identity, "請選擇預約時段（早上/下午/晚上）。")
            updated = self._bookings.update_schedule(
                located_booking.owner_identity,
                date=session.draft.date or located_booking.date,
                time_slot=slot,
            )
            if updated is None:
                return DialogResult(None, MenuEffect(notice=NOT_FOUND_NOTICE))
            self._logger.info(
                "Booking rescheduled",
                extra={"identity": identity, "owner": updated.owner_identity},
            )
            return DialogResult(None, MenuEffect(notice=f"您的預約已更改為 {updated.date} {slot.label}。"))

        raise DialogStateError(f"Unhandled change step {step!r}")

    # helpers

    def _enter(self, session: Session, identity: str) -> DialogResult:
        return DialogResult(session, self.prompt_for(session, identity))

    def _reject(self, session: Session, identity: str, reason: str) -> DialogResult:
        self._logger.info(
            "Input rejected",
            extra={"identity": identity, "flow": session.flow.value, "step": session.step.value, "reason": reason},
        )
        return DialogResult(session, Rejection(reason=reason, retry_prompt=self.prompt_for(session, identity)))

    def _has_sub_services(self, category_name: str | None) -> bool:
        if not category_name:
            return False
        category = self._catalog.get_category(category_name)
        return category is not None and category.has_sub_services
