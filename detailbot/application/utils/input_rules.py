from __future__ import annotations

import re

from detailbot.domain.entities.booking import TimeSlot
from detailbot.domain.entities.directive import Location
from detailbot.domain.entities.service_catalog import VehicleClass

# Top-level commands accepted from idle.
CMD_START_BOOKING = "我要預約"
CMD_INQUIRE_PRICE = "查詢價格"
CMD_CHANGE_BOOKING = "更改預約"
CMD_HUMAN_AGENT = "聯絡客服"

BACK_TOKENS = ("返回上一階段", "返回")
BACK_LABEL = "返回上一階段"

SUBMIT_TEXT = "確認送出"
CONFIRM_POSTBACK = "CONFIRM_BOOKING"
DIFF_POSTBACK_PREFIX = "DIFF:"

OPTION_REFILL = "重新填寫預約單"
OPTION_MODIFY_DATETIME = "修改日期時段"
OPTION_CANCEL = "取消預約"

NONE_TOKEN = "無"
NO_NOTE_TOKEN = "無備註"
SKIP_TOKEN = "跳過"

DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
PHONE_RE = re.compile(r"^[0-9]{6,}$")


def is_back(text: str) -> bool:
    return text.strip() in BACK_TOKENS


def is_submit(text: str, postback: str | None) -> bool:
    return postback == CONFIRM_POSTBACK or text.strip() == SUBMIT_TEXT


def parse_diff_postback(postback: str | None) -> str | None:
    if postback and postback.startswith(DIFF_POSTBACK_PREFIX):
        return postback[len(DIFF_POSTBACK_PREFIX):]
    return None


def parse_vehicle_class(text: str) -> VehicleClass | None:
    return VehicleClass.from_label(text.strip())


def parse_time_slot(text: str) -> TimeSlot | None:
    return TimeSlot.from_label(text.strip())


def is_valid_date(text: str) -> bool:
    """Syntactic YYYY-MM-DD check; calendar validity is not enforced."""
    return bool(DATE_RE.match(text.strip()))


def normalize_phone(text: str) -> str:
    return re.sub(r"[\s-]", "", text or "")


def parse_phone(text: str) -> str | None:
    phone = normalize_phone(text)
    if PHONE_RE.match(phone):
        return phone
    return None


def normalize_license_plate(text: str) -> str:
    value = (text or "").strip()
    if value == NONE_TOKEN:
        return ""
    return value


def normalize_pickup_location(text: str = "", location: Location | None = None) -> str:
    if location is not None:
        return location.as_text()
    value = (text or "").strip()
    if value == NONE_TOKEN:
        return ""
    return value


def normalize_note(text: str) -> str:
    value = (text or "").strip()
    if value in (NONE_TOKEN, NO_NOTE_TOKEN, SKIP_TOKEN):
        return ""
    return value
