from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from detailbot.domain.entities.booking import TimeSlot
from detailbot.domain.entities.service_catalog import VehicleClass


class FlowKind(str, Enum):
    BOOKING = "booking"
    PRICE_INQUIRY = "price_inquiry"
    CHANGE_BOOKING = "change_booking"


class BookingStep(str, Enum):
    CATEGORY = "category"
    SUB_CATEGORY = "sub_category"
    VEHICLE_CLASS = "vehicle_class"
    LICENSE_PLATE = "license_plate"
    DATE = "date"
    TIME_SLOT = "time_slot"
    PHONE = "phone"
    PICKUP_LOCATION = "pickup_location"
    NOTE = "note"
    CONFIRM = "confirm"


class PriceStep(str, Enum):
    CATEGORY = "category"
    SUB_CATEGORY = "sub_category"
    VEHICLE_CLASS = "vehicle_class"
    PRICE_SHOWN = "price_shown"


class ChangeStep(str, Enum):
    VERIFY = "verify"
    OPTIONS = "options"
    MODIFY_DATE = "modify_date"
    MODIFY_TIME_SLOT = "modify_time_slot"


Step = BookingStep | PriceStep | ChangeStep

# Ordered step sequences; SUB_CATEGORY is skipped for categories without sub-services.
FLOW_STEPS: dict[FlowKind, tuple[Step, ...]] = {
    FlowKind.BOOKING: tuple(BookingStep),
    FlowKind.PRICE_INQUIRY: tuple(PriceStep),
    FlowKind.CHANGE_BOOKING: tuple(ChangeStep),
}

_STEP_TYPES: dict[FlowKind, type] = {
    FlowKind.BOOKING: BookingStep,
    FlowKind.PRICE_INQUIRY: PriceStep,
    FlowKind.CHANGE_BOOKING: ChangeStep,
}


@dataclass(frozen=True)
class Draft:
    """Partially filled booking data accumulated across turns."""

    category: str | None = None
    sub_service: str | None = None
    vehicle_class: VehicleClass | None = None
    license_plate: str | None = None
    date: str | None = None
    time_slot: TimeSlot | None = None
    phone: str | None = None
    pickup_location: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class Session:
    flow: FlowKind
    step: Step
    draft: Draft = field(default_factory=Draft)
    editing_on_behalf_of: str | None = None  # booking owner when acting for someone else

    def __post_init__(self) -> None:
        expected = _STEP_TYPES[self.flow]
        if not isinstance(self.step, expected):
            raise ValueError(f"Step {self.step!r} does not belong to flow {self.flow.value}")
