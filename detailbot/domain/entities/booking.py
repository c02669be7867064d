from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from detailbot.domain.entities.service_catalog import VehicleClass


class TimeSlot(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def label(self) -> str:
        return TIME_SLOT_LABELS[self]

    @staticmethod
    def from_label(text: str) -> "TimeSlot | None":
        for slot, label in TIME_SLOT_LABELS.items():
            if label == text:
                return slot
        return None


TIME_SLOT_LABELS: dict[TimeSlot, str] = {
    TimeSlot.MORNING: "早上",
    TimeSlot.AFTERNOON: "下午",
    TimeSlot.EVENING: "晚上",
}


@dataclass(frozen=True)
class Booking:
    owner_identity: str
    phone: str
    category: str
    vehicle_class: VehicleClass
    date: str  # YYYY-MM-DD
    time_slot: TimeSlot
    sub_service: str | None = None
    license_plate: str = ""
    pickup_location: str = ""
    note: str = ""

    @property
    def service_name(self) -> str:
        if self.sub_service:
            return f"{self.category} - {self.sub_service}"
        return self.category
