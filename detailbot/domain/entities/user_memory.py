from __future__ import annotations

from dataclasses import dataclass

from detailbot.domain.entities.booking import Booking


@dataclass(frozen=True)
class UserMemory:
    phone: str | None = None
    license_plate: str | None = None
    pickup_location: str | None = None

    @staticmethod
    def from_booking(booking: Booking) -> "UserMemory":
        return UserMemory(
            phone=booking.phone,
            license_plate=booking.license_plate,
            pickup_location=booking.pickup_location,
        )
