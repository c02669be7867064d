from __future__ import annotations

import logging
from dataclasses import replace

from detailbot.application.ports.booking_store import BookingStorePort
from detailbot.application.ports.session_store import SessionStorePort
from detailbot.application.ports.user_memory_store import UserMemoryStorePort
from detailbot.domain.entities.booking import Booking, TimeSlot
from detailbot.domain.entities.session import Session
from detailbot.domain.entities.user_memory import UserMemory


class MemorySessionStore(SessionStorePort):
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, identity: str) -> Session | None:
        return self._sessions.get(identity)

    def put(self, identity: str, session: Session) -> None:
        self._sessions[identity] = session

    def delete(self, identity: str) -> None:
        self._sessions.pop(identity, None)


class MemoryUserMemoryStore(UserMemoryStorePort):
    def __init__(self) -> None:
        self._memories: dict[str, UserMemory] = {}

    def get(self, identity: str) -> UserMemory | None:
        return self._memories.get(identity)

    def put(self, identity: str, memory: UserMemory) -> None:
        self._memories[identity] = memory


class PhoneIndex:
    """
    Secondary index phone -> owner identity.
    A phone maps to at most one identity and an identity holds at most one phone.
    """

    def __init__(self) -> None:
        self._owner_by_phone: dict[str, str] = {}
        self._phone_by_owner: dict[str, str] = {}

    def lookup(self, phone: str) -> str | None:
        return self._owner_by_phone.get(phone)

    def reassign(self, phone: str, identity: str) -> list[str]:
        """Point phone at identity. Returns identities that lost the phone."""
        evicted: list[str] = []

        previous_phone = self._phone_by_owner.get(identity)
        if previous_phone is not None and previous_phone != phone:
            self._owner_by_phone.pop(previous_phone, None)

        previous_owner = self._owner_by_phone.get(phone)
        if previous_owner is not None and previous_owner != identity:
            self._phone_by_owner.pop(previous_owner, None)
            evicted.append(previous_owner)

        if phone:
            self._owner_by_phone[phone] = identity
            self._phone_by_owner[identity] = phone
        else:
            self._phone_by_owner.pop(identity, None)
        return evicted

    def remove(self, identity: str) -> None:
        phone = self._phone_by_owner.pop(identity, None)
        if phone is not None and self._owner_by_phone.get(phone) == identity:
            del self._owner_by_phone[phone]

    def __len__(self) -> int:
        return len(self._owner_by_phone)


class MemoryBookingStore(BookingStorePort):
    def __init__(self, phone_index: PhoneIndex | None = None) -> None:
        self._bookings: dict[str, Booking] = {}
        self._phone_index = phone_index or PhoneIndex()
        self._logger = logging.getLogger(__name__)

    def get(self, identity: str) -> Booking | None:
        return self._bookings.get(identity)

    def put(self, booking: Booking) -> list[str]:
        self._bookings[booking.owner_identity] = booking
        evicted = self._phone_index.reassign(booking.phone, booking.owner_identity)
        if evicted:
            # Evicted owners keep their bookings; they are only unreachable by phone.
            self._logger.warning(
                "Phone reassigned to a new booking owner",
                extra={"identity": booking.owner_identity, "evicted": ",".join(evicted)},
            )
        return evicted

    def update_schedule(self, identity: str, date: str, time_slot: TimeSlot) -> Booking | None:
        booking = self._bookings.get(identity)
        if booking is None:
            return None
        updated = replace(booking, date=date, time_slot=time_slot)
        self._bookings[identity] = updated
        return updated

    def delete(self, identity: str) -> bool:
        self._phone_index.remove(identity)
        return self._bookings.pop(identity, None) is not None

    def find_by_phone(self, phone: str) -> Booking | None:
        owner = self._phone_index.lookup(phone)
        if owner is None:
            return None
        return self._bookings.get(owner)

    def __len__(self) -> int:
        return len(self._bookings)
