from abc import ABC, abstractmethod

from detailbot.domain.entities.booking import Booking, TimeSlot


class BookingStorePort(ABC):
    @abstractmethod
    def get(self, identity: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, booking: Booking) -> list[str]:
        """
        Create or replace the owner's booking and point its phone at the owner.
        Returns the identities evicted from the phone index.
        """
        raise NotImplementedError

    @abstractmethod
    def update_schedule(self, identity: str, date: str, time_slot: TimeSlot) -> Booking | None:
        """Change the date and slot of an existing booking. The phone index is left as is."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, identity: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def find_by_phone(self, phone: str) -> Booking | None:
        raise NotImplementedError
