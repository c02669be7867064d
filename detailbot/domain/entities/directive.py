from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    TEXT = "text"
    LOCATION = "location"
    FOLLOW = "follow"
    POSTBACK = "postback"


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    address: str | None = None

    def as_text(self) -> str:
        if self.address and self.address.strip():
            return self.address.strip()
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class UserInput:
    """One turn of user input as seen by the dialog engine."""

    text: str = ""
    location: Location | None = None
    postback: str | None = None

    @staticmethod
    def of_text(text: str) -> "UserInput":
        return UserInput(text=(text or "").strip())

    @staticmethod
    def of_location(location: Location) -> "UserInput":
        return UserInput(location=location)

    @staticmethod
    def of_postback(data: str) -> "UserInput":
        return UserInput(postback=data)


@dataclass(frozen=True)
class InboundDirective:
    identity: str
    kind: EventKind
    reply_token: str | None = None
    text: str | None = None
    location: Location | None = None
    postback_data: str | None = None
    event_id: str | None = None

    def to_user_input(self) -> UserInput:
        if self.kind == EventKind.LOCATION and self.location is not None:
            return UserInput.of_location(self.location)
        if self.kind == EventKind.POSTBACK:
            return UserInput.of_postback(self.postback_data or "")
        return UserInput.of_text(self.text or "")
