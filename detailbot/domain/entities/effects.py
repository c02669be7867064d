from __future__ import annotations

from dataclasses import dataclass

from detailbot.domain.entities.booking import Booking


@dataclass(frozen=True)
class SuggestedReply:
    label: str
    value: str
    postback: bool = False  # sent as postback data instead of a text message


@dataclass(frozen=True)
class Prompt:
    text: str
    suggested_replies: tuple[SuggestedReply, ...] = ()
    expects_location: bool = False


@dataclass(frozen=True)
class Rejection:
    reason: str
    retry_prompt: Prompt


@dataclass(frozen=True)
class Completion:
    booking: Booking
    price: int


@dataclass(frozen=True)
class MenuEffect:
    notice: str | None = None


@dataclass(frozen=True)
class Handoff:
    notice: str


Effect = Prompt | Rejection | Completion | MenuEffect | Handoff
