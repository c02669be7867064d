from __future__ import annotations

import logging
import re

from detailbot.application.ports.booking_store import BookingStorePort
from detailbot.application.utils.input_rules import normalize_phone
from detailbot.domain.entities.booking import Booking


IDENTITY_TOKEN_RE = re.compile(r"^U[a-zA-Z0-9]{32,}$")


def looks_like_identity(query: str) -> bool:
    return bool(IDENTITY_TOKEN_RE.match(query))


class LookupResolver:
    """Locate a booking by platform identity or by contact phone."""

    def __init__(self, bookings: BookingStorePort) -> None:
        self._bookings = bookings
        self._logger = logging.getLogger(__name__)

    def find_booking(self, query: str) -> Booking | None:
        query = (query or "").strip()
        if not query:
            return None

        if looks_like_identity(query):
            found = self._bookings.get(query)
            if found is not None:
                return found

        found = self._bookings.find_by_phone(normalize_phone(query))
        if found is None:
            self._logger.info("Booking lookup missed", extra={"reason": "not_found"})
        return found
