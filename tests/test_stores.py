"""
Tests for the in-memory stores, the phone index and booking lookup.
"""

from __future__ import annotations

from detailbot.application.use_cases.lookup import LookupResolver, looks_like_identity
from detailbot.domain.entities.booking import Booking, TimeSlot
from detailbot.domain.entities.service_catalog import VehicleClass
from detailbot.domain.entities.session import BookingStep, FlowKind, Session
from detailbot.domain.entities.user_memory import UserMemory
from detailbot.infrastructure.store.memory_store import (
    MemoryBookingStore,
    MemorySessionStore,
    MemoryUserMemoryStore,
    PhoneIndex,
)


FIRST = "U" + "1" * 32
SECOND = "U" + "2" * 32


def _booking(owner: str, phone: str, date: str = "2025-06-01") -> Booking:
    return Booking(
        owner_identity=owner,
        phone=phone,
        category="清潔養護",
        sub_service="基礎洗車",
        vehicle_class=VehicleClass.SMALL,
        date=date,
        time_slot=TimeSlot.MORNING,
    )


def test_phone_index_reassign_evicts_previous_owner():
    index = PhoneIndex()
    assert index.reassign("0912345678", FIRST) == []
    assert index.lookup("0912345678") == FIRST

    assert index.reassign("0912345678", SECOND) == [FIRST]
    assert index.lookup("0912345678") == SECOND
    assert len(index) == 1


def test_phone_index_moves_owner_to_new_phone():
    index = PhoneIndex()
    index.reassign("0911111111", FIRST)
    index.reassign("0922222222", FIRST)
    assert index.lookup("0911111111") is None
    assert index.lookup("0922222222") == FIRST


def test_phone_index_remove_only_drops_own_mapping():
    index = PhoneIndex()
    index.reassign("0912345678", FIRST)
    index.reassign("0912345678", SECOND)
    index.remove(FIRST)
    assert index.lookup("0912345678") == SECOND
    index.remove(SECOND)
    assert index.lookup("0912345678") is None


def test_shared_phone_keeps_other_booking():
    """A newer owner of a phone takes over phone lookups; the older booking survives."""
    store = MemoryBookingStore()
    first = _booking(FIRST, "0912345678")
    second = _booking(SECOND, "0912345678", date="2025-07-01")

    store.put(first)
    evicted = store.put(second)

    assert evicted == [FIRST]
    assert store.get(FIRST) == first
    assert store.find_by_phone("0912345678") == second
    assert len(store) == 2


def test_update_schedule_leaves_phone_index_alone():
    store = MemoryBookingStore()
    store.put(_booking(FIRST, "0912345678"))
    store.put(_booking(SECOND, "0912345678"))

    updated = store.update_schedule(FIRST, date="2025-08-08", time_slot=TimeSlot.EVENING)

    assert updated.date == "2025-08-08"
    assert store.get(FIRST).time_slot == TimeSlot.EVENING
    assert store.find_by_phone("0912345678").owner_identity == SECOND
    assert store.update_schedule("U" + "9" * 32, date="2025-08-08", time_slot=TimeSlot.EVENING) is None


def test_booking_store_replace_and_delete():
    store = MemoryBookingStore()
    store.put(_booking(FIRST, "0912345678"))
    store.put(_booking(FIRST, "0912345678", date="2025-12-31"))
    assert len(store) == 1
    assert store.get(FIRST).date == "2025-12-31"

    assert store.delete(FIRST) is True
    assert store.delete(FIRST) is False
    assert store.find_by_phone("0912345678") is None


def test_session_store_roundtrip():
    store = MemorySessionStore()
    session = Session(flow=FlowKind.BOOKING, step=BookingStep.DATE)
    store.put(FIRST, session)
    assert store.get(FIRST) == session
    store.delete(FIRST)
    store.delete(FIRST)
    assert store.get(FIRST) is None


def test_user_memory_is_overwritten_not_merged():
    store = MemoryUserMemoryStore()
    store.put(FIRST, UserMemory(phone="0912345678", license_plate="ABC-1234", pickup_location="台北"))
    store.put(FIRST, UserMemory(phone="0987654321", license_plate="", pickup_location=""))
    assert store.get(FIRST) == UserMemory(phone="0987654321", license_plate="", pickup_location="")


def test_lookup_by_identity_then_phone():
    store = MemoryBookingStore()
    booking = _booking(FIRST, "0912345678")
    store.put(booking)
    resolver = LookupResolver(store)

    assert resolver.find_booking(FIRST) == booking
    assert resolver.find_booking("0912345678") == booking
    assert resolver.find_booking(" 0912-345-678 ") == booking


def test_lookup_has_no_partial_matching():
    store = MemoryBookingStore()
    store.put(_booking(FIRST, "0912345678"))
    resolver = LookupResolver(store)

    assert resolver.find_booking("345678") is None
    assert resolver.find_booking("") is None
    assert resolver.find_booking(SECOND) is None


def test_identity_token_shape():
    assert looks_like_identity(FIRST)
    assert not looks_like_identity("0912345678")
    assert not looks_like_identity("U123")
