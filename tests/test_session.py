"""
Tests for session invariants and flow transitions.
"""

from __future__ import annotations

import pytest

from detailbot.application.utils.flow_transition import start_session, transition
from detailbot.domain.entities.service_catalog import VehicleClass
from detailbot.domain.entities.session import (
    BookingStep,
    ChangeStep,
    Draft,
    FlowKind,
    PriceStep,
    Session,
)


def test_step_must_belong_to_flow():
    with pytest.raises(ValueError):
        Session(flow=FlowKind.BOOKING, step=PriceStep.CATEGORY)
    with pytest.raises(ValueError):
        Session(flow=FlowKind.CHANGE_BOOKING, step=BookingStep.DATE)


def test_start_session_first_steps():
    assert start_session(FlowKind.BOOKING).step == BookingStep.CATEGORY
    assert start_session(FlowKind.PRICE_INQUIRY).step == PriceStep.CATEGORY
    assert start_session(FlowKind.CHANGE_BOOKING).step == ChangeStep.VERIFY


def test_price_to_booking_carries_service_fields_only():
    priced = Session(
        flow=FlowKind.PRICE_INQUIRY,
        step=PriceStep.PRICE_SHOWN,
        draft=Draft(category="清潔養護", sub_service="高級洗車", vehicle_class=VehicleClass.SEDAN, phone="0912345678"),
    )
    seeded = transition(priced, FlowKind.BOOKING)
    assert seeded.flow == FlowKind.BOOKING
    assert seeded.step == BookingStep.LICENSE_PLATE
    assert seeded.draft == Draft(category="清潔養護", sub_service="高級洗車", vehicle_class=VehicleClass.SEDAN)


def test_change_to_booking_keeps_owner_and_clears_draft():
    located = Session(
        flow=FlowKind.CHANGE_BOOKING,
        step=ChangeStep.OPTIONS,
        draft=Draft(date="2025-01-01"),
        editing_on_behalf_of="U" + "a" * 32,
    )
    seeded = transition(located, FlowKind.BOOKING)
    assert seeded.step == BookingStep.CATEGORY
    assert seeded.draft == Draft()
    assert seeded.editing_on_behalf_of == "U" + "a" * 32


def test_unsupported_transition():
    with pytest.raises(ValueError):
        transition(start_session(FlowKind.BOOKING), FlowKind.PRICE_INQUIRY)
