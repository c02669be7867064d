from __future__ import annotations

from dataclasses import replace

from detailbot.domain.entities.session import (
    BookingStep,
    ChangeStep,
    Draft,
    FlowKind,
    PriceStep,
    Session,
    Step,
)

# Draft fields carried from a finished flow into the flow it seeds.
CARRYOVER_FIELDS: dict[tuple[FlowKind, FlowKind], tuple[str, ...]] = {
    (FlowKind.PRICE_INQUIRY, FlowKind.BOOKING): ("category", "sub_service", "vehicle_class"),
    (FlowKind.CHANGE_BOOKING, FlowKind.BOOKING): (),
}

# Step the seeded flow starts at.
ENTRY_STEPS: dict[tuple[FlowKind, FlowKind], Step] = {
    (FlowKind.PRICE_INQUIRY, FlowKind.BOOKING): BookingStep.LICENSE_PLATE,
    (FlowKind.CHANGE_BOOKING, FlowKind.BOOKING): BookingStep.CATEGORY,
}

FIRST_STEPS: dict[FlowKind, Step] = {
    FlowKind.BOOKING: BookingStep.CATEGORY,
    FlowKind.PRICE_INQUIRY: PriceStep.CATEGORY,
    FlowKind.CHANGE_BOOKING: ChangeStep.VERIFY,
}


def start_session(flow: FlowKind) -> Session:
    return Session(flow=flow, step=FIRST_STEPS[flow])


def transition(session: Session, target: FlowKind) -> Session:
    """
    Seed a new session of kind target from the terminal state of session.
    Only the listed carry-over fields survive; editing_on_behalf_of is kept.
    """
    key = (session.flow, target)
    if key not in CARRYOVER_FIELDS:
        raise ValueError(f"No transition from {session.flow.value} to {target.value}")

    carried = {name: getattr(session.draft, name) for name in CARRYOVER_FIELDS[key]}
    return Session(
        flow=target,
        step=ENTRY_STEPS[key],
        draft=Draft(**carried),
        editing_on_behalf_of=session.editing_on_behalf_of,
    )


def with_step(session: Session, step: Step, **draft_changes: object) -> Session:
    """Copy of session at step, with draft fields updated."""
    draft = replace(session.draft, **draft_changes) if draft_changes else session.draft
    return replace(session, step=step, draft=draft)
