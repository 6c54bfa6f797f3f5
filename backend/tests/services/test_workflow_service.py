"""Tests for the appointment workflow engine."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import OperationalError

from groomflow.core.errors import (
    InvalidStateError,
    KennelOccupiedError,
    NotFoundError,
    StorageError,
)
from groomflow.models import AppointmentStatus, PaymentMethod
from groomflow.services import (
    appointment_service,
    audit_service,
    change_feed,
    kennel_service,
    payment_service,
    workflow_service,
)

pytestmark = pytest.mark.asyncio

ACTOR = "Jamie Trim"


async def _book(session, salon, *, pet: str = "medium"):
    return await appointment_service.create_appointment(
        session,
        salon_id=salon["salon_id"],
        client_id=salon["client_id"],
        pet_id=salon["pet_ids"][pet],
        scheduled_at=datetime(2026, 10, 17, 9, 0, tzinfo=UTC),
        service_ids=[salon["service_ids"]["bath"]],
    )


async def _kennel(session, salon, number: str):
    return await kennel_service.get_kennel_by_number(
        session, salon_id=salon["salon_id"], kennel_number=number
    )


async def _reload(session, salon, appointment_id):
    return await appointment_service.get_appointment(
        session, salon_id=salon["salon_id"], appointment_id=appointment_id
    )


async def _walk_to_ready(session, salon, appointment_id, *, kennel: str | None = None):
    salon_id = salon["salon_id"]
    await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment_id,
        actor_name=ACTOR,
        kennel_number=kennel,
    )
    await workflow_service.start_service(
        session, salon_id=salon_id, appointment_id=appointment_id, actor_name=ACTOR
    )
    return await workflow_service.mark_ready_for_pickup(
        session, salon_id=salon_id, appointment_id=appointment_id, actor_name=ACTOR
    )


async def test_medium_pet_full_visit(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon, pet="medium")

    available = await kennel_service.list_available_kennels(
        session, salon_id=salon_id, appointment_id=appointment.id
    )
    assert [kennel.kennel_number for kennel in available] == ["K2", "K3"]

    checked_in = await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=ACTOR,
        kennel_number="K2",
        kennel_notes="Bring blanket",
    )
    assert checked_in.status == AppointmentStatus.CHECKED_IN
    assert checked_in.check_in_time is not None
    assert checked_in.checked_in_by == ACTOR
    assert checked_in.kennel_number == "K2"
    assert checked_in.kennel_notes == "Bring blanket"
    kennel = await _kennel(session, salon, "K2")
    assert kennel.is_occupied is True
    assert kennel.current_appointment_id == appointment.id

    started = await workflow_service.start_service(
        session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
    )
    assert started.status == AppointmentStatus.IN_PROGRESS

    ready = await workflow_service.mark_ready_for_pickup(
        session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
    )
    assert ready.status == AppointmentStatus.READY_FOR_PICKUP

    done = await workflow_service.check_out(
        session, salon_id=salon_id, appointment_id=appointment.id, actor_name="Casey Manager"
    )
    assert done.status == AppointmentStatus.COMPLETED
    assert done.check_out_time is not None
    assert done.checked_out_by == "Casey Manager"
    assert done.checked_in_by == ACTOR

    kennel = await _kennel(session, salon, "K2")
    assert kennel.is_occupied is False
    assert kennel.current_appointment_id is None


async def test_completed_appointment_rejects_every_transition(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    await _walk_to_ready(session, salon, appointment.id, kennel="K2")
    await workflow_service.check_out(
        session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
    )

    attempts = [
        workflow_service.check_in(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        ),
        workflow_service.start_service(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        ),
        workflow_service.mark_ready_for_pickup(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        ),
        workflow_service.check_out(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        ),
        workflow_service.set_status(
            session,
            salon_id=salon_id,
            appointment_id=appointment.id,
            status=AppointmentStatus.CANCELLED,
            actor_name=ACTOR,
        ),
        workflow_service.set_status(
            session,
            salon_id=salon_id,
            appointment_id=appointment.id,
            status=AppointmentStatus.ON_HOLD,
            actor_name=ACTOR,
        ),
    ]
    for attempt in attempts:
        with pytest.raises(InvalidStateError):
            await attempt

    refreshed = await _reload(session, salon, appointment.id)
    assert refreshed.status == AppointmentStatus.COMPLETED


async def test_start_service_on_appointment_completed_by_payment(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    await payment_service.record_payment(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        amount="60.00",
        payment_method=PaymentMethod.CASH,
    )

    with pytest.raises(InvalidStateError):
        await workflow_service.start_service(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        )
    refreshed = await _reload(session, salon, appointment.id)
    assert refreshed.status == AppointmentStatus.COMPLETED


async def test_steps_must_follow_the_lifecycle(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)

    with pytest.raises(InvalidStateError):
        await workflow_service.start_service(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        )
    with pytest.raises(InvalidStateError):
        await workflow_service.mark_ready_for_pickup(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        )
    with pytest.raises(InvalidStateError):
        await workflow_service.check_out(
            session, salon_id=salon_id, appointment_id=appointment.id, actor_name=ACTOR
        )
    refreshed = await _reload(session, salon, appointment.id)
    assert refreshed.status == AppointmentStatus.SCHEDULED


async def test_on_hold_appointment_must_be_confirmed_before_check_in(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    await workflow_service.set_status(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        status=AppointmentStatus.ON_HOLD,
        actor_name=ACTOR,
    )
    with pytest.raises(InvalidStateError):
        await workflow_service.check_in(
            session,
            salon_id=salon_id,
            appointment_id=appointment.id,
            actor_name=ACTOR,
            kennel_number="K2",
        )
    kennel = await _kennel(session, salon, "K2")
    assert kennel.is_occupied is False

    await workflow_service.set_status(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        status=AppointmentStatus.CONFIRMED,
        actor_name=ACTOR,
    )
    checked_in = await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=ACTOR,
        kennel_number="K2",
    )
    assert checked_in.status == AppointmentStatus.CHECKED_IN
    assert not workflow_service.can_transition(
        AppointmentStatus.ON_HOLD, AppointmentStatus.CHECKED_IN
    )


async def test_check_in_without_kennel(session, salon) -> None:
    appointment = await _book(session, salon)
    checked_in = await workflow_service.check_in(
        session,
        salon_id=salon["salon_id"],
        appointment_id=appointment.id,
        actor_name=ACTOR,
    )
    assert checked_in.status == AppointmentStatus.CHECKED_IN
    assert checked_in.kennel_number is None
    kennels = await kennel_service.list_kennels(session, salon_id=salon["salon_id"])
    assert not any(kennel.is_occupied for kennel in kennels)


async def test_check_in_unknown_kennel_leaves_appointment_untouched(session, salon) -> None:
    appointment = await _book(session, salon)
    with pytest.raises(NotFoundError):
        await workflow_service.check_in(
            session,
            salon_id=salon["salon_id"],
            appointment_id=appointment.id,
            actor_name=ACTOR,
            kennel_number="K99",
        )
    refreshed = await _reload(session, salon, appointment.id)
    assert refreshed.status == AppointmentStatus.SCHEDULED
    assert refreshed.check_in_time is None
    assert refreshed.kennel_number is None


async def test_kennel_held_by_another_appointment_is_rejected(session, salon) -> None:
    salon_id = salon["salon_id"]
    first = await _book(session, salon)
    second = await _book(session, salon, pet="large")
    await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=first.id,
        actor_name=ACTOR,
        kennel_number="K3",
    )

    with pytest.raises(KennelOccupiedError):
        await workflow_service.check_in(
            session,
            salon_id=salon_id,
            appointment_id=second.id,
            actor_name=ACTOR,
            kennel_number="K3",
        )

    kennel = await _kennel(session, salon, "K3")
    assert kennel.current_appointment_id == first.id
    refreshed = await _reload(session, salon, second.id)
    assert refreshed.status == AppointmentStatus.SCHEDULED
    assert refreshed.check_in_time is None


async def test_kennel_reusable_after_check_out(session, salon) -> None:
    salon_id = salon["salon_id"]
    first = await _book(session, salon)
    second = await _book(session, salon)
    await _walk_to_ready(session, salon, first.id, kennel="K2")
    await workflow_service.check_out(
        session, salon_id=salon_id, appointment_id=first.id, actor_name=ACTOR
    )
    kennel = await _kennel(session, salon, "K2")
    assert kennel.is_occupied is False

    checked_in = await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=second.id,
        actor_name=ACTOR,
        kennel_number="K2",
    )
    assert checked_in.kennel_number == "K2"
    kennel = await _kennel(session, salon, "K2")
    assert kennel.current_appointment_id == second.id


async def test_re_check_in_moves_kennel_and_keeps_first_stamp(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    first = await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=ACTOR,
        kennel_number="K2",
    )
    stamp = first.check_in_time

    moved = await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name="Someone Else",
        kennel_number="K3",
    )
    assert moved.kennel_number == "K3"
    assert moved.check_in_time == stamp
    assert moved.checked_in_by == ACTOR

    old = await _kennel(session, salon, "K2")
    new = await _kennel(session, salon, "K3")
    assert old.is_occupied is False
    assert new.is_occupied is True
    assert new.current_appointment_id == appointment.id


async def test_size_mismatch_is_logged_not_rejected(session, salon, caplog) -> None:
    appointment = await _book(session, salon, pet="large")
    with caplog.at_level(logging.WARNING, logger="groomflow.services.workflow_service"):
        checked_in = await workflow_service.check_in(
            session,
            salon_id=salon["salon_id"],
            appointment_id=appointment.id,
            actor_name=ACTOR,
            kennel_number="K1",
        )
    assert checked_in.kennel_number == "K1"
    assert "does not match pet size" in caplog.text


async def test_cancelling_checked_in_appointment_frees_kennel(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=ACTOR,
        kennel_number="K2",
    )
    cancelled = await workflow_service.set_status(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        status=AppointmentStatus.CANCELLED,
        actor_name=ACTOR,
    )
    assert cancelled.status == AppointmentStatus.CANCELLED
    kennel = await _kennel(session, salon, "K2")
    assert kennel.is_occupied is False
    assert kennel.current_appointment_id is None


async def test_set_status_confirm_hold_and_reopen(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    for target in (
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.ON_HOLD,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.CONFIRMED,
    ):
        updated = await workflow_service.set_status(
            session,
            salon_id=salon_id,
            appointment_id=appointment.id,
            status=target,
            actor_name=ACTOR,
        )
        assert updated.status == target


@pytest.mark.parametrize(
    "target",
    [
        AppointmentStatus.CHECKED_IN,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.SCHEDULED,
    ],
)
async def test_set_status_only_accepts_front_desk_statuses(session, salon, target) -> None:
    appointment = await _book(session, salon)
    with pytest.raises(ValueError):
        await workflow_service.set_status(
            session,
            salon_id=salon["salon_id"],
            appointment_id=appointment.id,
            status=target,
            actor_name=ACTOR,
        )


async def test_notes_are_appended_in_order(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    await workflow_service.add_note(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        text="Nervous around dryers",
        actor_name=ACTOR,
    )
    updated = await workflow_service.add_note(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        text="Owner will be late",
        actor_name=ACTOR,
    )

    entries = updated.notes.split("\n\n")
    assert len(entries) == 2
    assert re.fullmatch(r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2} UTC\] Nervous around dryers", entries[0])
    assert entries[1].endswith("] Owner will be late")
    assert updated.status == AppointmentStatus.SCHEDULED


async def test_note_appends_to_booking_notes(session, salon) -> None:
    appointment = await appointment_service.create_appointment(
        session,
        salon_id=salon["salon_id"],
        client_id=salon["client_id"],
        pet_id=salon["pet_ids"]["small"],
        scheduled_at=datetime(2026, 10, 18, 9, 0, tzinfo=UTC),
        service_ids=[salon["service_ids"]["nails"]],
        notes="Booked by phone",
    )
    updated = await workflow_service.add_note(
        session,
        salon_id=salon["salon_id"],
        appointment_id=appointment.id,
        text="Confirmed by text",
        actor_name=ACTOR,
    )
    assert updated.notes.startswith("Booked by phone\n\n[")


async def test_blank_note_is_rejected(session, salon) -> None:
    appointment = await _book(session, salon)
    with pytest.raises(ValueError):
        await workflow_service.add_note(
            session,
            salon_id=salon["salon_id"],
            appointment_id=appointment.id,
            text="   ",
            actor_name=ACTOR,
        )


async def test_transitions_write_audit_events(session, salon) -> None:
    salon_id = salon["salon_id"]
    appointment = await _book(session, salon)
    await workflow_service.check_in(
        session,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=ACTOR,
        kennel_number="K2",
    )
    events = await audit_service.list_events_for_appointment(
        session, salon_id=salon_id, appointment_id=appointment.id
    )
    assert [event.event_type for event in events] == ["appointment.check_in"]
    assert events[0].actor_name == ACTOR
    assert events[0].payload == {"from": "scheduled", "to": "checked_in", "kennel_number": "K2"}


async def test_committed_transition_is_published_to_same_salon_only(
    session, salon, salon_factory
) -> None:
    other = await salon_factory(session)
    mine = change_feed.subscribe(salon["salon_id"])
    theirs = change_feed.subscribe(other["salon_id"])

    appointment = await _book(session, salon)
    mine.drain()
    await workflow_service.check_in(
        session,
        salon_id=salon["salon_id"],
        appointment_id=appointment.id,
        actor_name=ACTOR,
        kennel_number="K2",
    )

    events = mine.drain()
    assert len(events) == 1
    event = events[0]
    assert event.operation == "appointment.check_in"
    assert event.record_id == appointment.id
    assert event.old_status == "scheduled"
    assert event.new_status == "checked_in"
    assert "kennels" in event.invalidates
    assert theirs.drain() == []


async def test_failed_commit_rolls_back_kennel_claim(session, salon, monkeypatch) -> None:
    appointment = await _book(session, salon)
    subscription = change_feed.subscribe(salon["salon_id"])

    async def _failing_commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", _failing_commit)
    with pytest.raises(StorageError):
        await workflow_service.check_in(
            session,
            salon_id=salon["salon_id"],
            appointment_id=appointment.id,
            actor_name=ACTOR,
            kennel_number="K2",
        )
    monkeypatch.undo()

    kennel = await _kennel(session, salon, "K2")
    assert kennel.is_occupied is False
    refreshed = await _reload(session, salon, appointment.id)
    assert refreshed.status == AppointmentStatus.SCHEDULED
    assert subscription.drain() == []
