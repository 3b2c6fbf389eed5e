# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for entry_service."""

import uuid
from datetime import date, time
from decimal import Decimal

import pytest

from worktime.engine.errors import (
    ConcurrentModificationError,
    DayLockedError,
    MissingReasonError,
    NotFoundError,
    PermissionDeniedError,
)
from worktime.engine.lifecycle import OwnerAction, compute_status
from worktime.events import ChangeEvent, event_bus
from worktime.models import ChangeStatus, EntryCategory, EntryStatus, LockedDay
from worktime.schemas.entry import EntryCreate
from worktime.services import entry_service

DAY = date(2026, 10, 19)


@pytest.fixture
def recorded_events():
    """Collect entry change events published during a test."""
    received = []
    event_bus.subscribe(ChangeEvent.ENTRY_CHANGED, received.append, "test")
    yield received
    event_bus.unsubscribe_subscriber("test")


def create(db_session, actor, **values):
    """Helper to create an entry dated DAY."""
    data = {
        "date": DAY,
        "category": EntryCategory.WORK,
        "description": "Boiler service",
        "start_time": time(7, 0),
        "end_time": time(15, 30),
    }
    data.update(values)
    return entry_service.create_entry(db_session, actor, EntryCreate(**data), DAY)


def test_create_entry(db_session, owner_user, recorded_events):
    entry = create(db_session, owner_user)

    assert entry.user_id == owner_user.id
    assert entry.hours == Decimal("8.50")
    assert entry.version == 1
    assert compute_status(entry) == EntryStatus.ACTIVE
    assert recorded_events[0].user_id == owner_user.id
    assert recorded_events[0].data["action"] == "created"


def test_create_for_other_user_by_manager(db_session, owner_user, lead_user):
    entry = create(db_session, lead_user, user_id=owner_user.id)
    assert entry.user_id == owner_user.id
    assert entry.created_by == lead_user.id


def test_create_for_other_user_denied(db_session, owner_user, other_user):
    with pytest.raises(PermissionDeniedError):
        create(db_session, other_user, user_id=owner_user.id)
    assert entry_service.get_entries(db_session, owner_user.id) == []


def test_create_on_locked_day(db_session, owner_user, office_user):
    db_session.add(LockedDay(user_id=owner_user.id, date=DAY, locked_by=office_user.id))
    db_session.commit()
    with pytest.raises(DayLockedError):
        create(db_session, owner_user)


def test_get_entries_range_and_deleted(db_session, owner_user):
    first = create(db_session, owner_user)
    create(db_session, owner_user, date=date(2026, 10, 20))
    entry_service.request_deletion(db_session, first.id, owner_user, "Duplicate")

    assert len(entry_service.get_entries(db_session, owner_user.id)) == 1
    assert len(entry_service.get_entries(db_session, owner_user.id, DAY, DAY)) == 0
    assert (
        len(entry_service.get_entries(db_session, owner_user.id, include_deleted=True))
        == 2
    )


def test_confirm_bumps_version(db_session, owner_user, lead_user, recorded_events):
    entry = create(db_session, owner_user, category=EntryCategory.COMPANY)
    confirmed = entry_service.confirm_entry(db_session, entry.id, lead_user, 1)

    assert confirmed.confirmed_by == lead_user.id
    assert confirmed.version == 2
    assert recorded_events[-1].data["action"] == "confirm"


def test_stale_version_rejected(db_session, owner_user, lead_user):
    entry = create(db_session, owner_user, category=EntryCategory.COMPANY)
    entry_service.confirm_entry(db_session, entry.id, lead_user, 1)

    with pytest.raises(ConcurrentModificationError):
        entry_service.reject_entry(db_session, entry.id, lead_user, "Wrong", 1)


def test_refused_transition_leaves_entry_untouched(db_session, owner_user, lead_user):
    entry = create(db_session, owner_user, category=EntryCategory.COMPANY)
    with pytest.raises(MissingReasonError):
        entry_service.reject_entry(db_session, entry.id, lead_user, None)

    fresh = entry_service.get_entry(db_session, entry.id)
    assert fresh.rejected_at is None
    assert fresh.version == 1


def test_unknown_entry(db_session, owner_user):
    with pytest.raises(NotFoundError):
        entry_service.confirm_entry(db_session, uuid.uuid4(), owner_user)


def test_manager_edit_and_owner_revert(db_session, owner_user, lead_user):
    entry = create(db_session, owner_user)
    entry_service.confirm_entry(db_session, entry.id, lead_user)

    edited = entry_service.edit_entry(
        db_session,
        entry.id,
        lead_user,
        {"hours": Decimal("6")},
        "Left early",
    )
    assert compute_status(edited) == EntryStatus.EDIT_PENDING_OWNER_ACK
    assert edited.hours == Decimal("6")
    pending = entry_service.get_pending_history(db_session, entry.id)
    assert len(pending) == 1

    notifications = entry_service.owner_notifications(db_session, owner_user.id)
    assert notifications == [(edited, OwnerAction.EDIT_ACKNOWLEDGEMENT)]

    reverted = entry_service.respond_to_edit(
        db_session, entry.id, owner_user, False, "I stayed"
    )
    assert reverted.hours == Decimal("8.50")
    assert compute_status(reverted) == EntryStatus.CONFIRMED
    history = entry_service.get_history(db_session, entry.id)
    assert [h.status for h in history] == [ChangeStatus.REJECTED]
    assert entry_service.owner_notifications(db_session, owner_user.id) == []


def test_deletion_request_flow(db_session, owner_user, lead_user):
    entry = create(db_session, owner_user)
    entry_service.confirm_entry(db_session, entry.id, lead_user)

    requested = entry_service.request_deletion(
        db_session, entry.id, lead_user, "Entered twice"
    )
    assert compute_status(requested) == EntryStatus.DELETION_REQUESTED

    withdrawn = entry_service.withdraw_deletion(db_session, entry.id, owner_user)
    assert compute_status(withdrawn) == EntryStatus.CONFIRMED

    entry_service.request_deletion(db_session, entry.id, lead_user, "Entered twice")
    deleted = entry_service.confirm_deletion(db_session, entry.id, owner_user)
    assert deleted.is_deleted is True
    assert deleted.deletion_reason == "Entered twice"


def test_direct_deletion_needs_acknowledgement(db_session, owner_user, office_user):
    entry = create(db_session, owner_user)
    entry_service.delete_entry_directly(db_session, entry.id, office_user, "Cleanup")

    notifications = entry_service.owner_notifications(db_session, owner_user.id)
    assert notifications[0][1] == OwnerAction.DELETION_ACKNOWLEDGEMENT

    entry_service.acknowledge_deletion(db_session, entry.id, owner_user)
    assert entry_service.owner_notifications(db_session, owner_user.id) == []


def test_review_queue(db_session, owner_user, lead_user, apprentice_user, office_user):
    office_entry = create(db_session, owner_user, category=EntryCategory.CAR)
    create(db_session, owner_user)
    peer_entry = create(db_session, apprentice_user, reviewer_id=owner_user.id)

    lead_queue = entry_service.review_queue(db_session, lead_user)
    assert [e.id for e in lead_queue] == [office_entry.id]

    office_queue = entry_service.review_queue(db_session, office_user)
    assert [e.id for e in office_queue] == [office_entry.id]

    owner_queue = entry_service.review_queue(db_session, owner_user)
    assert [e.id for e in owner_queue] == [peer_entry.id]

    entry_service.confirm_entry(db_session, office_entry.id, lead_user)
    assert entry_service.review_queue(db_session, lead_user) == []


def test_overtime_reduction_in_review_queue(db_session, owner_user, lead_user):
    entry = create(
        db_session,
        owner_user,
        category=EntryCategory.OVERTIME_REDUCTION,
        description=None,
        start_time=None,
        end_time=None,
        hours=Decimal("4"),
    )
    assert compute_status(entry) == EntryStatus.PENDING_OFFICE_REVIEW

    queue = entry_service.review_queue(db_session, lead_user)
    assert [e.id for e in queue] == [entry.id]

    confirmed = entry_service.confirm_entry(db_session, entry.id, lead_user)
    assert confirmed.confirmed_at.tzinfo is None
    assert compute_status(confirmed) == EntryStatus.CONFIRMED


def test_submit_entries(db_session, owner_user, other_user, recorded_events):
    first = create(db_session, owner_user)
    second = create(db_session, owner_user, date=date(2026, 10, 20))

    changed = entry_service.submit_entries(
        db_session, owner_user, owner_user.id, [first.id, second.id]
    )
    assert {e.id for e in changed} == {first.id, second.id}
    assert recorded_events[-1].data["action"] == "submit"

    # Already submitted entries are not changed again
    assert (
        entry_service.submit_entries(db_session, owner_user, owner_user.id, [first.id])
        == []
    )

    with pytest.raises(PermissionDeniedError):
        entry_service.submit_entries(
            db_session, other_user, owner_user.id, [first.id]
        )
    with pytest.raises(NotFoundError):
        entry_service.submit_entries(
            db_session, owner_user, owner_user.id, [uuid.uuid4()]
        )
