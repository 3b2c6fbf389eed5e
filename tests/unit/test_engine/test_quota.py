# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the yearly quota change workflow."""

import uuid
from datetime import datetime

import pytest

from worktime.engine.errors import (
    AlreadyConfirmedError,
    AlreadyRejectedError,
    ConcurrentModificationError,
    MissingReasonError,
    PermissionDeniedError,
    ValidationError,
)
from worktime.engine.quota import (
    propose_quota_change,
    quota_snapshot,
    respond_to_quota_notification,
)
from worktime.models import ChangeStatus, YearlyQuota

NOW = datetime(2026, 10, 19, 12, 0)
EMPLOYEE = uuid.uuid4()
OFFICE = uuid.uuid4()


@pytest.fixture
def quota():
    return YearlyQuota(
        id=uuid.uuid4(),
        user_id=EMPLOYEE,
        year=2026,
        base_days=30.0,
        carryover_days=0.0,
        is_locked=False,
    )


@pytest.fixture
def locked_quota(quota):
    quota.is_locked = True
    return quota


def test_snapshot():
    assert quota_snapshot(30, 2.5) == {"base": 30.0, "carryover": 2.5, "total": 32.5}


def test_unlocked_change_applies(quota):
    change = propose_quota_change(quota, OFFICE, 28, 3, "Part time", NOW)

    assert change.applied is True
    assert quota.base_days == 28
    assert quota.carryover_days == 3
    assert change.audit.previous_value["total"] == 30
    assert change.audit.new_value["total"] == 31
    assert change.audit.change_reason == "Part time"


def test_unchanged_value_is_noop(quota):
    change = propose_quota_change(quota, OFFICE, 30, 0, None, NOW)
    assert change.applied is False
    assert change.audit is None
    assert change.notification is None


def test_negative_values_rejected(quota):
    with pytest.raises(ValidationError):
        propose_quota_change(quota, OFFICE, -1, 0, None, NOW)


def test_locked_change_needs_employee(locked_quota):
    change = propose_quota_change(locked_quota, OFFICE, 25, 0, None, NOW)

    assert change.applied is False
    assert change.notification.status == ChangeStatus.PENDING
    assert change.notification.new_value["base"] == 25
    assert locked_quota.base_days == 30


def test_employee_changes_own_locked_quota(locked_quota):
    change = propose_quota_change(locked_quota, EMPLOYEE, 31, 0, None, NOW)
    assert change.applied is True


def test_accept_applies_and_locks(locked_quota):
    notification = propose_quota_change(
        locked_quota, OFFICE, 25, 0, None, NOW
    ).notification

    change = respond_to_quota_notification(
        notification, locked_quota, EMPLOYEE, True, None, NOW
    )

    assert change.applied is True
    assert locked_quota.base_days == 25
    assert locked_quota.is_locked is True
    assert notification.status == ChangeStatus.CONFIRMED
    assert change.audit.changed_by == OFFICE

    again = respond_to_quota_notification(
        notification, locked_quota, EMPLOYEE, True, None, NOW
    )
    assert again.applied is False

    with pytest.raises(AlreadyConfirmedError):
        respond_to_quota_notification(
            notification, locked_quota, EMPLOYEE, False, "Changed my mind", NOW
        )


def test_reject_requires_reason(locked_quota):
    notification = propose_quota_change(
        locked_quota, OFFICE, 25, 0, None, NOW
    ).notification

    with pytest.raises(MissingReasonError):
        respond_to_quota_notification(
            notification, locked_quota, EMPLOYEE, False, None, NOW
        )

    respond_to_quota_notification(
        notification, locked_quota, EMPLOYEE, False, "Contract says 30", NOW
    )
    assert notification.status == ChangeStatus.REJECTED
    assert notification.rejection_reason == "Contract says 30"
    assert locked_quota.base_days == 30

    with pytest.raises(AlreadyRejectedError):
        respond_to_quota_notification(
            notification, locked_quota, EMPLOYEE, True, None, NOW
        )


def test_only_employee_responds(locked_quota):
    notification = propose_quota_change(
        locked_quota, OFFICE, 25, 0, None, NOW
    ).notification
    with pytest.raises(PermissionDeniedError):
        respond_to_quota_notification(
            notification, locked_quota, OFFICE, True, None, NOW
        )


def test_stale_proposal(locked_quota):
    notification = propose_quota_change(
        locked_quota, OFFICE, 25, 0, None, NOW
    ).notification
    locked_quota.carryover_days = 4.0

    with pytest.raises(ConcurrentModificationError):
        respond_to_quota_notification(
            notification, locked_quota, EMPLOYEE, True, None, NOW
        )
    assert notification.status == ChangeStatus.PENDING
