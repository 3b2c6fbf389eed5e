# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for user_service."""

import uuid
from datetime import date, time

import pytest

from worktime.engine.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from worktime.models import UserRole
from worktime.services import user_service


def test_owner_context(db_session, owner_user, lead_user, office_user):
    user_service.lock_day(db_session, office_user, owner_user.id, date(2026, 8, 3))

    context = user_service.owner_context(db_session, owner_user)

    assert context.user_id == owner_user.id
    assert context.role == UserRole.INSTALLER
    assert context.approvers.responsible == {lead_user.id}
    assert context.locked_days == {date(2026, 8, 3)}


def test_owner_context_without_department(db_session, other_user):
    context = user_service.owner_context(db_session, other_user)
    assert context.approvers.responsible == frozenset()


def test_set_work_model(db_session, owner_user, other_user, office_user):
    rows = user_service.set_work_model(
        db_session, owner_user, owner_user.id, [(4, 6.0, time(7, 0))]
    )
    assert [(r.weekday, r.target_hours) for r in rows] == [(4, 6.0)]

    model = user_service.load_work_model(db_session, owner_user.id)
    assert model.target_for(4) == 6.0
    assert model.target_for(0) == 8.5
    assert model.start_times[4] == time(7, 0)

    user_service.set_work_model(
        db_session, office_user, owner_user.id, [(4, 5.0, None)]
    )
    assert user_service.load_work_model(db_session, owner_user.id).target_for(4) == 5

    with pytest.raises(PermissionDeniedError):
        user_service.set_work_model(
            db_session, other_user, owner_user.id, [(0, 8.0, None)]
        )
    with pytest.raises(ValidationError):
        user_service.set_work_model(
            db_session, owner_user, owner_user.id, [(7, 8.0, None)]
        )


def test_lock_and_unlock_day(db_session, owner_user, office_user):
    day = date(2026, 8, 3)
    first = user_service.lock_day(db_session, office_user, owner_user.id, day)
    second = user_service.lock_day(db_session, office_user, owner_user.id, day)
    assert first.id == second.id

    with pytest.raises(PermissionDeniedError):
        user_service.lock_day(db_session, owner_user, owner_user.id, day)
    with pytest.raises(PermissionDeniedError):
        user_service.unlock_day(db_session, owner_user, owner_user.id, day)

    user_service.unlock_day(db_session, office_user, owner_user.id, day)
    assert user_service.get_locked_days(db_session, owner_user.id) == frozenset()


def test_require_self_or_manager(db_session, owner_user, lead_user, other_user):
    found = user_service.require_self_or_manager(db_session, lead_user, owner_user.id)
    assert found.id == owner_user.id
    with pytest.raises(PermissionDeniedError):
        user_service.require_self_or_manager(db_session, other_user, owner_user.id)
    with pytest.raises(NotFoundError):
        user_service.require_self_or_manager(db_session, lead_user, uuid.uuid4())
