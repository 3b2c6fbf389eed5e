# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the grace period policy and department approvers."""

import uuid
from datetime import date

from worktime.engine.grace import DepartmentApprovers, grace_cutoff, is_late
from worktime.models import Department

MONDAY = date(2026, 10, 19)


def test_cutoff_on_monday_lands_on_thursday():
    assert grace_cutoff(MONDAY) == date(2026, 10, 15)


def test_cutoff_midweek():
    assert grace_cutoff(date(2026, 10, 22)) == date(2026, 10, 20)


def test_zero_grace_is_today():
    assert grace_cutoff(MONDAY, 0) == MONDAY


def test_is_late():
    assert is_late(date(2026, 10, 14), MONDAY) is True
    assert is_late(date(2026, 10, 15), MONDAY) is False
    assert is_late(date(2026, 10, 25), MONDAY) is False


def test_approvers_without_department():
    approvers = DepartmentApprovers.from_department(None)
    assert approvers.responsible == frozenset()
    assert approvers.late == frozenset()


def test_approvers_from_department():
    responsible, substitute, extra = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    retro, retro_substitute = uuid.uuid4(), uuid.uuid4()
    department = Department(
        id="field",
        label="Field",
        responsible_user_id=responsible,
        substitute_user_id=substitute,
        is_substitute_active=False,
        additional_responsible_ids=[str(extra), "not-a-uuid"],
        retro_responsible_user_id=retro,
        retro_substitute_user_id=retro_substitute,
        is_retro_substitute_active=False,
    )

    approvers = DepartmentApprovers.from_department(department)
    assert approvers.responsible == {responsible, extra}
    assert approvers.late == {retro}

    department.is_substitute_active = True
    department.is_retro_substitute_active = True
    approvers = DepartmentApprovers.from_department(department)
    assert approvers.responsible == {responsible, substitute, extra}
    assert approvers.late == {retro_substitute}
