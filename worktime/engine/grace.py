# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Grace period policy for retroactive entries."""

import uuid as uuid_lib
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

DEFAULT_GRACE_WORKING_DAYS = 2


def grace_cutoff(today: date, working_days: int = DEFAULT_GRACE_WORKING_DAYS) -> date:
    """Calculate the earliest date that can be entered without justification.

    Steps back one calendar day at a time. Weekend days are skipped without
    consuming the budget, each weekday consumes one day of it.

    Args:
        today: Reference date.
        working_days: Number of working days of grace.

    Returns:
        The cutoff date. Entries strictly before it are late.
    """
    cutoff = today
    remaining = working_days
    while remaining > 0:
        cutoff -= timedelta(days=1)
        if cutoff.weekday() < 5:
            remaining -= 1
    return cutoff


def is_late(
    day: date, today: date, working_days: int = DEFAULT_GRACE_WORKING_DAYS
) -> bool:
    """Check whether an entry for the given day needs the late entry path."""
    return day < grace_cutoff(today, working_days)


@dataclass(frozen=True)
class DepartmentApprovers:
    """Users with review authority over the members of one department."""

    responsible: frozenset[uuid_lib.UUID] = field(default_factory=frozenset)
    late: frozenset[uuid_lib.UUID] = field(default_factory=frozenset)

    @classmethod
    def from_department(cls, department: Any | None) -> "DepartmentApprovers":
        """Build the approver sets from a department record.

        Office review may be done by the responsible user, the active substitute
        and every additional responsible. Late entries are approved by the retro
        substitute when that substitution is active, otherwise by the retro
        responsible.
        """
        if department is None:
            return cls()

        responsible: set[uuid_lib.UUID] = set()
        if department.responsible_user_id:
            responsible.add(department.responsible_user_id)
        if department.is_substitute_active and department.substitute_user_id:
            responsible.add(department.substitute_user_id)
        for raw in department.additional_responsible_ids or []:
            try:
                responsible.add(uuid_lib.UUID(str(raw)))
            except ValueError:
                continue

        late: set[uuid_lib.UUID] = set()
        if (
            department.is_retro_substitute_active
            and department.retro_substitute_user_id
        ):
            late.add(department.retro_substitute_user_id)
        elif department.retro_responsible_user_id:
            late.add(department.retro_responsible_user_id)

        return cls(responsible=frozenset(responsible), late=frozenset(late))
