# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Yearly quota change workflow.

Changing a locked quota of another user does not apply the change. It creates
a notification the employee has to confirm, or reject with a reason.
"""

import uuid as uuid_lib
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from worktime.engine.errors import (
    AlreadyConfirmedError,
    AlreadyRejectedError,
    ConcurrentModificationError,
    MissingReasonError,
    PermissionDeniedError,
    ValidationError,
)
from worktime.models.enums import ChangeStatus
from worktime.models.quota import QuotaAuditLog, QuotaChangeNotification, YearlyQuota


@dataclass
class QuotaChange:
    """Outcome of a quota change attempt."""

    applied: bool
    audit: QuotaAuditLog | None = None
    notification: QuotaChangeNotification | None = None


def quota_snapshot(base_days: float, carryover_days: float) -> dict[str, Any]:
    """Build the JSON snapshot stored in audit logs and notifications."""
    base = round(float(base_days or 0), 2)
    carryover = round(float(carryover_days or 0), 2)
    return {"base": base, "carryover": carryover, "total": round(base + carryover, 2)}


def _apply(
    quota: YearlyQuota,
    new_value: dict[str, Any],
    changed_by: uuid_lib.UUID,
    reason: str | None,
    now: datetime,
) -> QuotaAuditLog:
    previous = quota_snapshot(quota.base_days, quota.carryover_days)
    quota.base_days = new_value["base"]
    quota.carryover_days = new_value["carryover"]
    quota.updated_by = changed_by
    return QuotaAuditLog(
        id=uuid_lib.uuid4(),
        quota_id=quota.id,
        changed_by=changed_by,
        previous_value=previous,
        new_value=new_value,
        change_reason=reason,
        created_at=now,
    )


def propose_quota_change(
    quota: YearlyQuota,
    changed_by: uuid_lib.UUID,
    base_days: float,
    carryover_days: float,
    reason: str | None,
    now: datetime,
) -> QuotaChange:
    """Change a yearly quota or ask the employee to agree to the change.

    Args:
        quota: The quota to change.
        changed_by: Acting user.
        base_days: New base entitlement.
        carryover_days: New carry-over.
        reason: Optional reason stored in the audit log.
        now: Timestamp of the change.

    Returns:
        Whether the change was applied, with the audit log or notification.

    Raises:
        ValidationError: If a value is negative.
    """
    if base_days < 0 or carryover_days < 0:
        raise ValidationError("Quota values cannot be negative")

    new_value = quota_snapshot(base_days, carryover_days)
    if new_value == quota_snapshot(quota.base_days, quota.carryover_days):
        return QuotaChange(applied=False)

    if quota.is_locked and changed_by != quota.user_id:
        notification = QuotaChangeNotification(
            id=uuid_lib.uuid4(),
            user_id=quota.user_id,
            changed_by=changed_by,
            year=quota.year,
            previous_value=quota_snapshot(quota.base_days, quota.carryover_days),
            new_value=new_value,
            status=ChangeStatus.PENDING,
            created_at=now,
        )
        return QuotaChange(applied=False, notification=notification)

    audit = _apply(quota, new_value, changed_by, reason, now)
    return QuotaChange(applied=True, audit=audit)


def respond_to_quota_notification(
    notification: QuotaChangeNotification,
    quota: YearlyQuota,
    actor_id: uuid_lib.UUID,
    accept: bool,
    reason: str | None,
    now: datetime,
) -> QuotaChange:
    """Employee confirms or rejects a proposed quota change.

    Confirming applies the new values and locks the quota. Repeating the same
    response is a no-op; contradicting an earlier response is an error.

    Raises:
        PermissionDeniedError: If the actor is not the employee.
        MissingReasonError: If a rejection has no reason.
        AlreadyConfirmedError: If rejecting a confirmed change.
        AlreadyRejectedError: If confirming a rejected change.
        ConcurrentModificationError: If the quota changed since the proposal.
    """
    if actor_id != notification.user_id:
        raise PermissionDeniedError("Only the employee can respond to a quota change")

    if accept:
        if notification.status == ChangeStatus.CONFIRMED:
            return QuotaChange(applied=False, notification=notification)
        if notification.status == ChangeStatus.REJECTED:
            raise AlreadyRejectedError("Quota change was already rejected")
        current = quota_snapshot(quota.base_days, quota.carryover_days)
        if current != notification.previous_value:
            raise ConcurrentModificationError("Quota changed since this proposal")

        notification.status = ChangeStatus.CONFIRMED
        notification.responded_at = now
        audit = _apply(
            quota,
            notification.new_value,
            notification.changed_by,
            "Confirmed by employee",
            now,
        )
        quota.is_locked = True
        return QuotaChange(applied=True, audit=audit, notification=notification)

    cleaned = (reason or "").strip()
    if not cleaned:
        raise MissingReasonError("A reason is required to reject a quota change")
    if notification.status == ChangeStatus.CONFIRMED:
        raise AlreadyConfirmedError("Quota change was already confirmed")

    notification.status = ChangeStatus.REJECTED
    notification.rejection_reason = cleaned
    notification.responded_at = now
    return QuotaChange(applied=False, notification=notification)
