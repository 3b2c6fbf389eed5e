# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Yearly vacation quota service."""

import logging
import uuid

from sqlalchemy.orm import Session

from worktime.engine.errors import (
    NotFoundError,
    PermissionDeniedError,
    WorkTimeError,
)
from worktime.engine.quota import (
    QuotaChange,
    propose_quota_change,
    respond_to_quota_notification,
)
from worktime.events import ChangeEvent, event_bus
from worktime.models import (
    ChangeStatus,
    QuotaAuditLog,
    QuotaChangeNotification,
    User,
    YearlyQuota,
)
from worktime.models.base import utcnow
from worktime.services import user_service

logger = logging.getLogger(__name__)


def get_quota(db: Session, user_id: uuid.UUID, year: int) -> YearlyQuota | None:
    """Get the quota of a user for a year."""
    return (
        db.query(YearlyQuota)
        .filter(YearlyQuota.user_id == user_id, YearlyQuota.year == year)
        .first()
    )


def get_or_create_quota(db: Session, user: User, year: int) -> YearlyQuota:
    """Get a quota, creating it from the user's yearly default if missing."""
    quota = get_quota(db, user.id, year)
    if quota is None:
        quota = YearlyQuota(
            id=uuid.uuid4(),
            user_id=user.id,
            year=year,
            base_days=user.vacation_days_yearly,
            carryover_days=0.0,
            is_locked=False,
        )
        db.add(quota)
        db.commit()
        db.refresh(quota)
        logger.info(f"Created {year} quota for user {user.id}")
    return quota


def get_audit_log(db: Session, quota_id: uuid.UUID) -> list[QuotaAuditLog]:
    """Get applied changes of a quota, oldest first."""
    return (
        db.query(QuotaAuditLog)
        .filter(QuotaAuditLog.quota_id == quota_id)
        .order_by(QuotaAuditLog.created_at)
        .all()
    )


def store_change(db: Session, quota: YearlyQuota, change: QuotaChange) -> None:
    """Persist the outcome of a quota change and announce it."""
    if change.audit is not None:
        db.add(change.audit)
    if change.notification is not None:
        db.add(change.notification)
    db.commit()
    db.refresh(quota)
    if change.notification is not None:
        db.refresh(change.notification)
    if change.audit is not None or change.notification is not None:
        event_bus.publish_sync(
            ChangeEvent.QUOTA_CHANGED,
            quota.user_id,
            {"year": quota.year, "applied": change.applied},
        )


def update_quota(
    db: Session,
    actor: User,
    user_id: uuid.UUID,
    year: int,
    base_days: float,
    carryover_days: float,
    reason: str | None = None,
) -> tuple[YearlyQuota, QuotaChange]:
    """Change a quota or propose the change to the employee.

    Only office staff may change quotas. A locked quota of another user is
    not changed directly, the employee gets a notification instead.
    """
    if not user_service.actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Only office staff can change quotas")
    user = user_service.require_user(db, user_id)
    quota = get_or_create_quota(db, user, year)

    change = propose_quota_change(
        quota, actor.id, base_days, carryover_days, reason, utcnow()
    )
    store_change(db, quota, change)

    if change.applied:
        logger.info(f"Quota {year} of {user_id} changed by {actor.id}")
    elif change.notification is not None:
        logger.info(
            f"Quota {year} of {user_id} is locked, change by {actor.id} "
            "sent for confirmation"
        )
    return quota, change


def lock_quota(db: Session, actor: User, user_id: uuid.UUID, year: int) -> YearlyQuota:
    """Lock a quota so further changes need the employee's consent."""
    if not user_service.actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Only office staff can lock quotas")
    user = user_service.require_user(db, user_id)
    quota = get_or_create_quota(db, user, year)
    if not quota.is_locked:
        quota.is_locked = True
        quota.updated_by = actor.id
        db.commit()
        db.refresh(quota)
        logger.info(f"Quota {year} of {user_id} locked by {actor.id}")
    return quota


def get_notifications(
    db: Session, user_id: uuid.UUID, pending_only: bool = True
) -> list[QuotaChangeNotification]:
    """Get quota change notifications of a user, newest first."""
    query = db.query(QuotaChangeNotification).filter(
        QuotaChangeNotification.user_id == user_id
    )
    if pending_only:
        query = query.filter(QuotaChangeNotification.status == ChangeStatus.PENDING)
    return query.order_by(QuotaChangeNotification.created_at.desc()).all()


def respond_to_notification(
    db: Session,
    actor: User,
    notification_id: uuid.UUID,
    accept: bool,
    reason: str | None = None,
) -> tuple[YearlyQuota, QuotaChange]:
    """Employee confirms or rejects a proposed quota change."""
    notification = (
        db.query(QuotaChangeNotification)
        .filter(QuotaChangeNotification.id == notification_id)
        .first()
    )
    if notification is None:
        raise NotFoundError(f"Quota notification {notification_id} not found")

    user = user_service.require_user(db, notification.user_id)
    quota = get_or_create_quota(db, user, notification.year)
    try:
        change = respond_to_quota_notification(
            notification, quota, actor.id, accept, reason, utcnow()
        )
    except WorkTimeError as e:
        db.rollback()
        logger.warning(f"Quota response by {actor.id} refused: {e.message}")
        raise

    if change.audit is not None:
        db.add(change.audit)
    db.commit()
    db.refresh(quota)
    db.refresh(notification)
    event_bus.publish_sync(
        ChangeEvent.QUOTA_CHANGED,
        quota.user_id,
        {"year": quota.year, "applied": change.applied},
    )
    logger.info(
        f"Quota notification {notification_id} "
        f"{'confirmed' if accept else 'rejected'} by {actor.id}"
    )
    return quota, change
