# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User, work model and locked day service."""

import logging
import uuid
from datetime import date, time

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worktime.engine.balance import WorkModel
from worktime.engine.errors import NotFoundError, PermissionDeniedError, ValidationError
from worktime.engine.grace import DepartmentApprovers
from worktime.engine.lifecycle import Actor, OwnerContext, is_manager
from worktime.events import ChangeEvent, event_bus
from worktime.models import Department, LockedDay, User, WorkModelDay

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def require_user(db: Session, user_id: uuid.UUID) -> User:
    """Get a user by ID or raise NotFoundError."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def actor_for(user: User) -> Actor:
    """Build the actor identity of a user."""
    return Actor(id=user.id, role=user.role)


def get_locked_days(db: Session, user_id: uuid.UUID) -> frozenset[date]:
    """Get all locked dates of a user."""
    rows = db.query(LockedDay.date).filter(LockedDay.user_id == user_id).all()
    return frozenset(row[0] for row in rows)


def owner_context(db: Session, user: User) -> OwnerContext:
    """Collect the owner settings the entry guards depend on."""
    department = None
    if user.department_id:
        department = (
            db.query(Department).filter(Department.id == user.department_id).first()
        )
    return OwnerContext(
        user_id=user.id,
        role=user.role,
        require_confirmation=user.require_confirmation,
        approvers=DepartmentApprovers.from_department(department),
        locked_days=get_locked_days(db, user.id),
    )


def load_work_model(db: Session, user_id: uuid.UUID) -> WorkModel:
    """Load the per-weekday work model of a user."""
    days = db.query(WorkModelDay).filter(WorkModelDay.user_id == user_id).all()
    return WorkModel.from_days(days)


def set_work_model(
    db: Session,
    actor: User,
    user_id: uuid.UUID,
    days: list[tuple[int, float, time | None]],
) -> list[WorkModelDay]:
    """Replace target hours for the given weekdays.

    Args:
        db: Database session.
        actor: Acting user, the user themselves or office staff.
        user_id: User whose work model changes.
        days: (weekday, target_hours, start_time) tuples.

    Returns:
        All weekday rows of the user after the change.
    """
    require_user(db, user_id)
    if actor.id != user_id and not actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Not allowed to change this work model")

    for weekday, target_hours, _ in days:
        if not 0 <= weekday <= 6:
            raise ValidationError(f"Invalid weekday {weekday}")
        if not 0 <= target_hours <= 24:
            raise ValidationError(f"Invalid target hours {target_hours}")

    existing = {
        row.weekday: row
        for row in db.query(WorkModelDay).filter(WorkModelDay.user_id == user_id)
    }
    for weekday, target_hours, start_time in days:
        row = existing.get(weekday)
        if row is None:
            row = WorkModelDay(user_id=user_id, weekday=weekday)
            db.add(row)
            existing[weekday] = row
        row.target_hours = target_hours
        row.start_time = start_time

    db.commit()
    logger.info(f"Work model of user {user_id} updated by {actor.id}")
    event_bus.publish_sync(ChangeEvent.SETTINGS_CHANGED, user_id, {"work_model": True})
    return sorted(existing.values(), key=lambda r: r.weekday)


def lock_day(db: Session, actor: User, user_id: uuid.UUID, day: date) -> LockedDay:
    """Lock a day so the user's entries on it can no longer change."""
    require_user(db, user_id)
    if not actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Only office staff can lock days")

    existing = (
        db.query(LockedDay)
        .filter(LockedDay.user_id == user_id, LockedDay.date == day)
        .first()
    )
    if existing:
        return existing

    locked = LockedDay(user_id=user_id, date=day, locked_by=actor.id)
    db.add(locked)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        locked = (
            db.query(LockedDay)
            .filter(LockedDay.user_id == user_id, LockedDay.date == day)
            .one()
        )
        return locked
    db.refresh(locked)

    logger.info(f"Day {day} of user {user_id} locked by {actor.id}")
    event_bus.publish_sync(
        ChangeEvent.SETTINGS_CHANGED, user_id, {"locked_day": day.isoformat()}
    )
    return locked


def unlock_day(db: Session, actor: User, user_id: uuid.UUID, day: date) -> None:
    """Remove a day lock."""
    if not actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Only office staff can unlock days")
    db.query(LockedDay).filter(
        LockedDay.user_id == user_id, LockedDay.date == day
    ).delete(synchronize_session=False)
    db.commit()
    logger.info(f"Day {day} of user {user_id} unlocked by {actor.id}")
    event_bus.publish_sync(
        ChangeEvent.SETTINGS_CHANGED, user_id, {"unlocked_day": day.isoformat()}
    )


def require_self_or_manager(db: Session, actor: User, user_id: uuid.UUID) -> User:
    """Ensure the actor is the user or has management authority over them.

    Returns:
        The user.
    """
    user = require_user(db, user_id)
    if actor.id == user_id:
        return user
    if not is_manager(actor_for(actor), owner_context(db, user)):
        raise PermissionDeniedError("Not allowed to access data of this user")
    return user
