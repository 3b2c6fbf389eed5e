# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Absence range service."""

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy.orm import Session

from worktime.engine.errors import DayLockedError, NotFoundError, ValidationError
from worktime.events import ChangeEvent, event_bus
from worktime.models import Absence, User
from worktime.schemas.absence import AbsenceCreate
from worktime.services import user_service

logger = logging.getLogger(__name__)


def get_absences(
    db: Session, user_id: uuid.UUID, year: int | None = None
) -> list[Absence]:
    """Get a user's absences, optionally only those touching a year."""
    query = db.query(Absence).filter(Absence.user_id == user_id)
    if year is not None:
        query = query.filter(
            Absence.start_date <= date(year, 12, 31),
            Absence.end_date >= date(year, 1, 1),
        )
    return query.order_by(Absence.start_date).all()


def get_absence(db: Session, absence_id: uuid.UUID) -> Absence | None:
    """Get an absence by ID."""
    return db.query(Absence).filter(Absence.id == absence_id).first()


def _check_unlocked(db: Session, user_id: uuid.UUID, start: date, end: date) -> None:
    locked = [
        d for d in user_service.get_locked_days(db, user_id) if start <= d <= end
    ]
    if locked:
        raise DayLockedError(f"{min(locked).isoformat()} is locked")


def create_absence(db: Session, actor: User, data: AbsenceCreate) -> Absence:
    """Create an absence range."""
    user_id = data.user_id or actor.id
    user_service.require_self_or_manager(db, actor, user_id)
    if data.end_date < data.start_date:
        raise ValidationError("Absence ends before it starts")
    _check_unlocked(db, user_id, data.start_date, data.end_date)

    absence = Absence(
        user_id=user_id,
        start_date=data.start_date,
        end_date=data.end_date,
        category=data.category,
        note=data.note,
    )
    db.add(absence)
    db.commit()
    db.refresh(absence)

    logger.info(
        f"Absence {absence.id} ({absence.category.value}) "
        f"{absence.start_date}..{absence.end_date} created for {user_id}"
    )
    event_bus.publish_sync(
        ChangeEvent.ABSENCE_CHANGED, user_id, {"absence_id": str(absence.id)}
    )
    return absence


def remove_absence_day(
    db: Session, actor: User, absence_id: uuid.UUID, day: date
) -> list[Absence]:
    """Remove one day from an absence range.

    Removing the first or last day shortens the range, removing a day in
    between splits it in two, removing the only day deletes it.

    Returns:
        The absences that remain of the original range.
    """
    absence = get_absence(db, absence_id)
    if absence is None:
        raise NotFoundError(f"Absence {absence_id} not found")
    user_service.require_self_or_manager(db, actor, absence.user_id)
    if not absence.covers(day):
        raise ValidationError(f"{day.isoformat()} is not part of this absence")
    _check_unlocked(db, absence.user_id, day, day)

    user_id = absence.user_id
    remaining: list[Absence] = []
    if absence.start_date == absence.end_date:
        db.delete(absence)
    elif day == absence.start_date:
        absence.start_date = day + timedelta(days=1)
        remaining.append(absence)
    elif day == absence.end_date:
        absence.end_date = day - timedelta(days=1)
        remaining.append(absence)
    else:
        tail = Absence(
            user_id=user_id,
            start_date=day + timedelta(days=1),
            end_date=absence.end_date,
            category=absence.category,
            note=absence.note,
            submitted=absence.submitted,
        )
        absence.end_date = day - timedelta(days=1)
        db.add(tail)
        remaining.extend([absence, tail])

    db.commit()
    for item in remaining:
        db.refresh(item)

    logger.info(f"Removed {day} from absence {absence_id} of {user_id}")
    event_bus.publish_sync(
        ChangeEvent.ABSENCE_CHANGED, user_id, {"absence_id": str(absence_id)}
    )
    return remaining
