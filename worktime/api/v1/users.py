# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User settings API endpoints."""

import datetime
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from worktime.api.deps import get_current_user, get_db
from worktime.models import LockedDay, User, WorkModelDay
from worktime.schemas.common import MessageResponse
from worktime.schemas.user import (
    LockedDayCreate,
    LockedDayResponse,
    WorkModelDayResponse,
    WorkModelUpdate,
)
from worktime.services import user_service

router = APIRouter()


@router.get("/{user_id}/work-model", response_model=list[WorkModelDayResponse])
def get_work_model(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[WorkModelDayResponse]:
    """Get target hours per weekday."""
    user_service.require_self_or_manager(db, current_user, user_id)
    model = user_service.load_work_model(db, user_id)
    return [
        WorkModelDayResponse(
            weekday=weekday,
            target_hours=model.target_for(weekday),
            start_time=model.start_times.get(weekday),
        )
        for weekday in range(7)
    ]


@router.put("/{user_id}/work-model", response_model=list[WorkModelDayResponse])
def update_work_model(
    user_id: uuid.UUID,
    data: WorkModelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[WorkModelDayResponse]:
    """Set target hours for the given weekdays."""
    rows: list[WorkModelDay] = user_service.set_work_model(
        db,
        current_user,
        user_id,
        [(d.weekday, d.target_hours, d.start_time) for d in data.days],
    )
    return [WorkModelDayResponse.model_validate(r) for r in rows]


@router.get("/{user_id}/locked-days", response_model=list[datetime.date])
def list_locked_days(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[datetime.date]:
    """List locked days of a user."""
    user_service.require_self_or_manager(db, current_user, user_id)
    return sorted(user_service.get_locked_days(db, user_id))


@router.post(
    "/{user_id}/locked-days",
    response_model=LockedDayResponse,
    status_code=status.HTTP_201_CREATED,
)
def lock_day(
    user_id: uuid.UUID,
    data: LockedDayCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LockedDayResponse:
    """Lock a day of a user."""
    locked: LockedDay = user_service.lock_day(db, current_user, user_id, data.date)
    return LockedDayResponse.model_validate(locked)


@router.delete("/{user_id}/locked-days/{day}", response_model=MessageResponse)
def unlock_day(
    user_id: uuid.UUID,
    day: datetime.date,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Unlock a day of a user."""
    user_service.unlock_day(db, current_user, user_id, day)
    return MessageResponse(message=f"{day.isoformat()} unlocked")
