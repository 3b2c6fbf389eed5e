# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Absence API endpoints."""

import datetime
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from worktime.api.deps import get_current_user, get_db
from worktime.models import User
from worktime.schemas.absence import AbsenceCreate, AbsenceResponse
from worktime.services import absence_service, user_service

router = APIRouter()


@router.post("", response_model=AbsenceResponse, status_code=status.HTTP_201_CREATED)
def create_absence(
    data: AbsenceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AbsenceResponse:
    """Create an absence range."""
    absence = absence_service.create_absence(db, current_user, data)
    return AbsenceResponse.model_validate(absence)


@router.get("", response_model=list[AbsenceResponse])
def list_absences(
    user_id: uuid.UUID | None = None,
    year: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[AbsenceResponse]:
    """List absences of a user."""
    owner_id = user_id or current_user.id
    user_service.require_self_or_manager(db, current_user, owner_id)
    return [
        AbsenceResponse.model_validate(a)
        for a in absence_service.get_absences(db, owner_id, year)
    ]


@router.delete("/{absence_id}/days/{day}", response_model=list[AbsenceResponse])
def remove_absence_day(
    absence_id: uuid.UUID,
    day: datetime.date,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[AbsenceResponse]:
    """Remove one day from an absence range, splitting it if needed."""
    remaining = absence_service.remove_absence_day(db, current_user, absence_id, day)
    return [AbsenceResponse.model_validate(a) for a in remaining]
