# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Balance adjustment API endpoints."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from worktime.api.deps import get_current_user, get_db
from worktime.models import User
from worktime.schemas.balance import AdjustmentCreate, AdjustmentResponse
from worktime.services import balance_service, user_service

router = APIRouter()


@router.post(
    "/{user_id}",
    response_model=AdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_adjustment(
    user_id: uuid.UUID,
    data: AdjustmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AdjustmentResponse:
    """Add a manual balance adjustment."""
    adjustment = balance_service.add_adjustment(
        db, current_user, user_id, data.hours, data.reason
    )
    return AdjustmentResponse.model_validate(adjustment)


@router.get("/{user_id}", response_model=list[AdjustmentResponse])
def list_adjustments(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[AdjustmentResponse]:
    """List manual balance adjustments of a user."""
    user_service.require_self_or_manager(db, current_user, user_id)
    return [
        AdjustmentResponse.model_validate(a)
        for a in balance_service.get_adjustments(db, user_id)
    ]
