# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Yearly quota API endpoints."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worktime.api.deps import get_current_user, get_db
from worktime.models import User
from worktime.schemas.quota import (
    QuotaChangeResponse,
    QuotaNotificationResponse,
    QuotaRespondRequest,
    QuotaResponse,
    QuotaUpdate,
)
from worktime.services import quota_service, user_service

router = APIRouter()


@router.get("/notifications", response_model=list[QuotaNotificationResponse])
def list_quota_notifications(
    pending_only: bool = True,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[QuotaNotificationResponse]:
    """List proposed quota changes for the current user."""
    return [
        QuotaNotificationResponse.model_validate(n)
        for n in quota_service.get_notifications(db, current_user.id, pending_only)
    ]


@router.post(
    "/notifications/{notification_id}/respond", response_model=QuotaChangeResponse
)
def respond_to_quota_notification(
    notification_id: uuid.UUID,
    data: QuotaRespondRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuotaChangeResponse:
    """Confirm or reject a proposed quota change."""
    quota, change = quota_service.respond_to_notification(
        db, current_user, notification_id, data.accept, data.reason
    )
    return QuotaChangeResponse(
        applied=change.applied,
        quota=QuotaResponse.model_validate(quota),
        notification=(
            QuotaNotificationResponse.model_validate(change.notification)
            if change.notification
            else None
        ),
    )


@router.get("/{user_id}/{year}", response_model=QuotaResponse)
def get_quota(
    user_id: uuid.UUID,
    year: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuotaResponse:
    """Get the quota of a user for a year."""
    user = user_service.require_self_or_manager(db, current_user, user_id)
    return QuotaResponse.model_validate(
        quota_service.get_or_create_quota(db, user, year)
    )


@router.put("/{user_id}/{year}", response_model=QuotaChangeResponse)
def update_quota(
    user_id: uuid.UUID,
    year: int,
    data: QuotaUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuotaChangeResponse:
    """Change a quota, or propose the change if the quota is locked."""
    quota, change = quota_service.update_quota(
        db,
        current_user,
        user_id,
        year,
        data.base_days,
        data.carryover_days,
        data.reason,
    )
    return QuotaChangeResponse(
        applied=change.applied,
        quota=QuotaResponse.model_validate(quota),
        notification=(
            QuotaNotificationResponse.model_validate(change.notification)
            if change.notification
            else None
        ),
    )


@router.post("/{user_id}/{year}/lock", response_model=QuotaResponse)
def lock_quota(
    user_id: uuid.UUID,
    year: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuotaResponse:
    """Lock a quota."""
    quota = quota_service.lock_quota(db, current_user, user_id, year)
    return QuotaResponse.model_validate(quota)
