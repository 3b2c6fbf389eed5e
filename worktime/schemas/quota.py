# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Yearly quota schemas."""

import datetime
import uuid
from typing import Any

from pydantic import BaseModel, Field

from worktime.models.enums import ChangeStatus


class QuotaUpdate(BaseModel):
    """Schema for changing a yearly quota."""

    base_days: float = Field(..., ge=0)
    carryover_days: float = Field(0.0, ge=0)
    reason: str | None = None


class QuotaResponse(BaseModel):
    """Schema for yearly quota response."""

    id: uuid.UUID
    user_id: uuid.UUID
    year: int
    base_days: float
    carryover_days: float
    total_days: float
    is_locked: bool

    model_config = {"from_attributes": True}


class QuotaNotificationResponse(BaseModel):
    """Schema for a proposed quota change."""

    id: uuid.UUID
    user_id: uuid.UUID
    changed_by: uuid.UUID
    year: int
    previous_value: dict[str, Any]
    new_value: dict[str, Any]
    status: ChangeStatus
    rejection_reason: str | None
    responded_at: datetime.datetime | None
    created_at: datetime.datetime

    model_config = {"from_attributes": True}


class QuotaChangeResponse(BaseModel):
    """Outcome of a quota change."""

    applied: bool
    quota: QuotaResponse
    notification: QuotaNotificationResponse | None = None


class QuotaRespondRequest(BaseModel):
    """Employee's answer to a proposed quota change."""

    accept: bool
    reason: str | None = None
