# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User settings schemas."""

import datetime
import uuid

from pydantic import BaseModel, Field


class WorkModelDayIn(BaseModel):
    """Target hours of one weekday (0 = Monday)."""

    weekday: int = Field(..., ge=0, le=6)
    target_hours: float = Field(..., ge=0, le=24)
    start_time: datetime.time | None = None


class WorkModelUpdate(BaseModel):
    """Schema for replacing weekday targets."""

    days: list[WorkModelDayIn]


class WorkModelDayResponse(BaseModel):
    """Schema for one stored weekday target."""

    weekday: int
    target_hours: float
    start_time: datetime.time | None

    model_config = {"from_attributes": True}


class LockedDayCreate(BaseModel):
    """Schema for locking a day."""

    date: datetime.date


class LockedDayResponse(BaseModel):
    """Schema for locked day response."""

    id: uuid.UUID
    user_id: uuid.UUID
    date: datetime.date
    locked_by: uuid.UUID

    model_config = {"from_attributes": True}
