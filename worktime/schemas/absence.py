# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Absence schemas."""

import datetime
import uuid

from pydantic import BaseModel, model_validator

from worktime.models.enums import AbsenceCategory


class AbsenceCreate(BaseModel):
    """Schema for creating an absence range."""

    user_id: uuid.UUID | None = None
    start_date: datetime.date
    end_date: datetime.date
    category: AbsenceCategory
    note: str | None = None

    @model_validator(mode="after")
    def validate_range(self) -> "AbsenceCreate":
        """Ensure the range does not end before it starts."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AbsenceResponse(BaseModel):
    """Schema for absence response."""

    id: uuid.UUID
    user_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    category: AbsenceCategory
    note: str | None
    submitted: bool

    model_config = {"from_attributes": True}
