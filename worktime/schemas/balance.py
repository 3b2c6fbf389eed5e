# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Balance schemas."""

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from worktime.models.enums import AbsenceCategory


class EntryDurationResponse(BaseModel):
    """Net duration of one entry on a day."""

    entry_id: str
    category: str
    raw_minutes: int
    break_overlap_minutes: int
    net_hours: float
    counts_toward_total: bool


class DayBalanceResponse(BaseModel):
    """Target and actual hours of one day."""

    date: datetime.date
    target: float
    actual: float
    diff: float
    absence: AbsenceCategory | None = None
    breakdown: dict[str, float] = {}
    per_entry: list[EntryDurationResponse] = []


class DaySummary(BaseModel):
    """Compact per-day figures inside a period."""

    date: datetime.date
    target: float
    actual: float
    diff: float


class PeriodStatsResponse(BaseModel):
    """Target vs. actual for a month."""

    year: int
    month: int
    target: float
    actual: float
    diff: float
    days: list[DaySummary] = []


class LifetimeStatsResponse(BaseModel):
    """Running balance up to the submission cutoff."""

    start_date: datetime.date | None
    cutoff_date: datetime.date | None
    target: float
    actual: float
    adjustments: float
    future_reductions: float
    diff: float


class VacationSummaryResponse(BaseModel):
    """Vacation entitlement and usage of one year."""

    year: int
    base_days: float
    carryover_days: float
    unpaid_days: int
    entitlement: float
    taken: float
    remaining: float
    carryover_next_year: float


class LateCheckResponse(BaseModel):
    """Whether a date needs the late entry path."""

    date: datetime.date
    cutoff: datetime.date
    is_late: bool


class AdjustmentCreate(BaseModel):
    """Schema for a manual balance adjustment."""

    hours: Decimal = Field(..., ge=-10000, le=10000)
    reason: str | None = None


class AdjustmentResponse(BaseModel):
    """Schema for balance adjustment response."""

    id: uuid.UUID
    user_id: uuid.UUID
    hours: Decimal
    reason: str
    created_by: uuid.UUID | None
    created_at: datetime.datetime

    model_config = {"from_attributes": True}
