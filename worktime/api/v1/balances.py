# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Balance API endpoints."""

import datetime
import uuid

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from worktime.api.deps import get_current_user, get_db
from worktime.models import User
from worktime.schemas.balance import (
    DayBalanceResponse,
    DaySummary,
    EntryDurationResponse,
    LateCheckResponse,
    LifetimeStatsResponse,
    PeriodStatsResponse,
    VacationSummaryResponse,
)
from worktime.schemas.quota import QuotaResponse
from worktime.services import balance_service, user_service

router = APIRouter()


@router.get("/late", response_model=LateCheckResponse)
def check_late(
    date: datetime.date,
    current_user: User = Depends(get_current_user),
) -> LateCheckResponse:
    """Check whether a date is past the grace period."""
    cutoff, late = balance_service.check_late(date)
    return LateCheckResponse(date=date, cutoff=cutoff, is_late=late)


@router.get("/{user_id}/daily/{day}", response_model=DayBalanceResponse)
def get_daily_balance(
    user_id: uuid.UUID,
    day: datetime.date,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DayBalanceResponse:
    """Get target, actual and per entry durations of one day."""
    user_service.require_self_or_manager(db, current_user, user_id)
    result = balance_service.daily_balance(db, user_id, day)
    return DayBalanceResponse(
        date=result.date,
        target=result.target,
        actual=result.actual,
        diff=result.diff,
        absence=result.absence,
        breakdown=result.totals.breakdown,
        per_entry=[
            EntryDurationResponse(
                entry_id=str(key),
                category=duration.category.value,
                raw_minutes=duration.raw_minutes,
                break_overlap_minutes=duration.break_overlap_minutes,
                net_hours=duration.net_hours,
                counts_toward_total=duration.counts_toward_total,
            )
            for key, duration in result.totals.per_entry.items()
        ],
    )


@router.get("/{user_id}/monthly/{year}/{month}", response_model=PeriodStatsResponse)
def get_monthly_balance(
    user_id: uuid.UUID,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PeriodStatsResponse:
    """Get target vs. actual of a month."""
    user_service.require_self_or_manager(db, current_user, user_id)
    stats = balance_service.monthly_balance(db, user_id, year, month)
    return PeriodStatsResponse(
        year=year,
        month=month,
        target=stats.target,
        actual=stats.actual,
        diff=stats.diff,
        days=[
            DaySummary(date=d.date, target=d.target, actual=d.actual, diff=d.diff)
            for d in stats.days
        ],
    )


@router.get("/{user_id}/lifetime", response_model=LifetimeStatsResponse)
def get_lifetime_balance(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LifetimeStatsResponse:
    """Get the running balance up to the latest submitted day."""
    user_service.require_self_or_manager(db, current_user, user_id)
    stats = balance_service.lifetime_balance(db, user_id)
    return LifetimeStatsResponse(
        start_date=stats.start_date,
        cutoff_date=stats.cutoff_date,
        target=stats.target,
        actual=stats.actual,
        adjustments=stats.adjustments,
        future_reductions=stats.future_reductions,
        diff=stats.diff,
    )


@router.get("/{user_id}/vacation/{year}", response_model=VacationSummaryResponse)
def get_vacation_summary(
    user_id: uuid.UUID,
    year: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> VacationSummaryResponse:
    """Get vacation entitlement and usage of a year."""
    user_service.require_self_or_manager(db, current_user, user_id)
    summary = balance_service.vacation_summary(db, user_id, year)
    return VacationSummaryResponse(**summary)


@router.post("/{user_id}/vacation/{year}/rollover", response_model=QuotaResponse)
def roll_over_vacation(
    user_id: uuid.UUID,
    year: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> QuotaResponse:
    """Carry unused vacation of a year over into the next year."""
    quota = balance_service.roll_over_vacation(db, current_user, user_id, year)
    return QuotaResponse.model_validate(quota)
