# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Balance service: loads snapshots and runs the balance aggregator."""

import logging
import threading
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from worktime.config import settings
from worktime.engine import balance
from worktime.engine.balance import (
    BalancePolicy,
    DayBalance,
    LifetimeStats,
    PeriodStats,
)
from worktime.engine.calendar import HolidayCalendar
from worktime.engine.errors import MissingReasonError, PermissionDeniedError
from worktime.engine.grace import grace_cutoff, is_late
from worktime.engine.quota import propose_quota_change
from worktime.events import ChangeEvent, ChangePayload, event_bus
from worktime.models import BalanceAdjustment, User, YearlyQuota
from worktime.models.base import utcnow
from worktime.services import (
    absence_service,
    entry_service,
    quota_service,
    user_service,
)

logger = logging.getLogger(__name__)


class BalanceCache:
    """Lifetime figures per user, dropped whenever that user's data changes.

    The cache never patches figures in place. A change event only evicts the
    user; the next read recomputes from a fresh snapshot.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._lock = threading.Lock()
        self._lifetime: dict[tuple[uuid.UUID, date], LifetimeStats] = {}

    def get(self, user_id: uuid.UUID, today: date) -> LifetimeStats | None:
        with self._lock:
            return self._lifetime.get((user_id, today))

    def put(self, user_id: uuid.UUID, today: date, stats: LifetimeStats) -> None:
        with self._lock:
            self._lifetime[(user_id, today)] = stats

    def invalidate(self, user_id: uuid.UUID) -> None:
        """Drop every cached figure of a user."""
        with self._lock:
            for key in [k for k in self._lifetime if k[0] == user_id]:
                del self._lifetime[key]

    def clear(self) -> None:
        with self._lock:
            self._lifetime.clear()

    def handle_change(self, payload: ChangePayload) -> None:
        """Event bus handler."""
        logger.debug(f"Dropping cached balance of {payload.user_id}")
        self.invalidate(payload.user_id)

    def subscribe(self) -> None:
        """Listen to every change event. Subscribing twice keeps one handler."""
        event_bus.unsubscribe_subscriber("balance_cache")
        event_bus.subscribe_all(self.handle_change, subscriber_id="balance_cache")

    def unsubscribe(self) -> None:
        event_bus.unsubscribe_subscriber("balance_cache")


balance_cache = BalanceCache()


def get_policy() -> BalancePolicy:
    """Build the balance policy from settings."""
    return BalancePolicy(
        half_day_dates=settings.half_days,
        grant_half_day_leave=settings.grant_half_day_leave,
        working_days_per_year=settings.vacation_working_days_per_year,
    )


def get_calendar() -> HolidayCalendar:
    """Build the public holiday calendar from settings."""
    return HolidayCalendar(settings.holiday_country, settings.holiday_subdivision)


def check_late(day: date, today: date | None = None) -> tuple[date, bool]:
    """Return the grace cutoff and whether the day is late."""
    today = today or date.today()
    cutoff = grace_cutoff(today, settings.grace_working_days)
    return cutoff, is_late(day, today, settings.grace_working_days)


def daily_balance(db: Session, user_id: uuid.UUID, day: date) -> DayBalance:
    """Compute target and actual hours of one day."""
    entries = entry_service.get_entries(db, user_id, day, day)
    absences = absence_service.get_absences(db, user_id, day.year)
    absence = balance.expand_absences(absences, day, day).get(day)
    return balance.daily_actual(
        day,
        entries,
        user_service.load_work_model(db, user_id),
        absence,
        get_policy(),
    )


def monthly_balance(
    db: Session, user_id: uuid.UUID, year: int, month: int
) -> PeriodStats:
    """Compute target vs. actual for one month."""
    user = user_service.require_user(db, user_id)
    first, last = balance.month_bounds(year, month)
    return balance.monthly_stats(
        year,
        month,
        entry_service.get_entries(db, user_id, first, last),
        absence_service.get_absences(db, user_id, year),
        user_service.load_work_model(db, user_id),
        get_policy(),
        employment_start=user.employment_start_date,
    )


def lifetime_balance(
    db: Session, user_id: uuid.UUID, today: date | None = None
) -> LifetimeStats:
    """Compute the running balance up to the latest submitted day."""
    today = today or date.today()
    cached = balance_cache.get(user_id, today)
    if cached is not None:
        return cached

    user = user_service.require_user(db, user_id)
    entries = entry_service.get_entries(db, user_id)
    cutoff = balance.lifetime_cutoff(entries, today)
    start = user.employment_start_date
    if start is None and entries:
        start = min(e.date for e in entries)

    stats = balance.lifetime_stats(
        entries,
        absence_service.get_absences(db, user_id),
        get_adjustments(db, user_id),
        user_service.load_work_model(db, user_id),
        start_date=start,
        cutoff_date=cutoff,
        policy=get_policy(),
    )
    balance_cache.put(user_id, today, stats)
    return stats


def vacation_summary(db: Session, user_id: uuid.UUID, year: int) -> dict:
    """Vacation entitlement, usage and expected carry-over of a year."""
    user = user_service.require_user(db, user_id)
    quota = quota_service.get_quota(db, user_id, year)
    base = quota.base_days if quota else user.vacation_days_yearly
    carryover = quota.carryover_days if quota else 0.0

    absences = absence_service.get_absences(db, user_id, year)
    unpaid = balance.count_unpaid_weekdays(absences, year)
    entitlement = balance.effective_vacation_entitlement(
        base, carryover, unpaid, settings.vacation_working_days_per_year
    )
    taken = balance.vacation_days_taken(
        absences, year, get_calendar().holiday_dates(year)
    )
    return {
        "year": year,
        "base_days": base,
        "carryover_days": carryover,
        "unpaid_days": unpaid,
        "entitlement": entitlement,
        "taken": float(taken),
        "remaining": round(entitlement - taken, 2),
        "carryover_next_year": balance.carry_over(base, carryover, taken),
    }


def roll_over_vacation(
    db: Session, actor: User, user_id: uuid.UUID, year: int
) -> YearlyQuota:
    """Write the unused vacation of a year as carry-over into the next year."""
    if not user_service.actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Only office staff can roll over vacation")
    summary = vacation_summary(db, user_id, year)
    user = user_service.require_user(db, user_id)
    next_quota = quota_service.get_or_create_quota(db, user, year + 1)

    change = propose_quota_change(
        next_quota,
        actor.id,
        next_quota.base_days,
        summary["carryover_next_year"],
        f"Carry-over from {year}",
        utcnow(),
    )
    quota_service.store_change(db, next_quota, change)
    logger.info(
        f"Rolled over {summary['carryover_next_year']} vacation days of {user_id} "
        f"into {year + 1}"
    )
    return next_quota


def get_adjustments(db: Session, user_id: uuid.UUID) -> list[BalanceAdjustment]:
    """Get manual balance adjustments of a user, oldest first."""
    return (
        db.query(BalanceAdjustment)
        .filter(BalanceAdjustment.user_id == user_id)
        .order_by(BalanceAdjustment.created_at)
        .all()
    )


def add_adjustment(
    db: Session,
    actor: User,
    user_id: uuid.UUID,
    hours: Decimal,
    reason: str | None,
) -> BalanceAdjustment:
    """Append a manual balance adjustment. Reason is mandatory."""
    if not user_service.actor_for(actor).is_office_staff:
        raise PermissionDeniedError("Only office staff can adjust balances")
    cleaned = (reason or "").strip()
    if not cleaned:
        raise MissingReasonError("A reason is required for balance adjustments")
    user_service.require_user(db, user_id)

    adjustment = BalanceAdjustment(
        user_id=user_id,
        hours=hours,
        reason=cleaned,
        created_by=actor.id,
    )
    db.add(adjustment)
    db.commit()
    db.refresh(adjustment)

    logger.info(f"Balance of {user_id} adjusted by {hours}h by {actor.id}")
    event_bus.publish_sync(
        ChangeEvent.ADJUSTMENT_CHANGED,
        user_id,
        {"adjustment_id": str(adjustment.id)},
    )
    return adjustment

