# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Balance aggregation: daily, monthly and lifetime target vs. actual hours.

All functions here are pure. They work on whatever snapshot of entries and
absences the caller loaded and never fail on a single bad record.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Any

from worktime.engine.reconciler import DailyTotals, as_decimal, reconcile_day
from worktime.models.enums import (
    ABSENCE_PRIORITY,
    WORK_LIKE_CATEGORIES,
    AbsenceCategory,
    EntryCategory,
)

logger = logging.getLogger(__name__)

DEFAULT_TARGETS = {0: 8.5, 1: 8.5, 2: 8.5, 3: 8.5, 4: 4.5, 5: 0.0, 6: 0.0}
DEFAULT_HALF_DAYS = frozenset({(12, 24), (12, 31)})
WORKING_DAYS_PER_YEAR = 260


@dataclass(frozen=True)
class WorkModel:
    """Target hours and default start time per weekday (0 = Monday)."""

    targets: dict[int, float] = field(default_factory=lambda: dict(DEFAULT_TARGETS))
    start_times: dict[int, time | None] = field(default_factory=dict)

    @classmethod
    def from_days(cls, days: Iterable[Any]) -> "WorkModel":
        """Build a work model from stored weekday rows.

        Weekdays without a row keep their default target.
        """
        targets = dict(DEFAULT_TARGETS)
        start_times: dict[int, time | None] = {}
        for day in days:
            targets[day.weekday] = float(day.target_hours)
            start_times[day.weekday] = day.start_time
        return cls(targets=targets, start_times=start_times)

    def target_for(self, weekday: int) -> float:
        """Return the target hours of a weekday."""
        return float(self.targets.get(weekday, 0.0))


@dataclass(frozen=True)
class BalancePolicy:
    """Company wide rules that affect targets and entitlements."""

    half_day_dates: frozenset[tuple[int, int]] = DEFAULT_HALF_DAYS
    grant_half_day_leave: bool = True
    working_days_per_year: int = WORKING_DAYS_PER_YEAR


DEFAULT_POLICY = BalancePolicy()


@dataclass
class AbsenceCredit:
    """Synthetic entry standing in for an absence on one day."""

    date: date
    category: EntryCategory
    hours: Decimal
    id: str | None = None
    start_time: time | None = None
    end_time: time | None = None
    surcharge_percent: int | None = None
    is_deleted: bool = False


@dataclass
class DayBalance:
    """Target and actual hours for one day."""

    date: date
    target: float
    actual: float
    totals: DailyTotals
    absence: AbsenceCategory | None = None

    @property
    def diff(self) -> float:
        return round(self.actual - self.target, 2)


@dataclass
class PeriodStats:
    """Target and actual sums over a date range."""

    target: float = 0.0
    actual: float = 0.0
    days: list[DayBalance] = field(default_factory=list)

    @property
    def diff(self) -> float:
        return round(self.actual - self.target, 2)


@dataclass
class LifetimeStats:
    """Running balance from employment start up to the submission cutoff."""

    start_date: date | None
    cutoff_date: date | None
    target: float
    actual: float
    adjustments: float
    future_reductions: float

    @property
    def diff(self) -> float:
        return round(self.actual - self.target - self.future_reductions, 2)


def date_range(start: date, end: date) -> Iterable[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month."""
    first = date(year, month, 1)
    if month == 12:
        return first, date(year, 12, 31)
    return first, date(year, month + 1, 1) - timedelta(days=1)


def is_half_day(day: date, policy: BalancePolicy = DEFAULT_POLICY) -> bool:
    """Check if the day is a configured half day falling on a weekday."""
    return (day.month, day.day) in policy.half_day_dates and day.weekday() < 5


def daily_target(
    day: date, work_model: WorkModel, policy: BalancePolicy = DEFAULT_POLICY
) -> float:
    """Target hours for one day, halved on configured half days."""
    target = work_model.target_for(day.weekday())
    if is_half_day(day, policy):
        target /= 2
    return round(target, 2)


def expand_absences(
    absences: Iterable[Any], start: date, end: date
) -> dict[date, AbsenceCategory]:
    """Map each day in [start, end] to the absence category covering it.

    When ranges overlap, the category listed first in ABSENCE_PRIORITY wins.
    Ranges with an end before their start are skipped.
    """
    rank = {category: i for i, category in enumerate(ABSENCE_PRIORITY)}
    days: dict[date, AbsenceCategory] = {}
    for absence in absences:
        try:
            category = AbsenceCategory(absence.category)
        except ValueError:
            logger.warning(f"Skipping absence {absence.id} with unknown category")
            continue
        if absence.end_date < absence.start_date:
            logger.warning(f"Skipping absence {absence.id} ending before it starts")
            continue
        first = max(start, absence.start_date)
        last = min(end, absence.end_date)
        for day in date_range(first, last):
            current = days.get(day)
            if current is None or rank[category] < rank[current]:
                days[day] = category
    return days


def counts_for_balance(entry: Any) -> bool:
    """Deleted and rejected entries never count."""
    return not entry.is_deleted and getattr(entry, "rejected_at", None) is None


def group_by_day(entries: Iterable[Any]) -> dict[date, list[Any]]:
    """Group countable entries by date."""
    grouped: dict[date, list[Any]] = defaultdict(list)
    for entry in entries:
        if counts_for_balance(entry):
            grouped[entry.date].append(entry)
    return grouped


def _is_work_like(entry: Any) -> bool:
    try:
        return EntryCategory(entry.category) in WORK_LIKE_CATEGORIES
    except ValueError:
        return False


def _has_category(entries: Iterable[Any], category: EntryCategory) -> bool:
    return any(e.category == category for e in entries)


def daily_actual(
    day: date,
    entries: Iterable[Any],
    work_model: WorkModel,
    absence: AbsenceCategory | None = None,
    policy: BalancePolicy = DEFAULT_POLICY,
) -> DayBalance:
    """Compute actual hours for one day.

    A paid absence credits the full daily target unless work was entered on
    that day. Unpaid absence credits nothing. On half days a special leave
    credit of the halved target is added when the policy grants it, no
    special leave entry exists yet and no paid absence was credited.

    Args:
        day: The day.
        entries: The day's entries; deleted and rejected ones are ignored.
        work_model: Owner's work model.
        absence: Absence category covering the day, if any.
        policy: Company rules.

    Returns:
        The day's balance.
    """
    live = [e for e in entries if counts_for_balance(e)]
    target = daily_target(day, work_model, policy)
    credits: list[AbsenceCredit] = []

    if absence is not None:
        if absence == AbsenceCategory.UNPAID:
            hours = Decimal("0")
        elif any(_is_work_like(e) for e in live):
            hours = None
        else:
            hours = Decimal(str(target))
        if hours is not None:
            credits.append(
                AbsenceCredit(
                    date=day,
                    category=EntryCategory(absence.value),
                    hours=hours,
                    id=f"absence-{day.isoformat()}",
                )
            )

    if (
        policy.grant_half_day_leave
        and is_half_day(day, policy)
        and not any(c.hours for c in credits)
        and not _has_category(live, EntryCategory.SPECIAL_HOLIDAY)
    ):
        credits.append(
            AbsenceCredit(
                date=day,
                category=EntryCategory.SPECIAL_HOLIDAY,
                hours=Decimal(str(target)),
                id=f"special-{day.isoformat()}",
            )
        )

    totals = reconcile_day(day, [*live, *credits])
    return DayBalance(
        date=day, target=target, actual=totals.net, totals=totals, absence=absence
    )


def period_stats(
    start: date,
    end: date,
    entries: Iterable[Any],
    absences: Iterable[Any],
    work_model: WorkModel,
    policy: BalancePolicy = DEFAULT_POLICY,
) -> PeriodStats:
    """Sum daily targets and actuals over [start, end]."""
    stats = PeriodStats()
    if end < start:
        return stats

    by_day = group_by_day(entries)
    absence_days = expand_absences(absences, start, end)
    target = 0.0
    actual = 0.0
    for day in date_range(start, end):
        balance = daily_actual(
            day, by_day.get(day, []), work_model, absence_days.get(day), policy
        )
        stats.days.append(balance)
        target += balance.target
        actual += balance.actual

    stats.target = round(target, 2)
    stats.actual = round(actual, 2)
    return stats


def monthly_stats(
    year: int,
    month: int,
    entries: Iterable[Any],
    absences: Iterable[Any],
    work_model: WorkModel,
    policy: BalancePolicy = DEFAULT_POLICY,
    employment_start: date | None = None,
) -> PeriodStats:
    """Target vs. actual for one calendar month.

    Days before the employment start are left out.
    """
    first, last = month_bounds(year, month)
    if employment_start is not None and employment_start > first:
        first = employment_start
    return period_stats(first, last, entries, absences, work_model, policy)


def lifetime_cutoff(entries: Iterable[Any], today: date) -> date | None:
    """Latest date with a submitted, non-deleted entry that is not in the future."""
    dates = [
        e.date for e in entries if e.submitted and not e.is_deleted and e.date <= today
    ]
    return max(dates, default=None)


def future_overtime_reductions(entries: Iterable[Any], cutoff: date | None) -> float:
    """Hours of confirmed overtime reduction planned after the cutoff."""
    total = Decimal("0")
    for entry in entries:
        if not counts_for_balance(entry) or entry.confirmed_at is None:
            continue
        if entry.category != EntryCategory.OVERTIME_REDUCTION:
            continue
        if cutoff is not None and entry.date <= cutoff:
            continue
        try:
            total += as_decimal(entry.hours) or Decimal("0")
        except ValueError:
            logger.warning(f"Skipping overtime reduction {entry.id} with bad hours")
    return float(round(total, 2))


def lifetime_stats(
    entries: Iterable[Any],
    absences: Iterable[Any],
    adjustments: Iterable[Any],
    work_model: WorkModel,
    start_date: date | None,
    cutoff_date: date | None,
    policy: BalancePolicy = DEFAULT_POLICY,
) -> LifetimeStats:
    """Running balance over [start_date, cutoff_date] plus manual adjustments.

    Without a cutoff no day counts yet and only the adjustments make up the
    balance. Confirmed overtime reduction after the cutoff is subtracted from
    the difference because that time is already spoken for.

    Args:
        entries: All entries of the user.
        absences: All absences of the user.
        adjustments: Manual balance adjustments.
        work_model: The user's work model.
        start_date: Employment start, or the first entry date.
        cutoff_date: Latest submitted date.
        policy: Company rules.

    Returns:
        The lifetime figures.
    """
    entries = list(entries)
    adjustment_total = Decimal("0")
    for adjustment in adjustments:
        try:
            adjustment_total += as_decimal(adjustment.hours) or Decimal("0")
        except ValueError:
            logger.warning(f"Skipping adjustment {adjustment.id} with bad hours")
    adjustment_hours = float(round(adjustment_total, 2))

    target = 0.0
    worked = 0.0
    if start_date is not None and cutoff_date is not None:
        stats = period_stats(
            start_date, cutoff_date, entries, absences, work_model, policy
        )
        target, worked = stats.target, stats.actual

    return LifetimeStats(
        start_date=start_date,
        cutoff_date=cutoff_date,
        target=target,
        actual=round(worked + adjustment_hours, 2),
        adjustments=adjustment_hours,
        future_reductions=future_overtime_reductions(entries, cutoff_date),
    )


def count_absence_weekdays(
    absences: Iterable[Any],
    category: AbsenceCategory,
    year: int,
    holidays: set[date] | None = None,
) -> int:
    """Count weekdays of a year on which the given absence category applies.

    Overlapping ranges are resolved by priority, public holidays are skipped
    when given.
    """
    first, last = date(year, 1, 1), date(year, 12, 31)
    days = expand_absences(absences, first, last)
    return sum(
        1
        for day, found in days.items()
        if found == category
        and day.weekday() < 5
        and (holidays is None or day not in holidays)
    )


def count_unpaid_weekdays(absences: Iterable[Any], year: int) -> int:
    """Weekdays of a year covered by unpaid absence."""
    return count_absence_weekdays(absences, AbsenceCategory.UNPAID, year)


def effective_vacation_entitlement(
    base_days: float,
    carryover_days: float,
    unpaid_days: int,
    working_days_per_year: int = WORKING_DAYS_PER_YEAR,
) -> float:
    """Vacation entitlement reduced proportionally by unpaid leave.

    Example: 30 base days, 2 carried over and 26 unpaid days out of 260
    gives 30 + 2 - 3 = 29.
    """
    reduction = unpaid_days / working_days_per_year * base_days
    return round(max(0.0, base_days + carryover_days - reduction), 2)


def vacation_days_taken(
    absences: Iterable[Any], year: int, holidays: set[date] | None = None
) -> int:
    """Weekdays of a year spent on vacation, public holidays excluded."""
    return count_absence_weekdays(absences, AbsenceCategory.VACATION, year, holidays)


def carry_over(base_days: float, carryover_days: float, taken_days: float) -> float:
    """Unused vacation moving into the next year."""
    return round(max(0.0, base_days + carryover_days - taken_days), 2)
