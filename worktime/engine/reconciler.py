# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Net duration calculation for one day of entries."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from worktime.engine.intervals import duration_minutes, overlap_minutes, parse_clock
from worktime.models.enums import (
    ABSENCE_ENTRY_CATEGORIES,
    WORK_LIKE_CATEGORIES,
    EntryCategory,
)

logger = logging.getLogger(__name__)

ALLOWED_SURCHARGES = frozenset({0, 25, 50, 100})


@dataclass
class EntryDuration:
    """Computed duration of one entry."""

    entry_id: Any
    category: EntryCategory
    raw_minutes: int
    break_overlap_minutes: int = 0
    multiplier: Decimal = Decimal("1")
    counts_toward_total: bool = True

    @property
    def net_minutes(self) -> int:
        """Raw minutes minus overlapping breaks, floored at zero."""
        return max(0, self.raw_minutes - self.break_overlap_minutes)

    @property
    def exact_hours(self) -> Decimal:
        """Unrounded net hours including surcharge multiplier."""
        return Decimal(self.net_minutes) / 60 * self.multiplier

    @property
    def net_hours(self) -> float:
        return float(round(self.exact_hours, 2))


@dataclass
class DailyTotals:
    """Reconciled totals for one day."""

    date: date
    per_entry: dict[Any, EntryDuration] = field(default_factory=dict)
    breakdown: dict[str, float] = field(default_factory=dict)
    work_hours: float = 0.0
    absence_hours: float = 0.0
    break_hours: float = 0.0
    overtime_reduction_hours: float = 0.0

    @property
    def net(self) -> float:
        """Work plus credited absence hours."""
        return round(self.work_hours + self.absence_hours, 2)


def category_of(entry: Any) -> EntryCategory:
    """Return an entry's category as enum member.

    Raises:
        ValueError: If the category is unknown.
    """
    return EntryCategory(entry.category)


def as_decimal(value: Any) -> Decimal | None:
    """Convert an hours value to Decimal, None when missing.

    Raises:
        ValueError: If the value is not numeric.
    """
    if value is None or value == "":
        return None
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid hours value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid hours value: {value!r}")
    return result


def has_interval(entry: Any) -> bool:
    """Check if the entry carries a usable start/end pair."""
    return (
        parse_clock(entry.start_time) is not None
        and parse_clock(entry.end_time) is not None
    )


def entry_minutes(entry: Any) -> int:
    """Raw duration of an entry in minutes.

    The explicit hours value wins; the start/end interval is used only when no
    hours value was entered.
    """
    hours = as_decimal(entry.hours)
    if hours is not None:
        return max(0, int((hours * 60).to_integral_value()))
    return duration_minutes(entry.start_time, entry.end_time)


def surcharge_multiplier(entry: Any) -> Decimal:
    """Multiplier for emergency service surcharges (25% -> 1.25)."""
    if category_of(entry) != EntryCategory.EMERGENCY_SERVICE:
        return Decimal("1")
    percent = entry.surcharge_percent or 0
    if percent not in ALLOWED_SURCHARGES:
        raise ValueError(f"Invalid surcharge: {percent!r}")
    return 1 + Decimal(percent) / 100


def break_overlap(entry: Any, breaks: Iterable[Any]) -> int:
    """Sum of minutes the entry overlaps with the given break entries."""
    if not has_interval(entry):
        return 0
    return sum(
        overlap_minutes(entry.start_time, entry.end_time, b.start_time, b.end_time)
        for b in breaks
    )


def reconcile_day(day: date, entries: Iterable[Any]) -> DailyTotals:
    """Compute net hours for one day.

    Work-like entries (work, location categories, emergency service) are reduced
    by the minutes they overlap with the day's break entries. Emergency service
    hours are then multiplied by their surcharge. Breaks and overtime reduction
    are reported separately and never count as work. Absence entries credit
    their hours directly (unpaid credits nothing).

    Entries flagged as deleted are ignored. An entry that cannot be evaluated
    contributes zero and is logged, it never aborts the day.

    Args:
        day: The day being reconciled.
        entries: Entries of that day (time entries and synthetic absence credits).

    Returns:
        The day's totals.
    """
    totals = DailyTotals(date=day)
    live: list[tuple[Any, EntryCategory]] = []

    for entry in entries:
        if getattr(entry, "is_deleted", False):
            continue
        try:
            live.append((entry, category_of(entry)))
        except ValueError:
            logger.warning(
                f"Skipping entry {getattr(entry, 'id', None)} with unknown "
                f"category {getattr(entry, 'category', None)!r}"
            )

    breaks = [e for e, cat in live if cat == EntryCategory.BREAK and has_interval(e)]
    breakdown: dict[str, Decimal] = defaultdict(Decimal)
    sums: dict[str, Decimal] = defaultdict(Decimal)

    for entry, category in live:
        entry_id = getattr(entry, "id", None)
        try:
            duration = EntryDuration(
                entry_id=entry_id,
                category=category,
                raw_minutes=entry_minutes(entry),
            )
            if category in WORK_LIKE_CATEGORIES:
                duration.break_overlap_minutes = break_overlap(entry, breaks)
                duration.multiplier = surcharge_multiplier(entry)
            elif category == EntryCategory.UNPAID:
                duration.raw_minutes = 0
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed entry {entry_id} on {day}: {e}")
            continue

        hours = duration.exact_hours
        if category == EntryCategory.BREAK:
            duration.counts_toward_total = False
            sums["break"] += hours
        elif category == EntryCategory.OVERTIME_REDUCTION:
            duration.counts_toward_total = False
            sums["overtime_reduction"] += hours
        elif category in WORK_LIKE_CATEGORIES:
            sums["work"] += hours
        elif category in ABSENCE_ENTRY_CATEGORIES:
            sums["absence"] += hours

        totals.per_entry[entry_id if entry_id is not None else id(entry)] = duration
        breakdown[category.value] += hours

    # Rounded once per day, not per entry
    totals.work_hours = float(round(sums["work"], 2))
    totals.absence_hours = float(round(sums["absence"], 2))
    totals.break_hours = float(round(sums["break"], 2))
    totals.overtime_reduction_hours = float(round(sums["overtime_reduction"], 2))
    totals.breakdown = {k: float(round(v, 2)) for k, v in breakdown.items()}
    return totals
