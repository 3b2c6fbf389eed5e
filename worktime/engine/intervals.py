# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Clock time interval arithmetic.

Clock values are "HH:MM" strings or datetime.time objects. Missing or malformed
values are a valid state (hours entered manually) and count as zero, they never
raise.
"""

from datetime import time

MINUTES_PER_DAY = 24 * 60

Clock = str | time | None


def parse_clock(clock: Clock) -> int | None:
    """Convert a clock value to minutes since midnight.

    Args:
        clock: "HH:MM" string or time object.

    Returns:
        Minutes since midnight, or None if the value is missing or malformed.
    """
    if clock is None:
        return None
    if isinstance(clock, time):
        return clock.hour * 60 + clock.minute
    if not isinstance(clock, str):
        return None

    hours, sep, minutes = clock.strip().partition(":")
    if not sep or not hours.isdigit() or not minutes[:2].isdigit():
        return None
    # Tolerate a trailing seconds part ("08:30:00")
    minutes = minutes.split(":")[0]
    if not minutes.isdigit():
        return None

    h, m = int(hours), int(minutes)
    if h > 23 or m > 59:
        return None
    return h * 60 + m


def to_minutes(clock: Clock) -> int:
    """Convert a clock value to minutes since midnight, 0 if malformed."""
    minutes = parse_clock(clock)
    return minutes if minutes is not None else 0


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _span(start: Clock, end: Clock) -> tuple[int, int] | None:
    """Return an interval in minute space, extending past midnight if needed."""
    start_min = parse_clock(start)
    end_min = parse_clock(end)
    if start_min is None or end_min is None or start_min == end_min:
        return None
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    return start_min, end_min


def duration_minutes(start: Clock, end: Clock) -> int:
    """Calculate minutes between start and end.

    An end before the start crosses midnight (23:00 to 01:00 is 120 minutes).

    Args:
        start: Start clock time.
        end: End clock time.

    Returns:
        Duration in minutes, 0 for missing or malformed input.
    """
    span = _span(start, end)
    if span is None:
        return 0
    return max(0, span[1] - span[0])


def overlap_minutes(start_a: Clock, end_a: Clock, start_b: Clock, end_b: Clock) -> int:
    """Calculate how many minutes two intervals share.

    Intervals crossing midnight are compared on both sides of midnight, so a
    break at 00:30-01:00 overlaps a shift running 22:00-02:00.

    Args:
        start_a: Start of the first interval.
        end_a: End of the first interval.
        start_b: Start of the second interval.
        end_b: End of the second interval.

    Returns:
        Overlap in minutes, 0 if either interval is empty or malformed.
    """
    span_a = _span(start_a, end_a)
    span_b = _span(start_b, end_b)
    if span_a is None or span_b is None:
        return 0

    best = 0
    for shift in (0, MINUTES_PER_DAY, -MINUTES_PER_DAY):
        b_start, b_end = span_b[0] + shift, span_b[1] + shift
        best = max(best, min(span_a[1], b_end) - max(span_a[0], b_start))
    return max(0, best)
