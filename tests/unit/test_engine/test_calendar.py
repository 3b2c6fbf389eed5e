# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the public holiday calendar."""

from datetime import date

from worktime.engine.calendar import HolidayCalendar


def test_national_holidays():
    calendar = HolidayCalendar("DE")
    holidays = calendar.get_public_holidays(2026)
    assert date(2026, 12, 25) in holidays
    assert date(2026, 10, 3) in holidays


def test_subdivision_holidays():
    assert HolidayCalendar("DE", "BY").is_public_holiday(date(2026, 1, 6))
    assert not HolidayCalendar("DE", "BE").is_public_holiday(date(2026, 1, 6))


def test_holiday_dates():
    dates = HolidayCalendar("DE", "BY").holiday_dates(2026)
    assert date(2026, 5, 1) in dates
    assert date(2026, 8, 3) not in dates
