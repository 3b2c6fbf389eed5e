# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Public holiday calendar."""

from datetime import date

import holidays


class HolidayCalendar:
    """Public holidays of one country and optional subdivision."""

    def __init__(self, country: str = "DE", subdivision: str | None = None) -> None:
        """Initialize the calendar.

        Args:
            country: ISO country code (e.g., "DE").
            subdivision: Optional state/region code (e.g., "BY").
        """
        self.country = country
        self.subdivision = subdivision

    def get_public_holidays(self, year: int) -> dict[date, str]:
        """Get public holidays for a year.

        Args:
            year: The year to get holidays for.

        Returns:
            Dictionary mapping dates to holiday names.
        """
        country_holidays = holidays.country_holidays(
            self.country, subdiv=self.subdivision, years=year
        )
        return dict(country_holidays.items())

    def holiday_dates(self, year: int) -> set[date]:
        """Get the set of public holiday dates for a year."""
        return set(self.get_public_holidays(year))

    def is_public_holiday(self, check_date: date) -> bool:
        """Check if a date is a public holiday."""
        return check_date in self.holiday_dates(check_date.year)
