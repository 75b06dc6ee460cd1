"""
EventBudget - Date Logic Module.

This module provides the calendar arithmetic used by deadline
classification and the monthly calendar grid: ISO date parsing,
leap year and month length rules, whole-day differences and
month navigation.

Dates cross module boundaries as ISO calendar-date strings
(YYYY-MM-DD); parse_iso_date and format_iso_date are the only
conversions between that form and datetime.date.

Classes:
    DateManager: Manages all date-related calculations for planning.
"""

import calendar
import math
from datetime import date, datetime, time
from typing import Union

ISO_DATE_FORMAT = "%Y-%m-%d"

WEEK_STARTS = {
    "monday": calendar.MONDAY,
    "sunday": calendar.SUNDAY,
}

SECONDS_PER_DAY = 24 * 60 * 60


def parse_iso_date(value: str) -> date:
    """
    Parses an ISO calendar date string.

    Args:
        value: Date string in YYYY-MM-DD form.

    Returns:
        Parsed date.

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date.
    """
    return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    """Formats a date as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def is_iso_date(value: str) -> bool:
    """Returns True if value parses as a YYYY-MM-DD date."""
    try:
        parse_iso_date(value)
    except (TypeError, ValueError, AttributeError):
        return False
    return True


def format_display_date(value: str) -> str:
    """
    Formats an ISO date for display as DD/MM/YYYY.

    Example:
        >>> format_display_date("2025-06-15")
        '15/06/2025'
    """
    return parse_iso_date(value).strftime("%d/%m/%Y")


class DateManager:
    """
    Manages date calculations for event planning.

    Handles leap year logic, month lengths, deadline distances and
    calendar month navigation. The current time is always passed in
    by the caller; no method reads the system clock.

    Attributes:
        week_start: calendar weekday constant of the first grid column.

    Example:
        >>> dm = DateManager()
        >>> dm.get_days_until("2025-03-20", date(2025, 3, 13))
        7
        >>> dm.is_leap_year(2024)
        True
    """

    def __init__(self, week_start: Union[str, int] = "sunday"):
        """
        Initialises the DateManager.

        Args:
            week_start: "sunday", "monday" or a calendar weekday constant.

        Raises:
            ValueError: If week_start is not recognised.
        """
        if isinstance(week_start, str):
            if week_start.lower() not in WEEK_STARTS:
                raise ValueError(
                    f"Week start must be one of {sorted(WEEK_STARTS)}, "
                    f"got {week_start!r}"
                )
            week_start = WEEK_STARTS[week_start.lower()]
        if not 0 <= week_start <= 6:
            raise ValueError(f"Week start must be between 0 and 6, got {week_start}")
        self.week_start = week_start

    def is_leap_year(self, year: int) -> bool:
        """
        Determines if the specified year is a leap year.

        A year is a leap year if it is divisible by 4, except for
        century years which must be divisible by 400.

        Args:
            year: Four-digit year to check.

        Returns:
            True if the year is a leap year, False otherwise.
        """
        return calendar.isleap(year)

    def get_days_in_month(self, year: int, month: int) -> int:
        """
        Returns the total number of days in the specified month.

        Args:
            year: Four-digit year.
            month: Month number (1-12).

        Returns:
            Number of days in the specified month.

        Raises:
            ValueError: If month is not in range 1-12.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        return calendar.monthrange(year, month)[1]

    def get_leading_padding(self, year: int, month: int) -> int:
        """
        Returns the number of empty grid cells before day 1.

        This is the column index of the 1st of the month in a week
        that begins on week_start.

        Raises:
            ValueError: If month is not in range 1-12.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        first_weekday = calendar.monthrange(year, month)[0]
        return (first_weekday - self.week_start) % 7

    def get_days_until(self, deadline: str, now: Union[date, datetime]) -> int:
        """
        Calculates whole days from now until the deadline.

        With a date, this is the plain calendar difference. With a
        datetime, the deadline is taken as midnight at the start of the
        deadline day (in now's timezone) and partial days are rounded up.

        Args:
            deadline: ISO date string (YYYY-MM-DD).
            now: Reference date or datetime supplied by the caller.

        Returns:
            Days remaining; negative when the deadline has passed.

        Raises:
            ValueError: If deadline is not a valid ISO date.
        """
        target = parse_iso_date(deadline)

        if isinstance(now, datetime):
            target_start = datetime.combine(target, time.min, tzinfo=now.tzinfo)
            seconds = (target_start - now).total_seconds()
            return math.ceil(seconds / SECONDS_PER_DAY)

        return (target - now).days

    def shift_month(self, current: date, offset: int) -> date:
        """
        Moves a calendar month forward or backward.

        Rolls over year boundaries in both directions. The result is
        always the first day of the target month.

        Args:
            current: Any date within the starting month.
            offset: Number of months to move (negative moves back).

        Returns:
            First day of the target month.

        Example:
            >>> DateManager().shift_month(date(2025, 1, 15), -1)
            datetime.date(2024, 12, 1)
        """
        month_index = current.year * 12 + (current.month - 1) + offset
        year, month_zero = divmod(month_index, 12)
        return date(year, month_zero + 1, 1)

    def format_day(self, year: int, month: int, day: int) -> str:
        """
        Builds the ISO date string for a calendar cell.

        Raises:
            ValueError: If the date does not exist.
        """
        return format_iso_date(date(year, month, day))
