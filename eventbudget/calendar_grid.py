"""
EventBudget - Calendar Grid Module.

Builds the day grid of a calendar month and buckets deadline tasks
onto its days. The grid depends only on (year, month) and the
configured week start.

Classes:
    DayCell: One cell of the month grid, empty padding or a day.
    CalendarGridBuilder: Builds month grids and navigates months.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from eventbudget import config
from eventbudget.date_logic import DateManager
from eventbudget.schema import Task

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class DayCell:
    """
    One cell of the month grid.

    Attributes:
        day: Day of month, None for padding before day 1.
        tasks: Tasks due on this day (filled by build_month_view).
    """

    day: Optional[int] = None
    tasks: Tuple[Task, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Returns True for padding cells."""
        return self.day is None


class CalendarGridBuilder:
    """
    Builds monthly calendar grids.

    Attributes:
        date_manager: DateManager carrying the week-start convention.

    Example:
        >>> builder = CalendarGridBuilder()
        >>> cells = builder.build_month(2025, 2)
        >>> sum(1 for cell in cells if not cell.is_empty)
        28
    """

    def __init__(self, date_manager: Optional[DateManager] = None):
        """
        Initialises the CalendarGridBuilder.

        Args:
            date_manager: DateManager for month arithmetic. Defaults to
                one using the configured week start.
        """
        self.date_manager = date_manager or DateManager(config.WEEK_START)

    def build_month(self, year: int, month: int) -> List[DayCell]:
        """
        Builds the day cells of a month.

        Args:
            year: Four-digit year.
            month: Month number (1-12).

        Returns:
            Padding cells for the weekdays before the 1st, followed by
            one cell per day of the month.

        Raises:
            ValueError: If month is not in range 1-12.
        """
        padding = self.date_manager.get_leading_padding(year, month)
        days_in_month = self.date_manager.get_days_in_month(year, month)

        cells = [DayCell() for _ in range(padding)]
        cells.extend(DayCell(day=day) for day in range(1, days_in_month + 1))
        return cells

    def tasks_on_day(
        self,
        tasks: Sequence[Task],
        year: int,
        month: int,
        day: int
    ) -> List[Task]:
        """
        Filters tasks due on the given calendar day.

        Matching compares the task deadline against the ISO string of
        the calendar date, preserving task order.

        Raises:
            ValueError: If the date does not exist.
        """
        date_str = self.date_manager.format_day(year, month, day)
        return [task for task in tasks if task.deadline == date_str]

    def build_month_view(
        self,
        tasks: Sequence[Task],
        year: int,
        month: int
    ) -> List[DayCell]:
        """
        Builds the month grid with each day's tasks attached.

        Raises:
            ValueError: If month is not in range 1-12.
        """
        return [
            cell if cell.is_empty else DayCell(
                day=cell.day,
                tasks=tuple(self.tasks_on_day(tasks, year, month, cell.day)),
            )
            for cell in self.build_month(year, month)
        ]

    def shift_month(self, current: date, offset: int) -> date:
        """Returns the first day of the month offset months from current."""
        return self.date_manager.shift_month(current, offset)

    def weekday_headers(self) -> List[str]:
        """Returns weekday column names starting at the week start."""
        start = self.date_manager.week_start
        return [WEEKDAY_NAMES[(start + i) % 7] for i in range(7)]

    def month_label(self, year: int, month: int) -> str:
        """
        Returns a display label such as "February 2025".

        Raises:
            ValueError: If month is not in range 1-12.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        return f"{MONTH_NAMES[month - 1]} {year}"
