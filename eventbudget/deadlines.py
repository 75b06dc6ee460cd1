"""
EventBudget - Deadline Classification Module.

Maps a deadline (or its absence) to an urgency bucket relative to a
caller-supplied "now". Classification is pure: the same deadline and
"now" always give the same status.

Classes:
    DeadlineClassifier: Buckets deadlines into Overdue, DueSoon,
        Scheduled or Unscheduled.
"""

from datetime import date, datetime
from typing import Optional, Union

from eventbudget import config
from eventbudget.date_logic import DateManager, format_display_date
from eventbudget.schema import DeadlineKind, DeadlineStatus


class DeadlineClassifier:
    """
    Classifies deadlines into urgency buckets.

    Bucket boundaries (days_remaining = deadline - now, whole days):
    - UNSCHEDULED: no deadline
    - OVERDUE: days_remaining < 0
    - DUE_SOON: 0 <= days_remaining <= due_soon_days
    - SCHEDULED: days_remaining > due_soon_days

    Attributes:
        due_soon_days: Upper bound (inclusive) of the due-soon window.

    Example:
        >>> classifier = DeadlineClassifier()
        >>> classifier.classify("2025-03-20", date(2025, 3, 18)).label
        'Due in 2d'
    """

    OVERDUE_COLOUR = "#dc2626"
    DUE_SOON_COLOUR = "#d97706"
    SCHEDULED_COLOUR = "#4f46e5"
    UNSCHEDULED_COLOUR = "#94a3b8"

    def __init__(
        self,
        date_manager: Optional[DateManager] = None,
        due_soon_days: int = config.DUE_SOON_DAYS
    ):
        """
        Initialises the DeadlineClassifier.

        Args:
            date_manager: DateManager for day arithmetic.
            due_soon_days: Width of the due-soon window in days.
        """
        self._date_manager = date_manager or DateManager()
        self.due_soon_days = due_soon_days

    def classify(
        self,
        deadline: Optional[str],
        now: Union[date, datetime]
    ) -> DeadlineStatus:
        """
        Classifies a deadline relative to now.

        Args:
            deadline: ISO date string, or None / "" for no deadline.
            now: Reference date or datetime supplied by the caller.

        Returns:
            DeadlineStatus with bucket, days remaining, label and colour.

        Raises:
            ValueError: If deadline is set but not a valid ISO date.
        """
        if not deadline:
            return DeadlineStatus(
                kind=DeadlineKind.UNSCHEDULED,
                days_remaining=None,
                deadline=None,
                label="No deadline",
                colour=self.UNSCHEDULED_COLOUR,
            )

        days_remaining = self._date_manager.get_days_until(deadline, now)

        if days_remaining < 0:
            return DeadlineStatus(
                kind=DeadlineKind.OVERDUE,
                days_remaining=days_remaining,
                deadline=deadline,
                label="Overdue",
                colour=self.OVERDUE_COLOUR,
            )
        elif days_remaining <= self.due_soon_days:
            return DeadlineStatus(
                kind=DeadlineKind.DUE_SOON,
                days_remaining=days_remaining,
                deadline=deadline,
                label=f"Due in {days_remaining}d",
                colour=self.DUE_SOON_COLOUR,
            )
        else:
            return DeadlineStatus(
                kind=DeadlineKind.SCHEDULED,
                days_remaining=days_remaining,
                deadline=deadline,
                label=format_display_date(deadline),
                colour=self.SCHEDULED_COLOUR,
            )


_DEFAULT_CLASSIFIER = DeadlineClassifier()


def classify(deadline: Optional[str], now: Union[date, datetime]) -> DeadlineStatus:
    """Classifies a deadline with the default due-soon window."""
    return _DEFAULT_CLASSIFIER.classify(deadline, now)
