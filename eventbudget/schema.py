"""
EventBudget - Data Schema Module.

This module defines the core data models for the event budget planner.
All monetary fields use Decimal type to ensure financial precision, and
all dates are carried as ISO calendar-date strings (YYYY-MM-DD).

Ownership is a strict tree: an EventBudget owns its BudgetItems, and a
BudgetItem owns its SubItems. Entities are frozen; updates produce new
instances via dataclasses.replace.

Classes:
    SubItem: A cost component belonging to exactly one item.
    BudgetItem: A top-level budget line within an event.
    EventBudget: A planned occasion with its own budget tree.
    TaskKind: Whether a task was projected from an item or a sub-item.
    Task: Deadline-bearing projection of an item or sub-item.
    DeadlineKind: Urgency bucket of a deadline.
    DeadlineStatus: Classified deadline with display label and colour.
    UpcomingTask: A task paired with its deadline status.
    ExternalOperationFailed: Failure reported by a boundary operation.
    ExportOutcome: Result of a boundary operation (file save, load, export).
    CategoryShare: One slice of the category breakdown chart.
    PortfolioSummary: Aggregate figures across all events.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class SubItem:
    """
    A cost component of a budget item.

    Attributes:
        id: Identifier, unique within the parent item.
        name: Display name.
        amount: Cost in the planner currency (non-negative by convention).
        deadline: Optional ISO date (YYYY-MM-DD) for payment or task.
    """

    id: str
    name: str
    amount: Decimal
    deadline: Optional[str] = None


@dataclass(frozen=True)
class BudgetItem:
    """
    A top-level budget line within an event.

    When sub_items is non-empty the stored amount is ignored for totals;
    it is kept so the item round-trips unchanged.

    Attributes:
        id: Identifier, unique within the event.
        category: Free-text category used for grouping.
        name: Display name.
        amount: Stored amount, authoritative only without sub-items.
        deadline: Optional ISO date (YYYY-MM-DD).
        sub_items: Ordered sub-items (possibly empty).
    """

    id: str
    category: str
    name: str
    amount: Decimal
    deadline: Optional[str] = None
    sub_items: Tuple[SubItem, ...] = ()


@dataclass(frozen=True)
class EventBudget:
    """
    A planned occasion with its own budget tree.

    Attributes:
        id: Globally unique identifier.
        event_name: Display name of the event.
        date: Event date as ISO string (YYYY-MM-DD).
        items: Ordered budget items.
    """

    id: str
    event_name: str
    date: str
    items: Tuple[BudgetItem, ...] = ()


class TaskKind(Enum):
    """Source of a projected task."""

    ITEM = "item"
    SUB = "sub"


@dataclass(frozen=True)
class Task:
    """
    A derived, deadline-bearing view of an item or sub-item.

    Regenerated on every read; never stored.

    Attributes:
        id: Id of the source item or sub-item.
        name: Name of the source item or sub-item.
        deadline: ISO date (YYYY-MM-DD).
        kind: TaskKind.ITEM or TaskKind.SUB.
        parent_name: Name of the parent item for sub-item tasks.
    """

    id: str
    name: str
    deadline: str
    kind: TaskKind
    parent_name: Optional[str] = None


class DeadlineKind(Enum):
    """
    Urgency bucket of a deadline relative to "now".

    Attributes:
        OVERDUE: The deadline has passed.
        DUE_SOON: Due within the due-soon window (0 to 7 days by default).
        SCHEDULED: Due later than the due-soon window.
        UNSCHEDULED: No deadline set.
    """

    OVERDUE = "OVERDUE"
    DUE_SOON = "DUE_SOON"
    SCHEDULED = "SCHEDULED"
    UNSCHEDULED = "UNSCHEDULED"


@dataclass(frozen=True)
class DeadlineStatus:
    """
    Classified deadline.

    Attributes:
        kind: Urgency bucket.
        days_remaining: Whole days until the deadline, None if unscheduled.
        deadline: The classified ISO date, None if unscheduled.
        label: Human readable label for display.
        colour: Display colour as a hex string.
    """

    kind: DeadlineKind
    days_remaining: Optional[int]
    deadline: Optional[str]
    label: str
    colour: str


@dataclass(frozen=True)
class UpcomingTask:
    """A task paired with its deadline status."""

    task: Task
    status: DeadlineStatus


@dataclass(frozen=True)
class ExternalOperationFailed:
    """
    Failure reported by a boundary operation.

    Attributes:
        operation: Name of the failed operation (e.g. "export_report").
        message: Client-facing description of the failure.
    """

    operation: str
    message: str

    def __str__(self) -> str:
        """Returns a formatted failure message for display."""
        return f"Error: {self.operation} failed - {self.message}"


@dataclass(frozen=True)
class ExportOutcome:
    """
    Result of a boundary operation.

    Attributes:
        path: File written or read, when the operation succeeded.
        failure: Failure details, when it did not.
    """

    path: Optional[Path] = None
    failure: Optional[ExternalOperationFailed] = None

    @property
    def is_ok(self) -> bool:
        """Returns True if the operation succeeded."""
        return self.failure is None


@dataclass(frozen=True)
class CategoryShare:
    """
    One slice of the category breakdown chart.

    Attributes:
        category: Category name.
        total: Sum of effective amounts in the category.
        percentage: Share of the grand total (0-100).
        colour: Chart colour as a hex string.
    """

    category: str
    total: Decimal
    percentage: Decimal
    colour: str


@dataclass(frozen=True)
class PortfolioSummary:
    """
    Aggregate figures across all planned events.

    Attributes:
        event_count: Number of events.
        item_count: Number of budget items across events.
        total_budget: Sum of event grand totals.
        events_by_date: Events ordered by event date.
    """

    event_count: int
    item_count: int
    total_budget: Decimal
    events_by_date: Tuple[EventBudget, ...]
