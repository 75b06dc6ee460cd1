"""
EventBudget - Budget Store Module.

The store owns the canonical list of events. State is an immutable
snapshot (a tuple of frozen EventBudgets); every mutation builds a
replacement snapshot and swaps it in under a lock, so a reader holding
a snapshot never observes a half-applied change.

Rejected input (empty names, non-positive item amounts, malformed
deadlines) and operations on ids that no longer exist are silent
no-ops: the store returns the unchanged state and logs the reason at
DEBUG.

Classes:
    IdGenerator: Source of candidate identifiers.
    CounterIdGenerator: Monotonic counter ids, deterministic for tests.
    UuidIdGenerator: Random UUID ids.
    BudgetStore: Owns events, applies mutations and exposes budget views.
"""

import itertools
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from eventbudget import config
from eventbudget.aggregator import BudgetAggregator
from eventbudget.calendar_grid import CalendarGridBuilder, DayCell
from eventbudget.date_logic import is_iso_date
from eventbudget.schema import BudgetItem, EventBudget, SubItem, Task, UpcomingTask
from eventbudget.tasks import TaskProjector
from eventbudget.validator import DraftValidator, ItemDraft, SubItemDraft

logger = logging.getLogger(__name__)

Snapshot = Tuple[EventBudget, ...]


class IdGenerator(ABC):
    """Source of candidate identifiers."""

    @abstractmethod
    def new_id(self) -> str:
        """Returns the next candidate identifier."""


class CounterIdGenerator(IdGenerator):
    """
    Generates "<prefix><n>" for n = start, start + 1, ...

    Example:
        >>> gen = CounterIdGenerator(prefix="e")
        >>> gen.new_id(), gen.new_id()
        ('e1', 'e2')
    """

    def __init__(self, start: int = 1, prefix: str = ""):
        self._counter = itertools.count(start)
        self._prefix = prefix

    def new_id(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


class UuidIdGenerator(IdGenerator):
    """Generates random 32-character hex identifiers."""

    def new_id(self) -> str:
        return uuid.uuid4().hex


class BudgetStore:
    """
    Owns the planned events and applies mutations to them.

    Identifier uniqueness is enforced per scope: event ids across the
    store, item ids within an event, sub-item ids within an item. A
    generated id that is already taken in its scope is discarded and
    another is drawn.

    Attributes:
        version: Number of mutations applied since construction.

    Example:
        >>> store = BudgetStore(id_generator=CounterIdGenerator())
        >>> event = store.create_event("Casamento", "2025-06-15")
        >>> event = store.add_item(event.id, ItemDraft("Buffet", "8500", "Comida"))
        >>> len(event.items)
        1
    """

    def __init__(
        self,
        events: Iterable[EventBudget] = (),
        id_generator: Optional[IdGenerator] = None,
        validator: Optional[DraftValidator] = None,
        history_limit: int = 50,
        aggregator: Optional[BudgetAggregator] = None,
        projector: Optional[TaskProjector] = None,
        grid: Optional[CalendarGridBuilder] = None
    ):
        """
        Initialises the BudgetStore.

        Args:
            events: Initial events, e.g. from a loaded plan.
            id_generator: Id source. Defaults to UuidIdGenerator.
            validator: Draft validator. Defaults to DraftValidator.
            history_limit: Number of snapshots kept for undo.
            aggregator: Computes the budget views.
            projector: Computes the task views.
            grid: Builds calendar month views.
        """
        self._events: Snapshot = tuple(events)
        self._id_generator = id_generator or UuidIdGenerator()
        self._validator = validator or DraftValidator()
        self._aggregator = aggregator or BudgetAggregator()
        self._projector = projector or TaskProjector()
        self._grid = grid or CalendarGridBuilder()
        self._history: List[Tuple[Snapshot, Optional[str]]] = []
        self._history_limit = history_limit
        self._lock = threading.RLock()
        self._active_event_id: Optional[str] = (
            self._events[0].id if self._events else None
        )
        self.version = 0

    @property
    def snapshot(self) -> Snapshot:
        """Returns the current immutable snapshot of all events."""
        return self._events

    def list_events(self) -> Snapshot:
        """Returns all events in creation order."""
        return self._events

    def get_event(self, event_id: str) -> Optional[EventBudget]:
        """Returns the event with the given id, or None."""
        return _find(self._events, event_id)

    @property
    def active_event_id(self) -> Optional[str]:
        """Returns the id of the selected event."""
        return self._active_event_id

    @property
    def active_event(self) -> Optional[EventBudget]:
        """Returns the selected event, or None if there is none."""
        if self._active_event_id is None:
            return None
        return self.get_event(self._active_event_id)

    def select_event(self, event_id: str) -> bool:
        """
        Makes an event active.

        Returns:
            True if the event exists and is now active, False otherwise.
        """
        with self._lock:
            if self.get_event(event_id) is None:
                logger.debug("select_event: event %s not found", event_id)
                return False
            self._active_event_id = event_id
            return True

    def create_event(self, name: str, date: str) -> Optional[EventBudget]:
        """
        Creates an empty event and makes it active.

        Args:
            name: Event name (required).
            date: Event date as YYYY-MM-DD (required).

        Returns:
            The new event, or None if the input was rejected.
        """
        result = self._validator.validate_event(name, date)
        if not result.is_valid:
            logger.debug("create_event rejected: %s", "; ".join(map(str, result.errors)))
            return None

        with self._lock:
            event = EventBudget(
                id=self._fresh_id(e.id for e in self._events),
                event_name=name.strip(),
                date=date.strip(),
                items=(),
            )
            self._commit(self._events + (event,), "create_event")
            self._active_event_id = event.id
            return event

    def add_item(self, event_id: str, draft: ItemDraft) -> Optional[EventBudget]:
        """
        Appends a new item built from a draft.

        The item gets a fresh id and no sub-items.

        Returns:
            The updated event, the unchanged event if the draft was
            rejected, or None if the event does not exist.
        """
        result = self._validator.validate_item(draft)

        def build(event: EventBudget) -> EventBudget:
            if not result.is_valid:
                logger.debug("add_item rejected: %s", "; ".join(map(str, result.errors)))
                return event
            item = BudgetItem(
                id=self._fresh_id(i.id for i in event.items),
                category=(draft.category or "").strip(),
                name=draft.name.strip(),
                amount=self._validator.parse_amount(draft.amount),
                deadline=self._validator.normalise_deadline(draft.deadline),
                sub_items=(),
            )
            return replace(event, items=event.items + (item,))

        return self._update_event(event_id, build, "add_item")

    def update_item(self, event_id: str, item: BudgetItem) -> Optional[EventBudget]:
        """
        Replaces the item with the same id, keeping its position.

        Returns:
            The updated event, the unchanged event if no item has that
            id or a deadline is not YYYY-MM-DD, or None if the event
            does not exist.
        """
        item = replace(item, sub_items=tuple(item.sub_items))

        def build(event: EventBudget) -> EventBudget:
            bad = [
                entity.deadline for entity in (item,) + item.sub_items
                if not _valid_deadline(entity.deadline)
            ]
            if bad:
                logger.debug("update_item rejected: invalid deadlines %s", bad)
                return event
            if _find(event.items, item.id) is None:
                logger.debug("update_item: item %s not found", item.id)
                return event
            return replace(event, items=tuple(
                item if existing.id == item.id else existing
                for existing in event.items
            ))

        return self._update_event(event_id, build, "update_item")

    def remove_item(self, event_id: str, item_id: str) -> Optional[EventBudget]:
        """
        Removes the item with the given id.

        Returns:
            The updated event, the unchanged event if no item has that
            id, or None if the event does not exist.
        """
        def build(event: EventBudget) -> EventBudget:
            if _find(event.items, item_id) is None:
                logger.debug("remove_item: item %s not found", item_id)
                return event
            return replace(event, items=tuple(
                existing for existing in event.items if existing.id != item_id
            ))

        return self._update_event(event_id, build, "remove_item")

    def add_sub_item(
        self,
        event_id: str,
        item_id: str,
        draft: SubItemDraft
    ) -> Optional[EventBudget]:
        """
        Appends a sub-item built from a draft to an item.

        Returns:
            The updated event, the unchanged event if the draft was
            rejected or the item is missing, or None if the event does
            not exist.
        """
        result = self._validator.validate_sub_item(draft)

        def build(item: BudgetItem) -> BudgetItem:
            if not result.is_valid:
                logger.debug(
                    "add_sub_item rejected: %s", "; ".join(map(str, result.errors))
                )
                return item
            sub = SubItem(
                id=self._fresh_id(s.id for s in item.sub_items),
                name=draft.name.strip(),
                amount=self._validator.parse_amount(draft.amount),
                deadline=self._validator.normalise_deadline(draft.deadline),
            )
            return replace(item, sub_items=item.sub_items + (sub,))

        return self._update_item(event_id, item_id, build, "add_sub_item")

    def update_sub_item(
        self,
        event_id: str,
        item_id: str,
        sub_item: SubItem
    ) -> Optional[EventBudget]:
        """
        Replaces the sub-item with the same id within its item.

        Returns:
            The updated event, the unchanged event if the item or
            sub-item is missing or the deadline is not YYYY-MM-DD, or
            None if the event does not exist.
        """
        def build(item: BudgetItem) -> BudgetItem:
            if not _valid_deadline(sub_item.deadline):
                logger.debug(
                    "update_sub_item rejected: invalid deadline %r", sub_item.deadline
                )
                return item
            if _find(item.sub_items, sub_item.id) is None:
                logger.debug("update_sub_item: sub-item %s not found", sub_item.id)
                return item
            return replace(item, sub_items=tuple(
                sub_item if existing.id == sub_item.id else existing
                for existing in item.sub_items
            ))

        return self._update_item(event_id, item_id, build, "update_sub_item")

    def remove_sub_item(
        self,
        event_id: str,
        item_id: str,
        sub_item_id: str
    ) -> Optional[EventBudget]:
        """
        Removes a sub-item from its item.

        Returns:
            The updated event, the unchanged event if the item or
            sub-item is missing, or None if the event does not exist.
        """
        def build(item: BudgetItem) -> BudgetItem:
            if _find(item.sub_items, sub_item_id) is None:
                logger.debug("remove_sub_item: sub-item %s not found", sub_item_id)
                return item
            return replace(item, sub_items=tuple(
                existing for existing in item.sub_items
                if existing.id != sub_item_id
            ))

        return self._update_item(event_id, item_id, build, "remove_sub_item")

    def undo(self) -> bool:
        """
        Restores the snapshot before the last applied mutation.

        Returns:
            True if a mutation was undone, False if history is empty.
        """
        with self._lock:
            if not self._history:
                return False
            events, active_id = self._history.pop()
            self._events = events
            self._active_event_id = active_id
            self.version += 1
            logger.debug("undo: restored snapshot (version %d)", self.version)
            return True

    @property
    def can_undo(self) -> bool:
        """Returns True if there is a mutation to undo."""
        return bool(self._history)

    def category_totals(self, event_id: str) -> Optional[Dict[str, Decimal]]:
        """Returns category totals of an event, or None if it is missing."""
        event = self.get_event(event_id)
        if event is None:
            return None
        return self._aggregator.category_totals(
            self._aggregator.group_by_category(event.items)
        )

    def grand_total(self, event_id: str) -> Optional[Decimal]:
        """Returns the grand total of an event, or None if it is missing."""
        event = self.get_event(event_id)
        if event is None:
            return None
        return self._aggregator.grand_total(event.items)

    def tasks(self, event_id: str) -> List[Task]:
        """Returns the deadline tasks of an event in emission order."""
        event = self.get_event(event_id)
        if event is None:
            return []
        return self._projector.collect_tasks(event)

    def upcoming(
        self,
        event_id: str,
        now: Union[date, datetime],
        limit: int = config.UPCOMING_LIMIT
    ) -> List[UpcomingTask]:
        """Returns the soonest tasks of an event with their status."""
        return self._projector.upcoming(self.tasks(event_id), now, limit)

    def month_view(self, event_id: str, year: int, month: int) -> List[DayCell]:
        """Returns the calendar cells of a month with the event's tasks."""
        return self._grid.build_month_view(self.tasks(event_id), year, month)

    def _fresh_id(self, taken: Iterable[str]) -> str:
        """Draws ids until one is not already taken in the scope."""
        taken_ids: Set[str] = set(taken)
        new_id = self._id_generator.new_id()
        while new_id in taken_ids:
            new_id = self._id_generator.new_id()
        return new_id

    def _commit(self, events: Snapshot, operation: str) -> None:
        """Swaps in a new snapshot and records the previous one."""
        self._history.append((self._events, self._active_event_id))
        if len(self._history) > self._history_limit:
            del self._history[0]
        self._events = events
        self.version += 1
        logger.debug("%s applied (version %d)", operation, self.version)

    def _update_event(
        self,
        event_id: str,
        build: Callable[[EventBudget], EventBudget],
        operation: str
    ) -> Optional[EventBudget]:
        """
        Applies build to one event and commits the result.

        A build that returns its input unchanged commits nothing.
        """
        with self._lock:
            event = self.get_event(event_id)
            if event is None:
                logger.debug("%s: event %s not found", operation, event_id)
                return None

            updated = build(event)
            if updated is event:
                return event

            self._commit(tuple(
                updated if existing.id == event_id else existing
                for existing in self._events
            ), operation)
            return updated

    def _update_item(
        self,
        event_id: str,
        item_id: str,
        build: Callable[[BudgetItem], BudgetItem],
        operation: str
    ) -> Optional[EventBudget]:
        """Applies build to one item of an event and commits the result."""
        def build_event(event: EventBudget) -> EventBudget:
            item = _find(event.items, item_id)
            if item is None:
                logger.debug("%s: item %s not found", operation, item_id)
                return event

            updated = build(item)
            if updated is item:
                return event
            return replace(event, items=tuple(
                updated if existing.id == item_id else existing
                for existing in event.items
            ))

        return self._update_event(event_id, build_event, operation)


def _valid_deadline(deadline: Optional[str]) -> bool:
    """Returns True for no deadline or a YYYY-MM-DD date."""
    return not deadline or is_iso_date(deadline)


def _find(entities, entity_id):
    """Returns the first entity with a matching id, or None."""
    for entity in entities:
        if entity.id == entity_id:
            return entity
    return None
