"""
EventBudget - Task Projection Module.

Flattens the deadlines of an event's items and sub-items into a
uniform task list for scheduling views.

Classes:
    TaskProjector: Collects, sorts and classifies deadline tasks.
"""

from datetime import date, datetime
from typing import List, Optional, Sequence, Union

from eventbudget import config
from eventbudget.date_logic import parse_iso_date
from eventbudget.deadlines import DeadlineClassifier
from eventbudget.schema import (
    DeadlineKind,
    EventBudget,
    Task,
    TaskKind,
    UpcomingTask,
)


class TaskProjector:
    """
    Projects item and sub-item deadlines into tasks.

    Tasks are emitted item first, then that item's sub-items, in item
    order. Sorting is always explicit and stable, so tasks sharing a
    deadline keep their emission order.

    Example:
        >>> projector = TaskProjector()
        >>> tasks = projector.collect_tasks(event)
        >>> soonest = projector.upcoming(tasks, date(2025, 3, 1), limit=5)
    """

    def __init__(self, classifier: Optional[DeadlineClassifier] = None):
        """
        Initialises the TaskProjector.

        Args:
            classifier: Classifier used to label upcoming tasks.
        """
        self._classifier = classifier or DeadlineClassifier()

    def collect_tasks(self, event: EventBudget) -> List[Task]:
        """
        Collects one task per item or sub-item with a deadline.

        A sub-item's task is emitted whether or not its parent item has
        a deadline, and carries the parent item's name.

        Args:
            event: Event to project.

        Returns:
            Tasks in emission order.
        """
        tasks: List[Task] = []
        for item in event.items:
            if item.deadline:
                tasks.append(Task(
                    id=item.id,
                    name=item.name,
                    deadline=item.deadline,
                    kind=TaskKind.ITEM,
                ))
            for sub in item.sub_items:
                if sub.deadline:
                    tasks.append(Task(
                        id=sub.id,
                        name=sub.name,
                        deadline=sub.deadline,
                        kind=TaskKind.SUB,
                        parent_name=item.name,
                    ))
        return tasks

    def sort_by_deadline(self, tasks: Sequence[Task]) -> List[Task]:
        """
        Sorts tasks ascending by deadline date.

        Raises:
            ValueError: If a task deadline is not a valid ISO date.
        """
        return sorted(tasks, key=lambda task: parse_iso_date(task.deadline))

    def upcoming(
        self,
        tasks: Sequence[Task],
        now: Union[date, datetime],
        limit: int = config.UPCOMING_LIMIT,
        include_overdue: bool = True
    ) -> List[UpcomingTask]:
        """
        Returns the soonest tasks with their deadline status.

        Args:
            tasks: Tasks to rank.
            now: Reference date or datetime supplied by the caller.
            limit: Maximum number of tasks returned.
            include_overdue: When False, overdue tasks are skipped.

        Returns:
            At most limit UpcomingTask entries, soonest first.
        """
        if limit <= 0:
            return []

        result: List[UpcomingTask] = []
        for task in self.sort_by_deadline(tasks):
            status = self._classifier.classify(task.deadline, now)
            if not include_overdue and status.kind == DeadlineKind.OVERDUE:
                continue
            result.append(UpcomingTask(task=task, status=status))
            if len(result) == limit:
                break
        return result
