"""
EventBudget - Plan Import/Export Module.

This module provides JSON serialisation for event plans so they can be
transmitted or exported and loaded back. All Decimal values are written
as strings to preserve precision, and an item's stored amount is kept
even when sub-items override it, so a plan round-trips unchanged.

File operations are boundary operations: I/O and decode failures are
reported as an ExportOutcome carrying ExternalOperationFailed rather
than raised, and never touch store state.

Classes:
    DecimalEncoder: JSON encoder for Decimal values.
    PlanSerializer: Converts events to and from JSON.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from eventbudget import __version__
from eventbudget.date_logic import is_iso_date
from eventbudget.schema import (
    BudgetItem,
    EventBudget,
    ExportOutcome,
    ExternalOperationFailed,
    SubItem,
)

logger = logging.getLogger(__name__)


class DecimalEncoder(json.JSONEncoder):
    """
    Custom JSON encoder that converts Decimal to string.

    Preserves full precision of Decimal values by encoding them
    as strings rather than floats.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class PlanSerializer:
    """
    Converts event plans to and from JSON.

    Example:
        >>> serializer = PlanSerializer()
        >>> json_str = serializer.serialise_events(store.list_events())
        >>> restored = serializer.deserialise_events(json_str)
        >>> assert restored == store.list_events()
    """

    def __init__(self, version: Optional[str] = None):
        """
        Initialises the PlanSerializer.

        Args:
            version: Version identifier written to metadata.
                     Defaults to package version.
        """
        self._version = version or __version__

    def serialise_events(
        self,
        events: Sequence[EventBudget],
        timestamp: Optional[datetime] = None
    ) -> str:
        """
        Serialises events to a JSON string.

        Args:
            events: Events to serialise.
            timestamp: Export time written to metadata. Defaults to now.

        Returns:
            JSON string representation.
        """
        data = {
            "metadata": {
                "timestamp": (timestamp or datetime.now()).isoformat(),
                "version": self._version,
                "generated_by": "EventBudget",
            },
            "events": [self._event_to_dict(event) for event in events],
        }
        return json.dumps(data, cls=DecimalEncoder, indent=2, ensure_ascii=False)

    def deserialise_events(self, json_str: str) -> Tuple[EventBudget, ...]:
        """
        Deserialises a JSON string to events.

        Args:
            json_str: JSON string to deserialise.

        Returns:
            Reconstructed events in file order.

        Raises:
            json.JSONDecodeError: If JSON is malformed.
            KeyError: If required fields are missing.
            ValueError: If data types or deadlines are invalid.
        """
        data = json.loads(json_str)
        return tuple(self._dict_to_event(event) for event in data["events"])

    def save_plan(
        self,
        events: Sequence[EventBudget],
        file_path: Union[str, Path]
    ) -> ExportOutcome:
        """
        Saves events to a JSON file.

        Args:
            events: Events to save.
            file_path: Output file path.

        Returns:
            ExportOutcome with the written path, or the failure.
        """
        file_path = Path(file_path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(self.serialise_events(events), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save plan to %s: %s", file_path, e)
            return ExportOutcome(failure=ExternalOperationFailed(
                operation="save_plan",
                message=f"Could not write {file_path}: {e}",
            ))

        logger.info("Saved %d events to %s", len(events), file_path)
        return ExportOutcome(path=file_path)

    def load_plan(
        self,
        file_path: Union[str, Path]
    ) -> Tuple[Tuple[EventBudget, ...], ExportOutcome]:
        """
        Loads events from a JSON file.

        Args:
            file_path: Path to JSON file.

        Returns:
            Tuple of (events, outcome). Events are empty on failure.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            return (), ExportOutcome(failure=ExternalOperationFailed(
                operation="load_plan",
                message=f"Plan file not found: {file_path}",
            ))

        try:
            events = self.deserialise_events(file_path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning("Could not read plan %s: %s", file_path, e)
            return (), ExportOutcome(failure=ExternalOperationFailed(
                operation="load_plan",
                message=f"Could not read {file_path}: {e}",
            ))
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning("Invalid plan file %s: %s", file_path, e)
            return (), ExportOutcome(failure=ExternalOperationFailed(
                operation="load_plan",
                message=f"Invalid plan file {file_path}: {e!r}",
            ))

        logger.info("Loaded %d events from %s", len(events), file_path)
        return events, ExportOutcome(path=file_path)

    def generate_filename(self, prefix: str = "event_plan") -> str:
        """
        Generates a timestamped filename for plan files.

        Returns:
            Filename like "event_plan_2025-03-18_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"

    def _event_to_dict(self, event: EventBudget) -> Dict[str, Any]:
        return {
            "id": event.id,
            "event_name": event.event_name,
            "date": event.date,
            "items": [self._item_to_dict(item) for item in event.items],
        }

    def _item_to_dict(self, item: BudgetItem) -> Dict[str, Any]:
        item_dict: Dict[str, Any] = {
            "id": item.id,
            "category": item.category,
            "name": item.name,
            "amount": str(item.amount),
            "sub_items": [self._sub_item_to_dict(sub) for sub in item.sub_items],
        }
        if item.deadline is not None:
            item_dict["deadline"] = item.deadline
        return item_dict

    def _sub_item_to_dict(self, sub: SubItem) -> Dict[str, Any]:
        sub_dict: Dict[str, Any] = {
            "id": sub.id,
            "name": sub.name,
            "amount": str(sub.amount),
        }
        if sub.deadline is not None:
            sub_dict["deadline"] = sub.deadline
        return sub_dict

    def _dict_to_event(self, data: Dict[str, Any]) -> EventBudget:
        return EventBudget(
            id=str(data["id"]),
            event_name=data["event_name"],
            date=data["date"],
            items=tuple(self._dict_to_item(item) for item in data.get("items", [])),
        )

    def _dict_to_item(self, data: Dict[str, Any]) -> BudgetItem:
        sub_items: List[SubItem] = [
            self._dict_to_sub_item(sub) for sub in data.get("sub_items", [])
        ]
        return BudgetItem(
            id=str(data["id"]),
            category=data["category"],
            name=data["name"],
            amount=Decimal(str(data["amount"])),
            deadline=self._dict_to_deadline(data),
            sub_items=tuple(sub_items),
        )

    def _dict_to_sub_item(self, data: Dict[str, Any]) -> SubItem:
        return SubItem(
            id=str(data["id"]),
            name=data["name"],
            amount=Decimal(str(data["amount"])),
            deadline=self._dict_to_deadline(data),
        )

    def _dict_to_deadline(self, data: Dict[str, Any]) -> Optional[str]:
        """
        Reads an optional deadline.

        Raises:
            ValueError: If a non-empty deadline is not YYYY-MM-DD.
        """
        deadline = data.get("deadline") or None
        if deadline is not None and not is_iso_date(deadline):
            raise ValueError(f"Deadline must be YYYY-MM-DD (received: {deadline!r})")
        return deadline
