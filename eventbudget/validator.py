"""
EventBudget - Draft Validation Module.

This module validates user-entered drafts before the store turns them
into budget entities, and parses amounts typed in the planner's
currency formats. Validation failures are routine user-input
conditions: they are collected as ValidationError records rather than
raised.

Classes:
    ValidationError: A single field failure with a client-facing message.
    ValidationResult: Container for validation outcomes.
    ItemDraft: User input for a new budget item.
    SubItemDraft: User input for a new sub-item.
    DraftValidator: Validates drafts and parses amounts.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import List, Optional, Tuple, Union

from eventbudget import config
from eventbudget.date_logic import is_iso_date

Amount = Union[Decimal, int, float, str]


@dataclass
class ValidationError:
    """
    Represents a single validation error with context.

    Attributes:
        field_name: The name of the field that failed validation.
        value: The invalid value that was provided.
        message: A client-facing error message.
    """

    field_name: str
    value: str
    message: str

    def __str__(self) -> str:
        """Returns a formatted error message for client display."""
        return f"Error: '{self.field_name}' - {self.message}"


@dataclass
class ValidationResult:
    """
    Container for draft validation results.

    Attributes:
        errors: List of ValidationError objects.
    """

    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Returns True if validation produced no errors."""
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        """Returns the number of validation errors."""
        return len(self.errors)


@dataclass(frozen=True)
class ItemDraft:
    """
    User input for a new budget item.

    Attributes:
        name: Item name (required).
        amount: Item amount (must be positive).
        category: Free-text category.
        deadline: Optional ISO date; "" means no deadline.
    """

    name: str
    amount: Amount
    category: str = config.DEFAULT_CATEGORY
    deadline: Optional[str] = None


@dataclass(frozen=True)
class SubItemDraft:
    """
    User input for a new sub-item.

    Attributes:
        name: Sub-item name (required).
        amount: Sub-item amount.
        deadline: Optional ISO date; "" means no deadline.
    """

    name: str
    amount: Amount = Decimal("0")
    deadline: Optional[str] = None


class DraftValidator:
    """
    Validates drafts for events, items and sub-items.

    Rules:
    - Event: name and date required, date must be YYYY-MM-DD.
    - Item: name required, amount must parse and be positive.
    - Sub-item: name required, amount must parse.
    - Any non-empty deadline must be YYYY-MM-DD.

    Example:
        >>> validator = DraftValidator()
        >>> validator.validate_item(ItemDraft("Buffet", "8500")).is_valid
        True
        >>> validator.parse_amount("R$ 1.500,00")
        Decimal('1500.00')
    """

    # Symbols and whitespace stripped before parsing
    CURRENCY_CLEAN_PATTERN = re.compile(r"(R\$|R|\$|\s)")

    # "1.500" or "12.345.678": dots are thousands separators
    DOT_THOUSANDS_PATTERN = re.compile(r"^-?\d{1,3}(\.\d{3})+$")

    NUMBER_PATTERN = re.compile(r"^-?\d+\.?\d*$")

    def validate_event(self, name: str, date: str) -> ValidationResult:
        """
        Validates the fields of a new event.

        Args:
            name: Event name.
            date: Event date as ISO string.

        Returns:
            ValidationResult with any errors.
        """
        result = ValidationResult()

        if not (name or "").strip():
            result.errors.append(ValidationError(
                field_name="event_name",
                value=name or "",
                message="Event name cannot be empty"
            ))

        if not (date or "").strip():
            result.errors.append(ValidationError(
                field_name="date",
                value=date or "",
                message="Event date cannot be empty"
            ))
        elif not is_iso_date(date):
            result.errors.append(ValidationError(
                field_name="date",
                value=date,
                message=f"Event date must be YYYY-MM-DD (received: '{date}')"
            ))

        return result

    def validate_item(self, draft: ItemDraft) -> ValidationResult:
        """
        Validates a new item draft.

        Args:
            draft: Item draft to check.

        Returns:
            ValidationResult with any errors.
        """
        result = ValidationResult()
        self._check_name(draft.name, result)

        _, error = self._parse_amount_field(draft.amount, must_be_positive=True)
        if error:
            result.errors.append(error)

        self._check_deadline(draft.deadline, result)
        return result

    def validate_sub_item(self, draft: SubItemDraft) -> ValidationResult:
        """
        Validates a new sub-item draft.

        Args:
            draft: Sub-item draft to check.

        Returns:
            ValidationResult with any errors.
        """
        result = ValidationResult()
        self._check_name(draft.name, result)

        _, error = self._parse_amount_field(draft.amount, must_be_positive=False)
        if error:
            result.errors.append(error)

        self._check_deadline(draft.deadline, result)
        return result

    def parse_amount(self, value: Amount) -> Decimal:
        """
        Parses an amount to Decimal rounded to 2 places.

        Handles plain numbers and both thousands conventions:
        - "1500", "1500.50"
        - "1,500.50" (comma thousands, dot decimal)
        - "R$ 1.500,50" (dot thousands, comma decimal)

        Args:
            value: Decimal, int, float or string amount.

        Returns:
            Decimal amount, rounded with Banker's Rounding.

        Raises:
            ValueError: If the value is not a valid number or is too large.
        """
        if isinstance(value, Decimal):
            decimal_value = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            decimal_value = Decimal(str(value))
        elif isinstance(value, str):
            decimal_value = self._parse_amount_string(value)
        else:
            raise ValueError(f"Amount must be a number (received: {value!r})")

        if not decimal_value.is_finite():
            raise ValueError(f"Amount must be a finite number (received: {value!r})")

        try:
            return decimal_value.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)
        except InvalidOperation:
            raise ValueError(f"Amount is too large (received: {value!r})")

    def normalise_deadline(self, deadline: Optional[str]) -> Optional[str]:
        """Returns the stripped deadline, or None for empty input."""
        if deadline is None or not deadline.strip():
            return None
        return deadline.strip()

    def _parse_amount_string(self, value: str) -> Decimal:
        """
        Converts a typed amount string to Decimal.

        Raises:
            ValueError: If the string is not a valid number.
        """
        cleaned = self.CURRENCY_CLEAN_PATTERN.sub("", value)

        if "," in cleaned and "." in cleaned:
            # The rightmost separator is the decimal point
            if cleaned.rfind(",") > cleaned.rfind("."):
                cleaned = cleaned.replace(".", "").replace(",", ".")
            else:
                cleaned = cleaned.replace(",", "")
        elif "," in cleaned:
            if re.match(r"^-?\d+,\d{1,2}$", cleaned):
                cleaned = cleaned.replace(",", ".")
            else:
                cleaned = cleaned.replace(",", "")
        elif self.DOT_THOUSANDS_PATTERN.match(cleaned):
            cleaned = cleaned.replace(".", "")

        if not self.NUMBER_PATTERN.match(cleaned):
            raise ValueError(f"Amount must be a valid number (received: '{value}')")

        try:
            return Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Amount must be a valid number (received: '{value}')")

    def _parse_amount_field(
        self,
        value: Amount,
        must_be_positive: bool
    ) -> Tuple[Optional[Decimal], Optional[ValidationError]]:
        """
        Parses an amount field, returning either a value or an error.
        """
        try:
            amount = self.parse_amount(value)
        except ValueError as e:
            return None, ValidationError(
                field_name="amount",
                value=str(value),
                message=str(e)
            )

        if must_be_positive and amount <= Decimal("0"):
            return None, ValidationError(
                field_name="amount",
                value=str(value),
                message=f"Amount must be a positive number (received: '{value}')"
            )

        return amount, None

    def _check_name(self, name: str, result: ValidationResult) -> None:
        """Records an error if name is empty."""
        if not (name or "").strip():
            result.errors.append(ValidationError(
                field_name="name",
                value=name or "",
                message="Name cannot be empty"
            ))

    def _check_deadline(
        self,
        deadline: Optional[str],
        result: ValidationResult
    ) -> None:
        """Records an error if a non-empty deadline is not YYYY-MM-DD."""
        normalised = self.normalise_deadline(deadline)
        if normalised is not None and not is_iso_date(normalised):
            result.errors.append(ValidationError(
                field_name="deadline",
                value=deadline,
                message=f"Deadline must be YYYY-MM-DD (received: '{deadline}')"
            ))
