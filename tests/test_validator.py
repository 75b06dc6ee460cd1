"""
EventBudget - Draft Validator Tests.

Unit and property-based tests for DraftValidator. Tests ensure
required fields, positive item amounts, ISO deadlines and the
supported amount formats.
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis.strategies import decimals

from eventbudget.validator import (
    DraftValidator,
    ItemDraft,
    SubItemDraft,
    ValidationError,
)


class TestDraftValidatorUnit:
    """Unit tests for DraftValidator."""

    def setup_method(self) -> None:
        """Initialise DraftValidator for each test."""
        self.validator = DraftValidator()

    def test_valid_event(self) -> None:
        """Verify a named event with an ISO date is valid."""
        assert self.validator.validate_event("Casamento", "2025-06-15").is_valid

    def test_event_requires_name_and_date(self) -> None:
        """Verify empty name and date are both reported."""
        result = self.validator.validate_event("", "")
        assert result.error_count == 2
        assert {e.field_name for e in result.errors} == {"event_name", "date"}

    def test_event_date_must_be_iso(self) -> None:
        """Verify a non-ISO event date is rejected."""
        result = self.validator.validate_event("Festa", "15/06/2025")
        assert not result.is_valid
        assert result.errors[0].field_name == "date"

    def test_valid_item(self) -> None:
        """Verify a named positive item is valid."""
        assert self.validator.validate_item(ItemDraft("Buffet", Decimal("8500"))).is_valid

    def test_item_default_category(self) -> None:
        """Verify item drafts default to the general category."""
        assert ItemDraft("Buffet", "8500").category == "Geral"

    def test_item_requires_name(self) -> None:
        """Verify whitespace-only names are rejected."""
        result = self.validator.validate_item(ItemDraft("   ", "100"))
        assert [e.field_name for e in result.errors] == ["name"]

    @pytest.mark.parametrize("amount", [0, "0", Decimal("-1"), "-50"])
    def test_item_amount_must_be_positive(self, amount) -> None:
        """Verify zero and negative item amounts are rejected."""
        result = self.validator.validate_item(ItemDraft("Buffet", amount))
        assert [e.field_name for e in result.errors] == ["amount"]

    def test_item_amount_must_be_number(self) -> None:
        """Verify a non-numeric amount is rejected."""
        result = self.validator.validate_item(ItemDraft("Buffet", "abc"))
        assert not result.is_valid

    def test_item_deadline_must_be_iso(self) -> None:
        """Verify a malformed deadline is rejected."""
        result = self.validator.validate_item(ItemDraft("Buffet", "100", deadline="amanhã"))
        assert [e.field_name for e in result.errors] == ["deadline"]

    def test_item_empty_deadline_is_allowed(self) -> None:
        """Verify an empty deadline means no deadline."""
        assert self.validator.validate_item(ItemDraft("Buffet", "100", deadline="")).is_valid
        assert self.validator.normalise_deadline("") is None
        assert self.validator.normalise_deadline(" 2025-03-20 ") == "2025-03-20"

    def test_sub_item_allows_zero_amount(self) -> None:
        """Verify sub-items only require a name."""
        assert self.validator.validate_sub_item(SubItemDraft("Taxa", 0)).is_valid

    def test_sub_item_requires_name(self) -> None:
        """Verify an empty sub-item name is rejected."""
        assert not self.validator.validate_sub_item(SubItemDraft("", 100)).is_valid

    @pytest.mark.parametrize("text, expected", [
        ("1500", Decimal("1500.00")),
        ("1500.5", Decimal("1500.50")),
        ("1,500.50", Decimal("1500.50")),
        ("R$ 1.500,50", Decimal("1500.50")),
        ("R$1.500", Decimal("1500.00")),
        ("12.345.678", Decimal("12345678.00")),
        ("99,9", Decimal("99.90")),
        ("1,500", Decimal("1500.00")),
        ("-20", Decimal("-20.00")),
    ])
    def test_parse_amount_formats(self, text: str, expected: Decimal) -> None:
        """Verify supported amount formats."""
        assert self.validator.parse_amount(text) == expected

    def test_parse_amount_numbers(self) -> None:
        """Verify ints and floats convert exactly."""
        assert self.validator.parse_amount(8500) == Decimal("8500.00")
        assert self.validator.parse_amount(0.1) == Decimal("0.10")

    @pytest.mark.parametrize("value", ["", "abc", "1.2.3,4,5", None, True, float("nan")])
    def test_parse_amount_rejects_invalid(self, value) -> None:
        """Verify invalid amounts raise ValueError."""
        with pytest.raises(ValueError):
            self.validator.parse_amount(value)

    @pytest.mark.parametrize("value", [1e30, "1" * 30, Decimal("1E+40")])
    def test_parse_amount_rejects_too_large(self, value) -> None:
        """Verify amounts beyond Decimal precision raise ValueError."""
        with pytest.raises(ValueError):
            self.validator.parse_amount(value)

    def test_item_amount_too_large_is_invalid(self) -> None:
        """Verify an oversized amount is a validation error, not an exception."""
        result = self.validator.validate_item(ItemDraft("Buffet", 1e30))
        assert [e.field_name for e in result.errors] == ["amount"]

    def test_validation_error_str(self) -> None:
        """Verify the error message format."""
        error = ValidationError("amount", "0", "Amount must be a positive number")
        assert str(error) == "Error: 'amount' - Amount must be a positive number"


class TestDraftValidatorProperty:
    """Property-based tests for DraftValidator."""

    def setup_method(self) -> None:
        """Initialise DraftValidator for each test."""
        self.validator = DraftValidator()

    @given(decimals(
        min_value=Decimal("0.01"),
        max_value=Decimal("10000000"),
        places=2,
        allow_nan=False,
        allow_infinity=False
    ))
    @settings(max_examples=200)
    def test_formatted_amount_parses_back(self, amount: Decimal) -> None:
        """Property: "1,234.56" style strings parse to the same amount."""
        assert self.validator.parse_amount(f"{amount:,.2f}") == amount

    @given(decimals(
        min_value=Decimal("0.01"),
        max_value=Decimal("10000000"),
        places=2,
        allow_nan=False,
        allow_infinity=False
    ))
    @settings(max_examples=200)
    def test_positive_amounts_are_valid_items(self, amount: Decimal) -> None:
        """Property: Any positive amount makes a valid item draft."""
        assert self.validator.validate_item(ItemDraft("Item", amount)).is_valid
