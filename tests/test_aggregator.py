"""
EventBudget - Budget Aggregator Tests.

Property-based and unit tests for effective_amount and
BudgetAggregator. Tests ensure sub-items override the stored item
amount, grouping preserves order, and grouping never loses or
double-counts amounts.
"""

from decimal import Decimal

from hypothesis import given, settings
from hypothesis.strategies import (
    composite, decimals, integers, lists, none, one_of, sampled_from
)

from eventbudget.aggregator import BudgetAggregator, effective_amount
from eventbudget.schema import BudgetItem, EventBudget, SubItem


def money(min_value: str = "0", max_value: str = "100000"):
    """Strategy for two-place Decimal amounts."""
    return decimals(
        min_value=Decimal(min_value),
        max_value=Decimal(max_value),
        places=2,
        allow_nan=False,
        allow_infinity=False
    )


@composite
def budget_items(draw):
    """Generate BudgetItems with zero to three sub-items."""
    item_id = str(draw(integers(min_value=1, max_value=99999)))
    subs = draw(lists(money(), max_size=3))
    return BudgetItem(
        id=item_id,
        category=draw(sampled_from(["Espaço", "Comida", "Decoração", "Som", "Geral"])),
        name=f"Item_{item_id}",
        amount=draw(money()),
        deadline=draw(one_of(none(), sampled_from(["2025-03-20", "2025-04-01"]))),
        sub_items=tuple(
            SubItem(id=f"s{i}", name=f"Sub_{i}", amount=amount)
            for i, amount in enumerate(subs)
        ),
    )


def wedding_items():
    """Items of the sample wedding budget."""
    return (
        BudgetItem(
            id="1a",
            category="Espaço",
            name="Salão de Festas",
            amount=Decimal("5000"),
            deadline="2025-03-20",
            sub_items=(
                SubItem("s1", "Aluguel do Salão", Decimal("4500"), "2025-03-15"),
                SubItem("s2", "Taxa de Limpeza", Decimal("500"), "2025-06-10"),
            ),
        ),
        BudgetItem("1b", "Comida", "Buffet Completo", Decimal("8500"), "2025-04-01"),
        BudgetItem("1c", "Decoração", "Arranjos Florais", Decimal("2000"), "2025-05-10"),
        BudgetItem("1d", "Som", "DJ e Iluminação", Decimal("1500"), "2025-05-20"),
    )


class TestEffectiveAmountUnit:
    """Unit tests for effective_amount."""

    def test_item_without_sub_items_uses_own_amount(self) -> None:
        """Verify Buffet with no sub-items counts its stored amount."""
        item = BudgetItem("1", "Comida", "Buffet", Decimal("8500"))
        assert effective_amount(item) == Decimal("8500")

    def test_sub_items_replace_item_amount(self) -> None:
        """Verify Salão counts 4500 + 500 = 5000, not 9500."""
        item = BudgetItem(
            "1", "Espaço", "Salão", Decimal("5000"),
            sub_items=(
                SubItem("a", "Aluguel", Decimal("4500")),
                SubItem("b", "Limpeza", Decimal("500")),
            ),
        )
        assert effective_amount(item) == Decimal("5000")

    def test_sub_items_override_even_when_stored_amount_differs(self) -> None:
        """Verify the stored amount is ignored once sub-items exist."""
        item = BudgetItem(
            "1", "Espaço", "Salão", Decimal("99999"),
            sub_items=(SubItem("a", "Aluguel", Decimal("10")),),
        )
        assert effective_amount(item) == Decimal("10")

    def test_all_zero_sub_items_sum_to_zero(self) -> None:
        """Verify zero-amount sub-items still override the stored amount."""
        item = BudgetItem(
            "1", "Geral", "Convites", Decimal("300"),
            sub_items=(SubItem("a", "Papel", Decimal("0")),),
        )
        assert effective_amount(item) == Decimal("0")

    def test_does_not_mutate_item(self) -> None:
        """Verify the item is unchanged after resolving its amount."""
        item = wedding_items()[0]
        before = item
        effective_amount(item)
        assert item == before
        assert item.amount == Decimal("5000")


class TestBudgetAggregatorUnit:
    """Unit tests for BudgetAggregator."""

    def setup_method(self) -> None:
        """Initialise BudgetAggregator for each test."""
        self.aggregator = BudgetAggregator()

    def test_empty_items(self) -> None:
        """Verify no items yields an empty mapping and zero total."""
        assert self.aggregator.group_by_category([]) == {}
        assert self.aggregator.category_totals({}) == {}
        assert self.aggregator.grand_total([]) == Decimal("0")
        assert self.aggregator.category_breakdown([]) == []

    def test_group_preserves_first_occurrence_order(self) -> None:
        """Verify categories appear in order of first occurrence."""
        items = [
            BudgetItem("1", "Som", "DJ", Decimal("1")),
            BudgetItem("2", "Comida", "Buffet", Decimal("2")),
            BudgetItem("3", "Som", "Luz", Decimal("3")),
        ]
        grouped = self.aggregator.group_by_category(items)
        assert list(grouped) == ["Som", "Comida"]
        assert [item.id for item in grouped["Som"]] == ["1", "3"]

    def test_wedding_totals(self) -> None:
        """Verify category and grand totals of the sample wedding."""
        items = wedding_items()
        totals = self.aggregator.category_totals(
            self.aggregator.group_by_category(items)
        )
        assert totals == {
            "Espaço": Decimal("5000"),
            "Comida": Decimal("8500"),
            "Decoração": Decimal("2000"),
            "Som": Decimal("1500"),
        }
        assert self.aggregator.grand_total(items) == Decimal("17000")

    def test_unknown_category_accepted(self) -> None:
        """Verify categories outside the suggested list are grouped."""
        items = [BudgetItem("1", "Fotografia", "Fotógrafo", Decimal("3000"))]
        assert self.aggregator.category_totals(
            self.aggregator.group_by_category(items)
        ) == {"Fotografia": Decimal("3000")}

    def test_negative_amounts_are_summed(self) -> None:
        """Verify the aggregator is purely additive."""
        items = [
            BudgetItem("1", "Geral", "Desconto", Decimal("-200")),
            BudgetItem("2", "Geral", "Bolo", Decimal("700")),
        ]
        assert self.aggregator.grand_total(items) == Decimal("500")

    def test_category_breakdown_shares(self) -> None:
        """Verify breakdown percentages and round-robin colours."""
        items = [
            BudgetItem("1", "Comida", "Buffet", Decimal("750")),
            BudgetItem("2", "Som", "DJ", Decimal("250")),
        ]
        shares = self.aggregator.category_breakdown(items)

        assert [s.category for s in shares] == ["Comida", "Som"]
        assert shares[0].percentage == Decimal("75.00")
        assert shares[1].percentage == Decimal("25.00")
        assert shares[0].colour == "#4f46e5"
        assert shares[1].colour == "#8b5cf6"

    def test_category_breakdown_zero_total(self) -> None:
        """Verify shares are zero when the grand total is zero."""
        items = [BudgetItem("1", "Geral", "Brinde", Decimal("0"))]
        shares = self.aggregator.category_breakdown(items)
        assert shares[0].percentage == Decimal("0")

    def test_colours_wrap_around(self) -> None:
        """Verify the palette is reused past its length."""
        aggregator = BudgetAggregator(colours=("#000000", "#ffffff"))
        items = [
            BudgetItem(str(i), f"Cat{i}", f"Item{i}", Decimal("1"))
            for i in range(3)
        ]
        colours = [s.colour for s in aggregator.category_breakdown(items)]
        assert colours == ["#000000", "#ffffff", "#000000"]

    def test_portfolio_summary(self) -> None:
        """Verify counts, total and date ordering across events."""
        wedding = EventBudget("1", "Casamento", "2025-06-15", wedding_items())
        party = EventBudget(
            "2", "Festa de 15 Anos", "2025-01-22",
            (BudgetItem("x", "Comida", "Bolo", Decimal("800")),),
        )
        summary = self.aggregator.portfolio_summary([wedding, party])

        assert summary.event_count == 2
        assert summary.item_count == 5
        assert summary.total_budget == Decimal("17800")
        assert [e.id for e in summary.events_by_date] == ["2", "1"]

    def test_portfolio_summary_empty(self) -> None:
        """Verify an empty portfolio."""
        summary = self.aggregator.portfolio_summary([])
        assert summary.event_count == 0
        assert summary.total_budget == Decimal("0")
        assert summary.events_by_date == ()


class TestBudgetAggregatorProperty:
    """Property-based tests for BudgetAggregator."""

    def setup_method(self) -> None:
        """Initialise BudgetAggregator for each test."""
        self.aggregator = BudgetAggregator()

    @given(budget_items())
    @settings(max_examples=200)
    def test_effective_amount_is_sub_item_sum(self, item: BudgetItem) -> None:
        """
        Property: With sub-items, effective amount equals their sum
        regardless of the stored amount.
        """
        if item.sub_items:
            expected = sum((sub.amount for sub in item.sub_items), Decimal("0"))
        else:
            expected = item.amount
        assert effective_amount(item) == expected

    @given(lists(budget_items(), max_size=20))
    @settings(max_examples=200)
    def test_grand_total_equals_sum_of_category_totals(self, items) -> None:
        """
        Property: Grouping never loses or double-counts amounts.
        """
        totals = self.aggregator.category_totals(
            self.aggregator.group_by_category(items)
        )
        assert self.aggregator.grand_total(items) == sum(totals.values(), Decimal("0"))

    @given(lists(budget_items(), max_size=20))
    @settings(max_examples=100)
    def test_grouping_keeps_every_item_once(self, items) -> None:
        """Property: Every item lands in exactly one group, in order."""
        grouped = self.aggregator.group_by_category(items)
        flattened = [item for group in grouped.values() for item in group]

        assert len(flattened) == len(items)
        for category, group in grouped.items():
            expected = [item for item in items if item.category == category]
            assert group == expected
