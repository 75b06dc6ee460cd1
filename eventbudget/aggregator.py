"""
EventBudget - Budget Aggregation Module.

This module computes derived totals from the two-level budget
hierarchy. An item's effective amount is the sum of its sub-items
when it has any, otherwise its own stored amount; every total in the
planner is built from effective amounts so nothing is double-counted.

Functions:
    effective_amount: Amount an item contributes to totals.

Classes:
    BudgetAggregator: Grouping, per-category totals, grand totals,
        category breakdown and portfolio summary.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Dict, Iterable, List, Sequence, Tuple

from eventbudget import config
from eventbudget.date_logic import is_iso_date, parse_iso_date
from eventbudget.schema import (
    BudgetItem,
    CategoryShare,
    EventBudget,
    PortfolioSummary,
)

ZERO = Decimal("0")


def effective_amount(item: BudgetItem) -> Decimal:
    """
    Returns the amount an item contributes to totals.

    With sub-items, the sum of sub-item amounts is authoritative and the
    item's stored amount is ignored, even when every sub-item is zero.
    Without sub-items, the stored amount is used.

    Args:
        item: Budget item to resolve.

    Returns:
        Effective amount.

    Example:
        >>> effective_amount(BudgetItem("1", "Comida", "Buffet", Decimal("8500")))
        Decimal('8500')
    """
    if item.sub_items:
        return sum((sub.amount for sub in item.sub_items), ZERO)
    return item.amount


class BudgetAggregator:
    """
    Computes grouped and aggregate views of budget items.

    The aggregator is purely additive: categories are free text and
    negative amounts are summed like any other value.

    Attributes:
        colours: Palette assigned to categories in the breakdown.

    Example:
        >>> aggregator = BudgetAggregator()
        >>> grouped = aggregator.group_by_category(event.items)
        >>> totals = aggregator.category_totals(grouped)
        >>> aggregator.grand_total(event.items) == sum(totals.values())
        True
    """

    def __init__(self, colours: Sequence[str] = config.CATEGORY_COLOURS):
        """
        Initialises the BudgetAggregator.

        Args:
            colours: Chart palette used by category_breakdown.
        """
        self.colours = tuple(colours)

    def group_by_category(
        self,
        items: Iterable[BudgetItem]
    ) -> Dict[str, List[BudgetItem]]:
        """
        Groups items by category.

        Categories appear in order of first occurrence; items keep their
        relative order within each category.

        Args:
            items: Budget items in event order.

        Returns:
            Mapping of category to its items.
        """
        grouped: Dict[str, List[BudgetItem]] = {}
        for item in items:
            grouped.setdefault(item.category, []).append(item)
        return grouped

    def category_totals(
        self,
        grouped: Dict[str, List[BudgetItem]]
    ) -> Dict[str, Decimal]:
        """
        Sums effective amounts per category.

        Args:
            grouped: Output of group_by_category.

        Returns:
            Mapping of category to total, in the same category order.
        """
        return {
            category: sum((effective_amount(item) for item in items), ZERO)
            for category, items in grouped.items()
        }

    def grand_total(self, items: Iterable[BudgetItem]) -> Decimal:
        """
        Sums effective amounts over all items, independent of grouping.

        Returns:
            Grand total; Decimal("0") for no items.
        """
        return sum((effective_amount(item) for item in items), ZERO)

    def category_breakdown(
        self,
        items: Sequence[BudgetItem]
    ) -> List[CategoryShare]:
        """
        Builds the category chart data.

        Percentages are rounded to two places with Banker's Rounding and
        are zero when the grand total is zero. Colours are assigned
        round-robin in category order.

        Args:
            items: Budget items in event order.

        Returns:
            One CategoryShare per category, in first-occurrence order.
        """
        totals = self.category_totals(self.group_by_category(items))
        grand = sum(totals.values(), ZERO)

        shares = []
        for index, (category, total) in enumerate(totals.items()):
            if grand == ZERO:
                percentage = ZERO
            else:
                percentage = ((total / grand) * Decimal("100")).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_EVEN
                )
            shares.append(CategoryShare(
                category=category,
                total=total,
                percentage=percentage,
                colour=self.colours[index % len(self.colours)],
            ))
        return shares

    def portfolio_summary(
        self,
        events: Sequence[EventBudget]
    ) -> PortfolioSummary:
        """
        Aggregates figures across all events.

        Events are ordered by event date; events whose date is not a
        valid ISO date sort last, keeping their relative order.

        Args:
            events: All planned events.

        Returns:
            PortfolioSummary for the dashboard.
        """
        def date_key(event: EventBudget) -> Tuple[int, str]:
            if is_iso_date(event.date):
                return 0, parse_iso_date(event.date).isoformat()
            return 1, ""

        return PortfolioSummary(
            event_count=len(events),
            item_count=sum(len(event.items) for event in events),
            total_budget=sum(
                (self.grand_total(event.items) for event in events), ZERO
            ),
            events_by_date=tuple(sorted(events, key=date_key)),
        )
