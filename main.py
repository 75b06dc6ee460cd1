"""
EventBudget - Main Entry Point.

Budget and deadline planner for events. Loads an event plan, prints
budget totals, upcoming deadlines and a calendar month, and exports an
Excel budget report.

Usage:
    python main.py [<plan_json>] [--demo] [--today YYYY-MM-DD]
                   [--month YYYY-MM] [--output-dir <dir>] [--notes <text>]

Example:
    python main.py --demo --today 2025-03-13 --month 2025-03
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from eventbudget import __version__, config
from eventbudget.aggregator import BudgetAggregator, effective_amount
from eventbudget.calendar_grid import CalendarGridBuilder
from eventbudget.date_logic import DateManager, parse_iso_date
from eventbudget.excel_generator import ExcelReporter
from eventbudget.plan_io import PlanSerializer
from eventbudget.schema import EventBudget, TaskKind
from eventbudget.store import BudgetStore, CounterIdGenerator
from eventbudget.tasks import TaskProjector
from eventbudget.validator import ItemDraft, SubItemDraft


def format_money(amount) -> str:
    """Formats an amount with the configured currency symbol."""
    return f"{config.CURRENCY_SYMBOL} {amount:,.2f}"


def build_demo_store() -> BudgetStore:
    """
    Builds a store holding the sample wedding budget.

    Returns:
        BudgetStore with one event, active.
    """
    store = BudgetStore(id_generator=CounterIdGenerator())
    event = store.create_event("Casamento Marina & João", "2025-06-15")

    event = store.add_item(event.id, ItemDraft(
        name="Salão de Festas",
        amount="5000",
        category="Espaço",
        deadline="2025-03-20",
    ))
    hall = event.items[-1]
    store.add_sub_item(event.id, hall.id, SubItemDraft(
        name="Aluguel do Salão", amount="4500", deadline="2025-03-15"
    ))
    store.add_sub_item(event.id, hall.id, SubItemDraft(
        name="Taxa de Limpeza", amount="500", deadline="2025-06-10"
    ))

    store.add_item(event.id, ItemDraft(
        "Buffet Completo", "8500", "Comida", "2025-04-01"
    ))
    store.add_item(event.id, ItemDraft(
        "Arranjos Florais", "2000", "Decoração", "2025-05-10"
    ))
    store.add_item(event.id, ItemDraft(
        "DJ e Iluminação", "1500", "Som", "2025-05-20"
    ))
    return store


def print_header() -> None:
    """Prints the application header."""
    print("=" * 60)
    print("  EventBudget - Event Budget & Deadline Planner")
    print(f"  Version: {__version__}")
    print("=" * 60)
    print()


def print_event_summary(event: EventBudget, aggregator: BudgetAggregator) -> None:
    """
    Prints the budget of one event grouped by category.

    Args:
        event: Event to print.
        aggregator: Aggregator for totals.
    """
    print(f"  {event.event_name}  ({event.date})")
    print("  " + "-" * 40)

    grouped = aggregator.group_by_category(event.items)
    totals = aggregator.category_totals(grouped)
    for category, items in grouped.items():
        print(f"  {category:<24} {format_money(totals[category]):>16}")
        for item in items:
            print(f"    {item.name:<22} {format_money(effective_amount(item)):>16}")
            for sub in item.sub_items:
                print(f"      - {sub.name:<18} {format_money(sub.amount):>16}")

    print("  " + "-" * 40)
    print(f"  {'TOTAL':<24} {format_money(aggregator.grand_total(event.items)):>16}")
    print()


def print_upcoming(event: EventBudget, projector: TaskProjector, today: date) -> None:
    """Prints the soonest deadlines of an event."""
    upcoming = projector.upcoming(projector.collect_tasks(event), today)
    if not upcoming:
        return

    print("  UPCOMING DEADLINES")
    print("  " + "-" * 40)
    for entry in upcoming:
        task = entry.task
        name = task.name
        if task.kind == TaskKind.SUB:
            name = f"{task.parent_name} / {task.name}"
        print(f"  {task.deadline}  {entry.status.label:<12} {name}")
    print()


def render_month(
    event: EventBudget,
    projector: TaskProjector,
    grid: CalendarGridBuilder,
    year: int,
    month: int
) -> List[str]:
    """
    Renders a month grid as text lines.

    Days with deadlines are marked with an asterisk and listed below
    the grid.
    """
    tasks = projector.collect_tasks(event)
    cells = grid.build_month_view(tasks, year, month)

    lines = [grid.month_label(year, month).center(28)]
    lines.append("".join(f"{name[:3]:>4}" for name in grid.weekday_headers()))

    row = ""
    for index, cell in enumerate(cells, start=1):
        if cell.is_empty:
            row += "    "
        else:
            marker = "*" if cell.tasks else " "
            row += f"{cell.day:>3}{marker}"
        if index % 7 == 0:
            lines.append(row)
            row = ""
    if row:
        lines.append(row)

    for cell in cells:
        for task in cell.tasks:
            lines.append(f"  {cell.day:>2}: {task.name}")
    return lines


def load_events(plan_path: Optional[Path]) -> Optional[Sequence[EventBudget]]:
    """Loads events from a plan file, printing any failure."""
    events, outcome = PlanSerializer().load_plan(plan_path)
    if not outcome.is_ok:
        print(f"\n  ❌ {outcome.failure}")
        return None
    return events


def run(
    store: BudgetStore,
    today: date,
    month: date,
    output_dir: Path,
    notes: str,
    export: bool
) -> int:
    """
    Prints all views for every event and exports reports.

    Returns:
        Exit code (0 for success, 1 if an export failed).
    """
    aggregator = BudgetAggregator()
    projector = TaskProjector()
    grid = CalendarGridBuilder(DateManager(config.WEEK_START))
    reporter = ExcelReporter(aggregator)

    summary = aggregator.portfolio_summary(store.list_events())
    print(f"  Events: {summary.event_count}   Items: {summary.item_count}   "
          f"Total budgeted: {format_money(summary.total_budget)}")
    print()

    exit_code = 0
    for event in summary.events_by_date:
        print_event_summary(event, aggregator)
        print_upcoming(event, projector, today)
        for line in render_month(event, projector, grid, month.year, month.month):
            print("  " + line)
        print()

        if export:
            filename = reporter.generate_filename(f"budget_{event.id}")
            outcome = reporter.export_report(event, output_dir / filename, today, notes)
            if outcome.is_ok:
                print(f"  ✓ Report saved: {outcome.path}")
            else:
                print(f"  ❌ {outcome.failure}")
                exit_code = 1
            print()

    return exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        description="EventBudget - Event Budget & Deadline Planner"
    )
    parser.add_argument(
        "plan_file",
        type=Path,
        nargs="?",
        help="Path to an event plan JSON file"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the sample wedding budget"
    )
    parser.add_argument(
        "--today",
        type=parse_iso_date,
        default=None,
        help="Reference date for deadlines, YYYY-MM-DD (default: today)"
    )
    parser.add_argument(
        "--month",
        default=None,
        help="Calendar month to show, YYYY-MM (default: month of --today)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.OUTPUT_DIR,
        help="Output directory for reports (default: output/)"
    )
    parser.add_argument(
        "--notes",
        default="",
        help="Notes printed on the report summary sheet"
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Skip the Excel report"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.plan_file is None and not args.demo:
        parser.error("a plan file or --demo is required")

    today = args.today or date.today()
    try:
        month = parse_iso_date(f"{args.month}-01") if args.month else today
    except ValueError:
        parser.error(f"--month must be YYYY-MM, got {args.month!r}")

    print_header()

    if args.demo:
        store = build_demo_store()
    else:
        events = load_events(args.plan_file)
        if events is None:
            return 1
        store = BudgetStore(events)

    return run(store, today, month, args.output_dir, args.notes, not args.no_export)


if __name__ == "__main__":
    sys.exit(main())
