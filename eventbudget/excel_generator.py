"""
EventBudget - Excel Report Generation Module.

This module generates the printable budget report for an event.
Follows the 'Executive First' principle with a Budget Summary tab
(totals, category breakdown and notes), a Budget Items tab with every
item and sub-item line, and a Deadlines tab listing tasks by date with
their urgency status.

Classes:
    ExcelReporter: Generates Excel workbooks from event budgets.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from eventbudget import config
from eventbudget.aggregator import BudgetAggregator, effective_amount
from eventbudget.deadlines import DeadlineClassifier
from eventbudget.schema import (
    DeadlineKind,
    EventBudget,
    ExportOutcome,
    ExternalOperationFailed,
)
from eventbudget.tasks import TaskProjector

logger = logging.getLogger(__name__)


class ExcelReporter:
    """
    Generates Excel budget reports for an event.

    Applies currency formatting to amounts and deadline-status
    fills to dated lines.

    Attributes:
        CURRENCY_FORMAT: Excel number format for amounts.
        PERCENTAGE_FORMAT: Excel number format for category shares.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report(event, "budget_report.xlsx", date.today())
    """

    CURRENCY_FORMAT = f'"{config.CURRENCY_SYMBOL}" #,##0.00'
    PERCENTAGE_FORMAT = '0.00%'

    # Deadline status colours
    OVERDUE_FILL = PatternFill(
        start_color="FFC7CE",
        end_color="FFC7CE",
        fill_type="solid"
    )
    DUE_SOON_FILL = PatternFill(
        start_color="FFEB9C",
        end_color="FFEB9C",
        fill_type="solid"
    )
    SCHEDULED_FILL = PatternFill(
        start_color="DDE3FB",
        end_color="DDE3FB",
        fill_type="solid"
    )

    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="4F46E5",
        end_color="4F46E5",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    def __init__(
        self,
        aggregator: Optional[BudgetAggregator] = None,
        classifier: Optional[DeadlineClassifier] = None
    ):
        """
        Initialises the ExcelReporter.

        Args:
            aggregator: Aggregator for totals and category breakdown.
            classifier: Classifier for deadline status columns.
        """
        self._aggregator = aggregator or BudgetAggregator()
        self._classifier = classifier or DeadlineClassifier()
        self._projector = TaskProjector(self._classifier)

    def generate_report(
        self,
        event: EventBudget,
        output_path: Union[str, Path],
        now: Union[date, datetime],
        notes: str = ""
    ) -> None:
        """
        Generates a complete Excel report for an event.

        Creates a workbook with three sheets:
        1. Budget Summary - totals, category breakdown, notes
        2. Budget Items - every item and sub-item line
        3. Deadlines - tasks sorted by deadline with status

        Args:
            event: Event to report on.
            output_path: Path for the output .xlsx file.
            now: Reference date for deadline status.
            notes: Free-text notes printed on the summary sheet.

        Raises:
            OSError: If the file cannot be written.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()
        workbook.remove(workbook.active)

        self._create_summary_sheet(workbook, event, notes)
        self._create_items_sheet(workbook, event, now)
        self._create_deadlines_sheet(workbook, event, now)

        workbook.save(output_path)

    def export_report(
        self,
        event: EventBudget,
        output_path: Union[str, Path],
        now: Union[date, datetime],
        notes: str = ""
    ) -> ExportOutcome:
        """
        Generates a report, reporting I/O failures as an outcome.

        Returns:
            ExportOutcome with the written path, or the failure.
        """
        try:
            self.generate_report(event, output_path, now, notes)
        except OSError as e:
            logger.warning("Could not export report to %s: %s", output_path, e)
            return ExportOutcome(failure=ExternalOperationFailed(
                operation="export_report",
                message=f"Could not write {output_path}: {e}",
            ))

        logger.info("Exported budget report for %s to %s", event.event_name, output_path)
        return ExportOutcome(path=Path(output_path))

    def _create_summary_sheet(
        self,
        workbook: Workbook,
        event: EventBudget,
        notes: str
    ) -> None:
        """
        Creates the Budget Summary sheet.

        Args:
            workbook: Target workbook.
            event: Event data.
            notes: Free-text notes.
        """
        ws = workbook.create_sheet("Budget Summary")

        ws["A1"] = f"{event.event_name} - Budget Summary"
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:D1")

        ws["A3"] = "Event Date:"
        ws["B3"] = event.date
        ws["A4"] = "Report Generated:"
        ws["B4"] = datetime.now().strftime("%Y-%m-%d %H:%M")
        ws["A5"] = "Event ID:"
        ws["B5"] = event.id

        ws["A7"] = "Total Budget"
        ws["A7"].font = Font(bold=True, size=14)
        ws["B7"] = float(self._aggregator.grand_total(event.items))
        ws["B7"].number_format = self.CURRENCY_FORMAT
        ws["B7"].font = Font(bold=True, size=14)

        row = 9
        for col, header in enumerate(("Category", "Total", "Share"), start=1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

        for share in self._aggregator.category_breakdown(event.items):
            row += 1
            ws.cell(row=row, column=1, value=share.category)
            total_cell = ws.cell(row=row, column=2, value=float(share.total))
            total_cell.number_format = self.CURRENCY_FORMAT
            share_cell = ws.cell(row=row, column=3, value=float(share.percentage) / 100)
            share_cell.number_format = self.PERCENTAGE_FORMAT
            for col in range(1, 4):
                ws.cell(row=row, column=col).border = self.THIN_BORDER

        if notes:
            row += 2
            ws.cell(row=row, column=1, value="Notes").font = Font(bold=True)
            row += 1
            ws.cell(row=row, column=1, value=notes).alignment = Alignment(
                wrap_text=True, vertical="top"
            )
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=4)

        self._auto_adjust_columns(ws)

    def _create_items_sheet(
        self,
        workbook: Workbook,
        event: EventBudget,
        now: Union[date, datetime]
    ) -> None:
        """
        Creates the Budget Items sheet with item and sub-item lines.

        Items are grouped by category. Item rows carry the effective
        amount; sub-item rows are indented beneath their item.
        """
        ws = workbook.create_sheet("Budget Items")

        headers = ["Category", "Item", "Sub-item", "Amount", "Deadline", "Status"]
        self._write_header_row(ws, headers)

        row_idx = 2
        grouped = self._aggregator.group_by_category(event.items)
        for category, items in grouped.items():
            for item in items:
                self._write_line(ws, row_idx, [
                    category,
                    item.name,
                    "",
                    float(effective_amount(item)),
                ], item.deadline, now)
                ws.cell(row=row_idx, column=2).font = Font(bold=True)
                row_idx += 1

                for sub in item.sub_items:
                    self._write_line(ws, row_idx, [
                        "",
                        "",
                        sub.name,
                        float(sub.amount),
                    ], sub.deadline, now)
                    row_idx += 1

        ws.cell(row=row_idx, column=3, value="Total").font = Font(bold=True)
        total_cell = ws.cell(
            row=row_idx,
            column=4,
            value=float(self._aggregator.grand_total(event.items))
        )
        total_cell.number_format = self.CURRENCY_FORMAT
        total_cell.font = Font(bold=True)

        self._auto_adjust_columns(ws)

    def _create_deadlines_sheet(
        self,
        workbook: Workbook,
        event: EventBudget,
        now: Union[date, datetime]
    ) -> None:
        """Creates the Deadlines sheet with tasks sorted by date."""
        ws = workbook.create_sheet("Deadlines")

        headers = ["Deadline", "Task", "Parent Item", "Type", "Status"]
        self._write_header_row(ws, headers)

        tasks = self._projector.sort_by_deadline(self._projector.collect_tasks(event))
        for row_idx, task in enumerate(tasks, start=2):
            status = self._classifier.classify(task.deadline, now)
            row_data = [
                task.deadline,
                task.name,
                task.parent_name or "",
                task.kind.value,
                status.label,
            ]
            for col_idx, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.THIN_BORDER

            status_fill = self._get_status_fill(status.kind)
            if status_fill:
                for col_idx in range(1, len(headers) + 1):
                    ws.cell(row=row_idx, column=col_idx).fill = status_fill

        self._auto_adjust_columns(ws)

    def _write_header_row(self, ws: Worksheet, headers: list) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

    def _write_line(
        self,
        ws: Worksheet,
        row_idx: int,
        values: list,
        deadline: Optional[str],
        now: Union[date, datetime]
    ) -> None:
        """Writes one budget line followed by its deadline and status."""
        status = self._classifier.classify(deadline, now)
        row_data = values + [deadline or "", status.label]

        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = self.THIN_BORDER
            if col_idx == 4:
                cell.number_format = self.CURRENCY_FORMAT

        status_fill = self._get_status_fill(status.kind)
        if status_fill:
            ws.cell(row=row_idx, column=6).fill = status_fill

    def _get_status_fill(self, kind: DeadlineKind) -> Optional[PatternFill]:
        """
        Returns the fill colour for a deadline status.

        Returns:
            PatternFill for the status, or None when unscheduled.
        """
        if kind == DeadlineKind.OVERDUE:
            return self.OVERDUE_FILL
        elif kind == DeadlineKind.DUE_SOON:
            return self.DUE_SOON_FILL
        elif kind == DeadlineKind.SCHEDULED:
            return self.SCHEDULED_FILL
        return None

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        """
        Auto-adjusts column widths based on content.

        Args:
            worksheet: Target worksheet.
        """
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)

            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            worksheet.column_dimensions[column_letter].width = max(max_length + 2, 10)

    def generate_filename(self, prefix: str = "budget_report") -> str:
        """
        Generates a timestamped filename for reports.

        Returns:
            Filename like "budget_report_2025-03-18_143052.xlsx".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
