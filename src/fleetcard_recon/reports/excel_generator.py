"""
Excel report generator for reconciliation results.
Creates multi-sheet workbooks with formatted output.
"""

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import ReconConfig, SheetConfig
from ..models.records import DashboardStats, MatchStatus, ReconResult
from ..utils.exceptions import ConfigurationError, ReportGenerationError
from .views import STATUS_LABELS, ResultView, filter_results, format_amount

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
STATUS_FILLS = {
    MatchStatus.MATCHED: PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),
    MatchStatus.AMOUNT_MISMATCH: PatternFill(
        start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"
    ),
    MatchStatus.DATE_MISMATCH: PatternFill(
        start_color="FFEB9C", end_color="FFEB9C", fill_type="solid"
    ),
    MatchStatus.MISSING_IN_BOOK: PatternFill(
        start_color="FCD5B4", end_color="FCD5B4", fill_type="solid"
    ),
    MatchStatus.MISSING_IN_BANK: PatternFill(
        start_color="DDEBF7", end_color="DDEBF7", fill_type="solid"
    ),
}
AMOUNT_FORMAT = "#,##0.00"

RESULT_HEADERS = [
    "Result ID",
    "Status",
    "Bank Date",
    "Invoice Number",
    "Bank Amount",
    "Merchant",
    "Fuel Brand",
    "Book Date",
    "Document No",
    "Description",
    "Book Amount",
    "Difference",
    "Notes",
]
AMOUNT_COLUMNS = {5, 11, 12}


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with one sheet per result tab."""

    def __init__(self, config: ReconConfig):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.sheet_config = config.output.sheets

    def default_output_path(self, now: Optional[datetime] = None) -> Path:
        """
        Build the report file name from the configured template.

        The template may use ``{date}`` (YYYYMMDD) and ``{time}`` (HHMMSS).

        Raises:
            ConfigurationError: If the template has an unknown placeholder
        """
        now = now or datetime.now()
        template = self.config.output.excel.filename_template
        try:
            name = template.format(date=now.strftime("%Y%m%d"), time=now.strftime("%H%M%S"))
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(f"Invalid filename template {template!r}: {e}") from e
        return Path(name)

    def generate_report(
        self,
        stats: DashboardStats,
        results: Sequence[ReconResult],
        output_path: Path,
        bank_filename: Optional[str] = None,
        book_filename: Optional[str] = None,
    ) -> Path:
        """
        Generate the complete reconciliation report.

        Args:
            stats: Summary statistics of the run
            results: All reconciliation results
            output_path: Path for output file
            bank_filename: Name of the statement file, shown in the summary
            book_filename: Name of the GL file, shown in the summary

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be written
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config
        if sheets.summary.enabled:
            self._create_summary_sheet(wb, sheets.summary, stats, bank_filename, book_filename)

        tabbed = [
            (sheets.all_results, ResultView.ALL),
            (sheets.matched, ResultView.MATCHED),
            (sheets.discrepancies, ResultView.MISMATCH),
            (sheets.missing, ResultView.MISSING),
        ]
        for sheet, view in tabbed:
            if sheet.enabled:
                self._create_results_sheet(wb, sheet, filter_results(results, view))

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            logger.error(f"Failed to save report: {e}")
            raise ReportGenerationError(f"Failed to save report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self,
        wb: Workbook,
        sheet: SheetConfig,
        stats: DashboardStats,
        bank_filename: Optional[str],
        book_filename: Optional[str],
    ) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(sheet.name)

        ws["A1"] = "Fleet Card Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        ws["A3"] = "File Information"
        ws["A3"].font = Font(bold=True)

        file_info = [
            ("Bank Statement:", bank_filename or "-"),
            ("General Ledger:", book_filename or "-"),
            ("Generated At:", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
        ]
        for i, (label, value) in enumerate(file_info, start=4):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = value

        ws["A8"] = "Record Counts"
        ws["A8"].font = Font(bold=True)

        count_data = [
            ("Total Transactions:", stats.total_transactions),
            ("Bank Records:", stats.total_bank),
            ("Book Records:", stats.total_book),
            ("Matched:", stats.matched_count),
            ("Amount or Date Mismatches:", stats.mismatch_count),
            ("Missing in Book:", stats.missing_in_book_count),
            ("Missing in Bank:", stats.missing_in_bank_count),
        ]
        for i, (label, value) in enumerate(count_data, start=9):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = value

        ws["A17"] = "Match Rate:"
        ws["B17"] = f"{stats.match_rate:.1f}%"
        ws["A18"] = "Total Discrepancy:"
        ws["B18"] = format_amount(stats.total_discrepancy)

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _create_results_sheet(
        self, wb: Workbook, sheet: SheetConfig, results: Sequence[ReconResult]
    ) -> None:
        """Create a sheet listing results, one row each, coloured by status."""
        ws = wb.create_sheet(sheet.name)

        for col, header in enumerate(RESULT_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

        for row_num, result in enumerate(results, start=2):
            bank = result.bank_record
            book = result.book_record

            row_data = [
                result.id,
                STATUS_LABELS[result.status],
                bank.transaction_date if bank else "",
                bank.invoice_number if bank else "",
                float(bank.total_amount) if bank else None,
                bank.merchant_id if bank else "",
                bank.fuel_brand if bank else "",
                book.posting_date if book else "",
                book.document_no if book else "",
                book.description if book else "",
                float(book.amount) if book else None,
                float(result.amount_diff),
                result.notes,
            ]

            fill = STATUS_FILLS[result.status]
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
                cell.fill = fill
                if col in AMOUNT_COLUMNS:
                    cell.number_format = AMOUNT_FORMAT

        self._auto_fit_columns(ws)

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = max(
                (len(str(cell.value)) for cell in column_cells if cell.value is not None),
                default=0,
            )
            column = column_cells[0].column_letter
            ws.column_dimensions[column].width = min(max_length + 2, 50)
