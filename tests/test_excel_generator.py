from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import load_workbook

from fleetcard_recon.matching.engine import ReconciliationEngine
from fleetcard_recon.parsers.bank_parser import BankStatementParser
from fleetcard_recon.parsers.ledger_parser import LedgerParser
from fleetcard_recon.reports.excel_generator import ExcelReportGenerator, RESULT_HEADERS
from fleetcard_recon.utils.exceptions import ConfigurationError


def _outcome(config, bank_csv, book_csv):
    bank = BankStatementParser(config).parse_text(bank_csv)
    book = LedgerParser(config).parse_text(book_csv)
    return ReconciliationEngine(config).reconcile(bank, book)


class TestExcelReportGenerator:
    def test_writes_one_sheet_per_tab(self, config, bank_csv, book_csv, tmp_path):
        outcome = _outcome(config, bank_csv, book_csv)
        path = tmp_path / "out" / "report.xlsx"

        result = ExcelReportGenerator(config).generate_report(
            stats=outcome.stats,
            results=outcome.results,
            output_path=path,
            bank_filename="bank.csv",
            book_filename="book.csv",
        )

        assert result == path
        wb = load_workbook(path)
        assert wb.sheetnames == [
            "Summary",
            "All Results",
            "Matched",
            "Discrepancies",
            "Missing Entries",
        ]

        all_rows = list(wb["All Results"].iter_rows(values_only=True))
        assert list(all_rows[0]) == RESULT_HEADERS
        assert len(all_rows) == 1 + len(outcome.results)

        # one perfect, one inferred
        assert wb["Matched"].max_row == 3
        assert wb["Discrepancies"].max_row == 2
        assert wb["Missing Entries"].max_row == 2

    def test_amount_cells_are_numeric(self, config, bank_csv, book_csv, tmp_path):
        outcome = _outcome(config, bank_csv, book_csv)
        path = tmp_path / "report.xlsx"
        ExcelReportGenerator(config).generate_report(outcome.stats, outcome.results, path)

        ws = load_workbook(path)["Discrepancies"]
        row = [c.value for c in ws[2]]

        assert row[1] == "Amount Diff"
        assert row[4] == 2080.0
        assert row[10] == 2000.0
        assert row[11] == -80.0

    def test_summary_sheet(self, config, bank_csv, book_csv, tmp_path):
        outcome = _outcome(config, bank_csv, book_csv)
        path = tmp_path / "report.xlsx"
        ExcelReportGenerator(config).generate_report(
            outcome.stats, outcome.results, path, bank_filename="bank.csv"
        )

        ws = load_workbook(path)["Summary"]
        values = {ws[f"A{r}"].value: ws[f"B{r}"].value for r in range(4, 19)}

        assert values["Bank Statement:"] == "bank.csv"
        assert values["General Ledger:"] == "-"
        assert values["Matched:"] == 2
        assert values["Missing in Bank:"] == 1
        assert values["Total Discrepancy:"] == "1,280.00"

    def test_disabled_sheets_are_omitted(self, config, bank_csv, book_csv, tmp_path):
        config.output.sheets.matched.enabled = False
        config.output.sheets.summary.enabled = False
        outcome = _outcome(config, bank_csv, book_csv)
        path = tmp_path / "report.xlsx"

        ExcelReportGenerator(config).generate_report(outcome.stats, outcome.results, path)

        assert load_workbook(path).sheetnames == [
            "All Results",
            "Discrepancies",
            "Missing Entries",
        ]


class TestDefaultOutputPath:
    def test_fills_date_and_time(self, config):
        path = ExcelReportGenerator(config).default_output_path(datetime(2024, 5, 3, 14, 5, 9))

        assert path == Path("reconciliation_report_20240503_140509.xlsx")

    def test_custom_template(self, config):
        config.output.excel.filename_template = "reports/fleet_{date}.xlsx"

        path = ExcelReportGenerator(config).default_output_path(datetime(2024, 5, 3))

        assert path == Path("reports/fleet_20240503.xlsx")

    def test_unknown_placeholder(self, config):
        config.output.excel.filename_template = "report_{account}.xlsx"

        with pytest.raises(ConfigurationError):
            ExcelReportGenerator(config).default_output_path()
