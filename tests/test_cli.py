import logging

import pytest
from click.testing import CliRunner
from openpyxl import load_workbook

from fleetcard_recon.cli import main
from fleetcard_recon.utils.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner's temporary streams."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


class TestReconcileCommand:
    def test_dry_run_prints_summary_without_report(self, csv_files, tmp_path):
        bank_path, book_path = csv_files
        output = tmp_path / "report.xlsx"

        result = CliRunner().invoke(
            main,
            ["reconcile", str(bank_path), str(book_path), "-o", str(output), "--dry-run"],
        )

        assert result.exit_code == 0, result.output
        assert "Reconciliation Summary" in result.output
        assert "Dry run" in result.output
        assert not output.exists()

    def test_writes_report(self, csv_files, tmp_path):
        bank_path, book_path = csv_files
        output = tmp_path / "report.xlsx"

        result = CliRunner().invoke(
            main, ["reconcile", str(bank_path), str(book_path), "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "All Results" in load_workbook(output).sheetnames

    def test_default_report_name_uses_template(self, csv_files, tmp_path, monkeypatch):
        bank_path, book_path = csv_files
        workdir = tmp_path / "work"
        workdir.mkdir()
        monkeypatch.chdir(workdir)

        result = CliRunner().invoke(main, ["reconcile", str(bank_path), str(book_path)])

        assert result.exit_code == 0, result.output
        [report] = workdir.glob("reconciliation_report_*.xlsx")
        assert len(report.stem.split("_")) == 4

    def test_log_file_from_config(self, csv_files, tmp_path):
        bank_path, book_path = csv_files
        log_file = tmp_path / "recon.log"
        config_path = tmp_path / "config.yaml"
        config_path.write_text(f"logging:\n  log_file: {log_file.as_posix()}\n")

        result = CliRunner().invoke(
            main,
            ["reconcile", str(bank_path), str(book_path), "-c", str(config_path), "--dry-run"],
        )

        assert result.exit_code == 0, result.output
        assert "Extracted 3 records from bank statement" in log_file.read_text()

    def test_view_and_search_filter_console_rows(self, csv_files):
        bank_path, book_path = csv_files

        result = CliRunner().invoke(
            main,
            [
                "reconcile",
                str(bank_path),
                str(book_path),
                "--view",
                "missing",
                "--search",
                "rent",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "1,200.00" in result.output
        assert "Perfect Match" not in result.output

    def test_invalid_config_exits_with_error(self, csv_files, tmp_path):
        bank_path, book_path = csv_files
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("matching:\n  amount_tolerance: lots\n")

        result = CliRunner().invoke(
            main,
            ["reconcile", str(bank_path), str(book_path), "-c", str(config_path), "--dry-run"],
        )

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_input_file(self, tmp_path):
        result = CliRunner().invoke(
            main, ["reconcile", str(tmp_path / "nope.csv"), str(tmp_path / "nope2.csv")]
        )
        assert result.exit_code != 0


class TestParseCommands:
    def test_parse_bank(self, csv_files):
        bank_path, _ = csv_files

        result = CliRunner().invoke(main, ["parse-bank", str(bank_path)])

        assert result.exit_code == 0, result.output
        assert "Total records: 3" in result.output

    def test_parse_book(self, csv_files):
        _, book_path = csv_files

        result = CliRunner().invoke(main, ["parse-book", str(book_path)])

        assert result.exit_code == 0, result.output
        assert "Total records: 4" in result.output


class TestInitConfig:
    def test_generates_file(self, tmp_path):
        output = tmp_path / "config.yaml"

        result = CliRunner().invoke(main, ["init-config", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()
