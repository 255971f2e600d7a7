"""
Command-line interface for the fleet card reconciliation tool.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import load_config, generate_default_config
from .matching.engine import ReconciliationEngine
from .models.records import DashboardStats, ReconResult
from .parsers.bank_parser import BankStatementParser
from .parsers.ledger_parser import LedgerParser
from .reports.excel_generator import ExcelReportGenerator
from .reports.views import (
    STATUS_LABELS,
    STATUS_STYLES,
    ResultView,
    filter_results,
    format_amount,
)
from .utils.logging_config import setup_logging

console = Console()

PREVIEW_ROWS = 20


@click.group()
@click.version_option(version=__version__)
def main():
    """Fleet card statement to general ledger reconciliation tool."""
    pass


@main.command()
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.argument("book_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel file path")
@click.option(
    "--view",
    type=click.Choice([v.value for v in ResultView]),
    default=ResultView.ALL.value,
    show_default=True,
    help="Which results to list in the console",
)
@click.option("--search", default=None, help="Only list results containing this text")
@click.option(
    "--limit", type=int, default=50, show_default=True, help="Maximum results to list"
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--dry-run", is_flag=True, help="Reconcile and show results without a report")
def reconcile(
    bank_file: Path,
    book_file: Path,
    config: Optional[Path],
    output: Optional[Path],
    view: str,
    search: Optional[str],
    limit: int,
    verbose: bool,
    dry_run: bool,
):
    """
    Reconcile a fleet card statement with general ledger entries.

    BANK_FILE: Path to the card issuer statement CSV
    BOOK_FILE: Path to the general ledger CSV export
    """
    try:
        recon_config = load_config(config)

        log_level = logging.DEBUG if verbose else getattr(
            logging, recon_config.logging.level.upper(), logging.INFO
        )
        log_file = recon_config.logging.log_file
        setup_logging(
            log_level,
            log_file=Path(log_file) if log_file else None,
            log_format=recon_config.logging.format,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Parsing bank statement...", total=None)
            bank_records = BankStatementParser(recon_config).parse_file(bank_file)
            progress.update(task, completed=True)

            task = progress.add_task("Parsing general ledger...", total=None)
            book_records = LedgerParser(recon_config).parse_file(book_file)
            progress.update(task, completed=True)

            task = progress.add_task("Running reconciliation...", total=None)
            engine = ReconciliationEngine(recon_config)
            outcome = engine.reconcile(bank_records, book_records)
            progress.update(task, completed=True)

        _display_summary(outcome.stats)

        shown = filter_results(outcome.results, ResultView(view), search)
        _display_results(shown, limit)

        if dry_run:
            console.print("\n[yellow]Dry run - no report generated[/yellow]")
            return

        generator = ExcelReportGenerator(recon_config)
        if output is None:
            output = generator.default_output_path()

        report_path = generator.generate_report(
            stats=outcome.stats,
            results=outcome.results,
            output_path=output,
            bank_filename=bank_file.name,
            book_filename=book_file.name,
        )

        console.print(f"\n[green]Report generated: {report_path}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("parse-bank")
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_bank(bank_file: Path, config: Optional[Path]):
    """
    Parse a card issuer statement and display its records.

    BANK_FILE: Path to the card issuer statement CSV
    """
    try:
        records = BankStatementParser(load_config(config)).parse_file(bank_file)

        table = Table(title=f"Bank Records: {bank_file.name}")
        table.add_column("ID")
        table.add_column("Date")
        table.add_column("Invoice")
        table.add_column("Amount", justify="right")
        table.add_column("Merchant")
        table.add_column("Fuel Brand")

        for record in records[:PREVIEW_ROWS]:
            table.add_row(
                record.id,
                record.transaction_date,
                record.invoice_number or "-",
                format_amount(record.total_amount),
                record.merchant_id or "-",
                record.fuel_brand or "-",
            )

        console.print(table)

        if len(records) > PREVIEW_ROWS:
            console.print(f"\n... and {len(records) - PREVIEW_ROWS} more records")

        console.print(f"\nTotal records: {len(records)}")

    except Exception as e:
        console.print(f"[red]Error parsing file: {escape(str(e))}[/red]")
        sys.exit(1)


@main.command("parse-book")
@click.argument("book_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_book(book_file: Path, config: Optional[Path]):
    """
    Parse a general ledger export and display its records.

    BOOK_FILE: Path to the general ledger CSV export
    """
    try:
        records = LedgerParser(load_config(config)).parse_file(book_file)

        table = Table(title=f"Book Records: {book_file.name}")
        table.add_column("ID")
        table.add_column("Document No")
        table.add_column("Posting Date")
        table.add_column("Description")
        table.add_column("Amount", justify="right")

        for record in records[:PREVIEW_ROWS]:
            table.add_row(
                record.id,
                record.document_no or "-",
                record.posting_date,
                record.description or "-",
                format_amount(record.amount),
            )

        console.print(table)

        if len(records) > PREVIEW_ROWS:
            console.print(f"\n... and {len(records) - PREVIEW_ROWS} more records")

        console.print(f"\nTotal records: {len(records)}")

    except Exception as e:
        console.print(f"[red]Error parsing file: {escape(str(e))}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_summary(stats: DashboardStats) -> None:
    """Display reconciliation summary in console."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Total Transactions", str(stats.total_transactions))
    table.add_row("Bank Records", str(stats.total_bank))
    table.add_row("Book Records", str(stats.total_book))
    table.add_row("Matched", str(stats.matched_count))
    table.add_row("Match Rate", f"{stats.match_rate:.1f}%")
    table.add_row("Discrepancies", str(stats.mismatch_count))
    table.add_row("Missing in Book", str(stats.missing_in_book_count))
    table.add_row("Missing in Bank", str(stats.missing_in_bank_count))
    table.add_row("Total Discrepancy", format_amount(stats.total_discrepancy))

    console.print(table)


def _display_results(results: list[ReconResult], limit: int) -> None:
    """Display reconciliation results in console."""
    table = Table(title="Reconciliation Results")
    table.add_column("Status")
    table.add_column("Invoice")
    table.add_column("Bank Date")
    table.add_column("Bank Amount", justify="right")
    table.add_column("Book Date")
    table.add_column("Book Amount", justify="right")
    table.add_column("Difference", justify="right")
    table.add_column("Notes")

    for result in results[:limit]:
        bank = result.bank_record
        book = result.book_record
        style = STATUS_STYLES[result.status]
        table.add_row(
            f"[{style}]{STATUS_LABELS[result.status]}[/{style}]",
            escape(bank.invoice_number if bank else (book.description if book else "-")),
            bank.transaction_date if bank else "-",
            format_amount(bank.total_amount if bank else None),
            book.posting_date if book else "-",
            format_amount(book.amount if book else None),
            format_amount(result.amount_diff, signed=True),
            escape(result.notes),
        )

    console.print(table)

    if len(results) > limit:
        console.print(f"\n... and {len(results) - limit} more results")


if __name__ == "__main__":
    main()
