"""
General ledger CSV parser.
Converts exported GL lines into BookRecord objects.
"""

from pathlib import Path
import logging

from ..config import ReconConfig
from ..models.records import BookRecord
from ..utils.exceptions import LedgerParseError
from .common import field_at, parse_amount, read_rows

logger = logging.getLogger(__name__)


class LedgerParser:
    """Parser for general ledger CSV exports."""

    def __init__(self, config: ReconConfig):
        self.config = config
        self.book_config = config.input.book
        self.column_mappings = self.book_config.column_mappings

    def parse_file(self, file_path: Path) -> list[BookRecord]:
        """
        Parse a GL CSV file and return book records.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of book records in file order

        Raises:
            LedgerParseError: If the file cannot be read
        """
        logger.info(f"Parsing GL file: {file_path}")

        try:
            text = Path(file_path).read_text(encoding=self.book_config.encoding)
            rows = self._read(text)
        except Exception as e:
            logger.error(f"Failed to read GL file: {e}")
            raise LedgerParseError(f"Failed to read GL file: {e}") from e

        records = self._process_rows(rows)
        logger.info(f"Extracted {len(records)} records from GL file")

        return records

    def parse_text(self, text: str) -> list[BookRecord]:
        """Parse GL CSV content already held in memory."""
        try:
            rows = self._read(text)
        except Exception as e:
            raise LedgerParseError(f"Failed to read GL file: {e}") from e

        return self._process_rows(rows)

    def _read(self, text: str) -> list[tuple[int, tuple[str, ...]]]:
        return read_rows(
            text,
            delimiter=self.book_config.delimiter,
            skip_header=self.book_config.skip_header,
        )

    def _process_rows(self, rows: list[tuple[int, tuple[str, ...]]]) -> list[BookRecord]:
        records: list[BookRecord] = []

        for position, values in rows:

            def get(name: str) -> str:
                return field_at(values, self.column_mappings.get(name, -1))

            records.append(
                BookRecord(
                    id=f"book-{position}",
                    document_no=get("document_no"),
                    posting_date=get("posting_date"),
                    description=get("description"),
                    amount=parse_amount(get("amount")),
                    original_row=values,
                )
            )

        return records
