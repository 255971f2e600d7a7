"""
Card issuer statement parser.
Reads the fleet card transaction CSV into BankRecord objects.
"""

from pathlib import Path
from typing import Optional
import logging

from ..config import ReconConfig
from ..models.records import BankRecord
from ..utils.exceptions import BankStatementParseError
from .common import field_at, parse_amount, read_rows

logger = logging.getLogger(__name__)


class BankStatementParser:
    """
    Parser for card issuer statement CSV files.

    Fields are picked by position; the header line is only skipped.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config
        self.bank_config = config.input.bank
        self.column_mappings = self.bank_config.column_mappings

    def parse_file(self, file_path: Path) -> list[BankRecord]:
        """
        Parse a statement CSV file and return bank records.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of bank records in file order

        Raises:
            BankStatementParseError: If the file cannot be read
        """
        logger.info(f"Parsing bank statement file: {file_path}")

        try:
            text = Path(file_path).read_text(encoding=self.bank_config.encoding)
            rows = self._read(text)
        except Exception as e:
            logger.error(f"Failed to read bank statement: {e}")
            raise BankStatementParseError(f"Failed to read bank statement: {e}") from e

        records = self._process_rows(rows)
        logger.info(f"Extracted {len(records)} records from bank statement")

        return records

    def parse_text(self, text: str) -> list[BankRecord]:
        """
        Parse statement CSV content already held in memory.

        Raises:
            BankStatementParseError: If the content is not valid CSV
        """
        try:
            rows = self._read(text)
        except Exception as e:
            raise BankStatementParseError(f"Failed to read bank statement: {e}") from e

        return self._process_rows(rows)

    def _read(self, text: str) -> list[tuple[int, tuple[str, ...]]]:
        return read_rows(
            text,
            delimiter=self.bank_config.delimiter,
            skip_header=self.bank_config.skip_header,
        )

    def _process_rows(self, rows: list[tuple[int, tuple[str, ...]]]) -> list[BankRecord]:
        records: list[BankRecord] = []

        for position, values in rows:
            record = self._build_record(values, position)
            if record:
                records.append(record)

        return records

    def _build_record(self, values: tuple[str, ...], position: int) -> Optional[BankRecord]:
        """
        Convert raw fields to a BankRecord.

        Args:
            values: Raw field strings
            position: 1-based line number after the header, used for the record id

        Returns:
            Bank record, or None if the row has too few fields
        """
        if len(values) < self.bank_config.min_fields:
            logger.warning(
                f"Row {position}: only {len(values)} fields, skipping"
            )
            return None

        def get(name: str) -> str:
            return field_at(values, self.column_mappings.get(name, -1))

        return BankRecord(
            id=f"bank-{position}",
            account_no=get("account_no"),
            transaction_date=get("transaction_date"),
            invoice_number=get("invoice_number"),
            total_amount=parse_amount(get("total_amount")),
            merchant_id=get("merchant_id"),
            fuel_brand=get("fuel_brand"),
            original_row=values,
        )
