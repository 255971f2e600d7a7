"""Data models for fleet card reconciliation records and results."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class MatchStatus(Enum):
    """Outcome of reconciling a single record."""

    MATCHED = "MATCHED"
    AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
    DATE_MISMATCH = "DATE_MISMATCH"
    MISSING_IN_BOOK = "MISSING_IN_BOOK"  # Bank record with no GL counterpart
    MISSING_IN_BANK = "MISSING_IN_BANK"  # GL record with no bank counterpart


class MatchProvenance(Enum):
    """How a result was produced, encoded in the result id prefix."""

    STRICT = "strict"
    INFERRED = "inferred"
    ORPHAN_BANK = "orphan-bank"
    ORPHAN_BOOK = "orphan-book"


RESULT_ID_PREFIX = "recon-"


@dataclass(frozen=True)
class BankRecord:
    """
    One line of the card issuer statement.

    Built by the bank statement parser and never mutated afterwards.
    """

    id: str
    account_no: str
    transaction_date: str
    invoice_number: str
    total_amount: Decimal
    merchant_id: str = ""
    fuel_brand: str = ""

    # Raw field values for audit/display
    original_row: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BookRecord:
    """
    One line of the general ledger export.

    The description field carries the invoice number used as matching key.
    """

    id: str
    document_no: str
    posting_date: str
    description: str
    amount: Decimal
    original_row: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class ReconResult:
    """Verdict for one bank record, inferred pairing, or orphan GL record."""

    id: str
    status: MatchStatus
    bank_record: Optional[BankRecord] = None
    book_record: Optional[BookRecord] = None

    # Book amount minus bank amount, or the one-sided amount for orphans
    amount_diff: Decimal = Decimal("0")
    notes: str = ""

    @property
    def provenance(self) -> MatchProvenance:
        """Decode the provenance tag embedded in the result id."""
        tag = self.id[len(RESULT_ID_PREFIX):]
        if tag.startswith("inferred-"):
            return MatchProvenance.INFERRED
        if tag.startswith("orphan-bank-"):
            return MatchProvenance.ORPHAN_BANK
        if tag.startswith("orphan-book-"):
            return MatchProvenance.ORPHAN_BOOK
        return MatchProvenance.STRICT

    @property
    def is_discrepancy(self) -> bool:
        """True for amount or date mismatches."""
        return self.status in (MatchStatus.AMOUNT_MISMATCH, MatchStatus.DATE_MISMATCH)

    @property
    def is_missing(self) -> bool:
        """True for orphans on either side."""
        return self.status in (MatchStatus.MISSING_IN_BOOK, MatchStatus.MISSING_IN_BANK)


@dataclass
class DashboardStats:
    """Aggregate counts over a completed reconciliation run."""

    total_bank: int = 0
    total_book: int = 0
    matched_count: int = 0
    mismatch_count: int = 0
    missing_in_book_count: int = 0
    missing_in_bank_count: int = 0
    total_discrepancy: Decimal = Decimal("0")

    @property
    def match_rate(self) -> float:
        """Percentage of bank records that ended up matched."""
        if self.total_bank == 0:
            return 0.0
        return (self.matched_count / self.total_bank) * 100

    @property
    def total_transactions(self) -> int:
        return self.total_bank + self.total_book

    @property
    def missing_count(self) -> int:
        return self.missing_in_book_count + self.missing_in_bank_count


@dataclass
class ReconciliationOutcome:
    """Results of one reconciliation run plus their summary."""

    results: list[ReconResult]
    stats: DashboardStats
