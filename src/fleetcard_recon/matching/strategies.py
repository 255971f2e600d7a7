"""
Matching strategies for fleet card reconciliation.
Each strategy picks at most one GL record for a given bank record.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence, Set
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..models.records import BankRecord, BookRecord, MatchStatus
from ..utils.dates import normalize_date

DEFAULT_AMOUNT_TOLERANCE = Decimal("0.01")

PERFECT_MATCH_NOTE = "Perfect Match"
INFERRED_MATCH_NOTE = "Inferred Match: Invoice ID mismatch but Date and Amount match perfectly"


@dataclass(frozen=True)
class MatchDecision:
    """The GL record chosen for a bank record and the verdict it earned."""

    book_record: BookRecord
    status: MatchStatus
    notes: str


def build_book_index(book_records: Iterable[BookRecord]) -> dict[str, list[BookRecord]]:
    """
    Group GL records by trimmed description.

    Each list keeps the input order, which later decides tie-breaks.

    Args:
        book_records: GL records in file order

    Returns:
        Mapping of description key to candidate records
    """
    index: dict[str, list[BookRecord]] = {}
    for record in book_records:
        index.setdefault(record.description.strip(), []).append(record)
    return index


def amounts_agree(
    first: Decimal, second: Decimal, tolerance: Decimal = DEFAULT_AMOUNT_TOLERANCE
) -> bool:
    """True when two amounts differ by strictly less than the tolerance."""
    return abs(first - second) < tolerance


class MatchingStrategy(ABC):
    """Abstract base class for matching strategies."""

    def __init__(self, amount_tolerance: Decimal = DEFAULT_AMOUNT_TOLERANCE):
        """
        Initialize with amount tolerance.

        Args:
            amount_tolerance: Exclusive bound under which amounts count as equal
        """
        self.amount_tolerance = amount_tolerance

    @abstractmethod
    def select(
        self,
        bank_record: BankRecord,
        candidates: Sequence[BookRecord],
        consumed: Set[str],
    ) -> Optional[MatchDecision]:
        """
        Choose a GL record for a bank record.

        Args:
            bank_record: Bank record to match
            candidates: Candidate GL records in file order
            consumed: Ids of GL records that may no longer be matched

        Returns:
            The decision, or None when no candidate qualifies
        """
        pass


class InvoiceKeyStrategy(MatchingStrategy):
    """
    Pass 1 policy over GL records sharing the bank record's invoice number.

    An unconsumed candidate with the same amount wins over an earlier one
    with a different amount. When no amounts agree the first unconsumed
    candidate is still paired and flagged as an amount variance, because an
    invoice number match is strong enough evidence to report the difference.
    """

    def select(
        self,
        bank_record: BankRecord,
        candidates: Sequence[BookRecord],
        consumed: Set[str],
    ) -> Optional[MatchDecision]:
        available = [c for c in candidates if c.id not in consumed]
        if not available:
            return None

        exact_amount = next(
            (
                c
                for c in available
                if amounts_agree(c.amount, bank_record.total_amount, self.amount_tolerance)
            ),
            None,
        )

        if exact_amount is not None:
            if normalize_date(bank_record.transaction_date) == normalize_date(
                exact_amount.posting_date
            ):
                return MatchDecision(exact_amount, MatchStatus.MATCHED, PERFECT_MATCH_NOTE)
            return MatchDecision(
                exact_amount,
                MatchStatus.DATE_MISMATCH,
                f"Date mismatch: Bank({bank_record.transaction_date}) "
                f"vs Book({exact_amount.posting_date})",
            )

        fallback = available[0]
        return MatchDecision(
            fallback,
            MatchStatus.AMOUNT_MISMATCH,
            f"Amount variance: Bank({bank_record.total_amount}) vs Book({fallback.amount})",
        )


class InferredAmountDateStrategy(MatchingStrategy):
    """
    Pass 2 policy: first unconsumed GL record with equal amount and date.

    Candidates are the whole ledger in file order, not a key group, so the
    cost is one full scan per unmatched bank record.
    """

    def select(
        self,
        bank_record: BankRecord,
        candidates: Sequence[BookRecord],
        consumed: Set[str],
    ) -> Optional[MatchDecision]:
        bank_date = normalize_date(bank_record.transaction_date)

        for candidate in candidates:
            if candidate.id in consumed:
                continue
            if amounts_agree(
                candidate.amount, bank_record.total_amount, self.amount_tolerance
            ) and bank_date == normalize_date(candidate.posting_date):
                return MatchDecision(candidate, MatchStatus.MATCHED, INFERRED_MATCH_NOTE)

        return None
