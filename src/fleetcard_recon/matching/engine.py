"""
Two-pass matching engine for fleet card reconciliation.
Pairs card issuer records with GL records and summarizes the outcome.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

from ..config import ReconConfig
from ..models.records import (
    BankRecord,
    BookRecord,
    DashboardStats,
    MatchStatus,
    ReconciliationOutcome,
    ReconResult,
)
from .strategies import (
    InferredAmountDateStrategy,
    InvoiceKeyStrategy,
    MatchDecision,
    build_book_index,
)

logger = logging.getLogger(__name__)

MISSING_IN_BOOK_NOTE = "Invoice found in Bank Statement but not in GL"
MISSING_IN_BANK_NOTE = "Entry exists in GL but not found in Bank Statement"


@dataclass
class ReconciliationContext:
    """State owned by a single reconciliation run."""

    bank_records: Sequence[BankRecord]
    book_records: Sequence[BookRecord]

    # Ids of GL records already paired with a bank record
    consumed: set[str] = field(default_factory=set)
    results: list[ReconResult] = field(default_factory=list)

    def consume(self, book_record: BookRecord) -> None:
        self.consumed.add(book_record.id)


class ReconciliationEngine:
    """
    Main reconciliation engine that orchestrates the matching process.

    Pass 1 pairs records on invoice number. Pass 2 pairs whatever is left on
    amount and date. Remaining GL records are reported as missing in bank.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration, defaults when omitted
        """
        self.config = config or ReconConfig()
        tolerance = Decimal(str(self.config.matching.amount_tolerance))
        self.invoice_strategy = InvoiceKeyStrategy(amount_tolerance=tolerance)
        self.inferred_strategy = InferredAmountDateStrategy(amount_tolerance=tolerance)

    def reconcile(
        self,
        bank_records: Sequence[BankRecord],
        book_records: Sequence[BookRecord],
    ) -> ReconciliationOutcome:
        """
        Perform reconciliation between bank and GL records.

        Args:
            bank_records: Records from the card issuer statement
            book_records: Records from the general ledger

        Returns:
            Results in pass order plus their summary statistics
        """
        start_time = datetime.now()
        logger.info(
            f"Starting reconciliation: {len(bank_records)} bank records, "
            f"{len(book_records)} GL records"
        )

        context = ReconciliationContext(bank_records, book_records)

        deferred = self._match_by_invoice(context)
        self._match_remaining(context, deferred)
        self._collect_book_orphans(context)

        stats = self.generate_stats(bank_records, book_records, context.results)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Reconciliation complete in {elapsed:.2f}s: {stats.matched_count} matched, "
            f"{stats.mismatch_count} discrepancies, {stats.missing_in_book_count} "
            f"missing in GL, {stats.missing_in_bank_count} missing in bank"
        )

        return ReconciliationOutcome(results=context.results, stats=stats)

    def _match_by_invoice(self, context: ReconciliationContext) -> list[BankRecord]:
        """
        Pass 1: match bank records to GL records with the same invoice number.

        Args:
            context: Run state

        Returns:
            Bank records that got no result in this pass, in input order
        """
        book_index = build_book_index(context.book_records)
        deferred: list[BankRecord] = []

        for bank_record in context.bank_records:
            key = bank_record.invoice_number.strip()
            # Blank invoice numbers never pair on key
            candidates = book_index.get(key, []) if key else []
            decision = self.invoice_strategy.select(bank_record, candidates, context.consumed)

            if decision is None:
                deferred.append(bank_record)
                continue

            context.consume(decision.book_record)
            context.results.append(
                ReconResult(
                    id=f"recon-{bank_record.id}-{decision.book_record.id}",
                    status=decision.status,
                    bank_record=bank_record,
                    book_record=decision.book_record,
                    amount_diff=decision.book_record.amount - bank_record.total_amount,
                    notes=decision.notes,
                )
            )

        logger.debug(
            f"Invoice pass: {len(context.results)} paired, {len(deferred)} deferred"
        )
        return deferred

    def _match_remaining(
        self, context: ReconciliationContext, deferred: list[BankRecord]
    ) -> None:
        """
        Pass 2: infer matches on amount and date, otherwise report missing in GL.

        Scans the whole ledger in file order for every deferred record.
        """
        inferred_count = 0

        for bank_record in deferred:
            decision: Optional[MatchDecision] = None
            if self.config.matching.enable_inferred_matching:
                decision = self.inferred_strategy.select(
                    bank_record, context.book_records, context.consumed
                )

            if decision is not None:
                inferred_count += 1
                context.consume(decision.book_record)
                context.results.append(
                    ReconResult(
                        id=f"recon-inferred-{bank_record.id}-{decision.book_record.id}",
                        status=decision.status,
                        bank_record=bank_record,
                        book_record=decision.book_record,
                        amount_diff=Decimal("0"),
                        notes=decision.notes,
                    )
                )
            else:
                context.results.append(
                    ReconResult(
                        id=f"recon-orphan-bank-{bank_record.id}",
                        status=MatchStatus.MISSING_IN_BOOK,
                        bank_record=bank_record,
                        amount_diff=-bank_record.total_amount,
                        notes=MISSING_IN_BOOK_NOTE,
                    )
                )

        logger.debug(
            f"Inferred pass: {inferred_count} inferred, "
            f"{len(deferred) - inferred_count} missing in GL"
        )

    def _collect_book_orphans(self, context: ReconciliationContext) -> None:
        """Report every GL record that neither pass consumed."""
        for book_record in context.book_records:
            if book_record.id in context.consumed:
                continue
            context.results.append(
                ReconResult(
                    id=f"recon-orphan-book-{book_record.id}",
                    status=MatchStatus.MISSING_IN_BANK,
                    book_record=book_record,
                    amount_diff=book_record.amount,
                    notes=MISSING_IN_BANK_NOTE,
                )
            )

    def generate_stats(
        self,
        bank_records: Sequence[BankRecord],
        book_records: Sequence[BookRecord],
        results: Sequence[ReconResult],
    ) -> DashboardStats:
        """
        Summarize a completed result list.

        Args:
            bank_records: All bank records of the run
            book_records: All GL records of the run
            results: Results produced by the run

        Returns:
            Dashboard statistics
        """
        counts = {status: 0 for status in MatchStatus}
        for result in results:
            counts[result.status] += 1

        return DashboardStats(
            total_bank=len(bank_records),
            total_book=len(book_records),
            matched_count=counts[MatchStatus.MATCHED],
            mismatch_count=(
                counts[MatchStatus.AMOUNT_MISMATCH] + counts[MatchStatus.DATE_MISMATCH]
            ),
            missing_in_book_count=counts[MatchStatus.MISSING_IN_BOOK],
            missing_in_bank_count=counts[MatchStatus.MISSING_IN_BANK],
            total_discrepancy=sum((abs(r.amount_diff) for r in results), Decimal("0")),
        )


def reconcile(
    bank_records: Sequence[BankRecord],
    book_records: Sequence[BookRecord],
) -> ReconciliationOutcome:
    """Reconcile with the default configuration."""
    return ReconciliationEngine().reconcile(bank_records, book_records)
