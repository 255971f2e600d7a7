"""Result filtering and display helpers shared by the console and Excel output."""

from collections.abc import Iterable
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from ..models.records import MatchStatus, ReconResult


class ResultView(Enum):
    """Result tabs offered to the user."""

    ALL = "all"
    MATCHED = "matched"
    MISMATCH = "mismatch"
    MISSING = "missing"


STATUS_LABELS = {
    MatchStatus.MATCHED: "Matched",
    MatchStatus.AMOUNT_MISMATCH: "Amount Diff",
    MatchStatus.DATE_MISMATCH: "Date Diff",
    MatchStatus.MISSING_IN_BOOK: "Missing in Book",
    MatchStatus.MISSING_IN_BANK: "Missing in Bank",
}

# rich style per status
STATUS_STYLES = {
    MatchStatus.MATCHED: "green",
    MatchStatus.AMOUNT_MISMATCH: "red",
    MatchStatus.DATE_MISMATCH: "yellow",
    MatchStatus.MISSING_IN_BOOK: "dark_orange",
    MatchStatus.MISSING_IN_BANK: "blue",
}


def _in_view(result: ReconResult, view: ResultView) -> bool:
    if view is ResultView.MATCHED:
        return result.status == MatchStatus.MATCHED
    if view is ResultView.MISMATCH:
        return result.is_discrepancy
    if view is ResultView.MISSING:
        return result.is_missing
    return True


def _matches_search(result: ReconResult, needle: str) -> bool:
    haystacks = [result.id, result.notes]
    if result.bank_record is not None:
        haystacks.append(result.bank_record.invoice_number)
    if result.book_record is not None:
        haystacks.append(result.book_record.description)
    return any(needle in text.lower() for text in haystacks)


def filter_results(
    results: Iterable[ReconResult],
    view: ResultView = ResultView.ALL,
    search_term: Optional[str] = None,
) -> list[ReconResult]:
    """
    Select the results shown for a tab and search box.

    The search is a case-insensitive substring test over the result id,
    notes, bank invoice number and GL description.

    Args:
        results: Results of a reconciliation run
        view: Tab to show
        search_term: Optional free text

    Returns:
        Matching results in their original order
    """
    selected = [r for r in results if _in_view(r, view)]
    if search_term:
        needle = search_term.lower()
        selected = [r for r in selected if _matches_search(r, needle)]
    return selected


def format_amount(amount: Optional[Union[Decimal, float, int]], signed: bool = False) -> str:
    """
    Format an amount with thousands separators and two decimals.

    With ``signed`` set, positive amounts carry a leading "+".
    """
    if amount is None:
        return "-"
    value = Decimal(str(amount))
    text = f"{value:,.2f}"
    if signed and value > 0:
        return f"+{text}"
    return text
