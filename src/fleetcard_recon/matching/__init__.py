"""Matching engine and strategies."""

from .engine import ReconciliationEngine, ReconciliationContext, reconcile
from .strategies import (
    MatchingStrategy,
    MatchDecision,
    InvoiceKeyStrategy,
    InferredAmountDateStrategy,
    build_book_index,
)

__all__ = [
    "ReconciliationEngine",
    "ReconciliationContext",
    "reconcile",
    "MatchingStrategy",
    "MatchDecision",
    "InvoiceKeyStrategy",
    "InferredAmountDateStrategy",
    "build_book_index",
]
