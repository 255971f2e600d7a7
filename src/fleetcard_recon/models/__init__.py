"""Data models for reconciliation."""

from .records import (
    BankRecord,
    BookRecord,
    MatchStatus,
    MatchProvenance,
    ReconResult,
    DashboardStats,
    ReconciliationOutcome,
)

__all__ = [
    "BankRecord",
    "BookRecord",
    "MatchStatus",
    "MatchProvenance",
    "ReconResult",
    "DashboardStats",
    "ReconciliationOutcome",
]
