"""Fleet card statement to general ledger reconciliation."""

__version__ = "0.1.0"

from .matching.engine import ReconciliationEngine, reconcile
from .models.records import (
    BankRecord,
    BookRecord,
    DashboardStats,
    MatchStatus,
    ReconResult,
    ReconciliationOutcome,
)
from .utils.dates import normalize_date

__all__ = [
    "__version__",
    "ReconciliationEngine",
    "reconcile",
    "BankRecord",
    "BookRecord",
    "DashboardStats",
    "MatchStatus",
    "ReconResult",
    "ReconciliationOutcome",
    "normalize_date",
]
