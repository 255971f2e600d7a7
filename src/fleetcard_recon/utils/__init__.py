"""Utility modules."""

from .dates import normalize_date
from .exceptions import (
    ReconciliationError,
    BankStatementParseError,
    LedgerParseError,
    ConfigurationError,
    ReportGenerationError,
)
from .logging_config import setup_logging

__all__ = [
    "normalize_date",
    "ReconciliationError",
    "BankStatementParseError",
    "LedgerParseError",
    "ConfigurationError",
    "ReportGenerationError",
    "setup_logging",
]
