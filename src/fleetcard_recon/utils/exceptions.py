"""Custom exceptions for the reconciliation application."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class BankStatementParseError(ReconciliationError):
    """Error reading the card issuer statement CSV."""

    pass


class LedgerParseError(ReconciliationError):
    """Error reading the general ledger CSV."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error generating Excel report."""

    pass
