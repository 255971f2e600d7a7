"""Parsers for card issuer statements and GL exports."""

from .bank_parser import BankStatementParser
from .ledger_parser import LedgerParser
from .common import parse_amount

__all__ = ["BankStatementParser", "LedgerParser", "parse_amount"]
