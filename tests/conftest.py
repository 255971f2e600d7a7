"""Shared fixtures and helpers for the reconciliation test suite."""

from decimal import Decimal

import pytest

from fleetcard_recon.config import ReconConfig
from fleetcard_recon.models.records import BankRecord, BookRecord

BANK_HEADER = (
    "Account No,Card No,Transaction Date,Time,Invoice Number,Driver,Odometer,"
    "Product,Quantity,Unit Price,Total Amount,Site,Location,Merchant ID,Fuel Brand"
)
BOOK_HEADER = "Document No,Posting Date,Description,Amount"


def _bank_line(account, date, invoice, amount, merchant="M001", brand="Shell") -> str:
    return (
        f"{account},4000111122223333,{date},08:15,{invoice},J SMITH,10500,DIESEL,"
        f"40.5,1.95,{amount},SITE1,TOWN,{merchant},{brand}"
    )


@pytest.fixture
def config():
    """Default configuration."""
    return ReconConfig()


@pytest.fixture
def make_bank():
    """Factory for bank records with sensible defaults."""

    def _make(id="bank-1", invoice="INV1", amount="100.00", date="01/05/2024", **kwargs):
        return BankRecord(
            id=id,
            account_no=kwargs.pop("account_no", "ACC1"),
            transaction_date=date,
            invoice_number=invoice,
            total_amount=Decimal(amount),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_book():
    """Factory for GL records with sensible defaults."""

    def _make(id="book-1", description="INV1", amount="100.00", date="01/05/2024", **kwargs):
        return BookRecord(
            id=id,
            document_no=kwargs.pop("document_no", "DOC1"),
            posting_date=date,
            description=description,
            amount=Decimal(amount),
            **kwargs,
        )

    return _make


@pytest.fixture
def bank_csv():
    """Statement CSV content with three transactions."""
    lines = [
        BANK_HEADER,
        _bank_line("ACC1", "01/05/2024", "INV1", "100.00"),
        _bank_line("ACC1", "02/05/2024", "INV2", '"2,080.00"', brand="BP"),
        _bank_line("ACC1", "03/05/2024", "XYZ", "55.50"),
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def book_csv():
    """GL CSV content: one perfect match, one amount variance, one inferred, one orphan."""
    lines = [
        BOOK_HEADER,
        "DOC1,1/5/2024,INV1,100.00",
        'DOC2,02/05/2024, INV2 ,"2,000.00"',
        "DOC3,03/05/2024,ABC,55.50",
        "DOC4,09/05/2024,RENT,1200.00",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def csv_files(tmp_path, bank_csv, book_csv):
    """Write the sample CSVs to disk and return their paths."""
    bank_path = tmp_path / "bank.csv"
    book_path = tmp_path / "book.csv"
    bank_path.write_text(bank_csv)
    book_path.write_text(book_csv)
    return bank_path, book_path
