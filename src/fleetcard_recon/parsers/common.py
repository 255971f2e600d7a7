"""Helpers shared by the statement and ledger parsers."""

from decimal import Decimal, InvalidOperation
from io import StringIO
from typing import Union
import logging

import pandas as pd

logger = logging.getLogger(__name__)

# Characters stripped from currency strings such as "2,080.00"
_AMOUNT_NOISE = str.maketrans("", "", "\"',")


def parse_amount(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Convert a raw amount field to Decimal.

    Numbers pass through. Strings lose quotes, commas and surrounding
    whitespace. Empty or unparseable values become zero.

    Args:
        value: Raw amount value

    Returns:
        Decimal amount
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and pd.isna(value):
            return Decimal("0")
        return Decimal(str(value))
    if not value:
        return Decimal("0")

    cleaned = str(value).translate(_AMOUNT_NOISE).strip()
    if not cleaned:
        return Decimal("0")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        logger.warning(f"Unparseable amount {value!r}, using 0")
        return Decimal("0")

    if not amount.is_finite():
        logger.warning(f"Non-finite amount {value!r}, using 0")
        return Decimal("0")
    return amount


def _field_count(line: str, delimiter: str) -> int:
    """Number of fields on a line, ignoring delimiters inside quotes."""
    count = 1
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            count += 1
    return count


def read_rows(
    text: str,
    delimiter: str,
    skip_header: bool,
) -> list[tuple[int, tuple[str, ...]]]:
    """
    Split delimited text into numbered rows of raw string fields.

    Rows are numbered by their line in the file, counting from 1 after the
    header. Blank lines are dropped but keep their number. Rows may have
    different field counts; each row keeps exactly the fields it has.

    Args:
        text: File content
        delimiter: Field delimiter
        skip_header: Whether the first line is a header

    Returns:
        List of (row number, fields) pairs in file order
    """
    lines = text.strip().splitlines()
    if skip_header:
        lines = lines[1:]

    numbered = [
        (number, line.strip())
        for number, line in enumerate(lines, start=1)
        if line.strip()
    ]
    if not numbered:
        return []

    counts = [_field_count(line, delimiter) for _, line in numbered]
    df = pd.read_csv(
        StringIO("\n".join(line for _, line in numbered)),
        header=None,
        names=list(range(max(counts))),
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
        sep=delimiter,
    )
    if len(df) != len(numbered):
        raise ValueError(f"expected {len(numbered)} rows, read {len(df)}")

    rows = []
    for (number, _), count, cells in zip(numbered, counts, df.itertuples(index=False)):
        values = tuple("" if pd.isna(v) else str(v) for v in cells[:count])
        rows.append((number, values))
    return rows


def field_at(values: tuple[str, ...], position: int) -> str:
    """Field at a zero-based position, or an empty string when absent."""
    if 0 <= position < len(values):
        return values[position]
    return ""
