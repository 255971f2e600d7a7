"""Date helpers shared by the matching engine and parsers."""

from typing import Optional


def normalize_date(date_str: Optional[str]) -> str:
    """
    Normalize a day/month/year string to a comparable year-month-day form.

    "1/5/2024" becomes "2024-05-01". Anything that is not three
    slash-separated parts is returned unchanged so it can still take part
    in plain string comparison.

    Args:
        date_str: Raw date string as it appears in the source file

    Returns:
        Zero-padded "YYYY-MM-DD" string, or the input unchanged
    """
    if not date_str:
        return ""

    parts = date_str.strip().split("/")
    if len(parts) == 3:
        day = parts[0].rjust(2, "0")
        month = parts[1].rjust(2, "0")
        year = parts[2]
        return f"{year}-{month}-{day}"

    return date_str
