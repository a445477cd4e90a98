"""Sequential invoice numbering: ``<PREFIX>-<YYYYMM>-<NNNN>``."""

import datetime as dt
import re
from typing import Iterable


def invoice_number_period(prefix: str, on: dt.date) -> str:
    """Common leading part of every number issued in the month of ``on``."""
    return f"{prefix}-{on.year}{on.month:02d}-"


def format_invoice_number(prefix: str, on: dt.date, sequence: int) -> str:
    """Format an invoice number.

    Example:
        >>> format_invoice_number("INV", dt.date(2024, 3, 15), 7)
        'INV-202403-0007'
    """
    if sequence < 1:
        raise ValueError(f"Invoice sequence must be positive, got {sequence}")
    return f"{invoice_number_period(prefix, on)}{sequence:04d}"


def next_invoice_sequence(existing_numbers: Iterable[str], prefix: str, on: dt.date) -> int:
    """Next sequence number for the month of ``on``.

    Uses the highest existing sequence of that month rather than a row count,
    so a deleted invoice never causes a number to be handed out twice.

    Example:
        >>> next_invoice_sequence(["INV-202403-0001", "INV-202403-0004"], "INV", dt.date(2024, 3, 20))
        5
    """
    pattern = re.compile(rf"^{re.escape(invoice_number_period(prefix, on))}(\d+)$")
    highest = 0
    for number in existing_numbers:
        match = pattern.match(number)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1
