"""Common ledger field parsing utilities."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

from config import TIMESTAMP_FORMATS


class TransactionParseError(ValueError):
    """Raised when a ledger row cannot be turned into a Transaction."""

    def __init__(self, message: str, row: int | None = None):
        self.row = row
        if row is not None:
            message = f"Row {row}: {message}"
        super().__init__(message)


def parse_timestamp(s: str) -> datetime:
    """Parse a timestamp like '2021-03-04T10:15:00.000Z' or '2021-03-04'."""
    s = s.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    raise TransactionParseError(f"Could not parse timestamp: {s!r}")


def parse_quantity(s: str) -> Decimal:
    """Parse a quantity string like '1,250.5' or '0.00031' to an exact Decimal."""
    cleaned = s.strip().replace(",", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise TransactionParseError(f"Could not parse amount: {s!r}") from None
    if not value.is_finite():
        raise TransactionParseError(f"Could not parse amount: {s!r}")
    return value
