"""Data models for tax-lot matching."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class InvalidTransactionError(ValueError):
    """Raised when a Transaction is constructed from unusable values."""


class TxnType(Enum):
    BUY = "Buy"
    SALE = "Sale"
    OTHER = "Other"


class AccountingMethod(Enum):
    FIFO = "FIFO"
    LIFO = "LIFO"
    HIFO = "HIFO"

    @classmethod
    def parse(cls, text: str) -> AccountingMethod:
        """Match an accounting method name, ignoring case."""
        try:
            return cls(text.strip().upper())
        except ValueError:
            names = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown accounting method {text!r} (expected one of {names})") from None


@dataclass(frozen=True)
class Transaction:
    """A single ledger row: one buy, sale or other event for an asset."""
    timestamp: datetime
    txn_type: TxnType
    raw_type: str  # category string as it appeared in the ledger
    base_asset: str
    base_amount: Decimal
    quote_asset: str
    quote_amount: Decimal

    def __post_init__(self):
        for name in ("base_amount", "quote_amount"):
            value = getattr(self, name)
            if not isinstance(value, Decimal) or not value.is_finite():
                raise InvalidTransactionError(f"{name} must be a finite Decimal, got {value!r}")
            if value < 0:
                raise InvalidTransactionError(f"{name} must be non-negative, got {value}")
        if self.base_amount == 0:
            raise InvalidTransactionError(
                f"{self.base_asset} {self.raw_type} at {self.timestamp} has zero base amount; "
                "price is undefined"
            )

    @property
    def price(self) -> float:
        """Unit price in quote asset (quote / base)."""
        return float(self.quote_amount / self.base_amount)

    @property
    def unix_time(self) -> int:
        return calendar.timegm(self.timestamp.utctimetuple())

    @property
    def year(self) -> int:
        return self.timestamp.year


@dataclass
class Lot:
    """A transaction plus the quantity not yet allocated.

    Lots are created per matching run and never shared between runs.
    """
    txn: Transaction
    remaining: Decimal = field(init=False)

    def __post_init__(self):
        self.remaining = self.txn.base_amount

    def is_open(self, dust: Decimal) -> bool:
        return self.remaining >= dust

    def take(self, qty: Decimal) -> None:
        self.remaining -= qty


@dataclass(frozen=True)
class AllocationRecord:
    """Quantity matched between one buy lot and one sale."""
    asset: str
    buy_date: datetime
    buy_unix: int
    buy_price: float
    sale_date: datetime
    sale_unix: int
    sale_price: float
    amount: Decimal
    gain_loss: float
    sale_year: int

    @classmethod
    def from_lots(cls, buy: Transaction, sale: Transaction, amount: Decimal) -> AllocationRecord:
        return cls(
            asset=sale.base_asset,
            buy_date=buy.timestamp,
            buy_unix=buy.unix_time,
            buy_price=buy.price,
            sale_date=sale.timestamp,
            sale_unix=sale.unix_time,
            sale_price=sale.price,
            amount=amount,
            gain_loss=(sale.price - buy.price) * float(amount),
            sale_year=sale.year,
        )


@dataclass(frozen=True)
class UncoveredSale:
    """A sale that prior buy lots could not fully cover."""
    asset: str
    sale_date: datetime
    sale_unix: int
    sale_price: float
    original_amount: Decimal
    uncovered_amount: Decimal


@dataclass
class MatchResult:
    """Allocations and uncovered remainders from a matching run."""
    allocations: list[AllocationRecord] = field(default_factory=list)
    uncovered: list[UncoveredSale] = field(default_factory=list)

    @property
    def total_gain_loss(self) -> float:
        return sum(r.gain_loss for r in self.allocations)

    def extend(self, other: MatchResult) -> None:
        self.allocations.extend(other.allocations)
        self.uncovered.extend(other.uncovered)
