"""Build per-asset buy and sale queues for lot matching."""

from __future__ import annotations

from typing import Callable

from models import AccountingMethod, Transaction, TxnType

# (sort key, reverse) per method. sorted() is stable in both directions,
# so equal keys keep their ledger order.
_ORDERING: dict[AccountingMethod, tuple[Callable[[Transaction], object], bool]] = {
    AccountingMethod.FIFO: (lambda t: t.timestamp, False),
    AccountingMethod.LIFO: (lambda t: t.timestamp, True),
    AccountingMethod.HIFO: (lambda t: t.price, True),
}


def order_buys(buys: list[Transaction], method: AccountingMethod) -> list[Transaction]:
    """Return buys in the order the accounting method consumes them."""
    key, reverse = _ORDERING[method]
    return sorted(buys, key=key, reverse=reverse)


def build_buy_queue(transactions: list[Transaction], method: AccountingMethod) -> list[Transaction]:
    buys = [t for t in transactions if t.txn_type is TxnType.BUY]
    return order_buys(buys, method)


def build_sale_queue(transactions: list[Transaction]) -> list[Transaction]:
    """Sales in chronological order, whatever the accounting method."""
    sales = [t for t in transactions if t.txn_type is TxnType.SALE]
    return sorted(sales, key=lambda t: t.timestamp)
