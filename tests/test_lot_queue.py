"""Unit tests for per-method buy/sale queue ordering."""

from datetime import datetime
from decimal import Decimal

import pytest

from analytics.lot_queue import build_buy_queue, build_sale_queue
from models import AccountingMethod, Transaction, TxnType


def _txn(ts: str, txn_type: TxnType, qty: str = "1", total: str = "100") -> Transaction:
    return Transaction(
        timestamp=datetime.fromisoformat(ts),
        txn_type=txn_type,
        raw_type=txn_type.value,
        base_asset="BTC",
        base_amount=Decimal(qty),
        quote_asset="USD",
        quote_amount=Decimal(total),
    )


@pytest.fixture()
def ledger() -> list[Transaction]:
    return [
        _txn("2021-03-01", TxnType.BUY, total="200"),
        _txn("2021-01-01", TxnType.BUY, total="100"),
        _txn("2021-05-01", TxnType.SALE, total="250"),
        _txn("2021-02-01", TxnType.BUY, total="300"),
        _txn("2021-04-01", TxnType.SALE, total="150"),
        _txn("2021-01-15", TxnType.OTHER, total="0.5"),
    ]


# ---------------------------------------------------------------------------
# build_buy_queue
# ---------------------------------------------------------------------------

class TestBuildBuyQueue:
    def test_fifo_oldest_first(self, ledger):
        queue = build_buy_queue(ledger, AccountingMethod.FIFO)
        assert [t.price for t in queue] == [100.0, 300.0, 200.0]

    def test_lifo_newest_first(self, ledger):
        queue = build_buy_queue(ledger, AccountingMethod.LIFO)
        assert [t.price for t in queue] == [200.0, 300.0, 100.0]

    def test_hifo_highest_price_first(self, ledger):
        queue = build_buy_queue(ledger, AccountingMethod.HIFO)
        assert [t.price for t in queue] == [300.0, 200.0, 100.0]

    def test_only_buys(self, ledger):
        for method in AccountingMethod:
            assert all(t.txn_type is TxnType.BUY for t in build_buy_queue(ledger, method))

    def test_hifo_ties_keep_ledger_order(self):
        first = _txn("2021-06-01", TxnType.BUY, total="100")
        second = _txn("2021-01-01", TxnType.BUY, total="100")
        third = _txn("2021-03-01", TxnType.BUY, total="100")
        queue = build_buy_queue([first, second, third], AccountingMethod.HIFO)
        assert queue[0] is first
        assert queue[1] is second
        assert queue[2] is third

    def test_does_not_mutate_input(self, ledger):
        before = list(ledger)
        build_buy_queue(ledger, AccountingMethod.HIFO)
        assert ledger == before

    def test_empty_input(self):
        assert build_buy_queue([], AccountingMethod.FIFO) == []


# ---------------------------------------------------------------------------
# build_sale_queue
# ---------------------------------------------------------------------------

class TestBuildSaleQueue:
    def test_chronological(self, ledger):
        queue = build_sale_queue(ledger)
        assert [t.timestamp.month for t in queue] == [4, 5]
        assert all(t.txn_type is TxnType.SALE for t in queue)

    def test_empty_input(self):
        assert build_sale_queue([]) == []
