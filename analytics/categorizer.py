"""Classify raw ledger categories as buys, sales or other events."""

from __future__ import annotations

from models import TxnType


def contains_any(text: str, markers: list[str]) -> bool:
    """True if any non-empty marker is a substring of text."""
    return any(m and m in text for m in markers)


def classify_txn_type(raw: str, buy_markers: list[str], sell_markers: list[str]) -> TxnType:
    """Return the TxnType for a raw category string.

    Buy markers are checked first, so a string matching both lists is a buy.
    Anything unmatched (transfers, deposits, fees) is Other and never traded.
    """
    if contains_any(raw, buy_markers):
        return TxnType.BUY
    if contains_any(raw, sell_markers):
        return TxnType.SALE
    return TxnType.OTHER
