"""Tax-lot matching of sales against buy lots (FIFO, LIFO or HIFO)."""

from __future__ import annotations

import logging
from decimal import Decimal

from analytics.lot_queue import build_buy_queue, build_sale_queue
from config import DUST_THRESHOLD
from models import (
    AccountingMethod, AllocationRecord, Lot, MatchResult, Transaction, UncoveredSale,
)

logger = logging.getLogger(__name__)


def match_asset(
    asset: str,
    transactions: list[Transaction],
    method: AccountingMethod,
    dust: Decimal = DUST_THRESHOLD,
) -> MatchResult:
    """Match one asset's sales against its buy lots.

    Sales are walked chronologically; for each sale, buy lots are scanned in
    accounting-method order. Lots bought after the sale are skipped. Every
    clip emits one AllocationRecord. A sale left with remaining >= dust after
    the scan is reported as an UncoveredSale.

    Lot state is private to this call, so the input transactions are never
    mutated and reruns give identical output.
    """
    result = MatchResult()

    sale_lots = [Lot(t) for t in build_sale_queue(transactions)]
    if not sale_lots:
        return result
    buy_lots = [Lot(t) for t in build_buy_queue(transactions, method)]

    for sale in sale_lots:
        for buy in buy_lots:
            if buy.txn.unix_time > sale.txn.unix_time or not buy.is_open(dust):
                continue

            clip = min(buy.remaining, sale.remaining)
            result.allocations.append(AllocationRecord.from_lots(buy.txn, sale.txn, clip))
            buy.take(clip)
            sale.take(clip)

            if not sale.is_open(dust):
                break

        if sale.is_open(dust):
            logger.warning(
                "%s sale at %s only partly covered: %s of %s has no prior buy lot",
                asset, sale.txn.timestamp, sale.remaining, sale.txn.base_amount,
            )
            result.uncovered.append(UncoveredSale(
                asset=asset,
                sale_date=sale.txn.timestamp,
                sale_unix=sale.txn.unix_time,
                sale_price=sale.txn.price,
                original_amount=sale.txn.base_amount,
                uncovered_amount=sale.remaining,
            ))

    logger.debug(
        "%s: %d buys, %d sales -> %d allocations (%s)",
        asset, len(buy_lots), len(sale_lots), len(result.allocations), method.value,
    )
    return result


def match_all(
    transactions_by_asset: dict[str, list[Transaction]],
    method: AccountingMethod,
    dust: Decimal = DUST_THRESHOLD,
) -> MatchResult:
    """Match every asset independently and merge in asset-name order."""
    result = MatchResult()
    for asset in sorted(transactions_by_asset):
        result.extend(match_asset(asset, transactions_by_asset[asset], method, dust))

    logger.info(
        "Matched %d assets with %s: %d allocations, %d uncovered sales, total gain/loss %.2f",
        len(transactions_by_asset), method.value, len(result.allocations),
        len(result.uncovered), result.total_gain_loss,
    )
    return result
