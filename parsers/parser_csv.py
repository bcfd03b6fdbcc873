"""Parser for exchange transaction-history CSV exports."""

from __future__ import annotations

import logging
import os
from collections import defaultdict

import pandas as pd

from analytics.categorizer import classify_txn_type
from config import CSV_COLUMNS, AppConfig
from models import InvalidTransactionError, Transaction
from parsers.base import TransactionParseError, parse_quantity, parse_timestamp

logger = logging.getLogger(__name__)


def remap_headers(columns: list[str], mapping: dict[str, str]) -> list[str]:
    """Rename headers found in mapping (source -> canonical), keep the rest."""
    return [mapping.get(col, col) for col in columns]


def read_ledger(path: str | os.PathLike, csv_columns: dict[str, str] | None = None) -> pd.DataFrame:
    """Read a ledger CSV as strings with canonical column names."""
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError as e:
        raise TransactionParseError(f"Ledger {path} is empty") from e
    except pd.errors.ParserError as e:
        raise TransactionParseError(f"Could not read ledger {path}: {e}") from e
    df.columns = remap_headers([c.strip() for c in df.columns], csv_columns or {})

    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise TransactionParseError(
            f"Ledger {path} is missing columns: {', '.join(missing)} "
            f"(found: {', '.join(df.columns)})"
        )
    df = df[list(CSV_COLUMNS)].copy()
    for col in CSV_COLUMNS:
        df[col] = df[col].map(str.strip)
    return df


def _row_to_transaction(row: dict, config: AppConfig) -> Transaction:
    return Transaction(
        timestamp=parse_timestamp(row["timestamp"]),
        txn_type=classify_txn_type(row["txn_type"], config.buy_markers, config.sell_markers),
        raw_type=row["txn_type"],
        base_asset=row["base_asset"],
        base_amount=parse_quantity(row["base_asset_amount"]),
        quote_asset=row["quote_asset"],
        quote_amount=parse_quantity(row["quote_asset_amount"]),
    )


def import_transactions(path: str | os.PathLike, config: AppConfig) -> dict[str, list[Transaction]]:
    """Import a ledger CSV and group its transactions by base asset.

    Transactions keep file order within each asset. Raises
    TransactionParseError naming the first bad data row (1-based).
    """
    df = read_ledger(path, config.csv_columns)

    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for i, row in enumerate(df.to_dict("records"), start=1):
        try:
            txn = _row_to_transaction(row, config)
        except (TransactionParseError, InvalidTransactionError) as e:
            raise TransactionParseError(str(e), row=i) from e
        grouped[txn.base_asset].append(txn)

    logger.info("Imported %d transactions for %d assets from %s", len(df), len(grouped), path)
    return dict(grouped)
