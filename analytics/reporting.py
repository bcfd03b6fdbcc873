"""Tabular views and CSV export of matching results."""

from __future__ import annotations

import os

import pandas as pd

from models import AllocationRecord, UncoveredSale

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ALLOCATION_COLUMNS = [
    "Asset Name", "Buy Date", "Buy Date (Unix)", "Sale Date", "Sale Date (Unix)",
    "Purchase Price", "Sale Price", "Amount", "Gain-Loss", "Sell Year",
]

UNCOVERED_COLUMNS = [
    "Asset Name", "Sale Date", "Sale Price", "Sale Amount", "Uncovered Amount",
]


def allocations_frame(records: list[AllocationRecord]) -> pd.DataFrame:
    rows = [{
        "Asset Name": r.asset,
        "Buy Date": r.buy_date,
        "Buy Date (Unix)": r.buy_unix,
        "Sale Date": r.sale_date,
        "Sale Date (Unix)": r.sale_unix,
        "Purchase Price": r.buy_price,
        "Sale Price": r.sale_price,
        "Amount": r.amount,
        "Gain-Loss": r.gain_loss,
        "Sell Year": r.sale_year,
    } for r in records]
    return pd.DataFrame(rows, columns=ALLOCATION_COLUMNS)


def uncovered_frame(uncovered: list[UncoveredSale]) -> pd.DataFrame:
    rows = [{
        "Asset Name": u.asset,
        "Sale Date": u.sale_date,
        "Sale Price": u.sale_price,
        "Sale Amount": u.original_amount,
        "Uncovered Amount": u.uncovered_amount,
    } for u in uncovered]
    return pd.DataFrame(rows, columns=UNCOVERED_COLUMNS)


def allocations_csv(records: list[AllocationRecord]) -> str:
    """Render allocations as CSV text with formatted dates."""
    df = allocations_frame(records)
    for col in ("Buy Date", "Sale Date"):
        df[col] = [d.strftime(DATE_FORMAT) for d in df[col]]
    return df.to_csv(index=False)


def export_allocations_csv(records: list[AllocationRecord], path: str | os.PathLike) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(allocations_csv(records))
