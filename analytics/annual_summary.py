"""Per-asset, per-year realized gain/loss summary."""

from __future__ import annotations

import pandas as pd

from models import AllocationRecord

AnnualSummary = dict[tuple[str, int], float]


def build_annual_summary(records: list[AllocationRecord]) -> AnnualSummary:
    """Sum gain/loss into (asset, sale year) buckets.

    Every observed asset gets an entry for every observed year, zero when it
    had no sales that year.
    """
    assets = sorted({r.asset for r in records})
    years = sorted({r.sale_year for r in records})

    summary: AnnualSummary = {(a, y): 0.0 for a in assets for y in years}
    for r in records:
        summary[(r.asset, r.sale_year)] += r.gain_loss
    return summary


def annual_summary_frame(summary: AnnualSummary) -> pd.DataFrame:
    """Pivot a summary to one row per asset and one column per year, plus Total."""
    if not summary:
        return pd.DataFrame(columns=["Asset Name"])

    df = pd.DataFrame(
        [(asset, year, value) for (asset, year), value in summary.items()],
        columns=["Asset Name", "year", "gain_loss"],
    )
    pivot = df.pivot(index="Asset Name", columns="year", values="gain_loss")
    pivot = pivot.sort_index().reindex(sorted(pivot.columns), axis=1)
    pivot.columns = [str(c) for c in pivot.columns]
    pivot["Total"] = pivot.sum(axis=1)
    return pivot.reset_index()
