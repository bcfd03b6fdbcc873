"""CryptoTax: realized gain/loss by tax lot."""

from __future__ import annotations

import os
import tempfile

import plotly.express as px
import streamlit as st

from analytics.annual_summary import annual_summary_frame, build_annual_summary
from analytics.reporting import allocations_csv, allocations_frame, uncovered_frame
from analytics.trade_matcher import match_all
from config import CONFIG_PATH, AppConfig, load_config_or_default, split_markers
from models import AccountingMethod
from parsers.base import TransactionParseError
from parsers.parser_csv import import_transactions

st.set_page_config(
    page_title="CryptoTax",
    page_icon="🧾",
    layout="wide",
)

st.title("CryptoTax")
st.caption("Realized gain/loss by tax lot.")


# Re-read on every rerun so edits to the INI file show up
base, config_error = load_config_or_default(CONFIG_PATH)
if config_error:
    st.warning(config_error)

# ── Sidebar settings ──────────────────────────────────────────────────────
methods = [m.value for m in AccountingMethod]
method = AccountingMethod(st.sidebar.selectbox(
    "Accounting Method", methods, index=methods.index(base.accounting_method.value),
))
buys = st.sidebar.text_input("Buy categories (comma-separated)", ", ".join(base.buy_markers))
sells = st.sidebar.text_input("Sell categories (comma-separated)", ", ".join(base.sell_markers))

config = AppConfig(
    accounting_method=method,
    csv_columns=base.csv_columns,
    buy_markers=split_markers(buys),
    sell_markers=split_markers(sells),
)

# ── Ledger upload ─────────────────────────────────────────────────────────
uploaded = st.file_uploader("Transaction ledger (CSV)", type=["csv"])
if not uploaded:
    st.info("Upload a CSV ledger to compute gains and losses.")
    st.stop()

with tempfile.NamedTemporaryFile(suffix=".csv", delete=False) as tmp:
    tmp.write(uploaded.getvalue())
    tmp_path = tmp.name

try:
    with st.spinner("Matching lots..."):
        transactions = import_transactions(tmp_path, config)
        result = match_all(transactions, method)
except TransactionParseError as e:
    st.error(f"Could not import '{uploaded.name}': {e}")
    st.stop()
finally:
    os.unlink(tmp_path)

# ── KPIs ──────────────────────────────────────────────────────────────────
col1, col2, col3, col4 = st.columns(4)
col1.metric("Total Gain/Loss", f"${result.total_gain_loss:,.2f}")
col2.metric("Allocations", len(result.allocations))
col3.metric("Assets", len(transactions))
col4.metric("Uncovered Sales", len(result.uncovered))

if result.uncovered:
    st.warning(
        f"{len(result.uncovered)} sale(s) could not be fully matched to earlier buys. "
        "The ledger may be missing purchases."
    )
    st.dataframe(uncovered_frame(result.uncovered), use_container_width=True)

st.divider()

# ── Annual summary ────────────────────────────────────────────────────────
st.subheader("Annual Summary")
summary = build_annual_summary(result.allocations)
if summary:
    summary_df = annual_summary_frame(summary)
    value_cols = [c for c in summary_df.columns if c != "Asset Name"]
    st.dataframe(
        summary_df.style.format({c: "${:,.2f}" for c in value_cols}),
        use_container_width=True,
    )

    long_df = summary_df.melt(
        id_vars="Asset Name",
        value_vars=[c for c in value_cols if c != "Total"],
        var_name="Year", value_name="Gain/Loss",
    )
    fig = px.bar(long_df, x="Year", y="Gain/Loss", color="Asset Name", barmode="group")
    fig.update_layout(yaxis_title="Gain/Loss ($)", height=400)
    st.plotly_chart(fig, use_container_width=True)
else:
    st.info("No sales in this ledger.")

# ── Allocations ───────────────────────────────────────────────────────────
st.subheader(f"Sale Events ({method.value})")
st.dataframe(
    allocations_frame(result.allocations).style.format({
        "Purchase Price": "${:,.4f}",
        "Sale Price": "${:,.4f}",
        "Gain-Loss": "${:,.2f}",
    }),
    use_container_width=True, height=500,
)

st.download_button(
    "Download CSV",
    data=allocations_csv(result.allocations),
    file_name=f"sale_events_{method.value.lower()}.csv",
    mime="text/csv",
)
