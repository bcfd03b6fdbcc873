"""End-to-end tests: fixture config + ledger through the CLI."""

from __future__ import annotations

import shutil
from pathlib import Path

import pandas as pd
import pytest

import cryptotax
from analytics.annual_summary import build_annual_summary
from models import AccountingMethod

FIXTURES = Path(__file__).parent / "fixtures"
CONFIG = str(FIXTURES / "config.ini")

# BTC: buys at 100/300/200, sell 1 @ 250, buy @ 50, sell 1.5 @ 150 (2022)
# ETH: buy 2 @ 2000, sell 1 @ 1500, sell 2 @ 1600 (one unit uncovered)
EXPECTED_TOTALS = {
    AccountingMethod.FIFO: -925.0,
    AccountingMethod.LIFO: -825.0,
    AccountingMethod.HIFO: -975.0,
}


class TestRun:
    @pytest.mark.parametrize("method, expected", list(EXPECTED_TOTALS.items()))
    def test_totals_per_method(self, method, expected):
        result = cryptotax.run(CONFIG, method)
        assert round(result.total_gain_loss, 2) == expected

    def test_config_method_used_by_default(self):
        result = cryptotax.run(CONFIG)
        assert round(result.total_gain_loss, 2) == EXPECTED_TOTALS[AccountingMethod.FIFO]

    def test_uncovered_eth_sale(self):
        result = cryptotax.run(CONFIG, AccountingMethod.HIFO)
        (unc,) = result.uncovered
        assert unc.asset == "ETH"
        assert unc.sale_date.month == 8
        assert str(unc.uncovered_amount) == "1"

    def test_annual_summary_fifo(self):
        result = cryptotax.run(CONFIG, AccountingMethod.FIFO)
        summary = build_annual_summary(result.allocations)
        assert summary == {
            ("BTC", 2021): pytest.approx(150.0),
            ("BTC", 2022): pytest.approx(-175.0),
            ("ETH", 2021): pytest.approx(-900.0),
            ("ETH", 2022): 0.0,
        }

    def test_missing_file_info(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[accounting_type]\naccounting_type = FIFO\n")
        with pytest.raises(cryptotax.ConfigError, match="file_info"):
            cryptotax.run(str(path))


class TestMain:
    def test_prints_report(self, capsys):
        assert cryptotax.main([CONFIG, "--summary"]) == 0
        out = capsys.readouterr().out
        assert "Total gain/loss: -925.00" in out
        assert "Annual summary:" in out
        assert "not fully covered" in out

    def test_method_override(self, capsys):
        assert cryptotax.main([CONFIG, "--method", "lifo"]) == 0
        assert "Total gain/loss: -825.00" in capsys.readouterr().out

    def test_export(self, tmp_path):
        out_path = tmp_path / "events.csv"
        assert cryptotax.main([CONFIG, "--export", str(out_path)]) == 0
        df = pd.read_csv(out_path)
        assert len(df) == 5
        assert df["Gain-Loss"].sum() == pytest.approx(-925.0)
        assert df["Buy Date"].iloc[0] == "2021-01-01 10:00:00"

    def test_bad_ledger_returns_error(self, tmp_path):
        shutil.copy(FIXTURES / "config.ini", tmp_path / "config.ini")
        (tmp_path / "ledger.csv").write_text(
            "Date,Type,Asset,Amount,Quote,Total\nnot-a-date,Buy,BTC,1,USD,100\n"
        )
        assert cryptotax.main([str(tmp_path / "config.ini")]) == 1

    def test_missing_config_returns_error(self, tmp_path):
        assert cryptotax.main([str(tmp_path / "missing.ini")]) == 1

    def test_missing_ledger_returns_error(self, tmp_path, caplog):
        path = tmp_path / "config.ini"
        path.write_text("[file_info]\ndir = .\nfilename = nope.csv\n")
        assert cryptotax.main([str(path)]) == 1
        assert "Ledger file not found" in caplog.text

    def test_ragged_ledger_returns_error(self, tmp_path):
        shutil.copy(FIXTURES / "config.ini", tmp_path / "config.ini")
        (tmp_path / "ledger.csv").write_text(
            "Date,Type,Asset,Amount,Quote,Total\n"
            "2021-01-01,Buy,BTC,1,USD,100\n2021-01-02,Sell,BTC,1,USD,120,extra\n"
        )
        assert cryptotax.main([str(tmp_path / "config.ini")]) == 1
