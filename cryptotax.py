"""Realized gain/loss report from a transaction ledger.

Usage:
    python cryptotax.py config.ini                   # Allocations table + total
    python cryptotax.py config.ini --method HIFO     # Override the configured method
    python cryptotax.py config.ini --summary         # Add the per-year summary
    python cryptotax.py config.ini --export out.csv  # Also write allocations to CSV
"""

from __future__ import annotations

import argparse
import logging
import sys

import pandas as pd

from analytics.annual_summary import annual_summary_frame, build_annual_summary
from analytics.reporting import allocations_frame, export_allocations_csv, uncovered_frame
from analytics.trade_matcher import match_all
from config import CONFIG_PATH, LOG_LEVEL, ConfigError, load_config
from models import AccountingMethod, MatchResult
from parsers.base import TransactionParseError
from parsers.parser_csv import import_transactions

logger = logging.getLogger("cryptotax")


def run(config_path: str, method: AccountingMethod | None = None) -> MatchResult:
    """Load config and ledger, then match every asset."""
    config = load_config(config_path)
    if config.filepath is None:
        raise ConfigError(f"{config_path} has no [file_info] section pointing at a ledger")
    if not config.filepath.is_file():
        raise ConfigError(f"Ledger file not found: {config.filepath}")

    method = method or config.accounting_method
    logger.info("Processing %s with %s", config.filepath, method.value)

    transactions = import_transactions(config.filepath, config)
    return match_all(transactions, method)


def print_report(result: MatchResult, summary: bool = False) -> None:
    with pd.option_context("display.max_rows", None, "display.width", 200):
        if result.allocations:
            print(allocations_frame(result.allocations).to_string(index=False))
        else:
            print("No sale events.")

        print(f"\nTotal gain/loss: {result.total_gain_loss:,.2f}")

        if summary and result.allocations:
            print("\nAnnual summary:")
            frame = annual_summary_frame(build_annual_summary(result.allocations))
            print(frame.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))

        if result.uncovered:
            print(f"\n{len(result.uncovered)} sale(s) not fully covered by prior buys:")
            print(uncovered_frame(result.uncovered).to_string(index=False))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Realized gain/loss from a transaction ledger")
    parser.add_argument("config", nargs="?", default=CONFIG_PATH,
                        help=f"INI config file (default: {CONFIG_PATH}); a relative "
                             "[file_info] dir is resolved from the config file's directory")
    parser.add_argument("--method", type=AccountingMethod.parse,
                        help="Override accounting method: FIFO, LIFO or HIFO")
    parser.add_argument("--summary", action="store_true",
                        help="Print gain/loss per asset per year")
    parser.add_argument("--export", metavar="PATH",
                        help="Write allocations to a CSV file")
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        help=f"Logging level (default: {LOG_LEVEL})")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        result = run(args.config, args.method)
    except (ConfigError, TransactionParseError) as e:
        logger.error("%s", e)
        return 1

    print_report(result, summary=args.summary)

    if args.export:
        export_allocations_csv(result.allocations, args.export)
        logger.info("Wrote %d allocations to %s", len(result.allocations), args.export)

    return 0


if __name__ == "__main__":
    sys.exit(main())
