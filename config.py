"""Constants, accounting defaults and INI config loading."""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from models import AccountingMethod

load_dotenv()

logger = logging.getLogger(__name__)

# Path to the INI config used by the CLI and dashboard when none is given
CONFIG_PATH = os.environ.get("CRYPTOTAX_CONFIG", "config.ini")
LOG_LEVEL = os.environ.get("CRYPTOTAX_LOG_LEVEL", "INFO")

# Remaining quantities below this are treated as fully consumed
DUST_THRESHOLD = Decimal("0.00001")

# Tried in order when parsing ledger timestamps
TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)

# Canonical ledger columns, after header remapping
CSV_COLUMNS = (
    "timestamp",
    "txn_type",
    "base_asset",
    "base_asset_amount",
    "quote_asset",
    "quote_asset_amount",
)

DEFAULT_ACCOUNTING_METHOD = AccountingMethod.LIFO

DEFAULT_BUY_MARKERS = ["Buy", "BUY"]
DEFAULT_SELL_MARKERS = ["Sell", "SELL"]

KNOWN_SECTIONS = {
    "accounting_type", "file_info", "csv_columns", "buy_txn_types", "sell_txn_types",
}


class ConfigError(ValueError):
    """Raised when the INI config cannot be loaded or is incomplete."""


@dataclass
class AppConfig:
    """Typed view of the INI config."""
    accounting_method: AccountingMethod = DEFAULT_ACCOUNTING_METHOD
    filepath: Optional[Path] = None
    csv_columns: dict[str, str] = field(default_factory=dict)  # source header -> canonical
    buy_markers: list[str] = field(default_factory=lambda: list(DEFAULT_BUY_MARKERS))
    sell_markers: list[str] = field(default_factory=lambda: list(DEFAULT_SELL_MARKERS))


def split_markers(value: str) -> list[str]:
    """Split a comma-separated marker list, dropping blanks."""
    return [s.strip() for s in value.split(",") if s.strip()]


def load_config(path: str | os.PathLike) -> AppConfig:
    """Load an INI config file into an AppConfig."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    # Keep key case: csv_columns values are matched against real headers
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        raise ConfigError(f"Could not parse config file {path}: {e}") from e

    config = AppConfig()

    for section in parser.sections():
        if section not in KNOWN_SECTIONS:
            logger.warning("Ignoring unknown config section [%s] in %s", section, path)

    if parser.has_section("accounting_type"):
        raw = parser["accounting_type"].get("accounting_type", "").strip()
        try:
            config.accounting_method = AccountingMethod.parse(raw)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    if parser.has_section("file_info"):
        dir_ = parser["file_info"].get("dir", "").strip()
        filename = parser["file_info"].get("filename", "").strip()
        if not dir_ or not filename:
            raise ConfigError("[file_info] needs both 'dir' and 'filename'")
        # Relative dirs resolve from the config file, not the working directory
        filepath = Path(dir_) / filename
        if not filepath.is_absolute():
            filepath = path.parent / filepath
        config.filepath = filepath

    if parser.has_section("csv_columns"):
        config.csv_columns = {
            source.strip(): canonical
            for canonical, source in parser["csv_columns"].items()
        }

    if parser.has_section("buy_txn_types"):
        config.buy_markers = split_markers(parser["buy_txn_types"].get("buys", ""))

    if parser.has_section("sell_txn_types"):
        config.sell_markers = split_markers(parser["sell_txn_types"].get("sells", ""))

    logger.debug(
        "Loaded config %s: method=%s, buys=%s, sells=%s",
        path, config.accounting_method.value, config.buy_markers, config.sell_markers,
    )
    return config


def load_config_or_default(path: str | os.PathLike) -> tuple[AppConfig, Optional[str]]:
    """Load path if it exists, else defaults. Returns (config, error message)."""
    if not os.path.isfile(path):
        return AppConfig(), None
    try:
        return load_config(path), None
    except ConfigError as e:
        return AppConfig(), f"Could not load {path}: {e}"
