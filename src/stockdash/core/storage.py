"""
Storage module for reading raw CSV inputs and persisting JSON artifacts.
Raw CSVs are read with pandas; artifacts are written as plain JSON files.
"""

import json
from pathlib import Path
from typing import Dict, List

import pandas as pd
from loguru import logger

from .errors import MissingInputError
from .models import StockSeries, StocksIndex


def read_csv_records(path: Path) -> List[Dict[str, str]]:
    """
    Read a header-driven CSV file into a list of raw string records.

    Headers are matched by name (trimmed), never by position. Every value is kept
    as text; empty cells become "" rather than NaN.

    Args:
        path: CSV file to read

    Returns:
        One dict per data row, keyed by header name

    Raises:
        MissingInputError: If the file does not exist
    """
    if not path.exists():
        raise MissingInputError(f"Input file not found: {path}")

    try:
        df = pd.read_csv(
            path,
            dtype=str,
            index_col=False,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Empty CSV file: {path}")
        return []

    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict("records")


def read_master_metadata(path: Path) -> List[Dict[str, str]]:
    """
    Load the master symbol table (Symbol, Security Name, Listing Exchange,
    Market Category, ETF).
    """
    rows = read_csv_records(path)
    logger.info(f"Loaded {len(rows)} symbols from {path}")
    return rows


def read_price_rows(path: Path) -> List[Dict[str, str]]:
    """
    Load one symbol's raw OHLCV rows (Date, Open, High, Low, Close, Adj Close, Volume).
    """
    rows = read_csv_records(path)
    logger.debug(f"Loaded {len(rows)} price rows from {path}")
    return rows


def series_path(prices_dir: Path, symbol: str) -> Path:
    """Path of the per-symbol price artifact."""
    return prices_dir / f"{symbol}.json"


def save_series(series: StockSeries, prices_dir: Path) -> Path:
    """
    Write a price series artifact as compact JSON.

    Args:
        series: StockSeries to write
        prices_dir: Directory holding the per-symbol artifacts

    Returns:
        Path to the saved file
    """
    prices_dir.mkdir(parents=True, exist_ok=True)
    filepath = series_path(prices_dir, series.symbol)
    payload = json.dumps(
        series.to_json_dict(), ensure_ascii=False, separators=(",", ":")
    )
    filepath.write_text(payload, encoding="utf-8")
    return filepath


def load_series(symbol: str, prices_dir: Path) -> StockSeries:
    """
    Load a price series artifact.

    Raises:
        MissingInputError: If no artifact exists for the symbol
    """
    filepath = series_path(prices_dir, symbol)
    if not filepath.exists():
        raise MissingInputError(f"No price file for {symbol} at {filepath}", symbol=symbol)

    data = json.loads(filepath.read_text(encoding="utf-8"))
    series = StockSeries.model_validate(data)
    logger.debug(f"Loaded {len(series.prices)} prices for {symbol} from {filepath}")
    return series


def save_index(index: StocksIndex, path: Path) -> Path:
    """
    Write the stocks index artifact with two-space indentation.

    Output is deterministic for a given index, so rewriting an unchanged index
    yields identical bytes.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(index.to_json_dict(), ensure_ascii=False, indent=2)
    path.write_text(payload, encoding="utf-8")
    logger.info(f"Saved {len(index.stocks)} stocks to {path}")
    return path


def load_index(path: Path) -> StocksIndex:
    """
    Load the stocks index artifact.

    Raises:
        MissingInputError: If the index has not been built yet
    """
    if not path.exists():
        raise MissingInputError(f"Stocks index not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    index = StocksIndex.model_validate(data)
    logger.debug(f"Loaded {len(index.stocks)} stocks from {path}")
    return index
