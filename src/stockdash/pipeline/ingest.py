"""
Price series ingestion: coerces raw OHLCV rows into normalized price points.

Malformed numeric fields never fail a row; they fall back to zero. Rows are kept
in source order, which is assumed to be ascending by date.
"""

import math
from typing import Dict, List, Optional

from loguru import logger

from stockdash.core.errors import InsufficientHistoryError
from stockdash.core.models import PricePoint, StockSeries

MIN_OBSERVATIONS = 2


def parse_decimal(value: Optional[str]) -> Optional[float]:
    """
    Parse a locale-invariant decimal ("." separator, no grouping).

    Returns None for blank, non-numeric or non-finite text.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_volume(value: Optional[str]) -> int:
    """
    Parse a share volume, defaulting to 0 when unparsable.

    Decimal text is truncated toward zero; negative values clamp to 0.
    """
    number = parse_decimal(value)
    if number is None:
        return 0
    try:
        volume = int(str(value).strip())
    except ValueError:
        volume = int(number)
    return max(volume, 0)


def normalize_row(row: Dict[str, str]) -> PricePoint:
    """Convert one raw OHLCV record into a PricePoint."""
    return PricePoint(
        date=str(row.get("Date", "")).strip(),
        open=parse_decimal(row.get("Open")) or 0.0,
        high=parse_decimal(row.get("High")) or 0.0,
        low=parse_decimal(row.get("Low")) or 0.0,
        close=parse_decimal(row.get("Close")) or 0.0,
        volume=parse_volume(row.get("Volume")),
    )


def ingest_price_rows(symbol: str, rows: List[Dict[str, str]]) -> StockSeries:
    """
    Build a StockSeries from raw rows.

    Args:
        symbol: Ticker symbol
        rows: Raw records keyed by header name, in chronological order

    Returns:
        StockSeries preserving input order

    Raises:
        InsufficientHistoryError: If fewer than two rows are present
    """
    if len(rows) < MIN_OBSERVATIONS:
        raise InsufficientHistoryError(
            f"{symbol} has {len(rows)} price rows, need {MIN_OBSERVATIONS}",
            symbol=symbol,
        )

    prices = [normalize_row(row) for row in rows]
    logger.debug(f"Ingested {len(prices)} prices for {symbol}")
    return StockSeries(symbol=symbol, prices=prices)
