"""
Stock index builder.

Joins the master symbol table against each symbol's raw price file, computes the
last-session variation and writes one price artifact per indexed symbol.
"""

from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from stockdash.core import storage
from stockdash.core.errors import DegenerateSeriesError, InsufficientHistoryError
from stockdash.core.models import StocksIndex, StockSummary
from stockdash.pipeline.ingest import ingest_price_rows, parse_decimal

ETF_FLAG = "Y"
PROGRESS_EVERY = 500


class IndexBuildReport(BaseModel):
    """Processed/skipped counters for one index build. Not part of the artifact."""

    eligible: int = Field(default=0, ge=0)
    processed: int = Field(default=0, ge=0)
    skipped: Dict[str, str] = Field(default_factory=dict, description="symbol -> reason")

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def record_skip(self, symbol: str, reason: str) -> None:
        self.skipped[symbol] = reason
        logger.debug(f"Skipped {symbol}: {reason}")


def round_half_away(value: float, places: int = 2) -> float:
    """
    Round to ``places`` decimals, halves away from zero.

    The value is scaled first and the scaled float is rounded, so binary
    representation error in the scaled value is kept (1.005 -> 1.0).
    """
    factor = 10 ** places
    scaled = Decimal(value * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    result = float(scaled) / factor
    if result == 0:
        return 0.0
    return result


def filter_equities(master_rows: List[Dict[str, str]]) -> List[Dict[str, str]]:
    """Drop instruments whose ETF column is exactly "Y"."""
    return [row for row in master_rows if row.get("ETF") != ETF_FLAG]


def _field(row: Dict[str, str], name: str) -> str:
    value = row.get(name)
    return str(value).strip() if value is not None else ""


def build_summary(meta_row: Dict[str, str], rows: List[Dict[str, str]]) -> StockSummary:
    """
    Build the index row for one symbol from its master record and raw price rows.

    Rows must be chronological; the last two closes give lastPrice and previousClose.

    Raises:
        InsufficientHistoryError: If fewer than two rows are present
        DegenerateSeriesError: If a close is non-numeric or previousClose is zero
    """
    symbol = _field(meta_row, "Symbol")
    if len(rows) < 2:
        raise InsufficientHistoryError(
            f"{symbol} has {len(rows)} price rows", symbol=symbol
        )

    last_row, prev_row = rows[-1], rows[-2]
    last_price = parse_decimal(last_row.get("Close"))
    prev_close = parse_decimal(prev_row.get("Close"))

    if last_price is None or prev_close is None:
        raise DegenerateSeriesError(f"{symbol} has a non-numeric close", symbol=symbol)
    if prev_close == 0:
        raise DegenerateSeriesError(f"{symbol} has a zero previous close", symbol=symbol)

    variation = last_price - prev_close
    variation_percent = variation / prev_close * 100

    return StockSummary(
        symbol=symbol,
        name=_field(meta_row, "Security Name") or symbol,
        exchange=_field(meta_row, "Listing Exchange"),
        market_category=_field(meta_row, "Market Category"),
        is_etf=False,
        last_price=round_half_away(last_price),
        last_date=_field(last_row, "Date"),
        variation=round_half_away(variation),
        variation_percent=round_half_away(variation_percent),
    )


def build_stocks_index(
    master_rows: List[Dict[str, str]],
    price_dir: Path,
    prices_out_dir: Optional[Path] = None,
) -> Tuple[StocksIndex, IndexBuildReport]:
    """
    Build the stocks index from the master table and the raw price directory.

    For every indexed symbol the normalized price series is written to
    ``prices_out_dir/<SYMBOL>.json``. Symbol-level problems (missing file, short
    history, degenerate closes, unreadable CSV) skip the symbol and are counted.

    Args:
        master_rows: Raw master metadata records
        price_dir: Directory holding ``<SYMBOL>.csv`` raw price files
        prices_out_dir: Where to write price artifacts; None skips writing

    Returns:
        Tuple of (StocksIndex, IndexBuildReport)
    """
    equities = filter_equities(master_rows)
    logger.info(f"Found {len(equities)} non-ETF stocks")

    index = StocksIndex()
    report = IndexBuildReport(eligible=len(equities))

    for position, meta_row in enumerate(equities):
        symbol = _field(meta_row, "Symbol")
        if not symbol:
            report.record_skip(f"<row {position}>", "missing symbol")
            continue

        price_file = price_dir / f"{symbol}.csv"
        if not price_file.exists():
            report.record_skip(symbol, "missing price file")
            continue

        try:
            rows = storage.read_price_rows(price_file)
            summary = build_summary(meta_row, rows)
            series = ingest_price_rows(symbol, rows)
        except (InsufficientHistoryError, DegenerateSeriesError) as e:
            report.record_skip(symbol, str(e))
            continue
        except (OSError, ValueError) as e:
            logger.error(f"Error processing {symbol}: {e}")
            report.record_skip(symbol, f"error: {e}")
            continue

        index.stocks.append(summary)
        if prices_out_dir is not None:
            storage.save_series(series, prices_out_dir)

        report.processed += 1
        if report.processed % PROGRESS_EVERY == 0:
            logger.info(f"Processed {report.processed} stocks...")

    logger.info(f"Processed: {report.processed} stocks, skipped: {report.skipped_count}")
    return index, report
