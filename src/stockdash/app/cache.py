"""
Read-through cache over the served artifact directory.

The index and each symbol's series are loaded on first use and kept until
``invalidate()`` is called; nothing refreshes them implicitly.
"""

from pathlib import Path
from typing import Dict, Optional

from loguru import logger

from stockdash.core import storage
from stockdash.core.errors import DataUnavailableError, MissingInputError
from stockdash.core.models import StockSeries, StocksIndex, StockSummary


class StockDataCache:
    """
    Holds the stocks index and per-symbol series for one dataset directory.

    Failed loads raise DataUnavailableError and are not cached, so a later call
    retries the read.
    """

    def __init__(self, data_dir: Path, logos_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir)
        self.logos_dir = Path(logos_dir) if logos_dir is not None else None
        self._index: Optional[StocksIndex] = None
        self._series: Dict[str, StockSeries] = {}

    @property
    def index_path(self) -> Path:
        return self.data_dir / "stocks-index.json"

    @property
    def prices_dir(self) -> Path:
        return self.data_dir / "prices"

    def get_index(self) -> StocksIndex:
        """Return the cached index, loading it on first use."""
        if self._index is None:
            try:
                self._index = storage.load_index(self.index_path)
            except (MissingInputError, OSError, ValueError) as e:
                logger.error(f"Failed to load stocks index: {e}")
                raise DataUnavailableError(f"Stocks index unavailable: {e}") from e
        return self._index

    def get_series(self, symbol: str) -> StockSeries:
        """Return the cached price series for a symbol, loading it on first use."""
        series = self._series.get(symbol)
        if series is None:
            try:
                series = storage.load_series(symbol, self.prices_dir)
            except (MissingInputError, OSError, ValueError) as e:
                logger.error(f"Failed to load prices for {symbol}: {e}")
                raise DataUnavailableError(
                    f"Price history unavailable for {symbol}", symbol=symbol
                ) from e
            self._series[symbol] = series
        return series

    def get_stock(self, symbol: str) -> Optional[StockSummary]:
        """Find a summary in the cached index by exact symbol."""
        for stock in self.get_index().stocks:
            if stock.symbol == symbol:
                return stock
        return None

    def logo_path(self, filename: str) -> Optional[Path]:
        """Path of a served logo file, or None if it does not exist."""
        if self.logos_dir is None:
            return None
        path = self.logos_dir / filename
        return path if path.is_file() else None

    def invalidate(self) -> None:
        """Drop everything so the next access reloads from disk."""
        self._index = None
        self._series.clear()
        logger.info(f"Cache invalidated for {self.data_dir}")
