"""
Exception types raised by the pipeline and the dataset cache.
"""

from typing import Optional


class StockDashError(Exception):
    """Base exception for stock dashboard errors."""

    def __init__(self, message: str, symbol: Optional[str] = None):
        super().__init__(message)
        self.symbol = symbol


class MissingInputError(StockDashError):
    """A required source file is absent."""
    pass


class InsufficientHistoryError(StockDashError):
    """Fewer than two observations are available for a symbol."""
    pass


class DegenerateSeriesError(StockDashError):
    """The last two closes cannot produce a variation (non-numeric or zero previous close)."""
    pass


class DataUnavailableError(StockDashError):
    """A served artifact could not be loaded."""
    pass
