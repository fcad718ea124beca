"""
Display helpers for exchange codes, volumes and market capitalization.
"""

from typing import Iterable, List, Optional

from stockdash.core.models import StockSummary

EXCHANGE_LABELS = {
    "Q": "NASDAQ",
    "N": "NYSE",
    "A": "AMEX",
    "P": "ARCA",
}

CATEGORY_LABELS = {
    "Q": "Global Select",
    "G": "Global Market",
    "S": "Capital Market",
}

MISSING = "—"


def exchange_label(exchange: str) -> str:
    """Human name of a listing exchange code."""
    return EXCHANGE_LABELS.get(exchange, exchange or "N/A")


def category_label(category: str) -> str:
    """Human name of a NASDAQ market category code."""
    return CATEGORY_LABELS.get(category, category or "N/A")


def format_volume(volume: Optional[float]) -> str:
    """Format a share volume with a B/M/K suffix."""
    if volume is None:
        return MISSING
    if volume >= 1_000_000_000:
        return f"{volume / 1_000_000_000:.2f}B"
    if volume >= 1_000_000:
        return f"{volume / 1_000_000:.2f}M"
    if volume >= 1_000:
        return f"{volume / 1_000:.2f}K"
    return str(volume)


def format_market_cap(market_cap: Optional[float]) -> str:
    """Format a market capitalization in dollars with a T/B/M suffix."""
    if not market_cap:
        return MISSING
    if market_cap >= 1_000_000_000_000:
        return f"${market_cap / 1_000_000_000_000:.2f}T"
    if market_cap >= 1_000_000_000:
        return f"${market_cap / 1_000_000_000:.2f}B"
    if market_cap >= 1_000_000:
        return f"${market_cap / 1_000_000:.2f}M"
    return f"${market_cap:,.0f}"


def distinct_values(stocks: Iterable[StockSummary], field: str) -> List[str]:
    """Sorted non-empty values of a summary field (exchange, sector, industry)."""
    values = {getattr(stock, field) for stock in stocks}
    return sorted(v for v in values if v)
