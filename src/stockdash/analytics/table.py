"""
Search, filter and sort over the stocks index for the overview table.

Pure functions over StockSummary lists; the input list is never reordered.
"""

from enum import Enum
from typing import Iterable, List, Optional

from stockdash.analytics.formatting import distinct_values
from stockdash.core.models import FilterOptions, StockSummary

# Fields the free-text search looks in
SEARCH_FIELDS = ("symbol", "name", "exchange", "market_category", "industry", "sector")


class SortField(str, Enum):
    """Sortable table columns, named as in the index artifact."""

    SYMBOL = "symbol"
    NAME = "name"
    INDUSTRY = "industry"
    LAST_PRICE = "lastPrice"
    VARIATION_PERCENT = "variationPercent"
    EXCHANGE = "exchange"
    SECTOR = "sector"


SORT_ATTRIBUTES = {
    SortField.SYMBOL: "symbol",
    SortField.NAME: "name",
    SortField.INDUSTRY: "industry",
    SortField.LAST_PRICE: "last_price",
    SortField.VARIATION_PERCENT: "variation_percent",
    SortField.EXCHANGE: "exchange",
    SortField.SECTOR: "sector",
}


def matches_query(stock: StockSummary, query: str) -> bool:
    """Case-insensitive substring match against any searchable field."""
    needle = query.strip().lower()
    if not needle:
        return True
    for field in SEARCH_FIELDS:
        value = getattr(stock, field)
        if value and needle in str(value).lower():
            return True
    return False


def search_stocks(
    stocks: Iterable[StockSummary],
    query: str = "",
    exchange: Optional[str] = None,
    sector: Optional[str] = None,
    industry: Optional[str] = None,
) -> List[StockSummary]:
    """
    Filter the index the way the overview table does.

    The free-text ``query`` is a "contains" match over symbol, name, exchange,
    market category, industry and sector. ``exchange``, ``sector`` and
    ``industry`` are exact-match dropdown filters; None or "" means no filter.

    Args:
        stocks: Index rows
        query: Free-text search
        exchange: Listing exchange code (e.g. "Q")
        sector: Sector name
        industry: Industry name

    Returns:
        Matching rows in their original order
    """
    result = []
    for stock in stocks:
        if exchange and stock.exchange != exchange:
            continue
        if sector and stock.sector != sector:
            continue
        if industry and stock.industry != industry:
            continue
        if not matches_query(stock, query):
            continue
        result.append(stock)
    return result


def sort_stocks(
    stocks: Iterable[StockSummary],
    field: SortField = SortField.SYMBOL,
    descending: bool = False,
) -> List[StockSummary]:
    """
    Sort rows by a table column.

    Text columns compare case-insensitively. Rows with no value for the column
    (unenriched industry or sector) go last in either direction. The sort is
    stable, so ties keep their input order.

    Raises:
        ValueError: If ``field`` is not a sortable column
    """
    attribute = SORT_ATTRIBUTES[SortField(field)]

    def key(stock: StockSummary):
        value = getattr(stock, attribute)
        return value.lower() if isinstance(value, str) else value

    rows = list(stocks)
    present = [s for s in rows if getattr(s, attribute) not in (None, "")]
    missing = [s for s in rows if getattr(s, attribute) in (None, "")]
    return sorted(present, key=key, reverse=descending) + missing


def filter_options(stocks: Iterable[StockSummary]) -> FilterOptions:
    """Dropdown choices: the distinct non-empty exchanges, sectors and industries."""
    rows = list(stocks)
    return FilterOptions(
        exchanges=distinct_values(rows, "exchange"),
        sectors=distinct_values(rows, "sector"),
        industries=distinct_values(rows, "industry"),
    )
