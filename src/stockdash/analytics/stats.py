"""
Display-time statistics over a price series.

All functions are pure: they never mutate the series they are given and read no
shared state, so they are safe to call repeatedly on cached artifacts. Series are
assumed to be in ascending date order, as written by the pipeline.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from stockdash.core.models import (
    MarketBreadth,
    PricePoint,
    SeriesStatistics,
    StockSeries,
    StockSummary,
)

# Sessions approximating one trading year
TRADING_YEAR_SESSIONS = 252
# Sessions in the average-volume window
VOLUME_AVERAGE_SESSIONS = 30
# Point budget for the unfiltered chart
CHART_MAX_POINTS = 500


class TimeRange(str, Enum):
    """Chart time ranges."""

    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    ALL = "ALL"


RANGE_OFFSETS = {
    TimeRange.ONE_MONTH: pd.DateOffset(months=1),
    TimeRange.THREE_MONTHS: pd.DateOffset(months=3),
    TimeRange.SIX_MONTHS: pd.DateOffset(months=6),
    TimeRange.ONE_YEAR: pd.DateOffset(years=1),
}


def latest_price(prices: Sequence[PricePoint]) -> Optional[PricePoint]:
    """Most recent observation, or None for an empty series."""
    return prices[-1] if prices else None


def fifty_two_week_high(
    prices: Sequence[PricePoint], window: int = TRADING_YEAR_SESSIONS
) -> Optional[float]:
    """Highest ``high`` over the trailing window; None when there is no data."""
    year = prices[-window:]
    if not year:
        return None
    return max(p.high for p in year)


def fifty_two_week_low(
    prices: Sequence[PricePoint], window: int = TRADING_YEAR_SESSIONS
) -> Optional[float]:
    """Lowest ``low`` over the trailing window; None when there is no data."""
    year = prices[-window:]
    if not year:
        return None
    return min(p.low for p in year)


def average_volume(
    prices: Sequence[PricePoint], window: int = VOLUME_AVERAGE_SESSIONS
) -> Optional[int]:
    """Mean volume over the trailing window, rounded half up; None when empty."""
    recent = prices[-window:]
    if not recent:
        return None
    total = sum(p.volume for p in recent)
    mean = Decimal(total) / Decimal(len(recent))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def downsample(
    prices: Sequence[PricePoint], max_points: int = CHART_MAX_POINTS
) -> List[PricePoint]:
    """
    Thin a series to at most ``max_points`` with a fixed stride.

    The stride is ceil(n / max_points) and is counted back from the last point,
    so the most recent observation is always kept.
    """
    count = len(prices)
    if count <= max_points:
        return list(prices)

    step = math.ceil(count / max_points)
    last = count - 1
    return [p for i, p in enumerate(prices) if (last - i) % step == 0]


def filter_by_range(
    prices: Sequence[PricePoint],
    time_range: Union[TimeRange, str] = TimeRange.ALL,
    max_points: int = CHART_MAX_POINTS,
) -> List[PricePoint]:
    """
    Select the points to chart for a time range.

    For 1M/3M/6M/1Y the cutoff is the last observation's date minus the calendar
    interval (month ends clamp, e.g. Mar 31 - 1M = Feb 29); points on or after the
    cutoff are kept. ALL keeps every date and downsamples long series.
    """
    time_range = TimeRange(time_range)
    if time_range is TimeRange.ALL or not prices:
        return downsample(prices, max_points)

    dates = pd.to_datetime(
        pd.Series([p.date for p in prices]), errors="coerce", format="ISO8601"
    )
    last_date = dates.iloc[-1]
    if pd.isna(last_date):
        return []

    cutoff = last_date - RANGE_OFFSETS[time_range]
    keep = (dates >= cutoff).tolist()
    return [p for p, selected in zip(prices, keep) if selected]


def summarize_series(
    series: StockSeries, time_range: Union[TimeRange, str] = TimeRange.ONE_YEAR
) -> SeriesStatistics:
    """Bundle the detail-view statistics and chart points for one symbol."""
    time_range = TimeRange(time_range)
    prices = series.prices
    return SeriesStatistics(
        symbol=series.symbol,
        range=time_range.value,
        trading_days=len(prices),
        latest=latest_price(prices),
        fifty_two_week_high=fifty_two_week_high(prices),
        fifty_two_week_low=fifty_two_week_low(prices),
        average_volume=average_volume(prices),
        points=filter_by_range(prices, time_range),
    )


def market_breadth(stocks: Iterable[StockSummary]) -> MarketBreadth:
    """Count gainers, losers and unchanged symbols by variationPercent sign."""
    breadth = MarketBreadth()
    for stock in stocks:
        if stock.variation_percent > 0:
            breadth.gainers += 1
        elif stock.variation_percent < 0:
            breadth.losers += 1
        else:
            breadth.unchanged += 1
        breadth.total += 1
    return breadth
