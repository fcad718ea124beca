"""
Unit tests for display formatting helpers.
"""

import pytest

from stockdash.analytics.formatting import (
    category_label,
    distinct_values,
    exchange_label,
    format_market_cap,
    format_volume,
)


@pytest.mark.parametrize(
    "code,label",
    [("Q", "NASDAQ"), ("N", "NYSE"), ("A", "AMEX"), ("P", "ARCA"), ("Z", "Z"), ("", "N/A")],
)
def test_exchange_label(code, label):
    """Test exchange codes map to names with a raw fallback."""
    assert exchange_label(code) == label


@pytest.mark.parametrize(
    "code,label",
    [("Q", "Global Select"), ("G", "Global Market"), ("S", "Capital Market"), ("", "N/A")],
)
def test_category_label(code, label):
    """Test market category codes map to names."""
    assert category_label(code) == label


@pytest.mark.parametrize(
    "volume,text",
    [(None, "—"), (999, "999"), (1500, "1.50K"), (2_345_678, "2.35M"), (3_000_000_000, "3.00B")],
)
def test_format_volume(volume, text):
    """Test volume suffixes."""
    assert format_volume(volume) == text


@pytest.mark.parametrize(
    "cap,text",
    [(None, "—"), (0, "—"), (2.5e12, "$2.50T"), (4.2e9, "$4.20B"), (7.5e6, "$7.50M"), (12345, "$12,345")],
)
def test_format_market_cap(cap, text):
    """Test market cap suffixes."""
    assert format_market_cap(cap) == text


def test_distinct_values(sample_summary):
    """Test distinct values skip blanks and absent fields."""
    other = sample_summary.model_copy(update={"exchange": "N", "sector": "Energy"})
    blank = sample_summary.model_copy(update={"exchange": ""})
    stocks = [sample_summary, other, blank, other]
    assert distinct_values(stocks, "exchange") == ["N", "Q"]
    assert distinct_values(stocks, "sector") == ["Energy"]
