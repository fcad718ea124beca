"""
Pytest fixtures for testing the stock dashboard pipeline.
"""

from datetime import date, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stockdash.core.config import Settings
from stockdash.core.models import PricePoint, StockSeries, StockSummary

PRICE_HEADER = "Date,Open,High,Low,Close,Adj Close,Volume"


def write_price_csv(path: Path, closes, start=date(2020, 1, 1), volume=1000):
    """Write a raw OHLCV file with one row per close, one calendar day apart."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [PRICE_HEADER]
    for i, close in enumerate(closes):
        day = (start + timedelta(days=i)).isoformat()
        lines.append(f"{day},{close},{close},{close},{close},{close},{volume}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def make_series(count, symbol="TEST", start=date(2020, 1, 1), step_days=1):
    """Build a StockSeries with rising prices and volumes."""
    prices = [
        PricePoint(
            date=(start + timedelta(days=i * step_days)).isoformat(),
            open=100.0 + i,
            high=101.0 + i,
            low=99.0 + i,
            close=100.5 + i,
            volume=1000 + i,
        )
        for i in range(count)
    ]
    return StockSeries(symbol=symbol, prices=prices)


@pytest.fixture
def sample_summary():
    """Create a sample StockSummary for testing."""
    return StockSummary(
        symbol="AAPL",
        name="Apple Inc. - Common Stock",
        exchange="Q",
        market_category="Q",
        last_price=105.0,
        last_date="2020-04-01",
        variation=5.0,
        variation_percent=5.0,
    )


@pytest.fixture
def dataset(tmp_path):
    """
    Lay out raw inputs under tmp_path and return Settings pointing at them.

    Symbols: AAPL (indexed), MSFT (indexed, falling), SPY (ETF), ONE (1 row),
    ZERO (previous close 0), GONE (no price file).
    """
    data_dir = tmp_path / "data"
    source = data_dir / "nasdaq_stock_prices"
    stocks = source / "stocks"
    source.mkdir(parents=True)

    (source / "symbols_valid_meta.csv").write_text(
        "Symbol,Security Name,Listing Exchange,Market Category,ETF\n"
        "AAPL,Apple Inc. - Common Stock,Q,Q,N\n"
        "MSFT, Microsoft Corporation ,Q,Q,N\n"
        "SPY,SPDR S&P 500,P, ,Y\n"
        "ONE,One Row Corp,N, ,N\n"
        "ZERO,Zero Close Inc,N, ,N\n"
        "GONE,Missing File Ltd,A, ,N\n",
        encoding="utf-8",
    )
    write_price_csv(stocks / "AAPL.csv", [98.0, 100.0, 105.0])
    write_price_csv(stocks / "MSFT.csv", [200.0, 190.0])
    write_price_csv(stocks / "SPY.csv", [300.0, 301.0])
    write_price_csv(stocks / "ONE.csv", [10.0])
    write_price_csv(stocks / "ZERO.csv", [5.0, 0.0, 1.0])

    metadata_dir = data_dir / "metadata"
    (metadata_dir / "logos").mkdir(parents=True)
    (metadata_dir / "companies.csv").write_text(
        "ticker,name,short_name,industry,description,website,logo,ceo,exchange,market_cap,sector,tag1,tag2,tag3\n"
        'aapl,Apple Inc.,Apple,Consumer Electronics,"Designs phones, tablets and computers",'
        "https://apple.com,aapl.png,Tim Cook,NASDAQ,2500000000000,Technology,Phones,Software,Services\n"
        "NVDA,NVIDIA,NVIDIA,Semiconductors,GPUs,https://nvidia.com,nvda.png,Jensen Huang,NASDAQ,n/a,Technology,,,\n",
        encoding="utf-8",
    )
    (metadata_dir / "logos" / "aapl.png").write_bytes(b"\x89PNG-aapl")

    return Settings(
        DATA_DIR=data_dir,
        OUTPUT_DIR=tmp_path / "public" / "data",
        LOGOS_DEST_DIR=tmp_path / "public" / "logos",
    )


@pytest.fixture
def built_dataset(dataset):
    """Dataset with preprocess and merge already run."""
    from stockdash.pipeline.runner import run_merge, run_preprocess

    run_preprocess(dataset)
    run_merge(dataset)
    return dataset


@pytest.fixture
def test_client(built_dataset):
    """Create a test client for the FastAPI app backed by the built dataset."""
    from stockdash.app.api import app, get_cache
    from stockdash.app.cache import StockDataCache

    cache = StockDataCache(built_dataset.output_dir, built_dataset.logos_dest_dir)
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def empty_client(tmp_path):
    """Test client whose dataset directory holds no artifacts."""
    from stockdash.app.api import app, get_cache
    from stockdash.app.cache import StockDataCache

    cache = StockDataCache(tmp_path / "missing", tmp_path / "logos")
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()
