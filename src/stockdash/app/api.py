"""
FastAPI app serving the dashboard artifacts and display-time statistics.

The static contract mirrors the served files (``/data/stocks-index.json``,
``/data/prices/<SYMBOL>.json``, ``/logos/<filename>``); ``/api`` routes search and sort the
index and compute detail-view statistics over the cached series.
"""

import re
import uuid
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from loguru import logger
from pydantic import BaseModel

from stockdash.analytics.stats import TimeRange, market_breadth, summarize_series
from stockdash.analytics.table import SortField, filter_options, search_stocks, sort_stocks
from stockdash.app.cache import StockDataCache
from stockdash.core.config import settings
from stockdash.core.errors import DataUnavailableError
from stockdash.core.models import StockListing

SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9.$\-]{1,12}$")
LOGO_PATTERN = re.compile(r"^[A-Za-z0-9._\-]+$")


# ============================================================================
# API Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    index_available: bool
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
    symbol: Optional[str] = None


# ============================================================================
# Dependencies
# ============================================================================

_cache: Optional[StockDataCache] = None


def get_cache() -> StockDataCache:
    """Process-wide dataset cache built from settings on first use."""
    global _cache
    if _cache is None:
        _cache = StockDataCache(settings.output_dir, settings.logos_dest_dir)
    return _cache


def _validate_symbol(symbol: str) -> str:
    if not SYMBOL_PATTERN.match(symbol) or ".." in symbol:
        raise HTTPException(status_code=422, detail=f"Invalid symbol: {symbol}")
    return symbol


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Stock Dashboard Data API",
    description="Serves preprocessed stock index and price artifacts with display-time statistics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Propagate or generate an X-Request-ID header."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(DataUnavailableError)
async def data_unavailable_handler(request: Request, exc: DataUnavailableError):
    """Missing artifacts surface as 503 so the client can offer a retry."""
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(detail=f"Data unavailable: {exc}", symbol=exc.symbol).model_dump(),
    )


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Stock Dashboard Data API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(cache: StockDataCache = Depends(get_cache)):
    """Shallow health check: reports whether the index artifact exists."""
    index_ok = cache.index_path.exists()
    return HealthResponse(
        status="healthy" if index_ok else "degraded",
        index_available=index_ok,
        timestamp=datetime.utcnow(),
    )


@app.get(
    "/data/stocks-index.json",
    responses={503: {"model": ErrorResponse}},
    tags=["Data"],
)
async def get_stocks_index(cache: StockDataCache = Depends(get_cache)):
    """The full stocks index."""
    return cache.get_index().to_json_dict()


@app.get(
    "/data/prices/{symbol}.json",
    responses={503: {"model": ErrorResponse}},
    tags=["Data"],
)
async def get_price_series(symbol: str, cache: StockDataCache = Depends(get_cache)):
    """One symbol's full price series."""
    _validate_symbol(symbol)
    return cache.get_series(symbol).to_json_dict()


@app.get("/logos/{filename}", responses={404: {"model": ErrorResponse}}, tags=["Data"])
async def get_logo(filename: str, cache: StockDataCache = Depends(get_cache)):
    """A synced company logo."""
    if not LOGO_PATTERN.match(filename) or ".." in filename:
        raise HTTPException(status_code=404, detail=f"Logo not found: {filename}")
    path = cache.logo_path(filename)
    if path is None:
        raise HTTPException(status_code=404, detail=f"Logo not found: {filename}")
    return FileResponse(path)


@app.get("/api/stocks", responses={503: {"model": ErrorResponse}}, tags=["Statistics"])
async def list_stocks(
    q: str = Query(default="", description="Contains-match over symbol, name, exchange, category, industry, sector"),
    exchange: Optional[str] = Query(default=None),
    sector: Optional[str] = Query(default=None),
    industry: Optional[str] = Query(default=None),
    sort: SortField = Query(default=SortField.SYMBOL),
    descending: bool = Query(default=False),
    limit: Optional[int] = Query(default=None, ge=1),
    cache: StockDataCache = Depends(get_cache),
):
    """
    Search, filter and sort the index for the overview table.

    - **q**: Free-text search
    - **exchange**, **sector**, **industry**: Exact-match filters
    - **sort**: Column (symbol, name, industry, lastPrice, variationPercent, exchange, sector)
    - **limit**: Maximum rows returned; total still counts every match
    """
    matches = search_stocks(cache.get_index().stocks, q, exchange, sector, industry)
    ordered = sort_stocks(matches, sort, descending)
    if limit is not None:
        ordered = ordered[:limit]
    return StockListing(total=len(matches), stocks=ordered).to_json_dict()


@app.get("/api/stocks/filters", responses={503: {"model": ErrorResponse}}, tags=["Statistics"])
async def get_filter_options(cache: StockDataCache = Depends(get_cache)):
    """Dropdown choices for the exchange, sector and industry filters."""
    return filter_options(cache.get_index().stocks).to_json_dict()


@app.get(
    "/api/stocks/{symbol}/stats",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Statistics"],
)
async def get_stock_stats(
    symbol: str,
    time_range: TimeRange = Query(default=TimeRange.ONE_YEAR, alias="range"),
    cache: StockDataCache = Depends(get_cache),
):
    """
    Detail-view statistics for a symbol.

    - **symbol**: Ticker as listed in the index
    - **range**: Chart range (1M, 3M, 6M, 1Y, ALL)
    """
    _validate_symbol(symbol)
    if cache.get_stock(symbol) is None:
        raise HTTPException(status_code=404, detail=f"Unknown symbol: {symbol}")

    series = cache.get_series(symbol)
    return summarize_series(series, time_range).to_json_dict()


@app.get("/api/market/breadth", responses={503: {"model": ErrorResponse}}, tags=["Statistics"])
async def get_market_breadth(cache: StockDataCache = Depends(get_cache)):
    """Gainers, losers and unchanged counts for the whole index."""
    return market_breadth(cache.get_index().stocks).to_json_dict()


# ============================================================================
# Run with: uvicorn stockdash.app.api:app --reload
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
