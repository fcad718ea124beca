"""
Pydantic models for the dashboard artifacts.
Defines PricePoint, StockSeries, StockSummary, StocksIndex and the display-time results.

Artifacts use camelCase JSON keys (``lastPrice``, ``variationPercent``); Python code
uses the snake_case attribute names.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ArtifactModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump with artifact keys, omitting absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PricePoint(ArtifactModel):
    """One normalized trading session."""

    date: str = Field(..., description="Session date as given in the source (YYYY-MM-DD)")
    open: float = Field(default=0.0, description="Opening price")
    high: float = Field(default=0.0, description="Highest price")
    low: float = Field(default=0.0, description="Lowest price")
    close: float = Field(default=0.0, description="Closing price")
    volume: int = Field(default=0, ge=0, description="Trading volume")


class StockSeries(ArtifactModel):
    """Price history of one symbol, in source order (ascending date)."""

    symbol: str = Field(..., description="Ticker symbol")
    prices: List[PricePoint] = Field(default_factory=list)


ENRICHMENT_FIELDS = (
    "short_name",
    "industry",
    "description",
    "website",
    "logo",
    "ceo",
    "market_cap",
    "sector",
    "tag1",
    "tag2",
    "tag3",
)


class CompanyMetadata(ArtifactModel):
    """Descriptive fields joined onto a StockSummary by ticker."""

    short_name: str = ""
    industry: str = ""
    description: str = ""
    website: str = ""
    logo: str = ""
    ceo: str = ""
    market_cap: float = 0.0
    sector: str = ""
    tag1: str = ""
    tag2: str = ""
    tag3: str = ""


class StockSummary(ArtifactModel):
    """One row of the stocks index."""

    symbol: str = Field(..., description="Ticker symbol")
    name: str = Field(..., description="Security display name")
    exchange: str = Field(default="", description="Listing exchange code")
    market_category: str = Field(default="", description="Market category code")
    is_etf: bool = Field(default=False)

    last_price: float = Field(..., description="Last close, rounded to 2 places")
    last_date: str = Field(..., description="Date of the last session")
    variation: float = Field(..., description="lastPrice - previousClose")
    variation_percent: float = Field(..., description="variation / previousClose * 100")

    # Enrichment, absent until the metadata merge matches the symbol
    short_name: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    ceo: Optional[str] = None
    market_cap: Optional[float] = None
    sector: Optional[str] = None
    tag1: Optional[str] = None
    tag2: Optional[str] = None
    tag3: Optional[str] = None

    def apply_metadata(self, meta: CompanyMetadata) -> None:
        """Overwrite every enrichment field from a metadata record."""
        for field in ENRICHMENT_FIELDS:
            setattr(self, field, getattr(meta, field))


class StocksIndex(ArtifactModel):
    """The consolidated index artifact."""

    stocks: List[StockSummary] = Field(default_factory=list)


class SeriesStatistics(ArtifactModel):
    """Display-time statistics for one symbol's detail view."""

    symbol: str
    range: str
    trading_days: int = Field(..., ge=0, description="Observations in the full series")
    latest: Optional[PricePoint] = None
    fifty_two_week_high: Optional[float] = None
    fifty_two_week_low: Optional[float] = None
    average_volume: Optional[int] = None
    points: List[PricePoint] = Field(default_factory=list)


class MarketBreadth(ArtifactModel):
    """Counts of advancing, declining and flat symbols in the index."""

    gainers: int = Field(default=0, ge=0)
    losers: int = Field(default=0, ge=0)
    unchanged: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class FilterOptions(ArtifactModel):
    """Distinct values offered by the overview table's dropdown filters."""

    exchanges: List[str] = Field(default_factory=list)
    sectors: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)


class StockListing(ArtifactModel):
    """A searched, filtered and sorted page of the index."""

    total: int = Field(..., ge=0, description="Rows matching before the limit")
    stocks: List[StockSummary] = Field(default_factory=list)
