"""
Metadata merge stage.

Joins the positional company metadata table onto an existing stocks index by
ticker (case-insensitive). Matched rows get every enrichment field assigned
wholesale, so re-running with the same table reproduces the same index.
"""

from pathlib import Path
from typing import Dict, List

from loguru import logger

from stockdash.core import storage
from stockdash.core.errors import MissingInputError
from stockdash.core.models import CompanyMetadata, StocksIndex
from stockdash.pipeline.csv_parser import read_csv_lines
from stockdash.pipeline.ingest import parse_decimal

# Column positions in companies.csv (1 and 8 are not used)
TICKER_COL = 0
COLUMNS = {
    "short_name": 2,
    "industry": 3,
    "description": 4,
    "website": 5,
    "logo": 6,
    "ceo": 7,
    "sector": 10,
    "tag1": 11,
    "tag2": 12,
    "tag3": 13,
}
MARKET_CAP_COL = 9


def _column(values: List[str], position: int) -> str:
    return values[position] if position < len(values) else ""


def metadata_from_values(values: List[str]) -> CompanyMetadata:
    """Build a CompanyMetadata record from one parsed CSV row."""
    fields = {name: _column(values, pos) for name, pos in COLUMNS.items()}
    market_cap = parse_decimal(_column(values, MARKET_CAP_COL))
    return CompanyMetadata(market_cap=market_cap or 0.0, **fields)


def parse_company_metadata(text: str) -> Dict[str, CompanyMetadata]:
    """
    Parse the company metadata CSV content into a ticker -> record mapping.

    The first line is a header. Rows with an empty ticker are ignored and a
    duplicated ticker keeps its last row.
    """
    lines = read_csv_lines(text)
    metadata: Dict[str, CompanyMetadata] = {}

    for values in lines[1:]:
        ticker = _column(values, TICKER_COL)
        if not ticker:
            continue
        metadata[ticker.upper()] = metadata_from_values(values)

    return metadata


def load_company_metadata(path: Path) -> Dict[str, CompanyMetadata]:
    """
    Load the company metadata CSV.

    Raises:
        MissingInputError: If the file does not exist
    """
    if not path.exists():
        raise MissingInputError(f"Company metadata file not found: {path}")

    metadata = parse_company_metadata(path.read_text(encoding="utf-8-sig"))
    logger.info(f"Loaded metadata for {len(metadata)} companies")
    return metadata


def merge_metadata(index: StocksIndex, metadata: Dict[str, CompanyMetadata]) -> int:
    """
    Enrich index entries in place.

    Args:
        index: StocksIndex to mutate
        metadata: Records keyed by upper-cased ticker

    Returns:
        Number of index entries that matched a metadata record
    """
    matched = 0
    for stock in index.stocks:
        meta = metadata.get(stock.symbol.upper())
        if meta is None:
            continue
        stock.apply_metadata(meta)
        matched += 1

    logger.info(f"Matched metadata for {matched} of {len(index.stocks)} stocks")
    return matched


def merge_metadata_file(index_path: Path, metadata_path: Path) -> int:
    """
    Merge company metadata into the index artifact and rewrite it in place.

    Returns:
        Number of matched stocks
    """
    metadata = load_company_metadata(metadata_path)
    index = storage.load_index(index_path)
    logger.info(f"Found {len(index.stocks)} stocks in {index_path}")

    matched = merge_metadata(index, metadata)
    storage.save_index(index, index_path)
    return matched
