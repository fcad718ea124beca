"""
Pipeline entry points: preprocess (ingest + index) and merge (metadata + logos).
"""

from typing import Optional

from stockdash.core import storage
from stockdash.core.config import Settings, settings as default_settings
from stockdash.core.logging import get_logger
from stockdash.pipeline.index_builder import IndexBuildReport, build_stocks_index
from stockdash.pipeline.logo_sync import sync_logos
from stockdash.pipeline.metadata_merge import merge_metadata_file


def run_preprocess(config: Optional[Settings] = None) -> IndexBuildReport:
    """
    Build stocks-index.json and prices/<SYMBOL>.json from the raw CSVs.

    Raises:
        MissingInputError: If the master metadata file is absent (fatal)
    """
    config = config or default_settings
    logger = get_logger("preprocess")
    logger.info(f"Reading metadata file {config.master_metadata_path}")
    master_rows = storage.read_master_metadata(config.master_metadata_path)

    index, report = build_stocks_index(
        master_rows,
        price_dir=config.stock_prices_dir,
        prices_out_dir=config.prices_output_dir,
    )
    storage.save_index(index, config.index_path)

    logger.info(
        f"Done: processed {report.processed} stocks, skipped {report.skipped_count}, "
        f"output {config.output_dir}"
    )
    return report


def run_merge(config: Optional[Settings] = None) -> int:
    """
    Merge company metadata into the index, then sync logos.

    Returns:
        Number of stocks matched with metadata
    """
    config = config or default_settings
    logger = get_logger("merge")
    matched = merge_metadata_file(config.index_path, config.company_metadata_path)
    copied = sync_logos(config.logos_source_path, config.logos_dest_dir)
    logger.info(f"Done: matched {matched} stocks, copied {copied} logos")
    return matched
