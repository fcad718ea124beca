"""
Configuration module for the stock dashboard data pipeline.
Loads environment variables and provides input/output locations for each stage.
"""

from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Raw inputs
    data_dir: Path = Field(default=Path("data"), alias="DATA_DIR")
    master_metadata_file: str = Field(
        default="symbols_valid_meta.csv", alias="MASTER_METADATA_FILE"
    )
    stocks_subdir: str = Field(default="stocks", alias="STOCKS_SUBDIR")
    company_metadata_file: Optional[Path] = Field(
        default=None, alias="COMPANY_METADATA_FILE"
    )
    logos_source_dir: Optional[Path] = Field(default=None, alias="LOGOS_SOURCE_DIR")

    # Served artifacts
    output_dir: Path = Field(default=Path("public/data"), alias="OUTPUT_DIR")
    logos_dest_dir: Path = Field(default=Path("public/logos"), alias="LOGOS_DEST_DIR")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")

    @property
    def prices_source_dir(self) -> Path:
        return self.data_dir / "nasdaq_stock_prices"

    @property
    def master_metadata_path(self) -> Path:
        return self.prices_source_dir / self.master_metadata_file

    @property
    def stock_prices_dir(self) -> Path:
        return self.prices_source_dir / self.stocks_subdir

    @property
    def company_metadata_path(self) -> Path:
        if self.company_metadata_file is not None:
            return self.company_metadata_file
        return self.data_dir / "metadata" / "companies.csv"

    @property
    def logos_source_path(self) -> Path:
        if self.logos_source_dir is not None:
            return self.logos_source_dir
        return self.data_dir / "metadata" / "logos"

    @property
    def index_path(self) -> Path:
        return self.output_dir / "stocks-index.json"

    @property
    def prices_output_dir(self) -> Path:
        return self.output_dir / "prices"


# Global settings instance
settings = Settings()
