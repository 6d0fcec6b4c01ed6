"""Configuration management for the Q-index dashboard.

Centralizes storage locations, chart defaults and the symbol watchlist.
"""

from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from qindex.core.domain_models import DEFAULT_PERIOD, TimePeriod


class UniverseConfig(BaseModel):
    """Symbols shown in the dashboard."""

    symbols: list[str] = Field(default_factory=list, description="Watchlist of stock symbols")

    @field_validator("symbols")
    @classmethod
    def normalize_symbols(cls, v: list[str]) -> list[str]:
        """Upper-case and de-duplicate symbols, keeping order."""
        return list(dict.fromkeys(s.strip().upper() for s in v if s.strip()))


class AppSettings(BaseModel):
    """Application-level settings."""

    base_dir: Path = Field(default=Path("data/prod"))
    default_period: TimePeriod = Field(default=DEFAULT_PERIOD)
    chart_height: int = Field(default=300, gt=0)

    @property
    def qindex_dir(self) -> Path:
        """Directory for Q-index parquet files."""
        return self.base_dir / "qindex"


class Config(BaseModel):
    """Root configuration model."""

    universe: UniverseConfig = Field(default_factory=UniverseConfig)
    settings: AppSettings = Field(default_factory=AppSettings)


def load_config(config_path: Path = Path("config/config.yaml")) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Parsed configuration object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    with config_path.open("r") as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    config = Config(**raw_config)
    logger.debug(f"Watchlist symbols: {len(config.universe.symbols)}")

    return config
