"""Application configuration using Pydantic V2."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-level settings (read from .env and QINDEX_* variables)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="QINDEX_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="qindex", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    config_path: Path = Field(
        default=Path("config/config.yaml"), description="Path to the YAML configuration"
    )

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level.upper()


# Singleton instance
settings = Settings()
