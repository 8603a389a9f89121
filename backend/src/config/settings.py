"""
Configuration settings for the CinéLyon catalog backend.
Uses Pydantic for validation and environment variable management.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_URL = (
    "https://raw.githubusercontent.com/abdu-63/cinelyon/refs/heads/main/movies.json"
)


class Settings(BaseSettings):
    """Application settings with validation."""

    # Project info
    app_name: str = "cinelyon"
    version: str = "0.1.0"
    debug: bool = Field(default=False, description="Debug mode")

    # Upstream catalog
    catalog_url: str = Field(
        default=DEFAULT_CATALOG_URL, description="Remote movies.json URL"
    )
    request_timeout: float = Field(
        default=30, description="Catalog request timeout in seconds"
    )
    catalog_timezone: str = Field(
        default="Europe/Paris", description="Time zone of the catalog's city"
    )

    # Local storage
    cache_dir: Path = Field(
        default=Path.home() / ".cache" / "cinelyon",
        description="Directory holding the catalog snapshot",
    )
    cache_file_name: str = Field(default="movies_cache.json")
    favorites_db_path: Path = Field(
        default=Path.home() / ".local" / "share" / "cinelyon" / "favorites.db",
        description="SQLite file for favorites",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="",
        extra="ignore",
    )

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / self.cache_file_name


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the app.
    """
    return Settings()
