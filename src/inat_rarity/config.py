"""
Application settings.

Values come from environment variables prefixed with ``INAT_RARITY_`` (or a
local ``.env`` file); CLI flags override them per run.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for inat-rarity."""

    model_config = SettingsConfigDict(
        env_prefix="INAT_RARITY_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "inat-rarity"
    app_env: str = "development"
    debug: bool = False

    output_dir: Path = Path()

    # Request pacing (seconds between calls)
    min_delay: float = Field(default=0.25, ge=0)
    render_min_delay: float = Field(default=0.1, ge=0)

    # Aggregation tuning
    max_pages: int = Field(default=8, ge=1)
    batch_size: int = Field(default=200, ge=1)
    top_n: int = Field(default=20, ge=1)

    # HTTP retry policy
    max_retries: int = Field(default=7, ge=0)
    backoff_base: float = Field(default=0.5, ge=0)
    backoff_max: float = Field(default=60.0, ge=0)
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    user_agent: str = "inat-rarity/0.1 (+https://www.inaturalist.org/pages/api+recommended+practices)"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
