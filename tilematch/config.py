"""Application Configuration - environment-driven settings via pydantic-settings.

Every setting can be overridden with a TILEMATCH_-prefixed environment
variable or a .env file, e.g. TILEMATCH_MISMATCH_DELAY_MS=1500.

get_settings() is cached: one Settings instance per process.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TILEMATCH_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Gameplay pacing
    match_delay_ms: int = Field(600, ge=0)
    mismatch_delay_ms: int = Field(1000, ge=0)

    # Catalog
    default_catalog: str = "pokemon"
    catalog_path: Optional[str] = None  # JSON catalog; overrides default_catalog

    # Fixed seed for reproducible boards (tests, demos)
    random_seed: Optional[int] = None

    # Sessions
    session_max_age_seconds: int = 3600

    # API
    allowed_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()
