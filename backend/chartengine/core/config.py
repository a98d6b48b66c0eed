"""
Engine Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHARTENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Live feed resolution (seconds per base bar)
    base_interval_seconds: int = 1

    # Display resolution on startup (None = show the base series as-is)
    default_aggregation_seconds: Optional[int] = None

    # Outward update throttling for rendering surfaces
    effect_throttle_ms: int = 200


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
