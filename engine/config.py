"""
Engine Configuration

Loads forecasting engine settings from environment variables.
All settings use the FORECAST_ prefix (e.g. FORECAST_RANDOM_SEED=42).
"""

from typing import Optional
from functools import lru_cache

import numpy as np
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Forecasting engine configuration loaded from environment."""

    # Seed for the Monte Carlo generator (None = fresh OS entropy per analyzer)
    random_seed: Optional[int] = None

    # Monte Carlo sizing
    simulations: int = Field(5000, gt=0)
    pool_size: int = Field(50, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def make_rng(self) -> np.random.Generator:
        """Create a uniform random source seeded from these settings."""
        return np.random.default_rng(self.random_seed)


@lru_cache()
def get_engine_settings() -> EngineSettings:
    """
    Get cached engine settings.
    Uses lru_cache to avoid reloading on every call.
    """
    return EngineSettings()
