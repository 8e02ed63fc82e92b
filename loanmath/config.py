"""
Engine configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("LOANMATH_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Solver defaults loaded from environment variables."""

    # Rate search bracket (periodic rate, 1.0 = 100% per period)
    rate_lower_bound: float = 0.0
    rate_upper_bound: float = 1.0

    # Bisection budget
    max_iterations: int = 60
    tolerance: float = 1e-10

    # Unit conversions
    periods_per_year: int = 12

    class Config:
        env_prefix = "LOANMATH_"
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
