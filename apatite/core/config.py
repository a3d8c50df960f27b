"""
Library configuration.

Centralized tolerance and logging settings, overridable through
``APATITE_``-prefixed environment variables or a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings"""

    model_config = SettingsConfigDict(
        env_prefix="APATITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Geometry predicates (parallel, antiparallel, perpendicular, snap_to)
    PRECISION: float = 1e-6

    # Fuzzy element-wise comparison (Vector.compare, Matrix.compare)
    APPROX_PRECISION: float = 1e-5

    # Relative comparison treats magnitudes below ZERO_LEVEL as zero and
    # compares them absolutely against ZERO_LEVEL_TOL
    ZERO_LEVEL: float = 1e-14
    ZERO_LEVEL_TOL: float = 1e-12

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def resolve_precision(precision: Optional[float]) -> float:
    """Return ``precision`` or, when omitted, the configured default."""
    if precision is None:
        return get_settings().PRECISION
    return precision


def resolve_approx_precision(tolerance: Optional[float]) -> float:
    """Return ``tolerance`` or, when omitted, the configured fuzzy tolerance."""
    if tolerance is None:
        return get_settings().APPROX_PRECISION
    return tolerance
