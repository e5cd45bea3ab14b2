"""Pipeline Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Every setting overridable through USERQUERY_* environment variables or .env
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Page limit bounds (1..1000) are NOT settings: they are a contract with
      callers and live in core/domain_types.py (default_limit is checked against them)
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from userquery.core.domain_types import (
    DEFAULT_CACHE_TTL_SECONDS, DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT,
)


class Settings(BaseSettings):
    """Pipeline settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="USERQUERY_", env_file=".env", case_sensitive=False,
    )

    # Pagination
    default_limit: int = DEFAULT_LIMIT

    @field_validator("default_limit")
    @classmethod
    def limit_in_range(cls, v: int) -> int:
        if not MIN_LIMIT <= v <= MAX_LIMIT:
            raise ValueError(f"default_limit must be between {MIN_LIMIT} and {MAX_LIMIT}")
        return v

    # Cache
    cache_enabled: bool = True
    cache_max_entries: int = 1024
    page_cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS

    @field_validator("page_cache_ttl_seconds")
    @classmethod
    def ttl_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("page_cache_ttl_seconds must be >= 0")
        return v

    # Observability
    telemetry_enabled: bool = True
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
