"""Pipeline Wiring - builds a GetUsersUseCase from settings and manages its lifetime.

Invariants:
    - Collaborators are constructed once per use case and never swapped afterwards
    - cache_enabled=False / telemetry_enabled=False wire the no-op collaborators,
      which are complete configurations
    - pipeline_lifespan clears the cache it created on exit, even when the body raises

Design Decisions:
    - Lifespan context manager over module-level singleton: the host application
      owns the lifecycle, the package has no import side effects
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from userquery.config import Settings, get_settings
from userquery.core.repository_protocols import (
    NullCache, NullTelemetry, UserRepository, UserValidator,
)
from userquery.infrastructure.memory_cache import MemoryCache
from userquery.infrastructure.observability import setup_logging
from userquery.infrastructure.telemetry import LoggingTelemetry
from userquery.services.get_users import GetUsersUseCase

logger = logging.getLogger(__name__)


def build_get_users_use_case(
    repository: UserRepository,
    settings: Settings | None = None,
    validator: UserValidator | None = None,
) -> GetUsersUseCase:
    settings = settings or get_settings()
    cache = (
        MemoryCache(max_entries=settings.cache_max_entries)
        if settings.cache_enabled else NullCache()
    )
    telemetry = LoggingTelemetry() if settings.telemetry_enabled else NullTelemetry()
    return GetUsersUseCase(
        repository,
        validator=validator,
        cache=cache,
        telemetry=telemetry,
        page_cache_ttl_seconds=settings.page_cache_ttl_seconds,
        default_limit=settings.default_limit,
    )


@asynccontextmanager
async def pipeline_lifespan(
    repository: UserRepository,
    settings: Settings | None = None,
    validator: UserValidator | None = None,
) -> AsyncIterator[GetUsersUseCase]:
    """Startup/shutdown lifecycle for a host application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    use_case = build_get_users_use_case(repository, settings, validator)
    logger.info("User query pipeline started")
    try:
        yield use_case
    finally:
        cache = use_case.cache
        if isinstance(cache, MemoryCache):
            await cache.clear()
        logger.info("User query pipeline shutting down")
