"""Get Users Use Case - validated, cached, instrumented retrieval of user collections.

Invariants:
    - Parameters validated before any IO (InvalidLimitError / InvalidOffsetError)
    - Every public entry point emits exactly one outcome event (success or error)
      and, on failure, emits it BEFORE raising the normalized error
    - Every error leaving a public entry point is a UserQueryError, chained to its cause
    - All-or-nothing: no partial results on failure
    - Cache failures never fail a call: read errors count as a miss, write errors
      are logged and dropped
    - A failing telemetry sink never fails a call
    - Options path order: fetch (filter OR page) -> narrow -> sort -> metadata -> store

Design Decisions:
    - One method per entry shape (execute / execute_page / execute_filter /
      execute_options) instead of overloading execute() on argument types
    - The options path calls the internal fetch stages, not the public entry points,
      so a single call yields a single outcome event and a single normalization
    - Records are validated once, in the fetch stage; narrowing only removes
      already-validated records
    - No single-flight: concurrent identical requests both fetch and both write,
      last write wins
    - CancelledError is a BaseException and is never caught here
"""

import logging
import time
from typing import Any, Sequence

from userquery.core.domain_types import (
    DEFAULT_CACHE_TTL_SECONDS, DEFAULT_LIMIT, DEFAULT_OFFSET, UserFilter,
)
from userquery.core.errors import (
    ErrorContext, UnknownError, UserQueryError, normalize_error,
)
from userquery.core.post_process import build_result, narrow_users, sort_users
from userquery.core.query_types import (
    GetUsersOptions, UsersResult, options_cache_key, page_cache_key,
)
from userquery.core.repository_protocols import (
    CacheBackend, NullCache, NullTelemetry, TelemetrySink,
    UserRepository, UserValidator,
)
from userquery.core.user import User
from userquery.core.validate_params import (
    validate_filter, validate_options, validate_pagination,
)
from userquery.core.validate_user import BasicUserValidator
from userquery.services.filter_dispatch import fetch_for_filter

logger = logging.getLogger(__name__)


class GetUsersUseCase:
    """Retrieves user collections through validate -> cache -> fetch -> post-process."""

    def __init__(
        self,
        repository: UserRepository,
        validator: UserValidator | None = None,
        cache: CacheBackend | None = None,
        telemetry: TelemetrySink | None = None,
        page_cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        default_limit: int = DEFAULT_LIMIT,
    ):
        self._repository = repository
        self._validator = validator if validator is not None else BasicUserValidator()
        self._cache = cache if cache is not None else NullCache()
        self._telemetry = telemetry if telemetry is not None else NullTelemetry()
        self._page_cache_ttl = page_cache_ttl_seconds
        self._default_limit = default_limit

    @property
    def cache(self) -> CacheBackend:
        return self._cache

    @property
    def telemetry(self) -> TelemetrySink:
        return self._telemetry

    # ─── Public entry points ────────────────────────────────────

    async def execute(self) -> list[User]:
        """First page with the default size (100 unless configured)."""
        return await self.execute_page(self._default_limit, DEFAULT_OFFSET)

    async def execute_page(self, limit: int, offset: int) -> list[User]:
        started = time.perf_counter()
        params = {"limit": limit, "offset": offset}
        try:
            validate_pagination(limit, offset)
            users, from_cache = await self._fetch_page(limit, offset, use_cache=True)
        except Exception as e:
            error = self._fail("users_retrieval_error", "execute_page", params, started, e)
            if error is e:
                raise
            raise error from e

        if not from_cache:
            self._track("users_retrieved", {
                **params,
                "count": len(users),
                "duration_ms": _elapsed_ms(started),
                "cached": False,
            })
        return users

    async def execute_filter(self, user_filter: UserFilter) -> list[User]:
        started = time.perf_counter()
        params = {"filter": user_filter.value}
        try:
            validate_filter(user_filter)
            users = await self._fetch_filter(user_filter)
        except Exception as e:
            error = self._fail("users_filtered_error", "execute_filter", params, started, e)
            if error is e:
                raise
            raise error from e

        self._track("users_filtered_retrieved", {
            **params,
            "count": len(users),
            "duration_ms": _elapsed_ms(started),
        })
        return users

    async def execute_options(self, options: GetUsersOptions) -> UsersResult:
        started = time.perf_counter()
        params = {"options": options.description}
        try:
            validate_options(options)
            key = options_cache_key(options)
            if options.use_cache:
                cached = await self._cache_get(key)
                if isinstance(cached, UsersResult):
                    self._track("users_result_cache_hit", {
                        **params, "count": cached.total_count,
                    })
                    return cached

            if options.filter is not None:
                users = await self._fetch_filter(options.filter)
            else:
                users, _ = await self._fetch_page(
                    options.limit, options.offset, use_cache=options.use_cache,
                )
            users = narrow_users(
                users, options.include_active_only, options.include_admins_only,
            )
            users = sort_users(users, options.sort_by)
            result = build_result(users, options)

            if options.use_cache:
                await self._cache_set(key, result, options.cache_ttl_seconds)
        except Exception as e:
            error = self._fail("users_result_error", "execute_options", params, started, e)
            if error is e:
                raise
            raise error from e

        self._track("users_result_retrieved", {
            **params,
            "count": result.total_count,
            "duration_ms": _elapsed_ms(started),
        })
        return result

    # ─── Fetch stages ───────────────────────────────────────────

    async def _fetch_page(
        self, limit: int, offset: int, use_cache: bool,
    ) -> tuple[list[User], bool]:
        """Returns (users, served_from_cache)."""
        key = page_cache_key(limit, offset)
        if use_cache:
            cached = await self._cache_get(key)
            if _is_user_sequence(cached):
                self._track("users_cache_hit", {
                    "limit": limit, "offset": offset, "count": len(cached),
                })
                return list(cached), True

        users = list(await self._repository.get_users(limit, offset, is_active=None))
        self._validate_users(users)
        if use_cache:
            await self._cache_set(key, tuple(users), self._page_cache_ttl)
        return users, False

    async def _fetch_filter(self, user_filter: UserFilter) -> list[User]:
        users = await fetch_for_filter(self._repository, user_filter)
        self._validate_users(users)
        return users

    def _validate_users(self, users: Sequence[User]) -> None:
        for user in users:
            self._validator.validate_user(user)

    # ─── Side channels ──────────────────────────────────────────

    async def _cache_get(self, key: str) -> Any | None:
        try:
            return await self._cache.get(key)
        except Exception as e:
            logger.warning(
                f"Cache read failed, treating as miss: {e}",
                extra={"cache_key": key, "error": str(e)},
            )
            return None

    async def _cache_set(self, key: str, value: Any, ttl_seconds: float) -> None:
        try:
            await self._cache.set(key, value, ttl_seconds)
        except Exception as e:
            logger.warning(
                f"Cache write failed, result not cached: {e}",
                extra={"cache_key": key, "error": str(e)},
            )

    def _track(self, name: str, parameters: dict[str, Any]) -> None:
        try:
            self._telemetry.track_event(name, parameters)
        except Exception as e:
            logger.warning(f"Telemetry sink failed on '{name}': {e}")

    def _fail(
        self,
        event: str,
        operation: str,
        params: dict[str, Any],
        started: float,
        error: Exception,
    ) -> UserQueryError:
        """Emit the failure event, then normalize. Order matters: telemetry first."""
        duration_ms = _elapsed_ms(started)
        self._track(event, {
            **params,
            "error": str(error),
            "error_type": type(error).__name__,
            "duration_ms": duration_ms,
        })
        context = ErrorContext(
            operation=operation, parameters=params, duration_ms=duration_ms,
        )
        normalized = normalize_error(error, context)
        if normalized.context.operation is None:
            normalized.context = context

        if isinstance(normalized, UnknownError):
            logger.error(
                f"Unexpected failure in {operation}: {error}",
                exc_info=error,
                extra={"error_code": normalized.code, "duration_ms": duration_ms},
            )
        else:
            logger.warning(
                f"{operation} failed: {normalized.message}",
                extra={"error_code": normalized.code, "duration_ms": duration_ms},
            )
        return normalized


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def _is_user_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(u, User) for u in value)
