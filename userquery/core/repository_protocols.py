"""Boundary Protocols - contracts between the pipeline and its collaborators.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - UserRepository methods fail only with RepositoryError (core/errors.py)
    - Cache and telemetry are optional: NullCache / NullTelemetry are complete,
      valid configurations, not test doubles

Design Decisions:
    - Protocol over ABC: structural subtyping, any object with the right methods plugs in
    - Async in Protocol for repository and cache: implementations do IO.
      TelemetrySink.track_event is sync: fire-and-forget, never awaited on the critical path
"""

from typing import Any, Protocol, Sequence

from userquery.core.domain_types import UserRole
from userquery.core.user import User


class UserRepository(Protocol):
    """Contract for user retrieval - implemented by the persistence/network layer."""
    async def get_users(
        self, limit: int, offset: int, is_active: bool | None = None,
    ) -> Sequence[User]: ...
    async def get_active_users(self) -> Sequence[User]: ...
    async def get_inactive_users(self) -> Sequence[User]: ...
    async def get_users_by_role(self, role: UserRole) -> Sequence[User]: ...


class UserValidator(Protocol):
    """Contract for record validation. Raises UserValidationFailure, returns None."""
    def validate_user(self, user: User) -> None: ...


class CacheBackend(Protocol):
    """Key-value cache with per-entry TTL. Either call may raise; the pipeline copes."""
    async def get(self, key: str) -> Any | None: ...
    async def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...


class TelemetrySink(Protocol):
    """Event observer. Must not block."""
    def track_event(self, name: str, parameters: dict[str, Any]) -> None: ...


class NullCache:
    """No-op cache: every lookup misses, every store is dropped."""

    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        return None


class NullTelemetry:
    """No-op telemetry sink."""

    def track_event(self, name: str, parameters: dict[str, Any]) -> None:
        return None
