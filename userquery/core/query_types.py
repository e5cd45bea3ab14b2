"""Query Types - request options, result envelope, and cache key derivation.

Invariants:
    - GetUsersOptions, UsersMetadata, UsersResult are frozen: never mutated after construction
    - UsersResult.total_count == len(UsersResult.users), enforced at construction
    - fingerprint() is order-independent and covers every field: two option sets
      share a fingerprint iff all their fields are equal
    - Page keys and result keys live in disjoint namespaces (users_ vs users_result_)

Design Decisions:
    - Fingerprint = SHA-256 over canonical JSON (sort_keys), not str(options):
      a formatted description can collide for different option sets
    - users stored as a tuple in UsersResult so a cached envelope cannot be
      mutated by one caller under another
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime

from userquery.core.domain_types import (
    DEFAULT_CACHE_TTL_SECONDS, DEFAULT_LIMIT, DEFAULT_OFFSET,
    UserFilter, UserRole, UserSortBy,
)
from userquery.core.user import User


PAGE_KEY_PREFIX = "users"
RESULT_KEY_PREFIX = "users_result"


@dataclass(frozen=True)
class GetUsersOptions:
    """Configuration for the composed query path."""
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET
    filter: UserFilter | None = None
    sort_by: UserSortBy | None = None
    include_active_only: bool = False
    include_admins_only: bool = False
    use_cache: bool = True
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS

    @property
    def description(self) -> str:
        """Human-readable summary for telemetry. Not a cache key."""
        desc = f"limit:{self.limit},offset:{self.offset}"
        if self.filter is not None:
            desc += f",filter:{self.filter.value}"
        if self.sort_by is not None:
            desc += f",sort:{self.sort_by.value}"
        if self.include_active_only:
            desc += ",activeOnly"
        if self.include_admins_only:
            desc += ",adminsOnly"
        return desc

    def canonical(self) -> dict:
        return {
            "limit": self.limit,
            "offset": self.offset,
            "filter": self.filter.value if self.filter is not None else None,
            "sort_by": self.sort_by.value if self.sort_by is not None else None,
            "include_active_only": self.include_active_only,
            "include_admins_only": self.include_admins_only,
            "use_cache": self.use_cache,
            "cache_ttl_seconds": float(self.cache_ttl_seconds),
        }

    def fingerprint(self) -> str:
        payload = json.dumps(self.canonical(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class UsersMetadata:
    """Aggregates over one result set. Computed per call, never persisted."""
    retrieved_at: datetime
    total_count: int
    active_count: int
    inactive_count: int
    role_distribution: dict[UserRole, int] = field(default_factory=dict)
    cache_used: bool = False
    filter_applied: str | None = None
    sort_applied: str | None = None


@dataclass(frozen=True)
class UsersResult:
    """Envelope returned by the options path.

    has_more is an approximation: True whenever the page came back full
    (len(users) >= limit), even if no further users exist.
    """
    users: tuple[User, ...]
    total_count: int
    has_more: bool
    metadata: UsersMetadata

    def __post_init__(self):
        if self.total_count != len(self.users):
            raise ValueError(
                f"total_count {self.total_count} != len(users) {len(self.users)}",
            )


def page_cache_key(limit: int, offset: int) -> str:
    return f"{PAGE_KEY_PREFIX}_{limit}_{offset}"


def options_cache_key(options: GetUsersOptions) -> str:
    return f"{RESULT_KEY_PREFIX}_{options.fingerprint()}"
