"""Post-processing - narrowing, sorting and metadata for fetched user sets.

Invariants:
    - Order of operations is narrow -> sort -> metadata; sort never sees the raw fetch
    - All sorts are stable: users with equal keys keep their fetched order
    - active_count + inactive_count == total_count == len(users)
    - role_distribution only lists roles present in the set (no zero entries)

Design Decisions:
    - Pure functions over a processor class: each step is testable with a plain list
    - retrieved_at is injectable so tests can pin the clock; defaults to now (UTC)
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from userquery.core.domain_types import UserSortBy
from userquery.core.query_types import GetUsersOptions, UsersMetadata, UsersResult
from userquery.core.user import User


# (key, reverse) per sort field. reverse=True keeps stability in sorted().
_SORT_KEYS: dict[UserSortBy, tuple[Callable[[User], object], bool]] = {
    UserSortBy.NAME: (lambda u: u.name.casefold(), False),
    UserSortBy.EMAIL: (lambda u: u.email.casefold(), False),
    UserSortBy.ROLE: (lambda u: u.role.priority, False),
    UserSortBy.CREATED_AT: (lambda u: u.created_at, True),
    UserSortBy.UPDATED_AT: (lambda u: u.updated_at, True),
}


def narrow_users(
    users: Iterable[User], active_only: bool, admins_only: bool,
) -> list[User]:
    result = list(users)
    if active_only:
        result = [u for u in result if u.is_active]
    if admins_only:
        result = [u for u in result if u.is_admin]
    return result


def sort_users(users: Iterable[User], sort_by: UserSortBy | None) -> list[User]:
    if sort_by is None:
        return list(users)
    key, reverse = _SORT_KEYS[sort_by]
    return sorted(users, key=key, reverse=reverse)


def build_metadata(
    users: Sequence[User],
    options: GetUsersOptions,
    retrieved_at: datetime | None = None,
) -> UsersMetadata:
    active = sum(1 for u in users if u.is_active)
    return UsersMetadata(
        retrieved_at=retrieved_at or datetime.now(timezone.utc),
        total_count=len(users),
        active_count=active,
        inactive_count=len(users) - active,
        role_distribution=dict(Counter(u.role for u in users)),
        cache_used=options.use_cache,
        filter_applied=options.filter.value if options.filter is not None else None,
        sort_applied=options.sort_by.value if options.sort_by is not None else None,
    )


def build_result(
    users: Sequence[User],
    options: GetUsersOptions,
    retrieved_at: datetime | None = None,
) -> UsersResult:
    """Wrap an already narrowed and sorted set in the result envelope."""
    return UsersResult(
        users=tuple(users),
        total_count=len(users),
        has_more=len(users) >= options.limit,
        metadata=build_metadata(users, options, retrieved_at),
    )
