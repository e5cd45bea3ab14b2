"""Filter Dispatch - explicit routing from UserFilter to a repository fetch strategy.

Invariants:
    - Every UserFilter member has exactly one strategy (checked at import)
    - UserFilter.ALL is bounded: one page of FILTER_ALL_CAP users from offset 0
    - Strategies only call the repository; validation, caching and telemetry stay in the use case

Design Decisions:
    - Explicit dict over if/elif or getattr: every mapping visible in one place,
      and each strategy can be tested with a mock repository
"""

from typing import Awaitable, Callable, Sequence

from userquery.core.domain_types import FILTER_ALL_CAP, UserFilter, UserRole
from userquery.core.repository_protocols import UserRepository
from userquery.core.user import User

FetchStrategy = Callable[[UserRepository], Awaitable[Sequence[User]]]


async def _fetch_all(repository: UserRepository) -> Sequence[User]:
    return await repository.get_users(FILTER_ALL_CAP, 0, is_active=None)


async def _fetch_active(repository: UserRepository) -> Sequence[User]:
    return await repository.get_active_users()


async def _fetch_inactive(repository: UserRepository) -> Sequence[User]:
    return await repository.get_inactive_users()


def _by_role(role: UserRole) -> FetchStrategy:
    async def fetch(repository: UserRepository) -> Sequence[User]:
        return await repository.get_users_by_role(role)
    fetch.__name__ = f"_fetch_{role.value}"
    return fetch


FILTER_STRATEGIES: dict[UserFilter, FetchStrategy] = {
    UserFilter.ALL: _fetch_all,
    UserFilter.ACTIVE: _fetch_active,
    UserFilter.INACTIVE: _fetch_inactive,
    UserFilter.ADMIN: _by_role(UserRole.ADMIN),
    UserFilter.MODERATOR: _by_role(UserRole.MODERATOR),
    UserFilter.USER: _by_role(UserRole.USER),
}

_missing = set(UserFilter) - set(FILTER_STRATEGIES)
if _missing:
    raise RuntimeError(f"No fetch strategy for filters: {sorted(f.value for f in _missing)}")


async def fetch_for_filter(
    repository: UserRepository, user_filter: UserFilter,
) -> list[User]:
    users = await FILTER_STRATEGIES[user_filter](repository)
    return list(users)
