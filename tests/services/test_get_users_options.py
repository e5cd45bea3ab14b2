"""GetUsersUseCase options path - narrow -> sort -> metadata -> envelope, result cache.

Tests cover:
    - Scenario: active-only + role sort over admin/user/user(inactive)
    - Result cache hit returns the stored envelope without IO
    - use_cache=False bypasses both result and page caches
    - filter set -> filter strategy; otherwise page fetch
    - has_more approximation, metadata invariant, name sort ordering
    - One outcome event per call
"""

import random

import pytest

from userquery.core.domain_types import UserFilter, UserRole, UserSortBy
from userquery.core.errors import InvalidLimitError, InvalidOffsetError
from userquery.core.query_types import GetUsersOptions, UsersResult, options_cache_key
from userquery.services.get_users import GetUsersUseCase

from tests.factories import make_user
from tests.services.fake_collaborators import DictCache, FakeUserRepository


async def test_active_only_sorted_by_role_scenario(use_case):
    result = await use_case.execute_options(
        GetUsersOptions(include_active_only=True, sort_by=UserSortBy.ROLE),
    )
    assert [u.role for u in result.users] == [UserRole.ADMIN, UserRole.USER]
    assert all(u.is_active for u in result.users)
    assert result.metadata.active_count == 2
    assert result.metadata.inactive_count == 0
    assert result.metadata.total_count == result.total_count == 2
    assert result.metadata.sort_applied == "role"


async def test_result_is_cached_and_reused(use_case, repository, telemetry):
    options = GetUsersOptions(limit=10, sort_by=UserSortBy.NAME)
    first = await use_case.execute_options(options)
    second = await use_case.execute_options(options)
    assert second is first
    assert len(repository.calls) == 1
    assert telemetry.names() == ["users_result_retrieved", "users_result_cache_hit"]


async def test_equal_options_share_cache_entry(use_case, repository):
    await use_case.execute_options(GetUsersOptions(limit=10, filter=UserFilter.ACTIVE))
    await use_case.execute_options(GetUsersOptions(filter=UserFilter.ACTIVE, limit=10))
    assert len(repository.calls) == 1


async def test_result_uses_configured_ttl(repository):
    cache = DictCache()
    use_case = GetUsersUseCase(repository, cache=cache)
    options = GetUsersOptions(limit=10, cache_ttl_seconds=30)
    await use_case.execute_options(options)
    result_keys = [k for k in cache.ttls if k.startswith("users_result_")]
    assert [cache.ttls[k] for k in result_keys] == [30]
    assert cache.ttls["users_10_0"] == 300


async def test_use_cache_false_bypasses_every_cache(use_case, repository, cache):
    options = GetUsersOptions(limit=10, use_cache=False)
    await use_case.execute_options(options)
    await use_case.execute_options(options)
    assert len(repository.calls) == 2
    assert cache.stats().entries == 0


async def test_result_cache_entry_expires(use_case, repository, telemetry, clock):
    options = GetUsersOptions(limit=10, cache_ttl_seconds=60)
    await use_case.execute_options(options)
    clock.advance(61)
    await use_case.execute_options(options)
    # result entry expired, page entry still fresh
    assert len(repository.calls) == 1
    assert telemetry.names() == [
        "users_result_retrieved", "users_cache_hit", "users_result_retrieved",
    ]


async def test_filter_option_routes_to_filter_strategy(use_case, repository):
    result = await use_case.execute_options(GetUsersOptions(filter=UserFilter.ACTIVE))
    assert repository.calls == [("get_active_users",)]
    assert result.metadata.filter_applied == "active"


async def test_without_filter_uses_page_fetch(use_case, repository):
    await use_case.execute_options(GetUsersOptions(limit=20, offset=0))
    assert repository.calls == [("get_users", 20, 0, None)]


async def test_narrowing_happens_before_sort_and_metadata(use_case):
    result = await use_case.execute_options(
        GetUsersOptions(include_admins_only=True, sort_by=UserSortBy.NAME),
    )
    assert [u.id for u in result.users] == ["u-1"]
    assert result.metadata.role_distribution == {UserRole.ADMIN: 1}


async def test_has_more_is_an_approximation():
    repo = FakeUserRepository([make_user(f"u-{i}") for i in range(5)])
    result = await GetUsersUseCase(repo).execute_options(GetUsersOptions(limit=5))
    # page came back full: has_more is True though nothing follows
    assert result.has_more is True
    assert await GetUsersUseCase(repo).execute_page(5, 5) == []


async def test_name_sort_is_non_decreasing_for_any_input():
    rng = random.Random(7)
    names = ["alice", "Bob", "carol", "ALICE", "dave", "Eve", "bob", "zoe", "Zed"]
    rng.shuffle(names)
    repo = FakeUserRepository([make_user(f"u-{i}", name=n) for i, n in enumerate(names)])
    result = await GetUsersUseCase(repo).execute_options(
        GetUsersOptions(sort_by=UserSortBy.NAME, use_cache=False),
    )
    folded = [u.name.casefold() for u in result.users]
    assert folded == sorted(folded)


async def test_metadata_invariant_holds(use_case):
    for options in (
        GetUsersOptions(),
        GetUsersOptions(filter=UserFilter.INACTIVE),
        GetUsersOptions(include_active_only=True),
    ):
        result = await use_case.execute_options(options)
        meta = result.metadata
        assert meta.active_count + meta.inactive_count == meta.total_count
        assert meta.total_count == result.total_count == len(result.users)


async def test_single_outcome_event_per_call(use_case, telemetry):
    await use_case.execute_options(GetUsersOptions(limit=10))
    assert telemetry.names() == ["users_result_retrieved"]
    params = telemetry.named("users_result_retrieved")[0]
    assert params["options"] == "limit:10,offset:0"
    assert params["count"] == 3


@pytest.mark.parametrize("options, error", [
    (GetUsersOptions(limit=0), InvalidLimitError),
    (GetUsersOptions(limit=1001), InvalidLimitError),
    (GetUsersOptions(offset=-1), InvalidOffsetError),
])
async def test_invalid_options_fail_before_io(use_case, repository, telemetry, options, error):
    with pytest.raises(error):
        await use_case.execute_options(options)
    assert repository.calls == []
    assert telemetry.names() == ["users_result_error"]


async def test_cached_value_of_wrong_shape_is_a_miss(repository):
    cache = DictCache()
    options = GetUsersOptions(limit=10)
    use_case = GetUsersUseCase(repository, cache=cache)
    cache.store[options_cache_key(options)] = ["not", "a", "result"]
    result = await use_case.execute_options(options)
    assert isinstance(result, UsersResult)
    assert len(repository.calls) == 1
