"""GetUsersUseCase pagination path - validation, page cache, telemetry.

Tests cover:
    - execute() delegates to the first 100-user page
    - Cache idempotence: second identical call served without a repository call
    - Entries expire after the page TTL
    - Invalid parameters fail before any IO
    - Without a cache every call fetches
"""

import pytest

from userquery.core.errors import InvalidLimitError, InvalidOffsetError
from userquery.core.query_types import GetUsersOptions
from userquery.services.get_users import GetUsersUseCase

from tests.factories import make_user
from tests.services.fake_collaborators import DictCache, FakeUserRepository


async def test_execute_uses_default_page(use_case, repository):
    users = await use_case.execute()
    assert repository.calls == [("get_users", 100, 0, None)]
    assert len(users) == 3


async def test_execute_page_emits_single_success_event(use_case, telemetry):
    users = await use_case.execute_page(10, 0)
    assert telemetry.names() == ["users_retrieved"]
    [params] = telemetry.named("users_retrieved")
    assert params["limit"] == 10
    assert params["offset"] == 0
    assert params["count"] == len(users)
    assert params["cached"] is False
    assert params["duration_ms"] >= 0


async def test_second_identical_call_is_served_from_cache(use_case, repository, telemetry):
    first = await use_case.execute_page(10, 0)
    second = await use_case.execute_page(10, 0)
    assert first == second
    assert [u.id for u in first] == [u.id for u in second]
    assert len(repository.calls) == 1
    assert telemetry.names() == ["users_retrieved", "users_cache_hit"]
    assert telemetry.named("users_cache_hit")[0]["count"] == 3


async def test_different_page_parameters_do_not_share_cache(use_case, repository):
    await use_case.execute_page(10, 0)
    await use_case.execute_page(10, 1)
    await use_case.execute_page(5, 0)
    assert len(repository.calls) == 3


async def test_page_cache_entry_expires(use_case, repository, clock):
    await use_case.execute_page(10, 0)
    clock.advance(300)
    await use_case.execute_page(10, 0)
    assert len(repository.calls) == 2


async def test_page_cache_ttl_is_configurable(repository):
    cache = DictCache()
    use_case = GetUsersUseCase(repository, cache=cache, page_cache_ttl_seconds=42)
    await use_case.execute_page(10, 0)
    assert cache.ttls == {"users_10_0": 42}


async def test_default_page_ttl_is_five_minutes(repository):
    cache = DictCache()
    await GetUsersUseCase(repository, cache=cache).execute_page(10, 0)
    assert cache.ttls["users_10_0"] == 300


async def test_mutating_returned_list_does_not_touch_cache(use_case):
    users = await use_case.execute_page(10, 0)
    users.clear()
    assert len(await use_case.execute_page(10, 0)) == 3


@pytest.mark.parametrize("limit", [0, -5, 1001])
async def test_invalid_limit_fails_before_io(use_case, repository, telemetry, limit):
    with pytest.raises(InvalidLimitError):
        await use_case.execute_page(limit, 0)
    assert repository.calls == []
    assert telemetry.names() == ["users_retrieval_error"]


async def test_negative_offset_fails_before_io(use_case, repository):
    with pytest.raises(InvalidOffsetError):
        await use_case.execute_page(10, -1)
    assert repository.calls == []


async def test_without_cache_every_call_fetches(repository):
    use_case = GetUsersUseCase(repository)
    await use_case.execute_page(10, 0)
    await use_case.execute_page(10, 0)
    assert len(repository.calls) == 2


async def test_pagination_passes_limit_and_offset_through():
    repo = FakeUserRepository([make_user(f"u-{i}") for i in range(10)])
    users = await GetUsersUseCase(repo).execute_page(3, 4)
    assert [u.id for u in users] == ["u-4", "u-5", "u-6"]


class _SizedCache(DictCache):
    """Falsy while empty."""

    def __len__(self):
        return len(self.store)


@pytest.mark.parametrize("cached", [
    ["not", "users"],
    [{"id": "u-1", "name": "Alice"}],
    [make_user("u-1"), "stray"],
    "users",
])
async def test_cached_page_of_wrong_shape_is_a_miss(repository, telemetry, cached):
    cache = DictCache()
    cache.store["users_10_0"] = cached
    use_case = GetUsersUseCase(repository, cache=cache, telemetry=telemetry)
    users = await use_case.execute_page(10, 0)
    assert [u.id for u in users] == ["u-3", "u-1", "u-2"]
    assert len(repository.calls) == 1
    assert telemetry.names() == ["users_retrieved"]
    assert cache.store["users_10_0"] == tuple(users)


async def test_wrong_shape_page_entry_is_refetched_on_options_path(repository):
    cache = DictCache()
    cache.store["users_10_0"] = [{"id": "u-1"}]
    result = await GetUsersUseCase(repository, cache=cache).execute_options(
        GetUsersOptions(limit=10, include_active_only=True),
    )
    assert [u.id for u in result.users] == ["u-3", "u-1"]
    assert len(repository.calls) == 1


async def test_empty_sized_cache_is_kept(repository):
    cache = _SizedCache()
    use_case = GetUsersUseCase(repository, cache=cache)
    assert use_case.cache is cache
    await use_case.execute_page(10, 0)
    await use_case.execute_page(10, 0)
    assert len(repository.calls) == 1
