"""Service test fixtures - fake repository, recording telemetry, in-memory cache.

Invariants:
    - Every test gets fresh collaborators (no state leaks between tests)
    - use_case is wired with all four collaborators; tests that need a bare
      configuration construct GetUsersUseCase(repository) themselves
"""

import pytest

from userquery.infrastructure.memory_cache import MemoryCache
from userquery.services.get_users import GetUsersUseCase

from tests.factories import FakeClock, scenario_users
from tests.services.fake_collaborators import FakeUserRepository, RecordingTelemetry


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository():
    return FakeUserRepository(scenario_users())


@pytest.fixture
def telemetry():
    return RecordingTelemetry()


@pytest.fixture
def cache(clock):
    return MemoryCache(max_entries=64, clock=clock)


@pytest.fixture
def use_case(repository, telemetry, cache):
    return GetUsersUseCase(repository, cache=cache, telemetry=telemetry)
