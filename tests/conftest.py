"""Root conftest - shared test configuration."""

import os

import pytest

from userquery.config import get_settings

# Ensure tests don't pick up a developer's USERQUERY_* overrides
for _key in [k for k in os.environ if k.upper().startswith("USERQUERY_")]:
    del os.environ[_key]


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
