"""Root conftest — shared test configuration."""

import os

import pytest

# Keep test runs independent of a developer's .env
os.environ.setdefault("PRAYER_LOG_FORMAT", "text")
os.environ.setdefault("PRAYER_LOG_LEVEL", "WARNING")

from config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; tests that patch env need a clean slate."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
