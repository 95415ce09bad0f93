"""Root conftest — shared test configuration."""

import os

import pytest

# Ensure tests never reach a real document store or inherit a production environment
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/directory_test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from directory_api.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are re-read from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
