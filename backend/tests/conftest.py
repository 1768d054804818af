"""
Main pytest configuration for all backend tests.

Fixtures and configuration for cache, fetcher and API tests.
"""

import os
from typing import Callable

import httpx
import pytest

# Set test environment variables before importing application modules
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ.pop("REDIS_URL", None)

from tenacity import wait_none

from imageinfo.infrastructure.repositories.cache_repository import (
    BoundedImageInfoCache,
)
from imageinfo.infrastructure.storage.memory_storage import InMemoryKeyValueStorage
from imageinfo.services.fetch.file_info_fetcher import FileInfoFetcher

from tests.helpers import TEST_STORAGE_KEY, FakeClock, ScriptedTransport


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def cache(storage, clock) -> BoundedImageInfoCache:
    """Cache with the default capacity of 30 entries."""
    return BoundedImageInfoCache(
        storage, max_entries=30, storage_key=TEST_STORAGE_KEY, clock=clock
    )


@pytest.fixture
def make_fetcher() -> Callable[..., FileInfoFetcher]:
    """Build a fetcher backed by a scripted transport, without retry delays."""

    def _make(transport: ScriptedTransport, max_retries: int = 5) -> FileInfoFetcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        return FileInfoFetcher(client=client, max_retries=max_retries, wait=wait_none())

    return _make


# Test markers and configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "redis: marks tests as Redis-related")
    config.addinivalue_line("markers", "api: marks tests as API tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location."""
    for item in items:
        if "redis" in item.nodeid:
            item.add_marker(pytest.mark.redis)
        if "/api/" in item.nodeid:
            item.add_marker(pytest.mark.api)
