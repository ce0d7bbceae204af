"""Shared fixtures for integration tests."""

import os

import pytest
import pytest_asyncio

from ragamints.cache import Cache, FileStore
from ragamints.core import Settings
from ragamints.instagram import InstagramClient
from ragamints.runtime import PaginatedFetcher

# Skip all integration tests unless RUN_RAGAMINTS_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_RAGAMINTS_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_RAGAMINTS_NETWORK_TESTS=1 to run",
)


@pytest.fixture
def settings():
    settings = Settings()
    if not settings.access_token:
        pytest.skip("Requires an Instagram access token")
    return settings


@pytest_asyncio.fixture
async def fetcher(settings, tmp_path):
    async with InstagramClient(settings.access_token, timeout=settings.request_timeout) as client:
        yield PaginatedFetcher(client, Cache(FileStore(tmp_path)))
