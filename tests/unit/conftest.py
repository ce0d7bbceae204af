"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from ragamints.cache import Cache, InMemoryStore
from ragamints.runtime import FetcherPolicy, PaginatedFetcher, RawPage

PAGE_SIZE = 33


class FakeClock:
    """Controllable epoch-milliseconds clock."""

    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeMediaAPI:
    """Raw media API returning full pages of numbered media.

    Args:
        pages: Number of pages available (None for indefinitely)
        page_size: Items per page
        fail_on_page: Zero-based page index raising RuntimeError("boom")
    """

    def __init__(
        self,
        *,
        pages: int | None = None,
        page_size: int = PAGE_SIZE,
        fail_on_page: int | None = None,
        users: list[dict[str, Any]] | None = None,
        oembed_result: dict[str, Any] | None = None,
    ) -> None:
        self.pages = pages
        self.page_size = page_size
        self.fail_on_page = fail_on_page
        self.users = users if users is not None else []
        self.oembed_result = oembed_result or {"media_id": "977399508246039160_26667401"}
        self.media_calls: list[tuple[str, dict[str, Any]]] = []
        self.page_fetches = 0
        self.search_calls: list[tuple[str, dict[str, Any]]] = []
        self.oembed_calls: list[str] = []

    async def _page(self, index: int) -> RawPage:
        self.page_fetches += 1
        if self.fail_on_page == index:
            raise RuntimeError("boom")
        items = [{"id": f"{index}_{i}", "index": index * self.page_size + i} for i in range(self.page_size)]
        if self.pages is not None and index + 1 >= self.pages:
            return RawPage(items=items)

        async def next_page() -> RawPage:
            return await self._page(index + 1)

        return RawPage(items=items, next=next_page)

    async def user_media_recent(self, user_id: str, params: dict[str, Any]) -> RawPage:
        self.media_calls.append((user_id, dict(params)))
        return await self._page(0)

    async def user_search(self, user_name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        self.search_calls.append((user_name, dict(params)))
        return list(self.users)

    async def oembed(self, media_url: str) -> dict[str, Any]:
        self.oembed_calls.append(media_url)
        return dict(self.oembed_result)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def cache(store: InMemoryStore, clock: FakeClock) -> Cache:
    return Cache(store, clock=clock)


@pytest.fixture
def page_size() -> int:
    return PAGE_SIZE


@pytest.fixture
def fake_api():
    """Factory building FakeMediaAPI instances."""
    return FakeMediaAPI


@pytest.fixture
def make_fetcher(cache: Cache):
    """Factory building a PaginatedFetcher over a fake API and the shared cache."""

    def _make(api: FakeMediaAPI) -> PaginatedFetcher:
        return PaginatedFetcher(api, cache, policy=FetcherPolicy(page_size=api.page_size))

    return _make
