"""Unit tests for PaginatedFetcher."""

import pytest

from ragamints.cache import (
    TTL,
    Cache,
    FileStore,
    InMemoryStore,
    user_media_recent_key,
    user_search_key,
)
from ragamints.runtime import FetcherPolicy, PaginatedFetcher, normalize_count


class TestNormalizeCount:
    """Test count normalization."""

    @pytest.mark.parametrize(
        "count,expected",
        [(1, 33), (2, 33), (33, 33), (34, 66), (49, 66), (66, 66), (67, 99)],
    )
    def test_rounds_up_to_page_size(self, count, expected):
        assert normalize_count(count, 33) == expected

    def test_rejects_invalid_page_size(self):
        with pytest.raises(ValueError):
            normalize_count(10, 0)
        with pytest.raises(ValueError):
            FetcherPolicy(page_size=0)


class TestListPage:
    """Test the cached listing endpoint."""

    @pytest.mark.asyncio
    async def test_counts_in_same_bucket_share_one_request(self, fake_api, make_fetcher, page_size):
        """Test small counts all normalize to one upstream request."""
        api = fake_api()
        fetcher = make_fetcher(api)

        page = await fetcher.list_page("1", {"count": 2})
        assert api.media_calls == [("1", {"count": page_size})]
        assert len(page.items) == page_size
        assert page.next is not None

        for count in (3, 15):
            page = await fetcher.list_page("1", {"count": count})
            assert [item["id"] for item in page.items] == [f"0_{i}" for i in range(count)]
            assert page.next is None

        assert len(api.media_calls) == 1
        assert api.page_fetches == 1

    @pytest.mark.asyncio
    async def test_snapshot_cached_when_count_reached(
        self, fake_api, make_fetcher, cache, store, page_size
    ):
        """Test the accumulated pages are cached once the request is satisfied."""
        api = fake_api()
        fetcher = make_fetcher(api)
        count = page_size + page_size // 2
        key = user_media_recent_key("1", {"count": page_size * 2})

        first = await fetcher.list_page("1", {"count": count})
        assert api.media_calls == [("1", {"count": page_size * 2})]
        # First page alone does not satisfy the request
        assert key not in store

        second = await first.next()
        assert len(second.items) == page_size
        cached = await cache.get(key)
        assert len(cached) == page_size * 2
        assert cached == first.items + second.items

        page = await fetcher.list_page("1", {"count": count})
        assert len(page.items) == count
        assert page.next is None
        assert api.page_fetches == 2

    @pytest.mark.asyncio
    async def test_exhausted_listing_cached(self, fake_api, make_fetcher, page_size):
        """Test a listing the API reports as complete is cached."""
        api = fake_api(pages=1)
        fetcher = make_fetcher(api)
        params = {"min_id": "0_0", "max_id": "0_32"}

        first = await fetcher.list_page("1", params)
        assert first.next is None

        again = await fetcher.list_page("1", params)
        assert again.items == first.items
        assert again.next is None
        assert api.media_calls == [("1", params)]

    @pytest.mark.asyncio
    async def test_cache_hit_truncates(self, fake_api, make_fetcher):
        """Test a larger cached snapshot is cut down to the requested count."""
        api = fake_api(pages=1)
        fetcher = make_fetcher(api)
        await fetcher.list_page("1", {"count": 30})

        page = await fetcher.list_page("1", {"count": 5})
        assert len(page.items) == 5
        assert len(api.media_calls) == 1

    @pytest.mark.asyncio
    async def test_first_page_failure_propagates(self, fake_api, make_fetcher):
        """Test a raw failure propagates unmodified and is not cached."""
        api = fake_api(fail_on_page=0)
        fetcher = make_fetcher(api)

        with pytest.raises(RuntimeError, match="boom"):
            await fetcher.list_page("1", {"count": 10})
        with pytest.raises(RuntimeError, match="boom"):
            await fetcher.list_page("1", {"count": 10})
        assert len(api.media_calls) == 2

    @pytest.mark.asyncio
    async def test_partial_failure_not_cached(self, fake_api, make_fetcher, page_size):
        """Test a traversal failing mid-way leaves no snapshot behind."""
        api = fake_api(fail_on_page=1)
        fetcher = make_fetcher(api)

        first = await fetcher.list_page("1", {"count": page_size + 1})
        with pytest.raises(RuntimeError, match="boom"):
            await first.next()

        await fetcher.list_page("1", {"count": page_size + 1})
        assert len(api.media_calls) == 2

    @pytest.mark.asyncio
    async def test_expired_snapshot_refetched(self, fake_api, make_fetcher, clock):
        api = fake_api(pages=1)
        fetcher = make_fetcher(api)
        await fetcher.list_page("1", {"count": 5})

        clock.advance(fetcher.policy.listing_ttl + 1)
        await fetcher.list_page("1", {"count": 5})
        assert len(api.media_calls) == 2

    @pytest.mark.asyncio
    async def test_larger_count_misses_smaller_snapshot(self, fake_api, make_fetcher, page_size):
        """Test a snapshot is not extended by a later, larger request.

        The first request caches one page; asking for more items uses another
        key and starts over from the first page.
        """
        api = fake_api()
        fetcher = make_fetcher(api)
        await fetcher.list_page("1", {"count": 2})

        page = await fetcher.list_page("1", {"count": page_size + 7})
        assert page.items[0]["id"] == "0_0"
        assert api.media_calls == [("1", {"count": page_size}), ("1", {"count": page_size * 2})]

    @pytest.mark.asyncio
    async def test_disabled_cache_falls_through(self, fake_api, make_fetcher, cache):
        """Test a disabled cache never fails a fetch."""
        api = fake_api(pages=1)
        fetcher = make_fetcher(api)
        cache.disable()

        for _ in range(2):
            page = await fetcher.list_page("1", {"count": 5})
            assert len(page.items) == api.page_size
        assert len(api.media_calls) == 2

    @pytest.mark.asyncio
    async def test_unavailable_store_falls_through(self, fake_api):
        api = fake_api(pages=1)
        fetcher = PaginatedFetcher(api, Cache(InMemoryStore(enabled=False)))

        await fetcher.list_page("1", {"count": 5})
        await fetcher.list_page("1", {"count": 5})
        assert len(api.media_calls) == 2


class TestSearch:
    """Test the cached search endpoint."""

    @pytest.mark.asyncio
    async def test_non_empty_results_cached(self, fake_api, make_fetcher):
        users = [{"id": "26667401", "username": "nasa"}]
        api = fake_api(users=users)
        fetcher = make_fetcher(api)

        assert await fetcher.search("nasa", {"count": 1}) == users
        assert await fetcher.search("nasa", {"count": 1}) == users
        assert api.search_calls == [("nasa", {"count": 1})]

    @pytest.mark.asyncio
    async def test_empty_results_not_cached(self, fake_api, make_fetcher):
        """Test a user not found yet is searched again next time."""
        api = fake_api(users=[])
        fetcher = make_fetcher(api)

        assert await fetcher.search("nobody", {"count": 1}) == []
        assert await fetcher.search("nobody", {"count": 1}) == []
        assert len(api.search_calls) == 2

    @pytest.mark.asyncio
    async def test_search_results_expire(self, fake_api, make_fetcher, clock):
        api = fake_api(users=[{"id": "1"}])
        fetcher = make_fetcher(api)
        await fetcher.search("foo")

        clock.advance(TTL.WEEK + 1)
        await fetcher.search("foo")
        assert len(api.search_calls) == 2


class TestFetch:
    """Test the cached oembed lookup."""

    @pytest.mark.asyncio
    async def test_oembed_cached(self, fake_api, make_fetcher):
        api = fake_api()
        fetcher = make_fetcher(api)
        url = "https://instagram.com/p/2Qams1JYsp/"

        first = await fetcher.fetch(url)
        second = await fetcher.fetch(url)
        assert first == second == {"media_id": "977399508246039160_26667401"}
        assert api.oembed_calls == [url]

    @pytest.mark.asyncio
    async def test_oembed_failure_not_cached(self, fake_api, make_fetcher):
        api = fake_api()
        fetcher = make_fetcher(api)
        calls = 0

        async def failing_oembed(media_url):
            nonlocal calls
            calls += 1
            raise RuntimeError("boom")

        api.oembed = failing_oembed
        for _ in range(2):
            with pytest.raises(RuntimeError, match="boom"):
                await fetcher.fetch("https://instagram.com/p/x/")
        assert calls == 2

    def test_default_policy(self):
        policy = FetcherPolicy()
        assert policy.page_size == 33
        assert policy.lookup_ttl == 2 * TTL.DAY
        assert policy.search_ttl == TTL.WEEK
        assert policy.listing_ttl == 10 * TTL.MINUTE


class TestStoreFailures:
    """Test store I/O failures never fail a fetch."""

    @pytest.mark.asyncio
    async def test_failing_write_still_returns_page(self, fake_api, tmp_path):
        directory = tmp_path / "cache"
        api = fake_api(pages=1)
        fetcher = PaginatedFetcher(api, Cache(FileStore(directory)))
        directory.rmdir()

        page = await fetcher.list_page("1", {"count": 2})

        assert len(page.items) == api.page_size
        assert page.next is None

    @pytest.mark.asyncio
    async def test_undecodable_entry_refetched_and_repaired(self, fake_api, tmp_path):
        """Test a corrupted search entry is fetched again, then served from cache."""
        store = FileStore(tmp_path)
        store.path_for(user_search_key("bob", {})).write_bytes(b"\xff\xfe\x00garbage")
        users = [{"id": "42", "username": "bob"}]
        api = fake_api(users=users)
        fetcher = PaginatedFetcher(api, Cache(store))

        assert await fetcher.search("bob", {}) == users
        assert await fetcher.search("bob", {}) == users
        assert len(api.search_calls) == 1
