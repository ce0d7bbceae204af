"""Cache-aware front-end for the raw media API.

Architecture:
    PaginatedFetcher wraps the three endpoint shapes of the raw API with the
    cache:
    - single-key lookup (oembed): cached on success with a long TTL
    - search (user_search): cached only when non-empty
    - listing (user_media_recent): page-size normalized, accumulated across
      pages, cached as one snapshot of the whole traversal

Design Decisions:
    - Cache errors (miss, disabled, unavailable) always fall through to the
      raw call; a failing cache never fails a fetch.
    - Raw failures propagate unmodified and are never cached.
    - The listing snapshot stops growing once the originally requested count
      is reached. A later request for more items than a previous snapshot
      holds misses and refetches from scratch rather than resuming from the
      cached prefix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..cache.cache import Cache
from ..cache.keys import oembed_key, user_media_recent_key, user_search_key
from ..core.exceptions import CacheError
from ..instagram.constants import CACHE_TTL, PAGE_SIZE
from .pagination import Page, RawMediaAPI, RawPage, normalize_count
from .telemetry import log_listing_cached, log_page_fetched

logger = logging.getLogger(__name__)

_MISS = object()


@dataclass(frozen=True)
class FetcherPolicy:
    """Page size and TTLs (in milliseconds) per endpoint."""

    page_size: int = PAGE_SIZE["user_media_recent"]
    lookup_ttl: int = CACHE_TTL["oembed"]
    search_ttl: int = CACHE_TTL["user_search"]
    listing_ttl: int = CACHE_TTL["user_media_recent"]

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError("page_size must be a positive integer")


class PaginatedFetcher:
    """Serves raw API calls from cache when a prior fetch satisfies them."""

    def __init__(
        self,
        api: RawMediaAPI,
        cache: Cache,
        *,
        policy: FetcherPolicy | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            api: Raw remote API
            cache: Cache shared by all endpoints
            policy: Page size and TTLs (defaults to the Instagram values)
        """
        self._api = api
        self._cache = cache
        self.policy = policy or FetcherPolicy()

    @property
    def cache(self) -> Cache:
        return self._cache

    async def _cached(self, key: str) -> Any:
        try:
            return await self._cache.get(key)
        except CacheError as e:
            logger.debug(f"Cache lookup fell through for {key}: {e.message}")
            return _MISS

    async def _store(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._cache.set(key, value, ttl)
        except CacheError as e:
            logger.debug(f"Cache write skipped for {key}: {e.message}")

    async def fetch(self, media_url: str) -> dict[str, Any]:
        """Resolve a media URL to its oembed object, with cache."""
        key = oembed_key(media_url)
        cached = await self._cached(key)
        if cached is not _MISS:
            return cached
        oembed = await self._api.oembed(media_url)
        await self._store(key, oembed, self.policy.lookup_ttl)
        return oembed

    async def search(
        self, user_name: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Search users by name, with cache.

        Empty results are not cached so a user that cannot be found yet is
        looked up again next time.
        """
        params = dict(params or {})
        key = user_search_key(user_name, params)
        cached = await self._cached(key)
        if cached is not _MISS:
            return cached
        users = await self._api.user_search(user_name, params)
        if users:
            await self._store(key, users, self.policy.search_ttl)
        return users

    async def list_page(self, user_id: str, params: dict[str, Any] | None = None) -> Page:
        """Fetch the first page of a user's recent media, with cache.

        Args:
            user_id: User ID
            params: Listing parameters (count, min_id, max_id, min_timestamp,
                max_timestamp)

        Returns:
            First page; its ``next`` continues the traversal. Pages served
            from cache hold the whole (possibly truncated) result and are
            terminal.
        """
        params = dict(params or {})
        requested = params.get("count")
        normalized = dict(params)
        if requested:
            normalized["count"] = normalize_count(requested, self.policy.page_size)

        key = user_media_recent_key(user_id, normalized)
        cached = await self._cached(key)
        if cached is not _MISS:
            items = list(cached)
            if requested and len(items) > requested:
                items = items[:requested]
            log_page_fetched(
                endpoint_id="user_media_recent",
                owner_id=user_id,
                page_index=0,
                items=len(items),
                has_next=False,
                from_cache=True,
            )
            return Page(items=items)

        accumulated: list[Any] = []
        page_index = 0

        async def consume(raw: RawPage) -> Page:
            nonlocal page_index
            accumulated.extend(raw.items)
            if raw.next is None or (requested and len(accumulated) >= requested):
                # Full overwrite; a later exhausted traversal replaces this one
                await self._store(key, list(accumulated), self.policy.listing_ttl)
                log_listing_cached(
                    endpoint_id="user_media_recent",
                    key=key,
                    total_items=len(accumulated),
                    ttl=self.policy.listing_ttl,
                )

            log_page_fetched(
                endpoint_id="user_media_recent",
                owner_id=user_id,
                page_index=page_index,
                items=len(raw.items),
                has_next=raw.next is not None,
            )
            page_index += 1

            if raw.next is None:
                return Page(items=list(raw.items))
            raw_next = raw.next

            async def next_page() -> Page:
                return await consume(await raw_next())

            return Page(items=list(raw.items), next=next_page)

        return await consume(await self._api.user_media_recent(user_id, normalized))
