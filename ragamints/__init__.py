"""Ragamints - Instagram media fetching with a pagination-aware cache."""

from .cache import TTL, Cache, CacheConfig, FileStore, InMemoryStore, KVStore, stable_hash
from .core import (
    CacheDisabledError,
    CacheError,
    CacheMissError,
    RagamintsError,
    RemoteFetchError,
    Settings,
    StoreUnavailableError,
)
from .models import RecentMediaOptions
from .runtime import (
    ConcurrentIterationController,
    FetcherPolicy,
    IterationState,
    Page,
    PaginatedFetcher,
    RawPage,
    RecentMediaIterator,
    for_each_recent_media,
    get_recent_media,
)
from .instagram import InstagramClient

__version__ = "0.1.0"

__all__ = [
    "TTL",
    "Cache",
    "CacheConfig",
    "KVStore",
    "InMemoryStore",
    "FileStore",
    "stable_hash",
    "RagamintsError",
    "CacheError",
    "CacheDisabledError",
    "CacheMissError",
    "StoreUnavailableError",
    "RemoteFetchError",
    "Settings",
    "RecentMediaOptions",
    "Page",
    "RawPage",
    "FetcherPolicy",
    "PaginatedFetcher",
    "RecentMediaIterator",
    "get_recent_media",
    "ConcurrentIterationController",
    "IterationState",
    "for_each_recent_media",
    "InstagramClient",
]
