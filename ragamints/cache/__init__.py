"""Caching layer.

Provides:
    - KVStore, InMemoryStore, FileStore: durable string key/value stores
    - Cache: JSON values, size-driven compression and TTL expiry over a store
    - keys: versioned cache key construction per endpoint
"""

from .cache import TTL, Cache, CacheConfig, CacheEntry, canonical_json, stable_hash
from .keys import KEY_SCHEMA_VERSION, oembed_key, user_media_recent_key, user_search_key
from .store import FileStore, InMemoryStore, KVStore

__all__ = [
    "Cache",
    "CacheConfig",
    "CacheEntry",
    "TTL",
    "canonical_json",
    "stable_hash",
    "KVStore",
    "InMemoryStore",
    "FileStore",
    "KEY_SCHEMA_VERSION",
    "oembed_key",
    "user_search_key",
    "user_media_recent_key",
]
