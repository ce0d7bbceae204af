"""Cache with JSON serialization, size-driven compression and TTL expiry.

Architecture:
    Cache wraps a KVStore. Values go through JSON on the way in and out, so
    anything cached must be JSON-serializable; the cache never inspects the
    value beyond that.

Design Notes:
    - Compression is evaluated on every set. The compressed form is kept only
      when it is strictly smaller than the raw form once encoded in the
      store's character encoding. Small payloads stay raw, large listings end
      up compressed.
    - The raw form is stored as a JSON object, the compressed form as a JSON
      string literal; get tells them apart by decoded type.
    - Expiry is lazy: an expired entry is removed by the get that finds it.
    - The enabled flag belongs to the instance, so independent caches can
      coexist (one per test, for instance).

Cache Key Format:
    See ``ragamints.cache.keys`` for the per-endpoint key functions.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import lzma
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, NoReturn

from ..core.exceptions import CacheDisabledError, CacheMissError, StoreUnavailableError
from .store import KVStore

logger = logging.getLogger(__name__)


class TTL:
    """Convenient time-to-live values, in milliseconds."""

    MINUTE = 60 * 1000
    HOUR = 60 * MINUTE
    DAY = 24 * HOUR
    WEEK = 7 * DAY


@dataclass(frozen=True)
class CacheConfig:
    """Configuration for a cache instance."""

    # Whether the cache starts enabled
    enabled: bool = True

    # Encoding used to compare raw and compressed sizes
    encoding: str = "utf-8"


@dataclass
class CacheEntry:
    """A single cache entry.

    ``ttl`` and ``expire`` are either both set or both None. Entries without
    them never expire.
    """

    value: Any
    ttl: int | None = None
    expire: int | None = None

    @classmethod
    def create(cls, value: Any, ttl: int | None, now_ms: int) -> CacheEntry:
        if ttl and ttl > 0:
            return cls(value=value, ttl=ttl, expire=now_ms + ttl)
        return cls(value=value)

    def is_expired(self, now_ms: int) -> bool:
        if self.expire is None:
            return False
        return now_ms > self.expire

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"value": self.value}
        if self.ttl is not None:
            data["ttl"] = self.ttl
            data["expire"] = self.expire
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        return cls(value=data.get("value"), ttl=data.get("ttl"), expire=data.get("expire"))


def canonical_json(value: Any) -> str:
    """Serialize value with sorted keys and no insignificant whitespace."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def stable_hash(value: Any) -> str:
    """Compute a field-order independent MD5 hex digest of value.

    Examples:
        >>> stable_hash({"foo": "bar", "bill": 1, "meh": True})
        'd2415012f4d369bd4a9ce0f4eda3c0d4'
    """
    return hashlib.md5(canonical_json(value).encode("utf-8")).hexdigest()


def _now_ms() -> int:
    return int(time.time() * 1000)


class Cache:
    """Key/value cache over a KVStore.

    Every operation fails with CacheDisabledError while the cache is disabled
    and with StoreUnavailableError when the store reports it is unusable; in
    both cases the store is not touched. Store I/O errors are raised as
    StoreUnavailableError too, and entries that cannot be decoded are dropped
    and reported as a miss.
    """

    TTL = TTL

    def __init__(
        self,
        store: KVStore,
        config: CacheConfig | None = None,
        *,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize cache.

        Args:
            store: Backing key/value store
            config: Cache configuration
            clock: Returns the current time in epoch milliseconds
        """
        self.config = config or CacheConfig()
        self._store = store
        self._enabled = self.config.enabled
        self._clock = clock or _now_ms

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def _check_usable(self) -> None:
        if not self._enabled:
            raise CacheDisabledError()
        if not self._store.enabled:
            raise StoreUnavailableError()

    @staticmethod
    def _unavailable(error: Exception) -> StoreUnavailableError:
        logger.warning(f"Cache store failed: {error!r}")
        return StoreUnavailableError(str(error))

    async def _call_store(self, operation: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        try:
            return await operation(*args)
        except (OSError, UnicodeError) as e:
            raise self._unavailable(e) from e

    async def _drop_unreadable(self, key: str, error: Exception) -> NoReturn:
        logger.warning(f"Dropping unreadable cache entry {key}: {error}")
        await self._call_store(self._store.remove, key)
        raise CacheMissError(key) from error

    def compress(self, text: str) -> str:
        """Compress a serialized entry into a base64 string."""
        return base64.b64encode(lzma.compress(text.encode("utf-8"))).decode("ascii")

    def decompress(self, text: str) -> str:
        """Decompress a string produced by compress."""
        return lzma.decompress(base64.b64decode(text)).decode("utf-8")

    def _byte_length(self, text: str) -> int:
        return len(text.encode(self.config.encoding))

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value under key.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time to live in milliseconds; None or <= 0 never expires

        Returns:
            True once stored
        """
        self._check_usable()
        entry = CacheEntry.create(value, ttl, self._clock())
        serialized = json.dumps(entry.to_dict(), ensure_ascii=False)
        compressed = self.compress(serialized)
        use_compression = self._byte_length(serialized) > self._byte_length(compressed)
        await self._call_store(
            self._store.set, key, json.dumps(compressed) if use_compression else serialized
        )
        logger.debug(
            "cache_set",
            extra={"key": key, "ttl": entry.ttl, "compressed": use_compression},
        )
        return True

    async def get(self, key: str) -> Any:
        """Get the value stored under key.

        Raises:
            CacheMissError: If key is absent, expired or unreadable
            StoreUnavailableError: If the store cannot be read
        """
        self._check_usable()
        try:
            stored = await self._store.get(key)
        except UnicodeDecodeError as e:
            await self._drop_unreadable(key, e)
        except OSError as e:
            raise self._unavailable(e) from e
        if stored is None:
            logger.debug("cache_miss", extra={"key": key})
            raise CacheMissError(key)

        try:
            data = json.loads(stored)
            # A JSON string is the compressed representation of the entry
            if isinstance(data, str):
                data = json.loads(self.decompress(data))
            entry = CacheEntry.from_dict(data)
        except (ValueError, AttributeError, lzma.LZMAError) as e:
            await self._drop_unreadable(key, e)

        if entry.is_expired(self._clock()):
            await self.remove(key)
            logger.debug("cache_expired", extra={"key": key})
            raise CacheMissError(key)

        logger.debug("cache_hit", extra={"key": key})
        return entry.value

    async def remove(self, key: str) -> bool:
        """Remove key; removing an absent key succeeds."""
        self._check_usable()
        await self._call_store(self._store.remove, key)
        return True

    async def clear(self) -> bool:
        """Remove all entries."""
        self._check_usable()
        await self._call_store(self._store.clear)
        logger.info("Cache cleared")
        return True

    @staticmethod
    def hash(value: Any) -> str:
        """Compute a stable hash of value (see stable_hash)."""
        return stable_hash(value)
