"""Custom exception hierarchy.

Cache-layer errors (``CacheError`` and subclasses) are the normal signal for
falling through to an uncached fetch and are handled where they are raised.
Remote errors propagate to the top-level caller unmodified.
"""

from __future__ import annotations

from .constants import ERROR_PREFIX


class RagamintsError(Exception):
    """Base exception for all library errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{ERROR_PREFIX}{self.message}"


class CacheError(RagamintsError):
    """Base class for cache-layer errors."""

    pass


class CacheDisabledError(CacheError):
    """Cache operation attempted while the cache is disabled."""

    def __init__(self, message: str = "Cache is disabled.") -> None:
        super().__init__(message)


class StoreUnavailableError(CacheError):
    """The underlying key/value store is not usable."""

    def __init__(self, message: str = "Local storage is not supported.") -> None:
        super().__init__(message)


class CacheMissError(CacheError):
    """Key is absent or its entry has expired.

    Callers must not distinguish between the two.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"No cache entry for {key}")
        self.key = key


class RemoteFetchError(RagamintsError):
    """Error from the remote API or its transport."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
