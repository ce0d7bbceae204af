"""Core components."""

from .config import (
    ACCESS_TOKEN_ENV_VAR,
    CACHE_DIR_ENV_VAR,
    CACHE_DISABLED_ENV_VAR,
    REQUEST_TIMEOUT_ENV_VAR,
    Settings,
    default_cache_dir,
)
from .constants import ERROR_PREFIX, SOFTWARE
from .exceptions import (
    CacheDisabledError,
    CacheError,
    CacheMissError,
    RagamintsError,
    RemoteFetchError,
    StoreUnavailableError,
)

__all__ = [
    "ACCESS_TOKEN_ENV_VAR",
    "CACHE_DIR_ENV_VAR",
    "CACHE_DISABLED_ENV_VAR",
    "REQUEST_TIMEOUT_ENV_VAR",
    "ERROR_PREFIX",
    "SOFTWARE",
    "Settings",
    "default_cache_dir",
    "RagamintsError",
    "CacheError",
    "CacheDisabledError",
    "CacheMissError",
    "StoreUnavailableError",
    "RemoteFetchError",
]
