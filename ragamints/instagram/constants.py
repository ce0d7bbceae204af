"""Shared Instagram API constants.

This module centralizes URLs, page sizes and cache TTLs used by the REST
client and the paginated fetcher.
"""

from __future__ import annotations

from ragamints.cache.cache import TTL
from ragamints.core.config import ACCESS_TOKEN_ENV_VAR

API_BASE_URL = "https://api.instagram.com/v1"
OEMBED_URL = "https://api.instagram.com/oembed"

RESOLUTIONS = {
    "high": "high_resolution",
    "standard": "standard_resolution",
    "low": "low_resolution",
    "thumbnail": "thumbnail",
}

# Longer for rarely-changing lookups, shorter for listings
CACHE_TTL = {
    "oembed": 2 * TTL.DAY,
    "user_search": TTL.WEEK,
    "user_media_recent": 10 * TTL.MINUTE,
}

# Natural page size of each paginated endpoint
PAGE_SIZE = {
    "user_media_recent": 33,
}

__all__ = [
    "ACCESS_TOKEN_ENV_VAR",
    "API_BASE_URL",
    "OEMBED_URL",
    "RESOLUTIONS",
    "CACHE_TTL",
    "PAGE_SIZE",
]
