"""Cache key construction, one function per endpoint.

Each key embeds ``KEY_SCHEMA_VERSION``. Changing which parameters feed a key
(or how they are normalized) must come with a version bump so that stale
entries are simply never looked up again.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .cache import stable_hash

KEY_SCHEMA_VERSION = 1


def _prefix(endpoint: str) -> str:
    return f"ig_{endpoint}_v{KEY_SCHEMA_VERSION}"


def oembed_key(media_url: str) -> str:
    """Key for an oembed lookup of media_url."""
    return f"{_prefix('oembed')}_{stable_hash(media_url)}"


def user_search_key(user_name: str, params: Mapping[str, Any]) -> str:
    """Key for a user search by name."""
    return f"{_prefix('user_search')}_{user_name}_{stable_hash(dict(params))}"


def user_media_recent_key(user_id: str, params: Mapping[str, Any]) -> str:
    """Key for a recent media listing.

    params must already be normalized (see ``normalize_count``).
    """
    return f"{_prefix('user_media_recent')}_{user_id}_{stable_hash(dict(params))}"
