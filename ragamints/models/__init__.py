"""Data models.

All models are immutable pydantic v2 models (frozen=True). Media items
themselves are kept as the plain JSON dicts returned by the API so that
they round-trip through the cache unchanged.
"""

from .options import LISTING_FIELDS, RecentMediaOptions

__all__ = ["LISTING_FIELDS", "RecentMediaOptions"]
