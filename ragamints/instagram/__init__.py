"""Instagram adapter: REST client and media/user helpers."""

from .constants import API_BASE_URL, CACHE_TTL, OEMBED_URL, PAGE_SIZE, RESOLUTIONS
from .client import InstagramClient
from .media import (
    create_media_file_name,
    is_media_id,
    is_media_url,
    log_media,
    media_resolution_url,
    media_excerpt,
    resolve_media_id,
)
from .user import is_user_id, resolve_user_id

__all__ = [
    "API_BASE_URL",
    "CACHE_TTL",
    "OEMBED_URL",
    "PAGE_SIZE",
    "RESOLUTIONS",
    "InstagramClient",
    "create_media_file_name",
    "is_media_id",
    "is_media_url",
    "log_media",
    "media_resolution_url",
    "media_excerpt",
    "resolve_media_id",
    "is_user_id",
    "resolve_user_id",
]
