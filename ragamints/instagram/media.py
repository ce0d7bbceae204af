"""Instagram media helpers.

Fields of interest in a media object:
    caption.text                    ('Back home!')
    created_time                    ('1430734958')
    id                              ('977399508246039160_26667401')
    images.[resolution].url         (image or video cover file, .jpg)
    videos.[resolution].url         (video file, .mp4)
    link                            ('https://instagram.com/p/2Qams1JYsp/')
    location.latitude / longitude
    tags                            (['osaka'])
    type                            ('image' or 'video')
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ..core.exceptions import RagamintsError
from .constants import RESOLUTIONS

if TYPE_CHECKING:
    from ..runtime.fetcher import PaginatedFetcher

logger = logging.getLogger(__name__)

EXCERPT_MAX_LENGTH = 18

_MEDIA_ID_RE = re.compile(r"^[0-9_]+$")
_MEDIA_URL_RE = re.compile(r"^https?://(?:www\.)?(instagram\.com/p/[A-Za-z0-9\-]+)/?.*$")
# Newlines, DEL and everything outside of ASCII (emojis included)
_CAPTION_STRIP_RE = re.compile(r"[\n\x7f-\U0010ffff]")
# Size segment of low resolution image URLs, e.g. "s320x320/"
_SIZED_PATH_RE = re.compile(r"[ps]320x320/")


def is_media_id(value: str) -> bool:
    """Check if value is a valid media ID."""
    return bool(_MEDIA_ID_RE.match(value))


def is_media_url(value: str) -> str | None:
    """Check if value is a media URL.

    Returns:
        The canonical URL form, or None if value is not a media URL

    Examples:
        >>> is_media_url("http://instagram.com/p/2Qams1JYsp")
        'https://instagram.com/p/2Qams1JYsp/'
    """
    match = _MEDIA_URL_RE.match(value)
    return f"https://{match.group(1)}/" if match else None


async def resolve_media_id(fetcher: PaginatedFetcher, media_id_or_url: str | None) -> str | None:
    """Resolve a media ID from a media ID or URL, fetching its oembed if needed."""
    if media_id_or_url is None or is_media_id(media_id_or_url):
        return media_id_or_url
    media_url = is_media_url(media_id_or_url)
    if media_url is None:
        raise RagamintsError(f"{media_id_or_url} is not a valid Instagram media url")
    oembed = await fetcher.fetch(media_url)
    logger.info(f"Found media ID {oembed['media_id']} for media url {media_id_or_url}")
    return oembed["media_id"]


def create_media_file_name(media: dict[str, Any]) -> str:
    """Create a file name (no directory, no extension) for a media.

    Examples:
        >>> create_media_file_name({"created_time": "1433025688"})
        '2015-05-30_1433025688'
    """
    created = datetime.fromtimestamp(int(media["created_time"]), tz=UTC)
    return f"{created:%Y-%m-%d}_{media['created_time']}"


def media_excerpt(media: dict[str, Any]) -> str:
    """Short, padded label for a media: its caption start, or its ID."""
    caption = (media.get("caption") or {}).get("text")
    if caption:
        label = _CAPTION_STRIP_RE.sub("", caption)[:EXCERPT_MAX_LENGTH]
    else:
        label = str(media["id"])[:EXCERPT_MAX_LENGTH]
    return label.ljust(EXCERPT_MAX_LENGTH)


def log_media(media: dict[str, Any], msg: str = "") -> None:
    """Log a message with respect to a specific media."""
    logger.info(f"[{media_excerpt(media)}] {msg}".rstrip())


def media_resolution_url(media: dict[str, Any], resolution: str | None = None) -> str:
    """Get the URL of a media file at a resolution.

    Args:
        media: Media object
        resolution: One of the RESOLUTIONS values, None for the highest

    Raises:
        RagamintsError: If the media has no file at that resolution
    """
    urls = media.get("videos") or media.get("images") or {}
    if resolution is None or resolution == RESOLUTIONS["high"]:
        resolution = RESOLUTIONS["high"]
        if media.get("videos") and "standard_resolution" in urls:
            return urls["standard_resolution"]["url"]
        # Stripping the size segment of the low resolution URL yields the original
        if "low_resolution" in urls:
            return _SIZED_PATH_RE.sub("", urls["low_resolution"]["url"])
    elif resolution in urls:
        return urls[resolution]["url"]
    raise RagamintsError(f"Could not find resolution: {resolution}")
