"""Page and continuation types shared by the fetcher and iterator.

A page either carries a ``next`` capability (a coroutine function returning
the following page) or is terminal (``next is None``). Continuations are
plain closures, never mutated in place.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class RawPage:
    """A page as delivered by the raw remote API.

    Attributes:
        items: Items on this page, in API order
        next: Fetches the next raw page, or None when the API has no more data
    """

    items: list[Any] = field(default_factory=list)
    next: Callable[[], Awaitable[RawPage]] | None = None


@dataclass(frozen=True)
class Page:
    """A page exposed to callers.

    Attributes:
        items: Items on this page
        next: Fetches the next page, or None when iteration is done
    """

    items: list[Any] = field(default_factory=list)
    next: Callable[[], Awaitable[Page]] | None = None

    @property
    def done(self) -> bool:
        return self.next is None


class RawMediaAPI(Protocol):
    """Raw remote calls wrapped by the paginated fetcher.

    Implementations raise on failure (typically RemoteFetchError) and handle
    their own timeouts and retries.
    """

    async def oembed(self, media_url: str) -> dict[str, Any]:
        """Resolve a media URL to its oembed object."""
        ...

    async def user_search(self, user_name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Search users by name."""
        ...

    async def user_media_recent(self, user_id: str, params: dict[str, Any]) -> RawPage:
        """Fetch the first page of a user's recent media."""
        ...


def normalize_count(count: int, page_size: int) -> int:
    """Round count up to the next multiple of page_size.

    Requests for different counts within the same page bucket then share one
    upstream request, and one cache entry.

    Examples:
        >>> normalize_count(2, 33)
        33
        >>> normalize_count(35, 33)
        66
    """
    if page_size <= 0:
        raise ValueError("page_size must be a positive integer")
    return math.ceil(count / page_size) * page_size
