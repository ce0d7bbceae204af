"""Page-by-page iteration over a user's recent media.

The iterator turns the fetcher's listing into the continuation protocol
used by the rest of the system: each page carries the items found and either
a ``next`` coroutine function or nothing.

A running ``current_count`` is kept across the whole traversal (not per
page). Once it reaches the requested count no continuation is offered, and
a page that overshoots is trimmed from the end so the total matches exactly.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from ..models.options import RecentMediaOptions
from .fetcher import PaginatedFetcher
from .pagination import Page

logger = logging.getLogger(__name__)


class RecentMediaIterator:
    """Iterates over the pages of a user's recent media."""

    def __init__(
        self,
        fetcher: PaginatedFetcher,
        user_id: str,
        options: RecentMediaOptions | None = None,
    ) -> None:
        self._fetcher = fetcher
        self.user_id = user_id
        self.options = options or RecentMediaOptions()
        self.current_count = 0

    async def first_page(self) -> Page:
        """Fetch the first page.

        Without any count or filter an empty terminal page is returned; an
        unbounded fetch is never issued implicitly.
        """
        self.current_count = 0
        if not self.options.has_bounds:
            return Page()
        page = await self._fetcher.list_page(self.user_id, self.options.listing_params())
        return self._handle(page)

    def _handle(self, page: Page) -> Page:
        count = self.options.count
        items = list(page.items)
        self.current_count += len(items)

        next_page = None
        if page.next is not None and (count is None or self.current_count < count):
            upstream_next = page.next

            async def next_page() -> Page:
                return self._handle(await upstream_next())

        elif count is not None and self.current_count > count:
            overflow = self.current_count - count
            items = items[: len(items) - overflow]
            self.current_count = count

        another = "another " if self.current_count > len(items) else ""
        more = ", more to come..." if next_page else ", nothing more."
        logger.info(f"Found {another}{len(items)} media(s){more}")
        return Page(items=items, next=next_page)

    async def pages(self) -> AsyncIterator[Page]:
        """Yield pages until the traversal is done."""
        page = await self.first_page()
        while True:
            yield page
            if page.next is None:
                return
            page = await page.next()


async def get_recent_media(
    fetcher: PaginatedFetcher,
    user_id: str,
    options: RecentMediaOptions | None = None,
) -> Page:
    """Fetch the first page of a user's recent media.

    Iterate with ``page = await page.next()`` while ``page.next`` is set.
    """
    return await RecentMediaIterator(fetcher, user_id, options).first_page()
