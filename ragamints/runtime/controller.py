"""Apply a callback to each of a user's recent media.

Architecture:
    The controller walks RecentMediaIterator page by page and hands each
    eligible item to an IterationStrategy, then joins all dispatched calls.
    Pages are always fetched strictly in order; dispatch order equals arrival
    order.

State machine (per run):
    START -> FETCHING_PAGE -> DISPATCHING_ITEMS | CHAINING_ITEMS
          -> (more pages? FETCHING_PAGE) -> AWAITING_COMPLETION -> DONE | FAILED

    FAILED is terminal for the run. Calls already started in parallel mode
    may still settle after the run has failed.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from time import perf_counter
from typing import Any

from ..models.options import RecentMediaOptions
from .fetcher import PaginatedFetcher
from .iterator import RecentMediaIterator
from .strategies import IterationStrategy, ParallelStrategy, strategy_for
from .telemetry import log_iteration_complete, log_iteration_failed

logger = logging.getLogger(__name__)

ItemCallback = Callable[[dict[str, Any], RecentMediaOptions], Awaitable[Any] | Any]
IteratorFactory = Callable[[PaginatedFetcher, str, RecentMediaOptions], RecentMediaIterator]


class IterationState(str, Enum):
    """States of a for-each run."""

    START = "start"
    FETCHING_PAGE = "fetching_page"
    DISPATCHING_ITEMS = "dispatching_items"
    CHAINING_ITEMS = "chaining_items"
    AWAITING_COMPLETION = "awaiting_completion"
    DONE = "done"
    FAILED = "failed"


def is_video(media: dict[str, Any]) -> bool:
    """Check if a media item is a video."""
    return media.get("type") == "video"


def _retrieve_outcome(handle: asyncio.Future[Any]) -> None:
    # Abandoned calls settle after the run failed; mark their errors as seen
    if not handle.cancelled():
        handle.exception()


class ConcurrentIterationController:
    """Runs a callback over recent media under a concurrency strategy."""

    def __init__(
        self,
        fetcher: PaginatedFetcher,
        *,
        iterator_factory: IteratorFactory | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            fetcher: Paginated fetcher used to list media
            iterator_factory: Builds the page iterator (defaults to
                RecentMediaIterator)
        """
        self._fetcher = fetcher
        self._iterator_factory = iterator_factory or RecentMediaIterator
        self.state = IterationState.START

    async def for_each(
        self,
        user_id: str,
        options: RecentMediaOptions | None,
        callback: ItemCallback,
    ) -> list[Any]:
        """Call ``callback(media, options)`` for each recent media.

        Videos are skipped unless ``options.include_videos`` is set.

        Args:
            user_id: User ID
            options: Listing bounds and iteration policy
            callback: Called with each media and the options; may return an
                awaitable

        Returns:
            Callback outputs in media order, None outputs removed

        Raises:
            Exception: The first remote or callback failure, unmodified
        """
        options = options or RecentMediaOptions()
        strategy = strategy_for(options)
        dispatching = (
            IterationState.DISPATCHING_ITEMS
            if isinstance(strategy, ParallelStrategy)
            else IterationState.CHAINING_ITEMS
        )
        iterator = self._iterator_factory(self._fetcher, user_id, options)

        handles = []
        skipped_count = 0
        start = perf_counter()
        self.state = IterationState.START
        try:
            self.state = IterationState.FETCHING_PAGE
            async for page in iterator.pages():
                self.state = dispatching
                for media in page.items:
                    if is_video(media) and not options.include_videos:
                        skipped_count += 1
                        continue
                    handles.append(self._dispatch(strategy, callback, media, options))
                self.state = IterationState.FETCHING_PAGE

            self.state = IterationState.AWAITING_COMPLETION
            outputs = await strategy.join(handles)
        except Exception as e:
            self.state = IterationState.FAILED
            for handle in handles:
                handle.add_done_callback(_retrieve_outcome)
            log_iteration_failed(
                owner_id=user_id,
                dispatched=len(handles),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        output = [result for result in outputs if result is not None]
        if skipped_count:
            logger.info(f"Skipped {skipped_count} video(s).")
        logger.info(f"Done iterating over {len(output)} media(s).")
        log_iteration_complete(
            owner_id=user_id,
            processed=len(output),
            skipped=skipped_count,
            sequential=options.sequential,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        self.state = IterationState.DONE
        return output

    @staticmethod
    def _dispatch(
        strategy: IterationStrategy,
        callback: ItemCallback,
        media: dict[str, Any],
        options: RecentMediaOptions,
    ) -> Any:
        async def call() -> Any:
            result = callback(media, options)
            if inspect.isawaitable(result):
                result = await result
            return result

        return strategy.dispatch(call)


async def for_each_recent_media(
    fetcher: PaginatedFetcher,
    user_id: str,
    options: RecentMediaOptions | None,
    callback: ItemCallback,
) -> list[Any]:
    """Run callback over a user's recent media (see ConcurrentIterationController)."""
    return await ConcurrentIterationController(fetcher).for_each(user_id, options, callback)
