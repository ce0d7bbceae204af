"""Pagination-aware runtime.

Architecture:
    - pagination.py: Page/RawPage continuation types, RawMediaAPI protocol
    - fetcher.py: PaginatedFetcher, cache-aware front-end of the raw API
    - iterator.py: RecentMediaIterator, count tracking and trimming
    - strategies.py: parallel and sequential callback dispatch
    - controller.py: ConcurrentIterationController, for-each over media
    - telemetry.py: structured logging
"""

from __future__ import annotations

from .pagination import Page, RawMediaAPI, RawPage, normalize_count
from .fetcher import FetcherPolicy, PaginatedFetcher
from .iterator import RecentMediaIterator, get_recent_media
from .strategies import IterationStrategy, ParallelStrategy, SequentialStrategy, strategy_for
from .controller import (
    ConcurrentIterationController,
    IterationState,
    for_each_recent_media,
    is_video,
)

__all__ = [
    "Page",
    "RawPage",
    "RawMediaAPI",
    "normalize_count",
    "FetcherPolicy",
    "PaginatedFetcher",
    "RecentMediaIterator",
    "get_recent_media",
    "IterationStrategy",
    "ParallelStrategy",
    "SequentialStrategy",
    "strategy_for",
    "ConcurrentIterationController",
    "IterationState",
    "for_each_recent_media",
    "is_video",
]
