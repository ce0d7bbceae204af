"""Structured logging for pagination and iteration.

This module provides telemetry hooks emitting event-named log records with
structured ``extra`` payloads. Human-readable progress lines are logged by
the iterator and controller themselves.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    endpoint_id: str,
    owner_id: str,
    page_index: int,
    items: int,
    has_next: bool,
    from_cache: bool = False,
) -> None:
    """Log a single page delivered by the fetcher.

    Args:
        endpoint_id: Endpoint identifier
        owner_id: Owner of the listing (user ID)
        page_index: Zero-based page index within the traversal
        items: Number of items on the page
        has_next: Whether a continuation was offered
        from_cache: Whether the page was served from cache
    """
    logger.debug(
        "page_fetched",
        extra={
            "endpoint_id": endpoint_id,
            "owner_id": owner_id,
            "page_index": page_index,
            "items": items,
            "has_next": has_next,
            "from_cache": from_cache,
        },
    )


def log_listing_cached(*, endpoint_id: str, key: str, total_items: int, ttl: int) -> None:
    """Log a listing snapshot written to cache."""
    logger.debug(
        "listing_cached",
        extra={
            "endpoint_id": endpoint_id,
            "key": key,
            "total_items": total_items,
            "ttl": ttl,
        },
    )


def log_iteration_complete(
    *,
    owner_id: str,
    processed: int,
    skipped: int,
    sequential: bool,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a for-each iteration."""
    logger.info(
        "iteration_complete",
        extra={
            "owner_id": owner_id,
            "processed": processed,
            "skipped": skipped,
            "sequential": sequential,
            "latency_ms": latency_ms,
        },
    )


def log_iteration_failed(
    *,
    owner_id: str,
    dispatched: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed for-each iteration.

    Args:
        owner_id: Owner of the listing (user ID)
        dispatched: Number of callbacks dispatched before the failure surfaced
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "iteration_failed",
        extra={
            "owner_id": owner_id,
            "dispatched": dispatched,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
