"""Concurrency strategies for per-item callbacks.

Architecture:
    A strategy receives one zero-argument call per item (``dispatch``) and
    later collects the outputs of every call (``join``). The controller does
    not know which policy is in use.

Strategies:
    - ParallelStrategy: every call starts right away as a task; outputs come
      back in dispatch order whatever the completion order. The first failure
      fails the join, sibling tasks keep running to completion.
    - SequentialStrategy: each call is chained behind the previous one, so
      call i+1 starts only once call i has settled. The first failure breaks
      the chain: no later call is ever invoked.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from ..models.options import RecentMediaOptions

ItemCall = Callable[[], Awaitable[Any]]


class IterationStrategy(Protocol):
    """Protocol for callback dispatch policies."""

    def dispatch(self, call: ItemCall) -> asyncio.Future[Any]:
        """Schedule call and return a handle to its outcome."""
        ...

    async def join(self, handles: Sequence[asyncio.Future[Any]]) -> list[Any]:
        """Wait for the dispatched calls and return their outputs in order."""
        ...


class ParallelStrategy:
    """Run every call concurrently."""

    def dispatch(self, call: ItemCall) -> asyncio.Future[Any]:
        return asyncio.ensure_future(call())

    async def join(self, handles: Sequence[asyncio.Future[Any]]) -> list[Any]:
        if not handles:
            return []
        # gather does not cancel the remaining handles when one fails
        return list(await asyncio.gather(*handles))


class SequentialStrategy:
    """Chain calls so they run one after the other."""

    def __init__(self) -> None:
        self._tail: asyncio.Future[Any] | None = None
        self._outputs: list[Any] = []

    def dispatch(self, call: ItemCall) -> asyncio.Future[Any]:
        previous = self._tail

        async def link() -> Any:
            if previous is not None:
                # Re-raises the previous failure; call is then never invoked
                await previous
            result = await call()
            self._outputs.append(result)
            return result

        self._tail = asyncio.ensure_future(link())
        return self._tail

    async def join(self, handles: Sequence[asyncio.Future[Any]]) -> list[Any]:
        if self._tail is not None:
            await self._tail
        return list(self._outputs)


def strategy_for(options: RecentMediaOptions) -> IterationStrategy:
    """Pick the strategy matching ``options.sequential``."""
    if options.sequential:
        return SequentialStrategy()
    return ParallelStrategy()
