# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run-scoped memoisation of asynchronous fetches with in-flight coalescing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, NamedTuple, TypeVar

LOGGER = logging.getLogger(__name__)

ValueT = TypeVar("ValueT")


class CatalogKey(NamedTuple):
    """Identity of one catalog: a server URL and the token used against it."""

    server_url: str
    token: str


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Snapshot of cache usage.

    Attributes:
        current_size: Number of memoised entries.
        hits: Number of calls served from an existing (possibly in-flight) entry.
        misses: Number of calls that started a new fetch.
        in_flight: Number of entries whose fetch has not finished.
    """

    current_size: int
    hits: int
    misses: int
    in_flight: int = 0


class AsyncMemo(Generic[ValueT]):
    """Memoise one coroutine-producing operation by hashable key.

    The first caller for a key starts a task; later callers, including ones
    arriving while it is still running, await that same task. Failed tasks are
    kept so every waiter observes the same exception and nothing is retried.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._tasks: dict[Hashable, asyncio.Task[ValueT]] = {}
        self._hits = 0
        self._misses = 0

    async def get(self, key: Hashable, factory: Callable[[], Awaitable[ValueT]]) -> ValueT:
        """Return the value for ``key``, calling ``factory`` only on the first request."""

        task = self._tasks.get(key)
        if task is None:
            self._misses += 1
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
        else:
            self._hits += 1
            LOGGER.debug("%s: coalesced request for %s", self.name, key)
        # shield: cancelling one waiter must not cancel the shared fetch
        return await asyncio.shield(task)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._tasks

    def cache_info(self) -> CacheInfo:
        in_flight = sum(1 for task in self._tasks.values() if not task.done())
        return CacheInfo(current_size=len(self._tasks), hits=self._hits, misses=self._misses, in_flight=in_flight)

    async def drain(self) -> None:
        """Cancel unfinished fetches, wait for them to settle and forget them.

        Completed entries are kept; cancelled ones are dropped.
        """

        pending = [task for task in self._tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            LOGGER.debug("%s: cancelled %d unfinished fetch(es)", self.name, len(pending))
        for key in [key for key, task in self._tasks.items() if task.cancelled()]:
            del self._tasks[key]

    def cache_clear(self) -> None:
        """Cancel unfinished fetches and drop every entry."""

        for task in self._tasks.values():
            if not task.done():
                task.cancel()
            elif not task.cancelled():
                # mark exceptions as retrieved
                task.exception()
        self._tasks.clear()
        self._hits = 0
        self._misses = 0


class CatalogCache:
    """Per-run memo tables for the catalog fetcher.

    One instance is created for each generation run and threaded through the
    fetcher, so nothing is shared between runs.
    """

    def __init__(self) -> None:
        self.project: AsyncMemo[Any] = AsyncMemo("project")
        self.category_menu: AsyncMemo[Any] = AsyncMemo("category_menu")
        self.export: AsyncMemo[Any] = AsyncMemo("export")

    def stats(self) -> dict[str, CacheInfo]:
        return {memo.name: memo.cache_info() for memo in (self.project, self.category_menu, self.export)}

    def clear(self) -> None:
        for memo in (self.project, self.category_menu, self.export):
            memo.cache_clear()

    async def drain(self) -> None:
        """Cancel every unfinished fetch and wait until all of them have settled."""

        await asyncio.gather(*(memo.drain() for memo in (self.project, self.category_menu, self.export)))


__all__ = ["AsyncMemo", "CacheInfo", "CatalogCache", "CatalogKey"]
