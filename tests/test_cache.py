# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the coalescing async memo."""

from __future__ import annotations

import asyncio

import pytest

from apigen.cache import AsyncMemo, CatalogCache, CatalogKey


def test_concurrent_callers_share_one_fetch() -> None:
    memo: AsyncMemo[str] = AsyncMemo("demo")
    started = 0

    async def factory() -> str:
        nonlocal started
        started += 1
        await asyncio.sleep(0.01)
        return "value"

    async def scenario() -> list[str]:
        key = CatalogKey("http://server", "token")
        return await asyncio.gather(*(memo.get(key, factory) for _ in range(5)))

    assert asyncio.run(scenario()) == ["value"] * 5
    assert started == 1
    info = memo.cache_info()
    assert (info.current_size, info.hits, info.misses) == (1, 4, 1)


def test_keys_compare_by_value() -> None:
    memo: AsyncMemo[int] = AsyncMemo("demo")
    calls: list[str] = []

    async def factory(label: str) -> int:
        calls.append(label)
        return len(calls)

    async def scenario() -> tuple[int, int, int]:
        first = await memo.get(CatalogKey("http://a", "t"), lambda: factory("first"))
        again = await memo.get(CatalogKey("http://a", "t"), lambda: factory("again"))
        other = await memo.get(CatalogKey("http://a", "u"), lambda: factory("other"))
        return first, again, other

    assert asyncio.run(scenario()) == (1, 1, 2)
    assert calls == ["first", "other"]


def test_failure_is_shared_and_not_retried() -> None:
    memo: AsyncMemo[str] = AsyncMemo("demo")
    attempts = 0

    async def factory() -> str:
        nonlocal attempts
        attempts += 1
        await asyncio.sleep(0)
        raise ValueError("boom")

    async def scenario() -> list[BaseException | str]:
        results = await asyncio.gather(memo.get("k", factory), memo.get("k", factory), return_exceptions=True)
        with pytest.raises(ValueError):
            await memo.get("k", factory)
        return results

    results = asyncio.run(scenario())
    assert all(isinstance(result, ValueError) for result in results)
    assert attempts == 1


def test_catalog_cache_clear_resets_all_memos() -> None:
    cache = CatalogCache()

    async def scenario() -> None:
        async def factory() -> int:
            return 1

        await cache.project.get("k", factory)
        await cache.export.get("k", factory)

    asyncio.run(scenario())
    assert cache.stats()["project"].current_size == 1
    cache.clear()
    assert all(info.current_size == 0 for info in cache.stats().values())
    assert "k" not in cache.project


def test_drain_cancels_orphaned_fetches_and_keeps_results() -> None:
    memo: AsyncMemo[str] = AsyncMemo("demo")
    cancelled = False

    async def slow() -> str:
        nonlocal cancelled
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled = True
            raise
        return "late"

    async def fast() -> str:
        return "done"

    async def scenario() -> tuple[int, int]:
        await memo.get("fast", fast)
        waiter = asyncio.ensure_future(memo.get("slow", slow))
        await asyncio.sleep(0.01)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        before = memo.cache_info().in_flight
        await memo.drain()
        return before, memo.cache_info().in_flight

    assert asyncio.run(scenario()) == (1, 0)
    assert cancelled
    assert "fast" in memo
    assert "slow" not in memo
