# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Unbounded structured fan-out used at every level of the pipeline."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

ResultT = TypeVar("ResultT")


def _first_leaf(group: BaseExceptionGroup) -> BaseException:
    leaf: BaseException = group
    while isinstance(leaf, BaseExceptionGroup):
        leaf = leaf.exceptions[0]
    return leaf


async def fan_out(awaitables: Iterable[Awaitable[ResultT]]) -> list[ResultT]:
    """Run ``awaitables`` concurrently and return their results in input order.

    The first failure cancels the remaining siblings and is re-raised as-is
    rather than wrapped in an exception group, so callers see the original
    error type no matter how deeply fan-outs are nested.
    """

    tasks: list[asyncio.Task[ResultT]] = []
    try:
        async with asyncio.TaskGroup() as group:
            for awaitable in awaitables:
                tasks.append(group.create_task(_await(awaitable)))
    except BaseExceptionGroup as exc:
        raise _first_leaf(exc) from None
    return [task.result() for task in tasks]


async def _await(awaitable: Awaitable[ResultT]) -> ResultT:
    return await awaitable


__all__ = ["fan_out"]
