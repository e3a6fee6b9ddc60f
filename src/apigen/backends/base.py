# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Backend adapter contract and the native YApi adapter."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BackendAdapter(Protocol):
    """Expose a YApi-compatible export endpoint for one configured server.

    ``start`` returns the base URL the catalog fetcher should talk to; ``stop``
    releases whatever ``start`` acquired (local listeners, temporary files).
    """

    async def start(self) -> str:
        """Begin serving and return the base URL."""
        ...

    async def stop(self) -> None:
        """Release resources acquired by :meth:`start`."""
        ...


class YApiBackend:
    """A real YApi server needs no translation."""

    def __init__(self, server_url: str) -> None:
        self._server_url = server_url

    async def start(self) -> str:
        return self._server_url

    async def stop(self) -> None:
        return None


__all__ = ["BackendAdapter", "YApiBackend"]
