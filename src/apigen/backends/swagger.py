# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Serve a Swagger/OpenAPI document through a local YApi-compatible endpoint."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Final
from urllib.parse import urlparse

import httpx
import uvicorn
from fastapi import FastAPI

from ..errors import UpstreamError
from ..fetcher import CATEGORY_MENU_ENDPOINT, EXPORT_ENDPOINT, PROJECT_ENDPOINT
from .openapi import YApiCatalog, convert_document

LOGGER = logging.getLogger(__name__)

LOOPBACK_HOST: Final[str] = "127.0.0.1"
STARTUP_POLL_INTERVAL: Final[float] = 0.01


def _envelope(data: Any) -> dict[str, Any]:
    return {"errcode": 0, "errmsg": "", "data": data}


def create_app(catalog: YApiCatalog) -> FastAPI:
    """Return an application answering the three YApi endpoints from ``catalog``."""

    app = FastAPI(title="apigen loopback", openapi_url=None, docs_url=None, redoc_url=None)

    @app.get(PROJECT_ENDPOINT)
    async def project():
        return _envelope(catalog.project)

    @app.get(CATEGORY_MENU_ENDPOINT)
    async def category_menu():
        return _envelope(catalog.menu)

    @app.get(EXPORT_ENDPOINT)
    async def export():
        return catalog.export

    return app


class _LoopbackServer(uvicorn.Server):
    """uvicorn server that leaves process signal handling to the host application."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class SwaggerBackend:
    """Convert a Swagger/OpenAPI document and expose it on a loopback port.

    Args:
        source: ``http(s)`` URL or local path of the JSON document.
        client: Shared HTTP client used to download remote documents.
    """

    def __init__(self, source: str, *, client: httpx.AsyncClient) -> None:
        self._source = source
        self._client = client
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task[None] | None = None

    async def load_document(self) -> dict[str, Any]:
        """Return the parsed OpenAPI document.

        Raises:
            UpstreamError: If the document cannot be read or is not a JSON object.
        """

        if urlparse(self._source).scheme in {"http", "https"}:
            try:
                response = await self._client.get(self._source)
                response.raise_for_status()
                document = response.json()
            except httpx.HTTPError as exc:
                raise UpstreamError(f"request failed: {exc}", url=self._source) from exc
            except ValueError as exc:
                raise UpstreamError("document is not valid JSON", url=self._source) from exc
        else:
            try:
                document = json.loads(Path(self._source).read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise UpstreamError(f"cannot read document: {exc}", url=self._source) from exc
        if not isinstance(document, dict):
            raise UpstreamError("document must be a JSON object", url=self._source)
        return document

    async def catalog(self) -> YApiCatalog:
        return convert_document(await self.load_document())

    async def start(self) -> str:
        """Serve the converted catalog on an ephemeral loopback port and return its base URL.

        Raises:
            UpstreamError: If the document cannot be loaded or the server fails to start.
        """

        catalog = await self.catalog()
        config = uvicorn.Config(
            create_app(catalog),
            host=LOOPBACK_HOST,
            port=0,
            lifespan="off",
            log_config=None,
            log_level="warning",
            access_log=False,
        )
        server = _LoopbackServer(config)
        task = asyncio.create_task(server.serve(), name="apigen-loopback")
        while not server.started:
            if task.done():
                failure = None if task.cancelled() else task.exception()
                raise UpstreamError("loopback server failed to start", url=self._source) from failure
            await asyncio.sleep(STARTUP_POLL_INTERVAL)
        self._server, self._task = server, task
        port = server.servers[0].sockets[0].getsockname()[1]
        LOGGER.debug("serving %s on %s:%s", self._source, LOOPBACK_HOST, port)
        return f"http://{LOOPBACK_HOST}:{port}"

    async def stop(self) -> None:
        server, task = self._server, self._task
        self._server = self._task = None
        if server is None or task is None:
            return
        server.should_exit = True
        await task
        LOGGER.debug("stopped loopback server for %s", self._source)


__all__ = ["LOOPBACK_HOST", "SwaggerBackend", "create_app"]
