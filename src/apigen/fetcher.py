# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fetch project metadata and interface catalogs from YApi-compatible servers."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Final

import httpx
from pydantic import TypeAdapter, ValidationError

from .cache import CatalogCache, CatalogKey
from .errors import UpstreamError
from .models import Category, CategoryMenuItem, Interface, Project, ProjectInfo

LOGGER = logging.getLogger(__name__)

PROJECT_ENDPOINT: Final[str] = "/api/project/get"
CATEGORY_MENU_ENDPOINT: Final[str] = "/api/interface/getCatMenu"
EXPORT_ENDPOINT: Final[str] = "/api/plugin/export"
EXPORT_QUERY: Final[Mapping[str, str]] = {"type": "json", "status": "all", "isWiki": "false"}

_CATEGORY_LIST: Final = TypeAdapter(list[Category])
_MENU_LIST: Final = TypeAdapter(list[CategoryMenuItem])


def normalise_basepath(basepath: str | None) -> str:
    """Return ``basepath`` as ``/segment`` form, or ``""`` for the root.

    >>> normalise_basepath("api/v1//")
    '/api/v1'
    """

    return re.sub(r"^/+", "/", f"/{basepath or '/'}".rstrip("/"))


class CatalogFetcher:
    """Memoised access to per ``(server_url, token)`` catalogs.

    Every public operation is keyed by :class:`CatalogKey` and coalesced
    through the injected :class:`CatalogCache`, so concurrent callers for the
    same identity share one request.
    """

    def __init__(self, client: httpx.AsyncClient, cache: CatalogCache | None = None) -> None:
        self._client = client
        self.cache = cache or CatalogCache()

    async def fetch_api(self, url: str, query: Mapping[str, Any]) -> Any:
        """GET ``url`` and unwrap the YApi ``{errcode, errmsg, data}`` envelope.

        Args:
            url: Absolute endpoint URL.
            query: Query parameters forwarded verbatim.

        Returns:
            Any: The ``data`` member when present, otherwise the whole payload.

        Raises:
            UpstreamError: On HTTP failures, non-JSON bodies or a non-zero ``errcode``.
        """

        LOGGER.debug("GET %s", url)
        try:
            response = await self._client.get(url, params=dict(query))
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamError(f"request failed: {exc}", url=url, query=query) from exc
        except ValueError as exc:
            raise UpstreamError("response is not valid JSON", url=url, query=query) from exc
        if isinstance(payload, Mapping) and "errcode" in payload:
            if payload["errcode"]:
                raise UpstreamError(str(payload.get("errmsg") or "upstream error"), url=url, query=query)
            return payload.get("data")
        return payload

    async def fetch_project(self, key: CatalogKey) -> Project:
        return await self.cache.project.get(key, lambda: self._load_project(key))

    async def fetch_category_menu(self, key: CatalogKey) -> tuple[CategoryMenuItem, ...]:
        return await self.cache.category_menu.get(key, lambda: self._load_category_menu(key))

    async def fetch_export(self, key: CatalogKey) -> list[Category]:
        return await self.cache.export.get(key, lambda: self._load_export(key))

    async def fetch_project_info(self, key: CatalogKey) -> ProjectInfo:
        """Return project metadata together with its category menu."""

        project = await self.fetch_project(key)
        categories = await self.fetch_category_menu(key)
        return ProjectInfo(project=project, categories=categories, server_url=key.server_url)

    async def fetch_interface_list(self, key: CatalogKey, category_id: int) -> list[Interface]:
        """Return the interfaces of ``category_id`` with category back-references.

        The returned records are copies, so callers may attach per-run
        references without touching the cached export.
        """

        for category in await self.fetch_export(key):
            if category.interfaces and category.id == category_id:
                summary = category.summary()
                return [item.model_copy(update={"category": summary}) for item in category.interfaces]
        return []

    async def _load_project(self, key: CatalogKey) -> Project:
        url = f"{key.server_url}{PROJECT_ENDPOINT}"
        data = await self.fetch_api(url, {"token": key.token})
        try:
            project = Project.model_validate(data)
        except ValidationError as exc:
            raise UpstreamError(f"malformed project payload: {exc}", url=url) from exc
        return project.model_copy(
            update={
                "basepath": normalise_basepath(project.basepath),
                "url": f"{key.server_url}/project/{project.id}/interface/api",
            },
        )

    async def _load_category_menu(self, key: CatalogKey) -> tuple[CategoryMenuItem, ...]:
        project = await self.fetch_project(key)
        url = f"{key.server_url}{CATEGORY_MENU_ENDPOINT}"
        data = await self.fetch_api(url, {"token": key.token, "project_id": project.id})
        try:
            return tuple(_MENU_LIST.validate_python(data or []))
        except ValidationError as exc:
            raise UpstreamError(f"malformed category menu: {exc}", url=url) from exc

    async def _load_export(self, key: CatalogKey) -> list[Category]:
        # basepath is needed to rewrite every interface path
        project = await self.fetch_project(key)
        url = f"{key.server_url}{EXPORT_ENDPOINT}"
        data = await self.fetch_api(url, {**EXPORT_QUERY, "token": key.token})
        try:
            categories = _CATEGORY_LIST.validate_python(data or [])
        except ValidationError as exc:
            raise UpstreamError(f"malformed export payload: {exc}", url=url) from exc
        return [_decorate_category(category, project, key.server_url) for category in categories]


def _decorate_category(category: Category, project: Project, server_url: str) -> Category:
    first = category.interfaces[0] if category.interfaces else None
    project_id = first.project_id if first else 0
    category_id = first.catid if first else 0
    base = f"{server_url}/project/{project_id}/interface/api"
    interfaces = [
        item.model_copy(update={"url": f"{base}/{item.id}", "path": f"{project.basepath}{item.path}"})
        for item in category.interfaces
    ]
    return category.model_copy(update={"url": f"{base}/cat_{category_id}", "interfaces": interfaces})


__all__ = [
    "CATEGORY_MENU_ENDPOINT",
    "CatalogFetcher",
    "EXPORT_ENDPOINT",
    "PROJECT_ENDPOINT",
    "normalise_basepath",
]
