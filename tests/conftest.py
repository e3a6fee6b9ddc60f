# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
import json
from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

import httpx
import pytest

SERVER_URL = "http://yapi.test"


def make_interface(
    interface_id: int,
    catid: int,
    *,
    method: str = "GET",
    path: str | None = None,
    title: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Return a minimal YApi interface record."""

    return {
        "_id": interface_id,
        "catid": catid,
        "project_id": 11,
        "title": title or f"interface {interface_id}",
        "method": method,
        "path": path or f"/items/item{interface_id}",
        "tag": [],
        "up_time": 0,
        "req_query": [],
        "req_params": [],
        "res_body_type": "json",
        "res_body": json.dumps({"type": "object", "properties": {"id": {"type": "number"}}, "required": ["id"]}),
        "res_body_is_json_schema": True,
        **extra,
    }


@dataclass
class FakeCatalog:
    """One project as served for a single token."""

    project: dict[str, Any]
    categories: dict[int, list[dict[str, Any]]]
    delay: float = 0.0
    errcode: int = 0

    def menu(self) -> list[dict[str, Any]]:
        return [{"_id": category_id, "name": f"cat{category_id}"} for category_id in self.categories]

    def export(self) -> list[dict[str, Any]]:
        return [
            {"name": f"cat{category_id}", "desc": "", "list": interfaces}
            for category_id, interfaces in self.categories.items()
        ]


@dataclass
class FakeYApi:
    """In-memory YApi server served through :class:`httpx.MockTransport`."""

    catalogs: dict[str, FakeCatalog] = field(default_factory=dict)
    calls: Counter[tuple[str, str]] = field(default_factory=Counter)

    def add(
        self,
        token: str,
        categories: Mapping[int, Sequence[dict[str, Any]]],
        *,
        project_id: int = 11,
        basepath: str = "",
        env: list[dict[str, str]] | None = None,
        delay: float = 0.0,
        errcode: int = 0,
    ) -> FakeCatalog:
        catalog = FakeCatalog(
            project={"_id": project_id, "name": f"project-{token}", "basepath": basepath, "env": env or []},
            categories={category_id: list(items) for category_id, items in categories.items()},
            delay=delay,
            errcode=errcode,
        )
        self.catalogs[token] = catalog
        return catalog

    async def handler(self, request: httpx.Request) -> httpx.Response:
        token = request.url.params.get("token", "")
        path = urlparse(str(request.url)).path
        self.calls[(path, token)] += 1
        catalog = self.catalogs.get(token)
        if catalog is None:
            return httpx.Response(200, json={"errcode": 40011, "errmsg": "invalid token", "data": None})
        if catalog.delay:
            await asyncio.sleep(catalog.delay)
        if catalog.errcode:
            return httpx.Response(200, json={"errcode": catalog.errcode, "errmsg": "backend failure", "data": None})
        if path == "/api/project/get":
            return httpx.Response(200, json={"errcode": 0, "errmsg": "", "data": catalog.project})
        if path == "/api/interface/getCatMenu":
            return httpx.Response(200, json={"errcode": 0, "errmsg": "", "data": catalog.menu()})
        if path == "/api/plugin/export":
            return httpx.Response(200, json=catalog.export())
        return httpx.Response(404, text="not found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def count(self, endpoint: str, token: str | None = None) -> int:
        return sum(hits for (path, hit_token), hits in self.calls.items() if path == endpoint and token in (None, hit_token))


@pytest.fixture
def fake_yapi() -> FakeYApi:
    """Return an empty fake YApi server."""

    return FakeYApi()


@pytest.fixture
def interface_factory() -> Callable[..., dict[str, Any]]:
    return make_interface


@pytest.fixture
def server_url() -> str:
    return SERVER_URL
