# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters that make every supported backend look like a YApi server."""

from __future__ import annotations

import httpx

from ..config.models import ServerConfig
from .apifox import ApifoxBackend
from .base import BackendAdapter, YApiBackend
from .openapi import YApiCatalog, convert_document
from .swagger import SwaggerBackend


def adapter_for(server: ServerConfig, client: httpx.AsyncClient) -> BackendAdapter:
    """Return the adapter matching ``server.server_type``."""

    if server.server_type == "swagger":
        return SwaggerBackend(server.server_url, client=client)
    if server.server_type == "apifox":
        first = server.projects[0].token
        token = first if isinstance(first, str) else first[0]
        return ApifoxBackend(server.server_url, token=token, client=client, project_id=server.apifox_project_id)
    return YApiBackend(server.server_url)


__all__ = [
    "ApifoxBackend",
    "BackendAdapter",
    "SwaggerBackend",
    "YApiBackend",
    "YApiCatalog",
    "adapter_for",
    "convert_document",
]
