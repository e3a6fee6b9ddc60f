# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Apifox adapter: export OpenAPI through the Apifox open API, then serve it."""

from __future__ import annotations

import re
from typing import Any, Final
from urllib.parse import urlparse

import httpx

from ..errors import ConfigError, UpstreamError
from .swagger import SwaggerBackend

APIFOX_API_VERSION: Final[str] = "2024-03-28"
EXPORT_PATH: Final[str] = "/v1/projects/{project_id}/export-openapi"
EXPORT_BODY: Final[dict[str, Any]] = {
    "scope": {"type": "ALL"},
    "options": {"includeApifoxExtensionProperties": False, "addFoldersToTags": False},
    "oasVersion": "3.0",
    "exportFormat": "JSON",
}

_PROJECT_ID_PATTERN: Final = re.compile(r"/projects/(\d+)")


def apifox_project_id(server_url: str, configured: str | None = None) -> str:
    """Return the Apifox project id from configuration or the server URL.

    Raises:
        ConfigError: If neither source provides an id.
    """

    if configured:
        return configured
    match = _PROJECT_ID_PATTERN.search(urlparse(server_url).path)
    if match is None:
        raise ConfigError(f"apifox server {server_url!r} needs apifox_project_id or a /projects/<id> URL")
    return match.group(1)


class ApifoxBackend(SwaggerBackend):
    """Download an OpenAPI 3 export from Apifox and serve it like Swagger."""

    def __init__(
        self,
        server_url: str,
        *,
        token: str,
        client: httpx.AsyncClient,
        project_id: str | None = None,
    ) -> None:
        project = apifox_project_id(server_url, project_id)
        parsed = urlparse(server_url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        super().__init__(f"{origin}{EXPORT_PATH.format(project_id=project)}", client=client)
        self._token = token

    async def load_document(self) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "X-Apifox-Api-Version": APIFOX_API_VERSION,
        }
        try:
            response = await self._client.post(self._source, json=EXPORT_BODY, headers=headers)
            response.raise_for_status()
            document = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamError(f"request failed: {exc}", url=self._source) from exc
        except ValueError as exc:
            raise UpstreamError("export is not valid JSON", url=self._source) from exc
        if not isinstance(document, dict):
            raise UpstreamError("export must be a JSON object", url=self._source)
        return document


__all__ = ["APIFOX_API_VERSION", "ApifoxBackend", "apifox_project_id"]
