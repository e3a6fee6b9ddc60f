# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for backend adapters and OpenAPI conversion."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from apigen.backends import ApifoxBackend, SwaggerBackend, YApiBackend, adapter_for, convert_document
from apigen.backends.apifox import APIFOX_API_VERSION, apifox_project_id
from apigen.backends.swagger import create_app
from apigen.cache import CatalogKey
from apigen.config.models import ServerConfig
from apigen.errors import ConfigError, UpstreamError
from apigen.fetcher import CatalogFetcher

OPENAPI: dict[str, Any] = {
    "openapi": "3.0.0",
    "info": {"title": "Pet Store"},
    "servers": [{"url": "https://pets.example/v1"}],
    "tags": [{"name": "pets", "description": "Pet operations"}, {"name": "store"}],
    "paths": {
        "/pets/{id}": {
            "parameters": [{"name": "id", "in": "path", "required": True}],
            "get": {
                "tags": ["pets"],
                "summary": "Get pet",
                "parameters": [{"name": "verbose", "in": "query"}],
                "responses": {
                    "200": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
                },
            },
        },
        "/pets": {
            "post": {
                "tags": ["pets"],
                "summary": "Create pet",
                "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
                "responses": {"201": {"content": {"application/json": {"schema": {"type": "string"}}}}},
            },
        },
        "/health": {"get": {"responses": {"200": {"description": "ok"}}}},
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "properties": {"name": {"type": "string"}, "parent": {"$ref": "#/components/schemas/Pet"}},
            },
        },
    },
}


def test_convert_document_groups_operations_by_tag() -> None:
    catalog = convert_document(OPENAPI)

    assert catalog.project["basepath"] == "/v1"
    assert catalog.project["name"] == "Pet Store"
    assert [item["name"] for item in catalog.menu] == ["pets", "default"]
    assert catalog.menu[0]["desc"] == "Pet operations"
    pets = catalog.export[0]["list"]
    assert [(item["_id"], item["method"], item["path"]) for item in pets] == [
        (1, "GET", "/pets/{id}"),
        (2, "POST", "/pets"),
    ]
    assert all(item["catid"] == 1 for item in pets)
    assert catalog.export[1]["list"][0]["catid"] == 2


def test_convert_document_maps_parameters_and_resolves_refs() -> None:
    get_pet, create_pet = convert_document(OPENAPI).export[0]["list"]

    assert get_pet["req_params"] == [{"name": "id", "desc": ""}]
    assert get_pet["req_query"] == [{"name": "verbose", "required": "0", "desc": ""}]
    response = json.loads(get_pet["res_body"])
    assert response["properties"]["name"] == {"type": "string"}
    assert response["properties"]["parent"] == {}
    assert create_pet["req_body_type"] == "json"
    assert json.loads(create_pet["req_body_other"])["type"] == "object"
    assert json.loads(create_pet["res_body"]) == {"type": "string"}


def test_swagger_two_form_and_body_parameters() -> None:
    document = {
        "swagger": "2.0",
        "basePath": "/api",
        "paths": {
            "/upload": {
                "post": {
                    "parameters": [
                        {"name": "file", "in": "formData", "type": "file", "required": True},
                        {"name": "label", "in": "formData", "type": "string"},
                    ],
                    "responses": {"200": {"schema": {"type": "boolean"}}},
                },
            },
        },
    }

    catalog = convert_document(document)

    (upload,) = catalog.export[0]["list"]
    assert catalog.project["basepath"] == "/api"
    assert upload["req_body_type"] == "form"
    assert [(field["name"], field["type"], field["required"]) for field in upload["req_body_form"]] == [
        ("file", "file", "1"),
        ("label", "text", "0"),
    ]
    assert json.loads(upload["res_body"]) == {"type": "boolean"}


def test_swagger_backend_serves_a_yapi_compatible_catalog(tmp_path: Path) -> None:
    source = tmp_path / "openapi.json"
    source.write_text(json.dumps(OPENAPI), encoding="utf-8")

    async def scenario():
        async with httpx.AsyncClient(trust_env=False) as client:
            backend = SwaggerBackend(str(source), client=client)
            base_url = await backend.start()
            try:
                fetcher = CatalogFetcher(client)
                key = CatalogKey(base_url, "any")
                info = await fetcher.fetch_project_info(key)
                interfaces = await fetcher.fetch_interface_list(key, 1)
            finally:
                await backend.stop()
            return base_url, info, interfaces

    base_url, info, interfaces = asyncio.run(scenario())

    assert base_url.startswith("http://127.0.0.1:")
    assert info.category_ids == frozenset({1, 2})
    assert [interface.path for interface in interfaces] == ["/v1/pets/{id}", "/v1/pets"]


def test_loopback_app_answers_yapi_endpoints() -> None:
    client = TestClient(create_app(convert_document(OPENAPI)))

    project = client.get("/api/project/get", params={"token": "any"}).json()
    menu = client.get("/api/interface/getCatMenu", params={"project_id": 1}).json()
    export = client.get("/api/plugin/export", params={"type": "json"}).json()

    assert project["errcode"] == 0
    assert project["data"]["basepath"] == "/v1"
    assert [item["_id"] for item in menu["data"]] == [1, 2]
    assert isinstance(export, list)
    assert [item["path"] for item in export[0]["list"]] == ["/pets/{id}", "/pets"]
    assert client.get("/api/unknown").status_code == 404


def test_swagger_backend_reports_unreadable_documents(tmp_path: Path) -> None:
    async def scenario() -> None:
        async with httpx.AsyncClient() as client:
            await SwaggerBackend(str(tmp_path / "missing.json"), client=client).start()

    with pytest.raises(UpstreamError, match="cannot read document"):
        asyncio.run(scenario())


def test_apifox_backend_exports_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=OPENAPI)

    async def scenario() -> dict[str, Any]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            backend = ApifoxBackend("https://api.apifox.com/", token="APS-1", client=client, project_id="42")
            return await backend.load_document()

    document = asyncio.run(scenario())

    assert document["info"]["title"] == "Pet Store"
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "https://api.apifox.com/v1/projects/42/export-openapi"
    assert request.headers["Authorization"] == "Bearer APS-1"
    assert request.headers["X-Apifox-Api-Version"] == APIFOX_API_VERSION
    assert json.loads(request.content)["oasVersion"] == "3.0"


def test_apifox_project_id_resolution() -> None:
    assert apifox_project_id("https://api.apifox.com", "7") == "7"
    assert apifox_project_id("https://api.apifox.com/v1/projects/6720131/export-openapi") == "6720131"
    with pytest.raises(ConfigError):
        apifox_project_id("https://api.apifox.com")


def test_adapter_for_selects_by_server_type() -> None:
    projects = [{"token": ["first", "second"], "categories": [{"id": 0}]}]

    async def scenario():
        async with httpx.AsyncClient() as client:
            return [
                adapter_for(ServerConfig(server_url="http://y", projects=projects), client),
                adapter_for(ServerConfig(server_url="http://s.json", server_type="swagger", projects=projects), client),
                adapter_for(
                    ServerConfig(
                        server_url="https://api.apifox.com",
                        server_type="apifox",
                        apifox_project_id="1",
                        projects=projects,
                    ),
                    client,
                ),
            ]

    yapi, swagger, apifox = asyncio.run(scenario())

    assert isinstance(yapi, YApiBackend)
    assert isinstance(swagger, SwaggerBackend) and not isinstance(swagger, ApifoxBackend)
    assert isinstance(apifox, ApifoxBackend)
    assert apifox._token == "first"
