# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Convert Swagger 2 / OpenAPI 3 documents into a YApi-compatible catalog."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final
from urllib.parse import urlparse

HTTP_METHODS: Final[tuple[str, ...]] = ("get", "post", "put", "patch", "delete", "head", "options")
DEFAULT_TAG: Final[str] = "default"
PROJECT_ID: Final[int] = 1
JSON_MEDIA_TYPES: Final[tuple[str, ...]] = ("application/json", "*/*", "text/json")
FORM_MEDIA_TYPES: Final[tuple[str, ...]] = ("multipart/form-data", "application/x-www-form-urlencoded")
SUCCESS_STATUSES: Final[tuple[str, ...]] = ("200", "201", "2XX", "default")


@dataclass(slots=True)
class YApiCatalog:
    """The three payloads served by the YApi export endpoints."""

    project: dict[str, Any]
    menu: list[dict[str, Any]] = field(default_factory=list)
    export: list[dict[str, Any]] = field(default_factory=list)


class _RefResolver:
    """Inline local ``$ref`` pointers, replacing cycles with an empty schema."""

    def __init__(self, document: Mapping[str, Any]) -> None:
        self._document = document

    def lookup(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            return {}
        node: Any = self._document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(node, Mapping) or part not in node:
                return {}
            node = node[part]
        return node

    def resolve(self, schema: Any, seen: frozenset[str] = frozenset()) -> Any:
        if isinstance(schema, list):
            return [self.resolve(item, seen) for item in schema]
        if not isinstance(schema, Mapping):
            return schema
        ref = schema.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                return {}
            target = self.resolve(self.lookup(ref), seen | {ref})
            extra = {key: value for key, value in schema.items() if key != "$ref"}
            return {**target, **self.resolve(extra, seen)} if isinstance(target, Mapping) else target
        return {key: self.resolve(value, seen) for key, value in schema.items()}


def _basepath(document: Mapping[str, Any]) -> str:
    if "swagger" in document:
        return str(document.get("basePath") or "")
    servers = document.get("servers") or []
    if servers and isinstance(servers[0], Mapping):
        return urlparse(str(servers[0].get("url") or "")).path
    return ""


def _media_schema(content: Mapping[str, Any], media_types: tuple[str, ...]) -> tuple[str, Any] | None:
    for media_type in media_types:
        if media_type in content and isinstance(content[media_type], Mapping):
            return media_type, content[media_type].get("schema") or {}
    return None


def _form_fields(schema: Mapping[str, Any]) -> list[dict[str, Any]]:
    required = set(schema.get("required") or [])
    fields: list[dict[str, Any]] = []
    for name, prop in (schema.get("properties") or {}).items():
        prop = prop if isinstance(prop, Mapping) else {}
        is_file = prop.get("format") == "binary" or prop.get("type") == "file"
        fields.append(
            {
                "name": name,
                "type": "file" if is_file else "text",
                "required": "1" if name in required else "0",
                "desc": prop.get("description") or "",
            },
        )
    return fields


def _request_body(operation: Mapping[str, Any], parameters: list[Mapping[str, Any]]) -> dict[str, Any]:
    body_params = [param for param in parameters if param.get("in") == "body"]
    if body_params:
        schema = body_params[0].get("schema") or {}
        return {"req_body_type": "json", "req_body_other": json.dumps(schema), "req_body_is_json_schema": True}
    form_params = [param for param in parameters if param.get("in") == "formData"]
    if form_params:
        return {
            "req_body_type": "form",
            "req_body_form": [
                {
                    "name": param.get("name", ""),
                    "type": "file" if param.get("type") == "file" else "text",
                    "required": "1" if param.get("required") else "0",
                    "desc": param.get("description") or "",
                }
                for param in form_params
            ],
        }
    content = (operation.get("requestBody") or {}).get("content") or {}
    if json_body := _media_schema(content, JSON_MEDIA_TYPES):
        return {"req_body_type": "json", "req_body_other": json.dumps(json_body[1]), "req_body_is_json_schema": True}
    if form_body := _media_schema(content, FORM_MEDIA_TYPES):
        return {"req_body_type": "form", "req_body_form": _form_fields(form_body[1])}
    return {}


def _response_schema(operation: Mapping[str, Any]) -> Any:
    responses = operation.get("responses") or {}
    for status in SUCCESS_STATUSES:
        response = responses.get(status)
        if response is None and status.isdigit():
            response = responses.get(int(status))
        if not isinstance(response, Mapping):
            continue
        if "schema" in response:
            return response["schema"]
        if media := _media_schema(response.get("content") or {}, JSON_MEDIA_TYPES):
            return media[1]
    return None


def _parameters(path_item: Mapping[str, Any], operation: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    merged: dict[tuple[str, str], Mapping[str, Any]] = {}
    for param in [*(path_item.get("parameters") or []), *(operation.get("parameters") or [])]:
        if isinstance(param, Mapping):
            merged[(str(param.get("in")), str(param.get("name")))] = param
    return list(merged.values())


def convert_document(document: Mapping[str, Any]) -> YApiCatalog:
    """Translate an OpenAPI/Swagger ``document`` into YApi export payloads.

    Operations are grouped into categories by their first tag, in the order
    tags are declared (declared ``tags`` first, then first appearance).
    Category and interface ids are assigned sequentially from 1, so
    identical documents always produce identical catalogs.

    Args:
        document: Parsed Swagger 2.0 or OpenAPI 3.x document.

    Returns:
        YApiCatalog: Project, category menu and export payloads.
    """

    resolver = _RefResolver(document)
    resolved = resolver.resolve({key: value for key, value in document.items() if key == "paths"})
    info = document.get("info") or {}
    tag_order: list[str] = [str(tag["name"]) for tag in document.get("tags") or [] if isinstance(tag, Mapping)]
    tag_descriptions = {
        str(tag["name"]): str(tag.get("description") or "")
        for tag in document.get("tags") or []
        if isinstance(tag, Mapping)
    }
    grouped: dict[str, list[dict[str, Any]]] = {}
    interface_id = 0
    for path, path_item in (resolved.get("paths") or {}).items():
        if not isinstance(path_item, Mapping):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, Mapping):
                continue
            interface_id += 1
            tags = [str(tag) for tag in operation.get("tags") or []] or [DEFAULT_TAG]
            if tags[0] not in tag_order:
                tag_order.append(tags[0])
            parameters = _parameters(path_item, operation)
            response = _response_schema(operation)
            record: dict[str, Any] = {
                "_id": interface_id,
                "title": operation.get("summary") or operation.get("operationId") or path,
                "desc": operation.get("description") or "",
                "method": method.upper(),
                "path": path,
                "project_id": PROJECT_ID,
                "tag": tags,
                "up_time": 0,
                "req_query": [
                    {
                        "name": param.get("name", ""),
                        "required": "1" if param.get("required") else "0",
                        "desc": param.get("description") or "",
                    }
                    for param in parameters
                    if param.get("in") == "query"
                ],
                "req_params": [
                    {"name": param.get("name", ""), "desc": param.get("description") or ""}
                    for param in parameters
                    if param.get("in") == "path"
                ],
                "req_headers": [
                    {"name": param.get("name", ""), "required": "1" if param.get("required") else "0"}
                    for param in parameters
                    if param.get("in") == "header"
                ],
                "res_body_type": "json",
                "res_body": json.dumps(response) if response is not None else "",
                "res_body_is_json_schema": True,
                **_request_body(operation, parameters),
            }
            grouped.setdefault(tags[0], []).append(record)

    catalog = YApiCatalog(
        project={
            "_id": PROJECT_ID,
            "name": str(info.get("title") or ""),
            "basepath": _basepath(document),
            "env": [],
        },
    )
    for category_id, tag in enumerate((tag for tag in tag_order if tag in grouped), start=1):
        interfaces = grouped[tag]
        for record in interfaces:
            record["catid"] = category_id
        catalog.menu.append({"_id": category_id, "name": tag, "desc": tag_descriptions.get(tag, "")})
        catalog.export.append({"name": tag, "desc": tag_descriptions.get(tag, ""), "list": interfaces})
    return catalog


__all__ = ["YApiCatalog", "convert_document"]
