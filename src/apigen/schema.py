# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Derive request and response JSON schemas from interface records."""

from __future__ import annotations

import copy
import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Final

from .models import Interface, JsonSchema

LOGGER = logging.getLogger(__name__)

BODY_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT", "PATCH", "DELETE"})
FILE_TYPE: Final[str] = "FileData"
TS_TYPE_KEY: Final[str] = "tsType"

_PATH_PARAMETER: Final = re.compile(r"\{([^{}/]+)\}|/:([A-Za-z_]\w*)")


def parse_json(text: str | None) -> Any:
    """Parse ``text`` as JSON, returning ``None`` for blank or invalid input."""

    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        LOGGER.debug("ignoring non-JSON schema body: %.60s", text)
        return None


def infer_schema(sample: Any) -> JsonSchema:
    """Build a JSON schema describing the example value ``sample``."""

    if isinstance(sample, bool):
        return {"type": "boolean"}
    if isinstance(sample, (int, float)):
        return {"type": "number"}
    if isinstance(sample, str):
        return {"type": "string"}
    if isinstance(sample, list):
        return {"type": "array", "items": infer_schema(sample[0]) if sample else {}}
    if isinstance(sample, Mapping):
        return {
            "type": "object",
            "properties": {str(key): infer_schema(value) for key, value in sample.items()},
            "required": [str(key) for key in sample],
        }
    return {}


def apply_type_mapping(schema: Any, mapping: Mapping[str, str]) -> Any:
    """Return a copy of ``schema`` with ``type`` names substituted via ``mapping``."""

    if isinstance(schema, list):
        return [apply_type_mapping(item, mapping) for item in schema]
    if not isinstance(schema, Mapping):
        return schema
    mapped: dict[str, Any] = {}
    for key, value in schema.items():
        if key == "type" and isinstance(value, str):
            mapped[key] = mapping.get(value, value)
        elif key == "type" and isinstance(value, list):
            mapped[key] = [mapping.get(item, item) if isinstance(item, str) else item for item in value]
        else:
            mapped[key] = apply_type_mapping(value, mapping)
    return mapped


def _body_schema(text: str | None, is_json_schema: bool) -> JsonSchema:
    parsed = parse_json(text)
    if parsed is None:
        return {}
    if is_json_schema and isinstance(parsed, Mapping):
        return copy.deepcopy(dict(parsed))
    return infer_schema(parsed)


def path_parameter_names(path: str) -> list[str]:
    """Return the ``{name}`` and ``:name`` placeholders of ``path`` in order.

    >>> path_parameter_names("/user/{id}/posts/:post")
    ['id', 'post']
    """

    names: list[str] = []
    for braced, colon in _PATH_PARAMETER.findall(path):
        name = (braced or colon).strip()
        if name and name not in names:
            names.append(name)
    return names


def _object_schema() -> JsonSchema:
    return {"type": "object", "properties": {}, "required": []}


def request_data_schema(interface: Interface, custom_type_mapping: Mapping[str, str] | None = None) -> JsonSchema:
    """Return the JSON schema of everything a caller passes to the request function.

    Path parameters and query parameters become string properties. For body
    methods the form fields or the JSON body are merged in; a non-object JSON
    body (an array, say) is returned as-is when there are no other parameters.
    """

    schema = _object_schema()
    properties: dict[str, Any] = schema["properties"]
    required: list[str] = schema["required"]

    body: JsonSchema = {}
    if interface.method.upper() in BODY_METHODS:
        if interface.req_body_type == "form":
            for field in interface.req_body_form:
                prop: JsonSchema = {TS_TYPE_KEY: FILE_TYPE} if field.type == "file" else {"type": "string"}
                if field.desc:
                    prop["description"] = field.desc
                properties[field.name] = prop
                if field.is_required:
                    required.append(field.name)
        elif interface.req_body_type == "json":
            body = _body_schema(interface.req_body_other, interface.req_body_is_json_schema)

    for query in interface.req_query:
        properties[query.name] = {"type": "string", **({"description": query.desc} if query.desc else {})}
        if query.is_required:
            required.append(query.name)
    for param in interface.req_params:
        properties[param.name] = {"type": "string", **({"description": param.desc} if param.desc else {})}
        required.append(param.name)
    declared = {param.name for param in interface.req_params}
    for name in path_parameter_names(interface.path):
        if name not in declared:
            properties[name] = {"type": "string"}
            required.append(name)

    if body:
        if body.get("type") == "object" or "properties" in body:
            properties.update(body.get("properties") or {})
            for name in body.get("required") or []:
                if name not in required:
                    required.append(name)
        elif not properties:
            schema = body
        else:
            LOGGER.debug("non-object body of %s %s merged as 'data'", interface.method, interface.path)
            properties["data"] = body
            required.append("data")

    mapping = custom_type_mapping or {}
    return apply_type_mapping(schema, mapping) if mapping else schema


def response_data_schema(
    interface: Interface,
    custom_type_mapping: Mapping[str, str] | None = None,
    data_key: str | None = None,
) -> JsonSchema:
    """Return the response JSON schema, unwrapped to ``data_key`` when configured."""

    schema: JsonSchema = {}
    if interface.res_body_type in (None, "json"):
        schema = _body_schema(interface.res_body, interface.res_body_is_json_schema)
    if data_key:
        unwrapped = (schema.get("properties") or {}).get(data_key)
        if isinstance(unwrapped, Mapping):
            schema = dict(unwrapped)
    mapping = custom_type_mapping or {}
    return apply_type_mapping(schema, mapping) if mapping else schema


__all__ = [
    "BODY_METHODS",
    "FILE_TYPE",
    "TS_TYPE_KEY",
    "apply_type_mapping",
    "infer_schema",
    "parse_json",
    "path_parameter_names",
    "request_data_schema",
    "response_data_schema",
]
