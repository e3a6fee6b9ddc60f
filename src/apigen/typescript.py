# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compile JSON schemas into TypeScript declarations."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any, Final

from .schema import TS_TYPE_KEY

INDENT: Final[str] = "  "
_IDENTIFIER: Final = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PRIMITIVES: Final[Mapping[str, str]] = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}


def _property_key(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name, ensure_ascii=False)


def _doc_comment(text: str, indent: str) -> list[str]:
    lines = [line.strip() for line in str(text).replace("*/", "*\\/").splitlines() if line.strip()]
    if not lines:
        return []
    if len(lines) == 1:
        return [f"{indent}/** {lines[0]} */"]
    return [f"{indent}/**", *(f"{indent} * {line}" for line in lines), f"{indent} */"]


def _union(parts: Sequence[str]) -> str:
    unique = list(dict.fromkeys(parts))
    if not unique:
        return "any"
    return unique[0] if len(unique) == 1 else " | ".join(unique)


def _wrap(type_text: str) -> str:
    return f"({type_text})" if (" | " in type_text or " & " in type_text) else type_text


def _object_body(schema: Mapping[str, Any], depth: int) -> str:
    properties: Mapping[str, Any] = schema.get("properties") or {}
    required = set(schema.get("required") or [])
    indent = INDENT * (depth + 1)
    lines: list[str] = []
    for name, prop in properties.items():
        prop = prop if isinstance(prop, Mapping) else {}
        lines.extend(_doc_comment(prop.get("description") or prop.get("title") or "", indent))
        optional = "" if name in required else "?"
        lines.append(f"{indent}{_property_key(str(name))}{optional}: {render_type(prop, depth + 1)}")
    additional = schema.get("additionalProperties")
    if additional:
        value_type = render_type(additional, depth + 1) if isinstance(additional, Mapping) else "any"
        lines.append(f"{indent}[k: string]: {value_type}")
    if not lines:
        return "{}"
    return "{\n" + "\n".join(lines) + "\n" + INDENT * depth + "}"


def render_type(schema: Any, depth: int = 0) -> str:
    """Return the TypeScript type expression for ``schema``.

    Args:
        schema: JSON schema node (unknown shapes degrade to ``any``).
        depth: Nesting level used for indentation of inline object literals.

    Returns:
        str: TypeScript type text.
    """

    if not isinstance(schema, Mapping) or not schema:
        return "any"
    if TS_TYPE_KEY in schema:
        return str(schema[TS_TYPE_KEY])
    if "enum" in schema and isinstance(schema["enum"], list):
        return _union([json.dumps(value, ensure_ascii=False) for value in schema["enum"]])
    if "const" in schema:
        return json.dumps(schema["const"], ensure_ascii=False)
    for keyword in ("oneOf", "anyOf"):
        if isinstance(schema.get(keyword), list):
            return _union([render_type(item, depth) for item in schema[keyword]])
    if isinstance(schema.get("allOf"), list):
        parts = [_wrap(render_type(item, depth)) for item in schema["allOf"]]
        return " & ".join(dict.fromkeys(parts)) or "any"

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        return _union([render_type({**schema, "type": item}, depth) for item in schema_type])
    if schema_type in _PRIMITIVES:
        return _PRIMITIVES[schema_type]
    if schema_type == "array":
        items = schema.get("items")
        if isinstance(items, list):
            return "[" + ", ".join(render_type(item, depth) for item in items) + "]"
        return f"{_wrap(render_type(items, depth))}[]"
    if schema_type == "object" or "properties" in schema:
        return _object_body(schema, depth)
    return "any"


def is_empty_object(schema: Any) -> bool:
    """Return ``True`` when ``schema`` carries no usable structure."""

    if not isinstance(schema, Mapping) or not schema:
        return True
    return (
        schema.get("type") == "object"
        and not schema.get("properties")
        and not schema.get("additionalProperties")
    )


def compile_schema(schema: Any, type_name: str) -> str:
    """Compile ``schema`` into an exported TypeScript declaration named ``type_name``.

    Object schemas become ``export interface``; anything else becomes a
    ``export type`` alias. Output is deterministic for identical input.

    >>> compile_schema({"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]}, "Res")
    'export interface Res {\\n  id: number\\n}'
    """

    lines: list[str] = []
    if isinstance(schema, Mapping):
        lines.extend(_doc_comment(schema.get("description") or "", ""))
    is_object = isinstance(schema, Mapping) and (schema.get("type") == "object" or "properties" in schema)
    if is_object and not any(key in schema for key in ("oneOf", "anyOf", "allOf", "enum", TS_TYPE_KEY)):
        lines.append(f"export interface {type_name} {_object_body(schema, 0)}")
    else:
        lines.append(f"export type {type_name} = {render_type(schema)}")
    return "\n".join(lines)


__all__ = ["compile_schema", "is_empty_object", "render_type"]
