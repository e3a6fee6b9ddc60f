# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render the TypeScript fragment for a single interface."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from .config.models import CommentConfig, SyntheticalConfig
from .hooks import InterfaceHooks, maybe_await
from .models import Interface
from .schema import request_data_schema, response_data_schema
from .typescript import compile_schema, is_empty_object

SchemaCompiler = Callable[[Any, str], "str | Awaitable[str]"]

FALLBACK_FUNCTION_NAME = "ErrorRequestFunctionName"


@dataclass(frozen=True, slots=True)
class InterfaceNames:
    """Identifiers synthesised for one interface."""

    request_function: str
    request_data_type: str
    response_data_type: str
    request_hook: str = ""


def _comment_config(config: SyntheticalConfig) -> CommentConfig:
    comment = config.comment
    if config.server_type == "swagger":
        # swagger documents carry no tags, timestamps or browse pages
        return comment.model_copy(update={"tag": False, "update_time": False, "link": False})
    return comment


def format_update_time(up_time: int) -> str:
    return datetime.fromtimestamp(up_time, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def render_comment(interface: Interface, config: SyntheticalConfig, subject: str) -> str:
    """Return the JSDoc block describing ``subject`` of ``interface``.

    Args:
        interface: Interface being documented.
        config: Effective options; ``config.comment`` selects the tags.
        subject: What the following declaration is, e.g. ``"request type"``.

    Returns:
        str: The comment text, or ``""`` when comments are disabled.
    """

    comment = _comment_config(config)
    if not comment.enabled:
        return ""
    title = str(interface.title).replace("/", "\\/")
    description = f"[{title}↗]({interface.url})" if comment.link else title
    summary: list[tuple[str, str | list[str]]] = []
    category = interface.category
    if comment.category and category is not None:
        summary.append(("category", f"[{category.name}↗]({category.url})" if comment.link else category.name))
    if comment.tag:
        summary.append(("tag", [f"`{tag}`" for tag in interface.tag]))
    if comment.request_header:
        summary.append(("method", interface.method.upper()))
        summary.append(("path", interface.path))
    if comment.update_time and interface.up_time:
        summary.append(("updateTime", f"`{format_update_time(interface.up_time)}`"))
    if comment.extra_tags is not None:
        for tag in comment.extra_tags(interface.model_copy(deep=True)) or []:
            entry = (str(tag["name"]), tag["value"]) if isinstance(tag, Mapping) else (str(tag.name), tag.value)
            position = tag.get("position") if isinstance(tag, Mapping) else getattr(tag, "position", "end")
            if position == "start":
                summary.insert(0, entry)
            else:
                summary.append(entry)

    lines: list[str] = []
    if comment.title:
        lines.extend([f" * {subject} of {description}", " *"])
    for label, value in summary:
        values = value if isinstance(value, list) else [value]
        if not any(values):
            continue
        lines.append(f" * @{label} {', '.join(str(item) for item in values)}")
    return "\n".join(["/**", *lines, " */"])


async def synthesise_names(interface: Interface, hooks: InterfaceHooks) -> InterfaceNames:
    function_name = await hooks.request_function_name(interface) or FALLBACK_FUNCTION_NAME
    return InterfaceNames(
        request_function=function_name,
        request_data_type=await hooks.request_data_type_name(interface, function_name),
        response_data_type=await hooks.response_data_type_name(interface, function_name),
        request_hook=await hooks.request_hook_name(interface, function_name),
    )


async def generate_interface_code(
    interface: Interface,
    hooks: InterfaceHooks,
    compiler: SchemaCompiler = compile_schema,
) -> str:
    """Return the request/response types and request function for ``interface``."""

    config = hooks.config
    names = await synthesise_names(interface, hooks)
    request_schema = request_data_schema(interface, config.custom_type_mapping)
    response_schema = response_data_schema(interface, config.custom_type_mapping, config.data_key)
    request_type = str(await maybe_await(compiler(request_schema, names.request_data_type))).strip()
    response_type = str(await maybe_await(compiler(response_schema, names.response_data_type))).strip()

    blocks = [
        _join(render_comment(interface, config, "Request type"), request_type),
        _join(render_comment(interface, config, "Response type"), response_type),
    ]
    if not config.types_only:
        optional = "?" if is_empty_object(request_schema) else ""
        function = "\n".join(
            [
                f"export const {names.request_function} = (params{optional}: {names.request_data_type}) => {{",
                f"  return request.{interface.method.lower()}<{names.response_data_type}>("
                f"{json.dumps(interface.path, ensure_ascii=False)}, params)",
                "}",
            ],
        )
        blocks.append(_join(render_comment(interface, config, "Request function"), function))
        if names.request_hook:
            hook = f"export const {names.request_hook} = makeRequestHook({names.request_function})"
            blocks.append(_join(render_comment(interface, config, "React hook"), hook))
    return "\n\n".join(blocks)


def _join(comment: str, body: str) -> str:
    return f"{comment}\n{body}" if comment else body


__all__ = [
    "InterfaceNames",
    "SchemaCompiler",
    "format_update_time",
    "generate_interface_code",
    "render_comment",
    "synthesise_names",
]
