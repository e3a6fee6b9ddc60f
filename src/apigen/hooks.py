# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User hook capability with total default behaviour."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Final, TypeVar

from .casing import CASE, CaseHelper
from .config.models import Hook, SyntheticalConfig
from .models import Interface

ResultT = TypeVar("ResultT")

DEFAULT_OUTPUT_TEMPLATE: Final[str] = "src/service/{module}/index.ts"
DEFAULT_MODULE: Final[str] = "common"


async def maybe_await(value: ResultT | Awaitable[ResultT]) -> ResultT:
    """Return ``value`` or its awaited result when a hook answered asynchronously."""

    if inspect.isawaitable(value):
        return await value
    return value


def default_request_function_name(interface: Interface, case: CaseHelper) -> str:
    """``GET /user/info/{id}`` becomes ``getUserInfoId``."""

    return case.camel(f"{interface.method} {interface.path}")


def default_output_file_path(interface: Interface, case: CaseHelper) -> str:
    segments = [segment for segment in interface.path.split("/") if segment and "{" not in segment]
    module = case.camel(segments[0]) if segments else DEFAULT_MODULE
    return DEFAULT_OUTPUT_TEMPLATE.format(module=module or DEFAULT_MODULE)


@dataclass(frozen=True, slots=True)
class InterfaceHooks:
    """Callbacks used by the transform stage, each falling back to a default.

    Hooks may be plain functions or coroutine functions; every method here is
    a coroutine so callers never branch on hook presence. User hooks always
    receive a deep copy of the interface.
    """

    config: SyntheticalConfig
    case: CaseHelper = CASE

    @classmethod
    def from_config(cls, config: SyntheticalConfig) -> InterfaceHooks:
        return cls(config=config)

    async def preprocess(self, interface: Interface) -> Interface | None:
        """Return the (possibly replaced) interface, or ``None`` to drop it.

        The hook receives a deep copy, so it cannot corrupt the shared catalog.
        """

        hook = self.config.preprocess_interface
        if hook is None:
            return interface
        result = await maybe_await(hook(interface.model_copy(deep=True), self.case, self.config))
        return result or None

    async def output_file_path(self, interface: Interface) -> str:
        target = self.config.output_file_path
        if target is None:
            return default_output_file_path(interface, self.case)
        if isinstance(target, str):
            return target
        return str(await maybe_await(target(interface.model_copy(deep=True), self.case)))

    async def request_function_name(self, interface: Interface) -> str:
        return await self._name(
            self.config.get_request_function_name,
            interface,
            default_request_function_name(interface, self.case),
        )

    async def request_data_type_name(self, interface: Interface, function_name: str) -> str:
        return await self._name(
            self.config.get_request_data_type_name,
            interface,
            f"{self.case.pascal(function_name)}Request",
        )

    async def response_data_type_name(self, interface: Interface, function_name: str) -> str:
        return await self._name(
            self.config.get_response_data_type_name,
            interface,
            f"{self.case.pascal(function_name)}Response",
        )

    async def request_hook_name(self, interface: Interface, function_name: str) -> str:
        hooks = self.config.react_hooks
        if not hooks.enabled:
            return ""
        return await self._name(hooks.get_request_hook_name, interface, f"use{self.case.pascal(function_name)}")

    async def _name(self, hook: Hook | None, interface: Interface, default: str) -> str:
        if hook is None:
            return default
        return str(await maybe_await(hook(interface.model_copy(deep=True), self.case)) or default)


__all__ = [
    "InterfaceHooks",
    "default_output_file_path",
    "default_request_function_name",
    "maybe_await",
]
