# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn the interfaces of one resolved category into weighted code fragments."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .cache import CatalogKey
from .codegen import SchemaCompiler, generate_interface_code
from .concurrency import fan_out
from .config.models import SyntheticalConfig
from .fetcher import CatalogFetcher
from .hooks import InterfaceHooks
from .models import GroupSettings, Interface, InterfaceFragment, ProjectInfo, WeightVector
from .typescript import compile_schema

LOGGER = logging.getLogger(__name__)

REQUEST_FUNCTION_FILE_NAME: Final[str] = "request.ts"
REQUEST_HOOK_MAKER_FILE_NAME: Final[str] = "makeRequestHook.ts"


@dataclass(frozen=True, slots=True)
class CategoryJob:
    """One resolved category of one project, positioned in the output order.

    Attributes:
        key: Catalog identity the category is read from.
        config: Effective options for the category.
        project_info: Project metadata attached to every interface.
        server_index: Position of the server in the configuration.
        project_index: Position of the project after token expansion.
        category_index: Position of the category across the project's resolved categories.
    """

    key: CatalogKey
    config: SyntheticalConfig
    project_info: ProjectInfo
    server_index: int
    project_index: int
    category_index: int

    def weights(self, interface_index: int) -> WeightVector:
        return WeightVector(self.server_index, self.project_index, self.category_index, interface_index)


def normalise_output_path(cwd: Path, path: str | os.PathLike[str]) -> Path:
    """Return ``path`` as an absolute, lexically normalised path under ``cwd``."""

    return Path(os.path.normpath(os.path.join(cwd, path)))


class InterfaceTransformer:
    """Pre-process, order and render the interfaces of a category."""

    def __init__(self, fetcher: CatalogFetcher, *, cwd: Path, compiler: SchemaCompiler = compile_schema) -> None:
        self._fetcher = fetcher
        self._cwd = cwd
        self._compiler = compiler

    async def transform_category(self, job: CategoryJob) -> list[InterfaceFragment]:
        """Return one fragment per surviving interface of ``job``.

        Pre-processing and rendering run concurrently; interfaces are ordered
        by their backend id before indices are assigned, so the weights do
        not depend on the order the backend listed them in.
        """

        interfaces = await self._fetcher.fetch_interface_list(job.key, job.config.category_id)
        project = job.project_info.project
        attached = [interface.model_copy(update={"project": project}) for interface in interfaces]
        hooks = InterfaceHooks.from_config(job.config)

        processed = await fan_out(hooks.preprocess(interface) for interface in attached)
        survivors = sorted(
            (
                (original.id, result)
                for original, result in zip(attached, processed, strict=True)
                if result is not None
            ),
            key=lambda pair: pair[0],
        )
        dropped = len(attached) - len(survivors)
        if dropped:
            LOGGER.debug("category %s: %d interface(s) dropped by preprocess hook", job.config.category_id, dropped)

        return await fan_out(
            self._render(interface, hooks, job.weights(index)) for index, (_, interface) in enumerate(survivors)
        )

    async def _render(self, interface: Interface, hooks: InterfaceHooks, weights: WeightVector) -> InterfaceFragment:
        config = hooks.config
        output_path = normalise_output_path(self._cwd, await hooks.output_file_path(interface))
        code = await generate_interface_code(interface, hooks, self._compiler)
        return InterfaceFragment(
            output_path=output_path,
            code=code,
            weights=weights,
            settings=self._group_settings(config, output_path),
            interface_id=interface.id,
        )

    def _group_settings(self, config: SyntheticalConfig, output_path: Path) -> GroupSettings:
        if config.request_function_file_path:
            request_path = normalise_output_path(self._cwd, config.request_function_file_path)
        else:
            request_path = output_path.parent / REQUEST_FUNCTION_FILE_NAME
        hook_path: Path | None = None
        if config.react_hooks.enabled:
            configured = config.react_hooks.request_hook_maker_file_path
            hook_path = (
                normalise_output_path(self._cwd, configured)
                if configured
                else output_path.parent / REQUEST_HOOK_MAKER_FILE_NAME
            )
        return GroupSettings(
            types_only=config.types_only,
            request_function_file_path=request_path,
            request_hook_maker_file_path=hook_path,
        )


__all__ = ["CategoryJob", "InterfaceTransformer", "normalise_output_path"]
