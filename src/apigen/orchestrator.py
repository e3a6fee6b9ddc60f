# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High level orchestration of a generation run."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

import httpx

from .aggregator import OutputGroup, aggregate
from .backends import BackendAdapter, adapter_for
from .backends.swagger import LOOPBACK_HOST
from .cache import CatalogCache, CatalogKey
from .codegen import SchemaCompiler
from .concurrency import fan_out
from .config.models import ApigenSettings, ProjectConfig, ServerConfig, SyntheticalConfig, define_config
from .fetcher import CatalogFetcher
from .models import InterfaceFragment
from .resolver import resolve_category_ids
from .transform import CategoryJob, InterfaceTransformer
from .typescript import compile_schema

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final[float] = 30.0

OutputFileList = dict[Path, OutputGroup]


@dataclass(frozen=True)
class GeneratorDeps:
    """Collaborators that tests and embedding applications may replace.

    Attributes:
        client: Shared HTTP client; closed on :meth:`Generator.destroy` only
            when the generator created it.
        transport: Transport for an internally created client.
        cache: Catalog cache scoped to the run.
        compiler: JSON-schema to TypeScript compiler.
    """

    client: httpx.AsyncClient | None = None
    transport: httpx.AsyncBaseTransport | None = None
    cache: CatalogCache = field(default_factory=CatalogCache)
    compiler: SchemaCompiler = compile_schema


class Generator:
    """Drive servers -> projects -> categories -> interfaces into output groups."""

    def __init__(
        self,
        config: ApigenSettings | ServerConfig | Sequence[ServerConfig],
        *,
        cwd: Path | None = None,
        deps: GeneratorDeps | None = None,
    ) -> None:
        """Create a generator for ``config``.

        Args:
            config: Loaded settings, a single server or a list of servers.
            cwd: Directory output paths are resolved against.
            deps: Optional collaborator overrides.
        """

        if isinstance(config, ApigenSettings):
            self.settings = config
        else:
            self.settings = ApigenSettings(servers=define_config(config))
        self.cwd = (cwd or Path.cwd()).resolve()
        deps = deps or GeneratorDeps()
        self._owns_client = deps.client is None
        self.client = deps.client or httpx.AsyncClient(
            timeout=self.settings.timeout or DEFAULT_TIMEOUT,
            transport=deps.transport,
            # loopback adapters must never be routed through an environment proxy
            mounts=None if deps.transport else {f"http://{LOOPBACK_HOST}": httpx.AsyncHTTPTransport()},
        )
        self.cache = deps.cache
        self.fetcher = CatalogFetcher(self.client, self.cache)
        self.transformer = InterfaceTransformer(self.fetcher, cwd=self.cwd, compiler=deps.compiler)
        self.servers: list[ServerConfig] = list(self.settings.servers)
        self._adapters: list[BackendAdapter] = []
        self._prepared = False

    async def prepare(self) -> None:
        """Start backend adapters and normalise every server URL."""

        if self._prepared:
            return
        self._prepared = True
        prepared: list[ServerConfig] = []
        for server in self.servers:
            adapter = adapter_for(server, self.client)
            self._adapters.append(adapter)
            base_url = await adapter.start()
            LOGGER.debug("server %s (%s) available at %s", server.server_url, server.server_type, base_url)
            prepared.append(server.normalised(base_url))
        self.servers = prepared

    async def generate(self) -> OutputFileList:
        """Return the merged output groups keyed by absolute output path.

        Raises:
            ApigenError: On configuration or upstream failures; sibling work
                is cancelled and the first error propagates unwrapped.
        """

        await self.prepare()
        per_server = await fan_out(
            self._generate_server(server_index, server) for server_index, server in enumerate(self.servers)
        )
        fragments = [fragment for server_fragments in per_server for fragment in server_fragments]
        groups = aggregate(fragments)
        LOGGER.debug("aggregated %d fragment(s) into %d file(s)", len(fragments), len(groups))
        return groups

    async def destroy(self) -> None:
        """Cancel orphaned fetches, stop adapters in reverse start order and close an owned client."""

        adapters, self._adapters = self._adapters, []
        try:
            await self.cache.drain()
            for adapter in reversed(adapters):
                await adapter.stop()
        finally:
            if self._owns_client:
                await self.client.aclose()

    async def run(self) -> OutputFileList:
        """Prepare, generate and always tear down."""

        try:
            await self.prepare()
            return await self.generate()
        finally:
            await self.destroy()

    async def _generate_server(self, server_index: int, server: ServerConfig) -> list[InterfaceFragment]:
        projects = [expanded for project in server.projects for expanded in project.expand_tokens()]
        per_project = await fan_out(
            self._generate_project(server_index, server, project_index, project)
            for project_index, project in enumerate(projects)
        )
        return [fragment for fragments in per_project for fragment in fragments]

    async def _generate_project(
        self,
        server_index: int,
        server: ServerConfig,
        project_index: int,
        project: ProjectConfig,
    ) -> list[InterfaceFragment]:
        key = CatalogKey(server.server_url, str(project.token))
        project_info = await self.fetcher.fetch_project_info(key)
        jobs: list[CategoryJob] = []
        for category in project.categories:
            for category_id in resolve_category_ids(category.selectors, project_info.category_ids):
                config = SyntheticalConfig.merge(server, project, category, category_id=category_id)
                config = config.model_copy(
                    update={
                        "mock_url": project_info.mock_url,
                        "dev_url": project_info.env_domain(config.dev_env_name),
                        "prod_url": project_info.env_domain(config.prod_env_name),
                    },
                )
                jobs.append(
                    CategoryJob(
                        key=key,
                        config=config,
                        project_info=project_info,
                        server_index=server_index,
                        project_index=project_index,
                        category_index=len(jobs),
                    ),
                )
        LOGGER.debug("project %s: %d resolved categor(ies)", project_info.project.id, len(jobs))
        per_category = await fan_out(self.transformer.transform_category(job) for job in jobs)
        return [fragment for fragments in per_category for fragment in fragments]


__all__ = ["Generator", "GeneratorDeps", "OutputFileList"]
