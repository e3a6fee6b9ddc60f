# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Write merged output groups, their runtime scaffolds and the index file."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .aggregator import OutputGroup
from .config.models import DEFAULT_INDEX_FILE
from .formatter import run_formatter

LOGGER = logging.getLogger(__name__)

GENERATED_BANNER: Final[str] = "/* This file is generated by apigen. Do not edit it by hand. */"
FILE_HEADER: Final[str] = (
    "/* prettier-ignore-start */\n/* tslint:disable */\n/* eslint-disable */\n\n" + GENERATED_BANNER + "\n\n"
)
FILE_FOOTER: Final[str] = "\n\n/* prettier-ignore-end */\n"
FILE_DATA_ALIAS: Final[str] = "// @ts-ignore\ntype FileData = File"

_JS_SUFFIX: Final = re.compile(r"\.js(x)?$")
_TS_SUFFIX: Final = re.compile(r"\.tsx?$")

REQUEST_FUNCTION_TEMPLATE: Final[str] = """\
export interface RequestOptions {
  /**
   * Server the request is sent to.
   *
   * - `prod`: production server
   * - `dev`: development server
   * - `mock`: mock server
   *
   * @default prod
   */
  server?: 'prod' | 'dev' | 'mock'
}

const baseUrls: Record<NonNullable<RequestOptions['server']>, string> = {
  prod: '',
  dev: '',
  mock: '',
}

async function send<TResponseData>(
  method: string,
  path: string,
  params?: unknown,
  options: RequestOptions = { server: 'prod' },
): Promise<TResponseData> {
  const url = `${baseUrls[options.server ?? 'prod']}${path}`
  // Replace with the HTTP client used by your application.
  const response = await fetch(url, {
    method,
    headers: { 'Content-Type': 'application/json' },
    body: method === 'GET' || method === 'HEAD' ? undefined : JSON.stringify(params ?? {}),
  })
  return (await response.json()) as TResponseData
}

const request = {
  get: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('GET', path, params, options),
  post: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('POST', path, params, options),
  put: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('PUT', path, params, options),
  patch: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('PATCH', path, params, options),
  delete: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('DELETE', path, params, options),
  head: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('HEAD', path, params, options),
  options: <T>(path: string, params?: unknown, options?: RequestOptions) => send<T>('OPTIONS', path, params, options),
}

export default request
"""

REQUEST_HOOK_MAKER_TEMPLATE: Final[str] = """\
import { useEffect, useState } from 'react'

export default function makeRequestHook<TRequestData, TResponseData>(
  request: (requestData: TRequestData) => Promise<TResponseData>,
) {
  return function useRequest(requestData: TRequestData) {
    const [loading, setLoading] = useState(true)
    const [data, setData] = useState<TResponseData>()

    useEffect(() => {
      request(requestData).then(result => {
        setLoading(false)
        setData(result)
      })
    }, [JSON.stringify(requestData)])

    return { loading, data }
  }
}
"""


def to_typescript_path(path: Path) -> Path:
    """Rewrite a ``.js``/``.jsx`` suffix to ``.ts``/``.tsx``."""

    return Path(_JS_SUFFIX.sub(r".ts\1", str(path)))


def relative_import(from_file: Path, to_file: Path) -> str:
    """Return the extension-less module specifier for ``to_file`` as seen from ``from_file``."""

    relative = Path(os.path.relpath(to_file, from_file.parent)).as_posix()
    relative = _TS_SUFFIX.sub("", relative)
    return relative if relative.startswith(".") else f"./{relative}"


def root_directories(paths: Sequence[Path]) -> list[Path]:
    """Return the directories of ``paths`` that are not nested in one another."""

    directories = sorted({path.parent for path in paths})
    return [
        directory
        for directory in directories
        if not any(other != directory and directory.is_relative_to(other) for other in directories)
    ]


@dataclass(slots=True)
class WriteReport:
    """Files touched by :meth:`OutputWriter.write` (or planned, in dry-run mode)."""

    outputs: list[Path] = field(default_factory=list)
    scaffolds: list[Path] = field(default_factory=list)
    index_file: Path | None = None
    dry_run: bool = False

    @property
    def all_files(self) -> list[Path]:
        extra = [self.index_file] if self.index_file else []
        return [*self.outputs, *self.scaffolds, *extra]


class OutputWriter:
    """Materialise output groups on disk.

    Args:
        cwd: Directory relative paths (index file) are resolved against.
        index_file: Path of the re-export index, or ``None`` to skip it.
        formatter: Optional formatter command run over the written outputs.
        dry_run: Plan the writes without touching the filesystem.
    """

    def __init__(
        self,
        cwd: Path,
        *,
        index_file: str | None = DEFAULT_INDEX_FILE,
        formatter: Sequence[str] | None = None,
        dry_run: bool = False,
    ) -> None:
        self.cwd = cwd
        self.index_file = cwd / index_file if index_file else None
        self.formatter = list(formatter) if formatter else None
        self.dry_run = dry_run

    def render(self, group: OutputGroup, output_path: Path) -> str:
        """Return the full text of ``group`` written at ``output_path``."""

        imports: list[str] = []
        if group.types_only:
            imports.append(FILE_DATA_ALIAS)
        else:
            request_path = to_typescript_path(group.request_function_file_path or output_path.parent / "request.ts")
            imports.append(f"// @ts-ignore\nimport request from {_quote(relative_import(output_path, request_path))}")
            hook_path = group.request_hook_maker_file_path
            if hook_path is not None:
                specifier = relative_import(output_path, to_typescript_path(hook_path))
                imports.append(f"// @ts-ignore\nimport makeRequestHook from {_quote(specifier)}")
        body = group.content.strip()
        return FILE_HEADER + "\n\n".join([*imports, body] if body else imports) + FILE_FOOTER

    def scaffolds(self, group: OutputGroup) -> dict[Path, str]:
        """Return the runtime helper files ``group`` needs that do not exist yet."""

        if group.types_only:
            return {}
        missing: dict[Path, str] = {}
        request_path = group.request_function_file_path
        if request_path is not None and not request_path.exists():
            missing[to_typescript_path(request_path)] = REQUEST_FUNCTION_TEMPLATE
        hook_path = group.request_hook_maker_file_path
        if hook_path is not None and not hook_path.exists():
            missing[to_typescript_path(hook_path)] = REQUEST_HOOK_MAKER_TEMPLATE
        return missing

    def render_index(self, outputs: Sequence[Path]) -> str:
        if self.index_file is None:
            return ""
        lines = [
            f"export * from {_quote(relative_import(self.index_file, directory / 'index.ts'))}"
            for directory in root_directories(outputs)
            if directory / "index.ts" != self.index_file
        ]
        return FILE_HEADER + "\n".join(lines) + FILE_FOOTER

    def write(self, groups: Mapping[Path, OutputGroup]) -> WriteReport:
        """Write every group, missing scaffolds and the index file.

        Returns:
            WriteReport: Paths written (or that would be written when dry-running).

        Raises:
            FormatterError: If the configured formatter fails.
            OSError: If a file cannot be written.
        """

        report = WriteReport(dry_run=self.dry_run)
        pending: dict[Path, str] = {}
        for raw_path, group in groups.items():
            output_path = to_typescript_path(raw_path)
            pending[output_path] = self.render(group, output_path)
            report.outputs.append(output_path)
            for scaffold_path, text in self.scaffolds(group).items():
                if scaffold_path not in pending:
                    pending[scaffold_path] = text
                    report.scaffolds.append(scaffold_path)
        if self.index_file is not None and report.outputs and self.index_file not in pending:
            pending[self.index_file] = self.render_index(report.outputs)
            report.index_file = self.index_file

        if self.dry_run:
            return report
        for path, text in pending.items():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            LOGGER.debug("wrote %s", path)
        if self.formatter:
            run_formatter(self.formatter, report.outputs, cwd=self.cwd)
        return report


def _quote(specifier: str) -> str:
    return f'"{specifier}"'


__all__ = [
    "FILE_FOOTER",
    "FILE_HEADER",
    "OutputWriter",
    "WriteReport",
    "relative_import",
    "root_directories",
    "to_typescript_path",
]
