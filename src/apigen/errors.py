# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the generation pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlencode


class ApigenError(RuntimeError):
    """Base class for failures that abort a generation run."""


class ConfigError(ApigenError):
    """Raised when configuration input is invalid."""


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file can be located."""


class CategorySelectorError(ConfigError):
    """Raised when a category selector is not an integer expression."""


class OutputGroupConflictError(ConfigError):
    """Raised when fragments sharing an output file disagree on a file-level setting."""

    def __init__(self, output_path: Path, setting: str, first: object, second: object) -> None:
        super().__init__(
            f"Conflicting '{setting}' for {output_path}: {first!r} vs {second!r}. "
            "Interfaces written to the same file must share file-level settings.",
        )
        self.output_path = output_path
        self.setting = setting
        self.values = (first, second)


class UpstreamError(ApigenError):
    """Raised when a backend answers with an application-level error code."""

    def __init__(self, message: str, *, url: str, query: Mapping[str, object] | None = None) -> None:
        rendered_query = urlencode({key: str(value) for key, value in (query or {}).items()})
        super().__init__(f"{message} [url: {url}] [query: {rendered_query}]")
        self.url = url
        self.query = dict(query or {})


__all__ = [
    "ApigenError",
    "CategorySelectorError",
    "ConfigError",
    "ConfigNotFoundError",
    "OutputGroupConflictError",
    "UpstreamError",
]
