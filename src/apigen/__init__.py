# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deterministic TypeScript API client generation from YApi-compatible catalogs."""

from __future__ import annotations

from importlib import metadata

from .config.models import CategoryConfig, ProjectConfig, ServerConfig, define_config
from .orchestrator import Generator

__all__ = [
    "CategoryConfig",
    "Generator",
    "ProjectConfig",
    "ServerConfig",
    "__version__",
    "define_config",
]

try:
    __version__ = metadata.version("apigen")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
