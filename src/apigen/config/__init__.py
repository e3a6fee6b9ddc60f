# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import CONFIG_FILE_NAMES, PythonConfigSource, TomlConfigSource, find_config_file, load_settings
from .models import (
    ApigenSettings,
    CategoryConfig,
    CommentConfig,
    GenerationOptions,
    ProjectConfig,
    ReactHooksConfig,
    ServerConfig,
    SyntheticalConfig,
    define_config,
)

__all__ = [
    "ApigenSettings",
    "CONFIG_FILE_NAMES",
    "CategoryConfig",
    "CommentConfig",
    "GenerationOptions",
    "ProjectConfig",
    "PythonConfigSource",
    "ReactHooksConfig",
    "ServerConfig",
    "SyntheticalConfig",
    "TomlConfigSource",
    "define_config",
    "find_config_file",
    "load_settings",
]
