# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration sources (Python module, TOML document) and discovery."""

from __future__ import annotations

import os
import re
import runpy
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import ValidationError

from ..errors import ConfigError, ConfigNotFoundError
from .models import ApigenSettings, ServerConfig

CONFIG_FILE_NAMES: Final[tuple[str, ...]] = ("apigen.config.py", "apigen.config.toml")
PYTHON_CONFIG_KEY: Final[str] = "config"
SETTINGS_KEYS: Final[tuple[str, ...]] = ("index_file", "formatter", "timeout")

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")


class ConfigSource(Protocol):
    """Provide configuration data loaded from disk."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the raw configuration document."""
        ...

    def describe(self) -> str:
        """Return a human-readable description of the source."""
        ...


class PythonConfigSource:
    """Execute a Python configuration module and collect its settings.

    The module must bind ``config`` to a server entry or a list of them. It may
    also bind ``index_file``, ``formatter`` and ``timeout``. Python modules are
    the only format able to carry hook callables.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self.name = str(path)

    def load(self) -> Mapping[str, Any]:
        namespace = runpy.run_path(str(self._path), run_name="apigen_config")
        if PYTHON_CONFIG_KEY not in namespace:
            raise ConfigError(f"{self._path} must define a '{PYTHON_CONFIG_KEY}' variable")
        raw = namespace[PYTHON_CONFIG_KEY]
        if isinstance(raw, ApigenSettings):
            return raw.model_dump(by_alias=False, exclude={"servers"}) | {"servers": raw.servers}
        document: dict[str, Any] = {"servers": _as_server_list(raw)}
        for key in SETTINGS_KEYS:
            if key in namespace:
                document[key] = namespace[key]
        return document

    def describe(self) -> str:
        return f"Python configuration at {self.name}"


class TomlConfigSource:
    """Load configuration from a TOML document with ``$VAR`` expansion."""

    def __init__(self, path: Path, *, env: Mapping[str, str] | None = None) -> None:
        self._path = path
        self.name = str(path)
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        with self._path.open("rb") as handle:
            try:
                data = tomllib.load(handle)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{self._path} is not valid TOML: {exc}") from exc
        return _expand_env(data, self._env)

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


def _as_server_list(raw: object) -> list[Any]:
    if isinstance(raw, (ServerConfig, Mapping)):
        return [raw]
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return list(raw)
    raise ConfigError(f"'{PYTHON_CONFIG_KEY}' must be a server entry or a list of them, got {type(raw).__name__}")


def _expand_env(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda match: env.get(match.group(1) or match.group(2), match.group(0)), value)
    if isinstance(value, Mapping):
        return {key: _expand_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item, env) for item in value]
    return value


def find_config_file(cwd: Path, explicit: Path | None = None) -> Path:
    """Return the configuration file to load.

    Args:
        cwd: Directory searched for default configuration file names.
        explicit: Optional user supplied path, relative to ``cwd``.

    Returns:
        Path: Absolute path to an existing configuration file.

    Raises:
        ConfigNotFoundError: If no configuration file exists.
    """

    if explicit is not None:
        candidate = explicit if explicit.is_absolute() else cwd / explicit
        if not candidate.is_file():
            raise ConfigNotFoundError(f"configuration file not found: {candidate}")
        return candidate.resolve()
    for name in CONFIG_FILE_NAMES:
        candidate = cwd / name
        if candidate.is_file():
            return candidate.resolve()
    raise ConfigNotFoundError(
        f"no configuration file found in {cwd}; expected one of {', '.join(CONFIG_FILE_NAMES)} (try 'apigen init')",
    )


def source_for(path: Path) -> ConfigSource:
    if path.suffix == ".py":
        return PythonConfigSource(path)
    if path.suffix == ".toml":
        return TomlConfigSource(path)
    raise ConfigError(f"unsupported configuration format: {path.name}")


def load_settings(cwd: Path, explicit: Path | None = None) -> ApigenSettings:
    """Locate, load and validate the configuration for ``cwd``.

    Raises:
        ConfigError: If the file is missing or its content is invalid.
    """

    source = source_for(find_config_file(cwd, explicit))
    document = source.load()
    try:
        return ApigenSettings.model_validate(document)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration in {source.describe()}: {exc}") from exc


__all__ = [
    "CONFIG_FILE_NAMES",
    "ConfigSource",
    "PythonConfigSource",
    "TomlConfigSource",
    "find_config_file",
    "load_settings",
    "source_for",
]
