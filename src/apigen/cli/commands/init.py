# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``apigen init``: write a starter configuration file."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Final

import typer

from ...config.loader import CONFIG_FILE_NAMES
from ..shared import CLIError, build_cli_logger, exit_with

PYTHON_TEMPLATE: Final[str] = '''\
"""apigen configuration."""

from apigen import define_config

config = define_config(
    {
        "server_url": "http://yapi.example.com",
        "server_type": "yapi",
        "types_only": False,
        "target": "typescript",
        "react_hooks": {"enabled": False},
        "prod_env_name": "production",
        "output_file_path": "src/service/index.ts",
        "request_function_file_path": "src/service/request.ts",
        "data_key": "data",
        "projects": [
            {
                "token": "hello",
                "categories": [
                    {
                        "id": 0,
                        # "get_request_function_name": lambda interface, case: case.camel(interface.path),
                    },
                ],
            },
        ],
    },
)

index_file = "src/service/index.ts"
# formatter = ["npx", "prettier", "--write"]
'''

TOML_TEMPLATE: Final[str] = """\
index_file = "src/service/index.ts"
# formatter = ["npx", "prettier", "--write"]

[[servers]]
server_url = "http://yapi.example.com"
server_type = "yapi"
types_only = false
target = "typescript"
prod_env_name = "production"
output_file_path = "src/service/index.ts"
request_function_file_path = "src/service/request.ts"
data_key = "data"

[servers.react_hooks]
enabled = false

[[servers.projects]]
token = "${APIGEN_TOKEN}"

[[servers.projects.categories]]
id = 0
"""


class ConfigFormat(str, Enum):
    """Supported starter configuration formats."""

    PY = "py"
    TOML = "toml"


TEMPLATES: Final[dict[ConfigFormat, tuple[str, str]]] = {
    ConfigFormat.PY: (CONFIG_FILE_NAMES[0], PYTHON_TEMPLATE),
    ConfigFormat.TOML: (CONFIG_FILE_NAMES[1], TOML_TEMPLATE),
}


def write_starter_config(cwd: Path, fmt: ConfigFormat, *, force: bool = False) -> Path:
    """Write the starter file for ``fmt`` into ``cwd`` and return its path.

    Raises:
        CLIError: If a file already exists and ``force`` is false.
    """

    name, template = TEMPLATES[fmt]
    target = cwd / name
    if target.exists() and not force:
        raise CLIError(f"{target} already exists (use --force to overwrite)")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(template, encoding="utf-8")
    return target


def init_command(
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Directory receiving the configuration file.", file_okay=False),
    ] = None,
    fmt: Annotated[ConfigFormat, typer.Option("--format", "-f", help="Configuration format.")] = ConfigFormat.PY,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file.")] = False,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in console output.")] = True,
) -> None:
    """Create a starter apigen configuration."""

    logger = build_cli_logger(emoji=emoji)
    try:
        target = write_starter_config((cwd or Path.cwd()).resolve(), fmt, force=force)
    except CLIError as exc:
        raise exit_with(exc, logger) from exc
    logger.ok(f"created {target}")


__all__ = ["ConfigFormat", "init_command", "write_starter_config"]
