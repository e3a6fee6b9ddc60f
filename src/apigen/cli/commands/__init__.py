# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from .generate import generate_command
from .init import init_command
from .version import version_command

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    app.command(name="generate")(generate_command)
    app.command(name="init")(init_command)
    app.command(name="version")(version_command)
