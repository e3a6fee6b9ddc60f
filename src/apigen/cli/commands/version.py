# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``apigen version``."""

from __future__ import annotations

import typer

from ... import __version__


def version_command() -> None:
    """Print the installed apigen version."""

    typer.echo(f"apigen {__version__}")


__all__ = ["version_command"]
