# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``apigen generate``: fetch catalogs and write the TypeScript client."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from ...config import load_settings
from ...config.models import ApigenSettings
from ...errors import ApigenError
from ...logging import enable_debug_logging
from ...orchestrator import Generator
from ...writer import OutputWriter, WriteReport
from ..shared import CLIError, CLILogger, build_cli_logger, exit_with

LOGGER = logging.getLogger(__name__)


async def run_generation(settings: ApigenSettings, *, cwd: Path, dry_run: bool = False) -> WriteReport:
    """Run the pipeline for ``settings`` and write (or plan) the outputs.

    Nothing is written unless the whole generation succeeds.
    """

    groups = await Generator(settings, cwd=cwd).run()
    writer = OutputWriter(
        cwd,
        index_file=settings.index_file,
        formatter=settings.formatter,
        dry_run=dry_run,
    )
    return writer.write(groups)


def _display(path: Path, cwd: Path) -> str:
    return str(path.relative_to(cwd)) if path.is_relative_to(cwd) else str(path)


def _report(report: WriteReport, cwd: Path, logger: CLILogger) -> None:
    if not report.outputs:
        logger.warn("no interfaces matched the configured categories; nothing to write")
        return
    verb = "would write" if report.dry_run else "wrote"
    for path in report.all_files:
        logger.echo(f"  {verb} {_display(path, cwd)}")
    logger.ok(f"{verb} {len(report.outputs)} output file(s)")


def generate_command(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file (defaults to apigen.config.py/.toml)."),
    ] = None,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Project directory outputs are resolved against.", file_okay=False),
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in console output.")] = True,
    debug: Annotated[bool, typer.Option("--debug", help="Log fetches and cache activity.")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="List planned files without writing them.")] = False,
) -> None:
    """Generate request functions and types from the configured catalogs."""

    logger = build_cli_logger(emoji=emoji, debug=debug)
    if debug:
        enable_debug_logging()
    root = (cwd or Path.cwd()).resolve()
    try:
        settings = load_settings(root, config)
        logger.debug(f"loaded {len(settings.servers)} server configuration(s)")
        report = asyncio.run(run_generation(settings, cwd=root, dry_run=dry_run))
    except ApigenError as exc:
        raise exit_with(CLIError(str(exc)), logger) from exc
    except OSError as exc:
        raise exit_with(CLIError(f"cannot write output: {exc}"), logger) from exc
    except Exception as exc:
        # user hooks and Python configs may raise anything
        LOGGER.debug("generation failed", exc_info=True)
        raise exit_with(CLIError(f"{type(exc).__name__}: {exc}"), logger) from exc
    _report(report, root, logger)


__all__ = ["generate_command", "run_generation"]
