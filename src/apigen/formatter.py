# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run an external code formatter over generated files."""

from __future__ import annotations

import logging
import shutil

# Bandit: the formatter command comes from the user's own configuration and is
# executed as an argument list without shell expansion.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .errors import ApigenError

LOGGER = logging.getLogger(__name__)

DEFAULT_FORMATTER_TIMEOUT: Final[float] = 120.0
TIMEOUT_RETURNCODE: Final[int] = 124


class FormatterError(ApigenError):
    """Raised when the formatter is missing or exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str | None) -> None:
        super().__init__(f"formatter '{command[0]}' exited with status {returncode}: {stderr or '<none>'}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


def resolve_executable(command: Sequence[str]) -> list[str]:
    """Return ``command`` with its executable resolved against ``PATH``.

    Raises:
        FormatterError: If the command is empty or the executable is unknown.
    """

    if not command:
        raise FormatterError(["<empty>"], 2, "formatter command must not be empty")
    head, *rest = command
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FormatterError(command, 127, f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_formatter(
    command: Sequence[str],
    files: Sequence[Path],
    *,
    cwd: Path,
    timeout: float | None = DEFAULT_FORMATTER_TIMEOUT,
) -> None:
    """Invoke ``command`` with ``files`` appended as arguments.

    Args:
        command: Formatter argument list, e.g. ``["npx", "prettier", "--write"]``.
        files: Files to format; nothing runs when empty.
        cwd: Working directory for the formatter process.
        timeout: Seconds before the formatter is considered hung.

    Raises:
        FormatterError: If the formatter fails or times out.
    """

    if not files:
        return
    args = [*resolve_executable(command), *(str(path) for path in files)]
    LOGGER.debug("running formatter: %s", " ".join(args[: len(command)]))
    try:
        # Bandit: argument list only, no shell.
        completed = subprocess.run(  # nosec B603
            args,
            cwd=str(cwd),
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        raise FormatterError(command, TIMEOUT_RETURNCODE, f"timed out after {exc.timeout:.1f}s") from exc
    if completed.returncode != 0:
        raise FormatterError(command, completed.returncode, completed.stderr or completed.stdout)


__all__ = ["FormatterError", "resolve_executable", "run_formatter"]
