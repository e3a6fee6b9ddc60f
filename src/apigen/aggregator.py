# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Merge concurrently produced fragments into deterministic per-file content.

This module performs no I/O and never awaits: whatever order the fragments
arrive in, the merged output depends only on their weight vectors.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Final

from .errors import OutputGroupConflictError
from .models import GroupSettings, InterfaceFragment, WeightVector

FRAGMENT_SEPARATOR: Final[str] = "\n\n"


@dataclass(slots=True)
class OutputGroup:
    """All fragments destined for one output file.

    Attributes:
        output_path: Normalised absolute path of the generated file.
        entries: ``(weights, code)`` pairs in arrival order.
        settings: File-level settings taken from the first fragment added.
    """

    output_path: Path
    entries: list[tuple[WeightVector, str]] = field(default_factory=list)
    settings: GroupSettings | None = None

    def add(self, fragment: InterfaceFragment) -> None:
        """Append ``fragment`` after checking its settings agree with the group's.

        Raises:
            OutputGroupConflictError: If a file-level setting differs.
        """

        if self.settings is None:
            self.settings = fragment.settings
        else:
            for setting in fields(GroupSettings):
                current = getattr(self.settings, setting.name)
                incoming = getattr(fragment.settings, setting.name)
                if current != incoming:
                    raise OutputGroupConflictError(self.output_path, setting.name, current, incoming)
        self.entries.append((fragment.weights, fragment.code))

    def ordered_fragments(self) -> list[str]:
        """Return non-empty fragment code sorted by weight vector (stable)."""

        ordered = sorted(self.entries, key=lambda entry: entry[0])
        return [code for _, code in ordered if code]

    @property
    def content(self) -> str:
        return FRAGMENT_SEPARATOR.join(self.ordered_fragments())

    @property
    def types_only(self) -> bool:
        return bool(self.settings and self.settings.types_only)

    @property
    def request_function_file_path(self) -> Path | None:
        return self.settings.request_function_file_path if self.settings else None

    @property
    def request_hook_maker_file_path(self) -> Path | None:
        return self.settings.request_hook_maker_file_path if self.settings else None


class OutputAggregator:
    """Collect fragments and group them by output path."""

    def __init__(self) -> None:
        self._groups: dict[Path, OutputGroup] = {}

    def add(self, fragment: InterfaceFragment) -> None:
        group = self._groups.get(fragment.output_path)
        if group is None:
            group = self._groups[fragment.output_path] = OutputGroup(output_path=fragment.output_path)
        group.add(fragment)

    def extend(self, fragments: Iterable[InterfaceFragment]) -> None:
        for fragment in fragments:
            self.add(fragment)

    def groups(self) -> dict[Path, OutputGroup]:
        """Return the groups keyed by output path, ordered by path."""

        return {path: self._groups[path] for path in sorted(self._groups)}


def aggregate(fragments: Iterable[InterfaceFragment]) -> dict[Path, OutputGroup]:
    """Group ``fragments`` by output path.

    Fragments are sorted by weight before being added, so the settings of a
    group always come from its lowest-weighted fragment and conflict messages
    are reproducible.
    """

    aggregator = OutputAggregator()
    aggregator.extend(sorted(fragments, key=lambda fragment: fragment.weights))
    return aggregator.groups()


def render_groups(groups: Mapping[Path, OutputGroup]) -> dict[Path, str]:
    """Return merged content per output path."""

    return {path: group.content for path, group in groups.items()}


__all__ = ["FRAGMENT_SEPARATOR", "OutputAggregator", "OutputGroup", "aggregate", "render_groups"]
