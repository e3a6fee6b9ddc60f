# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand category selector expressions into concrete category ids."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from .config.models import validate_selectors

LOGGER = logging.getLogger(__name__)

ALL_CATEGORIES = 0


def resolve_category_ids(selectors: Iterable[int], available_ids: Collection[int]) -> list[int]:
    """Return the sorted, de-duplicated category ids selected by ``selectors``.

    ``0`` selects every category in ``available_ids``; a negative selector
    ``-k`` excludes ``k`` even when it was also requested explicitly. Ids that
    do not exist in the catalog are dropped silently, so an empty result is
    valid.

    Args:
        selectors: Literal ids, ``0`` and negative exclusions, in any order.
        available_ids: Category ids present in the fetched project catalog.

    Returns:
        list[int]: Strictly ascending category ids.

    Raises:
        CategorySelectorError: If a selector is not an integer.
    """

    requested = list(selectors)
    validate_selectors(requested)
    selected = set(requested)
    if ALL_CATEGORIES in selected:
        selected.update(available_ids)
    excluded = {abs(selector) for selector in requested if selector < 0}
    selected = {category_id for category_id in selected if abs(category_id) not in excluded}
    resolved = sorted(selected.intersection(available_ids))
    dropped = sorted(
        selector for selector in requested if selector > 0 and selector not in available_ids
    )
    if dropped:
        LOGGER.debug("ignoring unknown category ids %s", dropped)
    return resolved


__all__ = ["ALL_CATEGORIES", "resolve_category_ids"]
