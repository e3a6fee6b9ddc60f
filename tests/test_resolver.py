# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for category selector resolution."""

from __future__ import annotations

import pytest

from apigen.errors import CategorySelectorError, ConfigError
from apigen.resolver import resolve_category_ids

AVAILABLE = {1, 2, 3, 4}


def test_zero_selects_everything_minus_exclusions() -> None:
    assert resolve_category_ids([0, -3], AVAILABLE) == [1, 2, 4]


def test_zero_alone_selects_all_sorted() -> None:
    assert resolve_category_ids([0], {9, 3, 5}) == [3, 5, 9]


def test_exclusion_wins_over_explicit_inclusion() -> None:
    assert resolve_category_ids([2, -2], AVAILABLE) == []
    assert resolve_category_ids([-2, 2, 1], AVAILABLE) == [1]


def test_unknown_ids_are_dropped_silently() -> None:
    assert resolve_category_ids([7, 1], AVAILABLE) == [1]
    assert resolve_category_ids([7], AVAILABLE) == []


def test_result_is_sorted_and_deduplicated() -> None:
    assert resolve_category_ids([4, 1, 4, 2], AVAILABLE) == [1, 2, 4]


def test_empty_catalog_resolves_to_nothing() -> None:
    assert resolve_category_ids([0], set()) == []


def test_exclusion_of_missing_id_is_harmless() -> None:
    assert resolve_category_ids([0, -99], {1, 2}) == [1, 2]


@pytest.mark.parametrize("selectors", [["1"], [True], [1.5], []])
def test_malformed_selectors_raise(selectors: list[object]) -> None:
    with pytest.raises(CategorySelectorError):
        resolve_category_ids(selectors, AVAILABLE)  # type: ignore[arg-type]


def test_selector_error_is_a_config_error() -> None:
    assert issubclass(CategorySelectorError, ConfigError)
