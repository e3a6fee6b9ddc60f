# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Identifier case conversion helpers handed to user hooks."""

from __future__ import annotations

import re
from typing import Final

from pydantic.alias_generators import to_camel, to_pascal, to_snake

_WORD_PATTERN: Final = re.compile(r"[A-Z]+(?=[A-Z][a-z0-9])|[A-Z]?[a-z0-9]+|[A-Z]+|\d+")


def split_words(text: str) -> list[str]:
    """Split ``text`` on separators and case boundaries.

    >>> split_words("getUserInfo_byID")
    ['get', 'User', 'Info', 'by', 'ID']
    """

    return _WORD_PATTERN.findall(text)


class CaseHelper:
    """Case conversions mirroring the helpers users expect in naming hooks.

    Every conversion starts from :meth:`snake`, so separators such as spaces,
    slashes and braces in ``"GET /user/{id}"`` are dropped consistently.
    """

    @staticmethod
    def snake(text: str) -> str:
        return to_snake("_".join(split_words(text)))

    @staticmethod
    def camel(text: str) -> str:
        return to_camel(CaseHelper.snake(text))

    @staticmethod
    def pascal(text: str) -> str:
        return to_pascal(CaseHelper.snake(text))

    @staticmethod
    def kebab(text: str) -> str:
        return CaseHelper.snake(text).replace("_", "-")

    @staticmethod
    def constant(text: str) -> str:
        return CaseHelper.snake(text).upper()

    @staticmethod
    def dot(text: str) -> str:
        return CaseHelper.snake(text).replace("_", ".")

    @staticmethod
    def path(text: str) -> str:
        return CaseHelper.snake(text).replace("_", "/")

    # camelCase aliases keep hooks ported from JavaScript configs working
    camelCase = camel
    pascalCase = pascal
    snakeCase = snake
    paramCase = kebab
    constantCase = constant


CASE: Final[CaseHelper] = CaseHelper()

__all__ = ["CASE", "CaseHelper", "split_words"]
