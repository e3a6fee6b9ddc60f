# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for identifier case helpers."""

from __future__ import annotations

import pytest

from apigen.casing import CASE, split_words


@pytest.mark.parametrize(
    ("text", "words"),
    [
        ("getUserInfo_byID", ["get", "User", "Info", "by", "ID"]),
        ("GET /api/user-list/{id}", ["GET", "api", "user", "list", "id"]),
        ("HTTPServer2", ["HTTP", "Server2"]),
        ("", []),
    ],
)
def test_split_words(text: str, words: list[str]) -> None:
    assert split_words(text) == words


def test_conversions() -> None:
    text = "GET /api/user-list"
    assert CASE.camel(text) == "getApiUserList"
    assert CASE.pascal(text) == "GetApiUserList"
    assert CASE.snake(text) == "get_api_user_list"
    assert CASE.kebab(text) == "get-api-user-list"
    assert CASE.constant(text) == "GET_API_USER_LIST"
    assert CASE.dot(text) == "get.api.user.list"
    assert CASE.path(text) == "get/api/user/list"


def test_javascript_style_aliases() -> None:
    assert CASE.camelCase("user_name") == "userName"
    assert CASE.pascalCase("user_name") == "UserName"
    assert CASE.paramCase("userName") == "user-name"


@pytest.mark.parametrize(
    ("text", "camel", "snake"),
    [
        ("GET /items/item10", "getItemsItem10", "get_items_item_10"),
        ("HTTPServer2", "httpServer2", "http_server_2"),
        ("getUsersId", "getUsersId", "get_users_id"),
        ("", "", ""),
    ],
)
def test_digits_and_existing_identifiers(text: str, camel: str, snake: str) -> None:
    assert CASE.camel(text) == camel
    assert CASE.snake(text) == snake
    assert CASE.pascal(camel) == camel[:1].upper() + camel[1:]
