# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration models and loaders."""

from __future__ import annotations

from pathlib import Path

import pytest

from apigen.config import (
    CONFIG_FILE_NAMES,
    PythonConfigSource,
    TomlConfigSource,
    find_config_file,
    load_settings,
)
from apigen.config.models import (
    ApigenSettings,
    CategoryConfig,
    ProjectConfig,
    ServerConfig,
    SyntheticalConfig,
    define_config,
)
from apigen.errors import CategorySelectorError, ConfigError, ConfigNotFoundError


def test_define_config_accepts_camel_case_keys() -> None:
    (server,) = define_config(
        {
            "serverUrl": "http://yapi.test/",
            "typesOnly": True,
            "projects": [{"token": "t", "categories": [{"id": [0, -2], "preproccessInterface": lambda *a: None}]}],
        },
    )

    assert server.server_type == "yapi"
    assert server.types_only is True
    category = server.projects[0].categories[0]
    assert category.selectors == (0, -2)
    assert category.preprocess_interface is not None


def test_define_config_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigError, match="invalid server configuration #0"):
        define_config({"server_url": "x", "projects": [{"token": "t", "categories": [{"id": 1}]}], "bogus": 1})


def test_malformed_selector_raises_selector_error() -> None:
    with pytest.raises(CategorySelectorError):
        CategoryConfig(id="1")  # type: ignore[arg-type]


def test_expand_tokens_preserves_order() -> None:
    project = ProjectConfig(token=["a", "b", "c"], categories=[CategoryConfig(id=0)], data_key="data")

    expanded = project.expand_tokens()

    assert [item.token for item in expanded] == ["a", "b", "c"]
    assert all(item.data_key == "data" for item in expanded)


def test_synthetical_config_layers_category_over_project_over_server() -> None:
    category = CategoryConfig(id=3, data_key="payload")
    project = ProjectConfig(token="t", categories=[category], types_only=True, data_key="data")
    server = ServerConfig(server_url="http://s", projects=[project], types_only=False, prod_env_name="prod")

    merged = SyntheticalConfig.merge(server, project, category, category_id=3, mock_url="http://s/mock/1")

    assert merged.types_only is True
    assert merged.data_key == "payload"
    assert merged.prod_env_name == "prod"
    assert merged.category_id == 3
    assert merged.mock_url == "http://s/mock/1"
    assert merged.comment.enabled is True


def test_merge_requires_expanded_token() -> None:
    category = CategoryConfig(id=1)
    project = ProjectConfig(token=["a", "b"], categories=[category])
    server = ServerConfig(server_url="http://s", projects=[project])

    with pytest.raises(ConfigError):
        SyntheticalConfig.merge(server, project, category, category_id=1)


def test_toml_source_expands_environment(tmp_path: Path) -> None:
    path = tmp_path / "apigen.config.toml"
    path.write_text(
        """
index_file = "src/api/index.ts"

[[servers]]
server_url = "http://yapi.test"

[[servers.projects]]
token = "${TOKEN}"

[[servers.projects.categories]]
id = 0
""".strip(),
        encoding="utf-8",
    )

    document = TomlConfigSource(path, env={"TOKEN": "secret"}).load()

    assert document["servers"][0]["projects"][0]["token"] == "secret"
    settings = ApigenSettings.model_validate(document)
    assert settings.index_file == "src/api/index.ts"


def test_python_source_reads_config_and_settings(tmp_path: Path) -> None:
    path = tmp_path / "apigen.config.py"
    path.write_text(
        """
config = [{"server_url": "http://yapi.test", "projects": [{"token": "t", "categories": [{"id": 0}]}]}]
formatter = ["prettier", "--write"]
timeout = 5
""".strip(),
        encoding="utf-8",
    )

    settings = load_settings(tmp_path)

    assert settings.servers[0].server_url == "http://yapi.test"
    assert settings.formatter == ["prettier", "--write"]
    assert settings.timeout == 5


def test_python_source_requires_config_variable(tmp_path: Path) -> None:
    path = tmp_path / "apigen.config.py"
    path.write_text("servers = []\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="must define a 'config' variable"):
        PythonConfigSource(path).load()


def test_find_config_prefers_python_then_toml(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAMES[1]).write_text("", encoding="utf-8")
    assert find_config_file(tmp_path).name == CONFIG_FILE_NAMES[1]
    (tmp_path / CONFIG_FILE_NAMES[0]).write_text("", encoding="utf-8")
    assert find_config_file(tmp_path).name == CONFIG_FILE_NAMES[0]


def test_missing_config_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFoundError):
        find_config_file(tmp_path)
    with pytest.raises(ConfigNotFoundError):
        find_config_file(tmp_path, Path("nope.toml"))


def test_invalid_document_is_reported_as_config_error(tmp_path: Path) -> None:
    (tmp_path / "apigen.config.toml").write_text("[[servers]]\nserver_url = 1\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid configuration"):
        load_settings(tmp_path)
