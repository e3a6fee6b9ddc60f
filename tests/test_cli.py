# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for the apigen commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from apigen import __version__
from apigen.cli.app import app
from apigen.config import load_settings

DOCUMENT = {
    "swagger": "2.0",
    "info": {"title": "Demo"},
    "paths": {
        "/users/{id}": {
            "get": {
                "tags": ["users"],
                "summary": "Get user",
                "parameters": [{"name": "id", "in": "path", "required": True, "type": "string"}],
                "responses": {"200": {"schema": {"type": "object", "properties": {"name": {"type": "string"}}}}},
            },
        },
    },
}


def _project(tmp_path: Path) -> Path:
    (tmp_path / "swagger.json").write_text(json.dumps(DOCUMENT), encoding="utf-8")
    (tmp_path / "apigen.config.toml").write_text(
        f"""
[[servers]]
server_url = {json.dumps(str(tmp_path / "swagger.json"))}
server_type = "swagger"

[[servers.projects]]
token = "unused"

[[servers.projects.categories]]
id = 0
""".strip(),
        encoding="utf-8",
    )
    return tmp_path


def test_version_command() -> None:
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_init_writes_loadable_python_config(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["init", "--cwd", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0
    settings = load_settings(tmp_path)
    assert settings.servers[0].server_url == "http://yapi.example.com"


def test_init_toml_refuses_to_overwrite(tmp_path: Path) -> None:
    runner = CliRunner()
    first = runner.invoke(app, ["init", "--cwd", str(tmp_path), "--format", "toml"])
    second = runner.invoke(app, ["init", "--cwd", str(tmp_path), "--format", "toml"])
    forced = runner.invoke(app, ["init", "--cwd", str(tmp_path), "--format", "toml", "--force"])

    assert first.exit_code == 0
    assert (tmp_path / "apigen.config.toml").exists()
    assert second.exit_code == 1
    assert "already exists" in second.stdout
    assert forced.exit_code == 0


def test_generate_without_config_fails(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["generate", "--cwd", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "no configuration file found" in result.stdout


def test_generate_writes_client_from_swagger_document(tmp_path: Path) -> None:
    root = _project(tmp_path)

    result = CliRunner().invoke(app, ["generate", "--cwd", str(root), "--no-emoji"])

    assert result.exit_code == 0, result.stdout
    output = root / "src" / "service" / "users" / "index.ts"
    text = output.read_text(encoding="utf-8")
    assert "export interface GetUsersIdRequest" in text
    assert "export const getUsersId = (params: GetUsersIdRequest) => {" in text
    assert (root / "src" / "service" / "users" / "request.ts").exists()
    assert 'export * from "./users/index"' in (root / "src" / "service" / "index.ts").read_text(encoding="utf-8")
    assert "wrote 1 output file(s)" in result.stdout


def test_generate_dry_run_lists_planned_files(tmp_path: Path) -> None:
    root = _project(tmp_path)

    result = CliRunner().invoke(app, ["generate", "--cwd", str(root), "--dry-run", "--no-emoji"])

    assert result.exit_code == 0, result.stdout
    assert "would write src/service/users/index.ts" in result.stdout
    assert not (root / "src").exists()


def test_generate_reports_hook_errors_without_traceback(tmp_path: Path) -> None:
    (tmp_path / "swagger.json").write_text(json.dumps(DOCUMENT), encoding="utf-8")
    (tmp_path / "apigen.config.py").write_text(
        f"""
def request_function_name(interface, case):
    raise ValueError("unsupported path " + interface.path)


config = {{
    "server_url": {json.dumps(str(tmp_path / "swagger.json"))},
    "server_type": "swagger",
    "get_request_function_name": request_function_name,
    "projects": [{{"token": "unused", "categories": [{{"id": 0}}]}}],
}}
""".strip(),
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["generate", "--cwd", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "ValueError: unsupported path /users/{id}" in result.stdout
    assert not isinstance(result.exception, ValueError)
    assert not (tmp_path / "src").exists()
