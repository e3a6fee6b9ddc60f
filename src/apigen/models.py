# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Catalog records exchanged with YApi-compatible backends and pipeline value types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Base model for backend payloads that tolerate unknown keys."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Environment(_Record):
    """Named deployment environment declared on a project."""

    name: str = ""
    domain: str = ""


class Project(_Record):
    """Project metadata returned by ``/api/project/get``."""

    id: int = Field(alias="_id")
    name: str = ""
    basepath: str = ""
    env: list[Environment] = Field(default_factory=list)
    url: str = Field(default="", alias="_url")


class CategoryMenuItem(_Record):
    """Entry of the ``/api/interface/getCatMenu`` listing."""

    id: int = Field(alias="_id")
    name: str = ""
    desc: str | None = ""


class CategorySummary(BaseModel):
    """Read-only view of a category attached to each of its interfaces."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    desc: str | None = ""
    url: str = ""


class QueryParam(_Record):
    name: str
    required: str | int = "1"
    desc: str | None = ""
    example: str | None = ""

    @property
    def is_required(self) -> bool:
        return str(self.required) == "1"


class PathParam(_Record):
    name: str
    desc: str | None = ""
    example: str | None = ""


class HeaderParam(_Record):
    name: str
    value: str | None = ""
    required: str | int = "1"


class FormField(_Record):
    name: str
    type: str = "text"
    required: str | int = "1"
    desc: str | None = ""
    example: str | None = ""

    @property
    def is_required(self) -> bool:
        return str(self.required) == "1"


class Interface(_Record):
    """One endpoint definition from a category export.

    ``project`` and ``category`` are back-references populated by the pipeline.
    They are informational only and excluded from serialisation.
    """

    id: int = Field(alias="_id")
    title: str = ""
    method: str = "GET"
    path: str = ""
    catid: int = 0
    project_id: int = 0
    tag: list[str] = Field(default_factory=list)
    up_time: int = 0
    status: str | None = None
    desc: str | None = None
    req_query: list[QueryParam] = Field(default_factory=list)
    req_params: list[PathParam] = Field(default_factory=list)
    req_headers: list[HeaderParam] = Field(default_factory=list)
    req_body_type: str | None = None
    req_body_form: list[FormField] = Field(default_factory=list)
    req_body_other: str | None = None
    req_body_is_json_schema: bool = False
    res_body_type: str | None = None
    res_body: str | None = None
    res_body_is_json_schema: bool = False
    url: str = Field(default="", alias="_url")
    project: Project | None = Field(default=None, exclude=True)
    category: CategorySummary | None = Field(default=None, exclude=True)

    @property
    def parsed_path(self) -> tuple[str, str]:
        """Return ``(directory, name)`` of the endpoint path."""

        head, _, name = self.path.rstrip("/").rpartition("/")
        return head or "/", name


class Category(_Record):
    """Category entry from ``/api/plugin/export`` holding its interfaces."""

    name: str = ""
    desc: str | None = ""
    interfaces: list[Interface] = Field(default_factory=list, alias="list")
    url: str = Field(default="", alias="_url")

    @property
    def id(self) -> int:
        """Category id inferred from the first interface (exports omit it)."""

        return self.interfaces[0].catid if self.interfaces else 0

    def summary(self) -> CategorySummary:
        return CategorySummary(id=self.id, name=self.name, desc=self.desc, url=self.url)


@dataclass(frozen=True, slots=True)
class ProjectInfo:
    """Project metadata combined with its category menu for one catalog identity."""

    project: Project
    categories: tuple[CategoryMenuItem, ...]
    server_url: str

    @property
    def category_ids(self) -> frozenset[int]:
        return frozenset(item.id for item in self.categories)

    @property
    def mock_url(self) -> str:
        return f"{self.server_url}/mock/{self.project.id}"

    def env_domain(self, env_name: str | None) -> str:
        """Return the domain of environment ``env_name`` or ``""`` when undeclared."""

        for env in self.project.env:
            if env.name == env_name:
                return env.domain or ""
        return ""


class WeightVector(NamedTuple):
    """Composite ordering key ``(server, project, category, interface)``.

    Tuple comparison is lexicographic, which is exactly the merge order.
    """

    server: int
    project: int
    category: int
    interface: int


@dataclass(frozen=True, slots=True)
class GroupSettings:
    """File-level settings every fragment of an output file must agree on."""

    types_only: bool
    request_function_file_path: Path
    request_hook_maker_file_path: Path | None = None


@dataclass(frozen=True, slots=True)
class InterfaceFragment:
    """Generated code for one interface together with its placement metadata."""

    output_path: Path
    code: str
    weights: WeightVector
    settings: GroupSettings
    interface_id: int = 0


JsonSchema = dict[str, Any]

__all__ = [
    "Category",
    "CategoryMenuItem",
    "CategorySummary",
    "Environment",
    "FormField",
    "GroupSettings",
    "HeaderParam",
    "Interface",
    "InterfaceFragment",
    "JsonSchema",
    "PathParam",
    "Project",
    "ProjectInfo",
    "QueryParam",
    "WeightVector",
]
