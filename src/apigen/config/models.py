# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for servers, projects, categories and generation options."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Final, Literal, Self

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ..errors import CategorySelectorError, ConfigError

ServerType = Literal["yapi", "swagger", "apifox"]
Target = Literal["typescript"]
Hook = Callable[..., Any]

DEFAULT_INDEX_FILE: Final[str] = "src/service/index.ts"


class _ConfigModel(BaseModel):
    """Strict base model accepting snake_case or camelCase keys."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
        arbitrary_types_allowed=True,
    )


class CommentConfig(_ConfigModel):
    """Toggles for the JSDoc block emitted above each generated declaration."""

    enabled: bool = True
    title: bool = True
    category: bool = True
    tag: bool = True
    request_header: bool = True
    update_time: bool = True
    link: bool = True
    extra_tags: Hook | None = None


class ReactHooksConfig(_ConfigModel):
    """Options for emitting a React data hook next to each request function."""

    enabled: bool = False
    request_hook_maker_file_path: str | None = None
    get_request_hook_name: Hook | None = None


class GenerationOptions(_ConfigModel):
    """Options that may be declared on any level and are inherited downwards.

    ``None`` means "inherit from the enclosing level".
    """

    target: Target | None = None
    types_only: bool | None = None
    output_file_path: str | Hook | None = None
    request_function_file_path: str | None = None
    data_key: str | None = None
    dev_env_name: str | None = None
    prod_env_name: str | None = None
    react_hooks: ReactHooksConfig | None = None
    comment: CommentConfig | None = None
    custom_type_mapping: dict[str, str] | None = None
    preprocess_interface: Hook | None = Field(
        default=None,
        validation_alias=AliasChoices("preprocess_interface", "preprocessInterface", "preproccessInterface"),
    )
    get_request_function_name: Hook | None = None
    get_request_data_type_name: Hook | None = None
    get_response_data_type_name: Hook | None = None

    def declared_options(self) -> dict[str, Any]:
        """Return the generation options explicitly set on this level."""

        return {
            name: getattr(self, name)
            for name in GenerationOptions.model_fields
            if getattr(self, name) is not None
        }


class CategoryConfig(GenerationOptions):
    """Category selector: a literal id, ``0`` for all, negatives for exclusions."""

    id: int | list[int]

    @field_validator("id", mode="before")
    @classmethod
    def _check_selector(cls, value: object) -> object:
        validate_selectors(value)
        return value

    @property
    def selectors(self) -> tuple[int, ...]:
        return tuple(self.id) if isinstance(self.id, list) else (self.id,)


class ProjectConfig(GenerationOptions):
    """Project entry; a list of tokens stands for one project per token."""

    token: str | list[str]
    categories: list[CategoryConfig] = Field(min_length=1)

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: str | list[str]) -> str | list[str]:
        if isinstance(value, list) and not value:
            raise ValueError("token list must not be empty")
        return value

    def expand_tokens(self) -> list[ProjectConfig]:
        """Return one project per token, preserving token order."""

        tokens = self.token if isinstance(self.token, list) else [self.token]
        return [self.model_copy(update={"token": token}) for token in tokens]


class ServerConfig(GenerationOptions):
    """Backend endpoint, its normalisation mode and its projects."""

    server_url: str
    server_type: ServerType = "yapi"
    apifox_project_id: str | None = None
    projects: list[ProjectConfig] = Field(min_length=1)

    def normalised(self, base_url: str | None = None) -> Self:
        """Return a copy pointing at ``base_url`` (or itself) without trailing slashes."""

        return self.model_copy(update={"server_url": (base_url or self.server_url).rstrip("/")})


class SyntheticalConfig(BaseModel):
    """Fully merged options for one resolved category of one project."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    server_url: str
    server_type: ServerType
    token: str
    category_id: int
    target: Target = "typescript"
    types_only: bool = False
    output_file_path: str | Hook | None = None
    request_function_file_path: str | None = None
    data_key: str | None = None
    dev_env_name: str | None = None
    prod_env_name: str | None = None
    react_hooks: ReactHooksConfig = Field(default_factory=ReactHooksConfig)
    comment: CommentConfig = Field(default_factory=CommentConfig)
    custom_type_mapping: dict[str, str] = Field(default_factory=dict)
    preprocess_interface: Hook | None = None
    get_request_function_name: Hook | None = None
    get_request_data_type_name: Hook | None = None
    get_response_data_type_name: Hook | None = None
    mock_url: str = ""
    dev_url: str = ""
    prod_url: str = ""

    @classmethod
    def merge(
        cls,
        server: ServerConfig,
        project: ProjectConfig,
        category: CategoryConfig,
        *,
        category_id: int,
        **derived: Any,
    ) -> SyntheticalConfig:
        """Layer category over project over server options.

        Args:
            server: Server-level configuration.
            project: Project-level configuration with a single token.
            category: Category-level configuration.
            category_id: Concrete category id produced by the resolver.
            **derived: Values derived from fetched metadata (URLs).

        Returns:
            SyntheticalConfig: Effective options for the category.
        """

        options: dict[str, Any] = {}
        for level in (server, project, category):
            options.update(level.declared_options())
        if not isinstance(project.token, str):
            raise ConfigError("project tokens must be expanded before merging options")
        return cls(
            server_url=server.server_url,
            server_type=server.server_type,
            token=project.token,
            category_id=category_id,
            **options,
            **derived,
        )


class ApigenSettings(_ConfigModel):
    """Top-level document: servers plus run-wide writer settings."""

    servers: list[ServerConfig] = Field(min_length=1)
    index_file: str | None = DEFAULT_INDEX_FILE
    formatter: list[str] | None = None
    timeout: float = 30.0


def validate_selectors(value: object) -> None:
    """Reject category selectors that are not integers or non-empty integer lists.

    Raises:
        CategorySelectorError: If ``value`` is malformed.
    """

    items = value if isinstance(value, list) else [value]
    if not items:
        raise CategorySelectorError("category selector list must not be empty")
    for item in items:
        if isinstance(item, bool) or not isinstance(item, int):
            raise CategorySelectorError(f"category selector must be an integer, got {item!r}")


def define_config(
    config: ServerConfig | Mapping[str, Any] | Sequence[ServerConfig | Mapping[str, Any]],
) -> list[ServerConfig]:
    """Validate raw configuration into a list of :class:`ServerConfig`.

    Args:
        config: A single server entry or a sequence of them, either as models
            or plain mappings.

    Returns:
        list[ServerConfig]: Validated server configurations.

    Raises:
        ConfigError: If validation fails.
    """

    entries = [config] if isinstance(config, (ServerConfig, Mapping)) else list(config)
    servers: list[ServerConfig] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, ServerConfig):
            servers.append(entry)
            continue
        try:
            servers.append(ServerConfig.model_validate(entry))
        except ValidationError as exc:
            raise ConfigError(f"invalid server configuration #{index}: {exc}") from exc
    if not servers:
        raise ConfigError("at least one server configuration is required")
    return servers


__all__ = [
    "ApigenSettings",
    "CategoryConfig",
    "CommentConfig",
    "DEFAULT_INDEX_FILE",
    "GenerationOptions",
    "ProjectConfig",
    "ReactHooksConfig",
    "ServerConfig",
    "ServerType",
    "SyntheticalConfig",
    "define_config",
    "validate_selectors",
]
