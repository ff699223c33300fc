"""Configuration management for docql."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, TomlConfigSettingsSource

from docql import __version__

DEFAULT_SCHEMA_NAME = "GraphQL Schema"
USER_AGENT = f"docql/{__version__}"


def _find_docql_toml() -> Path | None:
    """Walk up from cwd looking for ``docql.toml``."""
    current = Path.cwd().resolve()
    while True:
        candidate = current / "docql.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


class RenderSettings(BaseSettings):
    """Page generation settings."""

    concurrency: int = Field(default=10, ge=1, description="Max per-type pages rendered and written at once.")


class HttpSettings(BaseSettings):
    """Settings for the introspection request."""

    timeout_s: float = Field(default=30.0, description="Timeout in seconds for the introspection query.")
    user_agent: str = Field(default=USER_AGENT, description="User-agent header sent with the introspection query.")


class DocqlSettings(BaseSettings):
    """Root configuration for docql."""

    model_config = SettingsConfigDict(
        toml_file="docql.toml",
        env_prefix="DOCQL_",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_path = _find_docql_toml()
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        if toml_path:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        sources.append(file_secret_settings)
        return tuple(sources)

    schema_name: str = Field(default=DEFAULT_SCHEMA_NAME, description="Name shown in page titles.")
    render: RenderSettings = Field(default_factory=RenderSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
