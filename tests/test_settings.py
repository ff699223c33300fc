"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docql import __version__
from docql.settings import DEFAULT_SCHEMA_NAME, DocqlSettings, RenderSettings


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for key in ("DOCQL_SCHEMA_NAME", "DOCQL_HTTP__USER_AGENT", "DOCQL_HTTP__TIMEOUT_S", "DOCQL_RENDER__CONCURRENCY"):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = DocqlSettings()
    assert settings.schema_name == DEFAULT_SCHEMA_NAME == "GraphQL Schema"
    assert settings.render.concurrency == 10
    assert settings.http.timeout_s == 30.0
    assert settings.http.user_agent == f"docql/{__version__}"


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("DOCQL_SCHEMA_NAME", "Shop API")
    monkeypatch.setenv("DOCQL_RENDER__CONCURRENCY", "4")
    monkeypatch.setenv("DOCQL_HTTP__TIMEOUT_S", "2.5")
    settings = DocqlSettings()
    assert settings.schema_name == "Shop API"
    assert settings.render.concurrency == 4
    assert settings.http.timeout_s == 2.5


def test_toml_found_in_parent(tmp_path, monkeypatch) -> None:
    (tmp_path / "docql.toml").write_text(
        'schema_name = "From TOML"\n\n[render]\nconcurrency = 2\n',
        encoding="utf-8",
    )
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    settings = DocqlSettings()
    assert settings.schema_name == "From TOML"
    assert settings.render.concurrency == 2


def test_env_beats_toml(tmp_path, monkeypatch) -> None:
    (tmp_path / "docql.toml").write_text('schema_name = "From TOML"\n', encoding="utf-8")
    monkeypatch.setenv("DOCQL_SCHEMA_NAME", "From env")
    assert DocqlSettings().schema_name == "From env"


def test_concurrency_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        RenderSettings(concurrency=0)
