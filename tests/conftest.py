"""Shared test fixtures for docql."""

from __future__ import annotations

import datetime
import json

import pytest
from factories import FakeRuntime, blog_introspection

from docql.renderer import Renderer
from docql.schema import Schema, parse_introspection


@pytest.fixture
def introspection() -> dict:
    """Raw introspection response for the sample blog API."""
    return blog_introspection()


@pytest.fixture
def schema(introspection) -> Schema:
    return parse_introspection(introspection)


@pytest.fixture
def renderer(schema) -> Renderer:
    return Renderer("Blog API", datetime.date(2026, 10, 5), schema)


@pytest.fixture
def runtime(introspection) -> FakeRuntime:
    """In-memory runtime serving the sample schema from both sources."""
    return FakeRuntime(introspection=introspection, schema_text=json.dumps(introspection))
