"""docql: static HTML documentation for GraphQL APIs."""

from __future__ import annotations

__version__ = "0.1.0"

from docql.errors import DocqlError  # noqa: E402
from docql.pipeline import (  # noqa: E402
    EndpointSource,
    GenerateOptions,
    GenerateResult,
    SchemaFileSource,
    generate,
)
from docql.renderer import Renderer  # noqa: E402
from docql.runtime import LocalRuntime, Runtime  # noqa: E402
from docql.schema import Schema, parse_introspection  # noqa: E402
from docql.search_index import build_search_index  # noqa: E402
from docql.uses import UsageIndex, find_uses  # noqa: E402

__all__ = [
    "DocqlError",
    "EndpointSource",
    "GenerateOptions",
    "GenerateResult",
    "LocalRuntime",
    "Renderer",
    "Runtime",
    "Schema",
    "SchemaFileSource",
    "UsageIndex",
    "__version__",
    "build_search_index",
    "find_uses",
    "generate",
    "parse_introspection",
]
