"""End-to-end documentation generation.

    source (endpoint | schema file) → Schema → date → output directory
        → index.html, style.css, search-index.json, script.js (in order)
        → one page per named type (bounded concurrency, fail fast)

All I/O goes through a :class:`~docql.runtime.Runtime`.  The schema is built
once and only read afterwards, so the per-type tasks share it freely.
"""

from __future__ import annotations

import asyncio
import datetime
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from docql.errors import (
    DateError,
    PrepareOutputDirectoryError,
    QueryError,
    ReadSchemaFileError,
    WriteFileError,
)
from docql.renderer import SEARCH_SCRIPT, STYLESHEET, Renderer, load_static
from docql.runtime import GRAPHQL_REQUEST
from docql.schema import parse_introspection, parse_introspection_json
from docql.search_index import build_search_index, dump_search_index
from docql.settings import DEFAULT_SCHEMA_NAME

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docql.runtime import Runtime
    from docql.schema import FullType, Schema

DEFAULT_CONCURRENCY = 10
INDEX_FILE = "index.html"
SEARCH_INDEX_FILE = "search-index.json"

# ---------------------------------------------------------------------------
# Options and results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EndpointSource:
    """Run the introspection query against a live endpoint."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SchemaFileSource:
    """Read a previously saved introspection response."""

    path: str


Source = EndpointSource | SchemaFileSource


@dataclass(frozen=True)
class GenerateOptions:
    source: Source
    output: str
    schema_name: str = DEFAULT_SCHEMA_NAME
    concurrency: int = DEFAULT_CONCURRENCY


@dataclass(frozen=True)
class GenerateResult:
    """Summary of a completed run."""

    schema_name: str
    files_written: int
    types_rendered: int
    duration_s: float


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


async def load_schema(source: Source, runtime: Runtime) -> Schema:
    """Fetch or read the introspection response and decode it."""
    if isinstance(source, EndpointSource):
        logger.info("Querying {}", source.url)
        try:
            value = await runtime.query(source.url, GRAPHQL_REQUEST, dict(source.headers))
        except Exception as exc:
            raise QueryError(str(exc)) from exc
        return parse_introspection(value)

    logger.info("Reading schema from {}", source.path)
    try:
        text = await runtime.read_file(source.path)
    except Exception as exc:
        raise ReadSchemaFileError(source.path, str(exc)) from exc
    return parse_introspection_json(text)


async def fetch_date(runtime: Runtime) -> datetime.date:
    """The run's "today", fetched once; anything but ``YYYY-MM-DD`` is fatal."""
    try:
        raw = await runtime.date()
    except Exception as exc:
        raise DateError(str(exc)) from exc
    try:
        return datetime.datetime.strptime(raw, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise DateError(str(exc)) from exc


async def prepare_output(runtime: Runtime, output: str) -> None:
    try:
        await runtime.prepare_output_directory(output)
    except Exception as exc:
        raise PrepareOutputDirectoryError(output, str(exc)) from exc


async def write_file(runtime: Runtime, output: str, file_name: str, contents: str) -> None:
    try:
        await runtime.write_file(output, file_name, contents)
    except Exception as exc:
        raise WriteFileError(file_name, str(exc)) from exc
    logger.debug("Wrote {}", file_name)


async def write_type(runtime: Runtime, output: str, renderer: Renderer, full_type: FullType) -> None:
    """Render one type's page and write it as ``<prefix>.<Name>.html``."""
    contents = renderer.render_type(full_type)
    await write_file(runtime, output, full_type.file_name, contents)


async def write_types(
    runtime: Runtime,
    output: str,
    renderer: Renderer,
    types: Sequence[FullType],
    concurrency: int = DEFAULT_CONCURRENCY,
) -> int:
    """Write one page per type with at most *concurrency* in flight.

    Fails fast: after the first failure no further page is started, pages
    already in flight are allowed to finish, and that first failure is raised.
    Returns the number of pages written.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    remaining = iter(types)
    errors: list[Exception] = []
    written = 0

    async def worker() -> None:
        nonlocal written
        for full_type in remaining:
            if errors:
                return
            try:
                await write_type(runtime, output, renderer, full_type)
            except Exception as exc:
                errors.append(exc)
                return
            written += 1

    await asyncio.gather(*(worker() for _ in range(min(concurrency, len(types)))))

    if errors:
        logger.error("Stopped after {} page(s): {}", written, errors[0])
        raise errors[0]
    return written


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


async def generate(runtime: Runtime, options: GenerateOptions) -> GenerateResult:
    """Generate the complete documentation site for ``options.source``."""
    t0 = time.monotonic()

    schema = await load_schema(options.source, runtime)
    logger.info("Loaded schema with {} types", len(schema.types))

    today = await fetch_date(runtime)
    await prepare_output(runtime, options.output)

    renderer = Renderer(options.schema_name, today, schema)

    await write_file(runtime, options.output, INDEX_FILE, renderer.render_index())
    await write_file(runtime, options.output, STYLESHEET, load_static(STYLESHEET))
    await write_file(runtime, options.output, SEARCH_INDEX_FILE, dump_search_index(build_search_index(schema)))
    await write_file(runtime, options.output, SEARCH_SCRIPT, load_static(SEARCH_SCRIPT))

    types_rendered = await write_types(
        runtime, options.output, renderer, schema.named_types(), concurrency=options.concurrency
    )

    result = GenerateResult(
        schema_name=options.schema_name,
        files_written=4 + types_rendered,
        types_rendered=types_rendered,
        duration_s=time.monotonic() - t0,
    )
    logger.info(
        "Wrote {} files ({} type pages) to {} in {:.2f}s",
        result.files_written,
        result.types_rendered,
        options.output,
        result.duration_s,
    )
    return result
