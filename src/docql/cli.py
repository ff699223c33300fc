"""CLI entrypoint for docql."""

from __future__ import annotations

import asyncio
import sys
from urllib.parse import urlparse

import typer
from loguru import logger

from docql import __version__
from docql.errors import ArgsError, DocqlError, UsageError
from docql.pipeline import EndpointSource, GenerateOptions, SchemaFileSource, Source, generate
from docql.runtime import LocalRuntime, Runtime
from docql.settings import DocqlSettings

app = typer.Typer(
    name="docql",
    help="Generate static HTML documentation for a GraphQL API.",
    add_completion=False,
)


# ---------------------------------------------------------------------------
# Option parsing helpers
# ---------------------------------------------------------------------------


def validate_endpoint(url: str) -> str:
    """Accept only absolute http(s) URLs."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise UsageError("Endpoint is not an http or https URL")
    if not parsed.netloc:
        raise UsageError(f"Endpoint '{url}' has no host")
    return url


def parse_header(header: str) -> tuple[str, str]:
    """Split ``"Name: Value"`` into a trimmed ``(name, value)`` pair."""
    name, sep, value = header.partition(":")
    if not sep:
        raise UsageError("Header must include a name, a colon, and a value")
    return name.strip(), value.strip()


def build_headers(headers: list[str], user_agent: str) -> dict[str, str]:
    """Request headers: the user agent first, then ``--header`` values (which may replace it)."""
    result = {"user-agent": user_agent}
    for header in headers:
        name, value = parse_header(header)
        for existing in [k for k in result if k.lower() == name.lower()]:
            del result[existing]
        result[name] = value
    return result


def build_source(
    endpoint: str | None,
    schema: str | None,
    headers: list[str],
    *,
    user_agent: str,
) -> Source:
    """Pick the schema source; exactly one of *endpoint* / *schema* must be set."""
    if endpoint and schema:
        raise UsageError("--endpoint and --schema cannot be used together")
    if endpoint:
        return EndpointSource(url=validate_endpoint(endpoint), headers=build_headers(headers, user_agent))
    if schema:
        if headers:
            raise UsageError("--header can only be used with --endpoint")
        return SchemaFileSource(path=schema)
    raise UsageError("One of --endpoint or --schema is required")


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docql {__version__}")
        raise typer.Exit()


def _endpoint_callback(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return validate_endpoint(value)
    except UsageError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _header_callback(values: list[str] | None) -> list[str] | None:
    for value in values or ():
        try:
            parse_header(value)
        except UsageError as exc:
            raise typer.BadParameter(str(exc)) from exc
    return values


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@app.command()
def docs(
    ctx: typer.Context,
    endpoint: str | None = typer.Option(
        None,
        "--endpoint",
        "-e",
        metavar="URL",
        help="The URL of the GraphQL endpoint to document.",
        callback=_endpoint_callback,
    ),
    schema: str | None = typer.Option(
        None,
        "--schema",
        "--schema-file",
        "-s",
        metavar="PATH",
        help="The output of a GraphQL introspection query already stored locally.",
    ),
    output: str = typer.Option(..., "--output", "-o", metavar="PATH", help="The directory to put the documentation."),
    name: str | None = typer.Option(
        None, "--name", "-n", help="The name to give to the schema (used in page titles). [default: GraphQL Schema]"
    ),
    header: list[str] | None = typer.Option(
        None,
        "--header",
        "-x",
        help='Additional header for the introspection query, e.g. -x "Authorization: Bearer abcdef" (repeatable).',
        callback=_header_callback,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file written."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors."),
    version: bool = typer.Option(  # noqa: ARG001
        False, "--version", "-V", help="Show the version and exit.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """Generate documentation for a GraphQL API."""
    _configure_logging(verbose=verbose, quiet=quiet)
    settings = DocqlSettings()

    try:
        source = build_source(endpoint, schema, header or [], user_agent=settings.http.user_agent)
    except UsageError as exc:
        raise typer.BadParameter(str(exc)) from exc

    options = GenerateOptions(
        source=source,
        output=output,
        schema_name=name or settings.schema_name,
        concurrency=settings.render.concurrency,
    )

    runtime = ctx.obj if isinstance(ctx.obj, Runtime) else LocalRuntime(timeout_s=settings.http.timeout_s)
    try:
        asyncio.run(generate(runtime, options))
    except DocqlError as exc:
        logger.error("{}", exc)
        raise typer.Exit(code=exc.exit_code) from exc
    finally:
        if isinstance(runtime, LocalRuntime):
            runtime.close()


def main(runtime: Runtime | None = None) -> None:
    """Console-script entrypoint: arguments come from the runtime."""
    runtime = runtime or LocalRuntime(timeout_s=DocqlSettings().http.timeout_s)
    try:
        args = asyncio.run(runtime.get_args())
    except Exception as exc:
        err = ArgsError(str(exc))
        logger.error("{}", err)
        sys.exit(err.exit_code)
    app(args=args, prog_name="docql", obj=runtime)


if __name__ == "__main__":
    main()
