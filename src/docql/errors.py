"""Error taxonomy for docql.

Every failure surfaced by the pipeline is a :class:`DocqlError` subclass so the
CLI can map it to a distinct process exit code.
"""

from __future__ import annotations


class DocqlError(Exception):
    """Base class for all docql failures."""

    exit_code: int = 1


class UsageError(DocqlError):
    """Invalid combination or format of command-line options."""

    exit_code = 2


class DateError(DocqlError):
    """The runtime could not supply a valid current date."""

    exit_code = 10

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to retrieve current date: {reason}")


class ArgsError(DocqlError):
    """The runtime could not supply the process arguments."""

    exit_code = 11

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to retrieve args: {reason}")


class QueryError(DocqlError):
    """The introspection query against the endpoint failed."""

    exit_code = 12

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to execute introspection query: {reason}")


class PrepareOutputDirectoryError(DocqlError):
    exit_code = 13

    def __init__(self, output: str, reason: str) -> None:
        self.output = output
        super().__init__(f"Failed to prepare output directory '{output}': {reason}")


class WriteFileError(DocqlError):
    exit_code = 14

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        super().__init__(f"Failed to write file '{file_name}': {reason}")


class ReadSchemaFileError(DocqlError):
    exit_code = 15

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to read schema file '{path}': {reason}")


class SchemaParseError(DocqlError):
    """The introspection JSON did not match the expected shape."""

    exit_code = 20


class TemplateLoadError(DocqlError):
    exit_code = 21


class TemplateRenderError(DocqlError):
    exit_code = 21
