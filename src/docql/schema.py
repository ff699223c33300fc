"""Typed model of a GraphQL introspection response.

The models mirror the shape returned by the standard introspection query
(camelCase JSON keys, decoded into snake_case attributes).  Decoding is purely
structural: nothing is normalized or cross-checked, so duplicate type names or
references to unknown types survive into the :class:`Schema` untouched.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from docql.errors import SchemaParseError

# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------


class Kind(StrEnum):
    NON_NULL = "NON_NULL"
    LIST = "LIST"
    OBJECT = "OBJECT"
    INPUT_OBJECT = "INPUT_OBJECT"
    UNION = "UNION"
    ENUM = "ENUM"
    SCALAR = "SCALAR"
    INTERFACE = "INTERFACE"

    @property
    def is_wrapper(self) -> bool:
        """List and NonNull only wrap other references; they are never documents."""
        return self in _WRAPPER_KINDS

    @property
    def prefix(self) -> str:
        """URL-safe prefix used for file names and CSS classes."""
        return _PREFIXES[self]


_WRAPPER_KINDS: frozenset[Kind] = frozenset({Kind.LIST, Kind.NON_NULL})

_PREFIXES: dict[Kind, str] = {
    Kind.NON_NULL: "non_null",
    Kind.LIST: "list",
    Kind.OBJECT: "object",
    Kind.INPUT_OBJECT: "input_object",
    Kind.UNION: "union",
    Kind.ENUM: "enum",
    Kind.SCALAR: "scalar",
    Kind.INTERFACE: "interface",
}

# Kinds that produce a standalone page, in the order the index lists them
DOCUMENT_KINDS: tuple[Kind, ...] = (
    Kind.OBJECT,
    Kind.INTERFACE,
    Kind.UNION,
    Kind.ENUM,
    Kind.INPUT_OBJECT,
    Kind.SCALAR,
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class _IntrospectionModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TypeRef(_IntrospectionModel):
    """A possibly wrapped reference to a named type."""

    kind: Kind
    name: str | None = None
    of_type: TypeRef | None = None

    def named_type(self) -> TypeRef | None:
        """Strip List/NonNull layers; ``None`` if a wrapper has no inner type."""
        ref: TypeRef | None = self
        while ref is not None and ref.kind.is_wrapper:
            ref = ref.of_type
        return ref


class InputValue(_IntrospectionModel):
    name: str
    description: str | None = None
    type_: TypeRef = pydantic.Field(alias="type")
    default_value: str | None = None


class Field(_IntrospectionModel):
    name: str
    description: str | None = None
    args: list[InputValue]
    type_: TypeRef = pydantic.Field(alias="type")
    is_deprecated: bool
    deprecation_reason: str | None = None


class EnumValue(_IntrospectionModel):
    name: str
    description: str | None = None
    is_deprecated: bool
    deprecation_reason: str | None = None


class FullType(_IntrospectionModel):
    """The complete definition of one named type."""

    kind: Kind
    name: str
    description: str | None = None
    fields: list[Field] | None = None
    input_fields: list[InputValue] | None = None
    interfaces: list[TypeRef] | None = None
    enum_values: list[EnumValue] | None = None
    possible_types: list[TypeRef] | None = None

    @property
    def prefix(self) -> str:
        return self.kind.prefix

    @property
    def file_name(self) -> str:
        return f"{self.kind.prefix}.{self.name}.html"


class RootTypeRef(_IntrospectionModel):
    name: str


class Schema(_IntrospectionModel):
    """Root aggregate; built once per run and only read afterwards."""

    query_type: RootTypeRef
    mutation_type: RootTypeRef | None = None
    types: list[FullType]

    def find_type(self, type_ref: TypeRef) -> FullType | None:
        """Return the first type named like *type_ref*, in declaration order."""
        if type_ref.name is None:
            return None
        for typ in self.types:
            if typ.name == type_ref.name:
                return typ
        return None

    def named_types(self) -> list[FullType]:
        """Types that get a page of their own (wrapper kinds excluded)."""
        return [t for t in self.types if not t.kind.is_wrapper]


class _IntrospectionData(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_: Schema = pydantic.Field(alias="__schema")


class GraphQLResponse(BaseModel):
    """Body of an introspection query response."""

    model_config = ConfigDict(frozen=True)

    data: _IntrospectionData | None = None
    errors: list[dict[str, Any]] | None = None


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _schema_from_response(response: GraphQLResponse) -> Schema:
    if response.data is None:
        messages = [str(err.get("message", err)) for err in response.errors or []]
        detail = "; ".join(messages) if messages else "response has no data"
        raise SchemaParseError(f"Introspection response contains no schema: {detail}")
    return response.data.schema_


def parse_introspection(data: Any) -> Schema:
    """Decode an already-parsed JSON introspection response into a :class:`Schema`."""
    try:
        response = GraphQLResponse.model_validate(data)
    except ValidationError as exc:
        raise SchemaParseError(f"Invalid introspection response: {exc}") from exc
    return _schema_from_response(response)


def parse_introspection_json(text: str | bytes) -> Schema:
    """Decode introspection response JSON text into a :class:`Schema`."""
    try:
        response = GraphQLResponse.model_validate_json(text)
    except ValidationError as exc:
        raise SchemaParseError(f"Invalid introspection response: {exc}") from exc
    return _schema_from_response(response)
