"""Template filters: type-reference links, Markdown doc blocks, kind prefixes."""

from __future__ import annotations

import mistune
from markupsafe import Markup

from docql.schema import Kind, Schema, TypeRef

# Rendered in place of the inner type of a List/NonNull that has none
UNKNOWN_TYPE_PLACEHOLDER = "?"

_markdown = mistune.create_markdown(escape=False, plugins=["table", "strikethrough"])


def type_ref_html(type_ref: TypeRef, schema: Schema | None = None) -> Markup:
    """Render *type_ref* as ``[Inner]`` / ``Inner!`` with the named type linked.

    When *schema* is given the link target uses the kind of the type found by
    name, falling back to the kind carried by the reference.
    """
    if type_ref.kind is Kind.LIST:
        return Markup("[") + _inner_html(type_ref, schema) + Markup("]")
    if type_ref.kind is Kind.NON_NULL:
        return _inner_html(type_ref, schema) + Markup("!")

    kind = type_ref.kind
    if schema is not None:
        target = schema.find_type(type_ref)
        if target is not None:
            kind = target.kind
    return type_link(kind, type_ref.name or UNKNOWN_TYPE_PLACEHOLDER)


def _inner_html(type_ref: TypeRef, schema: Schema | None) -> Markup:
    if type_ref.of_type is None:
        return Markup(UNKNOWN_TYPE_PLACEHOLDER)
    return type_ref_html(type_ref.of_type, schema)


def type_link(kind: Kind, name: str) -> Markup:
    prefix = kind.prefix
    return Markup('<a class="{0}" href="{0}.{1}.html">{1}</a>').format(prefix, name)


def docblock(text: str | None) -> Markup:
    """Render a description as Markdown (tables and strikethrough enabled)."""
    if not text:
        return Markup("")
    return Markup(_markdown(text))


def kind_prefix(kind: Kind | str) -> str:
    return Kind(kind).prefix

