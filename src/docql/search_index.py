"""Flat search index consumed by the client-side search box (``script.js``).

Each item serializes to a positional JSON array rather than an object to keep
``search-index.json`` small: ``[keys, name, kind]`` for a type, or
``[keys, name, kind, parent_name, parent_kind]`` for anything inside a type.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from docql.schema import EnumValue, Field, FullType, InputValue, Schema

FIELD_KIND = "field"
ENUM_VALUE_KIND = "enum_value"
INPUT_FIELD_KIND = "input_field"


@dataclass(frozen=True)
class SearchIndexItem:
    index: tuple[str, ...]
    name: str
    kind: str
    parent_name: str | None = None
    parent_kind: str | None = None

    def to_json(self) -> list[Any]:
        item: list[Any] = [list(self.index), self.name, self.kind]
        if self.parent_name is not None and self.parent_kind is not None:
            item.extend([self.parent_name, self.parent_kind])
        return item


def build_search_index(schema: Schema) -> list[SearchIndexItem]:
    """Flatten *schema* into search items, in declaration order."""
    items: list[SearchIndexItem] = []
    for typ in schema.types:
        _build_type(typ, items)
    return items


def _build_type(typ: FullType, items: list[SearchIndexItem]) -> None:
    if typ.kind.is_wrapper:
        return

    kind = typ.kind.prefix
    items.append(SearchIndexItem(index=(typ.name.lower(),), name=typ.name, kind=kind))

    for field in typ.fields or ():
        items.append(_field_item(field, typ.name, kind))
    for enum_value in typ.enum_values or ():
        items.append(_enum_value_item(enum_value, typ.name, kind))
    for input_field in typ.input_fields or ():
        items.append(_input_field_item(input_field, typ.name, kind))


def _field_item(field: Field, parent_name: str, parent_kind: str) -> SearchIndexItem:
    return SearchIndexItem(
        index=(field.name.lower(),),
        name=field.name,
        kind=FIELD_KIND,
        parent_name=parent_name,
        parent_kind=parent_kind,
    )


def _enum_value_item(enum_value: EnumValue, parent_name: str, parent_kind: str) -> SearchIndexItem:
    # SUPER_ADMIN is findable as "super_admin" and "superadmin"
    lowered = enum_value.name.lower()
    return SearchIndexItem(
        index=(lowered, lowered.replace("_", "")),
        name=enum_value.name,
        kind=ENUM_VALUE_KIND,
        parent_name=parent_name,
        parent_kind=parent_kind,
    )


def _input_field_item(input_field: InputValue, parent_name: str, parent_kind: str) -> SearchIndexItem:
    return SearchIndexItem(
        index=(input_field.name.lower(),),
        name=input_field.name,
        kind=INPUT_FIELD_KIND,
        parent_name=parent_name,
        parent_kind=parent_kind,
    )


def dump_search_index(items: list[SearchIndexItem]) -> str:
    """Serialize *items* as compact JSON."""
    return json.dumps([item.to_json() for item in items], separators=(",", ":"), ensure_ascii=False)
