"""Reverse references: where in the schema is a given type used?

Every page has a "Used by" section listing the fields, input fields and
union/interface memberships that mention its type.  :func:`find_uses` is the
straightforward scan over the whole schema for one target; :class:`UsageIndex`
produces the same answers for every type after a single pass.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel

from docql.schema import Field, FullType, InputValue, Schema, TypeRef


def _contents(*models: BaseModel) -> tuple[str, ...]:
    # Tie-breaker for duplicate type names
    return tuple(m.model_dump_json() for m in models)


class UseType(StrEnum):
    # Values sort in the order uses are listed on a page
    FIELD = "field"
    INPUT_FIELD = "input_field"
    POSSIBLE_TYPE = "possible_type"


@dataclass(frozen=True)
class FieldUse:
    """The type is the result of a field, or the type of one of its arguments."""

    use_type: ClassVar[UseType] = UseType.FIELD

    type: FullType
    field: Field

    @property
    def sort_key(self) -> tuple[str, ...]:
        return (self.use_type.value, self.type.name, self.field.name, *_contents(self.type, self.field))


@dataclass(frozen=True)
class InputFieldUse:
    """The type is the type of an input field on an input object."""

    use_type: ClassVar[UseType] = UseType.INPUT_FIELD

    type: FullType
    input_field: InputValue

    @property
    def sort_key(self) -> tuple[str, ...]:
        return (self.use_type.value, self.type.name, self.input_field.name, *_contents(self.type, self.input_field))


@dataclass(frozen=True)
class PossibleTypeUse:
    """The type is a member of a union or an implementation of an interface."""

    use_type: ClassVar[UseType] = UseType.POSSIBLE_TYPE

    type: FullType

    @property
    def sort_key(self) -> tuple[str, ...]:
        return (self.use_type.value, self.type.name, "", *_contents(self.type))


TypeUse = FieldUse | InputFieldUse | PossibleTypeUse


# ---------------------------------------------------------------------------
# Reference matching
# ---------------------------------------------------------------------------


def referenced_names(type_ref: TypeRef) -> Iterator[str]:
    """Yield every name carried along *type_ref*'s wrapper chain."""
    ref: TypeRef | None = type_ref
    while ref is not None:
        if ref.name is not None:
            yield ref.name
        if not ref.kind.is_wrapper:
            return
        ref = ref.of_type


def references(type_ref: TypeRef, name: str) -> bool:
    """True when *type_ref* names *name*, directly or through List/NonNull wrappers.

    A wrapper without an inner reference matches nothing.
    """
    return any(n == name for n in referenced_names(type_ref))


def sort_uses(uses: list[TypeUse]) -> list[TypeUse]:
    return sorted(uses, key=lambda u: u.sort_key)


# ---------------------------------------------------------------------------
# Per-target scan
# ---------------------------------------------------------------------------


def find_uses(schema: Schema, target: FullType) -> list[TypeUse]:
    """Scan the whole schema for places that reference *target*.

    A field yields at most one use, whether the match is its result type or
    any number of its arguments.  Input fields and possible types yield one
    use per matching entry.
    """
    name = target.name
    uses: list[TypeUse] = []

    for typ in schema.types:
        for field in typ.fields or ():
            if references(field.type_, name) or any(references(arg.type_, name) for arg in field.args):
                uses.append(FieldUse(typ, field))
        for input_field in typ.input_fields or ():
            if references(input_field.type_, name):
                uses.append(InputFieldUse(typ, input_field))
        for possible_type in typ.possible_types or ():
            if references(possible_type, name):
                uses.append(PossibleTypeUse(typ))

    return sort_uses(uses)


# ---------------------------------------------------------------------------
# Whole-schema index
# ---------------------------------------------------------------------------


class UsageIndex:
    """Uses of every type name, computed in one pass over the schema.

    ``uses_of(t)`` returns exactly what ``find_uses(schema, t)`` would.
    """

    def __init__(self, schema: Schema) -> None:
        by_name: dict[str, list[TypeUse]] = defaultdict(list)

        for typ in schema.types:
            for field in typ.fields or ():
                names = set(referenced_names(field.type_))
                for arg in field.args:
                    names.update(referenced_names(arg.type_))
                for name in names:
                    by_name[name].append(FieldUse(typ, field))
            for input_field in typ.input_fields or ():
                for name in set(referenced_names(input_field.type_)):
                    by_name[name].append(InputFieldUse(typ, input_field))
            for possible_type in typ.possible_types or ():
                for name in set(referenced_names(possible_type)):
                    by_name[name].append(PossibleTypeUse(typ))

        self._uses: dict[str, list[TypeUse]] = {name: sort_uses(uses) for name, uses in by_name.items()}

    def uses_of(self, target: FullType) -> list[TypeUse]:
        return list(self._uses.get(target.name, ()))

    def __len__(self) -> int:
        return len(self._uses)
