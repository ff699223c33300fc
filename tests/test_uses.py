"""Tests for reverse-reference lookup ("Used by" sections)."""

from __future__ import annotations

from factories import ID, field, full_type, input_value, list_of, named, non_null, response

from docql.schema import Kind, TypeRef, parse_introspection
from docql.uses import FieldUse, InputFieldUse, PossibleTypeUse, UsageIndex, UseType, find_uses, references


def _type(schema, name):
    return next(t for t in schema.types if t.name == name)


def _describe(uses):
    result = []
    for use in uses:
        if isinstance(use, FieldUse):
            result.append(f"field {use.type.name}.{use.field.name}")
        elif isinstance(use, InputFieldUse):
            result.append(f"input_field {use.type.name}.{use.input_field.name}")
        else:
            result.append(f"possible_type {use.type.name}")
    return result


# ---------------------------------------------------------------------------
# Reference matching
# ---------------------------------------------------------------------------


class TestReferences:
    def test_unwraps_list_and_non_null(self) -> None:
        ref = TypeRef.model_validate(non_null(list_of(non_null(named("OBJECT", "Post")))))
        assert references(ref, "Post")
        assert not references(ref, "User")

    def test_wrapper_without_inner_matches_nothing(self) -> None:
        ref = TypeRef.model_validate(non_null(None))
        assert not references(ref, "Post")

    def test_stops_at_named_type(self) -> None:
        # A named reference with a stray ofType is not a wrapper
        ref = TypeRef(kind=Kind.OBJECT, name="User", of_type=TypeRef(kind=Kind.OBJECT, name="Post"))
        assert references(ref, "User")
        assert not references(ref, "Post")


# ---------------------------------------------------------------------------
# find_uses
# ---------------------------------------------------------------------------


class TestFindUses:
    def test_object_uses(self, schema) -> None:
        uses = find_uses(schema, _type(schema, "User"))
        assert _describe(uses) == [
            "field Mutation.updateUser",
            "field Post.author",
            "field Query.user",
            "possible_type Node",
            "possible_type SearchResult",
        ]

    def test_through_list_wrappers(self, schema) -> None:
        uses = find_uses(schema, _type(schema, "Post"))
        assert "field User.posts" in _describe(uses)

    def test_argument_uses(self, schema) -> None:
        uses = find_uses(schema, _type(schema, "ID"))
        assert _describe(uses) == [
            "field Node.id",
            "field Post.id",
            "field Query.node",
            "field Query.user",
            "field User.id",
        ]

    def test_input_field_uses(self, schema) -> None:
        uses = find_uses(schema, _type(schema, "Role"))
        assert _describe(uses) == [
            "field User.role",
            "input_field UserFilter.role",
            "input_field UserInput.role",
        ]
        assert [u.use_type for u in uses] == [UseType.FIELD, UseType.INPUT_FIELD, UseType.INPUT_FIELD]

    def test_unreferenced_type(self, schema) -> None:
        assert find_uses(schema, _type(schema, "Query")) == []

    def test_field_counted_once(self) -> None:
        # Result and two arguments all mention Item: still a single use
        item = named("OBJECT", "Item")
        schema = parse_introspection(
            response(
                [
                    full_type(
                        "OBJECT",
                        "Query",
                        fields=[
                            field(
                                "compare",
                                item,
                                args=[input_value("a", non_null(item)), input_value("b", list_of(item))],
                            )
                        ],
                    ),
                    full_type("OBJECT", "Item", fields=[]),
                ]
            )
        )
        uses = find_uses(schema, _type(schema, "Item"))
        assert _describe(uses) == ["field Query.compare"]

    def test_repeated_possible_type_not_deduplicated(self) -> None:
        a = named("OBJECT", "A")
        schema = parse_introspection(
            response(
                [
                    full_type("OBJECT", "Query", fields=[]),
                    full_type("OBJECT", "A", fields=[]),
                    full_type("UNION", "U", possibleTypes=[a, a]),
                ]
            )
        )
        uses = find_uses(schema, _type(schema, "A"))
        assert uses == [PossibleTypeUse(_type(schema, "U")), PossibleTypeUse(_type(schema, "U"))]

    def test_order_independent_of_declaration_order(self, introspection) -> None:
        types = introspection["data"]["__schema"]["types"]
        orders = [types, types[::-1], types[3:] + types[:3], types[7:] + types[:7]]
        results = []
        for order in orders:
            schema = parse_introspection(response(order, mutation="Mutation"))
            results.append(_describe(find_uses(schema, _type(schema, "User"))))
        assert all(r == results[0] for r in results)

    def test_user_post_scenario(self) -> None:
        user = named("OBJECT", "User")
        post = named("OBJECT", "Post")
        schema = parse_introspection(
            response(
                [
                    full_type(
                        "OBJECT",
                        "User",
                        fields=[field("id", non_null(ID)), field("posts", non_null(list_of(non_null(post))))],
                    ),
                    full_type("OBJECT", "Post", fields=[field("author", non_null(user))]),
                ],
                query="User",
            )
        )
        assert _describe(find_uses(schema, _type(schema, "Post"))) == ["field User.posts"]
        assert _describe(find_uses(schema, _type(schema, "User"))) == ["field Post.author"]

    def test_duplicate_type_names_ordered_by_contents(self) -> None:
        a = named("OBJECT", "A")
        types = [
            full_type("OBJECT", "A", fields=[]),
            full_type("OBJECT", "Q", description="one", fields=[field("x", a)]),
            full_type("OBJECT", "Q", description="two", fields=[field("x", a)]),
        ]
        results = []
        for order in (types, types[::-1]):
            schema = parse_introspection(response(order, query="Q"))
            target = _type(schema, "A")
            uses = find_uses(schema, target)
            assert UsageIndex(schema).uses_of(target) == uses
            results.append([use.type.description for use in uses])
        assert results[0] == results[1]
        assert sorted(results[0]) == ["one", "two"]


# ---------------------------------------------------------------------------
# UsageIndex
# ---------------------------------------------------------------------------


class TestUsageIndex:
    def test_matches_find_uses_for_every_type(self, schema) -> None:
        index = UsageIndex(schema)
        for typ in schema.types:
            assert index.uses_of(typ) == find_uses(schema, typ), typ.name

    def test_unknown_name(self, schema) -> None:
        index = UsageIndex(schema)
        assert index.uses_of(_type(schema, "Query")) == []

    def test_returns_copies(self, schema) -> None:
        index = UsageIndex(schema)
        user = _type(schema, "User")
        index.uses_of(user).clear()
        assert len(index.uses_of(user)) == 5

    def test_len_counts_referenced_names(self, schema) -> None:
        # Query and Mutation are the only unreferenced types
        assert len(UsageIndex(schema)) == len(schema.types) - 2
