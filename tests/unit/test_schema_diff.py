"""
Unit tests for the schema diff engine.
"""

import pytest
from graphql import build_schema

from schema_catalog.core import ChangeKind, CriticalityLevel, empty_schema
from schema_catalog.exceptions import SchemaDiffError
from schema_catalog.introspection import SchemaComparator, diff
from schema_catalog.introspection.comparison import (
    is_safe_input_type_change,
    is_safe_output_type_change,
)

pytestmark = pytest.mark.unit


def _kinds(changes):
    return [change.type for change in changes]


def _only(changes, kind):
    found = [change for change in changes if change.type is kind]
    assert len(found) == 1, found
    return found[0]


def test_identical_schemas_produce_no_changes(schema_v1):
    assert diff(schema_v1, schema_v1) == []
    assert diff(schema_v1, build_schema("type Query { hello: String }\ntype User { id: ID! name: String! }")) == []


def test_added_type_yields_single_change():
    before = build_schema("type Query { hello: String }")
    after = build_schema("type Query { hello: String }\ntype Foo { id: ID }")
    changes = diff(before, after)
    assert _kinds(changes) == [ChangeKind.TYPE_ADDED]
    assert changes[0].path == "Foo"
    assert changes[0].criticality.level is CriticalityLevel.NON_BREAKING


def test_removed_type_is_breaking():
    before = build_schema("type Query { hello: String }\ntype Foo { id: ID }")
    after = build_schema("type Query { hello: String }")
    change = _only(diff(before, after), ChangeKind.TYPE_REMOVED)
    assert change.path == "Foo"
    assert change.is_breaking


def test_diff_from_empty_schema_lists_every_user_type(schema_v1):
    changes = diff(empty_schema(), schema_v1)
    assert _kinds(changes) == [ChangeKind.TYPE_ADDED, ChangeKind.TYPE_ADDED]
    assert [change.path for change in changes] == ["Query", "User"]


def test_field_additions_follow_type_order(schema_v1, schema_v2):
    changes = diff(schema_v1, schema_v2)
    assert _kinds(changes) == [ChangeKind.FIELD_ADDED, ChangeKind.FIELD_ADDED]
    assert [change.path for change in changes] == ["Query.world", "User.email"]
    assert all(not change.is_breaking for change in changes)
    assert changes[1].meta["type_name"] == "User"
    assert changes[1].meta["field_name"] == "email"


def test_output_field_made_non_null_is_safe():
    before = build_schema("type Query { name: String }")
    after = build_schema("type Query { name: String! }")
    change = _only(diff(before, after), ChangeKind.FIELD_TYPE_CHANGED)
    assert change.criticality.level is CriticalityLevel.NON_BREAKING


def test_output_field_made_nullable_is_breaking():
    before = build_schema("type Query { name: String! }")
    after = build_schema("type Query { name: String }")
    change = _only(diff(before, after), ChangeKind.FIELD_TYPE_CHANGED)
    assert change.is_breaking


def test_required_argument_added_is_breaking():
    before = build_schema("type Query { users: [String] }")
    after = build_schema("type Query { users(first: Int!): [String] }")
    change = _only(diff(before, after), ChangeKind.FIELD_ARGUMENT_ADDED)
    assert change.path == "Query.users(first)"
    assert change.is_breaking


def test_optional_argument_added_is_safe():
    before = build_schema("type Query { users: [String] }")
    after = build_schema("type Query { users(first: Int = 10): [String] }")
    change = _only(diff(before, after), ChangeKind.FIELD_ARGUMENT_ADDED)
    assert not change.is_breaking


def test_argument_default_change_is_dangerous():
    before = build_schema("type Query { users(first: Int = 10): [String] }")
    after = build_schema("type Query { users(first: Int = 20): [String] }")
    change = _only(diff(before, after), ChangeKind.FIELD_ARGUMENT_DEFAULT_CHANGED)
    assert change.is_dangerous
    assert change.meta["old_default"] == "10"
    assert change.meta["new_default"] == "20"


def test_argument_made_required_is_breaking():
    before = build_schema("type Query { user(id: ID): String }")
    after = build_schema("type Query { user(id: ID!): String }")
    change = _only(diff(before, after), ChangeKind.FIELD_ARGUMENT_TYPE_CHANGED)
    assert change.is_breaking


def test_required_input_field_added_is_breaking():
    before = build_schema("input UserInput { name: String }\ntype Query { a(input: UserInput): String }")
    after = build_schema("input UserInput { name: String email: String! }\ntype Query { a(input: UserInput): String }")
    change = _only(diff(before, after), ChangeKind.INPUT_FIELD_ADDED)
    assert change.path == "UserInput.email"
    assert change.is_breaking


def test_optional_input_field_added_is_safe():
    before = build_schema("input UserInput { name: String }\ntype Query { a(input: UserInput): String }")
    after = build_schema("input UserInput { name: String email: String }\ntype Query { a(input: UserInput): String }")
    change = _only(diff(before, after), ChangeKind.INPUT_FIELD_ADDED)
    assert not change.is_breaking


def test_enum_value_added_is_dangerous():
    before = build_schema("enum Role { ADMIN }\ntype Query { role: Role }")
    after = build_schema("enum Role { ADMIN USER }\ntype Query { role: Role }")
    change = _only(diff(before, after), ChangeKind.ENUM_VALUE_ADDED)
    assert change.path == "Role.USER"
    assert change.is_dangerous


def test_union_member_changes():
    before = build_schema("type A { a: String }\ntype B { b: String }\nunion AB = A\ntype Query { ab: AB }")
    after = build_schema("type A { a: String }\ntype B { b: String }\nunion AB = A | B\ntype Query { ab: AB }")
    assert _only(diff(before, after), ChangeKind.UNION_MEMBER_ADDED).is_dangerous
    assert _only(diff(after, before), ChangeKind.UNION_MEMBER_REMOVED).is_breaking


def test_kind_change_is_breaking_and_stops_detail_comparison():
    before = build_schema("type Thing { id: ID }\ntype Query { thing: Thing }")
    after = build_schema("interface Thing { id: ID name: String }\ntype Query { thing: Thing }")
    changes = diff(before, after)
    assert _kinds(changes) == [ChangeKind.TYPE_KIND_CHANGED]
    assert changes[0].is_breaking


def test_field_deprecation_added():
    before = build_schema("type Query { old: String }")
    after = build_schema('type Query { old: String @deprecated(reason: "Use new") }')
    change = _only(diff(before, after), ChangeKind.FIELD_DEPRECATION_ADDED)
    assert change.meta["deprecation_reason"] == "Use new"


def test_directive_added():
    before = build_schema("type Query { a: String }")
    after = build_schema("directive @auth on FIELD_DEFINITION\ntype Query { a: String }")
    change = _only(diff(before, after), ChangeKind.DIRECTIVE_ADDED)
    assert change.path == "@auth"


def test_root_type_change_is_breaking():
    before = build_schema("type Query { a: String }\ntype RootQuery { a: String }")
    after = build_schema(
        "schema { query: RootQuery }\ntype Query { a: String }\ntype RootQuery { a: String }"
    )
    change = _only(diff(before, after), ChangeKind.SCHEMA_QUERY_TYPE_CHANGED)
    assert change.path == "schema.query"


def test_comparison_summary(schema_v1):
    after = build_schema("type Query { hello: Int }\ntype User { id: ID! name: String! }\nenum Role { A }")
    comparison = SchemaComparator().compare(schema_v1, after)
    assert comparison.total_changes == 2
    assert comparison.breaking_changes == 1
    assert comparison.migration_required is True
    assert comparison.to_dict()["summary"]["total_changes"] == 2


def test_diff_rejects_non_schema_values(schema_v1):
    with pytest.raises(SchemaDiffError):
        diff(schema_v1, "type Query { a: String }")
    with pytest.raises(SchemaDiffError):
        diff(None, schema_v1)


@pytest.mark.parametrize(
    "old, new, safe",
    [
        ("String", "String!", True),
        ("[String]", "[String!]!", True),
        ("String!", "String", False),
        ("String", "Int", False),
        ("[String]", "String", False),
    ],
)
def test_output_type_safety(old, new, safe):
    assert is_safe_output_type_change(old, new) is safe


@pytest.mark.parametrize(
    "old, new, safe",
    [
        ("String!", "String", True),
        ("[String!]", "[String]", True),
        ("String", "String!", False),
        ("Int", "String", False),
    ],
)
def test_input_type_safety(old, new, safe):
    assert is_safe_input_type_change(old, new) is safe
