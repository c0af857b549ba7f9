"""
Unit tests for description augmentations.
"""

import pytest
from graphql import GraphQLString, build_schema, introspection_types

from schema_catalog.core import Version
from schema_catalog.loader.augmentations import (
    AugmentationConfig,
    VersionCoverage,
    apply_augmentations,
    mutate_description,
    normalize_augmentation,
)

pytestmark = pytest.mark.unit

SDL = '''
"""Root query."""
type Query {
  """All users."""
  users: [User]
}

type User { id: ID! }

enum Role { ADMIN }
'''


@pytest.fixture
def schema():
    return build_schema(SDL)


def _codes(diagnostics):
    return [diagnostic.code for diagnostic in diagnostics]


def test_mutate_description_placements():
    assert mutate_description("Base.", AugmentationConfig("Query", "before", "Note.")) == "Note.\n\nBase."
    assert mutate_description("Base.", AugmentationConfig("Query", "after", "Note.")) == "Base.\n\nNote."
    assert mutate_description("Base.", AugmentationConfig("Query", "over", "Note.")) == "Note."
    assert mutate_description(None, AugmentationConfig("Query", "after", "Note.")) == "Note."


def test_normalize_unversioned():
    augmentation = normalize_augmentation({"on": "Query", "placement": "after", "content": "x"})
    assert list(augmentation.coverage) == [VersionCoverage.unversioned()]
    assert augmentation.config_for(None).on == "Query"
    assert augmentation.config_for(Version.decode("1.0.0")) is None


def test_normalize_versions_merge_top_level_keys():
    augmentation = normalize_augmentation({
        "on": "Query.users",
        "placement": "after",
        "content": "Default note.",
        "versions": {
            "1.0.0": {},
            "2.0.0": {"content": "Version two note."},
            "3.0.0": {"on": None, "placement": None},
        },
    })
    assert augmentation.config_for(Version.decode("1.0.0")).content == "Default note."
    assert augmentation.config_for(Version.decode("2.0.0")).content == "Version two note."
    assert augmentation.config_for(Version.decode("3.0.0")).placement == "after"
    assert augmentation.config_for(None) is None


def test_normalize_incomplete_returns_none():
    assert normalize_augmentation({"on": "Query", "placement": "after"}) is None
    assert normalize_augmentation({"versions": {"1.0.0": {"on": "Query"}}}) is None
    assert normalize_augmentation("Query") is None


def test_apply_to_type_and_field(schema):
    diagnostics = apply_augmentations(schema, [
        {"on": "Query", "placement": "before", "content": "Public API."},
        {"on": "Query.users", "placement": "after", "content": "Paginated."},
        {"on": "User", "placement": "after", "content": "A person."},
    ])
    assert diagnostics == []
    assert schema.query_type.description == "Public API.\n\nRoot query."
    assert schema.query_type.fields["users"].description == "All users.\n\nPaginated."
    assert schema.get_type("User").description == "A person."


def test_bad_targets_become_diagnostics(schema):
    diagnostics = apply_augmentations(schema, [
        {"on": "Missing", "placement": "after", "content": "x"},
        {"on": "Query.missing", "placement": "after", "content": "x"},
        {"on": "Role.ADMIN", "placement": "after", "content": "x"},
        {"on": "Query.users.id", "placement": "after", "content": "x"},
        {"on": "Query", "placement": "sideways", "content": "x"},
        {"on": "Query"},
    ])
    assert _codes(diagnostics) == [
        "augmentation_type_not_found",
        "augmentation_field_not_found",
        "augmentation_field_not_found",
        "augmentation_invalid_path",
        "augmentation_invalid_placement",
        "augmentation_invalid",
    ]
    assert diagnostics[0].context["index"] == 0
    assert schema.query_type.description == "Root query."


def test_versioned_augmentation_only_hits_matching_version(schema):
    config = [{
        "on": "Query",
        "placement": "over",
        "content": "x",
        "versions": {"2.0.0": {"content": "Two."}},
    }]
    assert apply_augmentations(schema, config, Version.decode("1.0.0")) == []
    assert schema.query_type.description == "Root query."

    apply_augmentations(schema, config, Version.decode("2.0.0"))
    assert schema.query_type.description == "Two."


def test_builtin_types_are_not_augmented(schema):
    string_description = GraphQLString.description
    type_description = introspection_types["__Type"].description
    config = [
        {"on": "String", "placement": "after", "content": "Leaked."},
        {"on": "__Type", "placement": "over", "content": "Leaked."},
        {"on": "__Type.name", "placement": "over", "content": "Leaked."},
    ]

    for _ in range(2):
        diagnostics = apply_augmentations(schema, config)
        assert _codes(diagnostics) == ["augmentation_type_not_found"] * 3

    assert GraphQLString.description == string_description
    assert introspection_types["__Type"].description == type_description
    assert build_schema(SDL).get_type("String").description == string_description
