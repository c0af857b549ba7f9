"""
Integration tests for the schema loader end to end.
"""

from datetime import date
from unittest.mock import patch

import pytest
from django.test import override_settings
from graphql import build_schema

from schema_catalog.core import ChangeKind, UnversionedCatalog, VersionedCatalog
from schema_catalog.exceptions import InputSourceError, SchemaConfigurationError, SchemaParseError
from schema_catalog.lifecycle import SchemaLifecycle
from schema_catalog.loader import LoadedCatalog, SchemaConfig, SchemaLoader, load_catalog
from schema_catalog.sources import (
    DirectorySource,
    FileSource,
    InputSource,
    MemorySource,
    VersionedDirectorySource,
)

pytestmark = pytest.mark.integration

V1 = "type Query { hello: String }\ntype User { id: ID! name: String! }\n"
V2 = "type Query { hello: String world: String }\ntype User { id: ID! name: String! email: String }\n"


def _write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _config(tmp_path, **schema):
    return SchemaConfig.from_dict(schema, project_root=tmp_path)


class StaticSource(InputSource):
    name = "static"

    def is_applicable(self, options, context):
        return bool(options.get("sdl"))

    def read_if_applicable_or_raise(self, options, context):
        return MemorySource().read_if_applicable_or_raise({"revisions": options["sdl"]}, context)


class TestSchemaLoader:
    def test_memory_revisions_end_to_end(self, tmp_path):
        config = _config(tmp_path, sources={"memory": {"revisions": [
            {"date": "2024-01-01", "value": V1},
            {"date": "2024-02-01", "value": V2},
        ]}})

        loaded = SchemaLoader().load(config)

        assert loaded.source == "memory"
        assert loaded.diagnostics == []
        revisions = loaded.data.schema.revisions
        assert revisions[0].date == date(2024, 2, 1)
        assert [c.path for c in revisions[0].changes] == ["Query.world", "User.email"]
        assert all(c.type is ChangeKind.FIELD_ADDED and not c.is_breaking for c in revisions[0].changes)

        lifecycle = SchemaLifecycle.from_catalog(loaded.data)
        assert lifecycle.get_field_added_date("Query", "world") == date(2024, 2, 1)
        assert lifecycle.get_field_added_date("User", "id") == date(2024, 1, 1)

    def test_only_the_selected_source_is_read(self, tmp_path):
        config = _config(tmp_path, sources={"memory": {"revisions": V1}})
        with patch.object(VersionedDirectorySource, "read_if_applicable_or_raise") as versioned_read, \
                patch.object(DirectorySource, "read_if_applicable_or_raise") as directory_read, \
                patch.object(FileSource, "read_if_applicable_or_raise") as file_read:
            loaded = SchemaLoader().load(config)

        assert loaded.source == "memory"
        versioned_read.assert_not_called()
        directory_read.assert_not_called()
        file_read.assert_not_called()

    def test_priority_prefers_versioned_directory(self, tmp_path):
        _write(tmp_path / "schema" / "1.0.0" / "schema.graphql", V1)
        _write(tmp_path / "schema.graphql", V1)
        config = _config(tmp_path, sources={"memory": {"revisions": V1}})

        loaded = SchemaLoader().load(config)

        assert loaded.source == "versionedDirectory"
        assert isinstance(loaded.data, VersionedCatalog)

    def test_use_sources_pins_order(self, tmp_path):
        _write(tmp_path / "schema" / "2024-01-01.graphql", V1)
        _write(tmp_path / "schema.graphql", V2)
        config = _config(tmp_path, use_sources=["file", "directory", "unknown"])

        loaded = SchemaLoader().load(config)

        assert loaded.source == "file"
        assert isinstance(loaded.data, UnversionedCatalog)

    def test_no_applicable_source_raises(self, tmp_path):
        with pytest.raises(SchemaConfigurationError) as exc_info:
            SchemaLoader().load(_config(tmp_path))
        assert "No applicable schema source found" in str(exc_info.value)
        assert exc_info.value.hint

    def test_disabled_schema_returns_empty_envelope(self, tmp_path):
        _write(tmp_path / "schema.graphql", V1)
        loaded = SchemaLoader().load(_config(tmp_path, enabled=False))
        assert loaded == LoadedCatalog()
        assert not loaded.has_data

    def test_has_schema(self, tmp_path):
        loader = SchemaLoader()
        assert not loader.has_schema(_config(tmp_path))
        _write(tmp_path / "schema.graphql", V1)
        assert loader.has_schema(_config(tmp_path))
        assert not loader.has_schema(_config(tmp_path, enabled=False))

    def test_custom_source_registry(self, tmp_path):
        loader = SchemaLoader(sources=[StaticSource()])
        loaded = loader.load(_config(tmp_path, sources={"static": {"sdl": V1}}))
        assert loaded.source == "static"

    def test_re_create_falls_back_to_plain_read(self, tmp_path):
        _write(tmp_path / "schema.graphql", V1)
        loaded = SchemaLoader().re_create(_config(tmp_path))
        assert loaded.source == "file"

    def test_post_processing_collects_diagnostics(self, tmp_path):
        config = _config(
            tmp_path,
            sources={"memory": {"revisions": V1}},
            augmentations=[
                {"on": "User", "placement": "after", "content": "A registered user."},
                {"on": "Ghost", "placement": "after", "content": "x"},
            ],
            categories=[{"name": "People", "type_names": ["User"]}],
        )

        loaded = SchemaLoader().load(config)

        schema = loaded.data.schema
        assert schema.definition.get_type("User").description == "A registered user."
        assert [(c.name, c.types) for c in schema.categories] == [("People", ["User"])]
        assert [d.code for d in loaded.diagnostics] == ["augmentation_type_not_found"]

    def test_versioned_post_processing(self, tmp_path):
        _write(tmp_path / "schema" / "1.0.0" / "schema.graphql", V1)
        _write(tmp_path / "schema" / "2.0.0" / "schema.graphql", V2)
        config = _config(
            tmp_path,
            augmentations=[{
                "on": "Query.world",
                "placement": "over",
                "content": "World.",
                "versions": {"2.0.0": {}},
            }],
            categories={"2.0.0": [{"name": "Root", "type_names": ["Query"]}]},
        )

        loaded = SchemaLoader().load(config)

        v1, v2 = loaded.data.get("1.0.0"), loaded.data.get("2.0.0")
        assert v2.definition.query_type.fields["world"].description == "World."
        assert [c.name for c in v2.categories] == ["Root"]
        assert v1.categories == []
        assert [d.code for d in loaded.diagnostics] == ["unmatched_version_scope"]

    def test_parse_error_is_fatal(self, tmp_path):
        _write(tmp_path / "schema" / "2024-01-01.graphql", V1)
        _write(tmp_path / "schema" / "2024-02-01.graphql", "type Query {")
        with pytest.raises(SchemaParseError):
            SchemaLoader().load(_config(tmp_path))


def test_load_catalog_reads_django_settings(tmp_path):
    _write(tmp_path / "api.graphql", V1)
    with override_settings(SCHEMA_CATALOG={
        "project_root": str(tmp_path),
        "schema": {"sources": {"file": {"path": "api.graphql"}}},
    }):
        loaded = load_catalog()
    assert loaded.source == "file"
    assert "User" in loaded.data.schema.definition.type_map


def test_custom_sources_from_settings(tmp_path):
    with override_settings(SCHEMA_CATALOG={
        "project_root": str(tmp_path),
        "sources_registry": ["tests.integration.test_schema_loader.StaticSource"],
        "schema": {"use_sources": ["static"], "sources": {"static": {"sdl": V1}}},
    }):
        loaded = load_catalog()
    assert loaded.source == "static"


class TestMemorySource:
    def test_accepts_schema_objects_and_catalogs(self, context):
        schema = build_schema(V1)
        catalog = MemorySource().read_if_applicable_or_raise({"revisions": schema}, context)
        assert catalog.schema.definition is schema

        assert MemorySource().read_if_applicable_or_raise({"revisions": catalog}, context) is catalog

    def test_rejects_versioned_catalogs(self, context):
        with pytest.raises(InputSourceError):
            MemorySource().read_if_applicable_or_raise({"revisions": VersionedCatalog()}, context)

    def test_rejects_invalid_dates(self, context):
        with pytest.raises(InputSourceError):
            MemorySource().read_if_applicable_or_raise(
                {"revisions": [{"date": "2024-02-30", "value": V1}]}, context
            )

    def test_undated_revisions_use_today(self, context):
        with patch("schema_catalog.sources.memory.today", return_value=date(2024, 6, 1)):
            catalog = MemorySource().read_if_applicable_or_raise({"revisions": [V1]}, context)
        assert catalog.schema.latest_revision.date == date(2024, 6, 1)
