"""
Integration tests for the introspection source and its on-disk cache.
"""

import json
from unittest.mock import patch

import pytest
from graphql import build_schema

from schema_catalog.core import to_introspection
from schema_catalog.exceptions import IntrospectionFetchError, SchemaParseError
from schema_catalog.sources import IntrospectionCache, IntrospectionSource
from schema_catalog.sources.base import InputSourceContext

pytestmark = pytest.mark.integration

URL = "https://api.example.com/graphql"


@pytest.fixture
def result():
    return to_introspection(build_schema("type Query { hello: String }"))


@pytest.fixture
def cache(context):
    return IntrospectionCache(context.introspection_cache_dir)


class TestIntrospectionCache:
    def test_store_then_load(self, cache, result):
        cache.store(URL, result)
        entry = json.loads(cache.path_for(URL).read_text(encoding="utf-8"))
        assert entry["url"] == URL
        assert "fetchedAt" in entry
        assert cache.load(URL) == result

    def test_headers_change_the_key(self, cache, result):
        cache.store(URL, result, {"Authorization": "a"})
        assert cache.load(URL, {"Authorization": "a"}) == result
        assert cache.load(URL) is None
        assert cache.path_for(URL) != cache.path_for(URL, {"Authorization": "a"})

    def test_corrupt_entry_is_a_miss(self, cache):
        cache.path_for(URL).parent.mkdir(parents=True)
        cache.path_for(URL).write_text("{truncated", encoding="utf-8")
        assert cache.load(URL) is None

    def test_malformed_entry_is_a_miss(self, cache):
        cache.path_for(URL).parent.mkdir(parents=True)
        cache.path_for(URL).write_text(json.dumps({"url": URL, "introspectionResult": {}}), encoding="utf-8")
        assert cache.load(URL) is None

    def test_undecodable_entry_is_a_miss(self, cache):
        cache.path_for(URL).parent.mkdir(parents=True)
        cache.path_for(URL).write_bytes(b"\xff\xfe{garbage")
        assert cache.load(URL) is None

    def test_clear(self, cache, result):
        cache.store(URL, result)
        cache.clear(URL)
        assert cache.load(URL) is None
        cache.clear(URL)


@patch("schema_catalog.sources.introspection.fetch_introspection")
class TestIntrospectionSource:
    def test_applicable_only_with_url(self, mock_fetch, context):
        source = IntrospectionSource()
        assert source.is_applicable({"url": URL}, context)
        assert not source.is_applicable({}, context)
        mock_fetch.assert_not_called()

    def test_cache_prevents_second_fetch(self, mock_fetch, context, result):
        mock_fetch.return_value = result
        source = IntrospectionSource()

        first = source.read_if_applicable_or_raise({"url": URL}, context)
        second = source.read_if_applicable_or_raise({"url": URL}, context)

        assert mock_fetch.call_count == 1
        assert "hello" in first.schema.definition.query_type.fields
        assert "hello" in second.schema.definition.query_type.fields

    def test_disabled_cache_fetches_every_time(self, mock_fetch, context, result):
        mock_fetch.return_value = result
        source = IntrospectionSource()

        source.read_if_applicable_or_raise({"url": URL, "cache": False}, context)
        source.read_if_applicable_or_raise({"url": URL, "cache": False}, context)

        assert mock_fetch.call_count == 2
        assert not IntrospectionCache(context.introspection_cache_dir).path_for(URL).exists()

    def test_context_can_disable_cache(self, mock_fetch, tmp_path, result):
        mock_fetch.return_value = result
        context = InputSourceContext(project_root=tmp_path, introspection_cache_enabled=False)
        source = IntrospectionSource()

        source.read_if_applicable_or_raise({"url": URL}, context)
        source.read_if_applicable_or_raise({"url": URL}, context)

        assert mock_fetch.call_count == 2

    def test_corrupt_cache_falls_back_to_fetch(self, mock_fetch, context, cache, result):
        mock_fetch.return_value = result
        cache.path_for(URL).parent.mkdir(parents=True)
        cache.path_for(URL).write_text("not json", encoding="utf-8")

        catalog = IntrospectionSource().read_if_applicable_or_raise({"url": URL}, context)

        assert catalog is not None
        mock_fetch.assert_called_once()
        assert cache.load(URL) == result

    def test_unbuildable_cache_entry_falls_back_to_fetch(self, mock_fetch, context, cache, result):
        mock_fetch.return_value = result
        cache.path_for(URL).parent.mkdir(parents=True)
        cache.path_for(URL).write_text(
            json.dumps({"url": URL, "introspectionResult": {"data": {"__schema": {}}}}),
            encoding="utf-8",
        )

        catalog = IntrospectionSource().read_if_applicable_or_raise({"url": URL}, context)

        assert "hello" in catalog.schema.definition.query_type.fields
        mock_fetch.assert_called_once()
        assert cache.load(URL) == result

    def test_undecodable_cache_file_falls_back_to_fetch(self, mock_fetch, context, cache, result):
        mock_fetch.return_value = result
        cache.path_for(URL).parent.mkdir(parents=True)
        cache.path_for(URL).write_bytes(b"\xff\xfe{garbage")

        catalog = IntrospectionSource().read_if_applicable_or_raise({"url": URL}, context)

        assert catalog is not None
        mock_fetch.assert_called_once()

    def test_incomplete_fetched_result_is_a_parse_error(self, mock_fetch, context):
        mock_fetch.return_value = {"data": {"__schema": {}}}
        with pytest.raises(SchemaParseError):
            IntrospectionSource().read_if_applicable_or_raise({"url": URL}, context)

    def test_re_create_bypasses_cache(self, mock_fetch, context, cache, result):
        mock_fetch.return_value = result
        cache.store(URL, result)
        source = IntrospectionSource()

        assert source.supports_re_create
        source.re_create({"url": URL}, context)

        mock_fetch.assert_called_once()

    def test_headers_and_timeout_are_forwarded(self, mock_fetch, tmp_path, result):
        mock_fetch.return_value = result
        context = InputSourceContext(project_root=tmp_path, introspection_timeout=2)

        IntrospectionSource().read_if_applicable_or_raise(
            {"url": URL, "headers": {"Authorization": "Bearer t"}}, context
        )

        mock_fetch.assert_called_once_with(URL, {"Authorization": "Bearer t"}, timeout=2)

    def test_fetch_errors_propagate(self, mock_fetch, context):
        mock_fetch.side_effect = IntrospectionFetchError("boom", url=URL)
        with pytest.raises(IntrospectionFetchError):
            IntrospectionSource().read_if_applicable_or_raise({"url": URL}, context)
