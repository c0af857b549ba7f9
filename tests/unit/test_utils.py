"""
Unit tests for the request hash and MemoizedReader.
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from schema_catalog.utils.cache import MemoizedReader, make_request_hash

pytestmark = pytest.mark.unit


def test_memoized_reader_reads_once_per_key():
    read = MagicMock(side_effect=lambda key: f"content of {key}")
    reader = MemoizedReader(read)

    assert reader.get("a.graphql") == "content of a.graphql"
    assert reader.get("a.graphql") == "content of a.graphql"
    assert reader.get("b.graphql") == "content of b.graphql"

    assert read.call_count == 2
    assert "a.graphql" in reader
    assert len(reader) == 2


def test_memoized_reader_caches_missing_files():
    read = MagicMock(return_value=None)
    reader = MemoizedReader(read)
    assert reader.get("missing") is None
    assert reader.get("missing") is None
    read.assert_called_once_with("missing")


def test_memoized_reader_clear():
    read = MagicMock(return_value="x")
    reader = MemoizedReader(read)
    reader.get("a")
    reader.get("b")

    reader.clear("a")
    assert "a" not in reader
    assert "b" in reader

    reader.clear()
    assert len(reader) == 0
    reader.get("a")
    assert read.call_count == 3


def test_memoized_reader_concurrent_access():
    reader = MemoizedReader(lambda key: key.upper())
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(reader.get, ["a", "b", "a", "c"] * 10))
    assert set(results) == {"A", "B", "C"}
    assert len(reader) == 3


def test_readers_are_independent():
    first = MemoizedReader(lambda key: "first")
    second = MemoizedReader(lambda key: "second")
    assert first.get("k") == "first"
    assert second.get("k") == "second"


def test_request_hash():
    url = "https://api.example.com/graphql"
    assert make_request_hash(url) == make_request_hash(url)
    assert len(make_request_hash(url)) == 64
    assert make_request_hash(url) != make_request_hash(url + "/v2")
    assert make_request_hash(url, {}) == make_request_hash(url)
    assert make_request_hash(url, {"a": "1", "b": "2"}) == make_request_hash(url, {"b": "2", "a": "1"})
    assert make_request_hash(url, {"Authorization": "x"}) != make_request_hash(url)
