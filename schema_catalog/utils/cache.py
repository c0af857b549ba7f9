"""
Cache utilities for the schema catalog.

Request hashing for the introspection cache and call-site owned memoization
for file reads.
"""

import hashlib
import json
import threading
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")

_MISSING = object()


def make_request_hash(url: str, headers: Optional[Dict[str, str]] = None) -> str:
    """
    Stable sha256 hex digest for a request.

    Without headers the digest depends on the URL alone; headers are folded
    in canonical (sorted) JSON form.
    """
    hash_input = url
    if headers:
        hash_input = f"{url}\n{json.dumps(headers, sort_keys=True, separators=(',', ':'))}"
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()


class MemoizedReader(Generic[T]):
    """
    Memoizes a single-argument read function.

    Instances are owned by their call site, so independent loaders (and
    tests) never share cached content.

    Examples:
        >>> reader = MemoizedReader(fs.read)
        >>> reader.get("schema.graphql")  # reads the file
        >>> reader.get("schema.graphql")  # served from memory
        >>> reader.clear()
    """

    def __init__(self, read: Callable[[Any], T]):
        self._read = read
        self._values: Dict[Hashable, T] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> T:
        with self._lock:
            value = self._values.get(key, _MISSING)
        if value is not _MISSING:
            return value
        value = self._read(key)
        with self._lock:
            # Concurrent reads of the same key keep the first stored value
            return self._values.setdefault(key, value)

    def clear(self, key: Optional[Hashable] = None) -> None:
        with self._lock:
            if key is None:
                self._values.clear()
            else:
                self._values.pop(key, None)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
