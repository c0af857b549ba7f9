"""
Input sources turning external data into catalogs.

Built-in sources, in probing priority order:

1. ``versionedDirectory``
2. ``directory``
3. ``file``
4. ``memory``
5. ``introspection``
6. ``introspectionFile``
"""

import logging
from typing import List

from django.utils.module_loading import import_string

from .base import InputSource, InputSourceContext
from .directory import DirectorySource
from .file import FileSource
from .introspection import IntrospectionSource
from .introspection_cache import IntrospectionCache
from .introspection_file import IntrospectionFileSource
from .memory import MemorySource
from .versioned_directory import VersionedDirectorySource

logger = logging.getLogger(__name__)

BUILTIN_SOURCE_CLASSES = (
    VersionedDirectorySource,
    DirectorySource,
    FileSource,
    MemorySource,
    IntrospectionSource,
    IntrospectionFileSource,
)


def get_default_sources() -> List[InputSource]:
    """Fresh instances of the built-in sources in priority order."""
    return [source_class() for source_class in BUILTIN_SOURCE_CLASSES]


def get_source_registry() -> List[InputSource]:
    """
    Built-in sources followed by the ones listed in
    ``SCHEMA_CATALOG["sources_registry"]`` (dotted class paths).
    """
    from ..config_proxy import get_setting

    sources = get_default_sources()
    for dotted_path in get_setting("sources_registry", []) or []:
        source_class = import_string(dotted_path)
        source = source_class()
        if not isinstance(source, InputSource) or not source.name:
            raise TypeError(f"{dotted_path} is not a named InputSource")
        logger.debug("Registered custom input source '%s' from %s", source.name, dotted_path)
        sources.append(source)
    return sources


__all__ = [
    "BUILTIN_SOURCE_CLASSES",
    "DirectorySource",
    "FileSource",
    "InputSource",
    "InputSourceContext",
    "IntrospectionCache",
    "IntrospectionFileSource",
    "IntrospectionSource",
    "MemorySource",
    "VersionedDirectorySource",
    "get_default_sources",
    "get_source_registry",
]
