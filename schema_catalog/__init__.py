"""
GraphQL schema catalog.

Loads GraphQL schemas from files, directories, in-memory values or live
introspection, keeps their dated revision history per API version, diffs
snapshots into classified changes and replays that history into per-type
and per-field lifecycles.
"""

from .defaults import LIBRARY_VERSION as __version__
from .core import (
    Catalog,
    Change,
    ChangeKind,
    Changeset,
    CriticalityLevel,
    Revision,
    UnversionedCatalog,
    UnversionedSchema,
    Version,
    VersionedCatalog,
    VersionedSchema,
)
from .exceptions import (
    CatalogError,
    InputSourceError,
    IntrospectionFetchError,
    LifecycleConsistencyError,
    SchemaConfigurationError,
    SchemaDiffError,
    SchemaParseError,
)
from .introspection import diff
from .lifecycle import SchemaLifecycle
from .loader import LoadedCatalog, SchemaLoader, load_catalog

__all__ = [
    "__version__",
    "Catalog",
    "CatalogError",
    "Change",
    "ChangeKind",
    "Changeset",
    "CriticalityLevel",
    "InputSourceError",
    "IntrospectionFetchError",
    "LifecycleConsistencyError",
    "LoadedCatalog",
    "Revision",
    "SchemaConfigurationError",
    "SchemaDiffError",
    "SchemaLifecycle",
    "SchemaLoader",
    "SchemaParseError",
    "UnversionedCatalog",
    "UnversionedSchema",
    "Version",
    "VersionedCatalog",
    "VersionedSchema",
    "diff",
    "load_catalog",
]
