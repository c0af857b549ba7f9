"""
Core data model: versions, changes, revisions, schemas and catalogs.
"""

from .definition import (
    EMPTY_SCHEMA,
    coerce_schema,
    empty_schema,
    from_introspection,
    is_empty_schema,
    parse_sdl,
    to_introspection,
    to_sdl,
)
from .change import Change, ChangeKind, Criticality, CriticalityLevel
from .changeset import Changeset, Revision, build_revisions, compute_changesets
from .schema import Category, UnversionedSchema, VersionedSchema
from .catalog import Catalog, UnversionedCatalog, VersionedCatalog, catalog_from_dict, fold
from .version import Version, VersionKind

__all__ = [
    "EMPTY_SCHEMA",
    "Catalog",
    "Category",
    "Change",
    "ChangeKind",
    "Changeset",
    "Criticality",
    "CriticalityLevel",
    "Revision",
    "UnversionedCatalog",
    "UnversionedSchema",
    "Version",
    "VersionKind",
    "VersionedCatalog",
    "VersionedSchema",
    "build_revisions",
    "catalog_from_dict",
    "coerce_schema",
    "compute_changesets",
    "empty_schema",
    "fold",
    "from_introspection",
    "is_empty_schema",
    "parse_sdl",
    "to_introspection",
    "to_sdl",
]
