"""
Catalog: the root aggregate.

A catalog is either one unversioned schema or an ordered set of versioned
schemas. Consumers branch with ``fold`` instead of inspecting the shape.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union

from django.utils import timezone

from .date_only import decode_date_only, encode_date_only
from .changeset import Revision
from .definition import empty_schema, parse_sdl, to_sdl
from .schema import Category, UnversionedSchema, VersionedSchema
from .version import Version

logger = logging.getLogger(__name__)

T = TypeVar("T")

CATALOG_FORMAT_VERSION = 1


class Catalog(ABC):
    """Base for the two catalog variants."""

    @abstractmethod
    def fold(
        self,
        on_versioned: Callable[["VersionedCatalog"], T],
        on_unversioned: Callable[["UnversionedCatalog"], T],
    ) -> T:
        """Dispatch to the callback that matches this variant."""

    def get_latest_schema(self) -> Optional[Union[UnversionedSchema, VersionedSchema]]:
        return self.fold(lambda c: c.latest, lambda c: c.schema)

    def get_schemas(self) -> List[Union[UnversionedSchema, VersionedSchema]]:
        """Every schema of the catalog, newest version first."""
        return self.fold(lambda c: list(c.entries.values()), lambda c: [c.schema])

    def version_count(self) -> int:
        return self.fold(lambda c: len(c.entries), lambda c: 0)

    def to_dict(self) -> dict[str, Any]:
        return self.fold(_versioned_to_dict, _unversioned_to_dict)


@dataclass
class UnversionedCatalog(Catalog):
    schema: UnversionedSchema

    def fold(self, on_versioned, on_unversioned):
        return on_unversioned(self)


@dataclass
class VersionedCatalog(Catalog):
    """Versioned schemas keyed by version, newest first."""

    entries: Dict[Version, VersionedSchema] = field(default_factory=dict)

    def __post_init__(self):
        self.entries = dict(
            sorted(self.entries.items(), key=lambda item: item[0].sort_key(), reverse=True)
        )

    @classmethod
    def from_schemas(cls, schemas: Iterable[VersionedSchema]) -> "VersionedCatalog":
        return cls(entries={schema.version: schema for schema in schemas})

    def fold(self, on_versioned, on_unversioned):
        return on_versioned(self)

    @property
    def latest(self) -> Optional[VersionedSchema]:
        return next(iter(self.entries.values()), None)

    @property
    def versions(self) -> List[Version]:
        return list(self.entries.keys())

    def get(self, version: Union[Version, str]) -> Optional[VersionedSchema]:
        return self.entries.get(Version.decode(version))


def fold(
    catalog: Catalog,
    on_versioned: Callable[[VersionedCatalog], T],
    on_unversioned: Callable[[UnversionedCatalog], T],
) -> T:
    return catalog.fold(on_versioned, on_unversioned)


# --------------------------------------------------------------------------- #
# Serialization
# --------------------------------------------------------------------------- #


def _history_to_dict(schema: Union[UnversionedSchema, VersionedSchema]) -> dict[str, Any]:
    return {
        "definition": to_sdl(schema.definition),
        "revisions": [revision.to_dict() for revision in schema.revisions],
        "categories": [category.to_dict() for category in schema.categories],
    }


def _unversioned_to_dict(catalog: UnversionedCatalog) -> dict[str, Any]:
    return {
        "format": CATALOG_FORMAT_VERSION,
        "kind": "unversioned",
        "generated_at": timezone.now().isoformat(),
        "schema": _history_to_dict(catalog.schema),
    }


def _versioned_to_dict(catalog: VersionedCatalog) -> dict[str, Any]:
    entries = []
    for version, schema in catalog.entries.items():
        entry = _history_to_dict(schema)
        entry["version"] = version.encode()
        entry["parent"] = schema.parent.version.encode() if schema.parent else None
        entry["branch_date"] = encode_date_only(schema.branch_date) if schema.branch_date else None
        entries.append(entry)
    return {
        "format": CATALOG_FORMAT_VERSION,
        "kind": "versioned",
        "generated_at": timezone.now().isoformat(),
        "entries": entries,
    }


def _history_kwargs(data: dict[str, Any], source: str) -> dict[str, Any]:
    sdl = data.get("definition") or ""
    return {
        "definition": parse_sdl(sdl, source=source) if sdl.strip() else empty_schema(),
        "revisions": [Revision.from_dict(item) for item in data.get("revisions") or []],
        "categories": [Category.from_dict(item) for item in data.get("categories") or []],
    }


def catalog_from_dict(data: dict[str, Any]) -> Catalog:
    """
    Rebuild a catalog from ``Catalog.to_dict`` output.

    Definitions are re-parsed from SDL. Revision back-references to changesets
    are not restored.
    """
    if not isinstance(data, dict):
        raise ValueError("catalog_from_dict expects a dict")

    kind = data.get("kind")
    if kind == "unversioned":
        return UnversionedCatalog(
            schema=UnversionedSchema(**_history_kwargs(data.get("schema") or {}, "catalog"))
        )
    if kind != "versioned":
        raise ValueError(f"Unknown catalog kind: {kind!r}")

    schemas: Dict[Version, VersionedSchema] = {}
    parents: Dict[Version, Optional[str]] = {}
    for entry in data.get("entries") or []:
        version = Version.decode(entry["version"])
        branch_date = entry.get("branch_date")
        schemas[version] = VersionedSchema(
            version=version,
            branch_date=decode_date_only(branch_date) if branch_date else None,
            **_history_kwargs(entry, f"catalog:{version}"),
        )
        parents[version] = entry.get("parent")

    for version, parent in parents.items():
        if parent is not None:
            schemas[version].parent = schemas.get(Version.decode(parent))
    return VersionedCatalog(entries=schemas)
