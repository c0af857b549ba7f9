"""
Schema histories.

An unversioned schema is one evolving definition. A versioned schema is one
named version of the API, optionally derived from a parent version.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional

from graphql import GraphQLSchema

from .changeset import Changeset, Revision
from .version import Version


@dataclass
class Category:
    """Named group of type names attached to a schema by the loader."""

    name: str
    types: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "types": list(self.types)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Category":
        return cls(name=data["name"], types=list(data.get("types") or []))


@dataclass
class _SchemaHistory:
    definition: GraphQLSchema
    # Newest first
    revisions: list[Revision] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    @property
    def latest_revision(self) -> Optional[Revision]:
        return self.revisions[0] if self.revisions else None

    @property
    def oldest_revision(self) -> Optional[Revision]:
        return self.revisions[-1] if self.revisions else None

    def get_changesets(self) -> List[Changeset]:
        """Changesets behind the revisions, oldest first."""
        return [
            revision.changeset
            for revision in reversed(self.revisions)
            if revision.changeset is not None
        ]

    def get_revision(self, day: date) -> Optional[Revision]:
        for revision in self.revisions:
            if revision.date == day:
                return revision
        return None

    def snapshot_at(self, day: date) -> Optional[GraphQLSchema]:
        """Definition as of ``day``: the newest revision dated on or before it."""
        for revision in self.revisions:
            if revision.date <= day and revision.changeset is not None:
                return revision.changeset.after
        return None

    def get_category(self, name: str) -> Optional[Category]:
        for category in self.categories:
            if category.name == name:
                return category
        return None


@dataclass
class UnversionedSchema(_SchemaHistory):
    """Single evolving schema."""


@dataclass
class VersionedSchema(_SchemaHistory):
    """One version of the API; ``parent`` is the version it derived from."""

    version: Optional[Version] = None
    parent: Optional["VersionedSchema"] = field(default=None, repr=False, compare=False)
    branch_date: Optional[date] = None

    def __post_init__(self):
        if self.version is None:
            raise ValueError("VersionedSchema requires a version")
