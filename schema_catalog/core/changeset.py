"""
Changesets and revisions.

A Changeset is the diff between two consecutive snapshots. A Revision is the
dated record of that diff kept in a schema's history, newest first.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from graphql import GraphQLSchema

from .change import Change
from .date_only import decode_date_only, encode_date_only
from .definition import empty_schema

logger = logging.getLogger(__name__)


@dataclass
class Changeset:
    """Diff bundle between two snapshots; ``before`` may be the empty schema."""

    before: GraphQLSchema
    after: GraphQLSchema
    changes: list[Change]
    date: date

    @classmethod
    def compute(cls, before: GraphQLSchema, after: GraphQLSchema, day: date) -> "Changeset":
        from ..introspection.comparison import diff

        return cls(before=before, after=after, changes=diff(before, after), date=day)


@dataclass
class Revision:
    """
    One dated node of a schema's history.

    ``changeset`` is a read-only back-reference used for provenance. It is
    dropped on serialization.
    """

    date: date
    changes: list[Change] = field(default_factory=list)
    changeset: Optional[Changeset] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_changeset(cls, changeset: Changeset) -> "Revision":
        return cls(date=changeset.date, changes=list(changeset.changes), changeset=changeset)

    @property
    def snapshot(self) -> Optional[GraphQLSchema]:
        return self.changeset.after if self.changeset is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": encode_date_only(self.date),
            "changes": [change.to_dict() for change in self.changes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Revision":
        if not isinstance(data, dict):
            raise ValueError("Revision.from_dict expects a dict")
        return cls(
            date=decode_date_only(data["date"]),
            changes=[Change.from_dict(item) for item in data.get("changes") or []],
        )


def compute_changesets(
    snapshots: Sequence[Tuple[date, GraphQLSchema]],
    initial: Optional[GraphQLSchema] = None,
) -> List[Changeset]:
    """
    Diff consecutive snapshots, oldest first.

    Each step's ``before`` is the previous step's ``after``; the first step
    starts from ``initial`` or the empty schema.
    """
    changesets: List[Changeset] = []
    before = initial if initial is not None else empty_schema()
    for day, after in snapshots:
        changesets.append(Changeset.compute(before, after, day))
        before = after
    return changesets


def build_revisions(changesets: Iterable[Changeset]) -> List[Revision]:
    """Turn ascending changesets into revisions stored newest first."""
    revisions = [Revision.from_changeset(changeset) for changeset in changesets]
    revisions.reverse()
    return revisions
