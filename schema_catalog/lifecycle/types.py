"""
Lifecycle records.

Event lists are most recent first. ``changeset`` and ``schema`` on an event
are read-only back-references to the data the lifecycle was derived from and
are nulled on serialization.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from graphql import GraphQLSchema

from ..core.changeset import Changeset
from ..core.date_only import decode_date_only, encode_date_only


class EventType(Enum):
    ADDED = "added"
    REMOVED = "removed"


@dataclass
class LifecycleEvent:
    type: EventType
    date: date
    changeset: Optional[Changeset] = field(default=None, repr=False, compare=False)
    schema: Optional[GraphQLSchema] = field(default=None, repr=False, compare=False)

    @property
    def is_added(self) -> bool:
        return self.type is EventType.ADDED

    @property
    def is_removed(self) -> bool:
        return self.type is EventType.REMOVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "date": encode_date_only(self.date),
            "changeset": None,
            "schema": None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LifecycleEvent":
        return cls(type=EventType(data["type"]), date=decode_date_only(data["date"]))


def _events_to_dict(events: List[LifecycleEvent]) -> List[Dict[str, Any]]:
    return [event.to_dict() for event in events]


def _events_from_dict(data: List[Dict[str, Any]]) -> List[LifecycleEvent]:
    return [LifecycleEvent.from_dict(item) for item in data or []]


def _oldest_added(events: List[LifecycleEvent]) -> Optional[date]:
    for event in reversed(events):
        if event.is_added:
            return event.date
    return None


def _latest_removed(events: List[LifecycleEvent]) -> Optional[date]:
    for event in events:
        if event.is_removed:
            return event.date
    return None


@dataclass
class FieldLifecycle:
    name: str
    events: List[LifecycleEvent] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return bool(self.events) and self.events[0].is_added

    @property
    def added_date(self) -> Optional[date]:
        return _oldest_added(self.events)

    @property
    def removed_date(self) -> Optional[date]:
        return _latest_removed(self.events)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "events": _events_to_dict(self.events)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldLifecycle":
        return cls(name=data["name"], events=_events_from_dict(data.get("events")))


@dataclass
class TypeLifecycle:
    name: str
    kind: str
    events: List[LifecycleEvent] = field(default_factory=list)
    # None for kinds without fields (scalars, enums, unions)
    fields: Optional[Dict[str, FieldLifecycle]] = None

    @property
    def is_available(self) -> bool:
        return bool(self.events) and self.events[0].is_added

    @property
    def added_date(self) -> Optional[date]:
        return _oldest_added(self.events)

    @property
    def removed_date(self) -> Optional[date]:
        return _latest_removed(self.events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "events": _events_to_dict(self.events),
            "fields": {
                name: field_lifecycle.to_dict()
                for name, field_lifecycle in self.fields.items()
            } if self.fields is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypeLifecycle":
        fields = data.get("fields")
        return cls(
            name=data["name"],
            kind=data.get("kind", "OBJECT"),
            events=_events_from_dict(data.get("events")),
            fields={
                name: FieldLifecycle.from_dict(item) for name, item in fields.items()
            } if fields is not None else None,
        )
