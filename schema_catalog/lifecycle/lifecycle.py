"""
Schema lifecycle replay.

Derives per-type and per-field added/removed timelines from a schema's
changesets. A lifecycle is rebuilt wholesale from the full history; it is
never patched incrementally.
"""

import json
import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from django.core.serializers.json import DjangoJSONEncoder
from graphql import (
    GraphQLNamedType,
    is_input_object_type,
    is_interface_type,
    is_object_type,
)

from ..core.catalog import Catalog, VersionedCatalog
from ..core.change import Change, ChangeKind
from ..core.changeset import Changeset
from ..core.date_only import encode_date_only, parse_date_only
from ..core.definition import is_user_type, iter_named_types
from ..core.schema import UnversionedSchema, VersionedSchema
from ..core.version import Version
from ..exceptions import LifecycleConsistencyError
from ..introspection.schema_introspector import SchemaIntrospector
from .types import EventType, FieldLifecycle, LifecycleEvent, TypeLifecycle

logger = logging.getLogger(__name__)

DateLike = Union[date, str]


def _has_fields(named_type: GraphQLNamedType) -> bool:
    return (
        is_object_type(named_type)
        or is_interface_type(named_type)
        or is_input_object_type(named_type)
    )


def _split_path(change: Change) -> tuple:
    type_name = change.meta.get("type_name")
    field_name = change.meta.get("field_name")
    if type_name and field_name:
        return type_name, field_name
    type_name, _, field_name = change.path.partition(".")
    return type_name, field_name


class SchemaLifecycle:
    """
    Index of type and field timelines.

    Events are stored most recent first. Types and fields present in the
    oldest snapshot carry an implicit Added event without a changeset.
    """

    def __init__(self, data: Optional[Dict[str, TypeLifecycle]] = None, version: Optional[str] = None):
        self.data: Dict[str, TypeLifecycle] = data if data is not None else {}
        self.version = version
        self._handlers: Dict[ChangeKind, Callable[[Change, Changeset], None]] = {
            ChangeKind.TYPE_ADDED: self._on_type_added,
            ChangeKind.TYPE_REMOVED: self._on_type_removed,
            ChangeKind.TYPE_KIND_CHANGED: self._on_type_kind_changed,
            ChangeKind.FIELD_ADDED: self._on_field_added,
            ChangeKind.INPUT_FIELD_ADDED: self._on_field_added,
            ChangeKind.FIELD_REMOVED: self._on_field_removed,
            ChangeKind.INPUT_FIELD_REMOVED: self._on_field_removed,
        }

    def __repr__(self) -> str:
        return f"SchemaLifecycle(version={self.version!r}, types={len(self.data)})"

    # Construction

    @classmethod
    def create(cls, changesets: Iterable[Changeset], version: Optional[str] = None) -> "SchemaLifecycle":
        """
        Build a lifecycle from changesets ordered oldest first.

        Args:
            changesets: Ascending changesets; the first one seeds the index
            version: Optional version label kept for display

        Raises:
            LifecycleConsistencyError: A TYPE_ADDED change names a type that
                is missing from the changeset's ``after`` schema.
        """
        lifecycle = cls(version=version)
        changesets = list(changesets)
        if not changesets:
            return lifecycle

        lifecycle._seed(changesets[0])
        for changeset in changesets[1:]:
            lifecycle.apply(changeset)

        logger.debug(
            "Built lifecycle for %s: %d types from %d changesets",
            version or "unversioned schema",
            len(lifecycle.data),
            len(changesets),
        )
        return lifecycle

    @classmethod
    def from_schema(cls, schema: Union[UnversionedSchema, VersionedSchema]) -> "SchemaLifecycle":
        version = getattr(schema, "version", None)
        return cls.create(
            schema.get_changesets(),
            version=version.encode() if version is not None else None,
        )

    @classmethod
    def from_catalog(
        cls,
        catalog: Catalog,
        version: Optional[Union[Version, str]] = None,
    ) -> "SchemaLifecycle":
        """
        Build the lifecycle of a catalog's schema.

        For a versioned catalog the requested version is used, or the latest
        one when ``version`` is omitted.
        """

        def on_versioned(versioned: VersionedCatalog) -> Optional[VersionedSchema]:
            if version is None:
                return versioned.latest
            return versioned.get(version)

        schema = catalog.fold(on_versioned, lambda unversioned: unversioned.schema)
        if schema is None:
            if version is not None:
                raise LookupError(f"Version '{version}' not found in catalog")
            return cls()
        return cls.from_schema(schema)

    def _seed(self, changeset: Changeset) -> None:
        for named_type in iter_named_types(changeset.after):
            self.data[named_type.name] = self._new_type_lifecycle(
                named_type,
                LifecycleEvent(EventType.ADDED, changeset.date, None, changeset.after),
            )

    def apply(self, changeset: Changeset) -> None:
        """Fold one changeset into the index."""
        for change in changeset.changes:
            handler = self._handlers.get(change.type)
            if handler is not None:
                handler(change, changeset)

    # Handlers

    def _new_type_lifecycle(self, named_type: GraphQLNamedType, event: LifecycleEvent) -> TypeLifecycle:
        fields = None
        if _has_fields(named_type):
            fields = {
                name: FieldLifecycle(name=name, events=[self._copy_event(event)])
                for name in named_type.fields
            }
        return TypeLifecycle(
            name=named_type.name,
            kind=SchemaIntrospector.get_type_kind(named_type),
            events=[event],
            fields=fields,
        )

    @staticmethod
    def _copy_event(event: LifecycleEvent) -> LifecycleEvent:
        return LifecycleEvent(event.type, event.date, event.changeset, event.schema)

    @staticmethod
    def _event(kind: EventType, changeset: Changeset) -> LifecycleEvent:
        return LifecycleEvent(kind, changeset.date, changeset, changeset.after)

    def _on_type_added(self, change: Change, changeset: Changeset) -> None:
        name = change.path
        named_type = changeset.after.get_type(name)
        if named_type is None or not is_user_type(named_type):
            raise LifecycleConsistencyError(
                f"Type '{name}' was reported as added on "
                f"{encode_date_only(changeset.date)} but is missing from the schema",
                type_name=name,
            )

        event = self._event(EventType.ADDED, changeset)
        existing = self.data.get(name)
        if existing is None:
            self.data[name] = self._new_type_lifecycle(named_type, event)
            return

        # Re-addition of a previously removed type
        existing.events.insert(0, event)
        existing.kind = SchemaIntrospector.get_type_kind(named_type)
        if not _has_fields(named_type):
            return
        if existing.fields is None:
            existing.fields = {}
        for field_name in named_type.fields:
            field_lifecycle = existing.fields.get(field_name)
            if field_lifecycle is None:
                existing.fields[field_name] = FieldLifecycle(field_name, [self._copy_event(event)])
            elif not field_lifecycle.is_available:
                field_lifecycle.events.insert(0, self._copy_event(event))

    def _on_type_removed(self, change: Change, changeset: Changeset) -> None:
        existing = self.data.get(change.path)
        if existing is None:
            logger.debug(f"Ignoring removal of untracked type '{change.path}'")
            return

        event = self._event(EventType.REMOVED, changeset)
        existing.events.insert(0, event)
        for field_lifecycle in (existing.fields or {}).values():
            if field_lifecycle.is_available:
                field_lifecycle.events.insert(0, self._copy_event(event))

    def _on_type_kind_changed(self, change: Change, changeset: Changeset) -> None:
        existing = self.data.get(change.path)
        named_type = changeset.after.get_type(change.path)
        if existing is None or named_type is None:
            return
        existing.kind = SchemaIntrospector.get_type_kind(named_type)
        if _has_fields(named_type) and existing.fields is None:
            existing.fields = {}

    def _on_field_added(self, change: Change, changeset: Changeset) -> None:
        type_name, field_name = _split_path(change)
        event = self._event(EventType.ADDED, changeset)

        type_lifecycle = self.data.get(type_name)
        if type_lifecycle is None:
            named_type = changeset.after.get_type(type_name)
            type_lifecycle = TypeLifecycle(
                name=type_name,
                kind=SchemaIntrospector.get_type_kind(named_type) if named_type else "OBJECT",
                events=[self._copy_event(event)],
                fields={},
            )
            self.data[type_name] = type_lifecycle
        if type_lifecycle.fields is None:
            type_lifecycle.fields = {}

        field_lifecycle = type_lifecycle.fields.get(field_name)
        if field_lifecycle is None:
            type_lifecycle.fields[field_name] = FieldLifecycle(field_name, [event])
        else:
            field_lifecycle.events.insert(0, event)

    def _on_field_removed(self, change: Change, changeset: Changeset) -> None:
        type_name, field_name = _split_path(change)
        type_lifecycle = self.data.get(type_name)
        field_lifecycle = (type_lifecycle.fields or {}).get(field_name) if type_lifecycle else None
        if field_lifecycle is None:
            logger.debug(f"Ignoring removal of untracked field '{type_name}.{field_name}'")
            return
        field_lifecycle.events.insert(0, self._event(EventType.REMOVED, changeset))

    # Queries

    def get_type_lifecycle(self, type_name: str) -> Optional[TypeLifecycle]:
        return self.data.get(type_name)

    def get_field_lifecycle(self, type_name: str, field_name: str) -> Optional[FieldLifecycle]:
        type_lifecycle = self.data.get(type_name)
        if type_lifecycle is None or type_lifecycle.fields is None:
            return None
        return type_lifecycle.fields.get(field_name)

    def is_type_currently_available(self, type_name: str) -> bool:
        type_lifecycle = self.get_type_lifecycle(type_name)
        return type_lifecycle is not None and type_lifecycle.is_available

    def is_field_currently_available(self, type_name: str, field_name: str) -> bool:
        field_lifecycle = self.get_field_lifecycle(type_name, field_name)
        return field_lifecycle is not None and field_lifecycle.is_available

    def get_type_added_date(self, type_name: str) -> Optional[date]:
        """Date of the oldest Added event of a type."""
        type_lifecycle = self.get_type_lifecycle(type_name)
        return type_lifecycle.added_date if type_lifecycle else None

    def get_type_removed_date(self, type_name: str) -> Optional[date]:
        """Date of the most recent Removed event of a type."""
        type_lifecycle = self.get_type_lifecycle(type_name)
        return type_lifecycle.removed_date if type_lifecycle else None

    def get_field_added_date(self, type_name: str, field_name: str) -> Optional[date]:
        field_lifecycle = self.get_field_lifecycle(type_name, field_name)
        return field_lifecycle.added_date if field_lifecycle else None

    def get_field_removed_date(self, type_name: str, field_name: str) -> Optional[date]:
        field_lifecycle = self.get_field_lifecycle(type_name, field_name)
        return field_lifecycle.removed_date if field_lifecycle else None

    def get_types_added_on(self, day: DateLike) -> List[str]:
        return self._types_with_event_on(day, EventType.ADDED)

    def get_types_removed_on(self, day: DateLike) -> List[str]:
        return self._types_with_event_on(day, EventType.REMOVED)

    def _types_with_event_on(self, day: DateLike, kind: EventType) -> List[str]:
        target = parse_date_only(day)
        if target is None:
            raise ValueError(f"Invalid date: {day!r}")
        return [
            name
            for name, type_lifecycle in self.data.items()
            if any(event.type is kind and event.date == target for event in type_lifecycle.events)
        ]

    def describe_type(self, type_name: str) -> Optional[str]:
        return self._describe(self.get_type_lifecycle(type_name))

    def describe_field(self, type_name: str, field_name: str) -> Optional[str]:
        return self._describe(self.get_field_lifecycle(type_name, field_name))

    @staticmethod
    def _describe(record: Optional[Union[TypeLifecycle, FieldLifecycle]]) -> Optional[str]:
        if record is None or not record.events:
            return None
        if record.is_available:
            return f"Available since {encode_date_only(record.added_date)}"
        return f"Removed on {encode_date_only(record.removed_date)}"

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "data": {name: type_lifecycle.to_dict() for name, type_lifecycle in self.data.items()},
        }

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), cls=DjangoJSONEncoder, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaLifecycle":
        if not isinstance(data, dict):
            raise ValueError("SchemaLifecycle.from_dict expects a dict")
        return cls(
            data={
                name: TypeLifecycle.from_dict(item)
                for name, item in (data.get("data") or {}).items()
            },
            version=data.get("version"),
        )

    @classmethod
    def from_json(cls, text: str) -> "SchemaLifecycle":
        return cls.from_dict(json.loads(text))


def build_lifecycle(schema: Union[UnversionedSchema, VersionedSchema]) -> SchemaLifecycle:
    """Shortcut for :meth:`SchemaLifecycle.from_schema`."""
    return SchemaLifecycle.from_schema(schema)
