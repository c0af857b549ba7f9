"""
Change records produced by the schema diff engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ChangeKind(Enum):
    """Kinds of schema changes."""

    TYPE_ADDED = "TYPE_ADDED"
    TYPE_REMOVED = "TYPE_REMOVED"
    TYPE_KIND_CHANGED = "TYPE_KIND_CHANGED"
    TYPE_DESCRIPTION_ADDED = "TYPE_DESCRIPTION_ADDED"
    TYPE_DESCRIPTION_REMOVED = "TYPE_DESCRIPTION_REMOVED"
    TYPE_DESCRIPTION_CHANGED = "TYPE_DESCRIPTION_CHANGED"

    FIELD_ADDED = "FIELD_ADDED"
    FIELD_REMOVED = "FIELD_REMOVED"
    FIELD_TYPE_CHANGED = "FIELD_TYPE_CHANGED"
    FIELD_DESCRIPTION_CHANGED = "FIELD_DESCRIPTION_CHANGED"
    FIELD_DEPRECATION_ADDED = "FIELD_DEPRECATION_ADDED"
    FIELD_DEPRECATION_REMOVED = "FIELD_DEPRECATION_REMOVED"
    FIELD_DEPRECATION_REASON_CHANGED = "FIELD_DEPRECATION_REASON_CHANGED"

    FIELD_ARGUMENT_ADDED = "FIELD_ARGUMENT_ADDED"
    FIELD_ARGUMENT_REMOVED = "FIELD_ARGUMENT_REMOVED"
    FIELD_ARGUMENT_TYPE_CHANGED = "FIELD_ARGUMENT_TYPE_CHANGED"
    FIELD_ARGUMENT_DEFAULT_CHANGED = "FIELD_ARGUMENT_DEFAULT_CHANGED"

    INPUT_FIELD_ADDED = "INPUT_FIELD_ADDED"
    INPUT_FIELD_REMOVED = "INPUT_FIELD_REMOVED"
    INPUT_FIELD_TYPE_CHANGED = "INPUT_FIELD_TYPE_CHANGED"
    INPUT_FIELD_DEFAULT_VALUE_CHANGED = "INPUT_FIELD_DEFAULT_VALUE_CHANGED"

    ENUM_VALUE_ADDED = "ENUM_VALUE_ADDED"
    ENUM_VALUE_REMOVED = "ENUM_VALUE_REMOVED"
    ENUM_VALUE_DEPRECATION_ADDED = "ENUM_VALUE_DEPRECATION_ADDED"
    ENUM_VALUE_DEPRECATION_REMOVED = "ENUM_VALUE_DEPRECATION_REMOVED"

    UNION_MEMBER_ADDED = "UNION_MEMBER_ADDED"
    UNION_MEMBER_REMOVED = "UNION_MEMBER_REMOVED"

    OBJECT_TYPE_INTERFACE_ADDED = "OBJECT_TYPE_INTERFACE_ADDED"
    OBJECT_TYPE_INTERFACE_REMOVED = "OBJECT_TYPE_INTERFACE_REMOVED"

    DIRECTIVE_ADDED = "DIRECTIVE_ADDED"
    DIRECTIVE_REMOVED = "DIRECTIVE_REMOVED"
    DIRECTIVE_LOCATION_ADDED = "DIRECTIVE_LOCATION_ADDED"
    DIRECTIVE_LOCATION_REMOVED = "DIRECTIVE_LOCATION_REMOVED"

    SCHEMA_QUERY_TYPE_CHANGED = "SCHEMA_QUERY_TYPE_CHANGED"
    SCHEMA_MUTATION_TYPE_CHANGED = "SCHEMA_MUTATION_TYPE_CHANGED"
    SCHEMA_SUBSCRIPTION_TYPE_CHANGED = "SCHEMA_SUBSCRIPTION_TYPE_CHANGED"


class CriticalityLevel(Enum):
    """Severity of a change for existing clients."""

    BREAKING = "BREAKING"
    DANGEROUS = "DANGEROUS"
    NON_BREAKING = "NON_BREAKING"


@dataclass(frozen=True)
class Criticality:
    level: CriticalityLevel
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"level": self.level.value}
        if self.reason:
            data["reason"] = self.reason
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Criticality":
        return cls(level=CriticalityLevel(data["level"]), reason=data.get("reason"))


NON_BREAKING = Criticality(CriticalityLevel.NON_BREAKING)


@dataclass
class Change:
    """
    One entry of a diff.

    ``path`` addresses the after schema for additions and the before schema
    for removals, as a GraphQL coordinate (``Type``, ``Type.field``,
    ``Type.field(arg)``).
    """

    type: ChangeKind
    path: str
    criticality: Criticality = NON_BREAKING
    message: str = ""
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_breaking(self) -> bool:
        return self.criticality.level is CriticalityLevel.BREAKING

    @property
    def is_dangerous(self) -> bool:
        return self.criticality.level is CriticalityLevel.DANGEROUS

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "path": self.path,
            "criticality": self.criticality.to_dict(),
            "message": self.message,
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Change":
        if not isinstance(data, dict):
            raise ValueError("Change.from_dict expects a dict")
        return cls(
            type=ChangeKind(data["type"]),
            path=data.get("path", ""),
            criticality=Criticality.from_dict(data.get("criticality") or {"level": "NON_BREAKING"}),
            message=data.get("message", ""),
            meta=dict(data.get("meta") or {}),
        )
