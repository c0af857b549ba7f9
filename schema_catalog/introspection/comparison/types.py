"""
Type definitions for schema comparison.
"""

from dataclasses import dataclass, field
from typing import Any

from ...core.change import Change, ChangeKind, CriticalityLevel


@dataclass
class SchemaComparison:
    """Result of comparing two schema snapshots."""
    old_schema_name: str = "before"
    new_schema_name: str = "after"
    type_changes: list[Change] = field(default_factory=list)
    field_changes: list[Change] = field(default_factory=list)
    argument_changes: list[Change] = field(default_factory=list)
    directive_changes: list[Change] = field(default_factory=list)
    total_changes: int = 0
    breaking_changes: int = 0
    dangerous_changes: int = 0
    non_breaking_changes: int = 0
    migration_required: bool = False

    def get_all_changes(self) -> list[Change]:
        return self.type_changes + self.field_changes + self.argument_changes + self.directive_changes

    def get_breaking_changes(self) -> list[Change]:
        return [c for c in self.get_all_changes() if c.criticality.level is CriticalityLevel.BREAKING]

    def get_dangerous_changes(self) -> list[Change]:
        return [c for c in self.get_all_changes() if c.criticality.level is CriticalityLevel.DANGEROUS]

    def get_changes_by_kind(self, kind: ChangeKind) -> list[Change]:
        return [c for c in self.get_all_changes() if c.type is kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            'old_schema_name': self.old_schema_name, 'new_schema_name': self.new_schema_name,
            'summary': {'total_changes': self.total_changes, 'breaking_changes': self.breaking_changes, 'dangerous_changes': self.dangerous_changes, 'non_breaking_changes': self.non_breaking_changes, 'migration_required': self.migration_required},
            'changes': {'type_changes': [c.to_dict() for c in self.type_changes], 'field_changes': [c.to_dict() for c in self.field_changes], 'argument_changes': [c.to_dict() for c in self.argument_changes], 'directive_changes': [c.to_dict() for c in self.directive_changes]}
        }
