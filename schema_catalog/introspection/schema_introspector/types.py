"""
Data classes for schema introspection results.

Type references are kept as printed strings (``[String!]!``) so snapshots can
be compared without holding on to the schema objects.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ArgumentInfo:
    """Information about a field argument or an input object field."""
    name: str
    type: str
    description: Optional[str] = None
    default_value: Optional[str] = None
    has_default: bool = False

    @property
    def is_required(self) -> bool:
        return self.type.endswith("!") and not self.has_default


@dataclass
class FieldInfo:
    """Information about a GraphQL field."""
    name: str
    type: str
    description: Optional[str] = None
    args: list[ArgumentInfo] = field(default_factory=list)
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None


@dataclass
class EnumValueInfo:
    """Information about an enum value."""
    name: str
    description: Optional[str] = None
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None


@dataclass
class TypeInfo:
    """Information about a GraphQL type."""
    name: str
    kind: str  # 'OBJECT', 'INTERFACE', 'UNION', 'ENUM', 'SCALAR', 'INPUT_OBJECT'
    description: Optional[str] = None
    fields: list[FieldInfo] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    possible_types: list[str] = field(default_factory=list)  # For unions
    enum_values: list[EnumValueInfo] = field(default_factory=list)
    input_fields: list[ArgumentInfo] = field(default_factory=list)


@dataclass
class DirectiveInfo:
    """Information about a GraphQL directive."""
    name: str
    locations: list[str] = field(default_factory=list)


@dataclass
class SchemaIntrospection:
    """Flattened view of one schema snapshot."""
    schema_name: str = "schema"
    query_type: Optional[str] = None
    mutation_type: Optional[str] = None
    subscription_type: Optional[str] = None

    # Insertion order follows the schema's type map
    types: dict[str, TypeInfo] = field(default_factory=dict)
    directives: dict[str, DirectiveInfo] = field(default_factory=dict)

    def root_type(self, operation: str) -> Optional[str]:
        return getattr(self, f"{operation}_type")
