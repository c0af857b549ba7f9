"""
Schema Introspector Package.

Flattens GraphQL schema objects into comparable records.
"""

from .analyzer import SchemaIntrospector
from .types import (
    ArgumentInfo,
    DirectiveInfo,
    EnumValueInfo,
    FieldInfo,
    SchemaIntrospection,
    TypeInfo,
)

__all__ = [
    "SchemaIntrospector",
    "SchemaIntrospection",
    "TypeInfo",
    "FieldInfo",
    "ArgumentInfo",
    "EnumValueInfo",
    "DirectiveInfo",
]
