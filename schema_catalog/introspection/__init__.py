"""
Schema introspection module.

Flattening of schema objects, snapshot comparison and remote introspection.
"""

from .comparison import SchemaComparator, SchemaComparison, diff
from .schema_introspector import SchemaIntrospection, SchemaIntrospector

__all__ = [
    'SchemaIntrospector',
    'SchemaIntrospection',
    'SchemaComparator',
    'SchemaComparison',
    'diff',
]
