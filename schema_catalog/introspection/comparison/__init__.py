"""
Schema comparison package.
"""

from .comparator import (
    SchemaComparator,
    diff,
    is_safe_input_type_change,
    is_safe_output_type_change,
)
from .types import SchemaComparison

__all__ = [
    "SchemaComparator",
    "SchemaComparison",
    "diff",
    "is_safe_input_type_change",
    "is_safe_output_type_change",
]
