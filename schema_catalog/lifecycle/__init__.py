"""
Lifecycle replay: added/removed timelines for types and fields.
"""

from .lifecycle import SchemaLifecycle, build_lifecycle
from .types import EventType, FieldLifecycle, LifecycleEvent, TypeLifecycle

__all__ = [
    "EventType",
    "FieldLifecycle",
    "LifecycleEvent",
    "SchemaLifecycle",
    "TypeLifecycle",
    "build_lifecycle",
]
