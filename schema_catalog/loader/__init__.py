"""
Source selection and post-load processing.
"""

from .augmentations import apply_augmentations, mutate_description, normalize_augmentation
from .categories import process_categories, process_categories_for_version
from .diagnostics import Diagnostic
from .loader import LoadedCatalog, SchemaConfig, SchemaLoader, load_catalog

__all__ = [
    "Diagnostic",
    "LoadedCatalog",
    "SchemaConfig",
    "SchemaLoader",
    "apply_augmentations",
    "load_catalog",
    "mutate_description",
    "normalize_augmentation",
    "process_categories",
    "process_categories_for_version",
]
