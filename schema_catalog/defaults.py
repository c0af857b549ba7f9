"""
Default configuration for the schema catalog.

Every setting the library consumes has its default here. Projects override
them through ``settings.SCHEMA_CATALOG``; nested dictionaries are deep merged.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    # None means "use the working directory".
    "project_root": None,
    "schema": {
        # None behaves like True unless no source is configured at all.
        "enabled": None,
        "use_sources": None,
        "sources": {},
        "augmentations": [],
        "categories": [],
    },
    "introspection": {
        "cache_enabled": True,
        "cache_dir": ".schema_catalog/cache/introspection",
        "timeout_seconds": 10,
    },
    "loading": {
        # None lets the executor pick a worker count.
        "max_workers": None,
    },
    # Dotted paths to extra InputSource classes, probed after the built-ins.
    "sources_registry": [],
}


def get_default_settings() -> dict[str, Any]:
    """Return a deep copy of the library defaults."""
    return merge_settings(LIBRARY_DEFAULTS)


def merge_settings(*settings_dicts: dict[str, Any]) -> dict[str, Any]:
    """
    Merge multiple settings dictionaries with deep merging for nested dicts.
    Later dictionaries override earlier ones.
    """
    result: dict[str, Any] = {}
    for settings_dict in settings_dicts:
        for key, value in (settings_dict or {}).items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = merge_settings(result[key], value)
            elif isinstance(value, dict):
                result[key] = merge_settings(value)
            elif isinstance(value, list):
                result[key] = list(value)
            else:
                result[key] = value
    return result


def validate_settings(settings: dict[str, Any]) -> list[str]:
    """
    Validate a settings dictionary and return a list of validation errors.
    """
    errors: list[str] = []

    schema = settings.get("schema", {})
    if not isinstance(schema, dict):
        errors.append("Setting 'schema' must be a dictionary")
        return errors

    use_sources = schema.get("use_sources")
    if use_sources is not None and not isinstance(use_sources, (list, tuple, str)):
        errors.append("Setting 'schema.use_sources' must be a list of source names")

    if not isinstance(schema.get("sources", {}), dict):
        errors.append("Setting 'schema.sources' must map source names to options")

    categories = schema.get("categories", [])
    if not isinstance(categories, (list, tuple, dict)):
        errors.append(
            "Setting 'schema.categories' must be a list or a mapping of versions"
        )

    timeout = settings.get("introspection", {}).get("timeout_seconds")
    if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
        errors.append("Setting 'introspection.timeout_seconds' must be positive")

    return errors
