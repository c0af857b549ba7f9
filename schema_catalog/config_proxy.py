"""
Configuration management for the schema catalog.

This module provides a settings proxy that resolves values from the Django
``SCHEMA_CATALOG`` setting first and the library defaults second.
"""

from typing import Any

from django.conf import settings
from django.core.signals import setting_changed

from .defaults import LIBRARY_DEFAULTS

SETTINGS_NAME = "SCHEMA_CATALOG"


class SettingsProxy:
    """
    Proxy for accessing schema catalog settings with hierarchical resolution.

    Settings are resolved in the following order:
    1. Runtime overrides (via set)
    2. Django settings (SCHEMA_CATALOG)
    3. Library defaults (LIBRARY_DEFAULTS)
    """

    def __init__(self):
        self._cache: dict[str, Any] = {}
        self._overrides: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution and caching.

        Args:
            key: Setting key to retrieve (dot notation for nested access)
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        if key in self._cache:
            return self._cache[key]

        for source in (self._overrides, self._get_django_settings(), LIBRARY_DEFAULTS):
            value = self._get_nested_value(source, key)
            if value is not None:
                self._cache[key] = value
                return value

        return default

    def _get_django_settings(self) -> dict[str, Any]:
        if not settings.configured:
            return {}
        value = getattr(settings, SETTINGS_NAME, None)
        return value if isinstance(value, dict) else {}

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Args:
            data: Dictionary to search in
            key: Key to retrieve

        Returns:
            The value or None if not found
        """
        if not isinstance(data, dict):
            return None

        current: Any = data
        for k in key.split("."):
            if not isinstance(current, dict) or k not in current:
                return None
            current = current[k]

        return current

    def set(self, key: str, value: Any) -> None:
        """
        Set a runtime override (not persisted to Django settings).

        Args:
            key: Setting key to set
            value: Value to set
        """
        keys = key.split(".")
        current = self._overrides
        for k in keys[:-1]:
            current = current.setdefault(k, {})
        current[keys[-1]] = value
        self.clear_cache()

    def reset(self) -> None:
        """Drop runtime overrides and cached values."""
        self._overrides.clear()
        self.clear_cache()

    def clear_cache(self) -> None:
        """
        Clear the settings cache.
        """
        self._cache.clear()


# Global settings proxy instance
settings_proxy = SettingsProxy()


def get_settings_proxy() -> SettingsProxy:
    """
    Get the shared settings proxy.

    Returns:
        SettingsProxy instance
    """
    return settings_proxy


def get_setting(key: str, default: Any = None) -> Any:
    """
    Get a setting value using the hierarchical settings system.

    Args:
        key: Setting key to retrieve
        default: Default value if setting is not found

    Returns:
        The setting value from the highest priority source
    """
    return settings_proxy.get(key, default)


def _reload_on_setting_changed(*, setting: str, **kwargs: Any) -> None:
    if setting == SETTINGS_NAME:
        settings_proxy.clear_cache()


setting_changed.connect(_reload_on_setting_changed)
