"""
Custom exceptions for the schema catalog.

Configuration and structural errors propagate to the caller. Cache problems
are handled where they occur and never reach this hierarchy.
"""

from typing import Any, List, Optional


class CatalogError(Exception):
    """Base exception for schema catalog errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class SchemaConfigurationError(CatalogError):
    """Raised when the schema configuration cannot produce a catalog."""


class SchemaParseError(CatalogError):
    """Raised when a schema snapshot cannot be parsed or built."""

    PARSE_TYPES = ("schema", "document", "unknown")

    def __init__(
        self,
        message: str,
        parse_type: str = "unknown",
        source: Optional[str] = None,
        excerpt: Optional[str] = None,
        locations: Optional[List[Any]] = None,
    ):
        if parse_type not in self.PARSE_TYPES:
            parse_type = "unknown"
        self.parse_type = parse_type
        self.source = source
        self.excerpt = excerpt
        self.locations = locations or []
        super().__init__(message)

    def __str__(self) -> str:
        parts = [f"Failed to parse {self.parse_type} from {self.source or 'unknown source'}: {self.message}"]
        if self.excerpt:
            parts.append(self.excerpt)
        return "\n".join(parts)


class InputSourceError(CatalogError):
    """Raised when an input source fails while reading its data."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
        hint: Optional[str] = None,
    ):
        self.source_name = source_name
        self.cause = cause
        super().__init__(message, hint)


class IntrospectionFetchError(InputSourceError):
    """Raised when a remote introspection request fails."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message, source_name="introspection", cause=cause)


class SchemaDiffError(CatalogError):
    """Raised when the diff engine receives something that is not a schema."""


class LifecycleConsistencyError(CatalogError):
    """Raised when a changeset references a type missing from its own snapshot."""

    def __init__(self, message: str, type_name: Optional[str] = None):
        self.type_name = type_name
        super().__init__(message)
