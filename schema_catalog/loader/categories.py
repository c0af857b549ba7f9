"""
Category tagging.

A category groups types by exact name or pattern::

    {"name": "Errors", "type_names": ["CustomException", re.compile(r"Error$")], "mode": "include"}

Strings written as ``/pattern/`` are compiled as regular expressions. In
``exclude`` mode a category holds every type that matches none of the
patterns. Categories can also be scoped per version by passing a mapping of
version strings to category lists.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from graphql import GraphQLSchema

from ..core.definition import get_type_names
from ..core.schema import Category
from ..core.version import Version
from .diagnostics import Diagnostic

logger = logging.getLogger(__name__)

MODES = ("include", "exclude")

Matcher = Union[str, re.Pattern]


def _compile_matchers(
    type_names: Sequence[Any], category_name: str
) -> Tuple[List[Matcher], List[Diagnostic]]:
    matchers: List[Matcher] = []
    diagnostics: List[Diagnostic] = []
    for entry in type_names:
        if isinstance(entry, re.Pattern):
            matchers.append(entry)
        elif isinstance(entry, str) and len(entry) > 2 and entry.startswith("/") and entry.endswith("/"):
            try:
                matchers.append(re.compile(entry[1:-1]))
            except re.error as exc:
                diagnostics.append(Diagnostic(
                    code="category_invalid_pattern",
                    message=f"Invalid pattern {entry} in category '{category_name}': {exc}",
                    context={"category": category_name, "pattern": entry},
                ))
        elif isinstance(entry, str):
            matchers.append(entry)
        else:
            diagnostics.append(Diagnostic(
                code="category_invalid_pattern",
                message=f"Unsupported type matcher {entry!r} in category '{category_name}'",
                context={"category": category_name},
            ))
    return matchers, diagnostics


def _matches(type_name: str, matchers: Sequence[Matcher]) -> bool:
    for matcher in matchers:
        if isinstance(matcher, str):
            if matcher == type_name:
                return True
        elif matcher.search(type_name):
            return True
    return False


def process_categories(
    schema: GraphQLSchema, config: Optional[Sequence[Dict[str, Any]]]
) -> Tuple[List[Category], List[Diagnostic]]:
    """
    Tag the schema's user types.

    Built-in scalars and introspection types are never categorized and a
    category that matches nothing is left out.
    """
    categories: List[Category] = []
    diagnostics: List[Diagnostic] = []
    if not config:
        return categories, diagnostics

    type_names = get_type_names(schema)
    for entry in config:
        name = entry.get("name") if isinstance(entry, dict) else None
        if not name:
            diagnostics.append(Diagnostic(
                code="category_invalid",
                message="Category configuration needs a 'name'",
                context={"entry": repr(entry)},
            ))
            continue
        mode = entry.get("mode") or "include"
        if mode not in MODES:
            diagnostics.append(Diagnostic(
                code="category_invalid_mode",
                message=f"Unknown mode '{mode}' for category '{name}'",
                context={"category": name, "mode": mode},
            ))
            continue

        raw_matchers = entry.get("type_names", entry.get("typeNames", []))
        if isinstance(raw_matchers, (str, re.Pattern)):
            raw_matchers = [raw_matchers]
        matchers, matcher_diagnostics = _compile_matchers(raw_matchers or [], name)
        diagnostics.extend(matcher_diagnostics)

        include = mode == "include"
        types = [
            type_name for type_name in type_names
            if _matches(type_name, matchers) is include
        ]
        if types:
            categories.append(Category(name=name, types=types))
        else:
            logger.debug("Category '%s' matched no types", name)
    return categories, diagnostics


def process_categories_for_version(
    schema: GraphQLSchema,
    config: Union[Sequence[Dict[str, Any]], Dict[str, Sequence[Dict[str, Any]]], None],
    version: Optional[Version] = None,
) -> Tuple[List[Category], List[Diagnostic]]:
    """
    Resolve a possibly version-scoped config, then tag the schema.

    A version-scoped config without an entry for ``version`` yields no
    categories and an ``unmatched_version_scope`` diagnostic.
    """
    if not isinstance(config, dict):
        return process_categories(schema, config)

    for version_name, scoped in config.items():
        if version is not None and Version.decode(str(version_name)) == version:
            return process_categories(schema, scoped)

    label = version.encode() if version is not None else "unversioned"
    return [], [Diagnostic(
        code="unmatched_version_scope",
        message=f"No category configuration covers schema version '{label}'",
        level="info",
        context={"version": version.encode() if version is not None else None},
    )]
