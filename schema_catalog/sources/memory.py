"""
In-memory schema source.
"""

import logging
from datetime import date, datetime
from typing import Any, List, Optional, Tuple

from graphql import GraphQLSchema

from ..core.catalog import Catalog, UnversionedCatalog
from ..core.date_only import parse_date_only, today
from ..core.definition import coerce_schema
from ..exceptions import InputSourceError
from .base import InputSource, InputSourceContext, SourceOptions, build_unversioned_catalog

logger = logging.getLogger(__name__)


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    parsed = parse_date_only(value)
    if parsed is None:
        raise InputSourceError(
            f"Invalid revision date {value!r}, expected a date or YYYY-MM-DD",
            source_name=MemorySource.name,
        )
    return parsed


def normalize_revisions(revisions: Any) -> List[Tuple[date, Any]]:
    """
    Normalize the accepted ``revisions`` shapes into (date, value) pairs.

    Undated values are dated today.
    """
    items = revisions if isinstance(revisions, (list, tuple)) else [revisions]
    normalized = []
    for item in items:
        if isinstance(item, dict):
            if "value" not in item:
                raise InputSourceError(
                    "Memory revisions given as mappings need a 'value' key",
                    source_name=MemorySource.name,
                )
            day = _coerce_date(item["date"]) if item.get("date") is not None else today()
            normalized.append((day, item["value"]))
        else:
            normalized.append((today(), item))
    return normalized


class MemorySource(InputSource):
    """
    Builds a catalog from schemas given directly in configuration.

    Options:
        revisions: An SDL string, a schema object (GraphQLSchema or graphene
            Schema), a list of either, a list of ``{"date", "value"}``
            mappings, or a ready-made unversioned catalog
    """

    name = "memory"

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        return options.get("revisions") is not None

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        revisions = options.get("revisions")
        if revisions is None:
            return None
        if isinstance(revisions, UnversionedCatalog):
            return revisions
        if isinstance(revisions, Catalog):
            raise InputSourceError(
                "The memory source only accepts unversioned catalogs",
                source_name=self.name,
            )

        snapshots: List[Tuple[date, GraphQLSchema]] = [
            (day, coerce_schema(value, source=self.name))
            for day, value in normalize_revisions(revisions)
        ]
        if not snapshots:
            return None
        logger.debug("Building catalog from %s in-memory revisions", len(snapshots))
        return build_unversioned_catalog(snapshots)
