"""
Introspection result stored in a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..core.catalog import Catalog
from ..core.definition import from_introspection
from ..exceptions import InputSourceError, SchemaParseError
from ..utils import fs
from .base import InputSource, InputSourceContext, SourceOptions, create_single_revision_catalog

logger = logging.getLogger(__name__)

DEFAULT_PATH = "schema.introspection.json"
STALE_FILE_HINT = "Delete this file to fetch fresh introspection data."


class IntrospectionFileSource(InputSource):
    """
    Reads a previously saved introspection result
    (``{"data": {"__schema": ...}}``).

    Options:
        path: File path, relative to the project root (default
            ``schema.introspection.json``)
    """

    name = "introspectionFile"

    def get_path(self, options: SourceOptions, context: InputSourceContext) -> Path:
        return context.resolve(options.get("path") or DEFAULT_PATH)

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        return fs.is_file(self.get_path(options, context))

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        path = self.get_path(options, context)
        content = context.reader.get(str(path))
        if content is None:
            return None

        try:
            result = json.loads(content)
        except ValueError as exc:
            raise InputSourceError(
                f"Invalid JSON in introspection file {path}: {exc}",
                source_name=self.name,
                cause=exc,
                hint=STALE_FILE_HINT,
            ) from exc

        try:
            schema = from_introspection(result, source=str(path))
        except SchemaParseError as exc:
            raise InputSourceError(
                f"Invalid introspection data in {path}: {exc.message}",
                source_name=self.name,
                cause=exc,
                hint=STALE_FILE_HINT,
            ) from exc

        logger.debug("Loaded introspection file %s", path)
        return create_single_revision_catalog(schema)
