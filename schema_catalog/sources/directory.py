"""
Directory of dated SDL files.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.catalog import Catalog
from ..core.date_only import parse_date_only
from ..utils import fs
from .base import (
    InputSource,
    InputSourceContext,
    SourceOptions,
    build_unversioned_catalog,
    create_single_revision_catalog,
    read_schema_file,
    read_schema_files,
)

logger = logging.getLogger(__name__)

DEFAULT_PATH = "schema"
SCHEMA_FILE_NAME = "schema.graphql"
REVISION_FILE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})\.graphql$")


def find_revision_files(directory: Path) -> List[Tuple[str, Path]]:
    """
    ``YYYY-MM-DD.graphql`` files of a directory, in date order.

    Names that match the pattern but are not real calendar days are ignored.
    """
    found = []
    for name in fs.list_dir(directory):
        match = REVISION_FILE_PATTERN.match(name)
        if not match or parse_date_only(match.group(1)) is None:
            continue
        path = directory / name
        if fs.is_file(path):
            found.append((match.group(1), path))
    return found


class DirectorySource(InputSource):
    """
    Reads a directory holding either dated revision files
    (``2024-01-15.graphql``) or a single ``schema.graphql``.

    Dated files become one revision each. A lone ``schema.graphql`` becomes a
    single revision dated today.

    Options:
        path: Directory path, relative to the project root (default ``schema``)
    """

    name = "directory"

    def get_path(self, options: SourceOptions, context: InputSourceContext) -> Path:
        return context.resolve(options.get("path") or DEFAULT_PATH)

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        path = self.get_path(options, context)
        if not fs.is_dir(path):
            return False
        return fs.is_file(path / SCHEMA_FILE_NAME) or bool(find_revision_files(path))

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        path = self.get_path(options, context)
        if not fs.is_dir(path):
            return None

        revision_files = find_revision_files(path)
        if revision_files:
            logger.debug(
                "Found %s revision files in %s: %s",
                len(revision_files),
                path,
                ", ".join(day for day, _ in revision_files),
            )
            schemas = read_schema_files([file for _, file in revision_files], context, self.name)
            return build_unversioned_catalog(
                [(parse_date_only(day), schema) for (day, _), schema in zip(revision_files, schemas)]
            )

        schema_path = path / SCHEMA_FILE_NAME
        if fs.is_file(schema_path):
            logger.debug("Reading single schema file %s", schema_path)
            return create_single_revision_catalog(read_schema_file(schema_path, context, self.name))

        return None
