"""
Single SDL file source.
"""

import logging
from pathlib import Path
from typing import Optional

from ..core.catalog import Catalog
from ..core.definition import parse_sdl
from ..utils import fs
from .base import InputSource, InputSourceContext, SourceOptions, create_single_revision_catalog

logger = logging.getLogger(__name__)

DEFAULT_PATH = "schema.graphql"


class FileSource(InputSource):
    """
    Reads one ``.graphql`` file as a single-revision unversioned catalog dated
    today.

    Options:
        path: File path, relative to the project root (default
            ``schema.graphql``)
    """

    name = "file"

    def get_path(self, options: SourceOptions, context: InputSourceContext) -> Path:
        return context.resolve(options.get("path") or DEFAULT_PATH)

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        path = self.get_path(options, context)
        return path.suffix == ".graphql" and fs.is_file(path)

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        path = self.get_path(options, context)
        if path.suffix != ".graphql":
            return None
        content = context.reader.get(str(path))
        if content is None:
            logger.debug("Schema file not found: %s", path)
            return None
        logger.debug("Reading schema file %s", path)
        return create_single_revision_catalog(parse_sdl(content, source=str(path)))
