"""
Directory of version subdirectories.

Layout::

    schema/
      1.0.0/
        2024-01-01.graphql
        2024-02-01.graphql
      2.0.0>1.0.0@2024-02-01/
        2024-03-01.graphql
      3.0.0/
        schema.graphql

Each subdirectory name is a version. ``<version>><parent>[@YYYY-MM-DD]``
declares that the version branched from ``<parent>``; with a branch date the
first revision of the branch is diffed against the parent's snapshot of that
day.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from graphql import GraphQLSchema

from ..core.catalog import Catalog, VersionedCatalog
from ..core.changeset import build_revisions, compute_changesets
from ..core.date_only import parse_date_only, today
from ..core.schema import VersionedSchema
from ..core.version import Version
from ..utils import fs
from .base import InputSource, InputSourceContext, SourceOptions, read_schema_files, sort_snapshots
from .directory import SCHEMA_FILE_NAME, find_revision_files

logger = logging.getLogger(__name__)

DEFAULT_PATH = "schema"
BRANCH_PATTERN = re.compile(r"^([^>]+)>([^@]+)(?:@(.+))?$")


@dataclass
class VersionDirectory:
    """One version subdirectory found on disk."""
    name: str
    path: Path
    version: Version
    parent_version: Optional[Version] = None
    branch_date: Optional[date] = None
    # (date, path) pairs; a None date marks an undated schema.graphql
    revision_files: List[Tuple[Optional[date], Path]] = field(default_factory=list)


def parse_version_directory_name(
    name: str,
) -> Optional[Tuple[Version, Optional[Version], Optional[date]]]:
    """
    Split a directory name into (version, parent version, branch date).

    Returns None when a branch date is present but is not a valid day.

    Examples:
        >>> parse_version_directory_name("2.0.0>1.0.0@2024-03-20")
        (Version(semver, '2.0.0'), Version(semver, '1.0.0'), datetime.date(2024, 3, 20))
        >>> parse_version_directory_name("1.0.0")
        (Version(semver, '1.0.0'), None, None)
    """
    match = BRANCH_PATTERN.match(name)
    if not match:
        return Version.decode(name), None, None

    version_name, parent_name, branch = match.groups()
    branch_date = None
    if branch is not None:
        branch_date = parse_date_only(branch)
        if branch_date is None:
            return None
    return Version.decode(version_name), Version.decode(parent_name), branch_date


def _find_schema_files(directory: Path) -> List[Tuple[Optional[date], Path]]:
    revision_files = find_revision_files(directory)
    if revision_files:
        return [(parse_date_only(day), path) for day, path in revision_files]
    schema_path = directory / SCHEMA_FILE_NAME
    if fs.is_file(schema_path):
        return [(None, schema_path)]
    return []


class VersionedDirectorySource(InputSource):
    """
    Reads one schema history per version subdirectory into a versioned
    catalog.

    Options:
        path: Directory path, relative to the project root (default ``schema``)
    """

    name = "versionedDirectory"

    def get_path(self, options: SourceOptions, context: InputSourceContext) -> Path:
        return context.resolve(options.get("path") or DEFAULT_PATH)

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        path = self.get_path(options, context)
        if not fs.is_dir(path):
            return False
        for name in fs.list_dir(path):
            entry = path / name
            if fs.is_dir(entry) and _find_schema_files(entry):
                return True
        return False

    def scan(self, path: Path) -> List[VersionDirectory]:
        """Version directories under ``path``, ascending by version."""
        directories: Dict[Version, VersionDirectory] = {}
        for name in fs.list_dir(path):
            entry = path / name
            if not fs.is_dir(entry):
                continue
            parsed = parse_version_directory_name(name)
            if parsed is None:
                logger.warning("Skipping %s: invalid branch date in directory name", entry)
                continue
            version, parent_version, branch_date = parsed
            revision_files = _find_schema_files(entry)
            if not revision_files:
                logger.debug("Skipping %s: no schema files found", entry)
                continue
            if version in directories:
                logger.warning(
                    "Skipping %s: version %s is already provided by %s",
                    entry,
                    version,
                    directories[version].name,
                )
                continue
            directories[version] = VersionDirectory(
                name=name,
                path=entry,
                version=version,
                parent_version=parent_version,
                branch_date=branch_date,
                revision_files=revision_files,
            )
        return sorted(directories.values(), key=lambda d: d.version.sort_key())

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        path = self.get_path(options, context)
        directories = self.scan(path)
        if not directories:
            return None
        logger.debug(
            "Found %s version directories in %s: %s",
            len(directories),
            path,
            ", ".join(d.name for d in directories),
        )

        # Phase 1: every file of every version, read concurrently
        all_paths = [file for d in directories for _, file in d.revision_files]
        parsed = iter(read_schema_files(all_paths, context, self.name))
        day = today()
        snapshots: Dict[Version, List[Tuple[date, GraphQLSchema]]] = {}
        for d in directories:
            snapshots[d.version] = sort_snapshots(
                [(file_date or day, next(parsed)) for file_date, _ in d.revision_files]
            )

        # Phase 2: sequential changesets per version
        schemas: Dict[Version, VersionedSchema] = {}
        for d in directories:
            history = snapshots[d.version]
            changesets = compute_changesets(history, initial=self._branch_point(d, snapshots))
            schemas[d.version] = VersionedSchema(
                version=d.version,
                definition=history[-1][1],
                revisions=build_revisions(changesets),
                branch_date=d.branch_date,
            )

        for index, d in enumerate(directories):
            if d.parent_version is not None:
                parent = schemas.get(d.parent_version)
                if parent is None:
                    logger.warning(
                        "Version %s declares parent %s which does not exist", d.version, d.parent_version
                    )
            else:
                parent = schemas[directories[index - 1].version] if index > 0 else None
            schemas[d.version].parent = parent

        return VersionedCatalog(entries=schemas)

    def _branch_point(
        self,
        directory: VersionDirectory,
        snapshots: Dict[Version, List[Tuple[date, GraphQLSchema]]],
    ) -> Optional[GraphQLSchema]:
        if directory.parent_version is None or directory.branch_date is None:
            return None
        # Newest parent snapshot dated on or before the branch date
        for day, schema in reversed(snapshots.get(directory.parent_version, [])):
            if day <= directory.branch_date:
                return schema
        logger.warning(
            "Branch date %s of version %s predates every revision of %s; diffing against the empty schema",
            directory.branch_date,
            directory.version,
            directory.parent_version,
        )
        return None
