"""
Input source protocol and shared loading helpers.

Sources are stateless: options and context are passed to every call, so one
instance can be registered once and reused for any number of loads.

Reading is split in two phases. Files are read and parsed concurrently
(fan-out/join), then changesets are computed in date order, each step's
``before`` being the previous step's ``after`` (ordered reduce).
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from graphql import GraphQLSchema

from ..core.catalog import Catalog, UnversionedCatalog
from ..core.changeset import build_revisions, compute_changesets
from ..core.date_only import today
from ..core.definition import parse_sdl
from ..core.schema import UnversionedSchema
from ..exceptions import InputSourceError
from ..utils import fs
from ..utils.cache import MemoizedReader

logger = logging.getLogger(__name__)

SourceOptions = Dict[str, Any]


def _default_reader() -> MemoizedReader:
    return MemoizedReader(fs.read)


@dataclass
class InputSourceContext:
    """Per-load context shared by every source probed during one load."""

    project_root: Path = field(default_factory=Path.cwd)
    reader: MemoizedReader = field(default_factory=_default_reader)
    max_workers: Optional[int] = None
    introspection_cache_dir: Optional[Path] = None
    introspection_cache_enabled: bool = True
    introspection_timeout: float = 10

    def __post_init__(self):
        self.project_root = Path(self.project_root)
        if self.introspection_cache_dir is None:
            self.introspection_cache_dir = (
                self.project_root / ".schema_catalog" / "cache" / "introspection"
            )
        else:
            self.introspection_cache_dir = self.resolve(self.introspection_cache_dir)

    @classmethod
    def from_settings(cls, project_root: Optional[Union[str, Path]] = None) -> "InputSourceContext":
        """Build a context from the SCHEMA_CATALOG settings."""
        from ..config_proxy import get_setting

        root = Path(project_root or get_setting("project_root") or Path.cwd())
        return cls(
            project_root=root,
            max_workers=get_setting("loading.max_workers"),
            introspection_cache_dir=Path(get_setting("introspection.cache_dir")),
            introspection_cache_enabled=bool(get_setting("introspection.cache_enabled", True)),
            introspection_timeout=get_setting("introspection.timeout_seconds", 10),
        )

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve ``path`` against the project root unless it is absolute."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.project_root / candidate


class InputSource:
    """
    Base class for catalog input sources.

    Subclasses set ``name`` and implement ``is_applicable`` (a cheap probe
    that never performs the real read) and ``read_if_applicable_or_raise``.
    Sources whose data can be refreshed also implement ``re_create``.
    """

    name: str = ""

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        raise NotImplementedError

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        """
        Read the catalog.

        Returns:
            The catalog, or None when closer inspection shows the source does
            not apply after all.

        Raises:
            CatalogError: on structural or parse failures.
        """
        raise NotImplementedError

    @property
    def supports_re_create(self) -> bool:
        return type(self).re_create is not InputSource.re_create

    def re_create(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        raise NotImplementedError(f"Input source '{self.name}' cannot be re-created")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


# --------------------------------------------------------------------------- #
# Phase 1: concurrent reads
# --------------------------------------------------------------------------- #


def read_schema_file(path: Path, context: InputSourceContext, source_name: str) -> GraphQLSchema:
    content = context.reader.get(str(path))
    if content is None:
        raise InputSourceError(
            f"Schema file disappeared while loading: {path}", source_name=source_name
        )
    return parse_sdl(content, source=str(path))


def read_schema_files(
    paths: Sequence[Path], context: InputSourceContext, source_name: str
) -> List[GraphQLSchema]:
    """Read and parse schema files concurrently, keeping input order."""
    if not paths:
        return []
    if len(paths) == 1:
        return [read_schema_file(paths[0], context, source_name)]
    workers = context.max_workers or min(32, (os.cpu_count() or 1) + 4, len(paths))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(
            executor.map(lambda path: read_schema_file(path, context, source_name), paths)
        )


# --------------------------------------------------------------------------- #
# Phase 2: ordered reduce
# --------------------------------------------------------------------------- #


def sort_snapshots(snapshots: Sequence[Tuple[date, GraphQLSchema]]) -> List[Tuple[date, GraphQLSchema]]:
    """Ascending by date; ties keep their input order."""
    return sorted(snapshots, key=lambda snapshot: snapshot[0])


def build_unversioned_catalog(
    snapshots: Sequence[Tuple[date, GraphQLSchema]],
) -> Optional[UnversionedCatalog]:
    """
    Build a catalog from dated snapshots.

    Changesets are computed ascending and stored as revisions newest first.
    The newest snapshot becomes the definition.
    """
    ordered = sort_snapshots(snapshots)
    if not ordered:
        return None
    changesets = compute_changesets(ordered)
    return UnversionedCatalog(
        schema=UnversionedSchema(
            definition=ordered[-1][1],
            revisions=build_revisions(changesets),
        )
    )


def create_single_revision_catalog(
    schema: GraphQLSchema, day: Optional[date] = None
) -> UnversionedCatalog:
    """Catalog with one revision that diffs the empty schema against ``schema``."""
    return build_unversioned_catalog([(day or today(), schema)])
