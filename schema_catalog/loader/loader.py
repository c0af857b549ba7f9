"""
Schema loading.

Probes the registered input sources in priority order, reads the first one
that applies, then runs the post-load steps (description augmentations, then
category tagging). Each load is independent: nothing is shared between loads
except the on-disk introspection cache.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config_proxy import get_settings_proxy
from ..core.catalog import Catalog, UnversionedCatalog, VersionedCatalog
from ..defaults import LIBRARY_DEFAULTS, merge_settings, validate_settings
from ..exceptions import SchemaConfigurationError
from ..sources import InputSource, InputSourceContext, get_source_registry
from .augmentations import apply_augmentations
from .categories import process_categories_for_version
from .diagnostics import Diagnostic

logger = logging.getLogger(__name__)

NO_SOURCE_HINT = (
    "Add a schema file or directory, configure SCHEMA_CATALOG['schema']['sources'], "
    "or set SCHEMA_CATALOG['schema']['enabled'] = False."
)


@dataclass
class SchemaConfig:
    """Schema loading configuration."""
    enabled: Optional[bool] = None
    use_sources: Optional[List[str]] = None
    sources: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    augmentations: List[Dict[str, Any]] = field(default_factory=list)
    categories: Union[List[Dict[str, Any]], Dict[str, List[Dict[str, Any]]]] = field(default_factory=list)
    project_root: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None, project_root: Optional[Union[str, Path]] = None) -> "SchemaConfig":
        merged = merge_settings(LIBRARY_DEFAULTS.get("schema", {}), data or {})
        use_sources = merged.get("use_sources")
        if isinstance(use_sources, str):
            use_sources = [use_sources]
        return cls(
            enabled=merged.get("enabled"),
            use_sources=list(use_sources) if use_sources is not None else None,
            sources=dict(merged.get("sources") or {}),
            augmentations=list(merged.get("augmentations") or []),
            categories=merged.get("categories") or [],
            project_root=Path(project_root) if project_root else None,
        )

    @classmethod
    def from_settings(cls) -> "SchemaConfig":
        """Build the configuration from ``settings.SCHEMA_CATALOG``."""
        proxy = get_settings_proxy()
        schema_settings = proxy.get("schema", {}) or {}
        errors = validate_settings(
            {"schema": schema_settings, "introspection": proxy.get("introspection", {}) or {}}
        )
        if errors:
            raise SchemaConfigurationError(
                "Invalid SCHEMA_CATALOG settings: " + "; ".join(errors)
            )
        return cls.from_dict(schema_settings, proxy.get("project_root"))

    def options_for(self, source_name: str) -> Dict[str, Any]:
        return dict(self.sources.get(source_name) or {})


@dataclass
class LoadedCatalog:
    """Result envelope of a load; returned even when no schema is configured."""
    data: Optional[Catalog] = None
    source: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.data is not None


class SchemaLoader:
    """
    Selects an input source and loads the catalog.

    Args:
        sources: Ordered source registry; defaults to the built-in sources
            plus any configured in settings
    """

    def __init__(self, sources: Optional[Sequence[InputSource]] = None):
        self.sources: List[InputSource] = list(sources) if sources is not None else get_source_registry()
        self.logger = logging.getLogger(__name__)

    def get_candidate_sources(self, config: SchemaConfig) -> List[InputSource]:
        """Sources to probe, honoring a caller-pinned subset and order."""
        if config.use_sources is None:
            return list(self.sources)
        by_name = {source.name: source for source in self.sources}
        candidates = []
        for name in config.use_sources:
            source = by_name.get(name)
            if source is None:
                self.logger.warning("Ignoring unknown schema source '%s'", name)
                continue
            candidates.append(source)
        return candidates

    def find_applicable_source(
        self, config: SchemaConfig, context: Optional[InputSourceContext] = None
    ) -> Optional[InputSource]:
        """First applicable source; probing stops at the first match."""
        if config.enabled is False:
            return None
        context = context or self._build_context(config)
        for source in self.get_candidate_sources(config):
            if source.is_applicable(config.options_for(source.name), context):
                self.logger.debug("Schema source '%s' is applicable", source.name)
                return source
        return None

    def has_schema(self, config: Optional[SchemaConfig] = None, context: Optional[InputSourceContext] = None) -> bool:
        config = config or SchemaConfig.from_settings()
        return self.find_applicable_source(config, context) is not None

    def load(
        self, config: Optional[SchemaConfig] = None, context: Optional[InputSourceContext] = None
    ) -> LoadedCatalog:
        """
        Load the catalog.

        Raises:
            SchemaConfigurationError: when schema support is not disabled and
                no source applies, or the selected source returns no data.
        """
        return self._load(config, context, re_create=False)

    def re_create(
        self, config: Optional[SchemaConfig] = None, context: Optional[InputSourceContext] = None
    ) -> LoadedCatalog:
        """Load like ``load`` but let the selected source refresh its data."""
        return self._load(config, context, re_create=True)

    def _load(
        self,
        config: Optional[SchemaConfig],
        context: Optional[InputSourceContext],
        re_create: bool,
    ) -> LoadedCatalog:
        config = config or SchemaConfig.from_settings()
        if config.enabled is False:
            self.logger.info("Schema support is disabled; skipping catalog load")
            return LoadedCatalog()

        context = context or self._build_context(config)
        source = self.find_applicable_source(config, context)
        if source is None:
            raise SchemaConfigurationError(
                "No applicable schema source found. Please check your configuration.",
                hint=NO_SOURCE_HINT,
            )

        started = time.perf_counter()
        options = config.options_for(source.name)
        if re_create and source.supports_re_create:
            catalog = source.re_create(options, context)
        else:
            catalog = source.read_if_applicable_or_raise(options, context)
        if catalog is None:
            raise SchemaConfigurationError(
                f"Schema source '{source.name}' was applicable but returned no data",
                hint=NO_SOURCE_HINT,
            )

        diagnostics = self.post_process(catalog, config)
        self.logger.info(
            "Loaded schema catalog from '%s' (%s versions) in %.1fms with %s diagnostics",
            source.name,
            catalog.version_count(),
            (time.perf_counter() - started) * 1000,
            len(diagnostics),
        )
        return LoadedCatalog(data=catalog, source=source.name, diagnostics=diagnostics)

    def post_process(self, catalog: Catalog, config: SchemaConfig) -> List[Diagnostic]:
        """Apply augmentations, then categories, to every schema of the catalog."""
        diagnostics: List[Diagnostic] = []

        def on_versioned(versioned: VersionedCatalog) -> None:
            for version, schema in versioned.entries.items():
                diagnostics.extend(apply_augmentations(schema.definition, config.augmentations, version))
            for version, schema in versioned.entries.items():
                schema.categories, found = process_categories_for_version(
                    schema.definition, config.categories, version
                )
                diagnostics.extend(found)

        def on_unversioned(unversioned: UnversionedCatalog) -> None:
            schema = unversioned.schema
            diagnostics.extend(apply_augmentations(schema.definition, config.augmentations, None))
            schema.categories, found = process_categories_for_version(
                schema.definition, config.categories, None
            )
            diagnostics.extend(found)

        catalog.fold(on_versioned, on_unversioned)
        for diagnostic in diagnostics:
            level = logging.INFO if diagnostic.level == "info" else logging.WARNING
            self.logger.log(level, "Schema diagnostic [%s]: %s", diagnostic.code, diagnostic.message)
        return diagnostics

    def _build_context(self, config: SchemaConfig) -> InputSourceContext:
        return InputSourceContext.from_settings(project_root=config.project_root)


def load_catalog(config: Optional[SchemaConfig] = None, context: Optional[InputSourceContext] = None) -> LoadedCatalog:
    """Load the catalog with the default source registry."""
    return SchemaLoader().load(config, context)
