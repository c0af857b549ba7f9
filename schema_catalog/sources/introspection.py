"""
Remote introspection source.
"""

import logging
from typing import Any, Dict, Optional

from ..core.catalog import Catalog
from ..core.definition import from_introspection
from ..exceptions import CatalogError
from ..introspection.client import fetch_introspection
from .base import InputSource, InputSourceContext, SourceOptions, create_single_revision_catalog
from .introspection_cache import IntrospectionCache

logger = logging.getLogger(__name__)


class IntrospectionSource(InputSource):
    """
    Fetches the schema from a live GraphQL endpoint.

    The raw result is cached on disk keyed by the request (url and headers)
    and reused until ``re_create`` forces a new fetch.

    Options:
        url: GraphQL endpoint
        headers: Extra request headers
        cache: Set to False to bypass the cache for this source
    """

    name = "introspection"

    def is_applicable(self, options: SourceOptions, context: InputSourceContext) -> bool:
        return bool(options.get("url"))

    def read_if_applicable_or_raise(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        return self._read(options, context, force=False)

    def re_create(
        self, options: SourceOptions, context: InputSourceContext
    ) -> Optional[Catalog]:
        return self._read(options, context, force=True)

    def _read(
        self, options: SourceOptions, context: InputSourceContext, force: bool
    ) -> Optional[Catalog]:
        url = options.get("url")
        if not url:
            return None
        headers: Dict[str, str] = dict(options.get("headers") or {})
        use_cache = options.get("cache", context.introspection_cache_enabled)
        cache = IntrospectionCache(context.introspection_cache_dir)

        if use_cache and not force:
            cached = cache.load(url, headers)
            if cached is not None:
                try:
                    return create_single_revision_catalog(from_introspection(cached, source=url))
                except CatalogError as exc:
                    logger.warning("Discarding unusable introspection cache for %s: %s", url, exc)

        result: dict[str, Any] = fetch_introspection(
            url, headers, timeout=context.introspection_timeout
        )
        if use_cache:
            cache.store(url, result, headers)
        return create_single_revision_catalog(from_introspection(result, source=url))
