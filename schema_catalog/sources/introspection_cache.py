"""
On-disk cache of introspection results.

Entries are JSON files named after the sha256 of the request::

    {"url": ..., "fetchedAt": ISO timestamp, "introspectionResult": {"data": {"__schema": ...}}}

Any problem reading or writing an entry is logged and treated as a cache
miss. Writes for the same key are idempotent, so concurrent writers need no
locking.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from ..utils import fs
from ..utils.cache import make_request_hash

logger = logging.getLogger(__name__)


class IntrospectionCache:
    """Introspection cache store rooted at ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, url: str, headers: Optional[Dict[str, str]] = None) -> Path:
        return self.directory / f"{make_request_hash(url, headers)}.json"

    def load(self, url: str, headers: Optional[Dict[str, str]] = None) -> Optional[dict[str, Any]]:
        """Cached introspection result for the request, or None on a miss."""
        path = self.path_for(url, headers)
        try:
            content = fs.read(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read introspection cache %s: %s", path, exc)
            return None
        if content is None:
            return None

        try:
            entry = json.loads(content)
        except ValueError as exc:
            logger.warning("Ignoring unparseable introspection cache %s: %s", path, exc)
            return None

        result = entry.get("introspectionResult") if isinstance(entry, dict) else None
        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, dict) or not isinstance(data.get("__schema"), dict):
            logger.warning("Ignoring malformed introspection cache %s", path)
            return None
        if entry.get("url") != url:
            logger.warning("Ignoring introspection cache %s recorded for another url", path)
            return None

        logger.debug("Using cached introspection for %s (fetched %s)", url, entry.get("fetchedAt"))
        return result

    def store(
        self, url: str, result: dict[str, Any], headers: Optional[Dict[str, str]] = None
    ) -> None:
        path = self.path_for(url, headers)
        entry = {
            "url": url,
            "fetchedAt": timezone.now().isoformat(),
            "introspectionResult": result,
        }
        try:
            fs.write(path, json.dumps(entry, cls=DjangoJSONEncoder, indent=2))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Failed to write introspection cache %s: %s", path, exc)

    def clear(self, url: str, headers: Optional[Dict[str, str]] = None) -> None:
        path = self.path_for(url, headers)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Failed to clear introspection cache %s: %s", path, exc)
