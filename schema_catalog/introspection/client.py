"""
Remote schema introspection over HTTP.
"""

import logging
from typing import Any, Dict, Optional

import requests
from graphql import GraphQLSchema, get_introspection_query

from ..core.definition import from_introspection
from ..exceptions import IntrospectionFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


def fetch_introspection(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    Run the standard introspection query against a GraphQL endpoint.

    Args:
        url: GraphQL endpoint
        headers: Extra request headers (authentication etc.)
        timeout: Request timeout in seconds

    Returns:
        The raw response body, ``{"data": {"__schema": ...}}``

    Raises:
        IntrospectionFetchError: on transport errors, non-2xx responses or a
            body without introspection data.
    """
    request_headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    request_headers.update(headers or {})
    payload = {
        "query": get_introspection_query(descriptions=True),
        "operationName": "IntrospectionQuery",
    }

    logger.info("Fetching schema introspection from %s", url)
    try:
        response = requests.post(url, json=payload, headers=request_headers, timeout=timeout)
    except requests.RequestException as exc:
        raise IntrospectionFetchError(
            f"Introspection request to {url} failed: {exc}", url=url, cause=exc
        ) from exc

    if not response.ok:
        raise IntrospectionFetchError(
            f"Introspection request to {url} failed with status {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise IntrospectionFetchError(
            f"Introspection response from {url} is not valid JSON", url=url, cause=exc
        ) from exc

    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict) or "__schema" not in data:
        errors = body.get("errors") if isinstance(body, dict) else None
        message = "; ".join(
            str(error.get("message", error)) if isinstance(error, dict) else str(error)
            for error in errors or []
        )
        raise IntrospectionFetchError(
            f"Introspection response from {url} has no schema data"
            + (f": {message}" if message else ""),
            url=url,
            status_code=response.status_code,
        )
    return {"data": data}


def introspect(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> GraphQLSchema:
    """Fetch and build the schema served at ``url``."""
    return from_introspection(fetch_introspection(url, headers, timeout), source=url)
