"""
Schema definition helpers.

Snapshots are ``graphql.GraphQLSchema`` objects. This module owns the empty
schema sentinel and the conversions between SDL, introspection results and
schema objects.
"""

import logging
from typing import Any, Iterator, List, Optional

import graphene
from graphql import (
    GraphQLError,
    GraphQLNamedType,
    GraphQLSchema,
    GraphQLSyntaxError,
    Source,
    build_ast_schema,
    build_client_schema,
    introspection_from_schema,
    is_introspection_type,
    is_specified_scalar_type,
    parse,
    print_schema,
    print_source_location,
)

from ..exceptions import SchemaParseError

logger = logging.getLogger(__name__)

MEMORY_SOURCE = "memory"

EMPTY_SCHEMA = GraphQLSchema()


def empty_schema() -> GraphQLSchema:
    """Return the shared empty schema sentinel."""
    return EMPTY_SCHEMA


def is_empty_schema(schema: GraphQLSchema) -> bool:
    """True for the sentinel and for any schema without user types."""
    if schema is EMPTY_SCHEMA:
        return True
    if schema.query_type or schema.mutation_type or schema.subscription_type:
        return False
    return next(iter_named_types(schema), None) is None


def is_user_type(named_type: GraphQLNamedType) -> bool:
    """Exclude introspection types and the specified scalars."""
    return not (
        is_introspection_type(named_type) or is_specified_scalar_type(named_type)
    )


def iter_named_types(schema: GraphQLSchema) -> Iterator[GraphQLNamedType]:
    """Yield the schema's user types in definition order."""
    for named_type in schema.type_map.values():
        if is_user_type(named_type):
            yield named_type


def get_type_names(schema: GraphQLSchema) -> List[str]:
    return [named_type.name for named_type in iter_named_types(schema)]


def coerce_schema(value: Any, source: str = MEMORY_SOURCE) -> GraphQLSchema:
    """
    Turn an SDL string, a GraphQLSchema or a graphene Schema into a
    GraphQLSchema.
    """
    if isinstance(value, GraphQLSchema):
        return value
    if isinstance(value, str):
        return parse_sdl(value, source=source)
    if isinstance(value, graphene.Schema):
        return value.graphql_schema
    raise SchemaParseError(
        f"Expected SDL text or a schema object, got {type(value).__name__}",
        parse_type="unknown",
        source=source,
    )


def parse_sdl(text: str, source: str = MEMORY_SOURCE) -> GraphQLSchema:
    """
    Build a schema from SDL text.

    Args:
        text: SDL document
        source: Path or label reported in parse errors

    Returns:
        The built schema

    Raises:
        SchemaParseError: ``document`` for syntax errors, ``schema`` when the
            document does not describe a valid schema.
    """
    graphql_source = Source(text, source)
    try:
        document = parse(graphql_source)
    except GraphQLSyntaxError as error:
        raise SchemaParseError(
            error.message,
            parse_type="document",
            source=source,
            excerpt=_excerpt(graphql_source, error),
            locations=error.locations,
        ) from error

    try:
        return build_ast_schema(document)
    except GraphQLError as error:
        raise SchemaParseError(
            error.message,
            parse_type="schema",
            source=source,
            excerpt=_excerpt(graphql_source, error),
            locations=error.locations,
        ) from error
    except TypeError as error:
        raise SchemaParseError(str(error), parse_type="schema", source=source) from error
    except Exception as error:
        logger.error(f"Unexpected error while building schema from {source}: {error}")
        raise SchemaParseError(str(error), parse_type="unknown", source=source) from error


def from_introspection(result: Any, source: str = "introspection") -> GraphQLSchema:
    """
    Build a client schema from an introspection result.

    Accepts either ``{"data": {"__schema": ...}}`` or ``{"__schema": ...}``.
    """
    payload = result
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, dict) or not isinstance(payload.get("__schema"), dict):
        raise SchemaParseError(
            "Introspection result is missing '__schema'",
            parse_type="schema",
            source=source,
        )
    try:
        return build_client_schema(payload)
    except (GraphQLError, TypeError, KeyError, ValueError) as error:
        raise SchemaParseError(
            f"Invalid introspection result: {error!r}", parse_type="schema", source=source
        ) from error


def to_introspection(schema: GraphQLSchema) -> dict:
    """Introspect a schema into ``{"data": {"__schema": ...}}``."""
    return {"data": introspection_from_schema(schema)}


def to_sdl(schema: GraphQLSchema) -> str:
    """Print a schema as SDL; the empty sentinel prints as an empty string."""
    if is_empty_schema(schema):
        return ""
    return print_schema(schema)


def _excerpt(source: Source, error: GraphQLError) -> Optional[str]:
    if not error.locations:
        return None
    return print_source_location(source, error.locations[0])
