"""
SchemaIntrospector implementation.
"""

import logging
from typing import Any, Optional

from graphql import (
    GraphQLField,
    GraphQLNamedType,
    GraphQLSchema,
    Undefined,
    ast_from_value,
    is_enum_type,
    is_input_object_type,
    is_interface_type,
    is_object_type,
    is_specified_directive,
    is_union_type,
    print_ast,
)

from ...core.definition import iter_named_types
from .types import (
    ArgumentInfo,
    DirectiveInfo,
    EnumValueInfo,
    FieldInfo,
    SchemaIntrospection,
    TypeInfo,
)

logger = logging.getLogger(__name__)


class SchemaIntrospector:
    """
    Builds a SchemaIntrospection from a GraphQLSchema.

    Introspection types, specified scalars and specified directives are left
    out so that every snapshot is compared on user-defined elements only.
    """

    def introspect(
        self, schema: GraphQLSchema, schema_name: str = "schema"
    ) -> SchemaIntrospection:
        introspection = SchemaIntrospection(
            schema_name=schema_name,
            query_type=self._root_name(schema.query_type),
            mutation_type=self._root_name(schema.mutation_type),
            subscription_type=self._root_name(schema.subscription_type),
        )
        for named_type in iter_named_types(schema):
            introspection.types[named_type.name] = self._analyze_type(named_type)
        for directive in schema.directives:
            if is_specified_directive(directive):
                continue
            introspection.directives[directive.name] = DirectiveInfo(
                name=directive.name,
                locations=[location.name for location in directive.locations],
            )
        logger.debug(
            f"Introspected {schema_name}: {len(introspection.types)} types, "
            f"{len(introspection.directives)} directives"
        )
        return introspection

    def _root_name(self, root: Optional[GraphQLNamedType]) -> Optional[str]:
        return root.name if root is not None else None

    def _analyze_type(self, named_type: GraphQLNamedType) -> TypeInfo:
        info = TypeInfo(
            name=named_type.name,
            kind=self.get_type_kind(named_type),
            description=named_type.description,
        )
        if is_object_type(named_type) or is_interface_type(named_type):
            info.fields = [
                self._analyze_field(name, field)
                for name, field in named_type.fields.items()
            ]
            info.interfaces = [iface.name for iface in named_type.interfaces]
        elif is_union_type(named_type):
            info.possible_types = [member.name for member in named_type.types]
        elif is_enum_type(named_type):
            info.enum_values = [
                EnumValueInfo(
                    name=name,
                    description=value.description,
                    is_deprecated=value.deprecation_reason is not None,
                    deprecation_reason=value.deprecation_reason,
                )
                for name, value in named_type.values.items()
            ]
        elif is_input_object_type(named_type):
            info.input_fields = [
                self._analyze_argument(name, field)
                for name, field in named_type.fields.items()
            ]
        return info

    @staticmethod
    def get_type_kind(named_type: GraphQLNamedType) -> str:
        if is_object_type(named_type):
            return "OBJECT"
        if is_interface_type(named_type):
            return "INTERFACE"
        if is_union_type(named_type):
            return "UNION"
        if is_enum_type(named_type):
            return "ENUM"
        if is_input_object_type(named_type):
            return "INPUT_OBJECT"
        return "SCALAR"

    def _analyze_field(self, name: str, field: GraphQLField) -> FieldInfo:
        return FieldInfo(
            name=name,
            type=str(field.type),
            description=field.description,
            args=[self._analyze_argument(n, a) for n, a in field.args.items()],
            is_deprecated=field.deprecation_reason is not None,
            deprecation_reason=field.deprecation_reason,
        )

    def _analyze_argument(self, name: str, arg: Any) -> ArgumentInfo:
        """Works for both GraphQLArgument and GraphQLInputField."""
        has_default = arg.default_value is not Undefined
        return ArgumentInfo(
            name=name,
            type=str(arg.type),
            description=arg.description,
            default_value=self._print_default(arg) if has_default else None,
            has_default=has_default,
        )

    def _print_default(self, arg: Any) -> Optional[str]:
        value_ast = ast_from_value(arg.default_value, arg.type)
        return print_ast(value_ast) if value_ast is not None else None
