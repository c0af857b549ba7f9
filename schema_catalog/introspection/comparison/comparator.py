"""
SchemaComparator implementation.

Changes come out in a stable order: additions follow the new schema's type
order, removals and modifications follow the old schema's order.
"""

import logging
from typing import Any

from graphql import GraphQLSchema

from ...core.change import Change, ChangeKind, Criticality, CriticalityLevel
from ...exceptions import SchemaDiffError
from ..schema_introspector import (
    ArgumentInfo,
    FieldInfo,
    SchemaIntrospection,
    SchemaIntrospector,
    TypeInfo,
)
from .types import SchemaComparison

logger = logging.getLogger(__name__)

BREAKING = Criticality(CriticalityLevel.BREAKING)
DANGEROUS = Criticality(CriticalityLevel.DANGEROUS)
NON_BREAKING = Criticality(CriticalityLevel.NON_BREAKING)


def is_safe_output_type_change(old: str, new: str) -> bool:
    """
    True when clients reading ``old`` keep working with ``new``.

    Making an output type non-null is safe; dropping non-null or changing the
    named type or list nesting is not.
    """
    if old.endswith("!"):
        return new.endswith("!") and is_safe_output_type_change(old[:-1], new[:-1])
    if new.endswith("!"):
        return is_safe_output_type_change(old, new[:-1])
    if old.startswith("["):
        return new.startswith("[") and is_safe_output_type_change(old[1:-1], new[1:-1])
    return old == new


def is_safe_input_type_change(old: str, new: str) -> bool:
    """
    True when clients sending ``old`` keep working with ``new``.

    Making an input optional is safe; making it required is not.
    """
    if old.endswith("!"):
        if new.endswith("!"):
            return is_safe_input_type_change(old[:-1], new[:-1])
        return is_safe_input_type_change(old[:-1], new)
    if new.endswith("!"):
        return False
    if old.startswith("["):
        return new.startswith("[") and is_safe_input_type_change(old[1:-1], new[1:-1])
    return old == new


class SchemaComparator:
    """
    GraphQL schema comparator.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.introspector = SchemaIntrospector()

    def compare(self, before: GraphQLSchema, after: GraphQLSchema) -> SchemaComparison:
        """Compare two schema objects."""
        for label, schema in (("before", before), ("after", after)):
            if not isinstance(schema, GraphQLSchema):
                raise SchemaDiffError(
                    f"Cannot diff '{label}': expected GraphQLSchema, got {type(schema).__name__}"
                )
        return self.compare_schemas(
            self.introspector.introspect(before, "before"),
            self.introspector.introspect(after, "after"),
        )

    def compare_schemas(self, old_schema: SchemaIntrospection,
                        new_schema: SchemaIntrospection) -> SchemaComparison:
        """Compare two schema introspections."""
        self.logger.debug(f"Comparing schemas: {old_schema.schema_name} -> {new_schema.schema_name}")
        comparison = SchemaComparison(old_schema_name=old_schema.schema_name, new_schema_name=new_schema.schema_name)
        try:
            self._compare_types(old_schema, new_schema, comparison)
            self._compare_root_types(old_schema, new_schema, comparison)
            self._compare_directives(old_schema, new_schema, comparison)
            self._calculate_summary(comparison)
            self.logger.debug(f"Schema comparison completed: {comparison.total_changes} changes found")
        except Exception as e:
            self.logger.error(f"Error during schema comparison: {e}")
            raise
        return comparison

    def _compare_types(self, old_schema: SchemaIntrospection, new_schema: SchemaIntrospection, comparison: SchemaComparison):
        old_t, new_t = old_schema.types, new_schema.types
        for name, type_info in new_t.items():
            if name not in old_t:
                comparison.type_changes.append(Change(
                    type=ChangeKind.TYPE_ADDED, path=name, criticality=NON_BREAKING,
                    message=f"Type '{name}' was added",
                    meta={"type_name": name, "kind": type_info.kind},
                ))
        for name, type_info in old_t.items():
            if name not in new_t:
                comparison.type_changes.append(Change(
                    type=ChangeKind.TYPE_REMOVED, path=name, criticality=BREAKING,
                    message=f"Type '{name}' was removed",
                    meta={"type_name": name, "kind": type_info.kind},
                ))
        for name, type_info in old_t.items():
            if name in new_t:
                self._compare_type_details(type_info, new_t[name], comparison)

    def _compare_type_details(self, old_type: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        name = old_type.name
        if old_type.kind != new_type.kind:
            comparison.type_changes.append(Change(
                type=ChangeKind.TYPE_KIND_CHANGED, path=name,
                criticality=Criticality(CriticalityLevel.BREAKING, "Changing the kind of a type is a breaking change"),
                message=f"Type '{name}' kind changed from '{old_type.kind}' to '{new_type.kind}'",
                meta={"type_name": name, "old_kind": old_type.kind, "new_kind": new_type.kind},
            ))
            return
        self._compare_description(old_type, new_type, comparison)
        if old_type.kind in ('OBJECT', 'INTERFACE'):
            self._compare_fields(old_type, new_type, comparison)
            self._compare_interfaces(old_type, new_type, comparison)
        elif old_type.kind == 'ENUM':
            self._compare_enum_values(old_type, new_type, comparison)
        elif old_type.kind == 'INPUT_OBJECT':
            self._compare_input_fields(old_type, new_type, comparison)
        elif old_type.kind == 'UNION':
            self._compare_union_types(old_type, new_type, comparison)

    def _compare_description(self, old_type: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        old_d, new_d = old_type.description, new_type.description
        if old_d == new_d:
            return
        if old_d is None:
            kind, message = ChangeKind.TYPE_DESCRIPTION_ADDED, f"Description added to type '{old_type.name}'"
        elif new_d is None:
            kind, message = ChangeKind.TYPE_DESCRIPTION_REMOVED, f"Description removed from type '{old_type.name}'"
        else:
            kind, message = ChangeKind.TYPE_DESCRIPTION_CHANGED, f"Description of type '{old_type.name}' changed"
        comparison.type_changes.append(Change(
            type=kind, path=old_type.name, criticality=NON_BREAKING, message=message,
            meta={"type_name": old_type.name, "old_description": old_d, "new_description": new_d},
        ))

    def _compare_fields(self, old_type: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        old_f = {f.name: f for f in old_type.fields}
        new_f = {f.name: f for f in new_type.fields}
        for n, f in new_f.items():
            if n not in old_f:
                comparison.field_changes.append(Change(
                    type=ChangeKind.FIELD_ADDED, path=f"{old_type.name}.{n}", criticality=NON_BREAKING,
                    message=f"Field '{n}' was added to {old_type.kind.lower()} type '{old_type.name}'",
                    meta={"type_name": old_type.name, "field_name": n, "field_type": f.type},
                ))
        for n, f in old_f.items():
            if n not in new_f:
                reason = "Removing a deprecated field is a breaking change" if f.is_deprecated else None
                comparison.field_changes.append(Change(
                    type=ChangeKind.FIELD_REMOVED, path=f"{old_type.name}.{n}",
                    criticality=Criticality(CriticalityLevel.BREAKING, reason),
                    message=f"Field '{n}' was removed from {old_type.kind.lower()} type '{old_type.name}'",
                    meta={"type_name": old_type.name, "field_name": n, "field_type": f.type},
                ))
        for n, f in old_f.items():
            if n in new_f:
                self._compare_field_details(old_type.name, f, new_f[n], comparison)

    def _compare_field_details(self, type_name: str, old_f: FieldInfo, new_f: FieldInfo, comparison: SchemaComparison):
        path = f"{type_name}.{old_f.name}"
        meta = {"type_name": type_name, "field_name": old_f.name}
        if old_f.type != new_f.type:
            safe = is_safe_output_type_change(old_f.type, new_f.type)
            comparison.field_changes.append(Change(
                type=ChangeKind.FIELD_TYPE_CHANGED, path=path,
                criticality=NON_BREAKING if safe else BREAKING,
                message=f"Field '{path}' changed type from '{old_f.type}' to '{new_f.type}'",
                meta={**meta, "old_type": old_f.type, "new_type": new_f.type, "is_safe": safe},
            ))
        if old_f.description != new_f.description:
            comparison.field_changes.append(Change(
                type=ChangeKind.FIELD_DESCRIPTION_CHANGED, path=path, criticality=NON_BREAKING,
                message=f"Field '{path}' description changed",
                meta={**meta, "old_description": old_f.description, "new_description": new_f.description},
            ))
        if not old_f.is_deprecated and new_f.is_deprecated:
            comparison.field_changes.append(Change(
                type=ChangeKind.FIELD_DEPRECATION_ADDED, path=path, criticality=NON_BREAKING,
                message=f"Field '{path}' is deprecated", meta={**meta, "deprecation_reason": new_f.deprecation_reason},
            ))
        elif old_f.is_deprecated and not new_f.is_deprecated:
            comparison.field_changes.append(Change(
                type=ChangeKind.FIELD_DEPRECATION_REMOVED, path=path, criticality=NON_BREAKING,
                message=f"Field '{path}' is no longer deprecated", meta=meta,
            ))
        elif old_f.is_deprecated and old_f.deprecation_reason != new_f.deprecation_reason:
            comparison.field_changes.append(Change(
                type=ChangeKind.FIELD_DEPRECATION_REASON_CHANGED, path=path, criticality=NON_BREAKING,
                message=f"Deprecation reason on field '{path}' changed",
                meta={**meta, "old_reason": old_f.deprecation_reason, "new_reason": new_f.deprecation_reason},
            ))
        self._compare_arguments(type_name, old_f.name, old_f.args, new_f.args, comparison)

    def _compare_arguments(self, type_name: str, field_name: str, old_args: list[ArgumentInfo], new_args: list[ArgumentInfo], comparison: SchemaComparison):
        path = f"{type_name}.{field_name}"
        old_d = {a.name: a for a in old_args}
        new_d = {a.name: a for a in new_args}
        for n, arg in new_d.items():
            if n not in old_d:
                required = arg.is_required
                comparison.argument_changes.append(Change(
                    type=ChangeKind.FIELD_ARGUMENT_ADDED, path=f"{path}({n})",
                    criticality=Criticality(CriticalityLevel.BREAKING, "Adding a required argument to an existing field is a breaking change") if required else NON_BREAKING,
                    message=f"Argument '{n}: {arg.type}' added to field '{path}'",
                    meta={"type_name": type_name, "field_name": field_name, "argument_name": n, "argument_type": arg.type, "has_default": arg.has_default},
                ))
        for n, arg in old_d.items():
            if n not in new_d:
                comparison.argument_changes.append(Change(
                    type=ChangeKind.FIELD_ARGUMENT_REMOVED, path=f"{path}({n})", criticality=BREAKING,
                    message=f"Argument '{n}: {arg.type}' was removed from field '{path}'",
                    meta={"type_name": type_name, "field_name": field_name, "argument_name": n, "argument_type": arg.type},
                ))
        for n, old_a in old_d.items():
            new_a = new_d.get(n)
            if new_a is None:
                continue
            meta = {"type_name": type_name, "field_name": field_name, "argument_name": n}
            if old_a.type != new_a.type:
                safe = is_safe_input_type_change(old_a.type, new_a.type)
                comparison.argument_changes.append(Change(
                    type=ChangeKind.FIELD_ARGUMENT_TYPE_CHANGED, path=f"{path}({n})",
                    criticality=NON_BREAKING if safe else BREAKING,
                    message=f"Type for argument '{n}' on field '{path}' changed from '{old_a.type}' to '{new_a.type}'",
                    meta={**meta, "old_type": old_a.type, "new_type": new_a.type, "is_safe": safe},
                ))
            if old_a.default_value != new_a.default_value:
                comparison.argument_changes.append(Change(
                    type=ChangeKind.FIELD_ARGUMENT_DEFAULT_CHANGED, path=f"{path}({n})",
                    criticality=Criticality(CriticalityLevel.DANGEROUS, "Changing the default value of an argument may change runtime behaviour"),
                    message=f"Default value for argument '{n}' on field '{path}' changed from '{old_a.default_value}' to '{new_a.default_value}'",
                    meta={**meta, "old_default": old_a.default_value, "new_default": new_a.default_value},
                ))

    def _compare_enum_values(self, old_t: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        old_v = {v.name: v for v in old_t.enum_values}
        new_v = {v.name: v for v in new_type.enum_values}
        for n in new_v:
            if n not in old_v:
                comparison.type_changes.append(Change(
                    type=ChangeKind.ENUM_VALUE_ADDED, path=f"{old_t.name}.{n}",
                    criticality=Criticality(CriticalityLevel.DANGEROUS, "Clients may not handle a new enum value"),
                    message=f"Enum value '{n}' was added to enum '{old_t.name}'",
                    meta={"type_name": old_t.name, "value_name": n},
                ))
        for n in old_v:
            if n not in new_v:
                comparison.type_changes.append(Change(
                    type=ChangeKind.ENUM_VALUE_REMOVED, path=f"{old_t.name}.{n}", criticality=BREAKING,
                    message=f"Enum value '{n}' was removed from enum '{old_t.name}'",
                    meta={"type_name": old_t.name, "value_name": n},
                ))
        for n, old_value in old_v.items():
            new_value = new_v.get(n)
            if new_value is None or old_value.is_deprecated == new_value.is_deprecated:
                continue
            kind = ChangeKind.ENUM_VALUE_DEPRECATION_ADDED if new_value.is_deprecated else ChangeKind.ENUM_VALUE_DEPRECATION_REMOVED
            comparison.type_changes.append(Change(
                type=kind, path=f"{old_t.name}.{n}", criticality=NON_BREAKING,
                message=f"Enum value '{old_t.name}.{n}' {'is deprecated' if new_value.is_deprecated else 'is no longer deprecated'}",
                meta={"type_name": old_t.name, "value_name": n, "deprecation_reason": new_value.deprecation_reason},
            ))

    def _compare_input_fields(self, old_t: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        old_f = {f.name: f for f in old_t.input_fields}
        new_f = {f.name: f for f in new_type.input_fields}
        for n, f in new_f.items():
            if n not in old_f:
                required = f.is_required
                comparison.field_changes.append(Change(
                    type=ChangeKind.INPUT_FIELD_ADDED, path=f"{old_t.name}.{n}",
                    criticality=Criticality(CriticalityLevel.BREAKING, "Adding a required input field is a breaking change") if required else NON_BREAKING,
                    message=f"Input field '{n}' of type '{f.type}' was added to input object type '{old_t.name}'",
                    meta={"type_name": old_t.name, "field_name": n, "field_type": f.type, "is_required": required},
                ))
        for n, f in old_f.items():
            if n not in new_f:
                comparison.field_changes.append(Change(
                    type=ChangeKind.INPUT_FIELD_REMOVED, path=f"{old_t.name}.{n}", criticality=BREAKING,
                    message=f"Input field '{n}' was removed from input object type '{old_t.name}'",
                    meta={"type_name": old_t.name, "field_name": n, "field_type": f.type},
                ))
        for n, old_field in old_f.items():
            new_field = new_f.get(n)
            if new_field is None:
                continue
            path = f"{old_t.name}.{n}"
            meta = {"type_name": old_t.name, "field_name": n}
            if old_field.type != new_field.type:
                safe = is_safe_input_type_change(old_field.type, new_field.type)
                comparison.field_changes.append(Change(
                    type=ChangeKind.INPUT_FIELD_TYPE_CHANGED, path=path,
                    criticality=NON_BREAKING if safe else BREAKING,
                    message=f"Input field '{path}' changed type from '{old_field.type}' to '{new_field.type}'",
                    meta={**meta, "old_type": old_field.type, "new_type": new_field.type, "is_safe": safe},
                ))
            if old_field.default_value != new_field.default_value:
                comparison.field_changes.append(Change(
                    type=ChangeKind.INPUT_FIELD_DEFAULT_VALUE_CHANGED, path=path,
                    criticality=Criticality(CriticalityLevel.DANGEROUS, "Changing the default value of an input field may change runtime behaviour"),
                    message=f"Input field '{path}' default value changed from '{old_field.default_value}' to '{new_field.default_value}'",
                    meta={**meta, "old_default": old_field.default_value, "new_default": new_field.default_value},
                ))

    def _compare_interfaces(self, old_t: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        for n in new_type.interfaces:
            if n not in old_t.interfaces:
                comparison.type_changes.append(Change(
                    type=ChangeKind.OBJECT_TYPE_INTERFACE_ADDED, path=old_t.name,
                    criticality=Criticality(CriticalityLevel.DANGEROUS, "Adding an interface can change which fragments apply"),
                    message=f"'{old_t.name}' object implements '{n}' interface",
                    meta={"type_name": old_t.name, "interface_name": n},
                ))
        for n in old_t.interfaces:
            if n not in new_type.interfaces:
                comparison.type_changes.append(Change(
                    type=ChangeKind.OBJECT_TYPE_INTERFACE_REMOVED, path=old_t.name, criticality=BREAKING,
                    message=f"'{old_t.name}' object type no longer implements '{n}' interface",
                    meta={"type_name": old_t.name, "interface_name": n},
                ))

    def _compare_union_types(self, old_t: TypeInfo, new_type: TypeInfo, comparison: SchemaComparison):
        for n in new_type.possible_types:
            if n not in old_t.possible_types:
                comparison.type_changes.append(Change(
                    type=ChangeKind.UNION_MEMBER_ADDED, path=old_t.name,
                    criticality=Criticality(CriticalityLevel.DANGEROUS, "Clients may not handle a new union member"),
                    message=f"Member '{n}' was added to union type '{old_t.name}'",
                    meta={"type_name": old_t.name, "member_name": n},
                ))
        for n in old_t.possible_types:
            if n not in new_type.possible_types:
                comparison.type_changes.append(Change(
                    type=ChangeKind.UNION_MEMBER_REMOVED, path=old_t.name, criticality=BREAKING,
                    message=f"Member '{n}' was removed from union type '{old_t.name}'",
                    meta={"type_name": old_t.name, "member_name": n},
                ))

    def _compare_root_types(self, old_s: SchemaIntrospection, new_s: SchemaIntrospection, comparison: SchemaComparison):
        kinds = {
            "query": ChangeKind.SCHEMA_QUERY_TYPE_CHANGED,
            "mutation": ChangeKind.SCHEMA_MUTATION_TYPE_CHANGED,
            "subscription": ChangeKind.SCHEMA_SUBSCRIPTION_TYPE_CHANGED,
        }
        for operation, kind in kinds.items():
            old_root, new_root = old_s.root_type(operation), new_s.root_type(operation)
            # A root appearing for the first time is covered by its TYPE_ADDED
            if old_root is None or old_root == new_root:
                continue
            comparison.type_changes.append(Change(
                type=kind, path=f"schema.{operation}", criticality=BREAKING,
                message=f"Schema {operation} root type changed from '{old_root}' to '{new_root}'",
                meta={"operation": operation, "old_type": old_root, "new_type": new_root},
            ))

    def _compare_directives(self, old_s: SchemaIntrospection, new_s: SchemaIntrospection, comparison: SchemaComparison):
        old_d, new_d = old_s.directives, new_s.directives
        for n in new_d:
            if n not in old_d:
                comparison.directive_changes.append(Change(type=ChangeKind.DIRECTIVE_ADDED, path=f"@{n}", criticality=NON_BREAKING, message=f"Directive '{n}' was added", meta={"directive_name": n}))
        for n in old_d:
            if n not in new_d:
                comparison.directive_changes.append(Change(type=ChangeKind.DIRECTIVE_REMOVED, path=f"@{n}", criticality=BREAKING, message=f"Directive '{n}' was removed", meta={"directive_name": n}))
        for n, old_directive in old_d.items():
            new_directive = new_d.get(n)
            if new_directive is None:
                continue
            for location in new_directive.locations:
                if location not in old_directive.locations:
                    comparison.directive_changes.append(Change(type=ChangeKind.DIRECTIVE_LOCATION_ADDED, path=f"@{n}", criticality=NON_BREAKING, message=f"Location '{location}' was added to directive '{n}'", meta={"directive_name": n, "location": location}))
            for location in old_directive.locations:
                if location not in new_directive.locations:
                    comparison.directive_changes.append(Change(type=ChangeKind.DIRECTIVE_LOCATION_REMOVED, path=f"@{n}", criticality=BREAKING, message=f"Location '{location}' was removed from directive '{n}'", meta={"directive_name": n, "location": location}))

    def _calculate_summary(self, comparison: SchemaComparison):
        all_c = comparison.get_all_changes()
        comparison.total_changes = len(all_c)
        comparison.breaking_changes = len(comparison.get_breaking_changes())
        comparison.dangerous_changes = len(comparison.get_dangerous_changes())
        comparison.non_breaking_changes = comparison.total_changes - comparison.breaking_changes - comparison.dangerous_changes
        comparison.migration_required = comparison.breaking_changes > 0


def diff(before: Any, after: Any) -> list[Change]:
    """
    Ordered list of changes turning ``before`` into ``after``.

    Raises:
        SchemaDiffError: when either side is not a GraphQLSchema.
    """
    return SchemaComparator().compare(before, after).get_all_changes()
