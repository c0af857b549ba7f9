"""
Description augmentations.

An augmentation prepends, appends or replaces the description of a type or
field. Top-level keys apply to unversioned schemas; ``versions`` maps version
strings to overrides that are merged with the top-level keys::

    {
        "on": "Query.users",
        "placement": "after",
        "content": "Requires the `users:read` scope.",
        "versions": {"2.0.0": {"content": "Requires the `users` scope."}},
    }

Problems never fail the load; they are returned as diagnostics.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from graphql import GraphQLSchema, is_input_object_type, is_interface_type, is_object_type

from ..core.definition import is_user_type
from ..core.version import Version
from .diagnostics import Diagnostic

logger = logging.getLogger(__name__)

PLACEMENTS = ("before", "after", "over")


@dataclass(frozen=True)
class VersionCoverage:
    """Which schemas an augmentation config applies to; None means unversioned."""
    version: Optional[Version] = None

    @classmethod
    def unversioned(cls) -> "VersionCoverage":
        return cls()

    @classmethod
    def single(cls, version: Union[Version, str]) -> "VersionCoverage":
        return cls(Version.decode(version))

    @property
    def is_unversioned(self) -> bool:
        return self.version is None

    def matches(self, version: Optional[Version]) -> bool:
        return self.version == version


@dataclass(frozen=True)
class AugmentationConfig:
    on: str
    placement: str
    content: str

    @property
    def type_name(self) -> str:
        return self.on.split(".", 1)[0]

    @property
    def field_name(self) -> Optional[str]:
        parts = self.on.split(".", 1)
        return parts[1] if len(parts) > 1 else None


@dataclass
class Augmentation:
    coverage: Dict[VersionCoverage, AugmentationConfig] = field(default_factory=dict)

    def config_for(self, version: Optional[Version]) -> Optional[AugmentationConfig]:
        for coverage, config in self.coverage.items():
            if coverage.matches(version):
                return config
        return None


def normalize_augmentation(data: Dict[str, Any]) -> Optional[Augmentation]:
    """
    Normalize user input into an Augmentation.

    Returns None when no complete configuration can be built. Without
    ``versions`` the top-level ``on``/``placement``/``content`` must all be
    set; with ``versions`` each entry is merged with the top-level keys and
    incomplete entries are dropped.
    """
    if not isinstance(data, dict):
        return None

    versions = data.get("versions") or {}
    augmentation = Augmentation()
    if not versions:
        if not (data.get("on") and data.get("placement") and data.get("content")):
            return None
        augmentation.coverage[VersionCoverage.unversioned()] = AugmentationConfig(
            on=data["on"], placement=data["placement"], content=data["content"]
        )
        return augmentation

    for version_name, overrides in versions.items():
        overrides = overrides or {}
        on = overrides.get("on") or data.get("on")
        placement = overrides.get("placement") or data.get("placement")
        content = overrides.get("content") or data.get("content")
        if not (on and placement and content):
            continue
        augmentation.coverage[VersionCoverage.single(str(version_name))] = AugmentationConfig(
            on=on, placement=placement, content=content
        )
    return augmentation if augmentation.coverage else None


def mutate_description(existing: Optional[str], config: AugmentationConfig) -> str:
    """
    Combine an existing description with augmentation content.

    Examples:
        >>> mutate_description("Users.", AugmentationConfig("Query.users", "after", "Paginated."))
        'Users.\\n\\nPaginated.'
    """
    if config.placement == "over" or not existing:
        return config.content
    if config.placement == "before":
        return f"{config.content}\n\n{existing}"
    return f"{existing}\n\n{config.content}"


def apply_augmentation(
    schema: GraphQLSchema, config: AugmentationConfig, version: Optional[Version] = None
) -> Optional[Diagnostic]:
    """Apply one config to ``schema``; a diagnostic is returned instead of raising."""
    context = {"on": config.on, "version": version.encode() if version else None}
    if config.placement not in PLACEMENTS:
        return Diagnostic(
            code="augmentation_invalid_placement",
            message=f"Unknown augmentation placement '{config.placement}' for '{config.on}'",
            context={**context, "placement": config.placement},
        )
    if config.on.count(".") > 1 or not config.type_name:
        return Diagnostic(
            code="augmentation_invalid_path",
            message=f"Augmentation target '{config.on}' must be 'Type' or 'Type.field'",
            context=context,
        )

    target_type = schema.get_type(config.type_name)
    if target_type is None or not is_user_type(target_type):
        return Diagnostic(
            code="augmentation_type_not_found",
            message=f"Augmentation target type '{config.type_name}' does not exist in the schema",
            context=context,
        )

    field_name = config.field_name
    if field_name is None:
        target_type.description = mutate_description(target_type.description, config)
        return None

    if not (is_object_type(target_type) or is_interface_type(target_type) or is_input_object_type(target_type)):
        return Diagnostic(
            code="augmentation_field_not_found",
            message=f"Type '{config.type_name}' has no fields to augment",
            context=context,
        )
    target_field = target_type.fields.get(field_name)
    if target_field is None:
        return Diagnostic(
            code="augmentation_field_not_found",
            message=f"Augmentation target field '{config.on}' does not exist",
            context=context,
        )
    target_field.description = mutate_description(target_field.description, config)
    return None


def apply_augmentations(
    schema: GraphQLSchema,
    augmentations: Iterable[Dict[str, Any]],
    version: Optional[Version] = None,
) -> List[Diagnostic]:
    """
    Apply every augmentation that covers ``version`` (None for unversioned
    schemas) and collect the problems found.
    """
    diagnostics: List[Diagnostic] = []
    for index, data in enumerate(augmentations or []):
        augmentation = normalize_augmentation(data)
        if augmentation is None:
            logger.warning("Skipping invalid augmentation configuration at index %s", index)
            diagnostics.append(Diagnostic(
                code="augmentation_invalid",
                message="Augmentation needs 'on', 'placement' and 'content' (directly or per version)",
                context={"index": index},
            ))
            continue
        config = augmentation.config_for(version)
        if config is None:
            continue
        diagnostic = apply_augmentation(schema, config, version)
        if diagnostic is not None:
            diagnostic.context["index"] = index
            diagnostics.append(diagnostic)
    return diagnostics
