"""리소스 Generator (object_definition)"""

from __future__ import annotations

from collections.abc import Mapping

from contentforge.core.content.generators.base import GeneratorContext, split_definition
from contentforge.core.content.models import ResourceType
from contentforge.core.fields import OPTIONAL, FieldRule, FieldType, coerce_to_string
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()


def generate_resource_definition(ctx: GeneratorContext, document: Mapping) -> None:
    type_maps = ctx.module("typeMaps")
    resource_module = ctx.module("resource")
    accessor = ctx.accessor

    definition = split_definition(ctx, document, "object_definition")
    if definition is None:
        return
    identifier = definition.identifier
    description = definition.description
    components = definition.components

    # resource_link가 있으면 기존 리소스를 재사용 - 새 리소스 없음
    link = ctx.component(components, "resource_link")
    if link is not None:
        linked = link.get("identifier") if isinstance(link, Mapping) else link
        logger.info(
            "GameObject %s linked to resource %s. No unique resource created.",
            identifier,
            coerce_to_string(linked),
        )
        return

    logger.info("  %s", identifier)

    name = accessor.get_field(description, "name", FieldRule(type=FieldType.STRING))
    plural = accessor.get_field(description, "plural", FieldRule(type=FieldType.STRING))
    if name is None or plural is None:
        return

    resource = ResourceType(
        name=name,
        plural=plural,
        display_game_object_type_index=type_maps.index_map("gameObject").get(identifier),
    )

    food = ctx.component(components, "food")
    if food is not None:
        resource.food_value = accessor.get_field(
            food, "value", FieldRule(type=FieldType.NUMBER)
        )
        resource.food_portion_count = accessor.get_field(
            food, "portions", FieldRule(type=FieldType.NUMBER)
        )
        resource.food_poisoning_chance = accessor.get_field(
            food, "food_poison_chance", OPTIONAL.merged(type=FieldType.NUMBER)
        )
        resource.default_to_eating_disabled = accessor.get_field(
            food, "default_disabled", OPTIONAL.merged(type=FieldType.BOOLEAN)
        )

    decoration = ctx.component(components, "decoration")
    if decoration is not None:
        enabled = accessor.get_field(
            decoration, "enabled", FieldRule(type=FieldType.BOOLEAN, default=True)
        )
        resource.disallows_decoration_placing = not enabled

    accessor.add_props(resource.props, description, "props")

    # 스토리지가 아직 없을 수 있으므로 이름으로 기록해 둔다
    storage_link = ctx.component(components, "storage_link")
    if storage_link is not None:
        storage_identifier = accessor.get_field(
            storage_link, "identifier", FieldRule(type=FieldType.STRING)
        )
        ctx.storage_links.register(identifier, storage_identifier)

    resource_module.add_resource(identifier, resource)
    accessor.debug(identifier, document, resource)
