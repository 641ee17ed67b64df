"""게임 오브젝트 Generator (object_definition)"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from contentforge.core.content.generators.base import GeneratorContext, split_definition
from contentforge.core.content.models import GameObjectType, MarkerPosition
from contentforge.core.fields import FieldAccessor, FieldRule, FieldType
from contentforge.core.geometry import Vec3, vec3_m_to_p
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()

DEFAULT_MARKER_OFFSET = Vec3(0.0, 0.3, 0.0)


def default_marker_positions() -> list[MarkerPosition]:
    return [MarkerPosition(world_offset=vec3_m_to_p(DEFAULT_MARKER_OFFSET))]


def _marker_position(accessor: FieldAccessor, marker: Any) -> Optional[MarkerPosition]:
    offset = accessor.get_vec3(marker, "offset")
    if offset is None:
        return None
    return MarkerPosition(world_offset=vec3_m_to_p(offset))


def generate_game_object(ctx: GeneratorContext, document: Mapping) -> None:
    game_object_module = ctx.module("gameObject")
    resource_module = ctx.module("resource")
    accessor = ctx.accessor

    definition = split_definition(ctx, document, "object_definition")
    if definition is None:
        return
    identifier = definition.identifier
    description = definition.description
    components = definition.components
    logger.info("  %s", identifier)

    object_component = accessor.get_table(components, ctx.tag("object"))
    if object_component is None:
        return

    # resource_link가 있으면 링크된 리소스를 사용
    resource_identifier = identifier
    link = ctx.component(components, "resource_link")
    if link is not None:
        resource_identifier = accessor.get_field(
            link, "identifier", FieldRule(type=FieldType.STRING)
        )

    # 리소스를 못 찾으면 이 문서만 건너뛴다
    resource_index = accessor.get_type_index(
        resource_module.types, resource_identifier, "Resource"
    )
    if resource_index is None:
        return

    required = {
        "name": True,
        "plural": True,
        "model_name": True,
        "scale": True,
        "has_physics": True,
        "marker_positions": True,
    }
    data = accessor.compile(
        required,
        {
            "name": accessor.get_field(description, "name", FieldRule(type=FieldType.STRING)),
            "plural": accessor.get_field(
                description, "plural", FieldRule(type=FieldType.STRING)
            ),
            "model_name": accessor.get_field(
                object_component, "model", FieldRule(type=FieldType.STRING)
            ),
            "scale": accessor.get_field(
                object_component, "scale", FieldRule(type=FieldType.NUMBER, default=1.0)
            ),
            "has_physics": accessor.get_field(
                object_component,
                "physics",
                FieldRule(type=FieldType.BOOLEAN, default=True),
            ),
            "marker_positions": accessor.get_table(
                object_component,
                "marker_positions",
                FieldRule(
                    default=default_marker_positions(),
                    map=lambda marker: _marker_position(accessor, marker),
                ),
            ),
        },
    )
    if data is None:
        return

    game_object = GameObjectType(resource_type_index=resource_index, **data)
    accessor.add_props(game_object.props, description, "props")

    game_object_module.add_game_object(identifier, game_object)
    accessor.debug(identifier, document, game_object)
