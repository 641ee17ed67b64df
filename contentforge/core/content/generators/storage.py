"""스토리지 Generator (storage_definition)

리소스 목록은 전방 참조 테이블(StorageLinkTable)에서 자기 식별자로 꺼내
이미 할당된 리소스 인덱스로 변환한다.
"""

from __future__ import annotations

import random
from collections.abc import Mapping

from contentforge.core.content.generators.base import (
    GeneratorContext,
    default_index,
    split_definition,
)
from contentforge.core.content.models import StorageBox, StorageType
from contentforge.core.fields import FieldRule, FieldType, map_values
from contentforge.core.geometry import (
    MAT3_IDENTITY,
    ZERO,
    Mat3,
    Vec3,
    mat3_rotate,
    vec3_m_to_p,
)
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()

DEFAULT_STORAGE_SIZE = Vec3(0.5, 0.5, 0.5)
DEFAULT_RANDOM_ROTATION_WEIGHT = 2.0


def resolve_storage_resources(ctx: GeneratorContext, storage_identifier: str) -> list[int]:
    """storage_identifier에 링크된 콘텐츠 -> 리소스 인덱스 (선언 순서)"""
    identifiers = ctx.storage_links.consume(storage_identifier)
    if not identifiers:
        logger.warning(
            "Storage %s is being generated with zero items. This is most likely a mistake.",
            storage_identifier,
        )
        return []

    resources = ctx.module("resource").types
    return map_values(
        identifiers,
        lambda identifier: ctx.accessor.get_type_index(resources, identifier, "Resource"),
    )


def make_rotation_function(weight: float, axis: Vec3):
    def rotation_function(unique_id: str, seed: int) -> Mat3:
        random_value = random.Random(f"{unique_id}:{seed}").random()
        return mat3_rotate(MAT3_IDENTITY, random_value * weight, axis)

    return rotation_function


def generate_storage_object(ctx: GeneratorContext, document: Mapping) -> None:
    storage_module = ctx.module("storage")
    type_maps = ctx.module("typeMaps")
    accessor = ctx.accessor

    definition = split_definition(ctx, document, "storage_definition")
    if definition is None:
        return
    identifier = definition.identifier
    logger.info("  %s", identifier)

    storage_component = accessor.get_table(definition.components, ctx.tag("storage"))
    if storage_component is None:
        return
    carry_component = accessor.get_table(
        definition.components, ctx.tag("carry"), FieldRule(default={})
    )

    name = accessor.get_field(definition.description, "name", FieldRule(type=FieldType.STRING))
    if name is None:
        return

    random_rotation_weight = accessor.get_field(
        storage_component,
        "random_rotation_weight",
        FieldRule(type=FieldType.NUMBER, default=DEFAULT_RANDOM_ROTATION_WEIGHT),
    )
    rotation = accessor.get_vec3(storage_component, "rotation", FieldRule(default=ZERO))

    carry_counts = accessor.get_table(carry_component, "carry_count", FieldRule(default={}))
    carry_rotation_constant = accessor.get_field(
        carry_component, "rotation_constant", FieldRule(type=FieldType.NUMBER, default=1)
    )
    carry_rotation_axis = accessor.get_vec3(carry_component, "rotation", FieldRule(default=ZERO))

    storage = StorageType(
        name=name,
        display_game_object_type_index=accessor.get_field_as_index(
            storage_component,
            "preview_object",
            type_maps.index_map("gameObject"),
            FieldRule(optional=True),
        ),
        resources=resolve_storage_resources(ctx, identifier),
        storage_box=StorageBox(
            size=accessor.get_vec3(
                storage_component, "size", FieldRule(default=DEFAULT_STORAGE_SIZE)
            ),
            rotation_function=make_rotation_function(
                random_rotation_weight or 0.0, rotation or ZERO
            ),
            dont_rotate_to_fit_below_surface=accessor.get_field(
                storage_component,
                "rotate_to_fit_below_surface",
                FieldRule(type=FieldType.BOOLEAN, default=True),
            ),
            place_object_offset=vec3_m_to_p(
                accessor.get_vec3(storage_component, "offset", FieldRule(default=ZERO))
                or ZERO
            ),
        ),
        max_carry_count=accessor.get_field(
            carry_counts, "normal", FieldRule(type=FieldType.NUMBER, default=1)
        ),
        max_carry_count_limited_ability=accessor.get_field(
            carry_counts, "limited_ability", FieldRule(type=FieldType.NUMBER, default=1)
        ),
        max_carry_count_for_running=accessor.get_field(
            carry_counts, "running", FieldRule(type=FieldType.NUMBER, default=1)
        ),
        carry_stack_type=accessor.get_field_as_index(
            carry_component,
            "stack_type",
            storage_module.stack_types,
            FieldRule(default=default_index(storage_module.stack_types, "standard")),
        ),
        carry_type=accessor.get_field_as_index(
            carry_component,
            "carry_type",
            storage_module.carry_types,
            FieldRule(default=default_index(storage_module.carry_types, "standard")),
        ),
        carry_offset=accessor.get_vec3(carry_component, "offset", FieldRule(default=ZERO))
        or ZERO,
        carry_rotation=mat3_rotate(
            MAT3_IDENTITY,
            carry_rotation_constant if carry_rotation_constant is not None else 1,
            carry_rotation_axis or ZERO,
        ),
    )

    required = {
        "size": True,
        "max_carry_count": True,
        "max_carry_count_limited_ability": True,
        "max_carry_count_for_running": True,
        "carry_stack_type": True,
        "carry_type": True,
    }
    checked = accessor.compile(
        required,
        {
            "size": storage.storage_box.size,
            "max_carry_count": storage.max_carry_count,
            "max_carry_count_limited_ability": storage.max_carry_count_limited_ability,
            "max_carry_count_for_running": storage.max_carry_count_for_running,
            "carry_stack_type": storage.carry_stack_type,
            "carry_type": storage.carry_type,
        },
    )
    if checked is None or random_rotation_weight is None:
        return

    accessor.add_props(storage.props, definition.description, "props")

    storage_module.add_storage(identifier, storage)
    accessor.debug(identifier, document, storage)
