"""진화 오브젝트 Generator (object_definition + evolving_object 컴포넌트)

예: 오렌지가 일정 시간 뒤 썩은 오렌지로 바뀐다.
"""

from __future__ import annotations

from collections.abc import Mapping

from contentforge.core.content.generators.base import (
    GeneratorContext,
    field_failed,
    split_definition,
)
from contentforge.core.content.models import EvolvingObjectType
from contentforge.core.fields import FieldRule, FieldType
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()


def generate_evolving_object(ctx: GeneratorContext, document: Mapping) -> None:
    evolving_module = ctx.module("evolvingObject")
    game_object_module = ctx.module("gameObject")
    accessor = ctx.accessor

    definition = split_definition(ctx, document, "object_definition")
    if definition is None:
        return

    # 컴포넌트가 없으면 진화에 참여하지 않는 문서 - 정상
    evolving = ctx.component(definition.components, "evolving_object")
    if evolving is None:
        return

    identifier = definition.identifier
    logger.info("  %s", identifier)

    # min_time은 일(day) 단위
    min_time = accessor.get_field(evolving, "min_time", FieldRule(type=FieldType.NUMBER))
    category_index = accessor.get_field_as_index(
        evolving, "category", evolving_module.categories
    )
    to_types = accessor.get_table(
        evolving,
        "transform_to",
        FieldRule(
            optional=True,
            map=lambda target: accessor.get_type_index(
                game_object_module.types, target, "Game Object"
            ),
        ),
    )
    if field_failed(evolving, "transform_to", to_types):
        return

    data = accessor.compile(
        {"min_time": True, "category_index": True},
        {"min_time": min_time, "category_index": category_index},
    )
    if data is None:
        return

    entry = EvolvingObjectType(
        min_time=evolving_module.day_length * min_time,
        category_index=category_index,
        to_types=to_types,
    )
    evolving_module.add_evolving_object(identifier, entry)
    accessor.debug(identifier, document, entry)
