"""머티리얼 Generator (material_definition)

한 문서에 여러 머티리얼이 들어 있고 각각 독립적으로 검증/등록된다.
"""

from __future__ import annotations

from collections.abc import Mapping

from contentforge.core.content.generators.base import GeneratorContext
from contentforge.core.fields import OPTIONAL, FieldRule, FieldType
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()

REQUIRED_FIELDS = {
    "identifier": True,
    "color": True,
    "roughness": True,
    "metal": False,
}


def generate_material_definition(ctx: GeneratorContext, document: Mapping) -> None:
    material_module = ctx.module("material")
    accessor = ctx.accessor

    definition = accessor.get_table(document, ctx.tag("material_definition"))
    if definition is None:
        return
    materials = accessor.get_table(definition, "materials")
    if materials is None:
        return

    siblings = materials.values() if isinstance(materials, dict) else materials
    for material in siblings:
        if not isinstance(material, Mapping):
            accessor.log_wrong_type("materials", material, FieldType.TABLE)
            continue

        logger.info("  %s", material.get("identifier"))

        data = accessor.compile(
            REQUIRED_FIELDS,
            {
                "identifier": accessor.get_field(
                    material,
                    "identifier",
                    FieldRule(type=FieldType.STRING, not_in_table=material_module.types),
                ),
                "color": accessor.get_vec3(material, "color"),
                "roughness": accessor.get_field(
                    material, "roughness", FieldRule(type=FieldType.NUMBER)
                ),
                "metal": accessor.get_field(
                    material, "metal", OPTIONAL.merged(type=FieldType.NUMBER)
                ),
            },
        )
        if data is None:
            continue

        material_module.add_material(
            data["identifier"], data["color"], data["roughness"], data["metal"]
        )
