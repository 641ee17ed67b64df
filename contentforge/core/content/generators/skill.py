"""스킬 Generator (skill_definition)"""

from __future__ import annotations

from collections.abc import Mapping

from contentforge.core.content.generators.base import GeneratorContext, field_failed
from contentforge.core.content.models import SkillType
from contentforge.core.fields import FieldRule, FieldType
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()

REQUIRED_FIELDS = {
    "identifier": True,
    "name": True,
    "description": True,
    "icon": True,
    "row": True,
    "column": True,
    "required_skill_types": False,
    "start_learned": False,
    "partial_capacity_with_limited_general_ability": False,
}


def generate_skill_definition(ctx: GeneratorContext, document: Mapping) -> None:
    skill_module = ctx.module("skill")
    accessor = ctx.accessor

    definition = accessor.get_table(document, ctx.tag("skill_definition"))
    if definition is None:
        return
    skills = accessor.get_table(definition, "skills")
    if skills is None:
        return

    entries = skills.values() if isinstance(skills, dict) else skills
    for entry in entries:
        if not isinstance(entry, Mapping):
            accessor.log_wrong_type("skills", entry, FieldType.TABLE)
            continue

        description = entry.get("description")
        skill = entry.get("skill")
        if isinstance(description, Mapping):
            logger.info("  %s", description.get("identifier"))

        data = accessor.compile(
            REQUIRED_FIELDS,
            {
                "identifier": accessor.get_field(
                    description,
                    "identifier",
                    FieldRule(type=FieldType.STRING, not_in_table=skill_module.types),
                ),
                "name": accessor.get_field(description, "name"),
                "description": accessor.get_field(description, "description"),
                "icon": accessor.get_field(description, "icon"),
                "row": accessor.get_field(
                    skill, "row", FieldRule(type=FieldType.NUMBER, with_=int)
                ),
                "column": accessor.get_field(
                    skill, "column", FieldRule(type=FieldType.NUMBER, with_=int)
                ),
                "required_skill_types": accessor.get_table(
                    skill,
                    "requiredSkills",
                    FieldRule(
                        default=[],
                        map=lambda key: accessor.get_type_index(
                            skill_module.types, key, "Skill"
                        ),
                    ),
                ),
                "start_learned": accessor.get_field(
                    skill, "startLearned", FieldRule(type=FieldType.BOOLEAN, default=False)
                ),
                "partial_capacity_with_limited_general_ability": accessor.get_field(
                    skill,
                    "impactedByLimitedGeneralAbility",
                    FieldRule(type=FieldType.BOOLEAN, default=False),
                ),
            },
        )
        if data is None:
            continue
        # 선언된 선행 스킬이 하나라도 없으면 이 스킬만 버린다
        if field_failed(skill, "requiredSkills", data["required_skill_types"]):
            continue

        identifier = data.pop("identifier")
        skill_module.add_skill(identifier, SkillType(**data))
