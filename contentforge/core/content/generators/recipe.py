"""레시피 Generator (recipe_definition)

구성:
- description: identifier(고유), name, plural, summary
- recipe: preview_object, classification(기본 craft), is_food_prep
- output: output_by_object (없으면 has_no_output)
- requirements: skills(첫째 필수, 둘째 발견 전 비활성), craft_area_groups, tools
- build_sequence: build_sequence_model, build_sequence, craft_sequence

등록 후 제작 구역 그룹마다 CraftPanelListing에 레시피 인덱스를 추가한다.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from contentforge.core.content.generators.base import (
    GeneratorContext,
    default_index,
    field_failed,
    split_definition,
)
from contentforge.core.content.models import (
    AfterAction,
    CraftableType,
    RequiredResource,
    SkillRequirements,
)
from contentforge.core.fields import OPTIONAL, FieldRule, FieldType, is_empty
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()

REQUIRED_FIELDS = {
    "identifier": True,
    "name": True,
    "plural": True,
    "summary": True,
    "icon_game_object_type": True,
    "classification": True,
    "is_food_preparation": True,
    "output_arrays_by_resource_object_type": True,
    "has_no_output": True,
    "required_craft_area_groups": True,
    "required_tools": True,
    "required_resources": True,
    "skills": False,
    "disabled_until_additional_skill_type_discovered": False,
    "in_progress_build_model": False,
    "build_sequence": False,
}


class _RecipeBuilder:
    """레시피 하나를 만드는 동안 모듈/접근자를 묶어 둔다"""

    def __init__(self, ctx: GeneratorContext) -> None:
        self.ctx = ctx
        self.accessor = ctx.accessor
        self.game_object = ctx.module("gameObject")
        self.constructable = ctx.module("constructable")
        self.craftable = ctx.module("craftable")
        self.skill = ctx.module("skill")
        self.craft_area_group = ctx.module("craftAreaGroup")
        self.action = ctx.module("action")
        self.action_sequence = ctx.module("actionSequence")
        self.tool = ctx.module("tool")
        self.resource = ctx.module("resource")

    def game_object_index(self, key: Any) -> Optional[int]:
        return self.accessor.get_type_index(self.game_object.types, key, "Game Object")

    # === output ===

    def outputs_by_object(self, entries: Any) -> Optional[dict[int, list[int]]]:
        """[{input, output: [...]}] -> {입력 오브젝트 인덱스: [출력 인덱스]}"""
        result: dict[int, list[int]] = {}
        values = entries.values() if isinstance(entries, dict) else entries
        for entry in values:
            if not isinstance(entry, Mapping):
                self.accessor.log_wrong_type("output_by_object", entry, FieldType.TABLE)
                return None
            index = self.game_object_index(entry.get("input"))
            if index is None:
                return None
            outputs = self.accessor.get_table(
                entry, "output", FieldRule(map=self.game_object_index)
            )
            if outputs is None:
                return None
            result[index] = outputs
        return result

    # === build sequence ===

    def build_sequence(self, sequence: Any) -> Any:
        """standard 시퀀스 또는 NotImplemented (custom steps)"""
        if not isinstance(sequence, Mapping):
            self.accessor.log_wrong_type("build_sequence", sequence, FieldType.TABLE)
            return None

        if not is_empty(sequence.get("steps")):
            self.accessor.log_not_implemented("Custom Build Sequence")
            return NotImplemented

        action = self.accessor.get_field(sequence, "action", FieldRule(type=FieldType.STRING))
        if action is None:
            return None
        sequence_index = self.accessor.get_type_index(
            self.action_sequence.types, action, "Action Sequence"
        )
        if sequence_index is None:
            return None

        # 도구를 명시했다면 존재해야 한다
        tool_index = None
        tool = sequence.get("tool")
        if not is_empty(tool):
            tool_index = self.accessor.get_type_index(self.tool.types, tool, "Tool")
            if tool_index is None:
                return None

        return self.craftable.create_standard_build_sequence(sequence_index, tool_index)

    def required_resource(self, element: Any) -> Optional[RequiredResource]:
        if not isinstance(element, Mapping):
            self.accessor.log_wrong_type("craft_sequence", element, FieldType.TABLE)
            return None

        resource_index = self.accessor.get_type_index(
            self.resource.types, element.get("resource"), "Resource"
        )
        if resource_index is None:
            return None

        count = self.accessor.get_field(
            element, "count", FieldRule(default=1, type=FieldType.NUMBER, with_=int)
        )
        if count is None:
            return None

        action = element.get("action")
        if action is None:
            return RequiredResource(type=resource_index, count=count)

        if not isinstance(action, Mapping):
            self.accessor.log_wrong_type("action", action, FieldType.TABLE)
            return None
        action_type = self.accessor.get_type_index(
            self.action.types, action.get("action_type"), "Action"
        )
        if action_type is None:
            return None

        duration = self.accessor.get_field(
            action, "duration", FieldRule(type=FieldType.NUMBER)
        )
        if duration is None:
            return None
        duration_without_skill = self.accessor.get_field(
            action,
            "duration_without_skill",
            FieldRule(type=FieldType.NUMBER, default=duration),
        )
        if duration_without_skill is None:
            return None

        return RequiredResource(
            type=resource_index,
            count=count,
            after_action=AfterAction(
                action_type_index=action_type,
                duration=duration,
                duration_without_skill=duration_without_skill,
            ),
        )


def generate_recipe_definition(ctx: GeneratorContext, document: Mapping) -> None:
    builder = _RecipeBuilder(ctx)
    accessor = ctx.accessor

    definition = split_definition(ctx, document, "recipe_definition")
    if definition is None:
        return
    identifier = definition.identifier
    description = definition.description
    components = definition.components
    logger.info("  %s", identifier)

    recipe_component = accessor.get_table(components, ctx.tag("recipe"))
    if recipe_component is None:
        return
    requirements = ctx.component(components, "requirements")
    output_component = ctx.component(components, "output")
    build_component = ctx.component(components, "build_sequence")

    # --- requirements ---
    skill_types = builder.skill.types
    skill_keys = accessor.get_table(
        requirements, "skills", OPTIONAL.merged(in_table=skill_types)
    )
    if field_failed(requirements, "skills", skill_keys):
        return
    skills = None
    disabled_until = None
    if skill_keys:
        skill_keys = list(skill_keys.values()) if isinstance(skill_keys, dict) else skill_keys
        skills = SkillRequirements(required=skill_types[skill_keys[0]].index)
        if len(skill_keys) > 1:
            disabled_until = skill_types[skill_keys[1]].index

    # --- output ---
    has_no_output = output_component is None
    outputs: Any = {}
    if not has_no_output:
        outputs = accessor.get_table(
            output_component,
            "output_by_object",
            FieldRule(with_=builder.outputs_by_object),
        )

    # --- build sequence ---
    build_sequence = accessor.get_table(
        build_component, "build_sequence", OPTIONAL.merged(with_=builder.build_sequence)
    )
    if build_sequence is NotImplemented:
        build_sequence = None
    elif field_failed(build_component, "build_sequence", build_sequence):
        return

    data = accessor.compile(
        REQUIRED_FIELDS,
        {
            "identifier": accessor.get_field(
                description,
                "identifier",
                FieldRule(not_in_table=builder.craftable.types),
            ),
            "name": accessor.get_field(description, "name"),
            "plural": accessor.get_field(description, "plural"),
            "summary": accessor.get_field(description, "summary"),
            "icon_game_object_type": accessor.get_field_as_index(
                recipe_component, "preview_object", builder.game_object.types
            ),
            "classification": accessor.get_field_as_index(
                recipe_component,
                "classification",
                builder.constructable.classifications,
                FieldRule(
                    default=default_index(builder.constructable.classifications, "craft")
                ),
            ),
            "is_food_preparation": accessor.get_field(
                recipe_component,
                "is_food_prep",
                FieldRule(type=FieldType.BOOLEAN, default=False),
            ),
            "output_arrays_by_resource_object_type": outputs,
            "has_no_output": has_no_output,
            "skills": skills,
            "disabled_until_additional_skill_type_discovered": disabled_until,
            "required_craft_area_groups": accessor.get_table(
                requirements,
                "craft_area_groups",
                FieldRule(
                    default=[],
                    map=lambda key: accessor.get_type_index(
                        builder.craft_area_group.types, key, "Craft Area Group"
                    ),
                ),
            ),
            "required_tools": accessor.get_table(
                requirements,
                "tools",
                FieldRule(
                    default=[],
                    map=lambda key: accessor.get_type_index(
                        builder.tool.types, key, "Tool"
                    ),
                ),
            ),
            "in_progress_build_model": accessor.get_field(
                build_component, "build_sequence_model", OPTIONAL
            ),
            "build_sequence": build_sequence,
            "required_resources": accessor.get_table(
                build_component,
                "craft_sequence",
                FieldRule(map=builder.required_resource),
            ),
        },
    )
    if data is None:
        return

    del data["identifier"]
    recipe = CraftableType(**data)
    accessor.add_props(recipe.props, description, "props")

    recipe_index = builder.craftable.add_craftable(identifier, recipe)
    if recipe_index is None:
        return
    accessor.debug(identifier, document, recipe)

    # 제작 패널: 제작 구역 그룹 -> 같은 key의 게임 오브젝트 인덱스
    for group_index in recipe.required_craft_area_groups:
        group = builder.craft_area_group.types.by_index(group_index)
        area_index = builder.game_object.type_index_map.get(group.key) if group else None
        if area_index is None:
            logger.warning(
                "Craft area group %s has no game object; %s not listed in craft panel",
                group.key if group else group_index,
                identifier,
            )
            continue
        ctx.craft_panel.add(area_index, recipe_index)
