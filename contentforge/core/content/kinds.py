"""콘텐츠 kind 정의 - 닫힌 enum + 로드 상태를 가진 descriptor"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from contentforge.core.content.generators import (
    Generator,
    generate_evolving_object,
    generate_game_object,
    generate_material_definition,
    generate_recipe_definition,
    generate_resource_definition,
    generate_skill_definition,
    generate_storage_object,
)


class ContentKind(str, Enum):
    RESOURCE = "resource"
    STORAGE = "storage"
    GAME_OBJECT = "game_object"
    EVOLVING_OBJECT = "evolving_object"
    RECIPE = "recipe"
    MATERIAL = "material"
    SKILL = "skill"


class KindState(str, Enum):
    """UNREGISTERED: 설정 탐색 전 / PENDING: 대기 / LOADED: 생성 완료"""

    UNREGISTERED = "unregistered"
    PENDING = "pending"
    LOADED = "loaded"


class ConfigSource(str, Enum):
    """문서 목록 이름. 값은 CONTENT_ROOT 아래 폴더 이름이기도 하다."""

    OBJECTS = "objects"
    STORAGE = "storage"
    RECIPES = "recipes"
    MATERIALS = "materials"
    SKILLS = "skills"


@dataclass
class KindDescriptor:
    """kind 하나의 로드 조건과 상태. loaded는 False -> True 한 번만 바뀐다."""

    kind: ContentKind
    config_source: list[Optional[Any]]
    generator: Generator
    module_dependencies: tuple[str, ...] = ()
    kind_dependencies: tuple[ContentKind, ...] = ()
    waiting_for_start: bool = False
    disabled: bool = False
    loaded: bool = False


@dataclass(frozen=True)
class KindSpec:
    """descriptor 기본값 (문서 목록 없이)"""

    source: ConfigSource
    generator: Generator
    module_dependencies: tuple[str, ...]
    kind_dependencies: tuple[ContentKind, ...] = ()
    waiting_for_start: bool = False


# 순서는 sweep 순서. kind 의존성은 같은 sweep 안에서도 고정점까지 반복해 해소된다.
DEFAULT_KINDS: dict[ContentKind, KindSpec] = {
    ContentKind.STORAGE: KindSpec(
        source=ConfigSource.STORAGE,
        generator=generate_storage_object,
        module_dependencies=("typeMaps", "storage", "resource"),
        kind_dependencies=(ContentKind.RESOURCE,),
    ),
    ContentKind.EVOLVING_OBJECT: KindSpec(
        source=ConfigSource.OBJECTS,
        generator=generate_evolving_object,
        module_dependencies=("evolvingObject", "gameObject"),
        kind_dependencies=(ContentKind.GAME_OBJECT,),
        waiting_for_start=True,
    ),
    ContentKind.MATERIAL: KindSpec(
        source=ConfigSource.MATERIALS,
        generator=generate_material_definition,
        module_dependencies=("material",),
    ),
    ContentKind.RESOURCE: KindSpec(
        source=ConfigSource.OBJECTS,
        generator=generate_resource_definition,
        module_dependencies=("typeMaps", "resource"),
    ),
    ContentKind.GAME_OBJECT: KindSpec(
        source=ConfigSource.OBJECTS,
        generator=generate_game_object,
        module_dependencies=("resource", "gameObject"),
        kind_dependencies=(ContentKind.RESOURCE,),
        waiting_for_start=True,
    ),
    ContentKind.RECIPE: KindSpec(
        source=ConfigSource.RECIPES,
        generator=generate_recipe_definition,
        module_dependencies=(
            "gameObject",
            "constructable",
            "craftable",
            "skill",
            "craftAreaGroup",
            "action",
            "actionSequence",
            "tool",
            "resource",
        ),
        kind_dependencies=(ContentKind.GAME_OBJECT,),
        waiting_for_start=True,
    ),
    ContentKind.SKILL: KindSpec(
        source=ConfigSource.SKILLS,
        generator=generate_skill_definition,
        module_dependencies=("skill",),
    ),
}


def parse_kind(name: Any) -> Optional[ContentKind]:
    """문자열/enum -> ContentKind. 알 수 없으면 None."""
    if isinstance(name, ContentKind):
        return name
    try:
        return ContentKind(name)
    except ValueError:
        return None


@dataclass
class KindStatus:
    """진단용 스냅샷"""

    kind: ContentKind
    state: KindState
    waiting_for_start: bool
    disabled: bool
    document_count: int
    missing_modules: list[str] = field(default_factory=list)
    pending_kinds: list[ContentKind] = field(default_factory=list)
