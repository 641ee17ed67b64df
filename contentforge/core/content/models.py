"""레지스트리 엔트리 모델 - 호스트가 등록 후 읽는 완성 객체"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from contentforge.core.geometry import MAT3_IDENTITY, ZERO, Mat3, Vec3
from contentforge.core.registry import RegistryEntry


@dataclass
class NamedType(RegistryEntry):
    """호스트가 미리 가진 단순 타입 (도구, 액션, 분류 등)"""

    name: str = ""


@dataclass
class ResourceType(RegistryEntry):
    name: str
    plural: str
    display_game_object_type_index: Optional[int] = None

    # food 컴포넌트
    food_value: Optional[float] = None
    food_portion_count: Optional[int] = None
    food_poisoning_chance: Optional[float] = None
    default_to_eating_disabled: Optional[bool] = None

    # decoration 컴포넌트
    disallows_decoration_placing: bool = False


@dataclass
class ResourceGroupType(RegistryEntry):
    name: str
    resource_types: list[int] = field(default_factory=list)
    contains_types: set[int] = field(default_factory=set)


@dataclass
class StorageBox:
    size: Vec3
    rotation_function: Callable[[str, int], Mat3]
    dont_rotate_to_fit_below_surface: bool
    place_object_offset: Vec3


@dataclass
class StorageType(RegistryEntry):
    name: str
    display_game_object_type_index: Optional[int]
    resources: list[int]
    storage_box: StorageBox

    max_carry_count: int = 1
    max_carry_count_limited_ability: int = 1
    max_carry_count_for_running: int = 1

    carry_stack_type: Optional[int] = None
    carry_type: Optional[int] = None
    carry_offset: Vec3 = ZERO
    carry_rotation: Mat3 = MAT3_IDENTITY


@dataclass(frozen=True)
class MarkerPosition:
    world_offset: Vec3


@dataclass
class GameObjectType(RegistryEntry):
    name: str
    plural: str
    model_name: str
    resource_type_index: int
    scale: float = 1.0
    has_physics: bool = True
    marker_positions: list[MarkerPosition] = field(default_factory=list)


@dataclass
class EvolvingObjectType(RegistryEntry):
    """key는 게임 오브젝트 key, index는 그 게임 오브젝트 인덱스"""

    min_time: float
    category_index: int
    to_types: Optional[list[int]] = None


@dataclass(frozen=True)
class BuildSequence:
    action_sequence_type_index: int
    tool_type_index: Optional[int] = None


@dataclass(frozen=True)
class AfterAction:
    action_type_index: int
    duration: float
    duration_without_skill: float


@dataclass(frozen=True)
class RequiredResource:
    type: int
    count: int = 1
    after_action: Optional[AfterAction] = None


@dataclass(frozen=True)
class SkillRequirements:
    required: int


@dataclass
class CraftableType(RegistryEntry):
    name: str
    plural: str
    summary: str
    icon_game_object_type: int
    classification: int
    required_craft_area_groups: list[int]
    required_tools: list[int]
    required_resources: list[RequiredResource]

    is_food_preparation: bool = False
    output_arrays_by_resource_object_type: dict[int, list[int]] = field(
        default_factory=dict
    )
    has_no_output: bool = False
    skills: Optional[SkillRequirements] = None
    disabled_until_additional_skill_type_discovered: Optional[int] = None
    in_progress_build_model: Optional[str] = None
    build_sequence: Optional[BuildSequence] = None


@dataclass
class MaterialType(RegistryEntry):
    color: Vec3
    roughness: float
    metal: Optional[float] = None


@dataclass
class SkillType(RegistryEntry):
    name: str
    description: str
    icon: str
    row: int
    column: int
    required_skill_types: list[int] = field(default_factory=list)
    start_learned: bool = False
    partial_capacity_with_limited_general_ability: bool = False
