"""번들 인메모리 호스트 모듈

실제 호스트 시뮬레이션을 대신해 타입 인덱스 맵과 레지스트리를 제공한다.
각 모듈의 add_* 메서드가 레지스트리 확장(core.registry)의 등록 경로다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from contentforge.core.content.models import (
    BuildSequence,
    CraftableType,
    EvolvingObjectType,
    GameObjectType,
    MaterialType,
    NamedType,
    ResourceGroupType,
    ResourceType,
    SkillType,
    StorageType,
)
from contentforge.core.geometry import Vec3
from contentforge.core.registry import ResourceGroupRegistry, TypeIndexMap, TypeRegistry
from contentforge.modules.base import HostModule
from contentforge.modules.module_manager import ModuleManager

logger = logging.getLogger(__name__)

# 호스트가 기본으로 가진 단순 타입
DEFAULT_NAMED_TYPES: dict[str, tuple[str, ...]] = {
    "constructableClassification": ("craft", "build", "plant", "place", "path"),
    "storageStackType": ("standard", "lying", "pile"),
    "storageCarryType": ("standard", "small", "high", "overhead"),
    "evolvingObjectCategory": ("small", "medium", "large", "hard"),
}


class TypeMapsModule(HostModule):
    """호스트 소유 key -> index 맵 모음"""

    name = "typeMaps"

    def __init__(self, types: Optional[Mapping[str, TypeIndexMap]] = None) -> None:
        self.types: dict[str, TypeIndexMap] = dict(types or {})

    def index_map(self, map_name: str) -> TypeIndexMap:
        if map_name not in self.types:
            self.types[map_name] = TypeIndexMap(map_name)
        return self.types[map_name]

    def allocate(self, map_name: str, keys: Iterable[str]) -> TypeIndexMap:
        index_map = self.index_map(map_name)
        for key in keys:
            index_map.allocate(key)
        return index_map


class NamedTypeModule(HostModule):
    """도구/액션/액션 시퀀스/제작 구역 그룹처럼 key만 있는 호스트 모듈"""

    def __init__(self, module_name: str, index_map: TypeIndexMap) -> None:
        self._name = module_name
        self.types: TypeRegistry[NamedType] = TypeRegistry(module_name, index_map)

    @property
    def name(self) -> str:
        return self._name

    def add_type(self, key: str, display_name: str = "") -> Optional[int]:
        return self.types.add(key, NamedType(name=display_name or key))


class ResourceModule(HostModule):
    name = "resource"

    def __init__(self, resources: TypeIndexMap, groups: TypeIndexMap) -> None:
        self.types: TypeRegistry[ResourceType] = TypeRegistry("resource", resources)
        self.groups: ResourceGroupRegistry[ResourceGroupType] = ResourceGroupRegistry(
            "resourceGroup", groups
        )

    def add_resource(self, key: str, entry: ResourceType) -> Optional[int]:
        return self.types.add(key, entry)

    def add_resource_group(self, key: str, entry: ResourceGroupType) -> Optional[int]:
        return self.groups.add(key, entry)

    @property
    def valid_types(self) -> list[ResourceType]:
        return self.types.valid_types


class StorageModule(HostModule):
    name = "storage"

    def __init__(
        self,
        storages: TypeIndexMap,
        stack_types: TypeIndexMap,
        carry_types: TypeIndexMap,
    ) -> None:
        self.types: TypeRegistry[StorageType] = TypeRegistry("storage", storages)
        self.stack_types: TypeRegistry[NamedType] = TypeRegistry(
            "storageStackType", stack_types
        )
        self.carry_types: TypeRegistry[NamedType] = TypeRegistry(
            "storageCarryType", carry_types
        )
        for key in stack_types:
            self.stack_types.add(key, NamedType(name=key))
        for key in carry_types:
            self.carry_types.add(key, NamedType(name=key))

    def add_storage(self, key: str, entry: StorageType) -> Optional[int]:
        return self.types.add(key, entry)


class GameObjectModule(HostModule):
    name = "gameObject"

    def __init__(self, game_objects: TypeIndexMap) -> None:
        self.types: TypeRegistry[GameObjectType] = TypeRegistry(
            "gameObject", game_objects
        )

    @property
    def type_index_map(self) -> TypeIndexMap:
        return self.types.index_map

    @property
    def valid_types(self) -> list[GameObjectType]:
        return self.types.valid_types

    def add_game_object(self, key: str, entry: GameObjectType) -> Optional[int]:
        return self.types.add(key, entry)


class EvolvingObjectModule(HostModule):
    """진화(부패 등) 정의. 게임 오브젝트 인덱스로 저장한다."""

    name = "evolvingObject"

    def __init__(
        self,
        game_objects: TypeRegistry[GameObjectType],
        categories: TypeIndexMap,
        day_length: float,
    ) -> None:
        self.day_length = day_length
        self.categories: TypeRegistry[NamedType] = TypeRegistry(
            "evolvingObjectCategory", categories
        )
        for key in categories:
            self.categories.add(key, NamedType(name=key))
        self.evolutions: dict[int, EvolvingObjectType] = {}
        self._game_objects = game_objects

    @property
    def dependencies(self) -> list[str]:
        return ["gameObject"]

    def add_evolving_object(self, key: str, entry: EvolvingObjectType) -> Optional[int]:
        game_object = self._game_objects.get(key)
        if game_object is None:
            logger.error("Attempting to add evolving object which isn't a GameObject: %s", key)
            return None
        if game_object.index in self.evolutions:
            logger.warning("Overwriting evolving object: %s", key)
        entry.key = key
        entry.index = game_object.index
        self.evolutions[game_object.index] = entry
        return game_object.index


class MaterialModule(HostModule):
    name = "material"

    def __init__(self, materials: TypeIndexMap) -> None:
        self.types: TypeRegistry[MaterialType] = TypeRegistry("material", materials)

    def add_material(
        self, key: str, color: Vec3, roughness: float, metal: Optional[float] = None
    ) -> Optional[int]:
        return self.types.add(
            key, MaterialType(color=color, roughness=roughness, metal=metal)
        )


class SkillModule(HostModule):
    name = "skill"

    def __init__(self, skills: TypeIndexMap) -> None:
        self.types: TypeRegistry[SkillType] = TypeRegistry("skill", skills)

    def add_skill(self, key: str, entry: SkillType) -> Optional[int]:
        return self.types.add(key, entry)


class ConstructableModule(HostModule):
    name = "constructable"

    def __init__(self, constructables: TypeIndexMap, classifications: TypeIndexMap) -> None:
        self.types: TypeRegistry[CraftableType] = TypeRegistry(
            "constructable", constructables
        )
        self.classifications: TypeRegistry[NamedType] = TypeRegistry(
            "constructableClassification", classifications
        )
        for key in classifications:
            self.classifications.add(key, NamedType(name=key))


class CraftableModule(HostModule):
    """레시피. 등록 시 constructable 레지스트리에도 같은 엔트리를 넣는다.

    덮어쓰기 경고는 craftable 쪽에서 한 번만 낸다.
    """

    name = "craftable"

    def __init__(self, constructable: ConstructableModule) -> None:
        self._constructable = constructable
        self.types: TypeRegistry[CraftableType] = TypeRegistry(
            "craftable", constructable.types.index_map
        )

    @property
    def dependencies(self) -> list[str]:
        return ["constructable"]

    def add_craftable(self, key: str, entry: CraftableType) -> Optional[int]:
        index = self.types.add(key, entry)
        if index is not None:
            self._constructable.types.add(key, entry, warn_overwrite=False)
        return index

    def create_standard_build_sequence(
        self, action_sequence_type_index: int, tool_type_index: Optional[int] = None
    ) -> BuildSequence:
        return BuildSequence(
            action_sequence_type_index=action_sequence_type_index,
            tool_type_index=tool_type_index,
        )


def build_host(
    type_maps: TypeMapsModule,
    day_length: float = 2880.0,
    named_types: Optional[Mapping[str, Iterable[str]]] = None,
) -> list[HostModule]:
    """호스트 모듈 생성. 반환 순서가 곧 권장 등록 순서."""
    for map_name, keys in DEFAULT_NAMED_TYPES.items():
        type_maps.allocate(map_name, keys)

    game_object = GameObjectModule(type_maps.index_map("gameObject"))
    constructable = ConstructableModule(
        type_maps.index_map("constructable"),
        type_maps.index_map("constructableClassification"),
    )

    simple = {
        name: NamedTypeModule(name, type_maps.index_map(name))
        for name in ("craftAreaGroup", "tool", "action", "actionSequence")
    }
    for name, keys in (named_types or {}).items():
        if name in simple:
            type_maps.allocate(name, keys)
            for key in keys:
                simple[name].add_type(key)

    return [
        type_maps,
        ResourceModule(
            type_maps.index_map("resource"), type_maps.index_map("resourceGroup")
        ),
        StorageModule(
            type_maps.index_map("storage"),
            type_maps.index_map("storageStackType"),
            type_maps.index_map("storageCarryType"),
        ),
        game_object,
        EvolvingObjectModule(
            game_object.types,
            type_maps.index_map("evolvingObjectCategory"),
            day_length,
        ),
        MaterialModule(type_maps.index_map("material")),
        SkillModule(type_maps.index_map("skill")),
        constructable,
        CraftableModule(constructable),
        *simple.values(),
    ]


def register_host(manager: ModuleManager, modules: Iterable[HostModule]) -> None:
    """모듈을 하나씩 등록 (등록마다 MODULE_ADDED 발행)"""
    for module in modules:
        manager.add_module(module)
