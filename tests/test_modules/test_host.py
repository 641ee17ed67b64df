"""번들 호스트 모듈 테스트"""

import logging

from contentforge.core.content.models import CraftableType, EvolvingObjectType, GameObjectType
from contentforge.modules.host import (
    DEFAULT_NAMED_TYPES,
    TypeMapsModule,
    build_host,
    register_host,
)
from contentforge.modules.module_manager import ModuleManager


class TestBuildHost:
    def test_registration_order(self, type_maps):
        names = [module.name for module in build_host(type_maps)]
        assert names[:4] == ["typeMaps", "resource", "storage", "gameObject"]
        assert set(names) == {
            "typeMaps",
            "resource",
            "storage",
            "gameObject",
            "evolvingObject",
            "material",
            "skill",
            "constructable",
            "craftable",
            "craftAreaGroup",
            "tool",
            "action",
            "actionSequence",
        }

    def test_default_named_types_seeded(self, type_maps):
        modules = {m.name: m for m in build_host(type_maps)}
        assert list(modules["storage"].stack_types) == list(
            DEFAULT_NAMED_TYPES["storageStackType"]
        )
        assert "craft" in modules["constructable"].classifications

    def test_named_types_argument(self, type_maps):
        modules = {m.name: m for m in build_host(type_maps, named_types={"tool": ["axe"]})}
        assert modules["tool"].types["axe"].index == 1
        assert len(modules["action"].types) == 0

    def test_register_host_emits_per_module(self):
        manager = ModuleManager()
        added = []
        manager.bind(lambda event: added.append(event.source))
        register_host(manager, build_host(TypeMapsModule()))
        assert added[0] == "typeMaps"
        assert len(added) == len(manager.modules)


class TestEvolvingObjectModule:
    def test_keyed_by_game_object_index(self, host, type_maps):
        type_maps.allocate("gameObject", ["a", "b"])
        host["gameObject"].add_game_object(
            "b", GameObjectType(name="b", plural="b", model_name="b", resource_type_index=1)
        )
        entry = EvolvingObjectType(min_time=1.0, category_index=1)
        assert host["evolvingObject"].add_evolving_object("b", entry) == 2
        assert host["evolvingObject"].evolutions[2] is entry

    def test_rejects_non_game_object(self, host, caplog):
        with caplog.at_level(logging.ERROR):
            result = host["evolvingObject"].add_evolving_object(
                "ghost", EvolvingObjectType(min_time=1.0, category_index=1)
            )
        assert result is None
        assert "isn't a GameObject" in caplog.text


class TestCraftableModule:
    def _recipe(self, name):
        return CraftableType(
            name=name,
            plural=name,
            summary="",
            icon_game_object_type=1,
            classification=1,
            required_craft_area_groups=[],
            required_tools=[],
            required_resources=[],
        )

    def test_mirrored_into_constructable(self, host, type_maps):
        type_maps.allocate("constructable", ["hs:knife"])
        index = host["craftable"].add_craftable("hs:knife", self._recipe("knife"))
        assert host["constructable"].types["hs:knife"].index == index

    def test_reregister_warns_once(self, host, type_maps, caplog):
        type_maps.allocate("constructable", ["hs:knife"])
        with caplog.at_level(logging.WARNING):
            host["craftable"].add_craftable("hs:knife", self._recipe("first"))
            host["craftable"].add_craftable("hs:knife", self._recipe("second"))
        overwrites = [r for r in caplog.records if "Overwriting" in r.getMessage()]
        assert len(overwrites) == 1
        assert host["constructable"].types["hs:knife"].name == "second"


class TestTypeMapsModule:
    def test_index_map_created_on_demand(self):
        type_maps = TypeMapsModule()
        index_map = type_maps.index_map("resource")
        assert type_maps.index_map("resource") is index_map
        type_maps.allocate("resource", ["a", "b"])
        assert index_map["b"] == 2
