"""TypeIndexMap / TypeRegistry 테스트"""

import logging

from contentforge.core.content.models import NamedType, ResourceGroupType
from contentforge.core.registry import ResourceGroupRegistry, TypeIndexMap, TypeRegistry


def _registry(*keys: str) -> TypeRegistry:
    return TypeRegistry("thing", TypeIndexMap.from_keys("thing", keys))


class TestTypeIndexMap:
    def test_indices_start_at_one(self):
        index_map = TypeIndexMap.from_keys("thing", ["a", "b"])
        assert index_map["a"] == 1
        assert index_map["b"] == 2
        assert index_map.key_of(2) == "b"

    def test_allocate_is_idempotent(self):
        index_map = TypeIndexMap("thing")
        assert index_map.allocate("a") == 1
        assert index_map.allocate("a") == 1
        assert len(index_map) == 1


class TestTypeRegistry:
    def test_add_assigns_key_and_index(self):
        registry = _registry("a", "b")
        entry = NamedType(name="B")
        assert registry.add("b", entry) == 2
        assert entry.key == "b"
        assert entry.index == 2
        assert registry["b"] is entry
        assert registry.by_index(2) is entry

    def test_key_without_slot_is_rejected(self, caplog):
        registry = _registry("a")
        with caplog.at_level(logging.ERROR):
            assert registry.add("zzz", NamedType()) is None
        assert "zzz" not in registry
        assert "isn't in typeIndexMap" in caplog.text

    def test_last_write_wins_with_one_warning(self, caplog):
        registry = _registry("a")
        with caplog.at_level(logging.WARNING):
            registry.add("a", NamedType(name="first"))
            registry.add("a", NamedType(name="second"))
        overwrites = [r for r in caplog.records if "Overwriting" in r.getMessage()]
        assert len(overwrites) == 1
        assert registry["a"].name == "second"
        assert registry.by_index(1).name == "second"

    def test_valid_types_rebuilt_after_insert(self):
        registry = _registry("a", "b")
        registry.add("b", NamedType(name="b"))
        assert [e.key for e in registry.valid_types] == ["b"]
        registry.add("a", NamedType(name="a"))
        assert [e.key for e in registry.valid_types] == ["a", "b"]

    def test_is_read_only_mapping(self):
        registry = _registry("a")
        registry.add("a", NamedType())
        assert list(registry) == ["a"]
        assert len(registry) == 1
        assert registry.get("missing") is None


class TestResourceGroupRegistry:
    def test_contains_types_rebuilt(self):
        groups = ResourceGroupRegistry(
            "resourceGroup", TypeIndexMap.from_keys("resourceGroup", ["rocks", "food"])
        )
        rocks = ResourceGroupType(name="Rocks", resource_types=[1, 2])
        groups.add("rocks", rocks)
        assert rocks.contains_types == {1, 2}

        rocks.resource_types.append(3)
        groups.add("food", ResourceGroupType(name="Food", resource_types=[4]))
        assert rocks.contains_types == {1, 2, 3}
        assert groups["food"].contains_types == {4}
