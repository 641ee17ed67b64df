"""ObjectLoader 테스트 - 의존성 게이트, 단발 실행, sweep"""

import logging

import pytest

from contentforge.core.content.kinds import ConfigSource, ContentKind, KindState
from contentforge.core.diagnostics import ErrorCategory
from contentforge.core.event_types import EventTypes
from contentforge.modules.base import HostModule
from contentforge.modules.host import build_host
from contentforge.services.config_loader import ConfigStore, allocate_content_slots
from contentforge.services.object_loader import ObjectLoader, build_descriptors


@pytest.fixture()
def store() -> ConfigStore:
    store = ConfigStore()
    store.mark_initialized()
    return store


@pytest.fixture()
def loader(manager, store, ctx) -> ObjectLoader:
    loader = ObjectLoader(manager, store, context=ctx)
    loader.init()
    return loader


def _counting_generator(calls):
    def generator(ctx, document):
        calls.append(document)

    return generator


def _modules_by_name(type_maps):
    return {module.name: module for module in build_host(type_maps)}


class _PlainModule(HostModule):
    """레지스트리 없는 이름만 있는 모듈"""

    def __init__(self, name):
        self._name = name

    @property
    def name(self):
        return self._name


class TestGuard:
    def test_single_fire(self, manager, loader, store, type_maps):
        calls = []
        loader.descriptors[ContentKind.MATERIAL].generator = _counting_generator(calls)
        store.add(ConfigSource.MATERIALS, {"doc": 1})

        manager.add_module(_modules_by_name(type_maps)["material"])
        assert loader.state(ContentKind.MATERIAL) is KindState.LOADED
        assert len(calls) == 1

        # 이후 어떤 트리거도 다시 실행하지 않는다
        assert loader.try_load_object_definitions() == []
        manager.add_module(_modules_by_name(type_maps)["skill"])
        loader.mark_object_as_ready_to_load(ContentKind.MATERIAL)
        assert len(calls) == 1

    def test_guard_is_test_and_set(self, loader):
        descriptor = loader.descriptors[ContentKind.SKILL]
        descriptor.module_dependencies = ()
        assert loader.can_load_object_type(descriptor) is True
        assert descriptor.loaded is True
        assert loader.can_load_object_type(descriptor) is False

    def test_unsatisfied_dependency_never_fires(self, manager, loader, type_maps):
        calls = []
        loader.descriptors[ContentKind.STORAGE].generator = _counting_generator(calls)
        modules = _modules_by_name(type_maps)
        for name in ("typeMaps", "resource", "gameObject", "material"):
            manager.add_module(modules[name])

        assert loader.state(ContentKind.RESOURCE) is KindState.LOADED
        assert loader.state(ContentKind.STORAGE) is KindState.PENDING
        assert loader.pending_dependencies(ContentKind.STORAGE) == {
            "modules": ["storage"],
            "kinds": [],
        }
        loader.try_load_object_definitions()
        assert calls == []

    def test_waits_for_config_discovery(self, manager, type_maps, ctx):
        store = ConfigStore()
        loader = ObjectLoader(manager, store, context=ctx)
        loader.init()
        manager.add_module(_modules_by_name(type_maps)["skill"])
        assert loader.state(ContentKind.SKILL) is KindState.UNREGISTERED

        store.mark_initialized()
        assert loader.try_load_object_definitions() == [ContentKind.SKILL]
        assert loader.state("skill") is KindState.LOADED

    def test_disabled_kind(self, manager, store, ctx, type_maps):
        loader = ObjectLoader(manager, store, context=ctx, disabled_kinds=["material"])
        loader.init()
        manager.add_module(_modules_by_name(type_maps)["material"])
        assert loader.state(ContentKind.MATERIAL) is KindState.PENDING
        assert loader.status(ContentKind.MATERIAL).disabled is True


class TestTriggers:
    def test_waiting_for_start(self, manager, loader, type_maps):
        for module in build_host(type_maps):
            manager.add_module(module)

        assert loader.state(ContentKind.GAME_OBJECT) is KindState.PENDING
        assert loader.descriptors[ContentKind.GAME_OBJECT].waiting_for_start is True

        loader.mark_object_as_ready_to_load(ContentKind.GAME_OBJECT)
        assert loader.state(ContentKind.GAME_OBJECT) is KindState.LOADED
        # 진화 오브젝트는 자기 래치가 따로 있다
        assert loader.state(ContentKind.EVOLVING_OBJECT) is KindState.PENDING

    def test_kind_dependency_resolved_in_same_sweep(self, manager, loader, type_maps):
        loaded = []
        manager.event_bus.subscribe(
            EventTypes.KIND_LOADED, lambda event: loaded.append(event.data["kind"])
        )
        loader.mark_object_as_ready_to_load("recipe")
        for module in build_host(type_maps):
            manager.add_module(module)
        assert loader.state(ContentKind.RECIPE) is KindState.PENDING
        assert loader.pending_dependencies(ContentKind.RECIPE)["kinds"] == [
            ContentKind.GAME_OBJECT
        ]

        loaded.clear()
        loader.mark_object_as_ready_to_load("game_object")
        assert loaded == ["game_object", "recipe"]

    def test_storage_after_resource(self, manager, loader, type_maps, store):
        modules = _modules_by_name(type_maps)
        # resource kind가 먼저 로드되어야 storage가 링크를 볼 수 있다
        assert loader.try_load_object_definitions() == []
        for name in ("typeMaps", "storage"):
            manager.add_module(modules[name])
        assert loader.state(ContentKind.STORAGE) is KindState.PENDING

        manager.add_module(modules["resource"])
        assert loader.state(ContentKind.RESOURCE) is KindState.LOADED
        assert loader.state(ContentKind.STORAGE) is KindState.LOADED

    def test_module_added_inside_notification_is_swept(self, manager, loader, type_maps):
        # 알림 핸들러가 다음 모듈을 등록하는 연쇄: m1 -> ... -> m5 -> material
        chain = [_PlainModule(f"m{i}") for i in range(1, 6)]
        chain.append(_modules_by_name(type_maps)["material"])
        following = {a.name: b for a, b in zip(chain, chain[1:])}

        def register_next(event):
            if event.source in following:
                manager.add_module(following[event.source])

        manager.bind(register_next)
        manager.add_module(chain[0])

        assert manager.has("material")
        assert loader.state(ContentKind.MATERIAL) is KindState.LOADED
        assert manager.event_bus.pending_count == 0

    def test_unknown_kind(self, loader, caplog):
        with caplog.at_level(logging.ERROR):
            assert loader.mark_object_as_ready_to_load("spaceship") is False
        assert "spaceship" in caplog.text
        assert loader.state("spaceship") is None

    def test_init_runs_once(self, manager, store, ctx):
        loader = ObjectLoader(manager, store, context=ctx)
        assert loader.init() is True
        assert loader.init() is False
        assert manager.event_bus.handler_count == 1


class TestLoadObjectDefinition:
    def test_generator_failure_counted_and_continues(self, manager, loader, store, type_maps):
        calls = []

        def flaky(ctx, document):
            calls.append(document)
            if document.get("explode"):
                raise ValueError("bad document")

        loader.descriptors[ContentKind.MATERIAL].generator = flaky
        store.add(ConfigSource.MATERIALS, {"explode": True})
        store.add(ConfigSource.MATERIALS, {"explode": False})

        manager.add_module(_modules_by_name(type_maps)["material"])
        assert len(calls) == 2
        assert loader.diagnostics.count(ErrorCategory.GENERATOR_FAILURE) == 1

    def test_none_document_skipped(self, manager, loader, store, type_maps, caplog):
        calls = []
        loader.descriptors[ContentKind.SKILL].generator = _counting_generator(calls)
        store.add(ConfigSource.SKILLS, None)
        store.add(ConfigSource.SKILLS, {"doc": 2})

        with caplog.at_level(logging.WARNING):
            manager.add_module(_modules_by_name(type_maps)["skill"])
        assert calls == [{"doc": 2}]
        assert "None skill" in caplog.text

    def test_empty_source_logs_none(self, manager, loader, type_maps, caplog):
        with caplog.at_level(logging.INFO):
            manager.add_module(_modules_by_name(type_maps)["skill"])
        assert "(none)" in caplog.text


class TestEndToEnd:
    def test_basket_through_loader(self, manager, store, ctx, type_maps, make_object):
        link = {"storage_link": {"identifier": "hs:basket"}}
        store.add(ConfigSource.OBJECTS, make_object("hs:apple", link))
        store.add(ConfigSource.OBJECTS, make_object("hs:pear", link))
        store.add(
            ConfigSource.STORAGE,
            {
                "hammerstone:storage_definition": {
                    "description": {"identifier": "hs:basket", "name": "Basket"},
                    "components": {"hammerstone:storage": {}},
                }
            },
        )
        allocate_content_slots(type_maps, store)

        loader = ObjectLoader(manager, store, context=ctx)
        loader.init()
        for module in build_host(type_maps):
            manager.add_module(module)

        storage = manager.get("storage").types["hs:basket"]
        resources = manager.get("resource").types
        assert storage.resources == [resources["hs:apple"].index, resources["hs:pear"].index]
        assert ctx.accessor.error_count == 0


class TestBuildDescriptors:
    def test_sources_are_live_lists(self, store):
        descriptors = build_descriptors(store)
        store.add(ConfigSource.OBJECTS, {"doc": 1})
        assert descriptors[ContentKind.RESOURCE].config_source == [{"doc": 1}]
        assert descriptors[ContentKind.GAME_OBJECT].config_source is (
            descriptors[ContentKind.EVOLVING_OBJECT].config_source
        )

    def test_unknown_disabled_kind_ignored(self, store):
        descriptors = build_descriptors(store, ["recipe", "spaceship"])
        assert descriptors[ContentKind.RECIPE].disabled is True
        assert not any(d.disabled for k, d in descriptors.items() if k is not ContentKind.RECIPE)
