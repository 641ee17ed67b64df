"""Shared test fixtures."""

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from contentforge.config import settings
from contentforge.core.content.generators import GeneratorContext
from contentforge.core.diagnostics import Diagnostics
from contentforge.core.fields import FieldAccessor
from contentforge.main import app
from contentforge.modules.host import TypeMapsModule, build_host, register_host
from contentforge.modules.module_manager import ModuleManager

FIXTURE_CONTENT = Path(__file__).parent / "fixtures" / "content"

HOST_NAMED_TYPES = {
    "craftAreaGroup": ("campfire", "standard"),
    "tool": ("knife", "hammer"),
    "action": ("chop", "knap"),
    "actionSequence": ("knap", "bang"),
}

NS = "hammerstone"


def tag(name: str) -> str:
    return f"{NS}:{name}"


def _object_document(
    identifier: str, components: dict[str, Any] | None = None, **description: Any
) -> dict[str, Any]:
    """object_definition 문서. components key는 네임스페이스 없이 받는다."""
    body = {"identifier": identifier, "name": identifier, "plural": identifier + "s"}
    body.update(description)
    return {
        tag("object_definition"): {
            "description": body,
            "components": {tag(k): v for k, v in (components or {}).items()},
        }
    }


@pytest.fixture()
def diagnostics() -> Diagnostics:
    return Diagnostics()


@pytest.fixture()
def accessor(diagnostics: Diagnostics) -> FieldAccessor:
    return FieldAccessor(diagnostics)


@pytest.fixture()
def type_maps() -> TypeMapsModule:
    return TypeMapsModule()


@pytest.fixture()
def manager() -> ModuleManager:
    return ModuleManager()


@pytest.fixture()
def host(type_maps: TypeMapsModule, manager: ModuleManager) -> dict[str, Any]:
    """번들 호스트 전체를 등록한 상태. 이름 -> 모듈."""
    register_host(manager, build_host(type_maps, named_types=HOST_NAMED_TYPES))
    return manager.modules


@pytest.fixture()
def ctx(manager: ModuleManager, accessor: FieldAccessor) -> GeneratorContext:
    return GeneratorContext(manager, accessor=accessor)


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """FastAPI TestClient wired to the fixture content directory."""
    monkeypatch.setattr(settings, "CONTENT_ROOT", str(FIXTURE_CONTENT))
    monkeypatch.setattr(settings, "DISABLED_KINDS", [])
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_object():
    """object_definition 문서 팩토리"""
    return _object_document
