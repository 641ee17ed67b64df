"""Generator 공통 컨텍스트와 헬퍼"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from contentforge.core.fields import FieldAccessor, FieldRule, FieldType
from contentforge.core.content.links import CraftPanelListing, StorageLinkTable
from contentforge.modules.module_manager import ModuleManager

DEFAULT_NAMESPACE = "hammerstone"


@dataclass
class GeneratorContext:
    """Generator에 전달되는 소유 객체 묶음 (전역 싱글톤 없음)"""

    modules: ModuleManager
    accessor: FieldAccessor = field(default_factory=FieldAccessor)
    storage_links: StorageLinkTable = field(default_factory=StorageLinkTable)
    craft_panel: CraftPanelListing = field(default_factory=CraftPanelListing)
    namespace: str = DEFAULT_NAMESPACE

    def tag(self, name: str) -> str:
        """예: object_definition -> hammerstone:object_definition"""
        return f"{self.namespace}:{name}" if self.namespace else name

    def module(self, name: str) -> Any:
        return self.modules.get(name)

    def component(self, components: Mapping, name: str) -> Any:
        """선택 컴포넌트 조회. 없거나 components가 테이블이 아니면 None (에러 아님)."""
        if not isinstance(components, Mapping):
            return None
        return components.get(self.tag(name))


Generator = Callable[[GeneratorContext, Mapping], None]


@dataclass(frozen=True)
class Definition:
    identifier: str
    description: Mapping
    components: Mapping


def split_definition(
    ctx: GeneratorContext, document: Mapping, definition_name: str
) -> Optional[Definition]:
    """문서를 description/components로 분해. 실패 시 None (에러 기록됨)."""
    accessor = ctx.accessor
    definition = accessor.get_table(document, ctx.tag(definition_name))
    if definition is None:
        return None

    description = accessor.get_table(definition, "description")
    if description is None:
        return None
    components = accessor.get_table(definition, "components", FieldRule(default={}))
    if components is None:
        return None
    if not isinstance(components, Mapping):
        # 빈 배열은 컴포넌트 없음으로 본다
        if len(components) > 0:
            accessor.log_wrong_type("components", components, FieldType.TABLE)
            return None
        components = {}

    identifier = accessor.get_field(
        description, "identifier", FieldRule(type=FieldType.STRING)
    )
    if identifier is None:
        return None

    return Definition(identifier, description, components)


def default_index(table: Mapping, key: str) -> Optional[int]:
    """기본값으로 쓸 인덱스. get_field의 default는 변환을 거치지 않는다."""
    entry = table.get(key)
    return None if entry is None else getattr(entry, "index", entry)


def field_failed(record: Any, key: str, value: Any) -> bool:
    """선택 필드가 선언은 됐지만 추출에 실패했는지"""
    return value is None and isinstance(record, Mapping) and record.get(key) is not None
