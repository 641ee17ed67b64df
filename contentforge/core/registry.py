"""타입 인덱스 레지스트리 - 호스트가 미리 할당한 인덱스 슬롯에 엔트리 등록

호스트의 key -> index 맵(TypeIndexMap)이 유일한 진실 공급원이다.
이 모듈은 새 인덱스를 만들지 않는다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)


class TypeIndexMap(Mapping[str, int]):
    """호스트 소유 key -> 조밀 정수 인덱스 맵 (1부터 시작)."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._indices: dict[str, int] = {}
        self._keys: dict[int, str] = {}

    @classmethod
    def from_keys(cls, name: str, keys: Iterable[str]) -> "TypeIndexMap":
        index_map = cls(name)
        for key in keys:
            index_map.allocate(key)
        return index_map

    def allocate(self, key: str) -> int:
        """호스트 측 슬롯 할당. 이미 있으면 기존 인덱스."""
        if key in self._indices:
            return self._indices[key]
        index = len(self._indices) + 1
        self._indices[key] = index
        self._keys[index] = key
        return index

    def key_of(self, index: int) -> Optional[str]:
        return self._keys.get(index)

    def __getitem__(self, key: str) -> int:
        return self._indices[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._indices)

    def __len__(self) -> int:
        return len(self._indices)


@dataclass(kw_only=True)
class RegistryEntry:
    """모든 레지스트리 엔트리 공통 필드. key/index는 등록 시 채워진다."""

    key: str = ""
    index: int = 0
    props: dict[str, Any] = field(default_factory=dict)


E = TypeVar("E", bound=RegistryEntry)


class TypeRegistry(Mapping[str, E], Generic[E]):
    """kind 하나의 엔트리 저장소. 읽기 전용 Mapping + 단일 쓰기 경로 add()."""

    def __init__(self, name: str, index_map: TypeIndexMap) -> None:
        self.name = name
        self.index_map = index_map
        self._by_key: dict[str, E] = {}
        self._by_index: dict[int, E] = {}
        self._valid_types: Optional[list[E]] = None

    def __getitem__(self, key: str) -> E:
        return self._by_key[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_key)

    def __len__(self) -> int:
        return len(self._by_key)

    def by_index(self, index: int) -> Optional[E]:
        return self._by_index.get(index)

    def add(self, key: str, entry: E, warn_overwrite: bool = True) -> Optional[int]:
        """엔트리 등록. 반환: 할당된 인덱스, 슬롯이 없으면 None.

        - key가 인덱스 맵에 없으면 에러 로그 후 폐기
        - 이미 등록된 key면 경고 로그 후 덮어쓴다 (오버라이드 모드 지원)
        - warn_overwrite=False: 다른 레지스트리가 이미 경고한 미러 등록용
        """
        index = self.index_map.get(key)
        if index is None:
            logger.error(
                "Attempt to add %s type that isn't in typeIndexMap: %s", self.name, key
            )
            return None

        if key in self._by_key and warn_overwrite:
            logger.warning("Overwriting %s type: %s", self.name, key)

        entry.key = key
        entry.index = index
        self._by_key[key] = entry
        self._by_index[index] = entry

        self._valid_types = None
        self._on_inserted(entry)
        return index

    @property
    def valid_types(self) -> list[E]:
        """인덱스 순 엔트리 배열. 삽입 시 무효화, 접근 시 재계산."""
        if self._valid_types is None:
            self._valid_types = [self._by_index[i] for i in sorted(self._by_index)]
        return self._valid_types

    def _on_inserted(self, entry: E) -> None:
        pass


class ResourceGroupRegistry(TypeRegistry[E]):
    """리소스 그룹. 멤버십이 바뀌면 모든 그룹의 포함 집합을 다시 만든다."""

    def _on_inserted(self, entry: E) -> None:
        for group in self.valid_types:
            group.contains_types = set(group.resource_types)  # type: ignore[attr-defined]
