"""kind 간 이름 참조 테이블

StorageLinkTable: 스토리지 식별자 -> 그 스토리지에 링크를 선언한 콘텐츠 식별자 목록.
리소스 생성 시 쌓이고 스토리지 생성 시 인덱스로 변환되어 소비된다.

CraftPanelListing: 제작 구역 게임 오브젝트 인덱스 -> 레시피 인덱스 목록.
외부 UI 협력자가 읽는다.
"""

from __future__ import annotations

from typing import Optional

from contentforge.core.logging import get_logger

logger = get_logger(__name__)


class StorageLinkTable:
    """objects-for-storage 전방 참조 테이블"""

    def __init__(self) -> None:
        self._links: dict[str, list[str]] = {}

    def register(self, identifier: str, storage_identifier: Optional[str]) -> None:
        """identifier가 storage_identifier를 사용하도록 기록. 선언 순서 유지."""
        if storage_identifier is None:
            return
        self._links.setdefault(storage_identifier, []).append(identifier)

    def get(self, storage_identifier: str) -> list[str]:
        return list(self._links.get(storage_identifier, []))

    def consume(self, storage_identifier: str) -> list[str]:
        """조회 후 해당 key 제거"""
        return self._links.pop(storage_identifier, [])

    def as_dict(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._links.items()}

    def __contains__(self, storage_identifier: object) -> bool:
        return storage_identifier in self._links


class CraftPanelListing:
    """제작 구역별 레시피 목록 (inspect 제작 패널용)"""

    def __init__(self) -> None:
        self._items: dict[int, list[int]] = {}

    def add(self, craft_area_object_index: int, recipe_index: int) -> None:
        self._items.setdefault(craft_area_object_index, []).append(recipe_index)

    def get(self, craft_area_object_index: int) -> list[int]:
        return list(self._items.get(craft_area_object_index, []))

    def as_dict(self) -> dict[int, list[int]]:
        return {k: list(v) for k, v in self._items.items()}

    def apply_to(self, item_lists: dict[int, list[int]]) -> dict[int, list[int]]:
        """UI 아이템 목록 앞쪽에 레시피를 끼워 넣는다 (기존 항목보다 먼저 표시)."""
        for key, recipes in self._items.items():
            target = item_lists.setdefault(key, [])
            for recipe_index in recipes:
                target.insert(0, recipe_index)
        logger.debug("Craft panel lists updated: %d craft areas", len(self._items))
        return item_lists
