"""호스트 모듈 기반 인터페이스"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from contentforge.modules.module_manager import ModuleManager


class HostModule(ABC):
    """호스트 시뮬레이션이 제공하는 런타임 모듈

    규칙:
    - 콘텐츠 Generator는 ModuleManager.get()으로만 모듈에 접근한다
    - 모듈은 자기 레지스트리의 유일한 쓰기 경로(add_*)를 제공한다
    - 로더는 모듈 존재 여부만 본다. 모듈 간 초기화 순서는 호스트 책임
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """모듈 고유 이름 (예: 'resource', 'gameObject')"""
        ...

    @property
    def dependencies(self) -> List[str]:
        """이 모듈보다 먼저 등록되어야 하는 모듈 이름 목록 (정보용)"""
        return []

    def on_added(self, manager: "ModuleManager") -> None:
        """ModuleManager에 추가된 직후 호출. 기본 동작 없음."""
        pass
