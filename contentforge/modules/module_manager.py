"""호스트 모듈 레지스트리 - 등록, 조회, 새 모듈 알림"""

from typing import Callable, Dict, List, Optional

from contentforge.core.event_bus import EventBus, PipelineEvent
from contentforge.core.event_types import EventTypes
from contentforge.core.logging import get_logger
from contentforge.modules.base import HostModule

logger = get_logger(__name__)


class ModuleManager:
    """호스트가 모듈을 하나씩 등록하면 MODULE_ADDED 이벤트를 발행한다.

    로더는 bind()로 구독하고, 알림마다 모든 kind를 재평가한다.
    알림 핸들러 안에서 추가된 모듈의 MODULE_ADDED는 버스 큐를 거쳐 반드시 전달된다.
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._modules: Dict[str, HostModule] = {}
        self._event_bus: EventBus = event_bus if event_bus is not None else EventBus()
        self._event_bus.defer(EventTypes.MODULE_ADDED)

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def modules(self) -> Dict[str, HostModule]:
        """등록된 모든 모듈 (읽기 전용 접근)"""
        return dict(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def has(self, name: str) -> bool:
        return name in self._modules

    def get(self, name: str) -> HostModule:
        """모듈 조회. 미등록이면 KeyError - 로더가 의존성을 보장한 뒤에만 호출된다."""
        return self._modules[name]

    def missing(self, names: List[str]) -> List[str]:
        """names 중 아직 등록되지 않은 모듈 (순서 유지)"""
        return [name for name in names if name not in self._modules]

    def add_module(self, module: HostModule) -> None:
        """모듈 등록 + MODULE_ADDED 발행. 같은 이름 중복 등록 시 경고 후 덮어쓰기."""
        if module.name in self._modules:
            logger.warning(f"Overwriting host module: {module.name}")
        self._modules[module.name] = module
        logger.info(f"Host module added: {module.name}")

        module.on_added(self)
        self._event_bus.emit(
            PipelineEvent(
                event_type=EventTypes.MODULE_ADDED,
                data={"module": module.name},
                source=module.name,
            )
        )

    def bind(self, callback: Callable[[PipelineEvent], None]) -> None:
        """새 모듈이 추가될 때마다 callback 호출"""
        self._event_bus.subscribe(EventTypes.MODULE_ADDED, callback)
