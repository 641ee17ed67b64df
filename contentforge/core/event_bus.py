"""EventBus - 호스트 모듈 / 로더 사이의 동기 알림

두 종류의 이벤트가 있다.

- 즉시 전달: 핸들러 안에서 다시 발행하면 그 자리에서 중첩 호출된다.
  중첩 깊이는 MAX_DEPTH로 제한되고, 한 체인 안에서 같은 source의 같은
  이벤트는 한 번만 전달된다 (순환 방지).
- 지연 전달 (defer로 지정, 예: MODULE_ADDED): 핸들러 안에서 발행되면
  큐에 쌓였다가 바깥 핸들러가 끝난 뒤 최상위 이벤트로 하나씩 전달된다.
  깊이/중복 제한에 걸리지 않으므로 절대 버려지지 않는다.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Set

from contentforge.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5


@dataclass
class PipelineEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: EventTypes 상수 (예: "module_added", "kind_loaded")
        data: 식별자 위주의 페이로드 (모듈 이름, kind 이름, 문서 수)
        source: 발행 주체. 모듈 이벤트는 모듈 이름, kind 이벤트는 kind 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    # 전달 시점의 중첩 깊이 (버스가 채운다)
    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[PipelineEvent], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.defer(EventTypes.MODULE_ADDED)
        bus.subscribe(EventTypes.MODULE_ADDED, loader_callback)
        bus.emit(PipelineEvent(EventTypes.MODULE_ADDED, {"module": "skill"}, "skill"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._deferred_types: Set[str] = set()
        self._pending: Deque[PipelineEvent] = deque()
        self._depth = 0
        self._chain: Set[str] = set()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(f"EventBus subscribe: {event_type} -> {handler.__qualname__}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            logger.warning(
                f"Handler not subscribed: {event_type} -> {handler.__qualname__}"
            )
            return
        handlers.remove(handler)
        logger.debug(f"EventBus unsubscribe: {event_type} -> {handler.__qualname__}")

    def defer(self, event_type: str) -> None:
        """event_type을 지연 전달로 지정. 중첩 발행은 큐로 간다."""
        self._deferred_types.add(event_type)

    @property
    def pending_count(self) -> int:
        """아직 전달되지 않은 지연 이벤트 수"""
        return len(self._pending)

    def emit(self, event: PipelineEvent) -> None:
        """이벤트 발행. 최상위 호출이면 큐에 쌓인 지연 이벤트까지 모두 전달한다."""
        if self._depth > 0 and event.event_type in self._deferred_types:
            self._pending.append(event)
            logger.debug(f"EventBus queued: {event.source}:{event.event_type}")
            return

        self._dispatch(event)

        if self._depth == 0:
            while self._pending:
                self._dispatch(self._pending.popleft())

    def _dispatch(self, event: PipelineEvent) -> None:
        chain_key = f"{event.source}:{event.event_type}"
        deferred = event.event_type in self._deferred_types

        if not deferred:
            if self._depth >= MAX_DEPTH:
                logger.warning(
                    f"EventBus depth exceeded ({MAX_DEPTH}): {chain_key} ignored"
                )
                return
            if chain_key in self._chain:
                logger.warning(f"EventBus duplicate event blocked: {chain_key}")
                return

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug(f"EventBus: no subscribers for {event.event_type}")
            return

        self._chain.add(chain_key)
        event._depth = self._depth
        logger.debug(
            f"EventBus emit: {chain_key} (depth={self._depth}, handlers={len(handlers)})"
        )

        self._depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"EventBus handler error: {handler.__qualname__} "
                        f"(event={event.event_type})"
                    )
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._chain.clear()

    def clear(self) -> None:
        """구독/큐/체인 상태 초기화 (지연 지정은 유지)"""
        self._handlers.clear()
        self._pending.clear()
        self._chain.clear()
        self._depth = 0

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())
