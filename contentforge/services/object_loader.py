"""의존성 게이트 로더 - kind별로 조건이 맞는 순간 한 번만 Generator 실행

트리거:
- ModuleManager의 MODULE_ADDED (EventBus 경유)
- mark_object_as_ready_to_load(kind)

sweep은 상태 변화가 없을 때까지 모든 kind를 반복 평가한다.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from contentforge.core.content.generators.base import GeneratorContext
from contentforge.core.content.kinds import (
    DEFAULT_KINDS,
    ContentKind,
    KindDescriptor,
    KindState,
    KindStatus,
    parse_kind,
)
from contentforge.core.diagnostics import Diagnostics, ErrorCategory
from contentforge.core.event_bus import PipelineEvent
from contentforge.core.event_types import EventTypes
from contentforge.core.logging import get_pipeline_logger
from contentforge.modules.module_manager import ModuleManager
from contentforge.services.config_loader import ConfigStore

logger = logging.getLogger(__name__)
pipeline_logger = get_pipeline_logger()

KindName = Union[ContentKind, str]


def build_descriptors(
    config_store: ConfigStore, disabled_kinds: Iterable[KindName] = ()
) -> Dict[ContentKind, KindDescriptor]:
    """기본 kind 표로 descriptor 생성. config_source는 저장소 목록을 그대로 참조."""
    disabled_kinds = list(disabled_kinds)
    disabled = {parse_kind(name) for name in disabled_kinds}
    unknown = [name for name in disabled_kinds if parse_kind(name) is None]
    if unknown:
        logger.warning(f"Unknown kinds in disabled list ignored: {unknown}")

    return {
        kind: KindDescriptor(
            kind=kind,
            config_source=config_store.documents(spec.source),
            generator=spec.generator,
            module_dependencies=spec.module_dependencies,
            kind_dependencies=spec.kind_dependencies,
            waiting_for_start=spec.waiting_for_start,
            disabled=kind in disabled,
        )
        for kind, spec in DEFAULT_KINDS.items()
    }


class ObjectLoader:
    """kind 로드 상태 관리 + Generator 호출"""

    def __init__(
        self,
        module_manager: ModuleManager,
        config_store: ConfigStore,
        context: Optional[GeneratorContext] = None,
        descriptors: Optional[Dict[ContentKind, KindDescriptor]] = None,
        disabled_kinds: Iterable[KindName] = (),
    ) -> None:
        self._modules = module_manager
        self._config = config_store
        self._ctx = context if context is not None else GeneratorContext(module_manager)
        self._descriptors = (
            descriptors
            if descriptors is not None
            else build_descriptors(config_store, disabled_kinds)
        )
        self._initialized = False
        self._sweeping = False

    @property
    def context(self) -> GeneratorContext:
        return self._ctx

    @property
    def diagnostics(self) -> Diagnostics:
        return self._ctx.accessor.diagnostics

    @property
    def descriptors(self) -> Dict[ContentKind, KindDescriptor]:
        return self._descriptors

    def init(self) -> bool:
        """MODULE_ADDED 구독. 두 번째 호출부터는 아무것도 하지 않는다."""
        if self._initialized:
            return False
        self._initialized = True
        self._modules.bind(self._on_module_added)
        logger.info("Object loader initialized")
        return True

    def _on_module_added(self, event: PipelineEvent) -> None:
        self.try_load_object_definitions()

    # === 가드 ===

    def can_load_object_type(self, descriptor: KindDescriptor) -> bool:
        """모든 조건이 맞으면 loaded를 세우고 True (test-and-set)."""
        if not self._config.is_initialized:
            return False
        if descriptor.waiting_for_start or descriptor.disabled or descriptor.loaded:
            return False
        if self._modules.missing(list(descriptor.module_dependencies)):
            return False
        for dependency in descriptor.kind_dependencies:
            if not self._descriptors[dependency].loaded:
                return False

        descriptor.loaded = True
        return True

    # === 트리거 ===

    def mark_object_as_ready_to_load(self, kind: KindName) -> bool:
        """waiting_for_start 해제 후 sweep. 알 수 없는 kind면 False."""
        parsed = parse_kind(kind)
        if parsed is None or parsed not in self._descriptors:
            pipeline_logger.error("Unknown content kind marked ready: %s", kind)
            return False

        pipeline_logger.info("Object is now ready to start loading: %s", parsed.value)
        self._descriptors[parsed].waiting_for_start = False
        self._modules.event_bus.emit(
            PipelineEvent(
                event_type=EventTypes.KIND_READY,
                data={"kind": parsed.value},
                source=parsed.value,
            )
        )
        # 더 이상 모듈이 추가되지 않을 수 있으므로 직접 재평가
        self.try_load_object_definitions()
        return True

    def try_load_object_definitions(self) -> List[ContentKind]:
        """고정점까지 sweep. 이번 호출에서 로드된 kind 목록 반환."""
        # Generator 안에서 모듈이 추가되면 재진입한다. 바깥 sweep이 이어서 처리.
        if self._sweeping:
            return []
        self._sweeping = True
        loaded: List[ContentKind] = []
        try:
            changed = True
            while changed:
                changed = False
                for descriptor in self._descriptors.values():
                    if self.can_load_object_type(descriptor):
                        self.load_object_definition(descriptor)
                        loaded.append(descriptor.kind)
                        changed = True
        finally:
            self._sweeping = False
        return loaded

    # === 실행 ===

    def load_object_definition(self, descriptor: KindDescriptor) -> None:
        """문서마다 Generator 한 번. 예외는 기록만 하고 다음 문서로."""
        kind = descriptor.kind.value
        pipeline_logger.info("Generating %s definitions:", kind)

        documents = descriptor.config_source
        if not documents:
            pipeline_logger.info("  (none)")
        else:
            for document in documents:
                if document is None:
                    pipeline_logger.warning("Attempting to generate None %s", kind)
                    continue
                try:
                    descriptor.generator(self._ctx, document)
                except Exception:
                    pipeline_logger.exception("Generator for %s raised", kind)
                    self.diagnostics.record(
                        ErrorCategory.GENERATOR_FAILURE,
                        "Generator failure while loading %s",
                        kind,
                    )

        self._modules.event_bus.emit(
            PipelineEvent(
                event_type=EventTypes.KIND_LOADED,
                data={"kind": kind, "documents": len(documents)},
                source=kind,
            )
        )

    # === 상태 조회 ===

    def state(self, kind: KindName) -> Optional[KindState]:
        parsed = parse_kind(kind)
        if parsed is None:
            return None
        if self._descriptors[parsed].loaded:
            return KindState.LOADED
        if not self._config.is_initialized:
            return KindState.UNREGISTERED
        return KindState.PENDING

    def pending_dependencies(self, kind: KindName) -> Dict[str, list]:
        """아직 충족되지 않은 모듈/kind 의존성"""
        parsed = parse_kind(kind)
        if parsed is None:
            return {"modules": [], "kinds": []}
        descriptor = self._descriptors[parsed]
        return {
            "modules": self._modules.missing(list(descriptor.module_dependencies)),
            "kinds": [
                dependency
                for dependency in descriptor.kind_dependencies
                if not self._descriptors[dependency].loaded
            ],
        }

    def status(self, kind: KindName) -> Optional[KindStatus]:
        parsed = parse_kind(kind)
        if parsed is None:
            return None
        descriptor = self._descriptors[parsed]
        pending = self.pending_dependencies(parsed)
        return KindStatus(
            kind=parsed,
            state=self.state(parsed),
            waiting_for_start=descriptor.waiting_for_start,
            disabled=descriptor.disabled,
            document_count=len(descriptor.config_source),
            missing_modules=pending["modules"],
            pending_kinds=pending["kinds"],
        )
