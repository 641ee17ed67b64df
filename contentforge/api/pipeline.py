"""Pipeline diagnostics endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from contentforge.api.schemas import (
    ErrorReportResponse,
    KindListResponse,
    KindStatusResponse,
    ReadyResponse,
)
from contentforge.core.content.kinds import ContentKind, KindStatus, parse_kind
from contentforge.core.logging import get_logger
from contentforge.modules.module_manager import ModuleManager
from contentforge.services.config_loader import ConfigStore
from contentforge.services.object_loader import ObjectLoader

logger = get_logger(__name__)

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


def get_object_loader(request: Request) -> ObjectLoader:
    """ObjectLoader 인스턴스 반환 (의존성 주입)"""
    loader: ObjectLoader = request.app.state.object_loader
    return loader


def get_module_manager(request: Request) -> ModuleManager:
    """ModuleManager 인스턴스 반환 (의존성 주입)"""
    manager: ModuleManager = request.app.state.module_manager
    return manager


def get_config_store(request: Request) -> ConfigStore:
    """ConfigStore 인스턴스 반환 (의존성 주입)"""
    store: ConfigStore = request.app.state.config_store
    return store


def _parse_or_404(kind: str) -> ContentKind:
    parsed = parse_kind(kind)
    if parsed is None:
        raise HTTPException(status_code=404, detail=f"Unknown content kind: {kind}")
    return parsed


def _build_kind_status(status: KindStatus) -> KindStatusResponse:
    """KindStatus를 KindStatusResponse로 변환"""
    return KindStatusResponse(
        kind=status.kind.value,
        state=status.state.value,
        waiting_for_start=status.waiting_for_start,
        disabled=status.disabled,
        document_count=status.document_count,
        missing_modules=status.missing_modules,
        pending_kinds=[k.value for k in status.pending_kinds],
    )


@router.get("/kinds", response_model=KindListResponse)
def list_kinds(
    loader: ObjectLoader = Depends(get_object_loader),
    store: ConfigStore = Depends(get_config_store),
) -> KindListResponse:
    """모든 kind 상태"""
    return KindListResponse(
        initialized=store.is_initialized,
        kinds=[_build_kind_status(loader.status(kind)) for kind in loader.descriptors],
    )


@router.get("/kinds/{kind}", response_model=KindStatusResponse)
def get_kind(
    kind: str, loader: ObjectLoader = Depends(get_object_loader)
) -> KindStatusResponse:
    """kind 하나의 상태와 남은 의존성"""
    return _build_kind_status(loader.status(_parse_or_404(kind)))


@router.get("/errors", response_model=ErrorReportResponse)
def get_errors(loader: ObjectLoader = Depends(get_object_loader)) -> ErrorReportResponse:
    """누적 에러 수와 카테고리별 집계"""
    diagnostics = loader.diagnostics
    return ErrorReportResponse(
        error_count=diagnostics.error_count,
        by_category=diagnostics.by_category(),
    )


@router.post("/kinds/{kind}/ready", response_model=ReadyResponse)
def mark_ready(
    kind: str, loader: ObjectLoader = Depends(get_object_loader)
) -> ReadyResponse:
    """waiting_for_start 해제 (수동 트리거)"""
    parsed = _parse_or_404(kind)
    before = {k for k, d in loader.descriptors.items() if d.loaded}
    loader.mark_object_as_ready_to_load(parsed)
    loaded = [k.value for k, d in loader.descriptors.items() if d.loaded and k not in before]
    logger.info(f"Kind {parsed.value} marked ready; loaded: {loaded}")
    return ReadyResponse(
        kind=parsed.value,
        loaded_kinds=loaded,
        state=loader.state(parsed).value,
    )
