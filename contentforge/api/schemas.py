"""API response schemas."""

from pydantic import BaseModel, Field


class KindStatusResponse(BaseModel):
    """kind 하나의 로드 상태"""

    kind: str
    state: str = Field(..., description="unregistered, pending, loaded")
    waiting_for_start: bool
    disabled: bool
    document_count: int
    missing_modules: list[str] = []
    pending_kinds: list[str] = []


class KindListResponse(BaseModel):
    """전체 kind 상태"""

    initialized: bool
    kinds: list[KindStatusResponse]


class ErrorReportResponse(BaseModel):
    """누적 검증 실패"""

    error_count: int
    by_category: dict[str, int] = {}


class ReadyResponse(BaseModel):
    """mark ready 결과"""

    kind: str
    loaded_kinds: list[str] = Field(
        default_factory=list, description="이번 호출로 로드된 kind"
    )
    state: str


class HealthResponse(BaseModel):
    status: str
    modules: int
    documents: int
