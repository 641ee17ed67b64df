"""검증 실패 누적기

실패는 파이프라인을 멈추지 않는다. 실패한 필드/요소/형제 레코드 하나만
None으로 떨어지고, 카운터와 로그 스트림이 로드 후 유일한 보고 수단이다.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum

from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()


class ErrorCategory(str, Enum):
    MISSING_FIELD = "missing_field"
    WRONG_TYPE = "wrong_type"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    KEY_COLLISION = "key_collision"
    INVALID_OPTION = "invalid_option"
    NOT_IMPLEMENTED = "not_implemented"
    GENERATOR_FAILURE = "generator_failure"


# 경고 수준으로 기록하는 카테고리 (카운트는 동일하게 증가)
_WARNING_CATEGORIES = frozenset(
    {ErrorCategory.KEY_COLLISION, ErrorCategory.NOT_IMPLEMENTED}
)


class Diagnostics:
    """에러 카운터 + 카테고리별 집계. 단조 증가만 한다."""

    def __init__(self) -> None:
        self._counts: Counter[ErrorCategory] = Counter()

    @property
    def error_count(self) -> int:
        return sum(self._counts.values())

    def count(self, category: ErrorCategory) -> int:
        return self._counts[category]

    def by_category(self) -> dict[str, int]:
        return {category.value: n for category, n in self._counts.items() if n}

    def record(self, category: ErrorCategory, message: str, *args: object) -> None:
        """실패 1건 기록. message는 logging %-포맷."""
        self._counts[category] += 1
        if category in _WARNING_CATEGORIES:
            logger.warning(message, *args)
        else:
            logger.error(message, *args)
