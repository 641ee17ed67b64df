"""필드 접근/검증 엔진

모든 Generator는 get_field / get_table / get_field_as_index / get_vec3
네 가지 프리미티브로만 설정 레코드를 읽는다.

검증 순서 (고정):
1. type          - 숫자 문자열은 number, 정확히 "true"는 boolean으로 인정
                   (NaN/무한대는 숫자로 보지 않는다)
2. in_table      - 값이 주어진 레지스트리의 key여야 함
3. not_in_table  - 값이 주어진 레지스트리의 key가 아니어야 함
4. with_         - 변환 (마지막)

실패는 예외가 아니다. Diagnostics에 1건 기록하고 None을 반환한다.
"""

from __future__ import annotations

import copy
import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

from contentforge.core.diagnostics import Diagnostics, ErrorCategory
from contentforge.core.geometry import Vec3
from contentforge.core.logging import get_pipeline_logger

logger = get_pipeline_logger()

_UNSET: Any = object()

COERCED_STRING_LENGTH = 20

# 숫자로 인정하는 문자열: 10진수 (소수점, 지수 허용) 또는 0x 16진 정수.
# 앞뒤 공백 허용. "1_000", "inf", "nan", "infinity" 는 거부.
_DECIMAL_STRING = re.compile(r"\s*[-+]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][-+]?[0-9]+)?\s*")
_HEX_STRING = re.compile(r"\s*[-+]?0[xX][0-9a-fA-F]+\s*")


class FieldType(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    TABLE = "table"


@dataclass(frozen=True)
class FieldRule:
    """필드 하나에 대한 규칙. 불변 - merged()로 조합한다.

    Args:
        optional: 없으면 에러 없이 None
        default: 없으면 이 값 (검증/변환 생략)
        type: FieldType 또는 그 문자열 값
        in_table: 값이 key로 존재해야 하는 Mapping
        not_in_table: 값이 key로 존재하면 안 되는 Mapping
        length: get_table 전용 - 정확한 원소 수
        map: get_table 전용 - 원소별 변환, 하나라도 None이면 전체 실패
        with_: 최종 변환
    """

    optional: bool = False
    default: Any = _UNSET
    type: Optional[FieldType] = None
    in_table: Any = None
    not_in_table: Any = None
    length: Optional[int] = None
    map: Optional[Callable[[Any], Any]] = None
    with_: Optional[Callable[[Any], Any]] = None

    def __post_init__(self) -> None:
        if self.type is not None and not isinstance(self.type, FieldType):
            object.__setattr__(self, "type", FieldType(self.type))

    @property
    def has_default(self) -> bool:
        return self.default is not _UNSET

    def merged(self, **overrides: Any) -> "FieldRule":
        return replace(self, **overrides)


OPTIONAL = FieldRule(optional=True)


def is_type(value: Any, field_type: FieldType | str) -> bool:
    """value가 field_type에 맞는지. 허용 변환 2가지 포함."""
    field_type = FieldType(field_type)

    if field_type is FieldType.NUMBER:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        if isinstance(value, float):
            return math.isfinite(value)
        if isinstance(value, str):
            return _parse_number(value) is not None
        return False

    if field_type is FieldType.BOOLEAN:
        return isinstance(value, bool) or value == "true"

    if field_type is FieldType.STRING:
        return isinstance(value, str)

    return isinstance(value, (dict, list, tuple))


def _parse_number(text: str) -> Optional[int | float]:
    """숫자 문자열 -> 유한한 숫자. 인정하지 않는 형식이면 None."""
    if _HEX_STRING.fullmatch(text):
        return int(text.strip(), 16)
    if _DECIMAL_STRING.fullmatch(text):
        number = float(text)
        return number if math.isfinite(number) else None
    return None


def _coerce(value: Any, field_type: Optional[FieldType]) -> Any:
    """검증 통과한 문자열을 실제 타입으로 변환"""
    if field_type is FieldType.NUMBER and isinstance(value, str):
        number = _parse_number(value)
        if isinstance(number, int):
            return number
        return int(number) if number.is_integer() and "." not in value else number
    if field_type is FieldType.BOOLEAN and value == "true":
        return True
    return value


def is_empty(value: Any) -> bool:
    return value is None or (hasattr(value, "__len__") and len(value) == 0)


def merge(a: dict, b: Mapping) -> dict:
    """b를 a에 재귀 병합 (in-place). 양쪽 모두 dict인 key만 재귀, 나머지는 b 우선."""
    for key, value in b.items():
        if isinstance(value, Mapping) and isinstance(a.get(key), dict):
            merge(a[key], value)
        elif isinstance(value, (dict, list)):
            a[key] = copy.deepcopy(value)
        else:
            a[key] = value
    return a


def map_values(values: Any, fn: Callable[[Any], Any]) -> list:
    """fn 결과 중 None이 아닌 것만 모은다."""
    result = []
    for value in values:
        mapped = fn(value)
        if mapped is not None:
            result.append(mapped)
    return result


def coerce_to_string(value: Any) -> str:
    """로그용 짧은 문자열. 절대 예외를 던지지 않는다."""
    try:
        if value is None:
            return "None"
        if isinstance(value, (dict, list, tuple)):
            text = json.dumps(value, default=str, ensure_ascii=False)
            if len(text) > COERCED_STRING_LENGTH:
                return text[:COERCED_STRING_LENGTH] + "..."
            return text
        return str(value)
    except Exception:
        return f"<{type(value).__name__}>"


def _can_get_field(record: Any, key: Any) -> bool:
    if not isinstance(record, Mapping) or key is None:
        return False
    return record.get(key) is not None


def _has_key(table: Mapping, value: Any) -> bool:
    try:
        return value in table
    except TypeError:
        return False


def _index_of(entry: Any) -> Any:
    return getattr(entry, "index", entry)


class FieldAccessor:
    """검증 정책을 한곳에 모은 필드 접근자. 실패는 diagnostics로 집계."""

    def __init__(self, diagnostics: Optional[Diagnostics] = None) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    @property
    def error_count(self) -> int:
        return self.diagnostics.error_count

    # === 에러 기록 ===

    def log_missing(self, alias: str, key: Any, table: Any) -> None:
        if key is None:
            self.diagnostics.record(
                ErrorCategory.UNRESOLVED_REFERENCE, "%s key is missing.", alias
            )
            return

        self.diagnostics.record(
            ErrorCategory.UNRESOLVED_REFERENCE,
            "%s '%s' does not exist.",
            alias,
            coerce_to_string(key),
        )

        if isinstance(table, Mapping) and len(table) > 0:
            options = sorted(str(k) for k in table if isinstance(k, str))
            logger.error("HINT: Try one of these: {%s}", ", ".join(options))
        else:
            logger.error("No available options for %s.", alias)

    def log_existing(self, alias: str, key: Any) -> None:
        self.diagnostics.record(
            ErrorCategory.KEY_COLLISION,
            "%s already exists with key '%s'",
            alias,
            coerce_to_string(key),
        )

    def log_wrong_type(self, key: str, value: Any, field_type: FieldType) -> None:
        self.diagnostics.record(
            ErrorCategory.WRONG_TYPE,
            "key='%s' should be of type '%s', not '%s'",
            key,
            field_type.value,
            type(value).__name__,
        )

    def log_not_implemented(self, feature: str) -> None:
        self.diagnostics.record(
            ErrorCategory.NOT_IMPLEMENTED,
            "%s is used but it is yet to be implemented",
            feature,
        )

    def _log_missing_field(self, record: Any, key: Any, what: str) -> None:
        self.diagnostics.record(
            ErrorCategory.MISSING_FIELD,
            "Missing required %s: %s in table: %s",
            what,
            key,
            coerce_to_string(record),
        )

    # === 레지스트리 조회 ===

    def get_type(self, table: Mapping, key: Any, alias: Optional[str] = None) -> Any:
        """table[key] 또는 None (에러 기록)."""
        if _has_key(table, key):
            return table[key]
        self.log_missing(alias or coerce_to_string(key), key, table)
        return None

    def get_type_index(
        self, table: Mapping, key: Any, alias: Optional[str] = None
    ) -> Optional[int]:
        """table[key].index 또는 None (에러 기록). TypeIndexMap이면 값 자체."""
        entry = self.get_type(table, key, alias)
        return None if entry is None else _index_of(entry)

    def get_type_key(
        self, table: Mapping, key: Any, alias: Optional[str] = None
    ) -> Optional[str]:
        entry = self.get_type(table, key, alias)
        return None if entry is None else entry.key

    # === 검증 ===

    def validate(self, key: str, value: Any, rule: FieldRule) -> bool:
        """type → in_table → not_in_table 순서. 첫 실패에서 중단."""
        if rule.type is not None and not is_type(value, rule.type):
            self.log_wrong_type(key, value, rule.type)
            return False

        if rule.in_table is not None:
            if not isinstance(rule.in_table, Mapping):
                self.diagnostics.record(
                    ErrorCategory.INVALID_OPTION, "Value of in_table is not a table"
                )
                return False
            if not _has_key(rule.in_table, value):
                self.log_missing(key, value, rule.in_table)
                return False

        if rule.not_in_table is not None:
            if not isinstance(rule.not_in_table, Mapping):
                self.diagnostics.record(
                    ErrorCategory.INVALID_OPTION, "Value of not_in_table is not a table"
                )
                return False
            if _has_key(rule.not_in_table, value):
                self.log_existing(key, value)
                return False

        return True

    # === 프리미티브 ===

    def get_field(
        self, record: Any, key: str, rule: Optional[FieldRule] = None
    ) -> Any:
        rule = rule or FieldRule()

        if not _can_get_field(record, key):
            if rule.has_default:
                return rule.default
            if rule.optional:
                return None
            self._log_missing_field(record, key, "field")
            return None

        value = record[key]
        if not self.validate(key, value, rule):
            return None
        value = _coerce(value, rule.type)

        if rule.with_ is not None:
            if not callable(rule.with_):
                self.diagnostics.record(
                    ErrorCategory.INVALID_OPTION, "Value of with option is not function"
                )
                return None
            value = rule.with_(value)

        return value

    def get_table(
        self, record: Any, key: str, rule: Optional[FieldRule] = None
    ) -> Any:
        rule = rule or FieldRule()

        if not _can_get_field(record, key):
            if rule.has_default:
                return rule.default
            if rule.optional:
                return None
            self._log_missing_field(record, key, "table-field")
            return None

        values = record[key]
        if not isinstance(values, (dict, list, tuple)):
            self.diagnostics.record(
                ErrorCategory.WRONG_TYPE, "Value type of key '%s' is not table", key
            )
            return None

        # 원소별 검증이 모든 변환보다 먼저
        elements = list(values.values()) if isinstance(values, dict) else list(values)
        for element in elements:
            if not self.validate(key, element, rule):
                return None

        if isinstance(values, dict):
            values = {k: _coerce(v, rule.type) for k, v in values.items()}
        else:
            values = [_coerce(v, rule.type) for v in values]

        if rule.length is not None and len(values) != rule.length:
            self.diagnostics.record(
                ErrorCategory.WRONG_TYPE,
                "Value of key '%s' requires %d elements",
                key,
                rule.length,
            )
            return None

        if rule.map is not None:
            if not callable(rule.map):
                self.diagnostics.record(
                    ErrorCategory.INVALID_OPTION, "Value of map option is not function."
                )
                return None
            # 원소마다 모두 평가해서 실패를 각각 보고한다
            source = values.values() if isinstance(values, dict) else values
            mapped = [rule.map(element) for element in source]
            if any(element is None for element in mapped):
                logger.info("Table '%s' dropped: an element could not be resolved", key)
                return None
            values = mapped

        if rule.with_ is not None:
            if not callable(rule.with_):
                self.diagnostics.record(
                    ErrorCategory.INVALID_OPTION, "Value of with option is not function."
                )
                return None
            values = rule.with_(values)
            if values is None:
                return None

        return values

    def get_field_as_index(
        self,
        record: Any,
        key: str,
        index_table: Mapping,
        rule: Optional[FieldRule] = None,
    ) -> Optional[int]:
        """사람이 읽는 key를 레지스트리 인덱스로 바로 변환 (예: foo -> index_table[foo].index)"""
        rule = (rule or FieldRule()).merged(
            in_table=index_table,
            with_=lambda value: self.get_type_index(index_table, value),
        )
        return self.get_field(record, key, rule)

    def get_vec3(
        self, record: Any, key: str, rule: Optional[FieldRule] = None
    ) -> Optional[Vec3]:
        """3원소 숫자 배열 -> Vec3"""
        rule = (rule or FieldRule()).merged(
            type=FieldType.NUMBER,
            length=3,
            with_=_to_vec3,
        )
        return self.get_table(record, key, rule)

    # === 레코드 단위 ===

    def compile(self, required: Mapping[str, bool], record: dict) -> Optional[dict]:
        """required=True인 필드가 하나라도 None이면 레코드 전체를 버린다."""
        for name, is_required in required.items():
            if is_required and record.get(name) is None:
                logger.error("Missing %s", name)
                return None
        return record

    def add_props(
        self,
        target: dict,
        component: Any,
        key: str = "props",
        defaults: Optional[Mapping] = None,
    ) -> dict:
        """기본 확장 속성 + 사용자 정의 속성을 target에 병합"""
        user_props = self.get_field(component, key, FieldRule(default={}))
        if not isinstance(user_props, Mapping):
            user_props = {}
        merged = merge(merge({}, defaults or {}), user_props)
        return merge(target, merged)

    def get_localized_string(
        self, record: Any, key: str, default: Optional[str] = None
    ) -> Optional[str]:
        """로케일 테이블이 없으므로 원문 문자열 그대로"""
        rule = FieldRule(default=default) if default is not None else FieldRule()
        return self.get_field(record, key, rule)

    def debug(self, identifier: str, document: Any, entry: Any) -> None:
        if isinstance(document, Mapping) and document.get("debug"):
            logger.info("DEBUGGING: %s", identifier)
            logger.info("Config: %s", document)
            logger.info("Output: %s", entry)


def _to_vec3(values: Any) -> Vec3:
    if isinstance(values, dict):
        values = list(values.values())
    return Vec3(float(values[0]), float(values[1]), float(values[2]))
