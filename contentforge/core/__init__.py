"""contentforge Core - 필드 검증, 타입 인덱스 레지스트리, 콘텐츠 Generator"""
__version__ = "0.1.0"

from contentforge.core.diagnostics import Diagnostics, ErrorCategory
from contentforge.core.fields import FieldAccessor, FieldRule, FieldType, merge
from contentforge.core.registry import RegistryEntry, TypeIndexMap, TypeRegistry

__all__ = [
    "Diagnostics",
    "ErrorCategory",
    "FieldAccessor",
    "FieldRule",
    "FieldType",
    "merge",
    "RegistryEntry",
    "TypeIndexMap",
    "TypeRegistry",
]
