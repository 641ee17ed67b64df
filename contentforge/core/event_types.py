"""이벤트 유형 상수"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # 호스트 모듈 레지스트리
    MODULE_ADDED = "module_added"

    # 로더
    KIND_READY = "kind_ready"
    KIND_LOADED = "kind_loaded"
