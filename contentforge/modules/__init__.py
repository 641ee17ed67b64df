"""호스트 모듈 시스템"""

from contentforge.modules.base import HostModule
from contentforge.modules.module_manager import ModuleManager

__all__ = ["HostModule", "ModuleManager"]
