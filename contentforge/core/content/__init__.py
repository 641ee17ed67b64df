"""콘텐츠 정의 - 엔트리 모델, kind 간 참조 테이블, Generator"""

from .links import CraftPanelListing, StorageLinkTable
from .models import (
    CraftableType,
    EvolvingObjectType,
    GameObjectType,
    MaterialType,
    ResourceGroupType,
    ResourceType,
    SkillType,
    StorageType,
)

__all__ = [
    "CraftPanelListing",
    "StorageLinkTable",
    "CraftableType",
    "EvolvingObjectType",
    "GameObjectType",
    "MaterialType",
    "ResourceGroupType",
    "ResourceType",
    "SkillType",
    "StorageType",
]
