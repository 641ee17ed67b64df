"""설정 문서 저장소 - 파일 탐색, 문서 목록, 호스트 슬롯 할당

CONTENT_ROOT/<source>/*.json 을 source별 목록에 선언 순서(파일명 정렬)로 쌓는다.
읽기 실패한 파일은 로그 후 건너뛴다.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from contentforge.core.content.kinds import ConfigSource
from contentforge.core.logging import get_logger
from contentforge.modules.host import TypeMapsModule

logger = get_logger(__name__)


class ConfigStore:
    """source별 문서 목록. 목록 객체는 descriptor가 그대로 참조한다."""

    def __init__(self) -> None:
        self._documents: Dict[ConfigSource, List[Optional[Any]]] = {
            source: [] for source in ConfigSource
        }
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def mark_initialized(self) -> None:
        self._initialized = True

    def documents(self, source: Union[ConfigSource, str]) -> List[Optional[Any]]:
        """source의 문서 목록 (live 참조)"""
        return self._documents[ConfigSource(source)]

    def add(self, source: Union[ConfigSource, str], document: Optional[Any]) -> None:
        self.documents(source).append(document)

    def counts(self) -> Dict[str, int]:
        return {source.value: len(docs) for source, docs in self._documents.items()}

    def load_directory(self, root: Union[str, Path]) -> int:
        """root 아래 source 폴더의 *.json 을 읽는다. 읽은 문서 수 반환. 끝나면 초기화 완료."""
        root_path = Path(root)
        loaded = 0

        if not root_path.is_dir():
            logger.warning(f"Content root not found: {root_path}")
        else:
            for source in ConfigSource:
                folder = root_path / source.value
                if not folder.is_dir():
                    continue
                for path in sorted(folder.glob("*.json")):
                    document = self._read(path)
                    if document is None:
                        continue
                    self.add(source, document)
                    loaded += 1

        logger.info(f"Loaded {loaded} content documents from {root_path}")
        self.mark_initialized()
        return loaded

    def _read(self, path: Path) -> Optional[Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read content file {path}: {e}")
            return None


# === 호스트 슬롯 할당 ===


def _identifier(document: Any, path: Iterable[str]) -> Optional[str]:
    node = document
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node if isinstance(node, str) else None


def _sibling_identifiers(
    document: Any, definition: str, list_key: str, path: Iterable[str]
) -> List[str]:
    siblings = _identifier_list(document, definition, list_key)
    path = tuple(path)
    return [i for i in (_identifier(s, path) for s in siblings) if i is not None]


def _identifier_list(document: Any, definition: str, list_key: str) -> List[Any]:
    if not isinstance(document, Mapping):
        return []
    body = document.get(definition)
    if not isinstance(body, Mapping):
        return []
    siblings = body.get(list_key)
    if isinstance(siblings, Mapping):
        return list(siblings.values())
    return list(siblings) if isinstance(siblings, list) else []


def allocate_content_slots(
    type_maps: TypeMapsModule, store: ConfigStore, namespace: str = "hammerstone"
) -> Dict[str, int]:
    """문서 식별자마다 호스트 index map 슬롯을 미리 만든다.

    레지스트리는 index map에 없는 key를 거부하므로 모듈 등록 전에 호출해야 한다.
    반환: map 이름 -> 새로 할당된 수
    """

    def tag(name: str) -> str:
        return f"{namespace}:{name}" if namespace else name

    description = ("description", "identifier")
    allocated: Dict[str, int] = {}

    def allocate(map_name: str, keys: Iterable[str]) -> None:
        index_map = type_maps.index_map(map_name)
        before = len(index_map)
        for key in keys:
            index_map.allocate(key)
        allocated[map_name] = allocated.get(map_name, 0) + len(index_map) - before

    for document in store.documents(ConfigSource.OBJECTS):
        identifier = _identifier(document, (tag("object_definition"), *description))
        if identifier is None:
            continue
        allocate("gameObject", [identifier])
        # resource_link 오브젝트는 자기 리소스를 만들지 않는다
        components = document[tag("object_definition")].get("components")
        if not (isinstance(components, Mapping) and tag("resource_link") in components):
            allocate("resource", [identifier])

    for document in store.documents(ConfigSource.STORAGE):
        identifier = _identifier(document, (tag("storage_definition"), *description))
        if identifier is not None:
            allocate("storage", [identifier])

    for document in store.documents(ConfigSource.RECIPES):
        identifier = _identifier(document, (tag("recipe_definition"), *description))
        if identifier is not None:
            allocate("constructable", [identifier])

    for document in store.documents(ConfigSource.MATERIALS):
        allocate(
            "material",
            _sibling_identifiers(
                document, tag("material_definition"), "materials", ("identifier",)
            ),
        )

    for document in store.documents(ConfigSource.SKILLS):
        allocate(
            "skill",
            _sibling_identifiers(
                document, tag("skill_definition"), "skills", description
            ),
        )

    logger.info(f"Allocated host slots: {allocated}")
    return allocated
