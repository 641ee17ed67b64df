"""kind별 Definition Generator

모든 Generator는 (GeneratorContext, document) -> None 형태이며
실패는 예외가 아니라 diagnostics 기록으로 보고한다.
"""

from .base import Definition, Generator, GeneratorContext, split_definition
from .evolving_object import generate_evolving_object
from .game_object import generate_game_object
from .material import generate_material_definition
from .recipe import generate_recipe_definition
from .resource import generate_resource_definition
from .skill import generate_skill_definition
from .storage import generate_storage_object

__all__ = [
    "Definition",
    "Generator",
    "GeneratorContext",
    "split_definition",
    "generate_evolving_object",
    "generate_game_object",
    "generate_material_definition",
    "generate_recipe_definition",
    "generate_resource_definition",
    "generate_skill_definition",
    "generate_storage_object",
]
