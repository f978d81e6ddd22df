from .line_parser import IngredientLineParser, UNICODE_FRACTIONS
from .stage import (
    DEFAULT_RECIPE_NAME,
    StructuringResult,
    StructuringStage,
    generate_recipe_id,
)

__all__ = [
    "DEFAULT_RECIPE_NAME",
    "IngredientLineParser",
    "StructuringResult",
    "StructuringStage",
    "UNICODE_FRACTIONS",
    "generate_recipe_id",
]
