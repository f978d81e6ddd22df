"""
Контракты DTO между доменами проекта Recipe Import.

Контракты D2/D3/POS используют Pydantic v2 для валидации.

Контракты:
- D1 -> D2: ExtractedText (d1_extraction_dto.py)
- D2 -> D3: DraftRecipe, RawIngredientLine (d2_structuring_dto.py)
- D3 -> Repository: Recipe, ResolvedIngredient, Issue (d3_recipe_dto.py)
- POS: CatalogEntry, MenuItem, summaries (pos_dto.py)
"""

# D1 -> D2 (Extraction -> Structuring)
from .d1_extraction_dto import ExtractedText, ExtractionMetadata

# D2 -> D3 (Structuring -> Validation)
from .d2_structuring_dto import ConfidenceLevel, DraftRecipe, RawIngredientLine

# D3 -> Repository
from .d3_recipe_dto import (
    Issue,
    IssueKind,
    MatchKind,
    Recipe,
    RecipeSource,
    RecipeStatus,
    ResolvedIngredient,
)

# POS
from .pos_dto import CatalogEntry, MenuItem, MenuItemSummary, RecipeSummary

__all__ = [
    # D1 -> D2
    "ExtractedText",
    "ExtractionMetadata",
    # D2 -> D3
    "ConfidenceLevel",
    "DraftRecipe",
    "RawIngredientLine",
    # D3
    "Issue",
    "IssueKind",
    "MatchKind",
    "Recipe",
    "RecipeSource",
    "RecipeStatus",
    "ResolvedIngredient",
    # POS
    "CatalogEntry",
    "MenuItem",
    "MenuItemSummary",
    "RecipeSummary",
]
