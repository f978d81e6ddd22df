"""
Recipe Import: импорт рецептов и сверка ингредиентов с каталогом POS.

Архитектура: пайплайн этапов
- Stage 1: Extraction (текст из фото, внешний OCR)
- Stage 2: Structuring (черновик рецепта, внешний структурировщик)
- Stage 3: Validation (сопоставление с каталогом + issues)
- Stage 4: Scoring (уровень доверия)
- Stage 5: Status (статус жизненного цикла)

Отдельно: Menu-Link Reconciler (рецепт ↔ позиция меню).

Вход: фото или текст рецепта, каталог ингредиентов POS
Выход: contracts.Recipe
"""

from .pipeline import ImportOrchestrator, PipelineResult
from .progress import ImportStage, ProgressEvent, ProgressReporter

# Catalog & matching
from .catalog import CatalogIndex, normalize_name
from .matching import IngredientMatcher, MatchResult

# Stage exports
from .s1_extraction import ExtractionStage
from .s2_structuring import IngredientLineParser, StructuringResult, StructuringStage
from .s3_validation import RecipeValidator, ValidationResult
from .s4_scoring import ConfidenceScorer
from .s5_status import StatusResolver

# Reconciliation
from .reconciliation import MenuLinkReconciler, ReconcileReport, resolve_menu_item_status

__all__ = [
    # Pipeline
    "ImportOrchestrator",
    "PipelineResult",
    "ImportStage",
    "ProgressEvent",
    "ProgressReporter",
    # Catalog & matching
    "CatalogIndex",
    "normalize_name",
    "IngredientMatcher",
    "MatchResult",
    # Stages
    "ExtractionStage",
    "IngredientLineParser",
    "StructuringResult",
    "StructuringStage",
    "RecipeValidator",
    "ValidationResult",
    "ConfidenceScorer",
    "StatusResolver",
    # Reconciliation
    "MenuLinkReconciler",
    "ReconcileReport",
    "resolve_menu_item_status",
]
