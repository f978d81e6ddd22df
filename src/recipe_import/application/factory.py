"""
Фабрика для создания компонентов Recipe Import.

Собирает оркестратор, реконсилятор и внешние адаптеры
со стандартными настройками из config/settings.py.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from config.settings import FUZZY_MATCH_THRESHOLD, MAX_DUPLICATES_FOR_MEDIUM, REPOSITORY_DIR
from ..domain.interfaces import IRecipeRepository, IRecipeStructurer, ITextExtractor
from ..infrastructure.adapters.anthropic_structurer import AnthropicRecipeStructurer
from ..infrastructure.adapters.google_vision_extractor import GoogleVisionTextExtractor
from ..infrastructure.json_file_repository import JsonFileRepository
from ..matching.ingredient_matcher import IngredientMatcher
from ..pipeline import ImportOrchestrator
from ..reconciliation.menu_link_reconciler import MenuLinkReconciler
from ..s3_validation.stage import RecipeValidator
from ..s4_scoring.stage import ConfidenceScorer


class RecipeImportComponentFactory:
    """
    Фабрика компонентов Recipe Import.
    """

    @staticmethod
    def create_text_extractor(credentials_path: Optional[str] = None) -> ITextExtractor:
        """Создаёт OCR на Google Cloud Vision."""
        logger.debug("[Factory] Создание GoogleVisionTextExtractor")
        return GoogleVisionTextExtractor(credentials_path)

    @staticmethod
    def create_structurer(api_key: Optional[str] = None) -> IRecipeStructurer:
        """Создаёт структурировщик на Claude."""
        logger.debug("[Factory] Создание AnthropicRecipeStructurer")
        return AnthropicRecipeStructurer(api_key=api_key)

    @staticmethod
    def create_repository(base_dir: Optional[Path] = None) -> IRecipeRepository:
        """Создаёт репозиторий на JSON-файлах."""
        directory = Path(base_dir) if base_dir else REPOSITORY_DIR
        logger.debug(f"[Factory] Создание JsonFileRepository: {directory}")
        return JsonFileRepository(directory)

    @staticmethod
    def create_validator(threshold: float = FUZZY_MATCH_THRESHOLD) -> RecipeValidator:
        return RecipeValidator(matcher=IngredientMatcher(threshold))

    @staticmethod
    def create_orchestrator(
        structurer: Optional[IRecipeStructurer] = None,
        text_extractor: Optional[ITextExtractor] = None,
        repository: Optional[IRecipeRepository] = None,
        threshold: float = FUZZY_MATCH_THRESHOLD,
        max_duplicates_for_medium: int = MAX_DUPLICATES_FOR_MEDIUM,
    ) -> ImportOrchestrator:
        """
        Создаёт оркестратор импорта.

        Args:
            structurer: Структурировщик (по умолчанию Claude)
            text_extractor: OCR (опционально, нужен для импорта из фото)
            repository: Репозиторий (опционально)
            threshold: Порог fuzzy-сопоставления
            max_duplicates_for_medium: Допустимое число дублей для medium

        Returns:
            ImportOrchestrator
        """
        return ImportOrchestrator(
            structurer=structurer or RecipeImportComponentFactory.create_structurer(),
            text_extractor=text_extractor,
            repository=repository,
            validator=RecipeImportComponentFactory.create_validator(threshold),
            scorer=ConfidenceScorer(max_duplicates_for_medium),
        )

    @staticmethod
    def create_reconciler(repository: Optional[IRecipeRepository] = None) -> MenuLinkReconciler:
        return MenuLinkReconciler(repository or RecipeImportComponentFactory.create_repository())
