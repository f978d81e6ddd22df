"""
Unit-тесты для RecipeImportComponentFactory.
"""

from src.recipe_import.application import RecipeImportComponentFactory
from src.recipe_import.infrastructure import JsonFileRepository
from src.recipe_import.pipeline import ImportOrchestrator
from src.recipe_import.reconciliation import MenuLinkReconciler


class TestRecipeImportComponentFactory:
    """Тесты сборки компонентов."""

    def test_create_repository(self, tmp_path):
        """Должен создавать JSON-репозиторий."""
        repository = RecipeImportComponentFactory.create_repository(tmp_path)

        assert isinstance(repository, JsonFileRepository)
        assert repository.base_dir == tmp_path

    def test_create_validator(self):
        """Должен создавать валидатор с заданным порогом."""
        validator = RecipeImportComponentFactory.create_validator(threshold=0.9)

        assert validator.matcher.threshold == 0.9

    def test_create_orchestrator(self, fake_structurer, tmp_path):
        """Должен собирать оркестратор из компонентов."""
        repository = RecipeImportComponentFactory.create_repository(tmp_path)

        orchestrator = RecipeImportComponentFactory.create_orchestrator(
            structurer=fake_structurer,
            repository=repository,
            threshold=0.85,
            max_duplicates_for_medium=1,
        )

        assert isinstance(orchestrator, ImportOrchestrator)
        assert orchestrator.repository is repository
        assert orchestrator.extraction_stage is None
        assert orchestrator.validator.matcher.threshold == 0.85
        assert orchestrator.scorer.max_duplicates_for_medium == 1

    def test_create_reconciler(self, tmp_path):
        """Должен создавать реконсилятор меню."""
        repository = RecipeImportComponentFactory.create_repository(tmp_path)

        reconciler = RecipeImportComponentFactory.create_reconciler(repository)

        assert isinstance(reconciler, MenuLinkReconciler)
        assert reconciler.repository is repository
