"""
Unit-тесты для scripts/import_recipe.py (ревалидация).
"""

import pytest

from contracts.d3_recipe_dto import Recipe, RecipeSource, ResolvedIngredient
from scripts import import_recipe
from src.recipe_import.application import RecipeImportComponentFactory
from src.recipe_import.infrastructure import InMemoryRepository


def make_recipe(recipe_id: str) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=recipe_id,
        source=RecipeSource(type="text"),
        ingredients=[ResolvedIngredient(text="2 cups AP Flour", quantity=2.0, unit="cups", name="AP Flour")],
    )


class BrokenSaveRepository(InMemoryRepository):
    """Репозиторий, который не может сохранить заданные рецепты."""

    def __init__(self, failing_recipe_ids, **kwargs):
        super().__init__(**kwargs)
        self.failing_recipe_ids = set(failing_recipe_ids)

    def save_recipe(self, recipe: Recipe) -> None:
        if recipe.id in self.failing_recipe_ids:
            raise OSError("disk full")
        super().save_recipe(recipe)


@pytest.fixture
def use_repository(monkeypatch):
    """Подменяет репозиторий и проверку конфигурации скрипта."""
    def install(repository):
        monkeypatch.setattr(import_recipe, "validate_config", lambda **kwargs: None)
        monkeypatch.setattr(
            RecipeImportComponentFactory,
            "create_repository",
            staticmethod(lambda repo_dir=None: repository),
        )
        return repository

    return install


class TestRevalidateAll:
    """Тесты revalidate_all()."""

    def test_all_recipes_revalidated(self, use_repository, catalog_entries, tmp_path, capsys):
        """Должен ревалидировать все рецепты и вернуть True."""
        repository = use_repository(InMemoryRepository(
            recipes=[make_recipe("r1"), make_recipe("r2")],
            catalog=catalog_entries,
        ))

        assert import_recipe.revalidate_all(tmp_path) is True

        assert {r.status for r in repository.list_recipes()} == {"ready_to_import"}
        assert "ошибок: 0" in capsys.readouterr().out

    def test_one_failure_does_not_stop_others(self, use_repository, catalog_entries, tmp_path, capsys):
        """Должен напечатать ошибку одного рецепта и ревалидировать остальные."""
        repository = use_repository(BrokenSaveRepository(
            ["r1"],
            recipes=[make_recipe("r1"), make_recipe("r2")],
            catalog=catalog_entries,
        ))

        ok = import_recipe.revalidate_all(tmp_path)

        assert ok is False
        assert repository.get_recipe("r1").status == "draft"
        assert repository.get_recipe("r2").status == "ready_to_import"
        out = capsys.readouterr().out
        assert "[ERROR] r1:" in out
        assert "Успешно: 1/2, ошибок: 1" in out
