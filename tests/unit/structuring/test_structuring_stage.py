"""
Unit-тесты для Stage 2: Structuring.
"""

from unittest.mock import MagicMock

import pytest

from contracts.d2_structuring_dto import DraftRecipe, RawIngredientLine
from contracts.d3_recipe_dto import RecipeSource
from src.recipe_import.domain.exceptions import StructuringFailed
from src.recipe_import.s2_structuring import DEFAULT_RECIPE_NAME, StructuringStage, generate_recipe_id


def text_source() -> RecipeSource:
    return RecipeSource(type="text", content="...")


class TestStructuringStage:
    """Тесты сборки черновика."""

    def test_builds_draft_recipe(self, fake_structurer, catalog_entries):
        """Должен собирать черновик рецепта."""
        stage = StructuringStage(fake_structurer)

        result = stage.process("Pancakes\n2 cups AP Flour\n3 eggs", catalog_entries, text_source())
        recipe = result.recipe

        assert recipe.name == "Pancakes"
        assert recipe.status == "draft"
        assert recipe.confidence == "medium"
        assert recipe.issues == []
        assert recipe.id.startswith("recipe_")
        assert [i.order_index for i in recipe.ingredients] == [0, 1]
        assert recipe.ingredients[0].quantity == 2.0
        assert recipe.ingredients[0].unit == "cups"
        assert recipe.ingredients[0].name == "AP Flour"
        assert recipe.ingredients[1].unit is None

    def test_catalog_passed_as_hint(self, fake_structurer, catalog_entries):
        """Должен передавать каталог как подсказку."""
        StructuringStage(fake_structurer).process("X\n1 cup Milk", catalog_entries, text_source())

        assert fake_structurer.last_catalog_hint == catalog_entries

    def test_matching_left_for_validation(self, fake_structurer, catalog_entries):
        """Должен оставлять сопоставление валидатору."""
        result = StructuringStage(fake_structurer).process("X\n1 cup Milk", catalog_entries, text_source())

        ingredient = result.recipe.ingredients[0]
        assert ingredient.catalog_entry_id is None
        assert ingredient.match_kind == "none"

    def test_default_name_and_given_id(self, catalog_entries):
        """Должен ставить название по умолчанию и брать данный id."""
        structurer = MagicMock()
        structurer.structure.return_value = DraftRecipe(
            name="  ",
            recipe_id="recipe_fixed",
            ingredients=[RawIngredientLine(text="1 cup sugar")],
        )

        recipe = StructuringStage(structurer).process("...", catalog_entries, text_source()).recipe

        assert recipe.name == DEFAULT_RECIPE_NAME
        assert recipe.id == "recipe_fixed"
        assert recipe.confidence == "low"

    def test_empty_lines_skipped(self, catalog_entries):
        """Должен пропускать пустые строки."""
        structurer = MagicMock()
        structurer.structure.return_value = DraftRecipe(
            name="Soup",
            ingredients=[
                RawIngredientLine(text="  "),
                RawIngredientLine(text="1 cup water"),
                RawIngredientLine(),
            ],
        )

        result = StructuringStage(structurer).process("...", catalog_entries, text_source())

        assert result.skipped_lines == 2
        assert len(result.recipe.ingredients) == 1
        assert result.recipe.ingredients[0].order_index == 0
        assert result.to_dict()["skipped_lines"] == 2

    def test_structurer_error_wrapped(self, make_structurer, catalog_entries):
        """Должен оборачивать ошибку структурировщика."""
        stage = StructuringStage(make_structurer(error=RuntimeError("timeout")))

        with pytest.raises(StructuringFailed) as exc_info:
            stage.process("...", catalog_entries, text_source())

        assert isinstance(exc_info.value.original_error, RuntimeError)

    def test_domain_error_passes_through(self, make_structurer, catalog_entries):
        """Должен пропускать доменную ошибку как есть."""
        error = StructuringFailed("bad json", component="Structurer")
        stage = StructuringStage(make_structurer(error=error))

        with pytest.raises(StructuringFailed) as exc_info:
            stage.process("...", catalog_entries, text_source())

        assert exc_info.value is error

    def test_none_draft(self, catalog_entries):
        """Должен падать, если черновика нет."""
        structurer = MagicMock()
        structurer.structure.return_value = None

        with pytest.raises(StructuringFailed):
            StructuringStage(structurer).process("...", catalog_entries, text_source())

    def test_generated_ids_are_unique(self):
        """Должен генерировать уникальные id."""
        assert generate_recipe_id() != generate_recipe_id()
