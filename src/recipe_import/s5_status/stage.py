"""
Stage 5: Status Resolution

ЦКП: Статус жизненного цикла рецепта.

ready_to_import ⇔ issues пуст, иначе needs_review.
draft — только заглушка структурировщика до первой валидации.
import_failed — только оркестратор при фатальной ошибке (mark_failed).
"""

from typing import Sequence

from contracts.d3_recipe_dto import Issue, Recipe, RecipeStatus, utc_now


class StatusResolver:
    """Stage 5: Status Resolution."""

    def resolve(self, issues: Sequence[Issue]) -> RecipeStatus:
        return "needs_review" if issues else "ready_to_import"

    def mark_failed(self, recipe: Recipe) -> Recipe:
        """Копия рецепта со статусом import_failed."""
        return recipe.model_copy(update={"status": "import_failed", "last_updated": utc_now()})
