"""
Stage 4: Confidence Scoring

ЦКП: Уровень доверия рецепту (high | medium | low).

Input: issues после Stage 3, число ингредиентов
Output: ConfidenceLevel

Политика (проверяется от нижнего уровня к верхнему, ничья → ниже):
- low:    есть ingredient_not_found
- low:    issues больше большинства ингредиентов (count > n // 2 + 1)
- low:    duplicate_ingredient больше MAX_DUPLICATES_FOR_MEDIUM
- high:   issues нет
- medium: всё остальное (unit_unclear, quantity_missing, similar_ingredient, мало дублей)

Оценка структурировщика (seed) используется только до первой валидации.
"""

from typing import Optional, Sequence

from loguru import logger

from config.settings import MAX_DUPLICATES_FOR_MEDIUM
from contracts.d2_structuring_dto import ConfidenceLevel
from contracts.d3_recipe_dto import Issue


class ConfidenceScorer:
    """
    Stage 4: Confidence Scoring.

    Детерминированная функция от текущих issues.
    """

    def __init__(self, max_duplicates_for_medium: int = MAX_DUPLICATES_FOR_MEDIUM):
        self.max_duplicates_for_medium = max_duplicates_for_medium

    def score(
        self,
        issues: Optional[Sequence[Issue]],
        ingredient_count: int,
        seed: Optional[ConfidenceLevel] = None,
    ) -> ConfidenceLevel:
        """
        Сводит issues к уровню доверия.

        Args:
            issues: Issues после валидации (None → валидации ещё не было)
            ingredient_count: Число ингредиентов рецепта
            seed: Оценка структурировщика

        Returns:
            ConfidenceLevel
        """
        if issues is None:
            return seed or "low"

        confidence, reason = self._evaluate(issues, ingredient_count)
        logger.debug(f"[Stage 4: Scoring] {confidence}: {reason}")
        return confidence

    def _evaluate(self, issues: Sequence[Issue], ingredient_count: int) -> tuple:
        if any(issue.kind == "ingredient_not_found" for issue in issues):
            return "low", "ingredient_not_found"

        majority = ingredient_count // 2 + 1
        if len(issues) > majority:
            return "low", f"{len(issues)} issues > majority of {ingredient_count} ingredients"

        duplicates = sum(1 for issue in issues if issue.kind == "duplicate_ingredient")
        if duplicates > self.max_duplicates_for_medium:
            return "low", f"{duplicates} duplicates"

        if not issues:
            return "high", "no issues"

        return "medium", f"{len(issues)} minor issues"
