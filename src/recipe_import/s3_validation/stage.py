"""
Stage 3: Validation

ЦКП: Свежий упорядоченный список issues для рецепта.

Input: Recipe (ingredients заполнены, старые issues игнорируются), CatalogIndex
Output: ValidationResult (ingredients с новым сопоставлением + issues)

Правила (для каждого ингредиента в порядке источника):
1. quantity = None или <= 0        → quantity_missing
2. unit = None или не распознана    → unit_unclear
3. fuzzy / неоднозначное совпадение → similar_ingredient
4. совпадения нет                   → ingredient_not_found

Правила на весь рецепт (в конце списка):
5. повторная ссылка на ту же позицию каталога → duplicate_ingredient

Сопоставление перезапускается на каждом проходе, поэтому изменения
каталога подхватываются при revalidate. Stage чистый и исключений не бросает.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from contracts.d2_structuring_dto import RawIngredientLine
from contracts.d3_recipe_dto import Issue, Recipe, ResolvedIngredient
from ..catalog.catalog_index import CatalogIndex
from ..matching.ingredient_matcher import IngredientMatcher, MatchResult
from ..units.unit_vocabulary import UnitVocabulary


@dataclass
class ValidationResult:
    """
    Результат Stage 3: Validation.
    """
    ingredients: List[ResolvedIngredient]             # Пересопоставленные ингредиенты
    issues: List[Issue] = field(default_factory=list) # Полный новый список issues

    @property
    def passed(self) -> bool:
        return not self.issues

    def count(self, kind: str) -> int:
        return sum(1 for issue in self.issues if issue.kind == kind)

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "ingredients": [i.model_dump(mode="json") for i in self.ingredients],
            "issues": [i.model_dump(mode="json") for i in self.issues],
        }


class RecipeValidator:
    """
    Stage 3: Validation.

    Сопоставляет ингредиенты с каталогом (IngredientMatcher)
    и собирает issues.
    """

    def __init__(
        self,
        matcher: Optional[IngredientMatcher] = None,
        vocabulary: Optional[UnitVocabulary] = None,
    ):
        """
        Args:
            matcher: Сопоставитель ингредиентов (по умолчанию порог из settings)
            vocabulary: Словарь единиц (по умолчанию units.yaml)
        """
        self.matcher = matcher or IngredientMatcher()
        self.vocabulary = vocabulary or UnitVocabulary.load()

    def validate(self, recipe: Recipe, index: CatalogIndex) -> ValidationResult:
        """
        Валидирует рецепт против текущего каталога.

        Args:
            recipe: Рецепт
            index: Индекс каталога (снимок на момент вызова)

        Returns:
            ValidationResult
        """
        logger.debug(
            f"[Stage 3: Validation] '{recipe.name}': {len(recipe.ingredients)} ингредиентов"
        )

        ingredients: List[ResolvedIngredient] = []
        issues: List[Issue] = []

        for ingredient in recipe.ingredients:
            match = self.matcher.match(self._to_line(ingredient), index)
            resolved = ingredient.model_copy(
                update={
                    "catalog_entry_id": match.catalog_entry_id,
                    "match_kind": match.match_kind,
                    "is_new": match.is_new,
                    "suggested_entry_ids": list(match.candidate_ids),
                }
            )
            ingredients.append(resolved)
            issues.extend(self._line_issues(resolved, match, index))

        issues.extend(self._duplicate_issues(ingredients, index))

        if issues:
            logger.info(f"[Stage 3: Validation] '{recipe.name}': {len(issues)} issues")
        else:
            logger.info(f"[Stage 3: Validation] '{recipe.name}': PASSED")

        return ValidationResult(ingredients=ingredients, issues=issues)

    def _to_line(self, ingredient: ResolvedIngredient) -> RawIngredientLine:
        return RawIngredientLine(
            text=ingredient.text,
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            name=ingredient.name,
        )

    def _line_issues(
        self,
        ingredient: ResolvedIngredient,
        match: MatchResult,
        index: CatalogIndex,
    ) -> List[Issue]:
        name = ingredient.name
        position = ingredient.order_index
        issues: List[Issue] = []

        if ingredient.quantity is None or ingredient.quantity <= 0:
            issues.append(Issue(
                kind="quantity_missing",
                message=f"Quantity is missing for '{name}'",
                suggested_fix="Add a quantity greater than zero",
                ingredient_index=position,
                ingredient_name=name,
            ))

        if ingredient.unit is None:
            issues.append(Issue(
                kind="unit_unclear",
                message=f"Unit is missing for '{name}'",
                suggested_fix=f"Use one of: {', '.join(self.vocabulary.canonical_units)}",
                ingredient_index=position,
                ingredient_name=name,
            ))
        elif not self.vocabulary.is_recognized(ingredient.unit):
            issues.append(Issue(
                kind="unit_unclear",
                message=f"Unit '{ingredient.unit}' is not recognized for '{name}'",
                suggested_fix=f"Use one of: {', '.join(self.vocabulary.canonical_units)}",
                ingredient_index=position,
                ingredient_name=name,
            ))

        if match.match_kind == "fuzzy":
            candidate = index.display_name(match.catalog_entry_id)
            issues.append(Issue(
                kind="similar_ingredient",
                message=f"'{name}' is similar to catalog ingredient '{candidate}'",
                suggested_fix=f"Use '{candidate}'",
                ingredient_index=position,
                ingredient_name=name,
            ))
        elif match.is_ambiguous:
            candidates = ", ".join(f"'{index.display_name(c)}'" for c in match.candidate_ids)
            issues.append(Issue(
                kind="similar_ingredient",
                message=f"'{name}' matches several catalog ingredients equally: {candidates}",
                suggested_fix=f"Choose one of: {candidates}",
                ingredient_index=position,
                ingredient_name=name,
            ))
        elif match.match_kind == "none":
            issues.append(Issue(
                kind="ingredient_not_found",
                message=f"'{name}' was not found in the catalog",
                suggested_fix=f"Add '{name}' to the catalog or choose an existing ingredient",
                ingredient_index=position,
                ingredient_name=name,
            ))

        return issues

    def _duplicate_issues(
        self,
        ingredients: List[ResolvedIngredient],
        index: CatalogIndex,
    ) -> List[Issue]:
        first_seen: Dict[str, int] = {}
        issues: List[Issue] = []

        for ingredient in ingredients:
            entry_id = ingredient.catalog_entry_id
            if entry_id is None:
                continue
            if entry_id not in first_seen:
                first_seen[entry_id] = ingredient.order_index
                continue

            first = first_seen[entry_id]
            catalog_name = index.display_name(entry_id)
            issues.append(Issue(
                kind="duplicate_ingredient",
                message=(
                    f"'{ingredient.name}' duplicates ingredient #{first + 1} "
                    f"(both resolve to '{catalog_name}')"
                ),
                suggested_fix="Merge the quantities into a single ingredient line",
                ingredient_index=ingredient.order_index,
                ingredient_name=ingredient.name,
                duplicate_indices=[first, ingredient.order_index],
            ))

        return issues
