"""
Stage 2: Structuring

ЦКП: Черновик Recipe (status=draft) из сырого текста.

Input: raw_text, снимок каталога, RecipeSource
Output: StructuringResult (Recipe + DraftRecipe от структурировщика)

Структурирует внешний коллаборатор (IRecipeStructurer).
Stage передаёт ему каталог как подсказку, дополняет строки ингредиентов
разбором текста и собирает Recipe. Сопоставления с каталогом здесь нет:
это работа Stage 3.
"""

import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from contracts.d2_structuring_dto import DraftRecipe
from contracts.d3_recipe_dto import Recipe, RecipeSource, ResolvedIngredient, utc_now
from contracts.pos_dto import CatalogEntry
from ..domain.exceptions import RecipeImportError, StructuringFailed
from ..domain.interfaces import IRecipeStructurer
from .line_parser import IngredientLineParser


DEFAULT_RECIPE_NAME = "Untitled Recipe"


def generate_recipe_id() -> str:
    return f"recipe_{uuid.uuid4().hex[:12]}"


@dataclass
class StructuringResult:
    """
    Результат Stage 2: Structuring.
    """
    recipe: Recipe                  # Черновик (status=draft, confidence=seed)
    draft: DraftRecipe              # Ответ структурировщика как есть
    skipped_lines: int = 0          # Пустые строки ингредиентов

    def to_dict(self) -> dict:
        return {
            "recipe": self.recipe.model_dump(mode="json"),
            "confidence_seed": self.draft.confidence_seed,
            "ingredients": len(self.recipe.ingredients),
            "skipped_lines": self.skipped_lines,
        }


class StructuringStage:
    """
    Stage 2: Structuring.

    IRecipeStructurer → DraftRecipe → Recipe(draft).
    """

    def __init__(
        self,
        structurer: IRecipeStructurer,
        line_parser: Optional[IngredientLineParser] = None,
    ):
        self.structurer = structurer
        self.line_parser = line_parser or IngredientLineParser()

    def process(
        self,
        raw_text: str,
        catalog: Sequence[CatalogEntry],
        source: RecipeSource,
    ) -> StructuringResult:
        """
        Структурирует сырой текст в черновик рецепта.

        Args:
            raw_text: Текст рецепта
            catalog: Снимок каталога (подсказка для структурировщика)
            source: Происхождение рецепта

        Returns:
            StructuringResult

        Raises:
            StructuringFailed: Ошибка структурировщика или пустой ответ
        """
        logger.debug(f"[Stage 2: Structuring] {len(raw_text)} символов, каталог: {len(catalog)}")

        try:
            draft = self.structurer.structure(raw_text, list(catalog))
        except RecipeImportError:
            raise
        except Exception as e:
            raise StructuringFailed(
                message="Ошибка структурирования рецепта",
                component="StructuringStage",
                original_error=e,
            )

        if draft is None:
            raise StructuringFailed(
                message="Структурировщик не вернул рецепт",
                component="StructuringStage",
            )

        ingredients: List[ResolvedIngredient] = []
        skipped = 0
        for line in draft.ingredients:
            line = self.line_parser.complete(line)
            name = (line.name or line.text).strip()
            if not name:
                skipped += 1
                continue
            ingredients.append(
                ResolvedIngredient(
                    text=line.text or name,
                    quantity=line.quantity,
                    unit=line.unit,
                    name=name,
                    order_index=len(ingredients),
                )
            )

        if skipped:
            logger.debug(f"[Stage 2: Structuring] Пропущено пустых строк: {skipped}")

        now = utc_now()
        recipe = Recipe(
            id=draft.recipe_id or generate_recipe_id(),
            name=draft.name.strip() or DEFAULT_RECIPE_NAME,
            source=source,
            ingredients=ingredients,
            issues=[],
            confidence=draft.confidence_seed,
            status="draft",
            created_at=now,
            last_updated=now,
        )

        logger.info(
            f"[Stage 2: Structuring] '{recipe.name}': {len(ingredients)} ингредиентов, "
            f"seed={draft.confidence_seed}"
        )

        return StructuringResult(recipe=recipe, draft=draft, skipped_lines=skipped)
