"""
Menu-Link Reconciler - синхронизация рецептов с позициями меню POS.

ЦКП: У каждого рецепта ровно одна позиция меню.

reconcile():
1. Свежо читает краткие записи рецептов и позиций меню
2. linked = {recipe_id всех позиций меню}
3. Для каждого непривязанного рецепта создаёт позицию меню
   (id "menu_<recipe id>", категория "Uncategorized", статус mapped).
   Если непривязанная позиция с таким id уже есть, привязывает её.

Ошибка одной позиции собирается в отчёт и не прерывает остальные.
Повторный запуск на неизменном репозитории ничего не создаёт.
Не защищён от гонок: одновременно должен работать один реконсилятор.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger

from config.settings import MENU_DEFAULT_CATEGORY, MENU_NAME_SIMILARITY_THRESHOLD
from contracts.d3_recipe_dto import Recipe
from contracts.pos_dto import MenuItem, MenuItemSummary, MenuRecipeStatus, RecipeSummary
from ..catalog.normalizer import normalize_name
from ..domain.exceptions import ReconcileItemFailed
from ..domain.interfaces import IRecipeRepository


# Похожесть, если одно название содержит другое
CONTAINMENT_SIMILARITY = 0.9


def menu_item_id_for(recipe_id: str) -> str:
    return f"menu_{recipe_id}"


def pos_id_for(recipe_id: str) -> str:
    return f"pos_{recipe_id}"


def resolve_menu_item_status(
    recipe_id: Optional[str],
    recipe: Optional[Recipe],
) -> MenuRecipeStatus:
    """
    Статус связи позиции меню с рецептом.

    missing — рецепта нет (или ссылка битая), mapped — рецепт готов к импорту,
    needs_review — всё остальное.
    """
    if not recipe_id or recipe is None:
        return "missing"
    if recipe.status == "ready_to_import":
        return "mapped"
    return "needs_review"


def name_similarity(a: str, b: str) -> float:
    """
    Похожесть названий рецепта и позиции меню (0.0 - 1.0).

    Совпадение = 1.0, вхождение = 0.9, иначе доля общих слов.
    """
    left, right = normalize_name(a), normalize_name(b)
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0
    if left in right or right in left:
        return CONTAINMENT_SIMILARITY

    left_words, right_words = set(left.split()), set(right.split())
    common = left_words & right_words
    return len(common) / max(len(left_words), len(right_words))


@dataclass
class ReconcileReport:
    """
    Отчёт реконсиляции.
    """
    created: int = 0
    attempted: int = 0
    failed: int = 0
    failures: List[ReconcileItemFailed] = field(default_factory=list)
    created_ids: List[str] = field(default_factory=list)
    linked: int = 0
    linked_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "linked": self.linked,
            "attempted": self.attempted,
            "failed": self.failed,
            "failures": [
                {"recipe_id": f.recipe_id, "error": str(f)} for f in self.failures
            ],
            "created_ids": list(self.created_ids),
            "linked_ids": list(self.linked_ids),
        }


@dataclass
class LinkResult:
    """
    Результат привязки одного рецепта к меню.
    """
    menu_item_id: str
    created: bool                   # Создана новая позиция
    similarity: float = 0.0         # Похожесть названий (при привязке к существующей)
    already_linked: bool = False

    def to_dict(self) -> dict:
        return {
            "menu_item_id": self.menu_item_id,
            "created": self.created,
            "similarity": self.similarity,
            "already_linked": self.already_linked,
        }


class MenuLinkReconciler:
    """
    Синхронизация рецептов с позициями меню.
    """

    def __init__(
        self,
        repository: IRecipeRepository,
        category: str = MENU_DEFAULT_CATEGORY,
        name_threshold: float = MENU_NAME_SIMILARITY_THRESHOLD,
    ):
        self.repository = repository
        self.category = category
        self.name_threshold = name_threshold

    def reconcile(self) -> ReconcileReport:
        """
        Создаёт позиции меню для всех непривязанных рецептов.

        Returns:
            ReconcileReport

        Raises:
            RepositoryError: Не удалось прочитать рецепты или меню
        """
        recipes = self.repository.list_recipe_summaries()
        menu_items = self.repository.list_menu_item_summaries()

        linked_recipe_ids = {m.recipe_id for m in menu_items if m.recipe_id}
        orphan_item_ids = {m.id for m in menu_items if not m.recipe_id}
        unlinked = sorted(
            (r for r in recipes if r.id not in linked_recipe_ids),
            key=lambda r: r.id,
        )

        logger.info(
            f"[MenuLinkReconciler] Рецептов: {len(recipes)}, привязано: {len(linked_recipe_ids)}, "
            f"к созданию: {len(unlinked)}"
        )

        report = ReconcileReport()
        for recipe in unlinked:
            report.attempted += 1
            target_id = menu_item_id_for(recipe.id)
            try:
                if target_id in orphan_item_ids:
                    self.repository.link_menu_item(target_id, recipe.id, "mapped")
                else:
                    self._create_item(recipe, "mapped")
            except Exception as e:
                failure = ReconcileItemFailed(
                    message=f"Failed to create menu item for recipe {recipe.id}",
                    recipe_id=recipe.id,
                    component="MenuLinkReconciler",
                    original_error=e,
                )
                report.failed += 1
                report.failures.append(failure)
                logger.warning(f"[MenuLinkReconciler] {failure}")
                continue

            if target_id in orphan_item_ids:
                report.linked += 1
                report.linked_ids.append(target_id)
                logger.debug(f"[MenuLinkReconciler] Позиция {target_id} привязана к {recipe.id}")
            else:
                report.created += 1
                report.created_ids.append(target_id)

        logger.info(
            f"[MenuLinkReconciler] Создано {report.created}/{report.attempted}, привязано: {report.linked}, "
            f"ошибок: {report.failed}"
        )
        return report

    def link_recipe(self, recipe: Recipe) -> LinkResult:
        """
        Привязывает рецепт к похожей непривязанной позиции меню
        или создаёт новую позицию.

        Args:
            recipe: Сохранённый рецепт

        Returns:
            LinkResult
        """
        menu_items = self.repository.list_menu_item_summaries()
        status = resolve_menu_item_status(recipe.id, recipe)

        for item in menu_items:
            if item.recipe_id == recipe.id:
                return LinkResult(menu_item_id=item.id, created=False, already_linked=True)

        best, similarity = self._best_unlinked_match(recipe.name, menu_items)
        if best is not None:
            self.repository.link_menu_item(best.id, recipe.id, status)
            logger.info(
                f"[MenuLinkReconciler] '{recipe.name}' привязан к '{best.name}' "
                f"(similarity={similarity:.2f})"
            )
            return LinkResult(menu_item_id=best.id, created=False, similarity=similarity)

        item = self._create_item(RecipeSummary(id=recipe.id, name=recipe.name), status)
        logger.info(f"[MenuLinkReconciler] '{recipe.name}': создана позиция {item.id}")
        return LinkResult(menu_item_id=item.id, created=True)

    def _best_unlinked_match(
        self,
        name: str,
        menu_items: List[MenuItemSummary],
    ) -> Tuple[Optional[MenuItemSummary], float]:
        best: Optional[MenuItemSummary] = None
        best_score = 0.0
        for item in sorted(menu_items, key=lambda m: m.id):
            if item.recipe_id:
                continue
            score = name_similarity(name, item.name)
            if score >= self.name_threshold and score > best_score:
                best, best_score = item, score
        return best, best_score

    def _create_item(self, recipe: RecipeSummary, status: MenuRecipeStatus) -> MenuItem:
        item = MenuItem(
            id=menu_item_id_for(recipe.id),
            name=recipe.name,
            category=self.category,
            external_pos_id=pos_id_for(recipe.id),
            recipe_id=recipe.id,
            recipe_status=status,
        )
        self.repository.create_menu_item(item)
        logger.debug(f"[MenuLinkReconciler] Создана позиция меню: {item.id}")
        return item
