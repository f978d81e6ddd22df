"""
Репозиторий в памяти.

Для тестов и одноразовых запусков. Модели frozen, поэтому хранятся как есть.
"""

from typing import Dict, Iterable, List, Optional

from loguru import logger

from contracts.d3_recipe_dto import Recipe
from contracts.pos_dto import CatalogEntry, MenuItem, MenuItemSummary, RecipeSummary
from ..domain.exceptions import DuplicateRecordError, RecordNotFoundError
from ..domain.interfaces import IRecipeRepository


class InMemoryRepository(IRecipeRepository):
    """Репозиторий рецептов, каталога и позиций меню в памяти."""

    def __init__(
        self,
        recipes: Optional[Iterable[Recipe]] = None,
        catalog: Optional[Iterable[CatalogEntry]] = None,
        menu_items: Optional[Iterable[MenuItem]] = None,
    ):
        self._recipes: Dict[str, Recipe] = {r.id: r for r in recipes or []}
        self._catalog: Dict[str, CatalogEntry] = {e.id: e for e in catalog or []}
        self._menu_items: Dict[str, MenuItem] = {m.id: m for m in menu_items or []}

    # --- Рецепты ---

    def save_recipe(self, recipe: Recipe) -> None:
        self._recipes[recipe.id] = recipe

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def list_recipes(self) -> List[Recipe]:
        return list(self._recipes.values())

    def list_recipe_summaries(self) -> List[RecipeSummary]:
        return [RecipeSummary(id=r.id, name=r.name) for r in self._recipes.values()]

    def delete_recipe(self, recipe_id: str) -> None:
        if self._recipes.pop(recipe_id, None) is None:
            raise RecordNotFoundError(
                message=f"Recipe not found: {recipe_id}",
                component="InMemoryRepository",
            )

    # --- Каталог ---

    def list_catalog_entries(self, active_only: bool = False) -> List[CatalogEntry]:
        entries = list(self._catalog.values())
        if active_only:
            entries = [e for e in entries if e.is_active]
        return entries

    def save_catalog_entry(self, entry: CatalogEntry) -> None:
        self._catalog[entry.id] = entry

    def delete_catalog_entry(self, entry_id: str) -> None:
        if self._catalog.pop(entry_id, None) is None:
            raise RecordNotFoundError(
                message=f"Catalog entry not found: {entry_id}",
                component="InMemoryRepository",
            )

    # --- Меню ---

    def list_menu_items(self) -> List[MenuItem]:
        return list(self._menu_items.values())

    def list_menu_item_summaries(self) -> List[MenuItemSummary]:
        return [
            MenuItemSummary(id=m.id, name=m.name, recipe_id=m.recipe_id)
            for m in self._menu_items.values()
        ]

    def create_menu_item(self, item: MenuItem) -> None:
        if item.id in self._menu_items:
            raise DuplicateRecordError(
                message=f"Menu item already exists: {item.id}",
                component="InMemoryRepository",
            )
        self._menu_items[item.id] = item
        logger.debug(f"[InMemoryRepository] Позиция меню создана: {item.id}")

    def link_menu_item(self, menu_item_id: str, recipe_id: str, recipe_status: str) -> None:
        item = self._menu_items.get(menu_item_id)
        if item is None:
            raise RecordNotFoundError(
                message=f"Menu item not found: {menu_item_id}",
                component="InMemoryRepository",
            )
        self._menu_items[menu_item_id] = item.model_copy(
            update={"recipe_id": recipe_id, "recipe_status": recipe_status}
        )
