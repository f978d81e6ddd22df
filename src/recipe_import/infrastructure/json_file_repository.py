"""
Репозиторий на JSON-файлах.

Одна коллекция — один файл в base_dir:
- recipes.json
- catalog.json
- menu_items.json

Каждый файл — объект {id: запись}. Файлы перечитываются при каждом вызове,
поэтому репозиторий всегда отдаёт текущее состояние диска.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from contracts.d3_recipe_dto import Recipe
from contracts.pos_dto import CatalogEntry, MenuItem, MenuItemSummary, RecipeSummary
from ..domain.exceptions import DuplicateRecordError, RecordNotFoundError, RepositoryError
from ..domain.interfaces import IRecipeRepository


RECIPES_FILE = "recipes.json"
CATALOG_FILE = "catalog.json"
MENU_ITEMS_FILE = "menu_items.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonFileRepository(IRecipeRepository):
    """Репозиторий рецептов, каталога и позиций меню на JSON-файлах."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    # --- Рецепты ---

    def save_recipe(self, recipe: Recipe) -> None:
        data = self._load(RECIPES_FILE)
        data[recipe.id] = recipe.model_dump(mode="json")
        self._save(RECIPES_FILE, data)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        raw = self._load(RECIPES_FILE).get(recipe_id)
        return self._parse(Recipe, raw, RECIPES_FILE) if raw is not None else None

    def list_recipes(self) -> List[Recipe]:
        return self._parse_all(Recipe, RECIPES_FILE)

    def list_recipe_summaries(self) -> List[RecipeSummary]:
        return [
            RecipeSummary(id=recipe_id, name=raw.get("name", ""))
            for recipe_id, raw in self._load(RECIPES_FILE).items()
        ]

    def delete_recipe(self, recipe_id: str) -> None:
        self._delete(RECIPES_FILE, recipe_id, "Recipe")

    # --- Каталог ---

    def list_catalog_entries(self, active_only: bool = False) -> List[CatalogEntry]:
        entries = self._parse_all(CatalogEntry, CATALOG_FILE)
        if active_only:
            entries = [e for e in entries if e.is_active]
        return entries

    def save_catalog_entry(self, entry: CatalogEntry) -> None:
        data = self._load(CATALOG_FILE)
        data[entry.id] = entry.model_dump(mode="json")
        self._save(CATALOG_FILE, data)

    def delete_catalog_entry(self, entry_id: str) -> None:
        self._delete(CATALOG_FILE, entry_id, "Catalog entry")

    # --- Меню ---

    def list_menu_items(self) -> List[MenuItem]:
        return self._parse_all(MenuItem, MENU_ITEMS_FILE)

    def list_menu_item_summaries(self) -> List[MenuItemSummary]:
        return [
            MenuItemSummary(id=item_id, name=raw.get("name", ""), recipe_id=raw.get("recipe_id"))
            for item_id, raw in self._load(MENU_ITEMS_FILE).items()
        ]

    def create_menu_item(self, item: MenuItem) -> None:
        data = self._load(MENU_ITEMS_FILE)
        if item.id in data:
            raise DuplicateRecordError(
                message=f"Menu item already exists: {item.id}",
                component="JsonFileRepository",
            )
        data[item.id] = item.model_dump(mode="json")
        self._save(MENU_ITEMS_FILE, data)

    def link_menu_item(self, menu_item_id: str, recipe_id: str, recipe_status: str) -> None:
        data = self._load(MENU_ITEMS_FILE)
        raw = data.get(menu_item_id)
        if raw is None:
            raise RecordNotFoundError(
                message=f"Menu item not found: {menu_item_id}",
                component="JsonFileRepository",
            )
        item = self._parse(MenuItem, raw, MENU_ITEMS_FILE).model_copy(
            update={"recipe_id": recipe_id, "recipe_status": recipe_status}
        )
        data[menu_item_id] = item.model_dump(mode="json")
        self._save(MENU_ITEMS_FILE, data)

    # --- Файлы ---

    def _load(self, file_name: str) -> Dict[str, Any]:
        """
        Загружает коллекцию из JSON файла.

        Отсутствующий файл — пустая коллекция.

        Raises:
            RepositoryError: Файл не читается или не является JSON-объектом
        """
        file_path = self.base_dir / file_name
        if not file_path.exists():
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (IOError, OSError, json.JSONDecodeError) as e:
            raise RepositoryError(
                message=f"Не удалось загрузить JSON файл: {file_path}",
                component="JsonFileRepository",
                original_error=e,
            )

        if not isinstance(data, dict):
            raise RepositoryError(
                message=f"Ожидался JSON-объект в {file_path}",
                component="JsonFileRepository",
            )
        return data

    def _save(self, file_name: str, data: Dict[str, Any]) -> Path:
        """
        Сохраняет коллекцию в JSON файл.

        Raises:
            RepositoryError: Если не удалось сохранить файл
        """
        file_path = self.base_dir / file_name
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except (IOError, OSError, TypeError) as e:
            raise RepositoryError(
                message=f"Не удалось сохранить JSON файл: {file_path}",
                component="JsonFileRepository",
                original_error=e,
            )

        logger.debug(f"[JsonFileRepository] Файл сохранен: {file_path}")
        return file_path

    def _delete(self, file_name: str, record_id: str, label: str) -> None:
        data = self._load(file_name)
        if data.pop(record_id, None) is None:
            raise RecordNotFoundError(
                message=f"{label} not found: {record_id}",
                component="JsonFileRepository",
            )
        self._save(file_name, data)

    def _parse(self, model: Type[ModelT], raw: Dict[str, Any], file_name: str) -> ModelT:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise RepositoryError(
                message=f"Некорректная запись {model.__name__} в {file_name}",
                component="JsonFileRepository",
                original_error=e,
            )

    def _parse_all(self, model: Type[ModelT], file_name: str) -> List[ModelT]:
        return [self._parse(model, raw, file_name) for raw in self._load(file_name).values()]
