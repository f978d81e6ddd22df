"""
Интерфейсы (абстрактные классы) внешних коллабораторов домена Recipe Import.

Пайплайн зависит только от этих интерфейсов:
1. Извлечение текста из изображения (OCR)
2. Структурирование сырого текста в черновик рецепта
3. Репозиторий рецептов, каталога и позиций меню
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Union

from contracts.d1_extraction_dto import ExtractedText
from contracts.d2_structuring_dto import DraftRecipe
from contracts.d3_recipe_dto import Recipe
from contracts.pos_dto import CatalogEntry, MenuItem, MenuItemSummary, RecipeSummary


ImageInput = Union[bytes, Path]


class ITextExtractor(ABC):
    """Интерфейс для извлечения текста из изображения."""

    @abstractmethod
    def extract(self, image: ImageInput) -> ExtractedText:
        """
        Извлекает текст из изображения рецепта.

        Args:
            image: Байты изображения или путь к файлу

        Returns:
            ExtractedText с текстом и quality_score

        Raises:
            Любую транспортную ошибку — пайплайн обернёт её в ExtractionFailed
        """
        pass


class IRecipeStructurer(ABC):
    """Интерфейс для структурирования сырого текста рецепта."""

    @abstractmethod
    def structure(self, raw_text: str, catalog_hint: Sequence[CatalogEntry]) -> DraftRecipe:
        """
        Превращает сырой текст в черновик рецепта.

        Args:
            raw_text: Текст рецепта (OCR или ввод)
            catalog_hint: Снимок каталога, чтобы смещать названия к известным

        Returns:
            DraftRecipe (best-effort, с confidence_seed)
        """
        pass


class IRecipeRepository(ABC):
    """Интерфейс репозитория рецептов, каталога и позиций меню."""

    # --- Рецепты ---

    @abstractmethod
    def save_recipe(self, recipe: Recipe) -> None:
        """Сохраняет (создаёт или заменяет) рецепт."""
        pass

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Возвращает рецепт или None."""
        pass

    @abstractmethod
    def list_recipes(self) -> List[Recipe]:
        """Все рецепты."""
        pass

    @abstractmethod
    def list_recipe_summaries(self) -> List[RecipeSummary]:
        """Краткие записи (id, name) всех рецептов."""
        pass

    @abstractmethod
    def delete_recipe(self, recipe_id: str) -> None:
        """Удаляет рецепт."""
        pass

    # --- Каталог ---

    @abstractmethod
    def list_catalog_entries(self, active_only: bool = False) -> List[CatalogEntry]:
        """Позиции каталога ингредиентов."""
        pass

    @abstractmethod
    def save_catalog_entry(self, entry: CatalogEntry) -> None:
        """Создаёт или заменяет позицию каталога."""
        pass

    @abstractmethod
    def delete_catalog_entry(self, entry_id: str) -> None:
        """Удаляет позицию каталога."""
        pass

    # --- Меню ---

    @abstractmethod
    def list_menu_items(self) -> List[MenuItem]:
        """Все позиции меню."""
        pass

    @abstractmethod
    def list_menu_item_summaries(self) -> List[MenuItemSummary]:
        """Краткие записи (id, name, recipe_id) позиций меню."""
        pass

    @abstractmethod
    def create_menu_item(self, item: MenuItem) -> None:
        """
        Создаёт позицию меню.

        Raises:
            DuplicateRecordError: Если позиция с таким ID уже есть
        """
        pass

    @abstractmethod
    def link_menu_item(self, menu_item_id: str, recipe_id: str, recipe_status: str) -> None:
        """
        Привязывает существующую позицию меню к рецепту.

        Raises:
            RecordNotFoundError: Если позиции нет
        """
        pass
