"""
DTO контракт: POS-данные (каталог ингредиентов и позиции меню).

Владелец данных — внешний репозиторий. Пайплайн каталог только читает.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


MenuRecipeStatus = Literal["mapped", "needs_review", "missing"]


class CatalogEntry(BaseModel):
    """
    Позиция каталога ингредиентов POS.
    """

    id: str = Field(..., description="Стабильный уникальный ID")
    canonical_name: str = Field(..., description="Каноническое название")
    unit: str = Field("each", description="Базовая единица")
    pack_size: str | None = Field(None, description="Фасовка, например '5 lb bag'")
    external_pos_id: str | None = Field(None, description="ID в POS-системе")
    is_active: bool = Field(True, description="Активна ли позиция")
    aliases: frozenset[str] = Field(default_factory=frozenset, description="Альтернативные названия")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("canonical_name")
    @classmethod
    def validate_canonical_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("canonical_name must not be empty")
        return v


class MenuItem(BaseModel):
    """
    Позиция меню POS.

    recipe_id — слабая обратная ссылка на рецепт (не владеет им).
    """

    id: str = Field(..., description="ID позиции меню")
    name: str = Field(..., description="Название")
    category: str | None = Field(None, description="Категория меню")
    external_pos_id: str | None = Field(None, description="ID в POS-системе")
    recipe_id: str | None = Field(None, description="ID связанного рецепта")
    recipe_status: MenuRecipeStatus = Field("missing", description="mapped | needs_review | missing")

    model_config = ConfigDict(frozen=True, from_attributes=True)


class RecipeSummary(BaseModel):
    """Краткая запись рецепта для реконсилятора меню."""

    id: str
    name: str

    model_config = ConfigDict(frozen=True, from_attributes=True)


class MenuItemSummary(BaseModel):
    """Краткая запись позиции меню для реконсилятора."""

    id: str
    name: str = ""
    recipe_id: str | None = None

    model_config = ConfigDict(frozen=True, from_attributes=True)
