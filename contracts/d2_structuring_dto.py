"""
DTO контракт: D2 (Structuring) -> D3 (Validation)

Черновик рецепта, который возвращает внешний структурировщик.
Best-effort данные: любое поле может отсутствовать или быть неверным.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


ConfidenceLevel = Literal["high", "medium", "low"]


class RawIngredientLine(BaseModel):
    """
    Строка ингредиента как её выдал структурировщик.

    text — исходная строка ("2 cups AP flour").
    quantity / unit / name — разложение строки (может быть неполным).
    """

    text: str = Field("", description="Исходная строка ингредиента")
    quantity: float | None = Field(None, description="Количество")
    unit: str | None = Field(None, description="Единица измерения как в источнике")
    name: str = Field("", description="Название ингредиента")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("unit")
    @classmethod
    def blank_unit_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.text


class DraftRecipe(BaseModel):
    """
    Черновик рецепта от структурировщика.

    confidence_seed — собственная оценка структурировщика.
    Используется только до первой валидации.
    """

    name: str = Field("", description="Название рецепта")
    ingredients: list[RawIngredientLine] = Field(
        default_factory=list, description="Ингредиенты в порядке источника"
    )
    confidence_seed: ConfidenceLevel = Field("low", description="Оценка структурировщика")
    recipe_id: str | None = Field(None, description="ID, если структурировщик его назначил")
    raw_response: dict | None = Field(None, description="Сырой ответ для отладки")

    model_config = ConfigDict(frozen=True, from_attributes=True)
