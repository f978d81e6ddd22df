"""
DTO контракт: D3 (Validation) -> Repository / Orchestrator

Структурированный рецепт после сопоставления с каталогом POS,
валидации и скоринга. Это output всего пайплайна.

ВАЛИДАЦИЯ: Pydantic гарантирует корректность данных.
Все модели frozen — изменения только через model_copy(update=...).
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .d2_structuring_dto import ConfidenceLevel


MatchKind = Literal["exact", "alias", "fuzzy", "none"]
IssueKind = Literal[
    "unit_unclear",
    "ingredient_not_found",
    "similar_ingredient",
    "quantity_missing",
    "duplicate_ingredient",
]
RecipeStatus = Literal["draft", "ready_to_import", "needs_review", "import_failed"]
SourceType = Literal["photo", "pdf", "excel", "text"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecipeSource(BaseModel):
    """
    Происхождение рецепта.
    """

    type: SourceType = Field(..., description="photo | pdf | excel | text")
    uri: str | None = Field(None, description="URI фото/PDF")
    content: str | None = Field(None, description="Исходный текст (для text)")
    file_name: str | None = Field(None, description="Имя загруженного файла")
    uploaded_at: datetime = Field(default_factory=utc_now, description="Время загрузки")
    extraction_quality: float | None = Field(None, description="quality_score из D1")

    model_config = ConfigDict(frozen=True, from_attributes=True)


class ResolvedIngredient(BaseModel):
    """
    Ингредиент рецепта, сопоставленный с каталогом POS.

    catalog_entry_id = None означает: не сопоставлен (новый или неоднозначный).
    order_index сохраняет порядок источника (для отображения).
    """

    text: str = Field("", description="Исходная строка")
    quantity: float | None = Field(None, description="Количество")
    unit: str | None = Field(None, description="Единица измерения")
    name: str = Field(..., description="Название ингредиента")
    catalog_entry_id: str | None = Field(None, description="ID позиции каталога")
    match_kind: MatchKind = Field("none", description="exact | alias | fuzzy | none")
    is_new: bool = Field(True, description="Ингредиента нет в каталоге")
    order_index: int = Field(0, ge=0, description="Позиция в источнике")
    suggested_entry_ids: list[str] = Field(
        default_factory=list, description="Кандидаты fuzzy / неоднозначного совпадения"
    )

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def is_ambiguous(self) -> bool:
        return self.match_kind == "none" and len(self.suggested_entry_ids) > 1


class Issue(BaseModel):
    """
    Проблема, найденная валидатором.

    Производные данные: пересоздаются на каждом проходе валидации.
    """

    kind: IssueKind = Field(..., description="Тип проблемы")
    message: str = Field(..., description="Сообщение для человека")
    suggested_fix: str | None = Field(None, description="Предлагаемое исправление")
    ingredient_index: int | None = Field(None, description="order_index ингредиента")
    ingredient_name: str | None = Field(None, description="Название ингредиента")
    duplicate_indices: list[int] = Field(
        default_factory=list, description="Для duplicate_ingredient: индексы дублей"
    )

    model_config = ConfigDict(frozen=True, from_attributes=True)


class Recipe(BaseModel):
    """
    Структурированный рецепт.

    Создаётся оркестратором в конце structuring,
    обновляется валидатором / скорингом / резолвером статуса.
    """

    id: str = Field(..., description="ID рецепта")
    name: str = Field("", description="Название рецепта")
    source: RecipeSource = Field(..., description="Происхождение")
    ingredients: list[ResolvedIngredient] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)
    confidence: ConfidenceLevel = Field("low", description="high | medium | low")
    status: RecipeStatus = Field("draft", description="Статус жизненного цикла")
    created_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Recipe id must not be empty")
        return v
