"""
Исключения для домена Recipe Import.

Фатальные для одного импорта: ExtractionFailed / ExtractionEmpty, StructuringFailed.
Пробрасываемые без интерпретации: RepositoryError.
Собираемые, не фатальные: ReconcileItemFailed.

Валидация исключений не бросает никогда.
"""

from typing import Optional


class RecipeImportError(Exception):
    """Базовое исключение для ошибок домена Recipe Import."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        # Снимок рецепта со статусом import_failed (если черновик уже был собран)
        self.failed_recipe = None
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Recipe Import Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ExtractionFailed(RecipeImportError):
    """Ошибка коллаборатора извлечения текста (транспорт, API)."""
    pass


class ExtractionEmpty(ExtractionFailed):
    """Текст не найден: пустой или пробельный результат извлечения."""
    pass


class StructuringFailed(RecipeImportError):
    """Ошибка структурировщика или нераспознаваемый ответ."""
    pass


class RepositoryError(RecipeImportError):
    """Ошибка репозитория. Пробрасывается как есть."""
    pass


class RecordNotFoundError(RepositoryError):
    """Запись не найдена в репозитории."""
    pass


class DuplicateRecordError(RepositoryError):
    """Запись с таким ID уже существует."""
    pass


class ReconcileItemFailed(RecipeImportError):
    """Не удалось создать / привязать позицию меню для одного рецепта."""

    def __init__(
        self,
        message: str,
        recipe_id: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.recipe_id = recipe_id
        super().__init__(message, component=component, original_error=original_error)


class UnitVocabularyError(RecipeImportError):
    """Ошибка конфигурации словаря единиц измерения."""
    pass
