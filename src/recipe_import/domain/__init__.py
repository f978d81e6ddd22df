"""
Domain слой Recipe Import.

Содержит интерфейсы внешних коллабораторов и исключения домена.
"""

from .interfaces import (
    ImageInput,
    ITextExtractor,
    IRecipeStructurer,
    IRecipeRepository,
)

from .exceptions import (
    RecipeImportError,
    ExtractionFailed,
    ExtractionEmpty,
    StructuringFailed,
    RepositoryError,
    RecordNotFoundError,
    DuplicateRecordError,
    ReconcileItemFailed,
    UnitVocabularyError,
)

__all__ = [
    # Интерфейсы
    "ImageInput",
    "ITextExtractor",
    "IRecipeStructurer",
    "IRecipeRepository",

    # Исключения
    "RecipeImportError",
    "ExtractionFailed",
    "ExtractionEmpty",
    "StructuringFailed",
    "RepositoryError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "ReconcileItemFailed",
    "UnitVocabularyError",
]
