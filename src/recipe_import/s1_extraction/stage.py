"""
Stage 1: Extraction

ЦКП: Непустой текст рецепта из изображения.

Input: ImageInput (байты или путь)
Output: ExtractedText

Текст извлекает внешний коллаборатор (ITextExtractor).
Stage только вызывает его и проверяет, что текст есть.
Пустой / пробельный текст → ExtractionEmpty, структурирование не запускается.
"""

from pathlib import Path

from loguru import logger

from contracts.d1_extraction_dto import ExtractedText
from ..domain.exceptions import ExtractionEmpty, ExtractionFailed, RecipeImportError
from ..domain.interfaces import ImageInput, ITextExtractor


def describe_image(image: ImageInput) -> str:
    """Короткое описание изображения для логов."""
    if isinstance(image, (str, Path)):
        return Path(image).name
    return f"<{len(image)} bytes>"


class ExtractionStage:
    """
    Stage 1: Extraction.

    Обёртка над ITextExtractor: ошибки транспорта → ExtractionFailed,
    отсутствие текста → ExtractionEmpty.
    """

    def __init__(self, text_extractor: ITextExtractor):
        self.text_extractor = text_extractor

    def process(self, image: ImageInput) -> ExtractedText:
        """
        Извлекает текст из изображения.

        Args:
            image: Байты изображения или путь к файлу

        Returns:
            ExtractedText с непустым текстом

        Raises:
            ExtractionFailed: Ошибка коллаборатора
            ExtractionEmpty: Текст не найден
        """
        label = describe_image(image)
        logger.debug(f"[Stage 1: Extraction] Извлечение текста: {label}")

        try:
            extracted = self.text_extractor.extract(image)
        except RecipeImportError:
            raise
        except Exception as e:
            raise ExtractionFailed(
                message=f"Ошибка извлечения текста: {label}",
                component="ExtractionStage",
                original_error=e,
            )

        if extracted is None or not extracted.has_content():
            raise ExtractionEmpty(
                message=f"No text found in image: {label}",
                component="ExtractionStage",
            )

        logger.info(
            f"[Stage 1: Extraction] {label}: {len(extracted.text)} символов, "
            f"quality={extracted.quality_score:.2f}"
        )
        return extracted
