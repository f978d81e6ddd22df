"""
Адаптер Google Cloud Vision, реализующий ITextExtractor.

Отправляет изображение в DOCUMENT_TEXT_DETECTION и возвращает
полный текст + quality_score (средняя confidence слов).

Нет аннотаций → пустой текст (пайплайн сам решит, что это ExtractionEmpty).
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from google.cloud import vision
from loguru import logger

from config.settings import GOOGLE_APPLICATION_CREDENTIALS, OCR_LANGUAGE_HINTS
from contracts.d1_extraction_dto import ExtractedText, ExtractionMetadata
from ...domain.exceptions import ExtractionFailed
from ...domain.interfaces import ImageInput, ITextExtractor


class GoogleVisionTextExtractor(ITextExtractor):
    """
    Обёртка над Google Cloud Vision API.

    Реализует интерфейс ITextExtractor.
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        language_hints: Optional[List[str]] = None,
        client: Optional[Any] = None,
    ):
        """
        Инициализация OCR клиента.

        Args:
            credentials_path: Путь к JSON-файлу credentials.
                            Если не указан, берётся из settings.
            language_hints: Подсказки языка для OCR
            client: Готовый ImageAnnotatorClient (для тестов)
        """
        self.language_hints = language_hints if language_hints is not None else list(OCR_LANGUAGE_HINTS)

        if client is not None:
            self.client = client
            logger.debug("[GoogleVisionTextExtractor] Используется переданный клиент")
            return

        creds_path = credentials_path or GOOGLE_APPLICATION_CREDENTIALS
        if not creds_path:
            raise ValueError(
                "Google credentials не указаны!\n"
                "Укажите путь в config/settings.py или передайте в конструктор."
            )
        if not Path(creds_path).exists():
            raise FileNotFoundError(f"Credentials файл не найден: {creds_path}")

        # Устанавливаем credentials через переменную окружения
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = str(creds_path)
        self.client = vision.ImageAnnotatorClient()

        logger.info("[GoogleVisionTextExtractor] Клиент инициализирован")

    def extract(self, image: ImageInput) -> ExtractedText:
        """
        Распознаёт текст на изображении рецепта.

        Args:
            image: Байты изображения или путь к файлу

        Returns:
            ExtractedText

        Raises:
            ExtractionFailed: Ошибка чтения файла или ответа API
        """
        source, content = self._read(image)
        logger.debug(f"[GoogleVisionTextExtractor] Распознавание: {source}")

        params = {"image": vision.Image(content=content)}
        if self.language_hints:
            params["image_context"] = {"language_hints": self.language_hints}

        # DOCUMENT_TEXT_DETECTION лучше для плотного текста рецептов
        response = self.client.document_text_detection(**params)

        if response.error.message:
            raise ExtractionFailed(
                message=f"Google Vision API error: {response.error.message}",
                component="GoogleVisionTextExtractor",
            )

        return self._parse_response(response, source)

    def _read(self, image: ImageInput) -> tuple:
        if isinstance(image, (bytes, bytearray)):
            return "bytes", bytes(image)

        image_path = Path(image)
        try:
            with open(image_path, "rb") as f:
                return image_path.name, f.read()
        except (IOError, OSError) as e:
            raise ExtractionFailed(
                message=f"Не удалось прочитать изображение: {image_path}",
                component="GoogleVisionTextExtractor",
                original_error=e,
            )

    def _parse_response(self, response: Any, source: str) -> ExtractedText:
        """
        Извлекает из ответа полный текст и confidence слов.
        """
        annotation = response.full_text_annotation
        full_text = annotation.text if annotation else ""

        confidences: List[float] = []
        if annotation:
            for page in annotation.pages:
                for block in page.blocks:
                    for paragraph in block.paragraphs:
                        for word in paragraph.words:
                            # Гарантируем [0, 1]
                            confidences.append(max(0.0, min(1.0, float(word.confidence))))

        quality = round(sum(confidences) / len(confidences), 4) if confidences else 0.0

        logger.debug(
            f"[GoogleVisionTextExtractor] {source}: {len(full_text or '')} символов, "
            f"{len(confidences)} слов, quality={quality:.2f}"
        )

        return ExtractedText(
            text=full_text or "",
            quality_score=quality,
            metadata=ExtractionMetadata(
                source=source,
                processed_at=datetime.now().isoformat(),
                word_count=len(confidences),
                provider="google_vision",
                language_hints=list(self.language_hints),
            ),
        )
