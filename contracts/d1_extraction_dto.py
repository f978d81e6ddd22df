"""
DTO контракт: D1 (Extraction) -> D2 (Structuring)

Результат извлечения текста из фото рецепта.
Содержит полный текст и оценку качества распознавания.

ВАЖНО: D1 — внешний коллаборатор. Пайплайн не знает, КАК извлечён текст,
и потребляет результат как непрозрачные, возможно неточные данные.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ExtractionMetadata:
    """
    Метаданные извлечения текста.
    """
    source: str                                   # Имя файла / URI изображения
    processed_at: str                             # Timestamp обработки (ISO 8601)
    word_count: int = 0                           # Сколько слов распознано
    provider: str = "unknown"                     # Кто извлекал (google_vision, ...)
    language_hints: List[str] = field(default_factory=list)


@dataclass
class ExtractedText:
    """
    Результат извлечения текста из изображения.

    quality_score — оценка качества распознавания (0.0 - 1.0).
    Пустой или пробельный text означает "текст не найден".
    """

    # Полный текст одной строкой (строки разделены \n)
    text: str = ""

    # Качество распознавания (0.0 - 1.0)
    quality_score: float = 0.0

    # Метаданные обработки
    metadata: Optional[ExtractionMetadata] = None

    def __post_init__(self):
        if not 0.0 <= self.quality_score <= 1.0:
            raise ValueError(f"quality_score must be within [0, 1], got {self.quality_score}")

    def has_content(self) -> bool:
        """True если есть хоть один непробельный символ."""
        return bool(self.text and self.text.strip())
