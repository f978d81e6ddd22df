"""
Прогресс импорта рецепта.

ЦКП: Монотонный поток событий (stage, progress 0-100, message).

Проценты — фиксированные контрольные точки этапов, не мелкая гранулярность.
Отсутствие подписчика не меняет поведение пайплайна.
Ошибка подписчика логируется и не прерывает импорт.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from loguru import logger


class ImportStage(str, Enum):
    """Этапы импорта (конечный автомат)."""
    START = "start"
    EXTRACTING = "extracting"
    STRUCTURING = "structuring"
    VALIDATING = "validating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressEvent:
    """Событие прогресса."""
    stage: ImportStage
    progress: int                            # 0 - 100
    message: str
    error: Optional[BaseException] = None    # Только для FAILED

    @property
    def is_terminal(self) -> bool:
        return self.stage in (ImportStage.DONE, ImportStage.FAILED)

    def to_dict(self) -> dict:
        return {
            "stage": self.stage.value,
            "progress": self.progress,
            "message": self.message,
            "error": str(self.error) if self.error else None,
        }


ProgressSink = Callable[[ProgressEvent], None]


class ProgressReporter:
    """
    Отправляет события в sink и хранит историю.

    Процент никогда не уменьшается: FAILED повторяет последний процент.
    """

    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
        self.events: List[ProgressEvent] = []
        self._last_progress = 0

    @property
    def last_progress(self) -> int:
        return self._last_progress

    def emit(self, stage: ImportStage, progress: int, message: str) -> ProgressEvent:
        progress = max(self._last_progress, min(100, progress))
        return self._publish(ProgressEvent(stage=stage, progress=progress, message=message))

    def fail(self, error: BaseException) -> ProgressEvent:
        return self._publish(
            ProgressEvent(
                stage=ImportStage.FAILED,
                progress=self._last_progress,
                message=str(error),
                error=error,
            )
        )

    def _publish(self, event: ProgressEvent) -> ProgressEvent:
        self._last_progress = event.progress
        self.events.append(event)

        if self.sink is None:
            return event

        try:
            self.sink(event)
        except Exception as e:
            logger.warning(f"[Progress] Ошибка подписчика на '{event.stage.value}': {e}")

        return event
