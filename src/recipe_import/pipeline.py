"""
Import Orchestrator - оркестратор импорта рецепта.

Координирует этапы в строгом порядке:
start → 1. Extracting (только для фото) → 2. Structuring →
3. Validation → 4. Scoring → 5. Status → done

Терминальное состояние failed достижимо из любого этапа:
событие failed отправляется в прогресс, ошибка пробрасывается вызывающему.
Автоматических повторов нет. При ошибке в репозиторий ничего не пишется.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from loguru import logger

from config.settings import CATALOG_ACTIVE_ONLY
from contracts.d1_extraction_dto import ExtractedText
from contracts.d3_recipe_dto import Recipe, RecipeSource, utc_now
from contracts.pos_dto import CatalogEntry

from .catalog.catalog_index import CatalogIndex
from .domain.exceptions import ExtractionEmpty, RecipeImportError, RepositoryError
from .domain.interfaces import ImageInput, IRecipeRepository, IRecipeStructurer, ITextExtractor
from .progress import ImportStage, ProgressEvent, ProgressReporter, ProgressSink

# Stage imports
from .s1_extraction import ExtractionStage, describe_image
from .s2_structuring import StructuringResult, StructuringStage
from .s3_validation import RecipeValidator, ValidationResult
from .s4_scoring import ConfidenceScorer
from .s5_status import StatusResolver


CatalogInput = Union[CatalogIndex, Iterable[CatalogEntry], None]


@dataclass
class PipelineResult:
    """
    Полный результат импорта со всеми промежуточными данными.
    """
    # Финальный результат
    recipe: Recipe

    # Промежуточные результаты этапов
    extraction: Optional[ExtractedText] = None
    structuring: Optional[StructuringResult] = None
    validation: Optional[ValidationResult] = None

    # Поток прогресса
    events: List[ProgressEvent] = field(default_factory=list)

    # Метрики
    processing_time_ms: float = 0.0
    stages_completed: int = 0

    def to_dict(self) -> dict:
        return {
            "recipe": self.recipe.model_dump(mode="json"),
            "extraction": {
                "text_length": len(self.extraction.text),
                "quality_score": self.extraction.quality_score,
            } if self.extraction else None,
            "structuring": self.structuring.to_dict() if self.structuring else None,
            "validation": self.validation.to_dict() if self.validation else None,
            "events": [e.to_dict() for e in self.events],
            "processing_time_ms": self.processing_time_ms,
            "stages_completed": self.stages_completed,
        }


class ImportOrchestrator:
    """
    Оркестратор импорта рецепта.

    Входы:
    - import_from_image: фото → текст → черновик → валидация
    - import_from_text: текст → черновик → валидация
    - revalidate: только валидация (после изменения каталога)

    ЦКП: Recipe с актуальными issues, confidence и status.
    """

    def __init__(
        self,
        structurer: Optional[IRecipeStructurer] = None,
        text_extractor: Optional[ITextExtractor] = None,
        repository: Optional[IRecipeRepository] = None,
        structuring_stage: Optional[StructuringStage] = None,
        validator: Optional[RecipeValidator] = None,
        scorer: Optional[ConfidenceScorer] = None,
        status_resolver: Optional[StatusResolver] = None,
        active_only: bool = CATALOG_ACTIVE_ONLY,
    ):
        """
        Инициализация оркестратора.

        Args:
            structurer: Внешний структурировщик текста (не нужен для revalidate)
            text_extractor: Внешний OCR (нужен только для import_from_image)
            repository: Репозиторий (опционально, рецепт сохраняется после валидации)
            Остальные этапы опциональны — по умолчанию создаются стандартные.
            active_only: Индексировать только активные позиции каталога
        """
        self.extraction_stage = ExtractionStage(text_extractor) if text_extractor else None
        if structuring_stage is None and structurer is not None:
            structuring_stage = StructuringStage(structurer)
        self.structuring_stage = structuring_stage
        self.validator = validator or RecipeValidator()
        self.scorer = scorer or ConfidenceScorer()
        self.status_resolver = status_resolver or StatusResolver()
        self.repository = repository
        self.active_only = active_only

        logger.info(
            f"[ImportOrchestrator] Инициализирован "
            f"(ocr={'on' if self.extraction_stage else 'off'}, "
            f"repository={'on' if repository else 'off'})"
        )

    # ------------------------------------------------------------------
    # Входы
    # ------------------------------------------------------------------

    def import_from_image(
        self,
        image: ImageInput,
        catalog: CatalogInput = None,
        on_progress: Optional[ProgressSink] = None,
        file_name: Optional[str] = None,
    ) -> PipelineResult:
        """
        Импортирует рецепт из изображения.

        Args:
            image: Байты изображения или путь к файлу
            catalog: Каталог (список позиций или готовый индекс);
                None → читается из репозитория
            on_progress: Подписчик на прогресс
            file_name: Имя загруженного файла

        Returns:
            PipelineResult

        Raises:
            ExtractionEmpty: Текст не найден (структурировщик не вызывается)
            ExtractionFailed, StructuringFailed, RepositoryError
        """
        start_time = time.time()
        reporter = ProgressReporter(on_progress)
        label = file_name or describe_image(image)
        logger.info(f"[ImportOrchestrator] Старт импорта из фото: {label}")

        reporter.emit(ImportStage.START, 0, "Starting import")
        draft: Optional[Recipe] = None
        try:
            if self.extraction_stage is None:
                raise RecipeImportError(
                    message="Text extractor is not configured",
                    component="ImportOrchestrator",
                )
            self._require_structuring()

            # Stage 1: Extracting
            reporter.emit(ImportStage.EXTRACTING, 10, "Extracting text from image")
            extracted = self.extraction_stage.process(image)
            reporter.emit(ImportStage.EXTRACTING, 30, "Text extracted")

            source = RecipeSource(
                type=self._image_source_type(image, file_name),
                uri=str(image) if isinstance(image, (str, Path)) else None,
                file_name=file_name or (Path(image).name if isinstance(image, (str, Path)) else None),
                extraction_quality=extracted.quality_score,
            )
            index = self._build_index(catalog)

            # Stage 2: Structuring
            reporter.emit(ImportStage.STRUCTURING, 40, "Structuring recipe")
            structuring = self.structuring_stage.process(extracted.text, index.entries, source)
            draft = structuring.recipe
            reporter.emit(ImportStage.STRUCTURING, 70, "Recipe structured")

            # Stages 3-5: Validating
            reporter.emit(ImportStage.VALIDATING, 80, "Validating ingredients")
            recipe, validation = self._validate(draft, index)
            self._save(recipe)

        except Exception as e:
            raise self._fail(e, reporter, draft)

        reporter.emit(ImportStage.DONE, 100, "Import complete")
        return self._result(recipe, reporter, start_time, 5, extracted, structuring, validation)

    def import_from_text(
        self,
        text: str,
        catalog: CatalogInput = None,
        on_progress: Optional[ProgressSink] = None,
        source: Optional[RecipeSource] = None,
    ) -> PipelineResult:
        """
        Импортирует рецепт из текста (этап extracting пропускается).

        Args:
            text: Текст рецепта
            catalog: Каталог (список позиций или готовый индекс);
                None → читается из репозитория
            on_progress: Подписчик на прогресс
            source: Происхождение (по умолчанию type=text)

        Returns:
            PipelineResult

        Raises:
            ExtractionEmpty: Пустой текст
            StructuringFailed, RepositoryError
        """
        start_time = time.time()
        reporter = ProgressReporter(on_progress)
        logger.info(f"[ImportOrchestrator] Старт импорта из текста: {len(text or '')} символов")

        reporter.emit(ImportStage.START, 0, "Starting import")
        draft: Optional[Recipe] = None
        try:
            if not text or not text.strip():
                raise ExtractionEmpty(
                    message="No text to import",
                    component="ImportOrchestrator",
                )
            self._require_structuring()

            source = source or RecipeSource(type="text", content=text)
            index = self._build_index(catalog)

            # Stage 2: Structuring
            reporter.emit(ImportStage.STRUCTURING, 30, "Structuring recipe")
            structuring = self.structuring_stage.process(text, index.entries, source)
            draft = structuring.recipe

            # Stages 3-5: Validating
            reporter.emit(ImportStage.VALIDATING, 70, "Validating ingredients")
            recipe, validation = self._validate(draft, index)
            self._save(recipe)

        except Exception as e:
            raise self._fail(e, reporter, draft)

        reporter.emit(ImportStage.DONE, 100, "Import complete")
        return self._result(recipe, reporter, start_time, 4, None, structuring, validation)

    def revalidate(
        self,
        recipe: Recipe,
        catalog: CatalogInput = None,
        on_progress: Optional[ProgressSink] = None,
    ) -> Recipe:
        """
        Перезапускает только валидацию (например, после правки каталога).

        issues полностью заменяются. Повторный вызов на том же каталоге
        даёт те же issues, confidence и status.

        Args:
            recipe: Рецепт
            catalog: Текущий каталог; None → читается из репозитория
            on_progress: Подписчик на прогресс

        Returns:
            Обновлённый Recipe
        """
        reporter = ProgressReporter(on_progress)
        logger.info(f"[ImportOrchestrator] Ревалидация: {recipe.id}")

        try:
            reporter.emit(ImportStage.VALIDATING, 50, "Revalidating recipe")
            index = self._build_index(catalog)
            updated, _ = self._validate(recipe, index)
            self._save(updated)
        except Exception as e:
            raise self._fail(e, reporter, None)

        reporter.emit(ImportStage.DONE, 100, "Revalidation complete")
        return updated

    # ------------------------------------------------------------------
    # Внутреннее
    # ------------------------------------------------------------------

    def _require_structuring(self) -> None:
        if self.structuring_stage is None:
            raise RecipeImportError(
                message="Structurer is not configured",
                component="ImportOrchestrator",
            )

    def _validate(self, recipe: Recipe, index: CatalogIndex) -> Tuple[Recipe, ValidationResult]:
        """Validator → Scorer → Status Resolver (фиксированный порядок)."""
        validation = self.validator.validate(recipe, index)
        confidence = self.scorer.score(validation.issues, len(validation.ingredients))
        status = self.status_resolver.resolve(validation.issues)

        updated = recipe.model_copy(
            update={
                "ingredients": validation.ingredients,
                "issues": validation.issues,
                "confidence": confidence,
                "status": status,
                "last_updated": utc_now(),
            }
        )

        logger.info(
            f"[ImportOrchestrator] '{updated.name}': {len(validation.issues)} issues, "
            f"confidence={confidence}, status={status}"
        )
        return updated, validation

    def _build_index(self, catalog: CatalogInput) -> CatalogIndex:
        """Снимок каталога на момент вызова."""
        if isinstance(catalog, CatalogIndex):
            return catalog

        if catalog is None:
            if self.repository is None:
                raise RecipeImportError(
                    message="Catalog is not provided and no repository is configured",
                    component="ImportOrchestrator",
                )
            try:
                catalog = self.repository.list_catalog_entries(active_only=self.active_only)
            except RecipeImportError:
                raise
            except Exception as e:
                raise RepositoryError(
                    message="Failed to read the catalog",
                    component="ImportOrchestrator",
                    original_error=e,
                )

        return CatalogIndex.build(catalog, active_only=self.active_only)

    def _save(self, recipe: Recipe) -> None:
        if self.repository is None:
            return
        try:
            self.repository.save_recipe(recipe)
        except RecipeImportError:
            raise
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to save recipe {recipe.id}",
                component="ImportOrchestrator",
                original_error=e,
            )
        logger.debug(f"[ImportOrchestrator] Рецепт сохранён: {recipe.id}")

    def _fail(
        self,
        error: Exception,
        reporter: ProgressReporter,
        draft: Optional[Recipe],
    ) -> RecipeImportError:
        """Переводит пайплайн в failed и возвращает исключение для raise."""
        if not isinstance(error, RecipeImportError):
            error = RecipeImportError(
                message="Unexpected pipeline error",
                component="ImportOrchestrator",
                original_error=error,
            )

        if draft is not None:
            error.failed_recipe = self.status_resolver.mark_failed(draft)

        logger.error(f"[ImportOrchestrator] Импорт прерван: {error}")
        reporter.fail(error)
        return error

    def _result(
        self,
        recipe: Recipe,
        reporter: ProgressReporter,
        start_time: float,
        stages_completed: int,
        extraction: Optional[ExtractedText],
        structuring: Optional[StructuringResult],
        validation: Optional[ValidationResult],
    ) -> PipelineResult:
        processing_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[ImportOrchestrator] Завершено за {processing_time_ms:.1f}ms: "
            f"{recipe.id} ({recipe.status})"
        )
        return PipelineResult(
            recipe=recipe,
            extraction=extraction,
            structuring=structuring,
            validation=validation,
            events=list(reporter.events),
            processing_time_ms=processing_time_ms,
            stages_completed=stages_completed,
        )

    @staticmethod
    def _image_source_type(image: ImageInput, file_name: Optional[str]) -> str:
        name = file_name or (str(image) if isinstance(image, (str, Path)) else "")
        return "pdf" if name.lower().endswith(".pdf") else "photo"
