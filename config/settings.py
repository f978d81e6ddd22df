"""
Настройки проекта Recipe Import.

ВАЖНО: Для импорта из фото укажите путь к Google Cloud credentials,
для структурирования текста — ANTHROPIC_API_KEY.
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("RECIPE_IMPORT_DATA_DIR", str(PROJECT_ROOT / "data")))
INPUT_DIR = DATA_DIR / "input"
REPOSITORY_DIR = DATA_DIR / "repository"


# =============================================================================
# GOOGLE CLOUD VISION API (извлечение текста из фото)
# =============================================================================
# Путь к JSON-файлу с ключом сервисного аккаунта
GOOGLE_APPLICATION_CREDENTIALS = os.getenv(
    "GOOGLE_APPLICATION_CREDENTIALS",
    str(PROJECT_ROOT / "config" / "google_credentials.json")
)

# Язык распознавания (для подсказки OCR)
OCR_LANGUAGE_HINTS = ["en"]

# Поддерживаемые форматы изображений
SUPPORTED_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".webp", ".heic"]

# =============================================================================
# ANTHROPIC API (структурирование рецепта)
# =============================================================================
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")
ANTHROPIC_MAX_TOKENS = int(os.getenv("ANTHROPIC_MAX_TOKENS", "4096"))

# =============================================================================
# НАСТРОЙКИ СОПОСТАВЛЕНИЯ ИНГРЕДИЕНТОВ
# =============================================================================
# Порог похожести для fuzzy-сопоставления (0.0 - 1.0)
FUZZY_MATCH_THRESHOLD = float(os.getenv("FUZZY_MATCH_THRESHOLD", "0.8"))

# Индексировать только активные позиции каталога
CATALOG_ACTIVE_ONLY = os.getenv("CATALOG_ACTIVE_ONLY", "false").lower() == "true"

# =============================================================================
# НАСТРОЙКИ СКОРИНГА
# =============================================================================
# Сколько duplicate_ingredient ещё допускают уровень medium
MAX_DUPLICATES_FOR_MEDIUM = int(os.getenv("MAX_DUPLICATES_FOR_MEDIUM", "2"))

# =============================================================================
# НАСТРОЙКИ МЕНЮ
# =============================================================================
MENU_DEFAULT_CATEGORY = "Uncategorized"

# Порог похожести названий рецепта и позиции меню для автопривязки
MENU_NAME_SIMILARITY_THRESHOLD = float(os.getenv("MENU_NAME_SIMILARITY_THRESHOLD", "0.7"))


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config(require_vision: bool = False, require_structurer: bool = True):
    """Проверяет корректность конфигурации."""
    errors = []

    if require_vision:
        if not GOOGLE_APPLICATION_CREDENTIALS:
            errors.append(
                "GOOGLE_APPLICATION_CREDENTIALS не указан!\n"
                "Укажите путь к JSON-ключу в config/settings.py или через переменную окружения."
            )
        elif not Path(GOOGLE_APPLICATION_CREDENTIALS).exists():
            errors.append(
                f"Файл credentials не найден: {GOOGLE_APPLICATION_CREDENTIALS}"
            )

    if require_structurer and not ANTHROPIC_API_KEY:
        errors.append("ANTHROPIC_API_KEY не указан! Задайте переменную окружения.")

    if not 0.0 < FUZZY_MATCH_THRESHOLD <= 1.0:
        errors.append(f"FUZZY_MATCH_THRESHOLD вне диапазона (0, 1]: {FUZZY_MATCH_THRESHOLD}")

    if errors:
        raise ValueError("\n".join(errors))

    # Создаём директории если не существуют
    INPUT_DIR.mkdir(parents=True, exist_ok=True)
    REPOSITORY_DIR.mkdir(parents=True, exist_ok=True)

    return True
