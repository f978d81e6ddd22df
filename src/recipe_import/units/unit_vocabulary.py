"""
Unit Vocabulary - словарь единиц измерения.

ЦКП: Ответ на вопрос "распознана ли единица" и её каноническая форма.

Загружается из units.yaml (рядом с модулем) один раз и кешируется на уровне класса.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Dict, FrozenSet, List, Optional

import yaml
from loguru import logger

from ..domain.exceptions import UnitVocabularyError


DEFAULT_VOCABULARY_FILE = Path(__file__).parent / "units.yaml"


def _unit_key(unit: str) -> str:
    return unit.strip().lower()


@dataclass
class UnitVocabulary:
    """
    Словарь единиц измерения.

    recognized: написание -> каноническая единица
    informal: кухонные единицы (парсятся, но не распознаются)
    """
    recognized: Dict[str, str]
    informal: FrozenSet[str] = field(default_factory=frozenset)
    source_file: Optional[str] = None

    _cache: ClassVar[Dict[str, "UnitVocabulary"]] = {}

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "UnitVocabulary":
        """
        Загружает словарь из YAML файла (с кешем).

        Args:
            path: Путь к YAML (по умолчанию units.yaml рядом с модулем)

        Returns:
            UnitVocabulary

        Raises:
            UnitVocabularyError: Файл не найден или структура неверна
        """
        config_file = Path(path) if path else DEFAULT_VOCABULARY_FILE
        cache_key = str(config_file.resolve())

        if cache_key in cls._cache:
            return cls._cache[cache_key]

        vocabulary = cls._load_yaml(config_file)
        cls._cache[cache_key] = vocabulary

        logger.debug(
            f"[UnitVocabulary] Загружен {config_file.name}: "
            f"{len(vocabulary.canonical_units)} единиц, "
            f"{len(vocabulary.recognized)} написаний, {len(vocabulary.informal)} informal"
        )
        return vocabulary

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()

    @classmethod
    def _load_yaml(cls, config_file: Path) -> "UnitVocabulary":
        if not config_file.exists():
            raise UnitVocabularyError(
                f"Файл словаря единиц не найден: {config_file}",
                component="UnitVocabulary",
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise UnitVocabularyError(
                f"Некорректный YAML: {config_file}",
                component="UnitVocabulary",
                original_error=e,
            )

        units = data.get("recognized")
        if not isinstance(units, dict) or not units:
            raise UnitVocabularyError(
                f"Отсутствует секция recognized в {config_file}",
                component="UnitVocabulary",
            )

        recognized: Dict[str, str] = {}
        for canonical, spellings in units.items():
            canonical_key = _unit_key(str(canonical))
            recognized[canonical_key] = canonical_key
            for spelling in spellings or []:
                key = _unit_key(str(spelling))
                owner = recognized.get(key)
                if owner is not None and owner != canonical_key:
                    logger.warning(
                        f"[UnitVocabulary] Написание '{key}' уже у '{owner}', пропуск для '{canonical_key}'"
                    )
                    continue
                recognized[key] = canonical_key

        informal = frozenset(
            _unit_key(str(u)) for u in data.get("informal") or [] if _unit_key(str(u)) not in recognized
        )

        return cls(recognized=recognized, informal=informal, source_file=config_file.name)

    @property
    def canonical_units(self) -> List[str]:
        """Канонические единицы в порядке сортировки."""
        return sorted(set(self.recognized.values()))

    def canonical(self, unit: Optional[str]) -> Optional[str]:
        """Каноническая единица или None, если единица не распознана."""
        if not unit:
            return None
        return self.recognized.get(_unit_key(unit))

    def is_recognized(self, unit: Optional[str]) -> bool:
        return self.canonical(unit) is not None

    def is_unit_token(self, token: str) -> bool:
        """Похоже ли слово на единицу (распознанную или кухонную)."""
        key = _unit_key(token)
        return key in self.recognized or key in self.informal
