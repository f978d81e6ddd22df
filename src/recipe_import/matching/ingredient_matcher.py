"""
Ingredient Matcher - сопоставление строки ингредиента с каталогом POS.

ЦКП: Ноль или одна позиция каталога для одной строки ингредиента.

Алгоритм (первое попадание выигрывает):
1. exact  - нормализованное название == каноническое название
2. alias  - нормализованное название == зарегистрированный алиас
3. fuzzy  - ровно одна позиция с лучшей похожестью >= порога
4. none   - ничего не прошло порог (is_new=True),
            или несколько позиций делят лучший результат (неоднозначно, is_new=False)

Похожесть = max(пересечение множеств токенов (Jaccard), token_sort_ratio).
Чистая функция: одинаковые входы → одинаковый результат. Каталог не меняется.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger
from rapidfuzz import fuzz

from config.settings import FUZZY_MATCH_THRESHOLD
from contracts.d2_structuring_dto import RawIngredientLine
from ..catalog.catalog_index import CatalogIndex
from ..catalog.normalizer import tokenize


# Точность сравнения score при поиске ничьих
SCORE_PRECISION = 4


@dataclass
class MatchResult:
    """
    Результат сопоставления одной строки.
    """
    catalog_entry_id: Optional[str]                  # None → не сопоставлено
    match_kind: str                                  # exact | alias | fuzzy | none
    is_new: bool                                     # Ингредиента нет в каталоге
    candidate_ids: List[str] = field(default_factory=list)  # fuzzy-кандидат / ничьи
    score: float = 0.0                               # Похожесть лучшего кандидата

    @property
    def is_ambiguous(self) -> bool:
        return self.match_kind == "none" and len(self.candidate_ids) > 1

    def to_dict(self) -> dict:
        return {
            "catalog_entry_id": self.catalog_entry_id,
            "match_kind": self.match_kind,
            "is_new": self.is_new,
            "candidate_ids": list(self.candidate_ids),
            "score": self.score,
        }


def token_set_overlap(a: frozenset, b: frozenset) -> float:
    """Jaccard-пересечение двух множеств токенов (0.0 - 1.0)."""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


class IngredientMatcher:
    """
    Сопоставление строки ингредиента с каталогом.

    Использует CatalogIndex: exact → alias → fuzzy → none.
    """

    def __init__(self, threshold: float = FUZZY_MATCH_THRESHOLD):
        """
        Args:
            threshold: Порог похожести для fuzzy (по умолчанию 0.8)
        """
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f"threshold must be within (0, 1], got {threshold}")
        self.threshold = threshold

    def match(self, line: RawIngredientLine, index: CatalogIndex) -> MatchResult:
        """
        Сопоставляет строку ингредиента с каталогом.

        Args:
            line: Строка ингредиента
            index: Индекс каталога

        Returns:
            MatchResult
        """
        name = line.display_name
        key = index.resolve_key(name)

        if not key:
            return MatchResult(catalog_entry_id=None, match_kind="none", is_new=True)

        # 1. Exact
        entry_id = index.find_canonical(name)
        if entry_id is not None:
            return MatchResult(catalog_entry_id=entry_id, match_kind="exact", is_new=False, score=1.0)

        # 2. Alias
        entry_id = index.find_alias(name)
        if entry_id is not None:
            return MatchResult(catalog_entry_id=entry_id, match_kind="alias", is_new=False, score=1.0)

        # 3. Fuzzy
        scores = self._score_candidates(key, index)
        if not scores:
            return MatchResult(catalog_entry_id=None, match_kind="none", is_new=True)

        best_score = max(scores.values())
        if best_score < self.threshold:
            logger.debug(f"[IngredientMatcher] '{key}': нет кандидатов (best={best_score:.2f})")
            return MatchResult(catalog_entry_id=None, match_kind="none", is_new=True, score=best_score)

        top = sorted(entry_id for entry_id, score in scores.items() if score == best_score)
        if len(top) > 1:
            logger.debug(f"[IngredientMatcher] '{key}': неоднозначно {top} (score={best_score:.2f})")
            return MatchResult(
                catalog_entry_id=None,
                match_kind="none",
                is_new=False,
                candidate_ids=top,
                score=best_score,
            )

        return MatchResult(
            catalog_entry_id=top[0],
            match_kind="fuzzy",
            is_new=False,
            candidate_ids=top,
            score=best_score,
        )

    def similarity(self, key: str, other: str) -> float:
        """Похожесть двух нормализованных названий (0.0 - 1.0)."""
        overlap = token_set_overlap(tokenize(key), tokenize(other))
        edit = fuzz.token_sort_ratio(key, other) / 100.0
        return round(max(overlap, edit), SCORE_PRECISION)

    def _score_candidates(self, key: str, index: CatalogIndex) -> Dict[str, float]:
        """Лучшая похожесть по каждой позиции каталога (канон и алиасы схлопываются)."""
        scores: Dict[str, float] = {}
        for indexed in index.names:
            score = self.similarity(key, indexed.normalized)
            if score > scores.get(indexed.entry_id, 0.0):
                scores[indexed.entry_id] = score
        return scores
