"""
Нормализация названий ингредиентов для сравнения.

lowercase → пунктуация в пробелы → схлопывание пробелов → trim.
"""

import re
from typing import List

_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_SPACES_RE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """
    Нормализует название ингредиента или алиас.

    "  All-Purpose   Flour " -> "all purpose flour"
    """
    if not name:
        return ""
    text = _NON_WORD_RE.sub(" ", name.lower())
    return _SPACES_RE.sub(" ", text).strip()


def singular_candidates(normalized: str) -> List[str]:
    """
    Возможные формы единственного числа для нормализованного названия.

    Только кандидаты: применять форму можно лишь если она есть в индексе.
    "berries" -> ["berry", "berri", "berrie"]; "tomatoes" -> ["tomato", "tomatoe"]
    """
    candidates: List[str] = []
    if len(normalized) < 3:
        return candidates

    if normalized.endswith("ies"):
        candidates.append(normalized[:-3] + "y")
    if normalized.endswith("es"):
        candidates.append(normalized[:-2])
    if normalized.endswith("s") and not normalized.endswith("ss"):
        candidates.append(normalized[:-1])

    return candidates


def tokenize(normalized: str) -> frozenset:
    """Множество токенов нормализованного названия."""
    return frozenset(normalized.split()) if normalized else frozenset()
