"""
Catalog Index - индекс каталога ингредиентов POS.

ЦКП: Быстрый поиск позиции каталога по нормализованному названию / алиасу
и плоский список названий для fuzzy-сканирования.

Индекс — одноразовый read-through кеш: каталогом владеет внешний репозиторий,
индекс пересобирается при каждом изменении каталога и нигде не сохраняется.

Инвариант: каждый нормализованный ключ принадлежит ровно одной позиции.
Позиции обходятся в порядке id, при конфликте побеждает первый владелец.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from loguru import logger

from contracts.pos_dto import CatalogEntry
from .normalizer import normalize_name, singular_candidates, tokenize


CANONICAL = "canonical"
ALIAS = "alias"


@dataclass(frozen=True)
class IndexedName:
    """Нормализованное название в плоском списке для fuzzy-сканирования."""
    normalized: str
    entry_id: str
    kind: str                   # canonical | alias
    tokens: frozenset

    def to_dict(self) -> dict:
        return {
            "normalized": self.normalized,
            "entry_id": self.entry_id,
            "kind": self.kind,
        }


class CatalogIndex:
    """
    Индекс каталога: canonical / alias -> entry id + плоский список названий.

    Создаётся через CatalogIndex.build(entries).
    """

    def __init__(
        self,
        entries: Dict[str, CatalogEntry],
        canonical: Dict[str, str],
        aliases: Dict[str, str],
        names: List[IndexedName],
    ):
        self._entries = entries
        self._canonical = canonical
        self._aliases = aliases
        self._names = names

    @classmethod
    def build(cls, entries: Iterable[CatalogEntry], active_only: bool = False) -> "CatalogIndex":
        """
        Строит индекс из полного каталога.

        Args:
            entries: Позиции каталога
            active_only: Пропускать неактивные позиции

        Returns:
            CatalogIndex
        """
        ordered = sorted(entries, key=lambda e: e.id)
        if active_only:
            ordered = [e for e in ordered if e.is_active]

        by_id: Dict[str, CatalogEntry] = {}
        canonical: Dict[str, str] = {}
        aliases: Dict[str, str] = {}

        for entry in ordered:
            if entry.id in by_id:
                logger.warning(f"[CatalogIndex] Повторный id пропущен: {entry.id}")
                continue
            by_id[entry.id] = entry

        # 1. Канонические названия (приоритет над алиасами других позиций)
        for entry in by_id.values():
            key = normalize_name(entry.canonical_name)
            if not key:
                continue
            owner = canonical.get(key)
            if owner is not None:
                logger.warning(
                    f"[CatalogIndex] Название '{key}' уже у {owner}, пропуск для {entry.id}"
                )
                continue
            canonical[key] = entry.id

        # 2. Алиасы
        for entry in by_id.values():
            for alias in sorted(entry.aliases):
                key = normalize_name(alias)
                if not key:
                    continue
                owner = canonical.get(key) or aliases.get(key)
                if owner == entry.id:
                    continue
                if owner is not None:
                    logger.warning(
                        f"[CatalogIndex] Алиас '{key}' уже у {owner}, пропуск для {entry.id}"
                    )
                    continue
                aliases[key] = entry.id

        names = [
            IndexedName(normalized=key, entry_id=entry_id, kind=CANONICAL, tokens=tokenize(key))
            for key, entry_id in canonical.items()
        ] + [
            IndexedName(normalized=key, entry_id=entry_id, kind=ALIAS, tokens=tokenize(key))
            for key, entry_id in aliases.items()
        ]
        names.sort(key=lambda n: (n.normalized, n.entry_id, n.kind))

        if not by_id:
            logger.warning("[CatalogIndex] Каталог пуст")

        logger.debug(
            f"[CatalogIndex] Построен: {len(by_id)} позиций, "
            f"{len(canonical)} названий, {len(aliases)} алиасов"
        )

        return cls(entries=by_id, canonical=canonical, aliases=aliases, names=names)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def names(self) -> List[IndexedName]:
        return list(self._names)

    @property
    def entries(self) -> List[CatalogEntry]:
        """Снимок позиций каталога в порядке id."""
        return list(self._entries.values())

    def entry(self, entry_id: str) -> Optional[CatalogEntry]:
        return self._entries.get(entry_id)

    def display_name(self, entry_id: str) -> str:
        entry = self._entries.get(entry_id)
        return entry.canonical_name if entry else entry_id

    def resolve_key(self, name: str) -> str:
        """
        Нормализует название для поиска.

        Окончание множественного числа снимается только если
        точная форма единственного числа есть в индексе.
        """
        key = normalize_name(name)
        if key in self._canonical or key in self._aliases:
            return key
        for candidate in singular_candidates(key):
            if candidate in self._canonical or candidate in self._aliases:
                return candidate
        return key

    def find_canonical(self, name: str) -> Optional[str]:
        """ID позиции, у которой каноническое название равно name."""
        return self._canonical.get(self.resolve_key(name))

    def find_alias(self, name: str) -> Optional[str]:
        """ID позиции, у которой есть алиас name."""
        return self._aliases.get(self.resolve_key(name))
