"""
Общие fixtures для тестов Recipe Import.

Каталог POS для тестов:
- ing_butter: Unsalted Butter (алиас Butter)
- ing_egg:    Egg (алиас Large Egg)
- ing_flour:  All-Purpose Flour (алиас AP Flour)
- ing_milk:   Whole Milk (алиас Milk)
- ing_sugar:  Granulated Sugar (алиас Sugar)
"""

from typing import List, Sequence

import pytest

from contracts.d1_extraction_dto import ExtractedText
from contracts.d2_structuring_dto import DraftRecipe, RawIngredientLine
from contracts.pos_dto import CatalogEntry
from src.recipe_import.catalog import CatalogIndex
from src.recipe_import.domain.interfaces import ImageInput, IRecipeStructurer, ITextExtractor
from src.recipe_import.units import UnitVocabulary


def build_catalog() -> List[CatalogEntry]:
    """Стандартный тестовый каталог."""
    return [
        CatalogEntry(id="ing_flour", canonical_name="All-Purpose Flour", unit="lb",
                     aliases=frozenset({"AP Flour"})),
        CatalogEntry(id="ing_sugar", canonical_name="Granulated Sugar", unit="lb",
                     aliases=frozenset({"Sugar"})),
        CatalogEntry(id="ing_milk", canonical_name="Whole Milk", unit="gallon",
                     aliases=frozenset({"Milk"})),
        CatalogEntry(id="ing_butter", canonical_name="Unsalted Butter", unit="lb",
                     aliases=frozenset({"Butter"})),
        CatalogEntry(id="ing_egg", canonical_name="Egg", unit="each",
                     aliases=frozenset({"Large Egg"})),
    ]


class FakeStructurer(IRecipeStructurer):
    """
    Структурировщик для тестов: первая строка — название, остальные — ингредиенты.
    """

    def __init__(self, seed: str = "medium", error: Exception = None):
        self.seed = seed
        self.error = error
        self.calls = 0
        self.last_catalog_hint: Sequence[CatalogEntry] = ()

    def structure(self, raw_text: str, catalog_hint: Sequence[CatalogEntry]) -> DraftRecipe:
        self.calls += 1
        self.last_catalog_hint = list(catalog_hint)
        if self.error:
            raise self.error

        lines = [line.strip() for line in raw_text.splitlines() if line.strip()]
        return DraftRecipe(
            name=lines[0] if lines else "",
            ingredients=[RawIngredientLine(text=line) for line in lines[1:]],
            confidence_seed=self.seed,
        )


class FakeTextExtractor(ITextExtractor):
    """OCR для тестов: всегда возвращает заданный текст."""

    def __init__(self, text: str = "", quality: float = 0.9, error: Exception = None):
        self.text = text
        self.quality = quality
        self.error = error
        self.calls = 0

    def extract(self, image: ImageInput) -> ExtractedText:
        self.calls += 1
        if self.error:
            raise self.error
        return ExtractedText(text=self.text, quality_score=self.quality)


@pytest.fixture
def catalog_entries() -> List[CatalogEntry]:
    return build_catalog()


@pytest.fixture
def catalog_index(catalog_entries) -> CatalogIndex:
    return CatalogIndex.build(catalog_entries)


@pytest.fixture
def vocabulary() -> UnitVocabulary:
    return UnitVocabulary.load()


@pytest.fixture
def fake_structurer() -> FakeStructurer:
    return FakeStructurer()


@pytest.fixture
def make_structurer():
    """Фабрика FakeStructurer с параметрами."""
    return FakeStructurer


@pytest.fixture
def make_extractor():
    """Фабрика FakeTextExtractor с параметрами."""
    return FakeTextExtractor
