"""
Unit-тесты для Ingredient Matcher.

ЦКП: exact → alias → fuzzy → none, детерминированно, без изменения каталога.
"""

import pytest

from contracts.d2_structuring_dto import RawIngredientLine
from contracts.pos_dto import CatalogEntry
from src.recipe_import.catalog import CatalogIndex
from src.recipe_import.matching import IngredientMatcher, token_set_overlap


def line(name: str) -> RawIngredientLine:
    return RawIngredientLine(text=name, name=name)


@pytest.fixture
def matcher() -> IngredientMatcher:
    return IngredientMatcher(threshold=0.8)


class TestMatchKinds:
    """Тесты порядка стратегий."""

    def test_exact_canonical(self, matcher, catalog_index):
        """Должен находить точное совпадение с каноническим названием."""
        result = matcher.match(line("Whole Milk"), catalog_index)

        assert result.match_kind == "exact"
        assert result.catalog_entry_id == "ing_milk"
        assert result.is_new is False

    def test_alias(self, matcher, catalog_index):
        """Должен находить совпадение по алиасу."""
        result = matcher.match(line("AP Flour"), catalog_index)

        assert result.match_kind == "alias"
        assert result.catalog_entry_id == "ing_flour"
        assert result.is_new is False

    def test_plural_resolves_to_exact(self, matcher, catalog_index):
        """Должен сводить множественное число к точному совпадению."""
        result = matcher.match(line("Eggs"), catalog_index)

        assert result.match_kind == "exact"
        assert result.catalog_entry_id == "ing_egg"

    def test_fuzzy_typo(self, matcher, catalog_index):
        """Должен находить нечёткое совпадение при опечатке."""
        result = matcher.match(line("Unsalted Buter"), catalog_index)

        assert result.match_kind == "fuzzy"
        assert result.catalog_entry_id == "ing_butter"
        assert result.candidate_ids == ["ing_butter"]
        assert result.is_new is False
        assert result.score >= 0.8

    def test_none_when_nothing_close(self, matcher, catalog_index):
        """Должен возвращать none, если ничего похожего нет."""
        result = matcher.match(line("moon dust"), catalog_index)

        assert result.match_kind == "none"
        assert result.catalog_entry_id is None
        assert result.is_new is True
        assert result.candidate_ids == []
        assert result.score < 0.8

    def test_uses_text_when_name_is_empty(self, matcher, catalog_index):
        """Должен брать текст строки при пустом названии."""
        result = matcher.match(RawIngredientLine(text="Milk"), catalog_index)

        assert result.match_kind == "alias"

    def test_empty_line(self, matcher, catalog_index):
        """Должен возвращать none для пустой строки."""
        result = matcher.match(RawIngredientLine(), catalog_index)

        assert result.match_kind == "none"
        assert result.is_new is True

    def test_empty_catalog(self, matcher):
        """Должен возвращать none при пустом каталоге."""
        result = matcher.match(line("Salt"), CatalogIndex.build([]))

        assert result.match_kind == "none"
        assert result.is_new is True


class TestAmbiguousMatch:
    """Ничья между кандидатами → none, но не новый ингредиент."""

    @pytest.fixture
    def tied_index(self) -> CatalogIndex:
        return CatalogIndex.build([
            CatalogEntry(id="chili_a", canonical_name="Chili Powder A"),
            CatalogEntry(id="chili_b", canonical_name="Chili Powder B"),
        ])

    def test_tie_is_ambiguous(self, matcher, tied_index):
        """Должен считать ничью неоднозначным совпадением."""
        result = matcher.match(line("Chili Powder"), tied_index)

        assert result.match_kind == "none"
        assert result.catalog_entry_id is None
        assert result.is_new is False
        assert result.candidate_ids == ["chili_a", "chili_b"]
        assert result.is_ambiguous is True

    def test_tie_broken_by_exact_name(self, matcher, tied_index):
        """Должен разрешать ничью точным названием."""
        result = matcher.match(line("chili powder b"), tied_index)

        assert result.match_kind == "exact"
        assert result.catalog_entry_id == "chili_b"


class TestMatcherProperties:
    """Детерминизм и чистота."""

    @pytest.mark.parametrize("name", ["AP Flour", "Unsalted Buter", "moon dust", "Eggs", "sugar"])
    def test_deterministic(self, matcher, catalog_entries, name):
        """Должен давать одинаковый результат при любом порядке каталога."""
        first = matcher.match(line(name), CatalogIndex.build(catalog_entries))
        second = matcher.match(line(name), CatalogIndex.build(list(reversed(catalog_entries))))

        assert first.to_dict() == second.to_dict()

    def test_does_not_mutate_catalog(self, matcher, catalog_entries):
        """Должен не изменять каталог."""
        snapshot = [e.model_dump() for e in catalog_entries]
        index = CatalogIndex.build(catalog_entries)

        matcher.match(line("Unsalted Buter"), index)
        matcher.match(line("moon dust"), index)

        assert [e.model_dump() for e in catalog_entries] == snapshot
        assert len(index) == len(catalog_entries)

    def test_threshold_is_configurable(self, catalog_index):
        """Должен учитывать заданный порог."""
        strict = IngredientMatcher(threshold=0.99)

        assert strict.match(line("Unsalted Buter"), catalog_index).match_kind == "none"

    @pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5])
    def test_invalid_threshold(self, threshold):
        """Должен отклонять порог вне (0, 1]."""
        with pytest.raises(ValueError):
            IngredientMatcher(threshold=threshold)

    def test_token_set_overlap(self):
        """Должен считать долю общих токенов."""
        assert token_set_overlap(frozenset({"a", "b"}), frozenset({"b", "c"})) == pytest.approx(1 / 3)
        assert token_set_overlap(frozenset(), frozenset({"a"})) == 0.0
