"""
Парсер строки ингредиента.

ЦКП: RawIngredientLine (quantity, unit, name) из свободного текста.

Поддерживаемые формы количества:
- 2, 2.5, 2,5
- 1/2, 1 1/2
- ½, 1½, 1 ½
"""

import re
from typing import Optional, Tuple

from contracts.d2_structuring_dto import RawIngredientLine
from ..units.unit_vocabulary import UnitVocabulary


UNICODE_FRACTIONS = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}

_FRACTION_CHARS = "".join(UNICODE_FRACTIONS)


class IngredientLineParser:
    """Элемент-функция: раскладывает строку ингредиента на части."""

    def __init__(self, vocabulary: Optional[UnitVocabulary] = None):
        self.vocabulary = vocabulary or UnitVocabulary.load()

        # Паттерн: 1 1/2 | 1/2 | 2,5 | 1½ | ½
        self.quantity_pattern = re.compile(
            rf"^\s*(\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?(?:\s*[{_FRACTION_CHARS}])?|[{_FRACTION_CHARS}])"
            rf"(?=\s|$|[^\W\d_])"
        )
        # Первое слово после количества
        self.unit_pattern = re.compile(r"^([^\W\d_]+\.?)(?=\s|$)")
        self.of_pattern = re.compile(r"^of\s+", re.IGNORECASE)

    def parse(self, text: str) -> RawIngredientLine:
        """
        Раскладывает строку "2 cups AP flour" на quantity=2, unit="cups", name="AP flour".
        """
        if not text or not text.strip():
            return RawIngredientLine(text=text or "")

        quantity, rest = self._split_quantity(text)

        unit = None
        if quantity is not None:
            unit, rest = self._split_unit(rest)

        name = self.of_pattern.sub("", rest).strip(" ,;:-")

        return RawIngredientLine(
            text=text.strip(),
            quantity=quantity,
            unit=unit,
            name=name,
        )

    def complete(self, line: RawIngredientLine) -> RawIngredientLine:
        """
        Дополняет строку от структурировщика разбором её text.

        Поля, заданные структурировщиком, не перезаписываются.
        """
        if not line.text or (line.quantity is not None and line.unit and line.name):
            return line

        parsed = self.parse(line.text)
        return line.model_copy(
            update={
                "quantity": line.quantity if line.quantity is not None else parsed.quantity,
                "unit": line.unit or parsed.unit,
                "name": line.name or parsed.name,
            }
        )

    def _split_quantity(self, text: str) -> Tuple[Optional[float], str]:
        match = self.quantity_pattern.match(text)
        if not match:
            return None, text.strip()

        quantity = self._to_float(match.group(1))
        if quantity is None:
            return None, text.strip()

        return quantity, text[match.end():].strip()

    def _split_unit(self, rest: str) -> Tuple[Optional[str], str]:
        match = self.unit_pattern.match(rest)
        if not match:
            return None, rest

        token = match.group(1)
        if self.vocabulary.is_unit_token(token) or self.vocabulary.is_unit_token(token.rstrip(".")):
            return token.rstrip("."), rest[match.end():].strip()

        return None, rest

    def _to_float(self, value: str) -> Optional[float]:
        value = value.strip()
        total = 0.0

        if value and value[-1] in UNICODE_FRACTIONS:
            total += UNICODE_FRACTIONS[value[-1]]
            value = value[:-1].strip()

        for part in value.split():
            if "/" in part:
                numerator, denominator = part.split("/", 1)
                if int(denominator) == 0:
                    return None
                total += int(numerator) / int(denominator)
            else:
                total += float(part.replace(",", "."))

        return round(total, 4)
