"""
Адаптер Anthropic Claude, реализующий IRecipeStructurer.

Отправляет текст рецепта и список позиций каталога в Messages API,
получает JSON и собирает DraftRecipe.

JSON ищется по порядку: весь ответ → блок ```json``` → первый {...}.
"""

import json
import re
from typing import Any, Optional, Sequence

from anthropic import Anthropic
from loguru import logger

from config.settings import ANTHROPIC_API_KEY, ANTHROPIC_MAX_TOKENS, ANTHROPIC_MODEL
from contracts.d2_structuring_dto import DraftRecipe, RawIngredientLine
from contracts.pos_dto import CatalogEntry
from ...domain.exceptions import StructuringFailed
from ...domain.interfaces import IRecipeStructurer


CONFIDENCE_LEVELS = ("high", "medium", "low")

_FENCE_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

PROMPT_TEMPLATE = """You are a recipe parser for a POS inventory system. Extract the recipe from the text below and return it as JSON.

Recipe text:
{text}

Available POS ingredients (use these exact names when an ingredient is one of them):
{catalog}

Return ONLY valid JSON with this exact structure:
{{
  "recipeName": "Name of the recipe",
  "ingredients": [
    {{
      "text": "the original ingredient line",
      "name": "ingredient name",
      "quantity": 2.5,
      "unit": "cup"
    }}
  ],
  "overallConfidence": "high|medium|low"
}}

Rules:
1. Keep ingredients in the order they appear in the text
2. Standardize units to: oz, cup, tsp, tbsp, each, lb, g, kg, mg, ml, cl, dl, l, gallon, quart, pint
3. Use null for a quantity or unit that is not stated
4. Set overallConfidence to "high" when the text is clear, "low" when it is mostly unreadable

Return ONLY the JSON, no other text."""


def extract_json(text: str) -> dict:
    """
    Достаёт JSON-объект из ответа модели.

    Raises:
        StructuringFailed: JSON не найден
    """
    candidates = [text.strip()]
    fence = _FENCE_RE.search(text)
    if fence:
        candidates.append(fence.group(1))
    obj = _OBJECT_RE.search(text)
    if obj:
        candidates.append(obj.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise StructuringFailed(
        message="Could not extract valid JSON from structurer response",
        component="AnthropicRecipeStructurer",
    )


def _to_quantity(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        return None


class AnthropicRecipeStructurer(IRecipeStructurer):
    """
    Структурировщик рецептов на Claude (Anthropic Messages API).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = ANTHROPIC_MODEL,
        max_tokens: int = ANTHROPIC_MAX_TOKENS,
        client: Optional[Any] = None,
    ):
        """
        Args:
            api_key: Ключ API (по умолчанию из settings)
            model: Модель Claude
            max_tokens: Лимит токенов ответа
            client: Готовый клиент Anthropic (для тестов)
        """
        self.model = model
        self.max_tokens = max_tokens

        if client is not None:
            self.client = client
        else:
            key = api_key or ANTHROPIC_API_KEY
            if not key:
                raise ValueError("ANTHROPIC_API_KEY не указан! Задайте переменную окружения.")
            self.client = Anthropic(api_key=key)

        logger.info(f"[AnthropicRecipeStructurer] Инициализирован (model={self.model})")

    def structure(self, raw_text: str, catalog_hint: Sequence[CatalogEntry]) -> DraftRecipe:
        """
        Структурирует текст рецепта.

        Args:
            raw_text: Текст рецепта
            catalog_hint: Позиции каталога для подсказки

        Returns:
            DraftRecipe

        Raises:
            StructuringFailed: Ошибка API или нераспознаваемый ответ
        """
        prompt = self.build_prompt(raw_text, catalog_hint)

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise StructuringFailed(
                message="Claude API request failed",
                component="AnthropicRecipeStructurer",
                original_error=e,
            )

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        data = extract_json(text)
        draft = self._to_draft(data)

        logger.debug(
            f"[AnthropicRecipeStructurer] '{draft.name}': {len(draft.ingredients)} ингредиентов, "
            f"seed={draft.confidence_seed}"
        )
        return draft

    def build_prompt(self, raw_text: str, catalog_hint: Sequence[CatalogEntry]) -> str:
        catalog = ", ".join(f"{e.canonical_name} ({e.unit})" for e in catalog_hint) or "(empty)"
        return PROMPT_TEMPLATE.format(text=raw_text, catalog=catalog)

    def _to_draft(self, data: dict) -> DraftRecipe:
        raw_ingredients = data.get("ingredients")
        if not isinstance(raw_ingredients, list):
            raise StructuringFailed(
                message="Structurer response has no ingredients list",
                component="AnthropicRecipeStructurer",
            )

        lines = []
        for item in raw_ingredients:
            if isinstance(item, str):
                lines.append(RawIngredientLine(text=item))
                continue
            if not isinstance(item, dict):
                continue
            quantity = _to_quantity(item.get("quantity"))
            unit = str(item["unit"]).strip() if item.get("unit") else None
            name = str(item.get("name") or "").strip()
            text = str(item.get("text") or "").strip() or " ".join(
                part for part in (
                    f"{quantity:g}" if quantity is not None else "",
                    unit or "",
                    name,
                ) if part
            )
            lines.append(RawIngredientLine(text=text, quantity=quantity, unit=unit, name=name))

        seed = data.get("overallConfidence")
        return DraftRecipe(
            name=str(data.get("recipeName") or "").strip(),
            ingredients=lines,
            confidence_seed=seed if seed in CONFIDENCE_LEVELS else "low",
            raw_response=data,
        )
