"""
Unit-тесты для адаптеров Google Vision и Anthropic.

Клиенты SDK подменяются MagicMock, сетевых вызовов нет.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.recipe_import.domain.exceptions import ExtractionFailed, StructuringFailed
from src.recipe_import.infrastructure.adapters import (
    AnthropicRecipeStructurer,
    GoogleVisionTextExtractor,
    extract_json,
)


def vision_response(text: str = "", confidences=(), error: str = ""):
    """Ответ Vision API в виде вложенных объектов."""
    words = [SimpleNamespace(confidence=c) for c in confidences]
    annotation = SimpleNamespace(
        text=text,
        pages=[SimpleNamespace(blocks=[SimpleNamespace(paragraphs=[SimpleNamespace(words=words)])])],
    ) if text or words else None
    return SimpleNamespace(error=SimpleNamespace(message=error), full_text_annotation=annotation)


def claude_response(text: str):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


class TestGoogleVisionTextExtractor:
    """Тесты адаптера OCR."""

    def test_extracts_text_and_quality(self):
        """Должен извлекать текст и оценку качества из ответа Vision."""
        client = MagicMock()
        client.document_text_detection.return_value = vision_response(
            "Pancakes\n2 cups flour", confidences=[0.9, 0.8, 1.2]
        )
        extractor = GoogleVisionTextExtractor(client=client, language_hints=["en"])

        result = extractor.extract(b"\x89PNG")

        assert result.text == "Pancakes\n2 cups flour"
        assert result.quality_score == pytest.approx(0.9)
        assert result.metadata.word_count == 3
        assert result.metadata.provider == "google_vision"
        assert result.metadata.source == "bytes"
        kwargs = client.document_text_detection.call_args.kwargs
        assert kwargs["image_context"] == {"language_hints": ["en"]}

    def test_reads_file(self, tmp_path):
        """Должен читать байты изображения из файла."""
        image = tmp_path / "recipe.jpg"
        image.write_bytes(b"\xff\xd8")
        client = MagicMock()
        client.document_text_detection.return_value = vision_response("Soup", confidences=[0.5])

        result = GoogleVisionTextExtractor(client=client, language_hints=[]).extract(image)

        assert result.metadata.source == "recipe.jpg"
        assert "image_context" not in client.document_text_detection.call_args.kwargs

    def test_no_annotation_is_empty_text(self):
        """Должен возвращать пустой текст без аннотации."""
        client = MagicMock()
        client.document_text_detection.return_value = vision_response()

        result = GoogleVisionTextExtractor(client=client).extract(b"img")

        assert result.text == ""
        assert result.quality_score == 0.0
        assert result.has_content() is False

    def test_api_error(self):
        """Должен оборачивать ошибку API Vision."""
        client = MagicMock()
        client.document_text_detection.return_value = vision_response(error="quota exceeded")

        with pytest.raises(ExtractionFailed, match="quota exceeded"):
            GoogleVisionTextExtractor(client=client).extract(b"img")

    def test_missing_file(self, tmp_path):
        """Должен падать на отсутствующем файле."""
        extractor = GoogleVisionTextExtractor(client=MagicMock())

        with pytest.raises(ExtractionFailed):
            extractor.extract(tmp_path / "missing.jpg")

    def test_missing_credentials_file(self, tmp_path):
        """Должен падать без файла credentials."""
        with pytest.raises(FileNotFoundError):
            GoogleVisionTextExtractor(credentials_path=str(tmp_path / "creds.json"))


class TestExtractJson:
    """Тесты извлечения JSON из ответа модели."""

    def test_plain(self):
        """Должен разбирать чистый JSON."""
        assert extract_json('{"recipeName": "Soup"}') == {"recipeName": "Soup"}

    def test_fenced(self):
        """Должен разбирать JSON в блоке кода."""
        text = 'Here it is:\n```json\n{"recipeName": "Soup"}\n```\nEnjoy'

        assert extract_json(text) == {"recipeName": "Soup"}

    def test_embedded_object(self):
        """Должен находить JSON-объект внутри текста."""
        assert extract_json('Result: {"a": 1} done') == {"a": 1}

    @pytest.mark.parametrize("text", ["no json here", "[1, 2]", ""])
    def test_invalid(self, text):
        """Должен падать на невалидном JSON."""
        with pytest.raises(StructuringFailed):
            extract_json(text)


class TestAnthropicRecipeStructurer:
    """Тесты адаптера структурирования."""

    def make(self, payload) -> tuple:
        client = MagicMock()
        text = payload if isinstance(payload, str) else json.dumps(payload)
        client.messages.create.return_value = claude_response(text)
        return AnthropicRecipeStructurer(client=client, model="test-model", max_tokens=100), client

    def test_structure(self, catalog_entries):
        """Должен собирать DraftRecipe из ответа модели."""
        structurer, client = self.make({
            "recipeName": "Pancakes",
            "ingredients": [
                {"text": "2 cups AP flour", "name": "All-Purpose Flour", "quantity": 2, "unit": "cup"},
                {"name": "Egg", "quantity": "3", "unit": None},
                "a pinch of salt",
            ],
            "overallConfidence": "medium",
        })

        draft = structurer.structure("Pancakes ...", catalog_entries)

        assert draft.name == "Pancakes"
        assert draft.confidence_seed == "medium"
        assert len(draft.ingredients) == 3
        assert draft.ingredients[0].quantity == 2.0
        assert draft.ingredients[0].unit == "cup"
        assert draft.ingredients[1].text == "3 Egg"
        assert draft.ingredients[1].unit is None
        assert draft.ingredients[2].text == "a pinch of salt"
        assert draft.raw_response["recipeName"] == "Pancakes"

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 100
        assert "All-Purpose Flour (lb)" in kwargs["messages"][0]["content"]

    def test_unknown_confidence_defaults_to_low(self):
        """Должен ставить low для неизвестного уровня доверия."""
        structurer, _ = self.make({"recipeName": "X", "ingredients": [], "overallConfidence": "great"})

        assert structurer.structure("X", []).confidence_seed == "low"

    def test_missing_ingredients(self):
        """Должен падать, если в ответе нет списка ингредиентов."""
        structurer, _ = self.make({"recipeName": "X"})

        with pytest.raises(StructuringFailed):
            structurer.structure("X", [])

    def test_unparseable_response(self):
        """Должен падать на неразбираемом ответе."""
        structurer, _ = self.make("Sorry, I cannot read this recipe.")

        with pytest.raises(StructuringFailed):
            structurer.structure("X", [])

    def test_api_error_wrapped(self):
        """Должен оборачивать ошибку API в StructuringFailed."""
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("overloaded")
        structurer = AnthropicRecipeStructurer(client=client)

        with pytest.raises(StructuringFailed) as exc_info:
            structurer.structure("X", [])

        assert isinstance(exc_info.value.original_error, RuntimeError)

    def test_empty_catalog_prompt(self):
        """Должен строить промпт и без каталога."""
        structurer, _ = self.make({"ingredients": []})

        assert "(empty)" in structurer.build_prompt("X", [])

    def test_requires_key(self, monkeypatch):
        """Должен требовать API-ключ."""
        monkeypatch.setattr(
            "src.recipe_import.infrastructure.adapters.anthropic_structurer.ANTHROPIC_API_KEY", ""
        )

        with pytest.raises(ValueError):
            AnthropicRecipeStructurer()
