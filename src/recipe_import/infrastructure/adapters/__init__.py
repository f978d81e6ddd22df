from .anthropic_structurer import AnthropicRecipeStructurer, extract_json
from .google_vision_extractor import GoogleVisionTextExtractor

__all__ = [
    "AnthropicRecipeStructurer",
    "GoogleVisionTextExtractor",
    "extract_json",
]
