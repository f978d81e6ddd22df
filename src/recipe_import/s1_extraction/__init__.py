from .stage import ExtractionStage, describe_image

__all__ = ["ExtractionStage", "describe_image"]
