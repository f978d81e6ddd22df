from .stage import ConfidenceScorer

__all__ = ["ConfidenceScorer"]
