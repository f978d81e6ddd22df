from .stage import StatusResolver

__all__ = ["StatusResolver"]
