from .stage import RecipeValidator, ValidationResult

__all__ = ["RecipeValidator", "ValidationResult"]
