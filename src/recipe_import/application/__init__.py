from .factory import RecipeImportComponentFactory

__all__ = ["RecipeImportComponentFactory"]
