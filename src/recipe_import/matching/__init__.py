from .ingredient_matcher import IngredientMatcher, MatchResult, token_set_overlap

__all__ = ["IngredientMatcher", "MatchResult", "token_set_overlap"]
