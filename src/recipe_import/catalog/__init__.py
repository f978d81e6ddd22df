"""
Каталог ингредиентов POS: нормализация и индекс.
"""

from .normalizer import normalize_name, singular_candidates, tokenize
from .catalog_index import CatalogIndex, IndexedName

__all__ = [
    "CatalogIndex",
    "IndexedName",
    "normalize_name",
    "singular_candidates",
    "tokenize",
]
