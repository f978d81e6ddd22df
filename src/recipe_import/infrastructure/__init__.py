"""
Infrastructure слой Recipe Import: репозитории и адаптеры внешних сервисов.

Адаптеры (Google Vision, Anthropic) импортируются из .adapters явно,
чтобы репозитории не тянули SDK облачных сервисов.
"""

from .in_memory_repository import InMemoryRepository
from .json_file_repository import JsonFileRepository

__all__ = [
    "InMemoryRepository",
    "JsonFileRepository",
]
