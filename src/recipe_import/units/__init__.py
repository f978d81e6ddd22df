from .unit_vocabulary import DEFAULT_VOCABULARY_FILE, UnitVocabulary

__all__ = ["DEFAULT_VOCABULARY_FILE", "UnitVocabulary"]
