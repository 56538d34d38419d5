from .analyzer import QueryAnalyzer
from .entities import EntityExtractor, NUMBERS_KEY, PLACES_KEY
from .filters import FilterBuilder, normalize_phase
from .intent import IntentClassifier
from .lexical import STOPWORDS, extract_keywords, tokenize
from .patterns import DEFAULT_LIBRARY, PatternLibrary, build_default_library
from .routing import CollectionRouter

__all__ = [
    "QueryAnalyzer",
    "EntityExtractor",
    "NUMBERS_KEY",
    "PLACES_KEY",
    "FilterBuilder",
    "normalize_phase",
    "IntentClassifier",
    "STOPWORDS",
    "extract_keywords",
    "tokenize",
    "DEFAULT_LIBRARY",
    "PatternLibrary",
    "build_default_library",
    "CollectionRouter",
]
