"""Memory module for chuself.

Stores past chat turns and retrieves them by relevance.
"""

from .analysis import classify_intent, extract_key_terms, extract_tags
from .models import MemoryEntry, MemorySearchParams, MemorySearchResult
from .query import NaturalLanguageQueryParser, QueryParser
from .scoring import relevance_score, text_similarity
from .store import MemoryStore

__all__ = [
    "MemoryEntry",
    "MemorySearchParams",
    "MemorySearchResult",
    "MemoryStore",
    "NaturalLanguageQueryParser",
    "QueryParser",
    "classify_intent",
    "extract_key_terms",
    "extract_tags",
    "relevance_score",
    "text_similarity",
]
