"""Relevance scoring for memory search.

A simplified BM25-style term-frequency score rather than a vector
similarity: query tokens found in the source text contribute
``log(1 + frequency)``, normalized by the number of query tokens.
"""

import math
from collections import Counter
from collections.abc import Sequence

from ..config import (
    ASSISTANT_REPLY_WEIGHT,
    RECENCY_WEIGHT,
    RECENCY_WINDOW_DAYS,
    TAGS_WEIGHT,
    USER_INPUT_WEIGHT,
)
from .analysis import strip_punctuation
from .models import MemoryEntry

MS_PER_DAY = 24 * 60 * 60 * 1000


def tokenize(text: str) -> list[str]:
    """Lower-cased whitespace tokens longer than two characters."""
    tokens = (strip_punctuation(word) for word in text.lower().split())
    return [token for token in tokens if len(token) > 2]


def text_similarity(query: str, source: str) -> float:
    """Term-frequency similarity of a query against a source text.

    Returns:
        Sum of log(1 + frequency in source) over query tokens present in the
        source, divided by the query token count; 0.0 if either side is empty
    """
    query_tokens = tokenize(query)
    source_tokens = tokenize(source)
    if not query_tokens or not source_tokens:
        return 0.0

    frequencies = Counter(source_tokens)
    score = sum(math.log1p(frequencies[token]) for token in query_tokens if token in frequencies)
    return score / len(query_tokens)


def tag_score(key_terms: Sequence[str], tags: Sequence[str]) -> float:
    """Fraction of key terms contained in some tag, weighted by TAGS_WEIGHT."""
    if not key_terms or not tags:
        return 0.0
    matches = sum(1 for term in key_terms if any(term in tag for tag in tags))
    return (matches / len(key_terms)) * TAGS_WEIGHT


def recency_boost(timestamp: int, now_ms: int) -> float:
    """Small boost decaying linearly to zero over the recency window."""
    age_days = max(now_ms - timestamp, 0) / MS_PER_DAY
    return max(0.0, RECENCY_WEIGHT * (1 - min(age_days / RECENCY_WINDOW_DAYS, 1)))


def relevance_score(
    query: str,
    key_terms: Sequence[str],
    entry: MemoryEntry,
    now_ms: int,
) -> float:
    """Combined relevance of an entry for a query, clamped to 1.0."""
    score = (
        text_similarity(query, entry.user_input) * USER_INPUT_WEIGHT
        + text_similarity(query, entry.assistant_reply) * ASSISTANT_REPLY_WEIGHT
        + tag_score(key_terms, entry.tags)
        + recency_boost(entry.timestamp, now_ms)
    )
    return min(score, 1.0)
