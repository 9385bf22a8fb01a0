"""Content tokenization and Jaccard similarity for semantic correlation."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable

from eemflow.correlation.config import SEMANTIC_MIN_TOKEN_LENGTH, STOP_WORDS


def _strip_punctuation(text: str) -> str:
    # Underscores survive so identifiers like snake_case stay one token.
    return "".join(c for c in text if c == "_" or not unicodedata.category(c).startswith("P"))


def tokenize(
    text: str | None,
    min_length: int = SEMANTIC_MIN_TOKEN_LENGTH,
    stop_words: Iterable[str] = STOP_WORDS,
) -> set[str]:
    """Turn content into a set of significant lowercase terms.

    Args:
        text: Event content; None or blank yields an empty set.
        min_length: Tokens shorter than this are dropped.
        stop_words: Terms ignored regardless of length.

    Returns:
        Set of unique tokens.
    """
    if not text or not text.strip():
        return set()
    stops = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    normalized = _strip_punctuation(text.lower())
    return {token for token in normalized.split() if len(token) >= min_length and token not in stops}


def jaccard(a: set[str], b: set[str]) -> float:
    """|a ∩ b| / |a ∪ b|, defined as 0.0 when either set is empty."""
    if not a or not b:
        return 0.0
    union = a | b
    return len(a & b) / len(union)


def semantic_similarity(
    text_a: str | None,
    text_b: str | None,
    min_length: int = SEMANTIC_MIN_TOKEN_LENGTH,
    stop_words: Iterable[str] = STOP_WORDS,
) -> float:
    """Jaccard similarity of the token sets of two texts. Symmetric."""
    return jaccard(tokenize(text_a, min_length, stop_words), tokenize(text_b, min_length, stop_words))
