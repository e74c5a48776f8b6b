"""Vocabulary-overlap similarity between documents."""

from __future__ import annotations

from typing import FrozenSet

MIN_TOKEN_LENGTH = 4

Vocabulary = FrozenSet[str]


def vocabulary(text: str | None) -> Vocabulary:
    """Unique lower-cased whitespace tokens of at least four characters."""
    return frozenset(
        token for token in (text or "").lower().split() if len(token) >= MIN_TOKEN_LENGTH
    )


def vocabulary_similarity(first: Vocabulary, second: Vocabulary) -> float:
    """Shared tokens over the size of the larger vocabulary (not Jaccard)."""
    if not first or not second:
        return 0.0
    return len(first & second) / max(len(first), len(second))


def text_similarity(first: str | None, second: str | None) -> float:
    return vocabulary_similarity(vocabulary(first), vocabulary(second))


__all__ = [
    "MIN_TOKEN_LENGTH",
    "Vocabulary",
    "vocabulary",
    "vocabulary_similarity",
    "text_similarity",
]
