"""Text normalization shared by every catalog source."""

from __future__ import annotations

import re
import unicodedata

# Straight and curly apostrophes plus the modifier letter used by some feeds
APOSTROPHES = "'’‘ʼ"

_APOSTROPHE_RE = re.compile(f"[{APOSTROPHES}]")
_DISALLOWED_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")

MIN_SIGNIFICANT_WORD_LENGTH = 3


def normalize(text: str | None) -> str:
    """Canonicalize free-form text for comparison.

    Lowercases, strips diacritics ("é" -> "e"), turns apostrophes into spaces,
    removes punctuation and collapses whitespace. Idempotent.

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        Normalized text, or "" for empty input
    """
    if not text:
        return ""
    normalized = unicodedata.normalize("NFD", text).lower()
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    normalized = _APOSTROPHE_RE.sub(" ", normalized)
    normalized = _DISALLOWED_RE.sub("", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized.strip()


def significant_words(
    normalized: str, min_length: int = MIN_SIGNIFICANT_WORD_LENGTH
) -> set[str]:
    """Return the distinct words of a normalized string that are long enough to count."""
    return {word for word in normalized.split(" ") if len(word) >= min_length}


def word_overlap(
    first: str, second: str, min_length: int = MIN_SIGNIFICANT_WORD_LENGTH
) -> float:
    """Percentage of shared significant words, relative to the smaller word set.

    Both arguments are expected to be normalized already.

    Returns:
        Overlap percentage between 0.0 and 100.0
    """
    if not first or not second:
        return 0.0
    first_words = significant_words(first, min_length)
    second_words = significant_words(second, min_length)
    if not first_words or not second_words:
        return 0.0
    common = first_words & second_words
    return len(common) / min(len(first_words), len(second_words)) * 100
