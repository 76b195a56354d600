"""
String manipulation utilities.
"""
import re
import unicodedata
from typing import Set


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to a single space and trim."""
    return re.sub(r"\s+", " ", text).strip()


def normalize_for_comparison(text: str) -> str:
    """
    Normalize a string for fuzzy comparison.

    Lower-cases, folds accents, drops everything that is not an ASCII
    letter, digit or whitespace, and collapses whitespace.

    Args:
        text: Input string to normalize

    Returns:
        Normalized string
    """
    if not text:
        return ""

    text = text.lower()

    # Remove unicode accents and normalize
    text = unicodedata.normalize("NFD", text)
    text = "".join(c for c in text if unicodedata.category(c) != "Mn")

    text = re.sub(r"[^a-z0-9\s]", "", text)

    return normalize_whitespace(text)


def word_set(text: str) -> Set[str]:
    """Split an already-normalized string into its set of words."""
    return {word for word in text.split() if word}
