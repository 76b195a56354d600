"""
Utilities package.
"""
from .string_utils import normalize_for_comparison, normalize_whitespace, word_set

__all__ = ["normalize_for_comparison", "normalize_whitespace", "word_set"]
