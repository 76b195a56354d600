"""
Fuzzy scoring used to validate loosely specified catalog search results.

All comparisons run on strings passed through ``normalize_for_comparison``.
"""
import logging
from typing import AbstractSet, Iterable, Optional

from ..utils.string_utils import normalize_for_comparison, word_set
from .models import Candidate, ScoredCandidate

logger = logging.getLogger(__name__)

ACCEPTANCE_FLOOR = 0.5
CONTAINMENT_FLOOR = 0.7
DESCRIPTION_BOOST = 0.1
DESCRIPTION_PREFIX_LENGTH = 2000
MIN_CONFIRMING_LENGTH = 3


def word_overlap(query_words: AbstractSet[str], candidate_words: AbstractSet[str]) -> float:
    """
    Fraction of query words present in the candidate.

    Normalized by the query side only, so extra candidate words cost nothing.
    Zero if either set is empty.
    """
    if not query_words or not candidate_words:
        return 0.0

    matches = sum(1 for word in query_words if word in candidate_words)
    return matches / len(query_words)


def contains_either_way(query: str, primary: str) -> bool:
    """Substring containment in either direction between normalized strings."""
    if not query or not primary:
        return False
    return primary in query or query in primary


def confirmed_by_text(attribute: str, auxiliary: str) -> bool:
    """True if a normalized attribute appears inside normalized auxiliary text."""
    if not auxiliary or len(attribute) <= MIN_CONFIRMING_LENGTH:
        return False
    return attribute in auxiliary


def _normalize_description(description: Optional[str]) -> str:
    if not description:
        return ""
    return normalize_for_comparison(description[:DESCRIPTION_PREFIX_LENGTH])


class FuzzyMatcher:
    """Scores catalog candidates against a free-text query."""

    def __init__(
        self,
        acceptance_floor: float = ACCEPTANCE_FLOOR,
        containment_floor: float = CONTAINMENT_FLOOR,
        description_boost: float = DESCRIPTION_BOOST,
    ):
        self.acceptance_floor = acceptance_floor
        self.containment_floor = containment_floor
        self.description_boost = description_boost

    def score(
        self, candidate: Candidate, query: str, description: Optional[str] = None
    ) -> ScoredCandidate:
        """Compute the adjusted similarity of one candidate."""
        return self._score(
            candidate,
            normalize_for_comparison(query),
            _normalize_description(description),
        )

    def _score(
        self, candidate: Candidate, normalized_query: str, normalized_description: str
    ) -> ScoredCandidate:
        track_name = normalize_for_comparison(candidate.name)
        artist_name = normalize_for_comparison(candidate.artist_names)

        similarity = word_overlap(
            word_set(normalized_query), word_set(f"{track_name} {artist_name}")
        )

        if contains_either_way(normalized_query, track_name):
            similarity = max(similarity, self.containment_floor)

        # Only the artist confirms; the song name shows up in every cover's
        # description too.
        description_boost = confirmed_by_text(artist_name, normalized_description)
        if description_boost:
            similarity += self.description_boost
            logger.debug(
                f"      Artist '{artist_name}' found in description "
                f"for '{track_name}'"
            )

        logger.debug(
            f"      Candidate: '{candidate.name}' by '{candidate.primary_artist}' "
            f"(similarity={similarity:.2f}, description_boost={description_boost})"
        )

        return ScoredCandidate(
            candidate=candidate,
            similarity=similarity,
            description_boost=description_boost,
        )

    def best_match(
        self,
        candidates: Iterable[Candidate],
        query: str,
        description: Optional[str] = None,
    ) -> Optional[ScoredCandidate]:
        """
        Pick the highest-scoring candidate at or above the acceptance floor.

        Ties keep the earliest candidate.

        Args:
            candidates: Search results in provider order
            query: Free-text query the results should match
            description: Optional auxiliary text used only for confirmation

        Returns:
            The winning scored candidate, or None if nothing clears the floor
        """
        normalized_query = normalize_for_comparison(query)
        normalized_description = _normalize_description(description)

        best: Optional[ScoredCandidate] = None
        for candidate in candidates:
            scored = self._score(candidate, normalized_query, normalized_description)
            if best is None or scored.similarity > best.similarity:
                best = scored

        if best is not None and best.similarity >= self.acceptance_floor:
            return best

        return None
