"""
Per-provider search sequencing: precise structured search first, then
title-only searches validated by fuzzy matching.
"""
import logging
from typing import List, Optional

from .exceptions import AuthenticationError, SearchError
from .fuzzy import FuzzyMatcher
from .models import Candidate, ParsedQuery, SearchMatch, SearchOutcome, TrackInfo
from .providers import CatalogBackend

logger = logging.getLogger(__name__)

STRUCTURED_CONFIDENCE = 0.9
UNKNOWN_ARTIST = "Unknown Artist"


class SearchStrategy:
    """Runs the search strategies for one catalog and folds them into one match."""

    def __init__(
        self,
        backend: CatalogBackend,
        matcher: Optional[FuzzyMatcher] = None,
        structured_confidence: float = STRUCTURED_CONFIDENCE,
    ):
        self.backend = backend
        self.matcher = matcher or FuzzyMatcher()
        self.structured_confidence = structured_confidence

    @property
    def provider_name(self) -> str:
        return self.backend.name

    def search(self, query: ParsedQuery, credential: str) -> SearchOutcome:
        """
        Find the best match for a query on this catalog.

        Strategies run in decreasing order of precision and stop at the
        first accepted match. An authorization failure ends the search at
        once with ``needs_reauth`` set; any other provider failure just
        moves on to the next strategy.

        Args:
            query: Normalized query
            credential: Access token for the catalog

        Returns:
            SearchOutcome with the match, or no match
        """
        if query.artist and query.song:
            logger.debug(
                f"  [{self.provider_name}] structured search: "
                f"'{query.song}' by '{query.artist}'"
            )
            try:
                candidates = self.backend.search_structured(
                    query.artist, query.song, credential
                )
            except AuthenticationError as e:
                logger.info(f"  [{self.provider_name}] credential rejected: {e}")
                return SearchOutcome(needs_reauth=True)
            except SearchError as e:
                logger.warning(
                    f"  [{self.provider_name}] structured search failed: {e}"
                )
                candidates = []

            if candidates:
                top = candidates[0]
                logger.info(
                    f"  [{self.provider_name}] structured match: '{top}' ({top.uri})"
                )
                return SearchOutcome(
                    match=SearchMatch(
                        track_info=TrackInfo(artist=query.artist, song=query.song),
                        confidence=self.structured_confidence,
                        uri=top.uri,
                        provider_name=self.provider_name,
                    )
                )

        for text in self.title_queries(query):
            logger.debug(f"  [{self.provider_name}] title search: '{text}'")
            try:
                candidates = self.backend.search_text(text, credential)
            except AuthenticationError as e:
                # Another strategy cannot fix an invalid credential
                logger.info(f"  [{self.provider_name}] credential rejected: {e}")
                return SearchOutcome(needs_reauth=True)
            except SearchError as e:
                logger.warning(
                    f"  [{self.provider_name}] search failed for '{text}': {e}"
                )
                continue

            if not candidates:
                logger.debug("    No tracks found")
                continue

            scored = self.matcher.best_match(
                candidates, query.raw_title, query.raw_description
            )
            if scored is None:
                logger.debug(
                    f"    {len(candidates)} results, none close enough to "
                    f"'{query.raw_title}'"
                )
                continue

            match = self._title_match(scored.candidate, scored.similarity)
            logger.info(
                f"  [{self.provider_name}] title match: '{scored.candidate}' "
                f"(confidence={match.confidence:.2f})"
            )
            return SearchOutcome(match=match)

        logger.debug(f"  [{self.provider_name}] no validated result")
        return SearchOutcome()

    def title_queries(self, query: ParsedQuery) -> List[str]:
        """Free-text queries in decreasing order of specificity, deduplicated."""
        queries = []
        if query.artist and query.song:
            queries.append(f"{query.artist} {query.song}")
        if query.song:
            queries.append(query.song)
        if query.raw_title:
            queries.append(query.raw_title)

        unique: List[str] = []
        for text in queries:
            if text not in unique:
                unique.append(text)
        return unique

    def _title_match(self, candidate: Candidate, similarity: float) -> SearchMatch:
        return SearchMatch(
            track_info=TrackInfo(
                artist=candidate.primary_artist or UNKNOWN_ARTIST,
                song=candidate.name,
            ),
            confidence=min(max(similarity, 0.0), 1.0),
            uri=candidate.uri,
            provider_name=self.provider_name,
        )
