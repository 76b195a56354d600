"""
Match orchestration across destination providers.
"""
import logging
from typing import Dict, Optional, Sequence, Set

from .models import EnrichmentResult, ParsedQuery, SearchMatch, SearchOutcome
from .providers import DestinationProvider, Enricher, TokenGetter, TokenRefresher

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.5
ENRICHMENT_THRESHOLD = 0.6


class CredentialCache:
    """
    Credentials for a single resolution.

    Refreshed tokens take precedence over the caller's getter. Each provider
    gets at most one refresh attempt; a provider whose credential cannot be
    repaired is skipped for the rest of the resolution.
    """

    def __init__(
        self, token_getter: TokenGetter, token_refresher: Optional[TokenRefresher] = None
    ):
        self._token_getter = token_getter
        self._token_refresher = token_refresher
        self._refreshed: Dict[str, str] = {}
        self._refresh_attempted: Set[str] = set()
        self._skipped: Set[str] = set()

    def get(self, provider_name: str) -> Optional[str]:
        return self._refreshed.get(provider_name) or self._token_getter(provider_name)

    def can_refresh(self, provider_name: str) -> bool:
        return (
            self._token_refresher is not None
            and provider_name not in self._refresh_attempted
        )

    def refresh(self, provider_name: str) -> Optional[str]:
        """Ask for a new credential, at most once per provider."""
        if not self.can_refresh(provider_name):
            return None
        self._refresh_attempted.add(provider_name)

        try:
            credential = self._token_refresher(provider_name)  # type: ignore[misc]
        except Exception as e:
            logger.warning(f"Credential refresh for {provider_name} failed: {e}")
            return None

        if credential:
            self._refreshed[provider_name] = credential
        return credential

    def skip(self, provider_name: str) -> None:
        self._skipped.add(provider_name)

    def is_skipped(self, provider_name: str) -> bool:
        return provider_name in self._skipped


class MatchOrchestrator:
    """Finds the first confident match across providers, with AI fallback."""

    def __init__(
        self,
        enricher: Optional[Enricher] = None,
        acceptance_threshold: float = CONFIDENCE_THRESHOLD,
        enrichment_threshold: float = ENRICHMENT_THRESHOLD,
    ):
        self.enricher = enricher
        self.acceptance_threshold = acceptance_threshold
        self.enrichment_threshold = enrichment_threshold

    def accepts(self, match: Optional[SearchMatch]) -> bool:
        return match is not None and match.confidence >= self.acceptance_threshold

    def accepts_enrichment(self, confidence: float) -> bool:
        return confidence >= self.enrichment_threshold

    def match(
        self,
        query: ParsedQuery,
        providers: Sequence[DestinationProvider],
        token_getter: TokenGetter,
        use_smart_matching: bool = False,
        token_refresher: Optional[TokenRefresher] = None,
    ) -> Optional[SearchMatch]:
        """
        Try to find a match for the query across providers.

        Flow:
        1. Search each provider in order, refreshing an expired credential once
        2. Return the first match at or above the acceptance threshold
        3. Otherwise, if smart matching is on, enrich the query with AI and
           search the providers once more

        Args:
            query: Normalized query
            providers: Destination providers, in priority order
            token_getter: Returns the stored credential for a provider name
            use_smart_matching: Whether the enrichment fallback may run
            token_refresher: Returns a fresh credential for a provider name

        Returns:
            The first confident match, or None
        """
        logger.info(
            f"Matching '{query.raw_title}' (artist={query.artist!r}, "
            f"song={query.song!r}) across {len(providers)} provider(s)"
        )

        credentials = CredentialCache(token_getter, token_refresher)

        match = self._search_providers(query, providers, credentials)
        if match:
            return match

        if use_smart_matching and self.enricher and self.enricher.is_available():
            enrichment = self._enrich(query)
            if enrichment:
                enriched_query = query.with_track_info(enrichment.track_info)
                match = self._search_providers(enriched_query, providers, credentials)
                if match:
                    logger.info(f"Found match after enrichment: {match}")
                    return match

        logger.info(f"No match found for '{query.raw_title}'")
        return None

    def _search_providers(
        self,
        query: ParsedQuery,
        providers: Sequence[DestinationProvider],
        credentials: CredentialCache,
    ) -> Optional[SearchMatch]:
        for provider in providers:
            if credentials.is_skipped(provider.name):
                logger.debug(f"Skipping {provider.name}: credential unusable")
                continue

            credential = credentials.get(provider.name)
            if not credential:
                logger.info(f"Skipping {provider.name}: no credential")
                continue

            outcome = self._search_provider(provider, query, credential, credentials)
            if outcome is None:
                continue

            if self.accepts(outcome.match):
                logger.info(f"Confident match from {provider.name}: {outcome.match}")
                return outcome.match

            if outcome.match:
                logger.info(
                    f"Low-confidence match from {provider.name} ignored: "
                    f"{outcome.match}"
                )

        return None

    def _search_provider(
        self,
        provider: DestinationProvider,
        query: ParsedQuery,
        credential: str,
        credentials: CredentialCache,
    ) -> Optional[SearchOutcome]:
        try:
            outcome = provider.search_track(query, credential)

            if outcome.needs_reauth:
                if not credentials.can_refresh(provider.name):
                    logger.info(f"{provider.name} credential expired, cannot refresh")
                    credentials.skip(provider.name)
                    return outcome

                logger.info(f"{provider.name} credential expired, attempting refresh")
                new_credential = credentials.refresh(provider.name)
                if not new_credential:
                    logger.warning(f"{provider.name} credential refresh failed")
                    credentials.skip(provider.name)
                    return outcome

                outcome = provider.search_track(query, new_credential)
                if outcome.needs_reauth:
                    logger.warning(
                        f"{provider.name} rejected the refreshed credential"
                    )
                    credentials.skip(provider.name)

            return outcome

        except Exception as e:
            logger.warning(f"Search on {provider.name} failed: {e}")
            return None

    def _enrich(self, query: ParsedQuery) -> Optional[EnrichmentResult]:
        logger.info(f"Attempting enrichment for '{query.raw_title}'")
        try:
            result = self.enricher.enrich(  # type: ignore[union-attr]
                query.raw_title, query.raw_description
            )
        except Exception as e:
            logger.warning(f"Enrichment failed: {e}")
            return None

        if result is None:
            logger.info("Enrichment returned nothing")
            return None

        if not self.accepts_enrichment(result.confidence):
            logger.info(
                f"Enrichment confidence too low, skipping: {result.track_info} "
                f"({result.confidence:.2f} < {self.enrichment_threshold})"
            )
            return None

        logger.info(
            f"Enriched query: {result.track_info} ({result.confidence:.2f})"
        )
        return result
