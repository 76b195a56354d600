"""
End-to-end resolution: source URL or raw title in, catalog match out.
"""
import logging
from typing import Optional, Sequence

from . import normalizer
from .exceptions import TuneResolverError
from .models import AddTrackResult, ParsedQuery, RawMetadata, SearchMatch
from .orchestrator import MatchOrchestrator
from .providers import DestinationProvider, TokenGetter, TokenRefresher
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)


class TrackResolver:
    """Sequences extraction, normalization and matching for one request."""

    def __init__(
        self,
        registry: ProviderRegistry,
        orchestrator: Optional[MatchOrchestrator] = None,
    ):
        self.registry = registry
        self.orchestrator = orchestrator or MatchOrchestrator()

    def extract(self, url: str) -> Optional[RawMetadata]:
        """Fetch title/description from whichever source handles ``url``."""
        resolved = self.registry.resolve(url)
        if resolved is None:
            logger.info(f"No source handles {url}")
            return None

        name, source = resolved
        try:
            metadata = source.extract_track_data(url)
        except TuneResolverError as e:
            logger.warning(f"Extraction from {name} failed: {e}")
            return None

        if metadata is None:
            logger.info(f"{name} returned no metadata for {url}")
        return metadata

    def resolve_url(
        self,
        url: str,
        destinations: Sequence[str],
        token_getter: TokenGetter,
        use_smart_matching: bool = False,
        token_refresher: Optional[TokenRefresher] = None,
    ) -> Optional[SearchMatch]:
        metadata = self.extract(url)
        if metadata is None:
            return None
        return self.resolve_text(
            metadata.title,
            metadata.description,
            destinations,
            token_getter,
            use_smart_matching=use_smart_matching,
            token_refresher=token_refresher,
        )

    def resolve_text(
        self,
        title: str,
        description: Optional[str],
        destinations: Sequence[str],
        token_getter: TokenGetter,
        use_smart_matching: bool = False,
        token_refresher: Optional[TokenRefresher] = None,
    ) -> Optional[SearchMatch]:
        query = normalizer.normalize(title, description)
        return self.resolve_query(
            query,
            destinations,
            token_getter,
            use_smart_matching=use_smart_matching,
            token_refresher=token_refresher,
        )

    def resolve_query(
        self,
        query: ParsedQuery,
        destinations: Sequence[str],
        token_getter: TokenGetter,
        use_smart_matching: bool = False,
        token_refresher: Optional[TokenRefresher] = None,
    ) -> Optional[SearchMatch]:
        if not query.raw_title:
            logger.info("Empty title, skipping match attempt")
            return None

        providers = self.registry.destinations(destinations)
        return self.orchestrator.match(
            query,
            providers,
            token_getter,
            use_smart_matching=use_smart_matching,
            token_refresher=token_refresher,
        )

    def add_match(
        self,
        match: SearchMatch,
        destination_id: str,
        token_getter: TokenGetter,
        token_refresher: Optional[TokenRefresher] = None,
    ) -> AddTrackResult:
        """
        Add a matched track to a destination, refreshing the credential once
        if the provider reports it expired.
        """
        provider = self.registry.get(match.provider_name)
        if not isinstance(provider, DestinationProvider):
            return AddTrackResult(
                success=False, error=f"Unknown provider: {match.provider_name}"
            )

        credential = token_getter(provider.name)
        if not credential:
            return AddTrackResult(
                success=False, error="Not connected", needs_reauth=True
            )

        result = provider.add_track(match.uri, destination_id, credential)

        if result.needs_reauth and token_refresher:
            logger.info(f"{provider.name} credential expired while adding, refreshing")
            try:
                new_credential = token_refresher(provider.name)
            except Exception as e:
                logger.warning(f"Credential refresh for {provider.name} failed: {e}")
                new_credential = None
            if new_credential:
                result = provider.add_track(match.uri, destination_id, new_credential)

        if result.success:
            logger.info(f"Added {match.track_info} to {provider.name}:{destination_id}")
        else:
            logger.warning(f"Failed to add {match.track_info}: {result.error}")

        return result
