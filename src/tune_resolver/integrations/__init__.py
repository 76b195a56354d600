"""
Integration packages for external services, and the default wiring.
"""
from ..core.config import Config
from ..core.orchestrator import MatchOrchestrator
from ..core.registry import ProviderRegistry
from ..core.resolver import TrackResolver
from .credentials import CredentialStore
from .enrichment import OpenAIEnricher
from .spotify import SpotifyAuth, SpotifyService
from .tidal import TidalAuth, TidalService
from .youtube import YouTubeService


def default_registry(config: Config) -> ProviderRegistry:
    """Register every known provider; sources are matched in this order."""
    registry = ProviderRegistry()
    registry.register("youtube", lambda: YouTubeService(config))
    registry.register("spotify", lambda: SpotifyService(config))
    registry.register("tidal", lambda: TidalService(config))
    return registry


def build_resolver(config: Config) -> TrackResolver:
    """Create a resolver wired from configuration."""
    orchestrator = MatchOrchestrator(
        enricher=OpenAIEnricher(config),
        acceptance_threshold=config.acceptance_threshold,
        enrichment_threshold=config.enrichment_threshold,
    )
    return TrackResolver(default_registry(config), orchestrator)


__all__ = [
    "CredentialStore",
    "OpenAIEnricher",
    "SpotifyAuth",
    "SpotifyService",
    "TidalAuth",
    "TidalService",
    "YouTubeService",
    "build_resolver",
    "default_registry",
]
