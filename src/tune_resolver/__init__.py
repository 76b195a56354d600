"""
Tune Resolver - identify the (artist, song) behind an ambiguous title and
find it on a music catalog.

This package provides functionality to:
- Parse noisy video titles such as "Artist - Song (Official Video) 2018"
- Search destination catalogs (Spotify, Tidal) with fuzzy validation
- Refresh expired credentials and fall back to AI enrichment

Example:
    Command line:

    $ tune-resolver match "Daft Punk - One More Time"

    Programmatic usage:

    >>> from tune_resolver import Config, CredentialStore, build_resolver
    >>> config = Config.from_env()
    >>> resolver = build_resolver(config)
    >>> credentials = CredentialStore(config)
    >>> match = resolver.resolve_text(
    ...     "Daft Punk - One More Time", None, ["spotify"], credentials.get
    ... )
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .cli import cli
from .core.config import Config
from .core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    EnrichmentError,
    ExtractionError,
    RateLimitError,
    SearchError,
    StorageError,
    TuneResolverError,
)
from .core.fuzzy import FuzzyMatcher, word_overlap
from .core.models import (
    AddTrackResult,
    ParsedQuery,
    RawMetadata,
    SearchMatch,
    SearchOutcome,
    TrackInfo,
)
from .core.normalizer import normalize, parse
from .core.orchestrator import MatchOrchestrator
from .core.registry import ProviderRegistry
from .core.resolver import TrackResolver
from .core.strategy import SearchStrategy
from .integrations import CredentialStore, build_resolver, default_registry

__all__ = [
    "__version__",
    "Config",
    "RawMetadata",
    "ParsedQuery",
    "TrackInfo",
    "SearchMatch",
    "SearchOutcome",
    "AddTrackResult",
    "TuneResolverError",
    "AuthenticationError",
    "SearchError",
    "EnrichmentError",
    "ExtractionError",
    "ConfigurationError",
    "StorageError",
    "RateLimitError",
    "parse",
    "normalize",
    "word_overlap",
    "FuzzyMatcher",
    "SearchStrategy",
    "MatchOrchestrator",
    "ProviderRegistry",
    "TrackResolver",
    "CredentialStore",
    "build_resolver",
    "default_registry",
    "cli",
]
