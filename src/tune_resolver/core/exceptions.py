"""
Custom exceptions for the tune_resolver package.
"""


class TuneResolverError(Exception):
    """Base exception for all tune_resolver errors."""
    pass


class AuthenticationError(TuneResolverError):
    """Raised when a provider rejects the supplied credential."""
    pass


class SearchError(TuneResolverError):
    """Raised when a catalog search fails for a reason other than auth."""
    pass


class EnrichmentError(TuneResolverError):
    """Raised when the enrichment service call fails."""
    pass


class ConfigurationError(TuneResolverError):
    """Raised when configuration is invalid."""
    pass


class StorageError(TuneResolverError):
    """Raised when token storage operations fail."""
    pass


class RateLimitError(SearchError):
    """Raised when API rate limits are exceeded."""
    pass


class ExtractionError(TuneResolverError):
    """Raised when source metadata cannot be fetched."""
    pass
