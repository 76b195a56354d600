"""
Capability sets implemented by each external service integration.
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from .models import (
    AddTrackResult,
    Candidate,
    EnrichmentResult,
    ParsedQuery,
    RawMetadata,
    SearchOutcome,
)

TokenGetter = Callable[[str], Optional[str]]
TokenRefresher = Callable[[str], Optional[str]]


class SourceExtractor(ABC):
    """A service that can turn one of its URLs into title/description."""

    name: str

    @abstractmethod
    def match_url(self, url: str) -> bool:
        """Can this service handle this URL?"""

    @abstractmethod
    def extract_track_data(self, url: str) -> Optional[RawMetadata]:
        """Fetch the title (and description, if any) behind a URL."""


class DestinationProvider(ABC):
    """A catalog that tracks can be searched on and added to."""

    name: str

    @abstractmethod
    def search_track(self, query: ParsedQuery, credential: str) -> SearchOutcome:
        """Search for a track, returning the best match with a confidence."""

    @abstractmethod
    def add_track(
        self, uri: str, destination_id: str, credential: str
    ) -> AddTrackResult:
        """Add a track (by provider URI) to a playlist or collection."""


class CatalogBackend(ABC):
    """
    Raw search calls against one catalog.

    Implementations raise AuthenticationError when the credential is
    rejected and SearchError for any other provider-side failure.
    """

    name: str

    @abstractmethod
    def search_structured(
        self, artist: str, song: str, credential: str
    ) -> List[Candidate]:
        """Field-scoped search, results in the provider's own ranking."""

    @abstractmethod
    def search_text(self, text: str, credential: str) -> List[Candidate]:
        """Free-text search."""


class Enricher(ABC):
    """An optional service that re-derives artist/song from ambiguous text."""

    @abstractmethod
    def is_available(self) -> bool:
        """False when the service is not configured."""

    @abstractmethod
    def enrich(
        self, title: str, description: Optional[str] = None
    ) -> Optional[EnrichmentResult]:
        """Return a guessed identification with a confidence, or None."""
