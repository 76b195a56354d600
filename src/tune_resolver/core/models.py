"""
Data models for the tune_resolver package.

All models are immutable value objects; a resolution passes copies between
stages and never mutates them in place.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class RawMetadata:
    """Title and optional description extracted from a source URL."""

    title: str
    description: Optional[str] = None

    def __str__(self) -> str:
        return self.title


@dataclass(frozen=True)
class TrackInfo:
    """A resolved (artist, song) identification."""

    artist: str
    song: str

    def __str__(self) -> str:
        return f"{self.artist} - {self.song}"


@dataclass(frozen=True)
class ParsedQuery:
    """Normalizer output; artist and song are set only when confidently parsed."""

    raw_title: str
    raw_description: Optional[str] = None
    artist: Optional[str] = None
    song: Optional[str] = None

    @property
    def is_structured(self) -> bool:
        """True when both artist and song are known."""
        return bool(self.artist and self.song)

    @property
    def track_info(self) -> Optional[TrackInfo]:
        if not self.is_structured:
            return None
        return TrackInfo(artist=self.artist, song=self.song)  # type: ignore[arg-type]

    def with_track_info(self, track_info: TrackInfo) -> "ParsedQuery":
        """Return a copy with artist/song overwritten by ``track_info``."""
        return replace(self, artist=track_info.artist, song=track_info.song)


@dataclass(frozen=True)
class SearchMatch:
    """A candidate identification found on a destination catalog."""

    track_info: TrackInfo
    confidence: float
    uri: str
    provider_name: str

    def __str__(self) -> str:
        return (
            f"{self.track_info} on {self.provider_name} "
            f"({self.confidence:.2f}, {self.uri})"
        )


@dataclass(frozen=True)
class SearchOutcome:
    """Result of one provider search; ``needs_reauth`` flags a bad credential."""

    match: Optional[SearchMatch] = None
    needs_reauth: bool = False


@dataclass(frozen=True)
class AddTrackResult:
    """Result of adding a track to a destination playlist."""

    success: bool
    error: Optional[str] = None
    needs_reauth: bool = False


@dataclass(frozen=True)
class Candidate:
    """A single track returned by a catalog search."""

    name: str
    artists: Tuple[str, ...] = field(default_factory=tuple)
    uri: str = ""

    @property
    def primary_artist(self) -> Optional[str]:
        """Get the primary artist (first in list)."""
        return self.artists[0] if self.artists else None

    @property
    def artist_names(self) -> str:
        """All artist names joined with spaces."""
        return " ".join(self.artists)

    def __str__(self) -> str:
        artists_str = " & ".join(self.artists)
        return f"{self.name} by {artists_str}"


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate together with its adjusted similarity to the query."""

    candidate: Candidate
    similarity: float
    description_boost: bool = False


@dataclass(frozen=True)
class EnrichmentResult:
    """Artist/song re-derived by the enrichment service."""

    track_info: TrackInfo
    confidence: float
