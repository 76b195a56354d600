"""
Spotify provider: source extraction, track search and playlist adds.
"""
import logging
import re
from typing import Optional

import requests

from ...core.config import Config
from ...core.exceptions import ExtractionError
from ...core.fuzzy import FuzzyMatcher
from ...core.models import AddTrackResult, ParsedQuery, RawMetadata, SearchOutcome
from ...core.providers import DestinationProvider, SourceExtractor
from ...core.strategy import SearchStrategy
from .auth import SpotifyAuth
from .search import SpotifyCatalog

logger = logging.getLogger(__name__)

SPOTIFY_TRACK_URL = "https://api.spotify.com/v1/tracks/{track_id}"
SPOTIFY_PLAYLIST_TRACKS_URL = "https://api.spotify.com/v1/playlists/{playlist_id}/tracks"

_TRACK_ID_RE = re.compile(r"track[/:]([a-zA-Z0-9]+)")


class SpotifyService(SourceExtractor, DestinationProvider):
    """Service for interacting with the Spotify Web API."""

    name = "spotify"

    def __init__(
        self,
        config: Config,
        auth: Optional[SpotifyAuth] = None,
        strategy: Optional[SearchStrategy] = None,
    ):
        self.config = config
        self.auth = auth or SpotifyAuth(config)
        self.strategy = strategy or SearchStrategy(
            SpotifyCatalog(timeout=config.search_timeout),
            matcher=FuzzyMatcher(
                acceptance_floor=config.match_floor,
                containment_floor=config.containment_floor,
                description_boost=config.description_boost,
            ),
            structured_confidence=config.structured_confidence,
        )

    def match_url(self, url: str) -> bool:
        return "open.spotify.com" in url or "spotify:" in url

    @staticmethod
    def get_track_id(url: str) -> Optional[str]:
        match = _TRACK_ID_RE.search(url)
        return match.group(1) if match else None

    def extract_track_data(self, url: str) -> Optional[RawMetadata]:
        """
        Look up a Spotify track URL and describe it as ``Artist - Song``.

        Raises:
            ExtractionError: If the metadata request fails
        """
        track_id = self.get_track_id(url)
        if not track_id:
            logger.info(f"Could not extract Spotify track ID from {url}")
            return None

        token = self.auth.get_client_token() or self.auth.get_access_token()
        if not token:
            logger.warning("No Spotify token available for metadata lookup")
            return None

        try:
            response = requests.get(
                SPOTIFY_TRACK_URL.format(track_id=track_id),
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.config.search_timeout,
            )
        except requests.RequestException as e:
            raise ExtractionError(f"Spotify track lookup failed: {e}")

        if response.status_code != 200:
            logger.warning(
                f"Spotify track lookup for {track_id} failed "
                f"with HTTP {response.status_code}"
            )
            return None

        try:
            data = response.json()
            artists = ", ".join(a["name"] for a in data.get("artists") or [])
            name = data["name"]
        except (ValueError, KeyError, TypeError) as e:
            raise ExtractionError(f"Malformed Spotify track response: {e}")

        title = f"{artists} - {name}" if artists else name
        logger.debug(f"Spotify track {track_id}: {title}")
        return RawMetadata(title=title)

    def search_track(self, query: ParsedQuery, credential: str) -> SearchOutcome:
        return self.strategy.search(query, credential)

    def add_track(
        self, uri: str, destination_id: str, credential: str
    ) -> AddTrackResult:
        """Append a track URI to a Spotify playlist."""
        try:
            response = requests.post(
                SPOTIFY_PLAYLIST_TRACKS_URL.format(playlist_id=destination_id),
                json={"uris": [uri]},
                headers={"Authorization": f"Bearer {credential}"},
                timeout=self.config.search_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Spotify addTrack error: {e}")
            return AddTrackResult(success=False, error=str(e))

        if response.ok:
            return AddTrackResult(success=True)

        if response.status_code == 401:
            logger.info("Spotify addTrack rejected: access token expired")
            return AddTrackResult(
                success=False, error="Access token expired", needs_reauth=True
            )

        message = f"HTTP {response.status_code}"
        try:
            error = response.json().get("error")
            if isinstance(error, dict) and error.get("message"):
                message = error["message"]
        except (ValueError, AttributeError):
            pass

        logger.warning(f"Spotify addTrack failed: {message}")
        return AddTrackResult(success=False, error=message)
