"""
Tidal provider: source extraction, track search and playlist adds.
"""
import logging
import re
from typing import Optional

import requests

from ...core.config import Config
from ...core.exceptions import AuthenticationError, ExtractionError, SearchError
from ...core.fuzzy import FuzzyMatcher
from ...core.models import AddTrackResult, ParsedQuery, RawMetadata, SearchOutcome
from ...core.providers import DestinationProvider, SourceExtractor
from ...core.strategy import SearchStrategy
from .auth import TidalAuth
from .search import (
    TIDAL_ERRORS,
    TidalCatalog,
    raise_for_http_error,
    raise_for_tidal_error,
)

logger = logging.getLogger(__name__)

_TRACK_ID_RE = re.compile(r"tidal\.com/(?:browse/)?track/(\d+)")


class TidalService(SourceExtractor, DestinationProvider):
    """Service for interacting with Tidal."""

    name = "tidal"

    def __init__(
        self,
        config: Config,
        auth: Optional[TidalAuth] = None,
        catalog: Optional[TidalCatalog] = None,
    ):
        self.config = config
        self.auth = auth or TidalAuth(config)
        self.catalog = catalog or TidalCatalog()
        self.strategy = SearchStrategy(
            self.catalog,
            matcher=FuzzyMatcher(
                acceptance_floor=config.match_floor,
                containment_floor=config.containment_floor,
                description_boost=config.description_boost,
            ),
            structured_confidence=config.structured_confidence,
        )

    def match_url(self, url: str) -> bool:
        return "tidal.com" in url

    @staticmethod
    def get_track_id(url: str) -> Optional[str]:
        match = _TRACK_ID_RE.search(url)
        return match.group(1) if match else None

    def extract_track_data(self, url: str) -> Optional[RawMetadata]:
        """
        Look up a Tidal track URL and describe it as ``Artist - Song``.

        Raises:
            ExtractionError: If the track cannot be fetched
        """
        track_id = self.get_track_id(url)
        if not track_id:
            logger.info(f"Could not extract Tidal track ID from {url}")
            return None

        credential = self.auth.get_access_token()
        if not credential:
            logger.warning("No Tidal session available for metadata lookup")
            return None

        try:
            session = self.catalog.session_for(credential)
            track = session.track(int(track_id))
        except (AuthenticationError, SearchError) as e:
            raise ExtractionError(f"Tidal track lookup failed: {e}")
        except TIDAL_ERRORS as e:
            raise ExtractionError(f"Tidal track lookup failed: {e}")
        except requests.RequestException as e:
            raise ExtractionError(f"Tidal track lookup failed: {e}")

        artist = track.artist.name if getattr(track, "artist", None) else None
        title = f"{artist} - {track.name}" if artist else track.name
        logger.debug(f"Tidal track {track_id}: {title}")
        return RawMetadata(title=title)

    def search_track(self, query: ParsedQuery, credential: str) -> SearchOutcome:
        return self.strategy.search(query, credential)

    def add_track(
        self, uri: str, destination_id: str, credential: str
    ) -> AddTrackResult:
        """Add a track ID to a Tidal playlist owned by the session user."""
        try:
            session = self.catalog.session_for(credential)
            playlist = session.playlist(destination_id)
            try:
                playlist.add([uri])
            except requests.HTTPError as e:
                raise_for_http_error(e, "playlist add")
            except TIDAL_ERRORS as e:
                raise_for_tidal_error(e, "playlist add")
        except AuthenticationError:
            logger.info("Tidal addTrack rejected: access token expired")
            return AddTrackResult(
                success=False, error="Access token expired", needs_reauth=True
            )
        except (SearchError, requests.RequestException) as e:
            logger.error(f"Failed to add track to Tidal playlist: {e}")
            return AddTrackResult(success=False, error=str(e))
        except AttributeError:
            # tidalapi only gives UserPlaylist an add() method
            return AddTrackResult(
                success=False, error=f"Playlist {destination_id} is not editable"
            )

        return AddTrackResult(success=True)
