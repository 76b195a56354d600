"""
Spotify Web API search backend.
"""
import logging
from typing import Any, Dict, List

import requests

from ...core.exceptions import AuthenticationError, RateLimitError, SearchError
from ...core.models import Candidate
from ...core.providers import CatalogBackend

logger = logging.getLogger(__name__)

SPOTIFY_SEARCH_URL = "https://api.spotify.com/v1/search"
STRUCTURED_LIMIT = 5
TEXT_LIMIT = 10


class SpotifyCatalog(CatalogBackend):
    """Raw track searches against the Spotify catalog."""

    name = "spotify"

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    def search_structured(
        self, artist: str, song: str, credential: str
    ) -> List[Candidate]:
        return self._search(f"artist:{artist} track:{song}", STRUCTURED_LIMIT, credential)

    def search_text(self, text: str, credential: str) -> List[Candidate]:
        return self._search(text, TEXT_LIMIT, credential)

    def _search(self, query: str, limit: int, credential: str) -> List[Candidate]:
        logger.debug(f"    Searching Spotify for: {query}")
        try:
            response = requests.get(
                SPOTIFY_SEARCH_URL,
                params={"q": query, "type": "track", "limit": limit},
                headers={"Authorization": f"Bearer {credential}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SearchError(f"Spotify search request failed: {e}")

        payload = self._payload(response)
        try:
            items = (payload.get("tracks") or {}).get("items") or []
            candidates = [self._candidate(item) for item in items if item]
        except (AttributeError, TypeError) as e:
            raise SearchError(f"Malformed Spotify search response: {e}")
        logger.debug(f"    Found {len(candidates)} Spotify tracks")
        return candidates

    def _payload(self, response: requests.Response) -> Dict[str, Any]:
        if response.status_code == 401:
            raise AuthenticationError("Spotify access token expired")
        if response.status_code == 429:
            raise RateLimitError("Spotify rate limit exceeded")

        try:
            payload = response.json()
        except ValueError:
            raise SearchError(f"Spotify returned non-JSON ({response.status_code})")

        if not isinstance(payload, dict):
            raise SearchError("Spotify returned an unexpected response")

        error = payload.get("error")
        if error:
            status = error.get("status") if isinstance(error, dict) else None
            if status == 401:
                raise AuthenticationError("Spotify access token expired")
            raise SearchError(f"Spotify search error: {error}")

        if response.status_code >= 400:
            raise SearchError(f"Spotify search failed with HTTP {response.status_code}")

        return payload

    @staticmethod
    def _candidate(item: Dict[str, Any]) -> Candidate:
        artists = tuple(
            artist.get("name")
            for artist in item.get("artists") or []
            if artist.get("name")
        )
        return Candidate(
            name=item.get("name") or "",
            artists=artists,
            uri=item.get("uri") or "",
        )
