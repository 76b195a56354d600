"""
Tidal search backend built on tidalapi sessions.
"""
import logging
import re
from typing import Any, Callable, Dict, List, Optional

import requests
import tidalapi
from tidalapi import exceptions as tidal_exceptions

from ...core.exceptions import AuthenticationError, RateLimitError, SearchError
from ...core.models import Candidate
from ...core.providers import CatalogBackend

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10

SessionFactory = Callable[[], tidalapi.Session]


def raise_for_http_error(error: requests.HTTPError, action: str) -> None:
    """Translate a tidalapi HTTP failure into the package's exceptions."""
    status = error.response.status_code if error.response is not None else None
    if status == 401:
        raise AuthenticationError(f"Tidal rejected the access token during {action}")
    if status == 429:
        raise RateLimitError(f"Tidal rate limit exceeded during {action}")
    raise SearchError(f"Tidal {action} failed: {error}")


TIDAL_ERRORS = (
    tidal_exceptions.AuthenticationError,
    tidal_exceptions.TooManyRequests,
    tidal_exceptions.ObjectNotFound,
)


def raise_for_tidal_error(error: Exception, action: str) -> None:
    """Translate an exception raised by tidalapi itself."""
    if isinstance(error, tidal_exceptions.AuthenticationError):
        raise AuthenticationError(f"Tidal rejected the access token during {action}")
    if isinstance(error, tidal_exceptions.TooManyRequests):
        raise RateLimitError(f"Tidal rate limit exceeded during {action}")
    raise SearchError(f"Tidal {action} failed: {error}")


class TidalCatalog(CatalogBackend):
    """Raw track searches against the Tidal catalog."""

    name = "tidal"

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self.session_factory = session_factory or tidalapi.Session
        self._sessions: Dict[str, tidalapi.Session] = {}

    def session_for(self, credential: str) -> tidalapi.Session:
        """
        A tidalapi session authorized with ``credential``, reused per token.

        Raises:
            AuthenticationError: If Tidal rejects the token
            SearchError: If the session cannot be established
        """
        if credential in self._sessions:
            return self._sessions[credential]

        session = self.session_factory()
        try:
            loaded = session.load_oauth_session("Bearer", credential)
        except requests.HTTPError as e:
            raise_for_http_error(e, "session load")
        except TIDAL_ERRORS as e:
            raise_for_tidal_error(e, "session load")
        except requests.RequestException as e:
            raise SearchError(f"Tidal session load failed: {e}")

        if not loaded:
            raise AuthenticationError("Tidal rejected the access token")

        self._sessions[credential] = session
        return session

    def search_structured(
        self, artist: str, song: str, credential: str
    ) -> List[Candidate]:
        return self._search(
            f'track:"{self._quote(song)}" artist:"{self._quote(artist)}"', credential
        )

    def search_text(self, text: str, credential: str) -> List[Candidate]:
        return self._search(text, credential)

    def _search(self, query: str, credential: str) -> List[Candidate]:
        session = self.session_for(credential)
        logger.debug(f"    Searching Tidal for: {query}")

        try:
            result = session.search(query, models=[tidalapi.Track], limit=SEARCH_LIMIT)
        except requests.HTTPError as e:
            raise_for_http_error(e, "search")
        except TIDAL_ERRORS as e:
            raise_for_tidal_error(e, "search")
        except requests.RequestException as e:
            raise SearchError(f"Tidal search failed for '{query}': {e}")

        try:
            tracks = result.get("tracks", []) or []
            candidates = [self._candidate(track) for track in tracks]
        except (AttributeError, TypeError) as e:
            raise SearchError(f"Malformed Tidal search response: {e}")

        logger.debug(f"    Found {len(candidates)} Tidal tracks")
        return candidates

    @staticmethod
    def _quote(value: str) -> str:
        return re.sub(r'["\']', "", value)

    @staticmethod
    def _candidate(track: Any) -> Candidate:
        artists = getattr(track, "artists", None) or (
            [track.artist] if getattr(track, "artist", None) else []
        )
        return Candidate(
            name=track.name or "",
            artists=tuple(artist.name for artist in artists if artist.name),
            uri=str(track.id),
        )
