"""
Spotify credential handling: stored user tokens, refresh, and
client-credentials tokens for catalog metadata lookups.
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from ...core.config import Config
from ...core.exceptions import StorageError
from ...utils.token_storage import load_session_file, save_session_file

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"


class SpotifyAuth:
    """Provides and refreshes Spotify access tokens."""

    def __init__(self, config: Config):
        self.config = config
        self._client_token: Optional[str] = None
        self._client_token_expires_at = 0.0

    def get_token_path(self) -> Path:
        return self.config.tokens_dir / "spotify_session.json"

    def get_access_token(self) -> Optional[str]:
        """User access token from config, falling back to the session file."""
        if self.config.spotify_access_token:
            return self.config.spotify_access_token

        session_data = load_session_file(self.get_token_path())
        if session_data and session_data.get("access_token"):
            self.config.spotify_access_token = session_data["access_token"]
            return self.config.spotify_access_token
        return None

    def refresh_access_token(self) -> Optional[str]:
        """
        Exchange the refresh token for a new access token.

        Returns:
            The new access token, or None if refresh is impossible or fails
        """
        refresh_token = self.config.spotify_refresh_token
        if not refresh_token:
            logger.info("Spotify token refresh impossible - no refresh token")
            return None

        if not (self.config.spotify_client_id and self.config.spotify_client_secret):
            logger.info("Spotify token refresh impossible - no client credentials")
            return None

        payload = self._token_request(
            {"grant_type": "refresh_token", "refresh_token": refresh_token}
        )
        if not payload:
            return None

        access_token = payload.get("access_token")
        if not access_token:
            logger.warning(f"Spotify token refresh returned no token: {payload}")
            return None

        self.config.spotify_access_token = access_token
        if payload.get("refresh_token"):
            self.config.spotify_refresh_token = payload["refresh_token"]

        try:
            save_session_file(
                self.get_token_path(),
                {
                    "access_token": access_token,
                    "refresh_token": self.config.spotify_refresh_token,
                    "saved_at": time.time(),
                    "expires_at": time.time() + int(payload.get("expires_in") or 3600),
                },
            )
        except StorageError as e:
            logger.warning(f"Refreshed Spotify token not persisted: {e}")

        logger.info("Spotify token refreshed successfully")
        return access_token

    def get_client_token(self) -> Optional[str]:
        """App-only token for public catalog lookups, cached until expiry."""
        now = time.time()
        if self._client_token and now < self._client_token_expires_at:
            return self._client_token

        if not (self.config.spotify_client_id and self.config.spotify_client_secret):
            return None

        payload = self._token_request({"grant_type": "client_credentials"})
        if not payload or not payload.get("access_token"):
            return None

        expires_in = int(payload.get("expires_in") or 0)
        self._client_token = payload["access_token"]
        self._client_token_expires_at = now + max(expires_in - 30, 0)
        return self._client_token

    def _token_request(self, data: Dict[str, str]) -> Optional[Dict[str, Any]]:
        try:
            response = requests.post(
                SPOTIFY_TOKEN_URL,
                data=data,
                auth=(self.config.spotify_client_id, self.config.spotify_client_secret),
                timeout=self.config.search_timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Spotify token request failed: {e}")
            return None

        if response.status_code != 200:
            logger.warning(
                f"Spotify token request failed ({response.status_code}): "
                f"{response.text}"
            )
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning("Spotify token response was not JSON")
            return None
