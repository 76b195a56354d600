"""
Tidal credential handling.

Tokens are obtained elsewhere (the login handshake is not part of this
package) and stored in ``.tokens/tidal_session.json``. This module hands the
stored access token to the matcher and refreshes it on request.
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import tidalapi

from ...core.config import Config
from ...core.exceptions import StorageError
from ...utils.token_storage import (
    clear_session_file,
    load_session_file,
    save_session_file,
)

logger = logging.getLogger(__name__)


class TidalAuth:
    """Stored Tidal session tokens with refresh support."""

    def __init__(self, config: Config):
        self.config = config

    def get_token_path(self) -> Path:
        """Get the path where tokens are stored."""
        return self.config.tokens_dir / "tidal_session.json"

    def save_session(self, session_data: Dict[str, Any]) -> bool:
        """Save Tidal session data securely."""
        enhanced_data = {
            **session_data,
            "saved_at": time.time(),
            "expires_at": session_data.get("expires_at", time.time() + 3600),
        }

        try:
            save_session_file(self.get_token_path(), enhanced_data)
            logger.info("Session data saved securely")
            return True
        except StorageError as e:
            logger.error(f"Error saving session data: {e}")
            return False

    def load_session(self) -> Optional[Dict[str, Any]]:
        """Load Tidal session data, or None if missing or invalid."""
        session_data = load_session_file(self.get_token_path())
        if session_data is None:
            return None

        required_fields = ["token_type", "access_token"]
        if not all(field in session_data for field in required_fields):
            logger.warning("Invalid session data, clearing")
            self.clear_session()
            return None

        return session_data

    def clear_session(self) -> bool:
        """Clear saved session data."""
        return clear_session_file(self.get_token_path())

    @staticmethod
    def is_expired(session_data: Dict[str, Any]) -> bool:
        return time.time() > session_data.get("expires_at", 0)

    def get_access_token(self) -> Optional[str]:
        """
        The stored access token.

        An expired token is still returned; the provider reports it as
        needing re-authorization and the matcher refreshes it.
        """
        session_data = self.load_session()
        if not session_data:
            return None
        if self.is_expired(session_data):
            logger.debug("Stored Tidal token looks expired")
        return session_data.get("access_token")

    def refresh_access_token(self) -> Optional[str]:
        """Refresh the stored session and return the new access token."""
        session_data = self.load_session()
        if not session_data:
            logger.info("Tidal token refresh impossible - no saved session")
            return None

        session = tidalapi.Session()
        if not self.try_refresh_session(session, session_data):
            return None
        return session.access_token

    def try_refresh_session(
        self, session: tidalapi.Session, session_data: Dict[str, Any]
    ) -> bool:
        """Try to refresh an expired session."""
        refresh_token = session_data.get("refresh_token")
        if not refresh_token:
            return False

        try:
            logger.info("Attempting to refresh Tidal session...")
            if session.token_refresh(refresh_token):
                logger.info("Session refreshed successfully")

                updated_data = {
                    **session_data,
                    "token_type": session.token_type,
                    "access_token": session.access_token,
                    "refresh_token": session.refresh_token or refresh_token,
                    "expires_at": time.time() + 3600,
                }

                return self.save_session(updated_data)
            return False

        except Exception as e:
            logger.warning(f"Session refresh failed: {e}")
            return False
