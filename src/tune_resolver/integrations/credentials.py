"""
Stored credentials for destination providers, keyed by provider name.
"""
import logging
from typing import Dict, Optional, Union

from ..core.config import Config
from .spotify.auth import SpotifyAuth
from .tidal.auth import TidalAuth

logger = logging.getLogger(__name__)


class CredentialStore:
    """Token getter and refresher backed by each provider's auth helper."""

    def __init__(self, config: Config):
        self.config = config
        self.auths: Dict[str, Union[SpotifyAuth, TidalAuth]] = {
            "spotify": SpotifyAuth(config),
            "tidal": TidalAuth(config),
        }

    def get(self, provider_name: str) -> Optional[str]:
        auth = self.auths.get(provider_name)
        if auth is None:
            logger.debug(f"No credentials known for {provider_name}")
            return None
        return auth.get_access_token()

    def refresh(self, provider_name: str) -> Optional[str]:
        auth = self.auths.get(provider_name)
        if auth is None:
            return None
        return auth.refresh_access_token()
