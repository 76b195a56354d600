"""
Spotify integration package.
"""
from .auth import SpotifyAuth
from .client import SpotifyService
from .search import SpotifyCatalog

__all__ = ["SpotifyAuth", "SpotifyService", "SpotifyCatalog"]
