"""
YouTube integration package.
"""
from .client import YouTubeService

__all__ = ["YouTubeService"]
