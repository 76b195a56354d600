"""
YouTube source: video URL -> title and description via the Data API v3.
"""
import logging
import re
from typing import Any, Dict, Optional

import requests

from ...core.config import Config
from ...core.exceptions import ExtractionError
from ...core.models import RawMetadata
from ...core.providers import SourceExtractor

logger = logging.getLogger(__name__)

YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"

_VIDEO_ID_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?|shorts)/|.*[?&]v=)|youtu\.be/)"
    r"([^\"&?/\s]{11})"
)


class YouTubeService(SourceExtractor):
    """Extracts track metadata from YouTube and YouTube Music links."""

    name = "youtube"

    def __init__(self, config: Config):
        self.config = config

    def match_url(self, url: str) -> bool:
        return (
            "youtube.com" in url
            or "youtu.be" in url
            or "music.youtube.com" in url
        )

    @staticmethod
    def get_video_id(url: str) -> Optional[str]:
        match = _VIDEO_ID_RE.search(url)
        return match.group(1) if match else None

    def extract_track_data(self, url: str) -> Optional[RawMetadata]:
        video_id = self.get_video_id(url)
        if not video_id:
            logger.info(f"No video ID in {url}")
            return None

        logger.debug(f"YouTube video ID {video_id} extracted from {url}")

        snippet = self.fetch_snippet(video_id)
        if snippet is None:
            logger.info(f"No metadata for YouTube video {video_id}")
            return None

        title = snippet.get("title")
        if not title:
            return None

        logger.info(f"YouTube title fetched: {title}")
        return RawMetadata(title=title, description=snippet.get("description") or None)

    def fetch_snippet(self, video_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the ``snippet`` part of a video resource.

        Raises:
            ExtractionError: On transport failure or an API error response
        """
        if not self.config.youtube_api_key:
            raise ExtractionError("YOUTUBE_API_KEY is not configured")

        try:
            response = requests.get(
                YOUTUBE_VIDEOS_URL,
                params={
                    "id": video_id,
                    "key": self.config.youtube_api_key,
                    "part": "snippet",
                },
                timeout=self.config.search_timeout,
            )
            data = response.json()
        except requests.RequestException as e:
            raise ExtractionError(f"YouTube metadata request failed: {e}")
        except ValueError:
            raise ExtractionError("YouTube returned a non-JSON response")

        if data.get("error"):
            raise ExtractionError(f"YouTube API error: {data['error']}")

        items = data.get("items") or []
        if not items:
            return None
        return items[0].get("snippet") or None
