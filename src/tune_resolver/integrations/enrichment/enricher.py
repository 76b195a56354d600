"""
AI-assisted artist/song identification using the OpenAI Responses API.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

import openai

from ...core.config import Config
from ...core.exceptions import EnrichmentError
from ...core.models import EnrichmentResult, TrackInfo
from ...core.providers import Enricher

logger = logging.getLogger(__name__)

DESCRIPTION_PROMPT_LIMIT = 1000

INSTRUCTIONS = """You are a music track identifier. Given a video title and optionally a description, extract the artist name and song title.

Rules:
- Return ONLY valid JSON in this exact format: {"artist": "Artist Name", "song": "Song Title", "confidence": 0.0}
- "confidence" is a number between 0 and 1 expressing how sure you are of the identification
- If you cannot determine both artist and song, return: {"artist": null, "song": null, "confidence": 0}
- Strip out things like "(Official Video)", "(Lyric Video)", "[HD]"
- For "feat." or "ft." artists, include them in the artist field like "Artist feat. Other Artist"
- Do not include any explanation, only the JSON object"""

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class OpenAIEnricher(Enricher):
    """Re-derives artist/song from an ambiguous title with an LLM."""

    def __init__(self, config: Config, client: Optional[Any] = None):
        self.config = config
        self._client = client

    def is_available(self) -> bool:
        return self._client is not None or bool(self.config.openai_api_key)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.config.openai_api_key)
        return self._client

    @staticmethod
    def build_input(title: str, description: Optional[str] = None) -> str:
        if description:
            return (
                f"Video Title: {title}\n\n"
                f"Description:\n{description[:DESCRIPTION_PROMPT_LIMIT]}"
            )
        return f"Video Title: {title}"

    def enrich(
        self, title: str, description: Optional[str] = None
    ) -> Optional[EnrichmentResult]:
        """
        Ask the model for the artist and song behind a title.

        Args:
            title: Raw (cleaned) title
            description: Optional description giving extra context

        Returns:
            EnrichmentResult, or None if the model could not identify the track

        Raises:
            EnrichmentError: If the API call fails
        """
        if not self.is_available():
            logger.debug("Enrichment not available - no API key configured")
            return None

        logger.info(f"Enrichment request for '{title}' (description: {bool(description)})")

        try:
            response = self.client.responses.create(
                model=self.config.openai_model,
                instructions=INSTRUCTIONS,
                input=self.build_input(title, description),
            )
        except openai.OpenAIError as e:
            raise EnrichmentError(f"Enrichment request failed: {e}")

        output_text = (response.output_text or "").strip()
        logger.debug(f"Enrichment raw response: {output_text}")

        parsed = self.parse_response(output_text)
        if parsed is None:
            logger.info(f"Could not parse enrichment response: {output_text}")
            return None

        artist = parsed.get("artist")
        song = parsed.get("song")
        if not artist or not song:
            logger.info("Enrichment could not identify the track")
            return None

        result = EnrichmentResult(
            track_info=TrackInfo(artist=str(artist).strip(), song=str(song).strip()),
            confidence=self._confidence(parsed.get("confidence")),
        )
        logger.info(f"Enrichment result: {result.track_info} ({result.confidence:.2f})")
        return result

    @staticmethod
    def parse_response(text: str) -> Optional[Dict[str, Any]]:
        """Parse the JSON object in a model response, tolerating code fences."""
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            match = _JSON_OBJECT_RE.search(text)
            if not match:
                return None
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError:
                return None

        return parsed if isinstance(parsed, dict) else None

    @staticmethod
    def _confidence(value: Any) -> float:
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(confidence, 0.0), 1.0)
