"""
Unit tests for core.resolver module.
"""

import unittest
from unittest.mock import MagicMock

from tune_resolver.core.exceptions import ConfigurationError, ExtractionError
from tune_resolver.core.models import (
    AddTrackResult,
    RawMetadata,
    SearchMatch,
    SearchOutcome,
    TrackInfo,
)
from tune_resolver.core.orchestrator import MatchOrchestrator
from tune_resolver.core.providers import DestinationProvider, SourceExtractor
from tune_resolver.core.registry import ProviderRegistry
from tune_resolver.core.resolver import TrackResolver


class TestTrackResolver(unittest.TestCase):
    """Test cases for TrackResolver."""

    def setUp(self):
        """Set up test fixtures."""
        self.source = MagicMock(spec=SourceExtractor)
        self.source.name = "youtube"
        self.source.match_url.side_effect = lambda url: "youtube.com" in url
        self.source.extract_track_data.return_value = RawMetadata(
            title="Daft Punk - One More Time (Official Video)",
            description="Daft Punk official channel",
        )

        self.destination = MagicMock(spec=DestinationProvider)
        self.destination.name = "spotify"
        self.match = SearchMatch(
            track_info=TrackInfo("Daft Punk", "One More Time"),
            confidence=0.9,
            uri="spotify:track:1",
            provider_name="spotify",
        )
        self.destination.search_track.return_value = SearchOutcome(match=self.match)

        self.registry = ProviderRegistry()
        self.registry.register("youtube", lambda: self.source)
        self.registry.register("spotify", lambda: self.destination)
        self.resolver = TrackResolver(self.registry)

        self.token_getter = {"spotify": "token"}.get

    def test_extract(self):
        metadata = self.resolver.extract("https://www.youtube.com/watch?v=abc")

        self.assertEqual(metadata.title, "Daft Punk - One More Time (Official Video)")

    def test_extract_unhandled_url(self):
        self.assertIsNone(self.resolver.extract("https://example.com/video"))
        self.source.extract_track_data.assert_not_called()

    def test_extract_failure_returns_none(self):
        self.source.extract_track_data.side_effect = ExtractionError("quota exceeded")

        self.assertIsNone(self.resolver.extract("https://www.youtube.com/watch?v=abc"))

    def test_resolve_url(self):
        """Test the URL flow normalizes the title before matching."""
        match = self.resolver.resolve_url(
            "https://www.youtube.com/watch?v=abc", ["spotify"], self.token_getter
        )

        self.assertEqual(match, self.match)
        query = self.destination.search_track.call_args[0][0]
        self.assertEqual(query.artist, "Daft Punk")
        self.assertEqual(query.song, "One More Time")
        self.assertEqual(query.raw_description, "Daft Punk official channel")

    def test_resolve_url_without_metadata(self):
        self.source.extract_track_data.return_value = None

        self.assertIsNone(
            self.resolver.resolve_url(
                "https://www.youtube.com/watch?v=abc", ["spotify"], self.token_getter
            )
        )
        self.destination.search_track.assert_not_called()

    def test_resolve_text_empty_title(self):
        """Test an empty title never reaches the providers."""
        orchestrator = MagicMock(spec=MatchOrchestrator)
        resolver = TrackResolver(self.registry, orchestrator)

        self.assertIsNone(resolver.resolve_text("", None, ["spotify"], self.token_getter))
        orchestrator.match.assert_not_called()

    def test_resolve_text_passes_options(self):
        orchestrator = MagicMock(spec=MatchOrchestrator)
        orchestrator.match.return_value = self.match
        resolver = TrackResolver(self.registry, orchestrator)
        refresher = MagicMock()

        result = resolver.resolve_text(
            "Some Title",
            None,
            ["spotify"],
            self.token_getter,
            use_smart_matching=True,
            token_refresher=refresher,
        )

        self.assertEqual(result, self.match)
        args, kwargs = orchestrator.match.call_args
        self.assertEqual(args[0].raw_title, "Some Title")
        self.assertEqual(args[1], [self.destination])
        self.assertTrue(kwargs["use_smart_matching"])
        self.assertIs(kwargs["token_refresher"], refresher)

    def test_resolve_text_unknown_destination(self):
        with self.assertRaises(ConfigurationError):
            self.resolver.resolve_text("A - B", None, ["deezer"], self.token_getter)

    def test_add_match_success(self):
        self.destination.add_track.return_value = AddTrackResult(success=True)

        result = self.resolver.add_match(self.match, "playlist", self.token_getter)

        self.assertTrue(result.success)
        self.destination.add_track.assert_called_once_with(
            "spotify:track:1", "playlist", "token"
        )

    def test_add_match_refreshes_once(self):
        """Test an expired credential is refreshed and the add retried."""
        self.destination.add_track.side_effect = [
            AddTrackResult(success=False, error="Access token expired", needs_reauth=True),
            AddTrackResult(success=True),
        ]
        refresher = MagicMock(return_value="new_token")

        result = self.resolver.add_match(
            self.match, "playlist", self.token_getter, token_refresher=refresher
        )

        self.assertTrue(result.success)
        refresher.assert_called_once_with("spotify")
        self.destination.add_track.assert_called_with(
            "spotify:track:1", "playlist", "new_token"
        )

    def test_add_match_refresh_failure(self):
        self.destination.add_track.return_value = AddTrackResult(
            success=False, error="Access token expired", needs_reauth=True
        )
        refresher = MagicMock(side_effect=RuntimeError("network down"))

        result = self.resolver.add_match(
            self.match, "playlist", self.token_getter, token_refresher=refresher
        )

        self.assertFalse(result.success)
        self.assertTrue(result.needs_reauth)
        self.assertEqual(self.destination.add_track.call_count, 1)

    def test_add_match_without_credential(self):
        result = self.resolver.add_match(self.match, "playlist", lambda name: None)

        self.assertFalse(result.success)
        self.assertTrue(result.needs_reauth)
        self.destination.add_track.assert_not_called()

    def test_add_match_unknown_provider(self):
        match = SearchMatch(
            track_info=TrackInfo("A", "B"),
            confidence=0.9,
            uri="x",
            provider_name="deezer",
        )

        result = self.resolver.add_match(match, "playlist", self.token_getter)

        self.assertFalse(result.success)
        self.assertIn("deezer", result.error)


if __name__ == "__main__":
    unittest.main()
