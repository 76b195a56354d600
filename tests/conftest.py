"""
Test configuration and shared fixtures for pytest
"""
import pytest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

from tune_resolver.core.config import Config
from tune_resolver.core.models import Candidate, ParsedQuery


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def config(temp_dir):
    """Config with stored tokens isolated to a temporary directory"""
    with patch.object(Config, "load_tokens_from_storage"):
        config = Config(
            spotify_client_id="client_id",
            spotify_client_secret="client_secret",
            spotify_access_token="spotify_token",
            spotify_refresh_token="spotify_refresh",
        )
    config._tokens_dir = temp_dir / ".tokens"
    return config


@pytest.fixture
def mock_tidal_session():
    """Mock Tidal session for testing"""
    session = MagicMock()
    session.load_oauth_session.return_value = True
    session.token_type = "Bearer"
    session.access_token = "test_access_token"
    session.refresh_token = "test_refresh_token"
    return session


@pytest.fixture
def structured_query():
    """Query with a confidently parsed artist and song"""
    return ParsedQuery(
        raw_title="Daft Punk - One More Time",
        artist="Daft Punk",
        song="One More Time",
    )


@pytest.fixture
def sample_candidates():
    """Sample catalog search results for testing"""
    return [
        Candidate(name="One More Time", artists=("Daft Punk",), uri="spotify:track:1"),
        Candidate(
            name="One More Time - Radio Edit",
            artists=("Daft Punk",),
            uri="spotify:track:2",
        ),
        Candidate(name="Time", artists=("Pink Floyd",), uri="spotify:track:3"),
    ]
