"""
Configuration management for tune_resolver.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError
from .fuzzy import ACCEPTANCE_FLOOR, CONTAINMENT_FLOOR, DESCRIPTION_BOOST
from .orchestrator import CONFIDENCE_THRESHOLD, ENRICHMENT_THRESHOLD
from .strategy import STRUCTURED_CONFIDENCE

logger = logging.getLogger(__name__)

KNOWN_DESTINATIONS = ("spotify", "tidal")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


@dataclass
class Config:
    """Configuration settings for the application."""

    # API Configuration
    youtube_api_key: Optional[str] = None
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    spotify_access_token: Optional[str] = None
    spotify_refresh_token: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Application Settings
    log_level: str = "INFO"
    destinations: List[str] = field(default_factory=lambda: ["spotify"])
    use_smart_matching: bool = False

    # Search Configuration
    search_timeout: int = 30
    structured_confidence: float = STRUCTURED_CONFIDENCE
    acceptance_threshold: float = CONFIDENCE_THRESHOLD
    enrichment_threshold: float = ENRICHMENT_THRESHOLD
    description_boost: float = DESCRIPTION_BOOST
    containment_floor: float = CONTAINMENT_FLOOR
    match_floor: float = ACCEPTANCE_FLOOR

    # Development Settings
    debug_api_calls: bool = False

    # Internal settings
    _project_root: Optional[Path] = field(default=None, init=False)
    _tokens_dir: Optional[Path] = field(default=None, init=False)

    def __post_init__(self) -> None:
        """Initialize derived settings."""
        self._project_root = self._find_project_root()
        self._tokens_dir = (
            self._project_root / ".tokens" if self._project_root else None
        )

        self.setup_logging()

        if self._tokens_dir and self._tokens_dir.exists():
            self.load_tokens_from_storage()

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls(
            youtube_api_key=os.getenv("YOUTUBE_API_KEY"),
            spotify_client_id=os.getenv("SPOTIFY_CLIENT_ID"),
            spotify_client_secret=os.getenv("SPOTIFY_CLIENT_SECRET"),
            spotify_access_token=os.getenv("SPOTIFY_ACCESS_TOKEN"),
            spotify_refresh_token=os.getenv("SPOTIFY_REFRESH_TOKEN"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            destinations=_env_list("DESTINATIONS", "spotify"),
            use_smart_matching=_env_bool("USE_SMART_MATCHING", "false"),
            search_timeout=int(os.getenv("SEARCH_TIMEOUT", "30")),
            acceptance_threshold=float(
                os.getenv("ACCEPTANCE_THRESHOLD", str(CONFIDENCE_THRESHOLD))
            ),
            enrichment_threshold=float(
                os.getenv("ENRICHMENT_THRESHOLD", str(ENRICHMENT_THRESHOLD))
            ),
            debug_api_calls=_env_bool("DEBUG_API_CALLS", "false"),
        )

    @classmethod
    def from_dotenv(cls, env_file: Optional[Path] = None) -> "Config":
        """Create configuration from .env file."""
        from dotenv import load_dotenv

        if env_file:
            load_dotenv(env_file)
        else:
            project_root = cls._find_project_root()
            if project_root:
                env_file = project_root / ".env"
                if env_file.exists():
                    load_dotenv(env_file)

        return cls.from_env()

    @staticmethod
    def _find_project_root() -> Optional[Path]:
        """Find the project root directory."""
        current = Path.cwd()

        markers = [".git", "pyproject.toml", "setup.py", "requirements.txt"]

        for parent in [current] + list(current.parents):
            if any((parent / marker).exists() for marker in markers):
                return parent

        return current

    def setup_logging(self) -> None:
        """Set up logging configuration."""
        log_level = getattr(logging, self.log_level.upper(), logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.debug_api_calls:
            logging.getLogger("requests").setLevel(logging.DEBUG)
            logging.getLogger("urllib3").setLevel(logging.DEBUG)

    def validate(self) -> None:
        """Validate the configuration."""
        errors = []

        if not self.destinations:
            errors.append("DESTINATIONS must name at least one provider")

        unknown = [name for name in self.destinations if name not in KNOWN_DESTINATIONS]
        if unknown:
            errors.append(f"Unknown destinations: {', '.join(unknown)}")

        if "spotify" in self.destinations and not (
            self.spotify_access_token or self.spotify_refresh_token
        ):
            errors.append("SPOTIFY_ACCESS_TOKEN or SPOTIFY_REFRESH_TOKEN is required")

        if self.search_timeout <= 0:
            errors.append("SEARCH_TIMEOUT must be > 0")

        for name in (
            "structured_confidence",
            "acceptance_threshold",
            "enrichment_threshold",
            "containment_floor",
            "match_floor",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name.upper()} must be between 0 and 1")

        if self.use_smart_matching and not self.openai_api_key:
            errors.append("OPENAI_API_KEY is required when USE_SMART_MATCHING is set")

        if errors:
            raise ConfigurationError(f"Configuration errors: {', '.join(errors)}")

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            raise ConfigurationError("Could not determine project root directory")
        return self._project_root

    @property
    def tokens_dir(self) -> Path:
        """Get the tokens directory."""
        if self._tokens_dir is None:
            raise ConfigurationError("Could not determine tokens directory")
        return self._tokens_dir

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (excluding private fields)."""
        return {
            key: value
            for key, value in self.__dict__.items()
            if not key.startswith("_")
        }

    def load_tokens_from_storage(self) -> None:
        """Load Spotify tokens from the session file if not already set."""
        try:
            spotify_session_file = self.tokens_dir / "spotify_session.json"
            if not spotify_session_file.exists():
                return
            with open(spotify_session_file, "r") as f:
                session_data: Dict[str, Any] = json.load(f)

            access_token = session_data.get("access_token")
            if access_token and isinstance(access_token, str):
                if not self.spotify_access_token:
                    self.spotify_access_token = access_token
                    logger.info("Loaded Spotify access token from session storage")

            refresh_token = session_data.get("refresh_token")
            if refresh_token and isinstance(refresh_token, str):
                if not self.spotify_refresh_token:
                    self.spotify_refresh_token = refresh_token

        except Exception as e:
            logger.warning(f"Failed to load tokens from storage: {e}")

    def __str__(self) -> str:
        config_dict = self.to_dict()
        for secret in (
            "youtube_api_key",
            "spotify_client_secret",
            "spotify_access_token",
            "spotify_refresh_token",
            "openai_api_key",
        ):
            if config_dict.get(secret):
                config_dict[secret] = f"{config_dict[secret][:6]}..."
        return f"Config({config_dict})"
