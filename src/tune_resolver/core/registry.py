"""
Explicit provider registry, built once at startup and passed around.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .exceptions import ConfigurationError
from .providers import DestinationProvider, SourceExtractor

logger = logging.getLogger(__name__)

Provider = Union[SourceExtractor, DestinationProvider]
ProviderFactory = Callable[[], Provider]


class ProviderRegistry:
    """Ordered mapping of provider name to factory."""

    def __init__(self) -> None:
        self._factories: Dict[str, ProviderFactory] = {}
        self._instances: Dict[str, Provider] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        self._factories[name] = factory
        self._instances.pop(name, None)

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)
        self._instances.pop(name, None)

    def names(self) -> List[str]:
        return list(self._factories)

    def get(self, name: str) -> Optional[Provider]:
        """Get the provider registered under ``name``, created on first use."""
        if name not in self._factories:
            return None
        if name not in self._instances:
            self._instances[name] = self._factories[name]()
        return self._instances[name]

    def sources(self) -> List[SourceExtractor]:
        return [
            provider
            for provider in (self.get(name) for name in self.names())
            if isinstance(provider, SourceExtractor)
        ]

    def destinations(self, names: Sequence[str]) -> List[DestinationProvider]:
        """
        Resolve destination provider names, keeping the caller's order.

        Raises:
            ConfigurationError: If a name is unknown or not a destination
        """
        providers = []
        for name in names:
            provider = self.get(name)
            if not isinstance(provider, DestinationProvider):
                raise ConfigurationError(f"'{name}' is not a destination provider")
            providers.append(provider)
        return providers

    def resolve(self, url: str) -> Optional[Tuple[str, SourceExtractor]]:
        """Find the first registered source that accepts ``url``."""
        for name in self.names():
            provider = self.get(name)
            if isinstance(provider, SourceExtractor) and provider.match_url(url):
                logger.debug(f"URL {url} handled by {name}")
                return name, provider
        return None
