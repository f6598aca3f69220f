"""Factory for creating and managing evidence providers."""

import logging
import os
from typing import Dict, List, Optional, Type

from ...domain.ports.evidence_provider import EvidenceProvider
from .factcheck_provider import FactCheckConfig, FactCheckEvidenceProvider
from .news_provider import NewsConfig, NewsEvidenceProvider
from .wikipedia_provider import WikipediaConfig, WikipediaEvidenceProvider

logger = logging.getLogger(__name__)


class EvidenceProviderFactory:
    """Factory for creating and managing evidence providers.

    This factory maintains a registry of available provider classes
    and handles their lifecycle (initialization, shutdown).
    """

    def __init__(self):
        """Initialize the factory."""
        self._provider_registry: Dict[str, Type[EvidenceProvider]] = {}
        self._active_providers: Dict[str, EvidenceProvider] = {}

        # Register default providers
        self.register_provider("wikipedia", WikipediaEvidenceProvider)
        self.register_provider("news", NewsEvidenceProvider)
        self.register_provider("factcheck", FactCheckEvidenceProvider)

    def register_provider(
        self, name: str, provider_class: Type[EvidenceProvider]
    ) -> None:
        """Register a new provider class.

        Args:
            name: Unique identifier for the provider
            provider_class: The provider class to register
        """
        if name in self._provider_registry:
            raise ValueError(f"Provider {name} already registered")
        self._provider_registry[name] = provider_class

    def _default_config(self, name: str):
        if name == "wikipedia":
            return WikipediaConfig()
        if name == "news":
            return NewsConfig(api_key=os.getenv("NEWS_API_KEY", ""))
        if name == "factcheck":
            return FactCheckConfig(api_key=os.getenv("GOOGLE_FACTCHECK_API_KEY", ""))
        return None

    async def create_provider(self, name: str, **config) -> EvidenceProvider:
        """Create and initialize a new provider instance.

        Args:
            name: Name of the provider to create
            **config: Provider-specific constructor arguments

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
            RuntimeError: If initialization fails
        """
        if name not in self._provider_registry:
            raise ValueError(f"Provider {name} not registered")

        provider_class = self._provider_registry[name]
        if not config and self._default_config(name) is not None:
            config = {"config": self._default_config(name)}
        provider = provider_class(**config)

        try:
            await provider.initialize()
            self._active_providers[name] = provider
            return provider
        except Exception as e:
            raise RuntimeError(f"Failed to initialize provider {name}: {e}")

    async def create_available(self) -> List[EvidenceProvider]:
        """Create every registered provider that can be initialized.

        Providers without credentials or that fail to start are skipped.
        """
        providers = []
        for name in self._provider_registry:
            try:
                providers.append(await self.create_provider(name))
                logger.info(f"✅ Evidence provider {name} ready")
            except Exception as e:
                logger.warning(f"⚠️ Evidence provider {name} unavailable: {e}")
        return providers

    def get_provider(self, name: str) -> Optional[EvidenceProvider]:
        """Get an active provider instance by name.

        Args:
            name: Name of the provider

        Returns:
            Provider instance if active, None otherwise
        """
        return self._active_providers.get(name)

    async def shutdown_provider(self, name: str) -> None:
        """Shutdown a specific provider.

        Args:
            name: Name of the provider to shutdown
        """
        provider = self._active_providers.get(name)
        if provider:
            await provider.shutdown()
            del self._active_providers[name]

    async def shutdown_all(self) -> None:
        """Shutdown all active providers."""
        for name in list(self._active_providers.keys()):
            await self.shutdown_provider(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: bool(self.get_provider(name))
            for name in self._provider_registry
        }
