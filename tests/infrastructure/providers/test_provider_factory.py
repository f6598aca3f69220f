"""Tests for the evidence provider factory."""

from typing import Dict, List

import pytest
import pytest_asyncio
from unittest.mock import patch

from claim_verifier.domain.models.evidence import Evidence
from claim_verifier.infrastructure.providers.factory import EvidenceProviderFactory
from claim_verifier.infrastructure.providers.wikipedia_provider import WikipediaEvidenceProvider


class TestProvider:
    """Test provider implementation."""

    def __init__(self, provider_name: str = "Test"):
        """Initialize test provider."""
        self._name = provider_name
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the provider."""
        self._initialized = True

    async def provide(self, claim_text: str) -> List[Evidence]:
        """Provide no evidence."""
        return []

    async def shutdown(self) -> None:
        """Shutdown the provider."""
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if available."""
        return self._initialized

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get provider capabilities."""
        return {"test": True}


@pytest_asyncio.fixture
async def provider_factory() -> EvidenceProviderFactory:
    """Create an evidence provider factory."""
    return EvidenceProviderFactory()


def test_register_duplicate_provider(provider_factory: EvidenceProviderFactory):
    """Test registering a provider name twice."""
    with pytest.raises(ValueError):
        provider_factory.register_provider("wikipedia", TestProvider)


@pytest.mark.asyncio
async def test_create_provider(provider_factory: EvidenceProviderFactory):
    """Test provider creation with explicit arguments."""
    provider_factory.register_provider("test", TestProvider)

    provider = await provider_factory.create_provider("test", provider_name="TestProvider")

    assert provider.provider_name == "TestProvider"
    assert provider.is_available
    assert provider_factory.get_provider("test") is provider


@pytest.mark.asyncio
async def test_create_unknown_provider(provider_factory: EvidenceProviderFactory):
    """Test creating a provider that was never registered."""
    with pytest.raises(ValueError):
        await provider_factory.create_provider("unknown")


@pytest.mark.asyncio
async def test_create_provider_without_credentials(provider_factory: EvidenceProviderFactory):
    """Providers whose key is missing fail to initialize."""
    with patch.dict("os.environ", {"NEWS_API_KEY": ""}):
        with pytest.raises(RuntimeError):
            await provider_factory.create_provider("news")
    assert provider_factory.get_provider("news") is None


@pytest.mark.asyncio
async def test_create_available_skips_unconfigured(provider_factory: EvidenceProviderFactory):
    """Only providers that start are returned."""
    env = {"NEWS_API_KEY": "", "GOOGLE_FACTCHECK_API_KEY": ""}

    with patch.dict("os.environ", env):
        providers = await provider_factory.create_available()

    assert len(providers) == 1
    assert isinstance(providers[0], WikipediaEvidenceProvider)
    assert provider_factory.available_providers == {
        "wikipedia": True,
        "news": False,
        "factcheck": False,
    }
    await provider_factory.shutdown_all()


@pytest.mark.asyncio
async def test_shutdown_all(provider_factory: EvidenceProviderFactory):
    """Test shutting down every active provider."""
    provider_factory.register_provider("test", TestProvider)
    provider = await provider_factory.create_provider("test")

    await provider_factory.shutdown_all()

    assert not provider.is_available
    assert provider_factory.get_provider("test") is None
    assert provider_factory.available_providers["test"] is False
