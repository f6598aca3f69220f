"""Tests for the FastAPI application."""

import asyncio
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, List
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

import claim_verifier.api.app as app_module
from claim_verifier.api.app import app
from claim_verifier.api.endpoints import health, verify
from claim_verifier.domain.models.evidence import Evidence, GenericEvidence
from claim_verifier.domain.models.source import Source, SourceType
from claim_verifier.domain.models.verification import (
    VerificationMetadata,
    VerificationResult,
    VerificationStatus,
    VerificationTier,
)
from claim_verifier.infrastructure.dependencies import ServiceContainer, get_fact_checking_service


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
        """Get capabilities."""
        return {}


class StubService:
    """Fact checking service returning a canned verdict."""

    def __init__(self, error: Exception = None):
        self.claims = []
        self._error = error

    async def verify_claim(self, claim_text: str) -> VerificationResult:
        self.claims.append(claim_text)
        if self._error is not None:
            raise self._error
        source = Source(id="wikipedia", name="Wikipedia", type=SourceType.REFERENCE)
        return VerificationResult(
            claim=claim_text,
            status=VerificationStatus.VERIFIED,
            confidence=0.98,
            evidence=[GenericEvidence(content="Paris is the capital and largest city of France.", source=source)],
            sources=[source],
            explanation="Wikipedia confirms this claim.",
            metadata=VerificationMetadata(tier=VerificationTier.EVIDENCE_SCORING),
        )


@pytest.fixture
def test_client() -> TestClient:
    """Create a test client without running startup."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def container(monkeypatch) -> ServiceContainer:
    """A fresh container with one active test provider."""
    container = ServiceContainer()
    container.provider_factory.register_provider("test", TestProvider)
    asyncio.run(container.provider_factory.create_provider("test"))
    container.get_source_registry().register_or_get(Source(id="daily-planet", name="Daily Planet"))
    monkeypatch.setattr(health, "get_service_container", lambda: container)
    monkeypatch.setattr(verify, "get_service_container", lambda: container)
    return container


def test_health_check(test_client: TestClient, container: ServiceContainer):
    """Test health check endpoint."""
    response = test_client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["evidence_providers"]["Test"] is True
    assert data["evidence_providers"]["Wikipedia"] is False
    assert data["ai_judges"] == {"Openai": False, "Gemini": False, "Huggingface": False}
    assert data["registered_sources"] == len(container.get_source_registry())
    assert "daily-planet" in container.get_source_registry()


def test_verify_claim(test_client: TestClient):
    """Test claim verification endpoint."""
    service = StubService()
    app.dependency_overrides[get_fact_checking_service] = lambda: service

    response = test_client.post("/verify", json={"claim": "Paris is the capital of France"})
    assert response.status_code == 200

    data = response.json()
    assert service.claims == ["Paris is the capital of France"]
    assert data["status"] == "verified"
    assert data["confidence"] == pytest.approx(0.98)
    assert data["evidence"][0]["kind"] == "generic"
    assert data["sources"][0]["id"] == "wikipedia"
    assert data["metadata"]["tier"] == "evidence_scoring"


def test_verify_requires_claim(test_client: TestClient):
    """Requests without a claim are rejected."""
    app.dependency_overrides[get_fact_checking_service] = lambda: StubService()

    response = test_client.post("/verify", json={})

    assert response.status_code == 422


def test_verify_failure(test_client: TestClient):
    """Service errors become a 500 response."""
    app.dependency_overrides[get_fact_checking_service] = lambda: StubService(RuntimeError("boom"))

    response = test_client.post("/verify", json={"claim": "Paris is the capital of France"})

    assert response.status_code == 500
    assert "boom" in response.json()["detail"]


def test_reverify_sources(test_client: TestClient, container: ServiceContainer):
    """Fresh sources are left alone by re-verification."""
    response = test_client.post("/sources/reverify")

    assert response.status_code == 200
    assert response.json() == {"updated": {}}


def test_lifespan_starts_source_sweep(monkeypatch):
    """Startup launches the periodic source re-verification."""
    checked = threading.Event()

    async def check(source: Source) -> bool:
        checked.set()
        return True

    checker = AsyncMock()
    checker.check.side_effect = check
    container = ServiceContainer(source_checker=checker)
    container.get_fact_checking_service = AsyncMock()
    container.get_source_registry().register_or_get(Source(
        id="daily-planet",
        name="Daily Planet",
        last_verified_at=datetime.now(timezone.utc) - timedelta(days=2),
    ))
    monkeypatch.setattr(app_module, "get_service_container", lambda: container)

    with TestClient(app):
        assert checked.wait(timeout=5)

    container.get_fact_checking_service.assert_awaited_once()
