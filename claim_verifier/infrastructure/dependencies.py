"""Dependency injection configuration for hexagonal architecture."""

import asyncio
import logging
import os
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.models.thresholds import AggregationLimits, VerificationThresholds
from ..domain.ports.source_checker import SourceChecker
from ..domain.services.claim_classifier import ClaimClassifier
from ..domain.services.evidence_aggregator import EvidenceAggregator
from ..domain.services.explanation_generator import ExplanationGenerator
from ..domain.services.fact_checking_service import FactCheckingService
from ..domain.services.source_registry import SourceRegistry
from ..domain.services.verification_engine import VerificationEngine
from .ai.factory import AIJudgeFactory
from .providers.factory import EvidenceProviderFactory
from .registry.source_checker import HttpSourceChecker

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(
        self,
        thresholds: Optional[VerificationThresholds] = None,
        limits: Optional[AggregationLimits] = None,
        source_checker: Optional[SourceChecker] = None,
    ):
        """Initialize service container."""
        self._thresholds = thresholds or VerificationThresholds()
        self._limits = limits or AggregationLimits()
        self._source_checker = source_checker or HttpSourceChecker()
        self.reverify_interval = float(os.getenv("SOURCE_REVERIFY_INTERVAL_SECONDS", "3600"))
        self._services: Dict[str, Any] = {}
        self._lock = asyncio.Lock()
        self.ai_factory = AIJudgeFactory()
        self.provider_factory = EvidenceProviderFactory()
        self._setup_services()

    def _setup_services(self):
        """Setup the services that need no network access."""
        logger.info("🔧 Setting up service container...")

        registry = SourceRegistry()
        classifier = ClaimClassifier()

        self._services = {
            'source_registry': registry,
            'claim_classifier': classifier,
            'evidence_aggregator': EvidenceAggregator(registry, limits=self._limits),
            'explanation_generator': ExplanationGenerator(self._thresholds),
            'source_checker': self._source_checker,
            'fact_checking_service': None,  # Created on demand with providers
        }

        logger.info("✅ Service container setup completed")

    async def _ensure_fact_checking_service(self) -> FactCheckingService:
        """Ensure the fact checking service is created with providers and judges."""
        async with self._lock:
            if self._services['fact_checking_service'] is None:
                logger.info("🔧 Creating FactCheckingService with providers...")
                providers = await self.provider_factory.create_available()
                judges = await self.ai_factory.create_available()
                if not providers:
                    logger.warning("⚠️ No evidence providers available - verdicts will be Unverified")

                engine = VerificationEngine(
                    registry=self.get('source_registry'),
                    classifier=self.get('claim_classifier'),
                    judges=judges,
                    explanation_generator=self.get('explanation_generator'),
                    thresholds=self._thresholds,
                )
                self._services['verification_engine'] = engine
                self._services['fact_checking_service'] = FactCheckingService(
                    providers=providers,
                    aggregator=self.get('evidence_aggregator'),
                    engine=engine,
                    classifier=self.get('claim_classifier'),
                )
                logger.info(
                    f"✅ FactCheckingService created with {len(providers)} providers "
                    f"and {len(judges)} judges"
                )

        return self._services['fact_checking_service']

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_source_registry(self) -> SourceRegistry:
        """Get the source registry."""
        return self.get('source_registry')

    async def get_fact_checking_service(self) -> FactCheckingService:
        """Get fact checking service with providers."""
        return await self._ensure_fact_checking_service()

    async def reverify_sources(self) -> Dict[str, str]:
        """Re-check stale sources in the registry."""
        updated = await self.get_source_registry().reverify_stale(self.get('source_checker'))
        return {source_id: status.value for source_id, status in updated.items()}

    async def reverify_periodically(self, interval: Optional[float] = None) -> None:
        """Sweep stale sources until cancelled.

        Args:
            interval: Seconds between sweeps, defaults to
                ``SOURCE_REVERIFY_INTERVAL_SECONDS`` (one hour)
        """
        interval = interval or self.reverify_interval
        while True:
            try:
                updated = await self.reverify_sources()
                if updated:
                    logger.info(f"🔄 Re-verified {len(updated)} sources")
            except Exception as e:
                logger.error(f"❌ Source re-verification sweep failed: {e}")
            await asyncio.sleep(interval)

    async def shutdown(self) -> None:
        """Shutdown every provider and judge."""
        await self.provider_factory.shutdown_all()
        await self.ai_factory.shutdown()
        self._services['fact_checking_service'] = None


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


async def get_fact_checking_service() -> FactCheckingService:
    """FastAPI dependency for fact checking service."""
    container = get_service_container()
    return await container.get_fact_checking_service()
