"""Service coordinating evidence gathering and claim verification."""

import asyncio
import logging
from typing import List, Optional, Sequence

from ..models.evidence import Evidence
from ..models.verification import VerificationResult
from ..ports.evidence_provider import EvidenceProvider
from .claim_classifier import ClaimClassifier
from .evidence_aggregator import EvidenceAggregator
from .verification_engine import VerificationEngine

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 20.0


class FactCheckingService:
    """Entry point for verifying a claim end to end.

    Classifies the claim, asks every provider for evidence concurrently,
    aggregates what comes back and hands it to the verification engine.
    """

    def __init__(
        self,
        providers: Sequence[EvidenceProvider],
        aggregator: EvidenceAggregator,
        engine: VerificationEngine,
        classifier: Optional[ClaimClassifier] = None,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ):
        """Initialize the service.

        Args:
            providers: Evidence providers queried for every claim
            aggregator: Merges provider output
            engine: Decides the verdict
            classifier: Claim classifier
            provider_timeout: Per-provider timeout in seconds
        """
        self._providers = list(providers)
        self._aggregator = aggregator
        self._engine = engine
        self._classifier = classifier or ClaimClassifier()
        self._provider_timeout = provider_timeout
        logger.info(f"🔧 FactCheckingService initialized with {len(self._providers)} providers")

    @property
    def providers(self) -> List[EvidenceProvider]:
        """Configured evidence providers."""
        return list(self._providers)

    async def verify_claim(self, claim_text: str) -> VerificationResult:
        """Verify a claim.

        Args:
            claim_text: Claim to verify

        Returns:
            Verification result
        """
        claim_text = claim_text or ""
        logger.info(f"🔍 Verifying claim: {claim_text[:100]}")
        profile = self._classifier.classify(claim_text)

        provider_results: List[List[Evidence]] = []
        if claim_text.strip():
            provider_results = await self.gather_evidence(claim_text)
        aggregation = self._aggregator.aggregate(claim_text, provider_results)

        result = await self._engine.verify(claim_text, profile=profile, aggregation=aggregation)
        logger.info(f"📊 Verdict: {result.status.value} ({result.confidence:.2f})")
        return result

    def verify_claim_sync(self, claim_text: str) -> VerificationResult:
        """Blocking wrapper around ``verify_claim`` for non-async callers."""
        return asyncio.run(self.verify_claim(claim_text))

    async def gather_evidence(self, claim_text: str) -> List[List[Evidence]]:
        """Query every provider concurrently.

        A provider that fails or times out contributes an empty list; it
        never prevents the others from completing.
        """
        outcomes = await asyncio.gather(
            *(
                asyncio.wait_for(provider.provide(claim_text), timeout=self._provider_timeout)
                for provider in self._providers
            ),
            return_exceptions=True,
        )

        results: List[List[Evidence]] = []
        for provider, outcome in zip(self._providers, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"⚠️ Provider {provider.provider_name} gave no evidence: {outcome!r}")
                results.append([])
                continue
            logger.info(f"📚 {provider.provider_name} returned {len(outcome)} items")
            results.append(list(outcome))
        return results
