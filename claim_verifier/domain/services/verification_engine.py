"""Core decision logic for claim verification."""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from ..models.claim import ClaimProfile
from ..models.thresholds import VerificationThresholds
from ..models.verification import (
    AggregatedEvidence,
    VerificationMetadata,
    VerificationResult,
    VerificationStatus,
    VerificationTier,
)
from ..ports.ai_judge import AIJudge
from .claim_classifier import ClaimClassifier
from .explanation_generator import ExplanationGenerator
from .source_registry import SourceRegistry
from .verification_strategies import (
    AIEnsembleStrategy,
    BiographicalStrategy,
    CurrentEventReferenceStrategy,
    EvidenceScoringStrategy,
    FactCheckStrategy,
    PredictiveClaimStrategy,
    VerificationContext,
    VerificationStrategy,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_strategies(judges: Sequence[AIJudge] = ()) -> List[VerificationStrategy]:
    """The standard chain, most decisive strategy first."""
    return [
        PredictiveClaimStrategy(),
        FactCheckStrategy(),
        CurrentEventReferenceStrategy(),
        AIEnsembleStrategy(judges),
        BiographicalStrategy(),
        EvidenceScoringStrategy(),
    ]


class VerificationEngine:
    """Turns a classified claim and its evidence into a verdict.

    Strategies are tried in order and the first one to return a result
    decides the claim. ``verify`` never raises: unexpected failures are
    logged and reported as an Unverified result with the error recorded
    in the metadata.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        classifier: Optional[ClaimClassifier] = None,
        judges: Sequence[AIJudge] = (),
        strategies: Optional[Sequence[VerificationStrategy]] = None,
        explanation_generator: Optional[ExplanationGenerator] = None,
        thresholds: Optional[VerificationThresholds] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the engine.

        Args:
            registry: Source registry shared with the aggregator
            classifier: Classifier used when no profile is supplied
            judges: AI judges for the ensemble strategy
            strategies: Custom strategy chain, replaces the default one
            explanation_generator: Fills explanations strategies leave empty
            thresholds: Cut-offs and weights
            clock: Returns the current time; injectable for tests
        """
        self._registry = registry
        self._classifier = classifier or ClaimClassifier()
        self._thresholds = thresholds or VerificationThresholds()
        self._explainer = explanation_generator or ExplanationGenerator(self._thresholds)
        self._strategies = list(strategies) if strategies is not None else default_strategies(judges)
        self._clock = clock

    @property
    def strategies(self) -> List[VerificationStrategy]:
        """The strategy chain in evaluation order."""
        return list(self._strategies)

    async def verify(
        self,
        claim: str,
        profile: Optional[ClaimProfile] = None,
        aggregation: Optional[AggregatedEvidence] = None,
    ) -> VerificationResult:
        """Verify a claim against aggregated evidence.

        Args:
            claim: Claim text
            profile: Classification of the claim, computed if missing
            aggregation: Aggregated evidence, empty if missing

        Returns:
            Verification result
        """
        claim = claim or ""
        try:
            profile = profile or self._classifier.classify(claim)
            aggregation = aggregation or AggregatedEvidence(timestamp=self._clock())
            ctx = VerificationContext(
                claim=claim,
                profile=profile,
                aggregation=aggregation,
                registry=self._registry,
                thresholds=self._thresholds,
                clock=self._clock,
            )

            result = None
            for strategy in self._strategies:
                result = await strategy.try_verify(ctx)
                if result is not None:
                    logger.info(
                        f"✅ {strategy.tier.value} decided claim: "
                        f"{result.status.value} ({result.confidence:.2f})"
                    )
                    break
            if result is None:
                result = ctx.result(VerificationStatus.UNVERIFIED, 0.0, VerificationTier.EVIDENCE_SCORING)

            if not result.evidence and result.status != VerificationStatus.UNVERIFIED:
                result = result.model_copy(update={
                    "status": VerificationStatus.UNVERIFIED,
                    "confidence": 0.0,
                    "explanation": "",
                })
            if not result.explanation:
                result = result.model_copy(
                    update={"explanation": self._explainer.explain(result, aggregation)}
                )
            return result

        except Exception as e:
            logger.exception(f"❌ Verification failed for claim: {claim[:100]}")
            return VerificationResult(
                claim=claim,
                status=VerificationStatus.UNVERIFIED,
                confidence=0.0,
                explanation="An internal error occurred while verifying this claim.",
                metadata=VerificationMetadata(
                    tier=VerificationTier.INTERNAL_FAULT,
                    error=f"{type(e).__name__}: {e}",
                ),
                timestamp=_utcnow(),
            )
