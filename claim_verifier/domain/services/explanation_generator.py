"""Human-readable explanations for verification results."""

from typing import Optional, Sequence

from ..models.evidence import Evidence, FactCheckEvidence
from ..models.thresholds import VerificationThresholds
from ..models.verification import AggregatedEvidence, VerificationResult, VerificationStatus
from .evidence_metrics import is_encyclopedic


def _fact_check(evidence: Sequence[Evidence]) -> Optional[FactCheckEvidence]:
    for item in evidence:
        if isinstance(item, FactCheckEvidence):
            return item
    return None


def _quoted_rating(item: FactCheckEvidence) -> str:
    rating = item.textual_rating or item.rating
    if rating:
        return f'rated it "{rating}"'
    return "found it to be false"


class ExplanationGenerator:
    """Renders a verdict and its evidence as a short explanation.

    Pure: the same result and aggregation always produce the same text.
    """

    def __init__(self, thresholds: Optional[VerificationThresholds] = None):
        self._thresholds = thresholds or VerificationThresholds()

    def explain(
        self,
        result: VerificationResult,
        aggregation: Optional[AggregatedEvidence] = None,
    ) -> str:
        """Explain a verification result.

        Args:
            result: Result to explain
            aggregation: Aggregated evidence the result was based on

        Returns:
            Explanation text
        """
        if result.status == VerificationStatus.FALSE:
            return self._explain_false(result)
        if result.status == VerificationStatus.UNVERIFIED:
            return self._explain_unverified(result, aggregation)
        if result.status == VerificationStatus.DISPUTED:
            return self._explain_disputed(result)
        return self._explain_verified(result)

    def _explain_false(self, result: VerificationResult) -> str:
        explanation = "This claim has been verified as false."
        fact_check = _fact_check(result.evidence)
        if fact_check is not None:
            publisher = fact_check.publisher or fact_check.source.name
            similarity = fact_check.flags.similarity_score or 0.0
            if similarity < self._thresholds.similarity_cutoff:
                explanation += (
                    f" There is no fact-check for this exact claim, but {publisher} "
                    f"reviewed a related, not identical, claim and {_quoted_rating(fact_check)}."
                    " The specific details of this claim should be checked separately."
                )
            else:
                explanation += f" {publisher} {_quoted_rating(fact_check)}."
        elif any(is_encyclopedic(item.source) for item in result.evidence):
            explanation += " Reference material does not support it."
        return explanation

    def _explain_unverified(
        self,
        result: VerificationResult,
        aggregation: Optional[AggregatedEvidence],
    ) -> str:
        if result.metadata.is_predictive:
            return "This claim makes a prediction about the future and cannot be verified yet."
        count = len(result.evidence)
        if aggregation is not None:
            count = max(count, aggregation.total_sources)
        if count == 0:
            return "No evidence found to verify this claim."
        needed = self._thresholds.min_evidence_count - count
        if needed > 0:
            plural = "s" if needed > 1 else ""
            return (
                "Insufficient evidence found to verify this claim. "
                f"More evidence ({needed} more source{plural}) is required."
            )
        return "The available evidence is not sufficient to verify this claim."

    def _explain_disputed(self, result: VerificationResult) -> str:
        fact_check = _fact_check(result.evidence)
        if fact_check is not None and fact_check.has_conflicting_ratings:
            return (
                "Fact-checkers disagree about this claim: sources including "
                f"{fact_check.publisher or fact_check.source.name} have rated it differently."
            )
        if fact_check is not None:
            similarity = fact_check.flags.similarity_score or 0.0
            if similarity < self._thresholds.similarity_cutoff:
                return (
                    "There is no fact-check for this exact claim, but a related, not identical, "
                    "claim has been fact-checked and found to be disputed."
                )
            return f"{fact_check.publisher or fact_check.source.name} {_quoted_rating(fact_check)}."
        ratio = result.metadata.contradiction_ratio
        if ratio > 0:
            return (
                f"The evidence is contradictory: {ratio:.0%} of the evidence "
                "contradicts this claim."
            )
        return "The evidence contains contradictions, making it difficult to verify this claim."

    def _explain_verified(self, result: VerificationResult) -> str:
        names = []
        for source in result.sources:
            if source.name not in names:
                names.append(source.name)
        if names:
            return f"This claim has been verified as true based on {', '.join(names[:3])}."
        return "This claim has been verified as true based on available evidence."
