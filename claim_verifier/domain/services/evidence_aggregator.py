"""Merging and filtering of provider output."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from ..models.evidence import Evidence
from ..models.source import SourceType
from ..models.thresholds import AggregationLimits
from ..models.verification import AggregatedEvidence
from .evidence_metrics import is_encyclopedic, source_type_diversity
from .source_registry import SourceRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EvidenceAggregator:
    """Combines evidence lists from several providers into one scored set.

    Every source seen is registered with the registry, and evidence is
    rebound to the registry's canonical Source so that later status
    updates are visible through it. A provider returning a known source
    again refreshes its verification time.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        limits: Optional[AggregationLimits] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the aggregator.

        Args:
            registry: Source registry used for scoring and registration
            limits: Filter limits and score weights
            clock: Returns the current time; injectable for tests
        """
        self._registry = registry
        self._limits = limits or AggregationLimits()
        self._clock = clock

    def aggregate(
        self,
        claim: str,
        provider_results: Iterable[Sequence[Evidence]],
    ) -> AggregatedEvidence:
        """Merge, deduplicate and filter provider results.

        Args:
            claim: The claim under verification
            provider_results: One evidence list per provider

        Returns:
            Surviving evidence and its overall reliability score
        """
        flattened = [item for result in provider_results for item in result]
        if not flattened:
            logger.info(f"📭 No evidence gathered for claim: {claim[:100]}")
            return AggregatedEvidence(timestamp=self._clock())

        canonical = [self._bind_source(item) for item in flattened]
        unique = self._deduplicate(canonical)
        kept = [item for item in unique if self._passes_filters(item)]

        logger.info(
            f"🧮 Aggregated {len(flattened)} items into {len(kept)} "
            f"({len(flattened) - len(unique)} duplicates)"
        )
        return AggregatedEvidence(
            evidence=kept,
            reliability_score=self.reliability(kept),
            timestamp=self._clock(),
        )

    def adjusted_score(self, item: Evidence) -> float:
        """Source reliability with boosts for biographical, Wikipedia and primary evidence."""
        limits = self._limits
        score = self._registry.reliability_score(item.source)
        if item.flags.is_biographical and item.source.type == SourceType.REFERENCE:
            score = min(score * limits.biographical_reference_boost, limits.adjusted_score_cap)
        if is_encyclopedic(item.source):
            score = min(score * limits.wikipedia_boost, limits.adjusted_score_cap)
        if item.flags.is_primary_source:
            score = min(score * limits.primary_source_boost, limits.adjusted_score_cap)
        return score

    def reliability(self, evidence: Sequence[Evidence]) -> float:
        """Overall reliability of an evidence set, 0 when empty."""
        if not evidence:
            return 0.0
        mean_score = sum(self.adjusted_score(item) for item in evidence) / len(evidence)
        score = (
            self._limits.mean_score_weight * mean_score
            + self._limits.diversity_weight * source_type_diversity(evidence)
        )
        return min(1.0, max(0.0, score))

    def _bind_source(self, item: Evidence) -> Evidence:
        source = self._registry.register_or_refresh(item.source)
        if source is item.source:
            return item
        return item.model_copy(update={"source": source})

    @staticmethod
    def _deduplicate(evidence: List[Evidence]) -> List[Evidence]:
        seen = set()
        unique = []
        for item in evidence:
            if item.content in seen:
                continue
            seen.add(item.content)
            unique.append(item)
        return unique

    def _passes_filters(self, item: Evidence) -> bool:
        limits = self._limits
        exempt = is_encyclopedic(item.source)

        length = len(item.content)
        if not exempt and not limits.min_content_length <= length <= limits.max_content_length:
            logger.debug(f"✂️ Dropping evidence {item.id}: length {length}")
            return False

        score = self._registry.reliability_score(item.source)
        if score < limits.min_source_reliability:
            logger.debug(f"✂️ Dropping evidence {item.id}: source {item.source.id} scores {score:.2f}")
            return False

        age = self._clock() - item.source.last_verified_at
        if not exempt and age > timedelta(days=limits.max_source_age_days):
            logger.debug(f"✂️ Dropping evidence {item.id}: source verified {age.days} days ago")
            return False

        return True
