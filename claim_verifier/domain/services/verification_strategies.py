"""Verification strategies, tried in order by the verification engine.

Each strategy either decides the claim and returns a result, or returns
None to hand the claim to the next strategy in the chain.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..models.claim import ClaimProfile
from ..models.evidence import AIJudgeEvidence, Evidence, FactCheckEvidence
from ..models.source import ReliabilityLevel, Source, SourceFlags, SourceType, SourceVerificationStatus
from ..models.thresholds import VerificationThresholds
from ..models.verification import (
    AggregatedEvidence,
    VerificationMetadata,
    VerificationResult,
    VerificationStatus,
    VerificationTier,
)
from ..ports.ai_judge import AIJudge, JudgeRole, JudgeVerdict
from .evidence_metrics import (
    contradiction_ratio,
    is_encyclopedic,
    source_consistency,
    source_type_diversity,
)
from .source_registry import SourceRegistry
from .text_analysis import contains_phrase, extract_key_terms, is_current_event_claim

logger = logging.getLogger(__name__)

OFFICE_KEYWORDS = ("president", "prime minister", "chancellor")

CURRENT_POSITION_PATTERNS = [
    re.compile(r"current.*president"),
    re.compile(r"president.*of.*united.*states"),
    re.compile(r"current.*prime.*minister"),
    re.compile(r"current.*chancellor"),
    re.compile(r"\d{4}.*presidential.*election.*won"),
    re.compile(r"won.*\d{4}.*election"),
    re.compile(r"inaugurated.*\d{4}"),
    re.compile(r"current.*tenure"),
    re.compile(r"\d+th.*president"),
]

NAME_BEFORE_OFFICE = re.compile(
    r"\bis\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*?)\s+the\s+(?:president|prime minister|chancellor)",
    re.IGNORECASE,
)
NAME_IS_OFFICE = re.compile(
    r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*?)\s+is\s+the\s+(?:president|prime minister|chancellor)",
    re.IGNORECASE,
)
NAME_STOPWORDS = frozenset({
    "Is", "The", "Of", "In", "And", "Or", "But", "A", "An", "President",
    "Prime", "Minister", "Chancellor", "United", "States", "Kingdom",
})

RATING_PATTERN = re.compile(r"Rating:\s*(\w+)", re.IGNORECASE)


def extract_person_name(claim: str) -> str:
    """Pull the office holder's name out of a head-of-government claim."""
    for pattern in (NAME_BEFORE_OFFICE, NAME_IS_OFFICE):
        match = pattern.search(claim)
        if match:
            return match.group(1).strip()
    candidates = [
        word.strip("?!.,")
        for word in claim.split()
    ]
    names = [
        word for word in candidates
        if re.fullmatch(r"[A-Z][a-z]+", word) and word not in NAME_STOPWORDS
    ]
    return " ".join(names[:2])


@dataclass
class VerificationContext:
    """Everything a strategy may look at while deciding a claim."""

    claim: str
    profile: ClaimProfile
    aggregation: AggregatedEvidence
    registry: SourceRegistry
    thresholds: VerificationThresholds = field(default_factory=VerificationThresholds)
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

    @property
    def evidence(self) -> List[Evidence]:
        return list(self.aggregation.evidence)

    @property
    def current_year(self) -> int:
        return self.clock().year

    def result(
        self,
        status: VerificationStatus,
        confidence: float,
        tier: VerificationTier,
        evidence: Optional[Sequence[Evidence]] = None,
        explanation: str = "",
        evidence_scores: Optional[List[float]] = None,
        categories: Optional[List[str]] = None,
        judge_scores: Optional[Dict[str, float]] = None,
    ) -> VerificationResult:
        """Build a result carrying this context's profile flags."""
        items = list(self.evidence if evidence is None else evidence)
        sources: List[Source] = []
        for item in items:
            if all(item.source.id != s.id for s in sources):
                sources.append(item.source)
        metadata = VerificationMetadata(
            contradiction_ratio=contradiction_ratio(items),
            evidence_scores=evidence_scores or [],
            categories=categories if categories is not None else list(self.profile.categories),
            tier=tier,
            is_temporal=self.profile.is_temporal,
            is_factual=self.profile.is_factual,
            is_predictive=self.profile.is_predictive,
            is_biographical=self.profile.is_biographical,
            judge_scores=judge_scores or {},
        )
        return VerificationResult(
            claim=self.claim,
            status=status,
            confidence=min(1.0, max(0.0, confidence)),
            evidence=items,
            sources=sources,
            explanation=explanation,
            metadata=metadata,
            timestamp=self.clock(),
        )


class VerificationStrategy(ABC):
    """One link in the verification chain."""

    tier: VerificationTier

    @abstractmethod
    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        """Decide the claim, or return None to defer to the next strategy."""


class PredictiveClaimStrategy(VerificationStrategy):
    """Claims about the future cannot be verified yet, whatever the evidence."""

    tier = VerificationTier.PREDICTIVE

    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        if not ctx.profile.is_predictive:
            return None
        return ctx.result(VerificationStatus.UNVERIFIED, 0.0, self.tier)


class FactCheckStrategy(VerificationStrategy):
    """Defers to the first professional fact-check that carries a rating."""

    tier = VerificationTier.FACT_CHECK

    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        thresholds = ctx.thresholds
        for item in ctx.evidence:
            if not (isinstance(item, FactCheckEvidence) or item.source.flags.is_fact_checker):
                continue

            rating = self._rating(item)
            if rating is None:
                if item.flags.is_contradictory:
                    return ctx.result(
                        VerificationStatus.FALSE,
                        thresholds.fact_check_confidence,
                        self.tier,
                        evidence=[item],
                        categories=["fact-check"],
                    )
                continue

            if rating == "TRUE":
                status, confidence = VerificationStatus.VERIFIED, thresholds.fact_check_confidence
            elif rating == "FALSE":
                status, confidence = VerificationStatus.FALSE, thresholds.fact_check_confidence
            else:
                status, confidence = VerificationStatus.DISPUTED, thresholds.fact_check_disputed_confidence
            logger.info(f"📋 Fact-check by {item.source.name} rated claim {rating}")
            return ctx.result(
                status,
                confidence,
                self.tier,
                evidence=[item],
                evidence_scores=[confidence],
                categories=["fact-check"],
            )
        return None

    @staticmethod
    def _rating(item: Evidence) -> Optional[str]:
        if isinstance(item, FactCheckEvidence) and item.rating:
            return item.rating.upper()
        match = RATING_PATTERN.search(item.content)
        if match:
            return match.group(1).upper()
        return None


class CurrentEventReferenceStrategy(VerificationStrategy):
    """Checks claims about the present against reference evidence."""

    tier = VerificationTier.CURRENT_EVENT

    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        reference = self._reference_evidence(ctx.evidence)
        if reference is None or not is_current_event_claim(ctx.claim, ctx.current_year):
            return None

        thresholds = ctx.thresholds
        content = reference.content.lower()

        if self.is_office_claim(ctx.claim, thresholds.office_countries):
            supported = self.supports_office_claim(ctx.claim, content)
            confidence = (
                thresholds.office_verified_confidence if supported
                else thresholds.office_false_confidence
            )
            categories = ["current-events", "politics"]
        else:
            terms = extract_key_terms(ctx.claim)
            supported = bool(terms) and all(term in content for term in terms)
            confidence = thresholds.current_event_confidence
            categories = ["current-events", "general"] if supported else ["current-events"]

        status = VerificationStatus.VERIFIED if supported else VerificationStatus.FALSE
        logger.info(f"🗞️ Current-event claim {status.value} by {reference.source.name}")
        return ctx.result(
            status,
            confidence,
            self.tier,
            evidence=[reference],
            explanation=f"This claim has been {'verified' if supported else 'contradicted'} by {reference.source.name}.",
            evidence_scores=[confidence],
            categories=categories,
        )

    @staticmethod
    def _reference_evidence(evidence: Sequence[Evidence]) -> Optional[Evidence]:
        references = [
            item for item in evidence
            if item.source.type == SourceType.REFERENCE and not item.source.flags.is_fact_checker
        ]
        for item in references:
            if is_encyclopedic(item.source):
                return item
        return references[0] if references else None

    @staticmethod
    def is_office_claim(claim: str, countries: Sequence[str]) -> bool:
        """Head-of-government claim about a country on the allow-list."""
        lowered = claim.lower()
        has_office = any(contains_phrase(lowered, office) for office in OFFICE_KEYWORDS)
        has_country = any(contains_phrase(lowered, country) for country in countries)
        return has_office and has_country

    @staticmethod
    def supports_office_claim(claim: str, content: str) -> bool:
        """Check the reference names the person and places them in office."""
        name_tokens = extract_person_name(claim).lower().split()
        if not name_tokens or not all(token in content for token in name_tokens):
            return False
        if any(pattern.search(content) for pattern in CURRENT_POSITION_PATTERNS):
            return True
        return any(office in content for office in OFFICE_KEYWORDS)


class AIEnsembleStrategy(VerificationStrategy):
    """Weighted vote of AI judges run concurrently.

    Judges are only consulted when providers found some evidence.
    """

    tier = VerificationTier.AI_ENSEMBLE

    def __init__(self, judges: Sequence[AIJudge]):
        self._judges = list(judges)

    def _weight(self, role: JudgeRole, thresholds: VerificationThresholds) -> float:
        return {
            JudgeRole.PRIMARY: thresholds.primary_judge_weight,
            JudgeRole.ENTAILMENT: thresholds.entailment_judge_weight,
            JudgeRole.SECONDARY: thresholds.secondary_judge_weight,
        }[role]

    async def _run(self, ctx: VerificationContext) -> List[Tuple[AIJudge, JudgeVerdict]]:
        timeout = ctx.thresholds.judge_timeout
        outcomes = await asyncio.gather(
            *(asyncio.wait_for(judge.judge(ctx.claim), timeout=timeout) for judge in self._judges),
            return_exceptions=True,
        )
        survivors = []
        for judge, outcome in zip(self._judges, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"⚠️ Judge {judge.provider_name} failed: {outcome!r}")
                continue
            survivors.append((judge, outcome))
        return survivors

    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        if not self._judges or not ctx.evidence:
            return None

        survivors = await self._run(ctx)
        if not survivors:
            logger.warning("⚠️ No AI judge returned a verdict")
            return None

        thresholds = ctx.thresholds
        weights = [self._weight(judge.role, thresholds) for judge, _ in survivors]
        total_weight = sum(weights)
        if total_weight <= 0:
            return None
        score = sum(w * verdict.score for w, (_, verdict) in zip(weights, survivors)) / total_weight

        if score > thresholds.judge_verified_above:
            status = VerificationStatus.VERIFIED
        elif score < thresholds.judge_false_below:
            status = VerificationStatus.FALSE
        else:
            status = VerificationStatus.DISPUTED

        _, best = max(survivors, key=lambda pair: pair[1].score)
        judge_evidence = [self._as_evidence(ctx, judge, verdict) for judge, verdict in survivors]
        logger.info(f"🤖 Ensemble of {len(survivors)} judges scored {score:.2f}: {status.value}")
        return ctx.result(
            status,
            score,
            self.tier,
            evidence=ctx.evidence + judge_evidence,
            explanation=best.rationale,
            evidence_scores=[verdict.score for _, verdict in survivors],
            judge_scores={judge.provider_name: verdict.score for judge, verdict in survivors},
        )

    @staticmethod
    def _as_evidence(ctx: VerificationContext, judge: AIJudge, verdict: JudgeVerdict) -> AIJudgeEvidence:
        name = judge.provider_name
        source = ctx.registry.register_or_get(Source(
            id=f"ai-{name.lower().replace(' ', '-')}",
            name=name,
            type=SourceType.OTHER,
            reliability_level=ReliabilityLevel.MODERATE,
            verification_status=SourceVerificationStatus.PENDING,
            categories=["ai"],
            flags=SourceFlags(is_ai=True),
        ))
        return AIJudgeEvidence(
            content=verdict.rationale or f"{name} assessed the claim as {verdict.label.value}.",
            source=source,
            confidence=verdict.score,
            judge_name=name,
            label=verdict.label.value,
            score=verdict.score,
            original_claim=ctx.claim,
            timestamp=ctx.clock(),
        )


class BiographicalStrategy(VerificationStrategy):
    """Stricter checks for claims about a person's life and career."""

    tier = VerificationTier.BIOGRAPHICAL

    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        evidence = ctx.evidence
        if not ctx.profile.is_biographical or not evidence:
            return None

        thresholds = ctx.thresholds
        registry = ctx.registry
        has_reliable_source = any(
            registry.reliability_score(item.source) >= thresholds.high_reliability_score
            or item.source.type in (SourceType.REFERENCE, SourceType.ACADEMIC)
            for item in evidence
        )
        if not has_reliable_source:
            return ctx.result(VerificationStatus.UNVERIFIED, 0.0, self.tier)

        terms = extract_key_terms(ctx.claim)
        has_direct_support = bool(terms) and any(
            all(term in item.content.lower() for term in terms) for item in evidence
        )
        if not has_direct_support:
            return ctx.result(
                VerificationStatus.UNVERIFIED,
                thresholds.biographical_no_support_confidence,
                self.tier,
            )

        confidence = self.confidence(ctx)
        if any(is_encyclopedic(item.source) for item in evidence):
            confidence = min(confidence * 1.1, thresholds.confidence_cap)
        return ctx.result(VerificationStatus.VERIFIED, confidence, self.tier)

    @staticmethod
    def confidence(ctx: VerificationContext) -> float:
        """Blend of adjusted source scores and evidence quality."""
        evidence = ctx.evidence
        thresholds = ctx.thresholds
        cap = thresholds.confidence_cap

        scores = []
        for item in evidence:
            score = ctx.registry.reliability_score(item.source)
            if is_encyclopedic(item.source):
                score = min(score * 1.2, cap)
            if item.source.type == SourceType.ACADEMIC:
                score = min(score * 1.1, cap)
            scores.append(score)
        source_score = sum(scores) / len(scores)

        quality = 0.0
        for item in evidence:
            flags = item.flags
            item_quality = (
                (0.3 if flags.is_direct_statement else 0.0)
                + (0.2 if flags.is_official_document else 0.0)
                + (0.1 if flags.is_primary_source else 0.0)
                + (0.1 if flags.is_biographical else 0.0)
            )
            quality += min(item_quality, 0.5)
        quality /= len(evidence)

        return (
            thresholds.biographical_source_weight * source_score
            + thresholds.biographical_quality_weight * quality
        )


class EvidenceScoringStrategy(VerificationStrategy):
    """Generic fallback: scores every item and blends the results."""

    tier = VerificationTier.EVIDENCE_SCORING

    async def try_verify(self, ctx: VerificationContext) -> Optional[VerificationResult]:
        evidence = ctx.evidence
        thresholds = ctx.thresholds
        if len(evidence) < thresholds.min_evidence_count:
            return ctx.result(
                VerificationStatus.UNVERIFIED,
                ctx.aggregation.reliability_score if evidence else 0.0,
                self.tier,
            )

        item_scores = [self.item_score(ctx, item) for item in evidence]
        ratio = contradiction_ratio(evidence)
        mean_score = sum(item_scores) / len(item_scores)
        confidence = (
            0.4 * mean_score
            + 0.2 * ctx.aggregation.reliability_score
            + 0.2 * source_type_diversity(evidence)
            + 0.2 * source_consistency(evidence)
        ) * (1 - thresholds.contradiction_penalty * ratio)
        confidence = min(1.0, max(0.0, confidence))

        conflicting = any(
            isinstance(item, FactCheckEvidence) and item.has_conflicting_ratings
            for item in evidence
        )
        if ratio > thresholds.max_contradiction_ratio or conflicting:
            status = VerificationStatus.DISPUTED
        elif confidence >= thresholds.min_confidence:
            status = VerificationStatus.VERIFIED
        else:
            status = VerificationStatus.UNVERIFIED

        return ctx.result(status, confidence, self.tier, evidence_scores=item_scores)

    @staticmethod
    def item_score(ctx: VerificationContext, item: Evidence) -> float:
        """Score one item by term match, source reliability and specificity."""
        thresholds = ctx.thresholds
        terms = extract_key_terms(item.original_claim or ctx.claim)
        content = item.content.lower()
        matched = [term for term in terms if term in content]
        term_match = len(matched) / len(terms) if terms else 0.0
        return (
            thresholds.term_match_weight * term_match
            + thresholds.item_reliability_weight * ctx.registry.reliability_score(item.source)
            + thresholds.specificity_weight * EvidenceScoringStrategy.specificity(content, terms)
        )

    @staticmethod
    def specificity(content: str, terms: Sequence[str]) -> float:
        """Term density and coverage, halved for long text with few key terms."""
        words = content.split()
        if not words or not terms:
            return 0.0
        matched = sum(1 for term in terms if term in content)
        density = matched / len(words)
        coverage = matched / len(terms)
        penalty = 0.5 if len(words) > 100 and density < 0.1 else 1.0
        return (0.4 * density + 0.6 * coverage) * penalty
