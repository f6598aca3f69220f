"""Tunable constants for aggregation and verification.

The defaults are hand-tuned; there is no calibration data behind them.
They are grouped here so deployments can override them in one place.
"""

from typing import List

from pydantic import BaseModel, Field


class AggregationLimits(BaseModel):
    """Filters applied by the evidence aggregator."""

    min_content_length: int = Field(default=20, description="Shortest acceptable evidence text")
    max_content_length: int = Field(default=5000, description="Longest acceptable evidence text")
    min_source_reliability: float = Field(default=0.5, description="Drop sources scoring below this")
    max_source_age_days: int = Field(default=30, description="Drop sources verified longer ago")
    biographical_reference_boost: float = Field(default=1.2)
    wikipedia_boost: float = Field(default=1.1)
    primary_source_boost: float = Field(default=1.1)
    adjusted_score_cap: float = Field(default=0.95)
    mean_score_weight: float = Field(default=0.7)
    diversity_weight: float = Field(default=0.3)


class VerificationThresholds(BaseModel):
    """Cut-offs and weights used by the verification strategies."""

    min_confidence: float = Field(default=0.6, description="Evidence scoring confidence needed for Verified")
    min_evidence_count: int = Field(default=1, description="Fewer items always yields Unverified")
    max_contradiction_ratio: float = Field(default=0.2, description="Above this evidence scoring reports Disputed")

    # Fact-check registry
    fact_check_confidence: float = Field(default=0.95)
    fact_check_disputed_confidence: float = Field(default=0.7)
    similarity_cutoff: float = Field(
        default=0.8,
        description="Below this a fact-check addressed a related claim, not the same one",
    )

    # Current events
    office_verified_confidence: float = Field(default=0.98)
    office_false_confidence: float = Field(default=0.95)
    current_event_confidence: float = Field(default=0.95)
    office_countries: List[str] = Field(
        default=[
            "united states", "usa", "u.s.",
            "united kingdom", "uk",
            "germany", "france", "canada", "australia",
        ],
        description="Countries whose head-of-government claims are checked against references",
    )

    # AI ensemble
    primary_judge_weight: float = Field(default=0.5)
    entailment_judge_weight: float = Field(default=0.2)
    secondary_judge_weight: float = Field(default=0.3)
    judge_verified_above: float = Field(default=0.7)
    judge_false_below: float = Field(default=0.3)
    judge_timeout: float = Field(default=15.0, description="Per-judge timeout in seconds")

    # Biographical
    high_reliability_score: float = Field(default=0.8)
    biographical_source_weight: float = Field(default=0.6)
    biographical_quality_weight: float = Field(default=0.4)
    biographical_no_support_confidence: float = Field(default=0.4)
    confidence_cap: float = Field(default=0.95)

    # Generic scoring
    term_match_weight: float = Field(default=0.4)
    item_reliability_weight: float = Field(default=0.3)
    specificity_weight: float = Field(default=0.3)
    contradiction_penalty: float = Field(default=0.5)
