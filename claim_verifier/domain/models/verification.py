"""Domain models for verification results and related entities."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .evidence import AnyEvidence
from .source import Source


class VerificationStatus(str, Enum):
    """Possible verification outcomes."""

    VERIFIED = "verified"  # Evidence supports the claim
    FALSE = "false"  # Evidence refutes the claim
    DISPUTED = "disputed"  # Evidence conflicts
    UNVERIFIED = "unverified"  # Not enough evidence to decide


class VerificationTier(str, Enum):
    """Strategy in the verification chain that produced a verdict."""

    PREDICTIVE = "predictive"
    FACT_CHECK = "fact_check"
    CURRENT_EVENT = "current_event"
    AI_ENSEMBLE = "ai_ensemble"
    BIOGRAPHICAL = "biographical"
    EVIDENCE_SCORING = "evidence_scoring"
    INTERNAL_FAULT = "internal_fault"


class AggregatedEvidence(BaseModel):
    """Merged, deduplicated and filtered provider output."""

    evidence: List[AnyEvidence] = Field(default_factory=list, description="Surviving evidence")
    reliability_score: float = Field(default=0.0, ge=0.0, le=1.0, description="Overall reliability")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When aggregation completed",
    )

    @property
    def total_sources(self) -> int:
        """Number of evidence items that survived aggregation."""
        return len(self.evidence)

    class Config:
        """Pydantic model configuration."""
        frozen = True


class VerificationMetadata(BaseModel):
    """Numbers and flags behind a verdict."""

    contradiction_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    evidence_scores: List[float] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    tier: Optional[VerificationTier] = Field(default=None, description="Deciding strategy")
    is_temporal: bool = False
    is_factual: bool = False
    is_predictive: bool = False
    is_biographical: bool = False
    judge_scores: Dict[str, float] = Field(default_factory=dict, description="Per-judge support scores")
    error: Optional[str] = Field(default=None, description="Fault message if verification failed")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class VerificationResult(BaseModel):
    """Represents the outcome of verifying a single claim."""

    claim: str = Field(..., description="The claim that was verified")
    status: VerificationStatus = Field(..., description="Verification status")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence in the status")
    evidence: List[AnyEvidence] = Field(default_factory=list, description="Evidence considered")
    sources: List[Source] = Field(default_factory=list, description="Distinct sources behind the evidence")
    explanation: str = Field(default="", description="Human-readable explanation")
    metadata: VerificationMetadata = Field(default_factory=VerificationMetadata)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When verification was completed",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True
        json_schema_extra = {
            "example": {
                "claim": "Joe Biden is the current president of the United States",
                "status": "verified",
                "confidence": 0.98,
                "evidence": [],
                "sources": [],
                "explanation": "Wikipedia confirms this claim.",
                "metadata": {"contradiction_ratio": 0.0, "tier": "current_event"},
            }
        }
