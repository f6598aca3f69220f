"""Domain models for evidence sources."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Broad classification of where evidence comes from."""

    NEWS = "news"
    ACADEMIC = "academic"
    GOVERNMENT = "government"
    REFERENCE = "reference"
    OTHER = "other"


class ReliabilityLevel(str, Enum):
    """Trust tier assigned to a source."""

    PRIMARY = "primary"  # Official records, the subject itself
    VERIFIED = "verified"  # Professional fact-checkers, curated references
    ESTABLISHED = "established"  # Major outlets with editorial standards
    MODERATE = "moderate"
    CORROBORATED = "corroborated"  # Only trusted when backed by others
    UNVERIFIED = "unverified"


class SourceVerificationStatus(str, Enum):
    """Outcome of the last periodic source check."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    PENDING = "pending"


class SourceFlags(BaseModel):
    """Boolean traits that adjust a source's reliability score."""

    is_government: bool = Field(default=False, description="Official government body")
    is_academic: bool = Field(default=False, description="Academic or research institution")
    is_fact_checker: bool = Field(default=False, description="Professional fact-checking organisation")
    is_news: bool = Field(default=False, description="News outlet")
    is_reference: bool = Field(default=False, description="Encyclopedic or reference work")
    is_ai: bool = Field(default=False, description="Language model or classifier")
    country: Optional[str] = Field(default=None, description="ISO country code if known")
    language: Optional[str] = Field(default=None, description="ISO language code if known")


class Source(BaseModel):
    """A named origin of evidence with a trust classification.

    Sources are shared by reference between evidence items. The reliability
    level and verification status are the only fields expected to change
    after registration, and only through the registry.
    """

    id: str = Field(..., description="Stable identifier")
    name: str = Field(..., description="Human-readable name")
    type: SourceType = Field(default=SourceType.OTHER, description="Source type")
    reliability_level: ReliabilityLevel = Field(
        default=ReliabilityLevel.UNVERIFIED,
        description="Trust tier",
    )
    url: str = Field(default="", description="Homepage or canonical URL")
    last_verified_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the source was last verified",
    )
    verification_status: SourceVerificationStatus = Field(
        default=SourceVerificationStatus.PENDING,
        description="Result of the last verification sweep",
    )
    categories: List[str] = Field(default_factory=list, description="Topic categories")
    flags: SourceFlags = Field(default_factory=SourceFlags, description="Source traits")

    class Config:
        """Pydantic model configuration."""
        validate_assignment = True
