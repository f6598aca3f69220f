"""Domain models for evidence items returned by providers."""

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field

from .source import Source


class EvidenceFlags(BaseModel):
    """Traits of a single piece of evidence."""

    is_primary_source: bool = Field(default=False, description="Comes directly from the subject")
    is_direct_statement: bool = Field(default=False, description="Directly states the claim")
    is_official_document: bool = Field(default=False, description="Official record or filing")
    is_contradictory: bool = Field(default=False, description="Contradicts the claim")
    is_biographical: bool = Field(default=False, description="Biographical text about a person")
    similarity_score: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Similarity between the claim and the text the evidence addresses",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True


class Evidence(BaseModel):
    """A retrieved text unit plus its source and flags.

    Evidence is immutable once a provider has produced it. The ``source``
    field holds the shared Source object, so the registry can swap in its
    canonical instance with ``model_copy``.
    """

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique identifier")
    content: str = Field(..., description="Evidence text")
    source: Source = Field(..., description="Where the evidence came from")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the evidence was retrieved",
    )
    url: str = Field(default="", description="Link to the evidence")
    confidence: float = Field(default=0.5, ge=0.0, le=1.0, description="Provider confidence")
    categories: List[str] = Field(default_factory=list, description="Topic categories")
    flags: EvidenceFlags = Field(default_factory=EvidenceFlags, description="Evidence traits")
    original_claim: Optional[str] = Field(
        default=None,
        description="Claim text the provider matched this evidence against",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True


class GenericEvidence(Evidence):
    """Evidence with no provider-specific fields."""

    kind: Literal["generic"] = "generic"


class FactCheckEvidence(Evidence):
    """A professional fact-check review of a claim."""

    kind: Literal["fact_check"] = "fact_check"
    rating: Optional[str] = Field(default=None, description="Normalised rating token, e.g. TRUE or FALSE")
    textual_rating: str = Field(default="", description="Rating as published")
    publisher: str = Field(default="", description="Publishing fact-checker")
    review_date: Optional[datetime] = Field(default=None, description="Date of the review")
    has_conflicting_ratings: bool = Field(
        default=False,
        description="Other publishers rated the same claim differently",
    )


class ReferenceEvidence(Evidence):
    """An encyclopedic reference article."""

    kind: Literal["reference"] = "reference"
    title: str = Field(default="", description="Article title")


class NewsEvidence(Evidence):
    """A news article excerpt."""

    kind: Literal["news"] = "news"
    headline: str = Field(default="", description="Article headline")
    published_at: Optional[datetime] = Field(default=None, description="Publication time")


class AIJudgeEvidence(Evidence):
    """The rationale returned by an AI judge."""

    kind: Literal["ai_judge"] = "ai_judge"
    judge_name: str = Field(..., description="Name of the judge")
    label: str = Field(default="neutral", description="entailment, contradiction or neutral")
    score: float = Field(default=0.5, ge=0.0, le=1.0, description="Support for the claim")


AnyEvidence = Annotated[
    Union[GenericEvidence, FactCheckEvidence, ReferenceEvidence, NewsEvidence, AIJudgeEvidence],
    Field(discriminator="kind"),
]
