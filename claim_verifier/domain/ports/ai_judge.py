"""Protocol for AI judges used by the ensemble tier."""

from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field


class JudgeRole(str, Enum):
    """Position of a judge in the weighted ensemble."""

    PRIMARY = "primary"
    ENTAILMENT = "entailment"
    SECONDARY = "secondary"


class JudgeLabel(str, Enum):
    """Natural-language-inference style label."""

    ENTAILMENT = "entailment"
    CONTRADICTION = "contradiction"
    NEUTRAL = "neutral"


class JudgeVerdict(BaseModel):
    """What a judge thinks of a claim.

    ``score`` is the judge's support for the claim: 1.0 means certainly
    true, 0.0 certainly false, 0.5 undecided.
    """

    judge: str = Field(default="", description="Name of the judge")
    score: float = Field(default=0.5, ge=0.0, le=1.0, description="Support for the claim")
    label: JudgeLabel = Field(default=JudgeLabel.NEUTRAL)
    rationale: str = Field(default="", description="Judge's reasoning")

    @classmethod
    def neutral(cls, judge: str, rationale: str = "") -> "JudgeVerdict":
        """Default verdict used when a response cannot be parsed."""
        return cls(judge=judge, score=0.5, label=JudgeLabel.NEUTRAL, rationale=rationale)


class AIJudge(Protocol):
    """Protocol defining the interface for AI judges."""

    async def initialize(self) -> None:
        """Initialize the judge."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def judge(self, claim: str) -> JudgeVerdict:
        """Assess a claim.

        Raises:
            ProviderUnavailableError: If the backend cannot be reached
        """
        ...

    @property
    def provider_name(self) -> str:
        """Get the judge name."""
        ...

    @property
    def role(self) -> JudgeRole:
        """Get the judge's ensemble role."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the judge is available and ready."""
        ...
