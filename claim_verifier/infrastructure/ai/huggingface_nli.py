"""Hugging Face zero-shot NLI implementation of the AI judge interface."""

import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.exceptions import ProviderUnavailableError
from ...domain.ports.ai_judge import JudgeLabel, JudgeRole, JudgeVerdict

logger = logging.getLogger(__name__)

CANDIDATE_LABELS = ["entailment", "contradiction", "neutral"]


class HuggingFaceNLIConfig(BaseModel):
    """Configuration for the Hugging Face NLI judge."""

    api_token: str = Field(..., description="Hugging Face API token")
    model: str = Field(default="facebook/bart-large-mnli", description="Zero-shot classification model")
    base_url: str = Field(
        default="https://api-inference.huggingface.co/models",
        description="Inference API base URL",
    )
    timeout: float = Field(default=30.0, description="API timeout in seconds")


class HuggingFaceNLIJudge:
    """Entailment judge using a zero-shot NLI classifier."""

    def __init__(self, config: Optional[HuggingFaceNLIConfig] = None):
        """Initialize the judge."""
        self._config = config or HuggingFaceNLIConfig(api_token="")
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_token:
            raise ConnectionError("Failed to initialize Hugging Face judge: HUGGINGFACE_API_TOKEN not set")
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    headers={
                        "Authorization": f"Bearer {self._config.api_token}",
                        "Content-Type": "application/json",
                    },
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize Hugging Face judge: {e}")

    async def judge(self, claim: str) -> JudgeVerdict:
        """Classify a claim as entailment, contradiction or neutral.

        Raises:
            ProviderUnavailableError: If the API call fails
        """
        if not self._client:
            raise RuntimeError("Judge not initialized")

        try:
            response = await self._client.post(
                f"/{self._config.model}",
                json={
                    "inputs": claim,
                    "parameters": {"candidate_labels": CANDIDATE_LABELS},
                },
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            raise ProviderUnavailableError(self.provider_name, str(e)) from e

        return self.parse(data)

    def parse(self, data: Dict) -> JudgeVerdict:
        """Turn the top label into a support score.

        Entailment scores the label probability, contradiction its
        complement and neutral 0.5.
        """
        try:
            labels = data["labels"]
            scores = data["scores"]
            best = max(range(len(scores)), key=lambda i: scores[i])
            label = JudgeLabel(labels[best])
            probability = float(scores[best])
        except (KeyError, TypeError, ValueError, IndexError) as e:
            logger.warning(f"⚠️ Could not parse Hugging Face reply: {e!r}")
            return JudgeVerdict.neutral(self.provider_name, "Could not parse the classifier output.")

        if label == JudgeLabel.ENTAILMENT:
            score = probability
        elif label == JudgeLabel.CONTRADICTION:
            score = 1.0 - probability
        else:
            score = 0.5
        return JudgeVerdict(
            judge=self.provider_name,
            score=max(0.0, min(1.0, score)),
            label=label,
            rationale=(
                f"The NLI model classified this claim as {label.value} "
                f"with a score of {probability:.2f}."
            ),
        )

    async def shutdown(self) -> None:
        """Clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the judge name."""
        return "HuggingFace NLI"

    @property
    def role(self) -> JudgeRole:
        """Entailment judge."""
        return JudgeRole.ENTAILMENT

    @property
    def is_available(self) -> bool:
        """Check if the judge is ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the judge's capabilities."""
        return {
            "claim_verification": True,
            "entailment": True,
        }
