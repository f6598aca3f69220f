"""OpenAI implementation of the AI judge interface."""

import logging
from typing import Dict, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from ...domain.exceptions import ParseFailureError, ProviderUnavailableError
from ...domain.ports.ai_judge import JudgeRole, JudgeVerdict
from .verdict_parsing import VERDICT_LABELS, VERDICT_PROMPT_FORMAT, parse_verdict_text

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a fact-checking assistant. Analyze the given claim and determine "
    "if it is TRUE, FALSE, or DISPUTED. Provide your reasoning and confidence level."
)


class OpenAIJudgeConfig(BaseModel):
    """Configuration for the OpenAI judge."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4-turbo-preview", description="Chat model to use")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=500, description="Maximum tokens per response")
    timeout: float = Field(default=30.0, description="API timeout in seconds")
    default_confidence: float = Field(
        default=0.9,
        description="Confidence assumed when the reply gives a verdict but no number",
    )


class OpenAIJudge:
    """Primary ensemble judge backed by an OpenAI chat model."""

    def __init__(self, config: Optional[OpenAIJudgeConfig] = None):
        """Initialize the judge."""
        self._config = config or OpenAIJudgeConfig(api_key="")
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the API client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize OpenAI judge: OPENAI_API_KEY not set")
        try:
            if self._client is None:
                self._client = AsyncOpenAI(
                    api_key=self._config.api_key,
                    timeout=self._config.timeout,
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize OpenAI judge: {e}")

    async def judge(self, claim: str) -> JudgeVerdict:
        """Ask the model for a verdict on a claim.

        Raises:
            ProviderUnavailableError: If the API call fails
        """
        if not self._client:
            raise RuntimeError("Judge not initialized")

        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": f'Please verify this claim: "{claim}"\n\n{VERDICT_PROMPT_FORMAT}',
                    },
                ],
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except Exception as e:
            raise ProviderUnavailableError(self.provider_name, str(e)) from e

        content = response.choices[0].message.content or ""
        return self.parse(content)

    def parse(self, content: str) -> JudgeVerdict:
        """Map a reply to a support score.

        TRUE scores the stated confidence, FALSE its complement and
        DISPUTED 0.5. Unparseable replies give the neutral verdict.
        """
        try:
            verdict, confidence, reasoning = parse_verdict_text(content)
        except ParseFailureError as e:
            logger.warning(f"⚠️ Could not parse OpenAI reply: {e}")
            return JudgeVerdict.neutral(self.provider_name, "Could not parse the model's response.")

        if confidence is None:
            confidence = self._config.default_confidence
        if verdict == "TRUE":
            score = confidence
        elif verdict == "FALSE":
            score = 1.0 - confidence
        else:
            score = 0.5
        return JudgeVerdict(
            judge=self.provider_name,
            score=score,
            label=VERDICT_LABELS[verdict],
            rationale=reasoning,
        )

    async def shutdown(self) -> None:
        """Clean up resources."""
        if self._client is not None:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the judge name."""
        return "OpenAI"

    @property
    def role(self) -> JudgeRole:
        """Primary judge."""
        return JudgeRole.PRIMARY

    @property
    def is_available(self) -> bool:
        """Check if the judge is ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the judge's capabilities."""
        return {
            "claim_verification": True,
            "rationale": True,
        }
