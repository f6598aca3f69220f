"""Gemini implementation of the AI judge interface."""

import logging
from datetime import date
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.exceptions import ParseFailureError, ProviderUnavailableError
from ...domain.ports.ai_judge import JudgeRole, JudgeVerdict
from .verdict_parsing import VERDICT_LABELS, VERDICT_PROMPT_FORMAT, parse_verdict_text

logger = logging.getLogger(__name__)

VERDICT_SCORES = {"TRUE": 0.9, "FALSE": 0.1, "DISPUTED": 0.5}


class GeminiJudgeConfig(BaseModel):
    """Configuration for the Gemini judge."""

    api_key: str = Field(..., description="Google AI Studio API key")
    model: str = Field(default="gemini-2.0-flash", description="Gemini model name")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL",
    )
    timeout: float = Field(default=30.0, description="API timeout in seconds")


class GeminiJudge:
    """Secondary ensemble judge backed by Google Gemini.

    Gemini is asked for a verdict only; its own confidence figure is
    ignored and the verdict maps to a fixed score.
    """

    def __init__(self, config: Optional[GeminiJudgeConfig] = None):
        """Initialize the judge."""
        self._config = config or GeminiJudgeConfig(api_key="")
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Gemini judge: GEMINI_API_KEY not set")
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    headers={"Content-Type": "application/json"},
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize Gemini judge: {e}")

    def _prompt(self, claim: str) -> str:
        return (
            "You are a fact-checking assistant specialized in current events. "
            "Verify the following claim using the most up-to-date information available. "
            "For claims about current positions or roles, such as political offices, "
            "make sure you use the most recent information.\n\n"
            f'Claim: "{claim}"\n\n'
            "If you are uncertain about current information, answer DISPUTED. "
            "Only answer TRUE if you are highly confident.\n\n"
            f"{VERDICT_PROMPT_FORMAT}\n\n"
            f"Current date: {date.today().isoformat()}"
        )

    async def judge(self, claim: str) -> JudgeVerdict:
        """Ask Gemini for a verdict on a claim.

        Raises:
            ProviderUnavailableError: If the API call fails
        """
        if not self._client:
            raise RuntimeError("Judge not initialized")

        try:
            response = await self._client.post(
                f"/models/{self._config.model}:generateContent",
                params={"key": self._config.api_key},
                json={"contents": [{"parts": [{"text": self._prompt(claim)}]}]},
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            raise ProviderUnavailableError(self.provider_name, str(e)) from e

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = ""
        return self.parse(text)

    def parse(self, text: str) -> JudgeVerdict:
        """Map a reply to a fixed support score per verdict."""
        try:
            verdict, _, reasoning = parse_verdict_text(text)
        except ParseFailureError as e:
            logger.warning(f"⚠️ Could not parse Gemini reply: {e}")
            return JudgeVerdict.neutral(self.provider_name, "Could not parse the model's response.")

        return JudgeVerdict(
            judge=self.provider_name,
            score=VERDICT_SCORES[verdict],
            label=VERDICT_LABELS[verdict],
            rationale=reasoning,
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
        return "Gemini"

    @property
    def role(self) -> JudgeRole:
        """Secondary judge."""
        return JudgeRole.SECONDARY

    @property
    def is_available(self) -> bool:
        """Check if the judge is ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the judge's capabilities."""
        return {
            "claim_verification": True,
            "current_events": True,
        }
