"""Google Fact Check Tools implementation of the evidence provider interface."""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.models.evidence import Evidence, EvidenceFlags, FactCheckEvidence
from ...domain.models.source import (
    ReliabilityLevel,
    Source,
    SourceFlags,
    SourceType,
    SourceVerificationStatus,
)
from ...domain.services.text_analysis import extract_key_terms

logger = logging.getLogger(__name__)


class FactCheckConfig(BaseModel):
    """Configuration for the fact-check registry provider."""

    api_key: str = Field(..., description="Google Fact Check Tools API key")
    base_url: str = Field(
        default="https://factchecktools.googleapis.com/v1alpha1",
        description="Fact Check Tools API base URL",
    )
    language_code: str = Field(default="en", description="Review language")
    page_size: int = Field(default=10, description="Claims per request")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def rating_token(textual_rating: str) -> str:
    """First word of a published rating, upper-cased: "False." -> "FALSE"."""
    words = [w for w in re.split(r"[.\s]", (textual_rating or "").strip()) if w]
    return words[0].upper() if words else ""


def claim_similarity(claim: str, reviewed_claim: str) -> float:
    """Jaccard overlap of key terms between two claims."""
    left = set(extract_key_terms(claim))
    right = set(extract_key_terms(reviewed_claim))
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


class FactCheckEvidenceProvider:
    """Looks a claim up in the Google Fact Check Tools registry."""

    def __init__(self, config: Optional[FactCheckConfig] = None):
        """Initialize the provider."""
        self._config = config or FactCheckConfig(api_key="")
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError(
                "Failed to initialize fact-check provider: GOOGLE_FACTCHECK_API_KEY not set"
            )
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize fact-check provider: {e}")

    async def provide(self, claim_text: str) -> List[Evidence]:
        """Return one evidence item per reviewed claim, using its latest review."""
        if not self.is_available:
            logger.warning("⚠️ Fact-check provider used before initialization")
            return []

        for variation in (claim_text, f'"{claim_text}"'):
            try:
                claims = await self._search(variation)
            except Exception as e:
                logger.warning(f"⚠️ Fact-check search failed: {e!r}")
                return []
            if claims:
                return self.to_evidence(claim_text, claims)
        return []

    async def _search(self, query: str) -> List[Dict[str, Any]]:
        response = await self._client.get(
            "/claims:search",
            params={
                "query": query,
                "languageCode": self._config.language_code,
                "pageSize": self._config.page_size,
                "key": self._config.api_key,
            },
        )
        response.raise_for_status()
        return response.json().get("claims", [])

    def to_evidence(self, claim_text: str, claims: List[Dict[str, Any]]) -> List[Evidence]:
        """Convert API claims into fact-check evidence."""
        evidence: List[Evidence] = []
        now = datetime.now(timezone.utc)

        for claim in claims:
            reviews = claim.get("claimReview") or []
            if not reviews:
                continue

            latest = max(
                reviews,
                key=lambda r: _parse_date(r.get("reviewDate")) or datetime.min.replace(tzinfo=timezone.utc),
            )
            ratings = {rating_token(r.get("textualRating", "")) for r in reviews} - {""}
            token = rating_token(latest.get("textualRating", ""))
            publisher = (latest.get("publisher") or {}).get("name") or "Unknown"
            site = (latest.get("publisher") or {}).get("site") or ""
            review_date = _parse_date(latest.get("reviewDate"))
            reviewed_claim = claim.get("text") or ""

            content = f"Claim: {reviewed_claim}\n\nFact Check by {publisher}: {latest.get('title') or ''}"
            if token:
                content += f"\n\nRating: {token}"
            if review_date:
                content += f"\n\nReview Date: {review_date.date().isoformat()}"

            evidence.append(FactCheckEvidence(
                content=content,
                rating=token or None,
                textual_rating=latest.get("textualRating") or "",
                publisher=publisher,
                review_date=review_date,
                has_conflicting_ratings=len(ratings) > 1,
                source=Source(
                    id=re.sub(r"[^a-z0-9]+", "-", publisher.lower()).strip("-") or "unknown",
                    name=publisher,
                    type=SourceType.REFERENCE,
                    reliability_level=ReliabilityLevel.VERIFIED,
                    url=f"https://{site}" if site and not site.startswith("http") else site,
                    last_verified_at=now,
                    verification_status=SourceVerificationStatus.VERIFIED,
                    categories=["fact-checking"],
                    flags=SourceFlags(is_fact_checker=True),
                ),
                timestamp=review_date or now,
                url=latest.get("url") or "",
                confidence=0.95,
                categories=["fact-checking"],
                flags=EvidenceFlags(
                    is_contradictory=token == "FALSE",
                    is_primary_source=True,
                    is_direct_statement=True,
                    similarity_score=claim_similarity(claim_text, reviewed_claim),
                ),
                original_claim=claim_text,
            ))
        return evidence

    async def shutdown(self) -> None:
        """Clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return "Google Fact Check"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "fact_check_ratings": True,
            "conflict_detection": True,
        }
