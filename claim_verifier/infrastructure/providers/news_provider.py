"""NewsAPI implementation of the evidence provider interface."""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.models.evidence import Evidence, EvidenceFlags, NewsEvidence
from ...domain.models.source import (
    ReliabilityLevel,
    Source,
    SourceFlags,
    SourceType,
    SourceVerificationStatus,
)
from ...domain.services.claim_classifier import ClaimClassifier
from ...domain.services.text_analysis import extract_key_terms
from ...domain.services.verification_strategies import extract_person_name

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+")


class NewsConfig(BaseModel):
    """Configuration for the NewsAPI provider."""

    api_key: str = Field(..., description="NewsAPI key")
    base_url: str = Field(default="https://newsapi.org/v2", description="NewsAPI base URL")
    language: str = Field(default="en", description="Article language")
    page_size: int = Field(default=10, description="Articles per request")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    min_content_length: int = Field(default=20, description="Shortest excerpt kept")
    min_name_mentions: int = Field(
        default=3,
        description="Mentions of the person needed for a biographical article to count",
    )


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class NewsEvidenceProvider:
    """Searches recent news coverage of a claim."""

    def __init__(
        self,
        config: Optional[NewsConfig] = None,
        classifier: Optional[ClaimClassifier] = None,
    ):
        """Initialize the provider.

        Args:
            config: Provider configuration
            classifier: Used to spot biographical claims
        """
        self._config = config or NewsConfig(api_key="")
        self._classifier = classifier or ClaimClassifier()
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize news provider: NEWS_API_KEY not set")
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    headers={"X-Api-Key": self._config.api_key},
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize news provider: {e}")

    @staticmethod
    def build_query(claim_text: str) -> str:
        """Names in the claim plus its key terms, OR-joined."""
        names = [name.strip() for name in NAME_PATTERN.findall(claim_text)]
        terms = [
            term for term in extract_key_terms(claim_text)
            if not any(term in name.lower() for name in names)
        ]
        return " OR ".join([f'"{name}"' for name in names] + terms)

    async def provide(self, claim_text: str) -> List[Evidence]:
        """Return relevant article excerpts as news evidence."""
        if not self.is_available:
            logger.warning("⚠️ News provider used before initialization")
            return []

        query = self.build_query(claim_text)
        if not query:
            return []

        try:
            response = await self._client.get(
                "/everything",
                params={
                    "q": query,
                    "language": self._config.language,
                    "sortBy": "relevancy",
                    "pageSize": self._config.page_size,
                },
            )
            response.raise_for_status()
            articles = response.json().get("articles", [])
        except Exception as e:
            logger.warning(f"⚠️ NewsAPI request failed: {e!r}")
            return []

        return self.to_evidence(claim_text, articles)

    def to_evidence(self, claim_text: str, articles: List[Dict[str, Any]]) -> List[Evidence]:
        """Keep relevant articles and turn them into evidence."""
        terms = extract_key_terms(claim_text)
        person = extract_person_name(claim_text).lower() if self._classifier.is_biographical(claim_text) else ""
        evidence: List[Evidence] = []
        retrieved_at = datetime.now(timezone.utc)

        for article in articles:
            title = article.get("title") or ""
            body = article.get("content") or article.get("description") or ""
            if not self._is_relevant(title.lower(), body.lower(), terms, person):
                continue

            excerpt = self.extract_relevant_section(body, terms)
            if len(excerpt) < self._config.min_content_length:
                continue

            published = _parse_timestamp(article.get("publishedAt")) or retrieved_at
            outlet = (article.get("source") or {}).get("name") or "Unknown outlet"
            evidence.append(NewsEvidence(
                content=excerpt,
                headline=title,
                published_at=published,
                source=Source(
                    id=f"news-{_slug(outlet)}",
                    name=outlet,
                    type=SourceType.NEWS,
                    reliability_level=ReliabilityLevel.ESTABLISHED,
                    url=article.get("url") or "",
                    last_verified_at=retrieved_at,
                    verification_status=SourceVerificationStatus.VERIFIED,
                    categories=["news", "media"],
                    flags=SourceFlags(is_news=True, language=self._config.language),
                ),
                timestamp=published,
                url=article.get("url") or "",
                confidence=0.7,
                categories=["news", "media"],
                flags=EvidenceFlags(is_biographical=bool(person)),
                original_claim=claim_text,
            ))
        return evidence

    def _is_relevant(self, title: str, body: str, terms: List[str], person: str) -> bool:
        if person:
            mentions = title.count(person) + body.count(person)
            return mentions >= self._config.min_name_mentions
        return any(term in title or term in body for term in terms)

    @staticmethod
    def extract_relevant_section(text: str, terms: List[str]) -> str:
        """The paragraph containing every key term, else the first paragraph."""
        paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
        if not paragraphs:
            return ""
        best, best_hits = paragraphs[0], 0
        for paragraph in paragraphs:
            lowered = paragraph.lower()
            hits = sum(1 for term in terms if term in lowered)
            if hits > best_hits:
                best, best_hits = paragraph, hits
        if terms and best_hits >= len(terms):
            return best
        return paragraphs[0]

    async def shutdown(self) -> None:
        """Clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return "NewsAPI"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "news_search": True,
            "recency": True,
        }
