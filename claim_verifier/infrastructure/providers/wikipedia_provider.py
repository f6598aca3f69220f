"""Wikipedia implementation of the evidence provider interface."""

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

import httpx
import wikipediaapi
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.models.evidence import Evidence, EvidenceFlags, ReferenceEvidence
from ...domain.models.source import (
    ReliabilityLevel,
    Source,
    SourceFlags,
    SourceType,
    SourceVerificationStatus,
)

logger = logging.getLogger(__name__)

BIOGRAPHY_MARKERS = re.compile(
    r"\(born\b|\bborn\s+(?:on\s+)?\w+\s+\d{1,2},?\s+\d{4}|\bis an? [a-z]+ (?:actor|actress|singer|musician|writer|director|politician)",
    re.IGNORECASE,
)


class WikipediaConfig(BaseModel):
    """Configuration for the Wikipedia provider."""

    user_agent: str = Field(
        default="ClaimVerifier/1.0",
        description="User agent for Wikipedia API"
    )
    language: str = Field(default="en", description="Wikipedia language edition")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")
    search_limit: int = Field(default=5, description="Search results to request")
    max_content_length: int = Field(default=20000, description="Longest article extract kept")
    supported_languages: Set[str] = Field(
        default={
            "en", "es", "fr", "de", "it", "pt", "nl", "pl", "ru", "ja",
            "zh", "ar", "ko", "hi", "tr", "id", "vi", "fa", "uk"
        },
        description="Supported language codes"
    )


class WikipediaEvidenceProvider:
    """Finds the most relevant Wikipedia article for a claim.

    Search goes through the MediaWiki API; the article text is fetched
    with ``wikipediaapi`` in a worker thread since that client is
    synchronous. Results are cached per claim.
    """

    def __init__(self, config: Optional[WikipediaConfig] = None):
        """Initialize the provider.

        Args:
            config: Provider configuration
        """
        self._config = config or WikipediaConfig()
        self._wiki: Optional[wikipediaapi.Wikipedia] = None
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl
        )

    async def initialize(self) -> None:
        """Initialize the Wikipedia clients."""
        if self._config.language not in self._config.supported_languages:
            raise ValueError(
                f"Language {self._config.language} not supported. "
                f"Supported languages: {sorted(self._config.supported_languages)}"
            )
        try:
            self._wiki = wikipediaapi.Wikipedia(
                language=self._config.language,
                user_agent=self._config.user_agent,
            )
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=f"https://{self._config.language}.wikipedia.org",
                    timeout=self._config.timeout,
                    headers={"User-Agent": self._config.user_agent},
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._wiki = None
            raise ConnectionError(f"Failed to initialize Wikipedia provider: {e}")

    async def provide(self, claim_text: str) -> List[Evidence]:
        """Return the top matching article as reference evidence."""
        if not self.is_available:
            logger.warning("⚠️ Wikipedia provider used before initialization")
            return []

        cache_key = f"{self._config.language}:{claim_text}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        try:
            titles = await self.search(claim_text)
            if not titles:
                logger.info(f"📭 No Wikipedia results for: {claim_text[:100]}")
                return []
            evidence = await self._article_evidence(titles[0], claim_text)
        except Exception as e:
            logger.warning(f"⚠️ Wikipedia lookup failed: {e!r}")
            return []

        result = [evidence] if evidence else []
        self._cache[cache_key] = result
        return result

    async def search(self, query: str) -> List[str]:
        """Search article titles matching a query."""
        response = await self._client.get(
            "/w/api.php",
            params={
                "action": "query",
                "list": "search",
                "srsearch": self._preprocess_query(query),
                "srlimit": self._config.search_limit,
                "srwhat": "text",
                "format": "json",
            },
        )
        response.raise_for_status()
        results = response.json().get("query", {}).get("search", [])
        return [result["title"] for result in results if result.get("title")]

    @staticmethod
    def _preprocess_query(query: str) -> str:
        query = re.sub(r"[^\w\s]", " ", query)
        return " ".join(query.split())

    async def _article_evidence(self, title: str, claim_text: str) -> Optional[ReferenceEvidence]:
        page = await asyncio.to_thread(self._wiki.page, title)
        exists = await asyncio.to_thread(page.exists)
        if not exists:
            return None
        text = await asyncio.to_thread(lambda: page.text)
        if not text:
            return None

        url = page.fullurl
        now = datetime.now(timezone.utc)
        return ReferenceEvidence(
            id=f"wiki-{page.pageid}",
            content=text[: self._config.max_content_length],
            title=page.title,
            source=self.source(now),
            timestamp=now,
            url=url,
            confidence=0.9,
            categories=["reference", "encyclopedia"],
            flags=EvidenceFlags(
                is_direct_statement=True,
                is_biographical=bool(BIOGRAPHY_MARKERS.search(text[:1000])),
            ),
            original_claim=claim_text,
        )

    def source(self, verified_at: datetime) -> Source:
        """The Wikipedia source descriptor."""
        return Source(
            id="wikipedia",
            name="Wikipedia",
            type=SourceType.REFERENCE,
            reliability_level=ReliabilityLevel.VERIFIED,
            url=f"https://{self._config.language}.wikipedia.org",
            last_verified_at=verified_at,
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["reference", "encyclopedia"],
            flags=SourceFlags(is_reference=True, language=self._config.language),
        )

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._wiki = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return "Wikipedia"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._wiki is not None and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "reference_evidence": True,
            "multi_language": True,
            "caching": True,
        }
