"""Registry of evidence sources and their reliability scores."""

import asyncio
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from ..models.source import (
    ReliabilityLevel,
    Source,
    SourceFlags,
    SourceType,
    SourceVerificationStatus,
)
from ..ports.source_checker import SourceChecker

logger = logging.getLogger(__name__)

BASE_SCORES: Dict[ReliabilityLevel, float] = {
    ReliabilityLevel.PRIMARY: 1.0,
    ReliabilityLevel.VERIFIED: 0.9,
    ReliabilityLevel.ESTABLISHED: 0.8,
    ReliabilityLevel.MODERATE: 0.75,
    ReliabilityLevel.CORROBORATED: 0.6,
    ReliabilityLevel.UNVERIFIED: 0.3,
}

ESTABLISHED_FACT_CHECKERS = ("snopes", "factcheck.org", "reuters fact check")

DEFAULT_VERIFICATION_INTERVAL = timedelta(hours=24)


def reliability_score(source: Source) -> float:
    """Compute a source's reliability score in [0, 1].

    The score starts from the reliability level and is multiplied by
    adjustments for verification status and source traits. The
    adjustments commute, so their order does not matter. The result is
    capped at 1.0.

    Args:
        source: Source to score

    Returns:
        Reliability score
    """
    score = BASE_SCORES[source.reliability_level]

    if source.verification_status == SourceVerificationStatus.VERIFIED:
        score *= 1.1
    elif source.verification_status == SourceVerificationStatus.UNVERIFIED:
        score *= 0.5

    flags = source.flags
    if flags.is_government:
        score *= 1.2
    if flags.is_fact_checker:
        score *= 1.3
        if any(name in source.name.lower() for name in ESTABLISHED_FACT_CHECKERS):
            score *= 1.1
    if flags.is_academic:
        score *= 1.1
    if flags.is_news and flags.is_reference:
        score *= 1.15

    return min(1.0, max(0.0, score))


def default_sources() -> List[Source]:
    """Seed sources every registry starts with unless told otherwise."""
    return [
        Source(
            id="whitehouse-gov",
            name="The White House",
            type=SourceType.GOVERNMENT,
            reliability_level=ReliabilityLevel.PRIMARY,
            url="https://www.whitehouse.gov",
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["government", "politics", "policy"],
            flags=SourceFlags(is_government=True, country="USA", language="en"),
        ),
        Source(
            id="snopes",
            name="Snopes",
            type=SourceType.REFERENCE,
            reliability_level=ReliabilityLevel.VERIFIED,
            url="https://www.snopes.com",
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["fact-checking", "misinformation"],
            flags=SourceFlags(is_fact_checker=True, language="en"),
        ),
        Source(
            id="factcheck-org",
            name="FactCheck.org",
            type=SourceType.REFERENCE,
            reliability_level=ReliabilityLevel.VERIFIED,
            url="https://www.factcheck.org",
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["fact-checking", "politics"],
            flags=SourceFlags(is_fact_checker=True, language="en"),
        ),
        Source(
            id="reuters-factcheck",
            name="Reuters Fact Check",
            type=SourceType.REFERENCE,
            reliability_level=ReliabilityLevel.VERIFIED,
            url="https://www.reuters.com/fact-check",
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["fact-checking", "news"],
            flags=SourceFlags(is_fact_checker=True, is_news=True, language="en"),
        ),
        Source(
            id="reuters",
            name="Reuters",
            type=SourceType.NEWS,
            reliability_level=ReliabilityLevel.ESTABLISHED,
            url="https://www.reuters.com",
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["news", "world"],
            flags=SourceFlags(is_news=True, language="en"),
        ),
        Source(
            id="arxiv",
            name="arXiv",
            type=SourceType.ACADEMIC,
            reliability_level=ReliabilityLevel.VERIFIED,
            url="https://arxiv.org",
            verification_status=SourceVerificationStatus.VERIFIED,
            categories=["research", "academic", "science"],
            flags=SourceFlags(is_academic=True, language="en"),
        ),
    ]


class SourceRegistry:
    """Holds the known sources for one process.

    Reads need no locking. Status updates happen only through
    ``update_verification`` and ``register_or_refresh`` and take a
    per-source lock.
    """

    def __init__(self, sources: Optional[Iterable[Source]] = None):
        """Initialize the registry.

        Args:
            sources: Initial sources, defaults to ``default_sources()``
        """
        self._sources: Dict[str, Source] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        for source in default_sources() if sources is None else sources:
            self.register_or_get(source)

    def register_or_get(self, source: Source) -> Source:
        """Return the canonical source with this id, registering it on first sight.

        Args:
            source: Source descriptor

        Returns:
            The registered Source instance
        """
        existing = self._sources.get(source.id)
        if existing is not None:
            return existing
        with self._registry_lock:
            existing = self._sources.get(source.id)
            if existing is None:
                self._sources[source.id] = source
                self._locks[source.id] = threading.Lock()
                logger.info(f"📇 Registered source {source.id} ({source.name})")
                existing = source
        return existing

    def register_or_refresh(self, source: Source) -> Source:
        """Return the canonical source, refreshing it from a newer attestation.

        Works like ``register_or_get``, but when the descriptor was verified
        more recently than the canonical source, the canonical
        ``last_verified_at`` moves forward. Providers stamp the sources they
        return with the retrieval time, so a source that keeps answering
        stays fresh. The verification status is left to ``reverify_stale``.

        Args:
            source: Source descriptor from a provider

        Returns:
            The registered Source instance
        """
        canonical = self.register_or_get(source)
        if canonical is source or source.last_verified_at <= canonical.last_verified_at:
            return canonical
        with self._locks[canonical.id]:
            if source.last_verified_at > canonical.last_verified_at:
                canonical.last_verified_at = source.last_verified_at
        return canonical

    def get(self, source_id: str) -> Optional[Source]:
        """Get a registered source by id."""
        return self._sources.get(source_id)

    def reliability_score(self, source: Source) -> float:
        """Score a source; see ``reliability_score``."""
        return reliability_score(source)

    def sources_by_reliability(self, level: ReliabilityLevel) -> List[Source]:
        """Get all sources at a reliability level."""
        return [s for s in self._sources.values() if s.reliability_level == level]

    def sources_by_category(self, category: str) -> List[Source]:
        """Get all sources tagged with a category."""
        return [s for s in self._sources.values() if category in s.categories]

    def update_verification(
        self,
        source_id: str,
        status: SourceVerificationStatus,
        verified_at: Optional[datetime] = None,
        reliability_level: Optional[ReliabilityLevel] = None,
    ) -> Source:
        """Record the result of a source check.

        Args:
            source_id: Source to update
            status: New verification status
            verified_at: Time of the check, defaults to now
            reliability_level: Optional new reliability level

        Returns:
            The updated source

        Raises:
            KeyError: If the source is not registered
        """
        if source_id not in self._sources:
            raise KeyError(f"Source '{source_id}' not registered")
        with self._locks[source_id]:
            source = self._sources[source_id]
            source.verification_status = status
            source.last_verified_at = verified_at or datetime.now(timezone.utc)
            if reliability_level is not None:
                source.reliability_level = reliability_level
        return source

    async def reverify_stale(
        self,
        checker: SourceChecker,
        interval: timedelta = DEFAULT_VERIFICATION_INTERVAL,
        now: Optional[datetime] = None,
    ) -> Dict[str, SourceVerificationStatus]:
        """Re-check every source whose last verification is older than ``interval``.

        Sources that failed their last check are re-checked on every sweep,
        since provider attestations keep them from going stale. A check
        that raises counts as a failed check.

        Returns:
            Mapping of re-checked source ids to their new status
        """
        now = now or datetime.now(timezone.utc)
        stale = [
            s for s in self._sources.values()
            if now - s.last_verified_at > interval
            or s.verification_status == SourceVerificationStatus.UNVERIFIED
        ]
        if not stale:
            return {}

        logger.info(f"🔄 Re-verifying {len(stale)} stale sources")
        outcomes = await asyncio.gather(
            *(checker.check(source) for source in stale),
            return_exceptions=True,
        )

        updated: Dict[str, SourceVerificationStatus] = {}
        for source, outcome in zip(stale, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"⚠️ Source check failed for {source.id}: {outcome}")
                outcome = False
            status = (
                SourceVerificationStatus.VERIFIED if outcome
                else SourceVerificationStatus.UNVERIFIED
            )
            self.update_verification(source.id, status, verified_at=now)
            updated[source.id] = status
        return updated

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)
