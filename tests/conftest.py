"""Test configuration and common fixtures."""

from datetime import datetime, timezone
from typing import Callable

import pytest

from claim_verifier.domain.models.evidence import Evidence, EvidenceFlags, GenericEvidence
from claim_verifier.domain.models.source import (
    ReliabilityLevel,
    Source,
    SourceFlags,
    SourceType,
    SourceVerificationStatus,
)
from claim_verifier.domain.ports.ai_judge import JudgeLabel, JudgeRole, JudgeVerdict
from claim_verifier.domain.services.source_registry import SourceRegistry

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class StubJudge:
    """AI judge returning a fixed verdict."""

    def __init__(self, name: str, role: JudgeRole, score: float, rationale: str = "", error: Exception = None):
        """Initialize test judge."""
        self._name = name
        self._role = role
        self._score = score
        self._rationale = rationale or f"{name} rationale"
        self._error = error
        self.calls = 0

    async def initialize(self) -> None:
        """Initialize the judge."""

    async def shutdown(self) -> None:
        """Shutdown the judge."""

    async def judge(self, claim: str) -> JudgeVerdict:
        """Return the configured verdict."""
        self.calls += 1
        if self._error is not None:
            raise self._error
        if self._score > 0.5:
            label = JudgeLabel.ENTAILMENT
        elif self._score < 0.5:
            label = JudgeLabel.CONTRADICTION
        else:
            label = JudgeLabel.NEUTRAL
        return JudgeVerdict(judge=self._name, score=self._score, label=label, rationale=self._rationale)

    @property
    def provider_name(self) -> str:
        """Get judge name."""
        return self._name

    @property
    def role(self) -> JudgeRole:
        """Get judge role."""
        return self._role

    @property
    def is_available(self) -> bool:
        """Check if available."""
        return True


@pytest.fixture
def make_judge() -> Callable[..., StubJudge]:
    """Build stub judges."""
    return StubJudge


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Frozen clock."""
    return lambda: FIXED_NOW


@pytest.fixture
def registry() -> SourceRegistry:
    """Registry with the default seed sources."""
    return SourceRegistry()


@pytest.fixture
def wikipedia_source() -> Source:
    """The Wikipedia reference source."""
    return Source(
        id="wikipedia",
        name="Wikipedia",
        type=SourceType.REFERENCE,
        reliability_level=ReliabilityLevel.VERIFIED,
        url="https://en.wikipedia.org",
        last_verified_at=FIXED_NOW,
        verification_status=SourceVerificationStatus.VERIFIED,
        flags=SourceFlags(is_reference=True),
    )


@pytest.fixture
def news_source() -> Source:
    """An established news outlet."""
    return Source(
        id="news-daily-planet",
        name="Daily Planet",
        type=SourceType.NEWS,
        reliability_level=ReliabilityLevel.ESTABLISHED,
        url="https://dailyplanet.example",
        last_verified_at=FIXED_NOW,
        verification_status=SourceVerificationStatus.VERIFIED,
        flags=SourceFlags(is_news=True),
    )


@pytest.fixture
def fact_checker_source() -> Source:
    """A professional fact-checker."""
    return Source(
        id="politifact",
        name="PolitiFact",
        type=SourceType.REFERENCE,
        reliability_level=ReliabilityLevel.VERIFIED,
        url="https://www.politifact.com",
        last_verified_at=FIXED_NOW,
        verification_status=SourceVerificationStatus.VERIFIED,
        flags=SourceFlags(is_fact_checker=True),
    )


@pytest.fixture
def make_evidence() -> Callable[..., Evidence]:
    """Build generic evidence with sensible defaults."""

    def _make(content: str, source: Source, **flags) -> Evidence:
        return GenericEvidence(
            content=content,
            source=source,
            timestamp=FIXED_NOW,
            confidence=0.8,
            flags=EvidenceFlags(**flags),
        )

    return _make
