"""Tests for the evidence aggregator."""

from datetime import datetime, timedelta, timezone

import pytest

from claim_verifier.domain.models.source import (
    ReliabilityLevel,
    Source,
    SourceFlags,
    SourceType,
    SourceVerificationStatus,
)
from claim_verifier.domain.models.thresholds import AggregationLimits
from claim_verifier.domain.services.evidence_aggregator import EvidenceAggregator
from claim_verifier.domain.services.source_registry import SourceRegistry

CLAIM = "The Eiffel Tower is located in Paris"
LONG_ENOUGH = "The Eiffel Tower is a wrought-iron lattice tower in Paris, France."


@pytest.fixture
def aggregator(registry: SourceRegistry, clock) -> EvidenceAggregator:
    """Create an aggregator with a frozen clock."""
    return EvidenceAggregator(registry, clock=clock)


def test_empty_input_gives_empty_result(aggregator: EvidenceAggregator):
    """No provider output is a valid, zero-score outcome."""
    result = aggregator.aggregate(CLAIM, [[], []])

    assert result.evidence == []
    assert result.reliability_score == 0.0
    assert result.total_sources == 0


def test_deduplicates_by_exact_content(aggregator, news_source, wikipedia_source, make_evidence):
    """The first of several identical texts is kept."""
    first = make_evidence(LONG_ENOUGH, news_source)
    duplicate = make_evidence(LONG_ENOUGH, wikipedia_source)

    result = aggregator.aggregate(CLAIM, [[first], [duplicate]])

    assert [item.id for item in result.evidence] == [first.id]


def test_length_filter_exempts_wikipedia(aggregator, news_source, wikipedia_source, make_evidence):
    """Short or huge texts are dropped unless they come from Wikipedia."""
    short_news = make_evidence("Too short", news_source)
    huge_news = make_evidence("x" * 5001, news_source)
    short_wiki = make_evidence("Paris.", wikipedia_source)
    huge_wiki = make_evidence("y" * 20000, wikipedia_source)

    result = aggregator.aggregate(CLAIM, [[short_news, huge_news], [short_wiki, huge_wiki]])

    assert {item.id for item in result.evidence} == {short_wiki.id, huge_wiki.id}


def test_drops_unreliable_sources(aggregator, registry, make_evidence):
    """Sources scoring below 0.5 are filtered out."""
    blog = Source(
        id="random-blog",
        name="Random Blog",
        reliability_level=ReliabilityLevel.UNVERIFIED,
        last_verified_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
    )

    result = aggregator.aggregate(CLAIM, [[make_evidence(LONG_ENOUGH, blog)]])

    assert result.evidence == []
    assert "random-blog" in registry


def test_drops_stale_sources_except_wikipedia(registry, clock, make_evidence):
    """Sources verified more than 30 days ago are dropped, Wikipedia is exempt."""
    old = clock() - timedelta(days=31)
    stale_news = Source(
        id="stale-news",
        name="Stale News",
        type=SourceType.NEWS,
        reliability_level=ReliabilityLevel.ESTABLISHED,
        last_verified_at=old,
        verification_status=SourceVerificationStatus.VERIFIED,
        flags=SourceFlags(is_news=True),
    )
    stale_wiki = Source(
        id="wikipedia",
        name="Wikipedia",
        type=SourceType.REFERENCE,
        reliability_level=ReliabilityLevel.VERIFIED,
        last_verified_at=old,
        verification_status=SourceVerificationStatus.VERIFIED,
    )
    aggregator = EvidenceAggregator(registry, clock=clock)
    news_item = make_evidence(LONG_ENOUGH, stale_news)
    wiki_item = make_evidence(LONG_ENOUGH + " It opened in 1889.", stale_wiki)

    result = aggregator.aggregate(CLAIM, [[news_item, wiki_item]])

    assert [item.id for item in result.evidence] == [wiki_item.id]


def test_fresh_attestation_revives_stale_source(registry, clock, make_evidence):
    """A source first seen long ago is kept once a provider returns it again."""
    stale = Source(
        id="news-daily-planet",
        name="Daily Planet",
        type=SourceType.NEWS,
        reliability_level=ReliabilityLevel.ESTABLISHED,
        last_verified_at=clock() - timedelta(days=40),
        verification_status=SourceVerificationStatus.VERIFIED,
        flags=SourceFlags(is_news=True),
    )
    aggregator = EvidenceAggregator(registry, clock=clock)
    assert aggregator.aggregate(CLAIM, [[make_evidence(LONG_ENOUGH, stale)]]).evidence == []

    fresh = stale.model_copy(update={"last_verified_at": clock()})
    result = aggregator.aggregate(CLAIM, [[make_evidence(LONG_ENOUGH, fresh)]])

    assert len(result.evidence) == 1
    assert result.evidence[0].source is stale
    assert stale.last_verified_at == clock()


def test_binds_evidence_to_registered_source(aggregator, registry, make_evidence, clock):
    """Evidence carrying a copy of a known source is rebound to the canonical one."""
    canonical = registry.get("reuters")
    copy = canonical.model_copy()
    copy.last_verified_at = clock()
    item = make_evidence(LONG_ENOUGH, copy)

    canonical.last_verified_at = clock()
    result = aggregator.aggregate(CLAIM, [[item]])

    assert result.evidence[0].source is canonical


def test_new_sources_are_registered(aggregator, registry, news_source, make_evidence):
    """Every source seen is auto-registered."""
    aggregator.aggregate(CLAIM, [[make_evidence(LONG_ENOUGH, news_source)]])

    assert registry.get(news_source.id) is news_source


def test_reliability_formula(aggregator, news_source, wikipedia_source, make_evidence):
    """0.7 times the mean adjusted score plus 0.3 times source-type diversity."""
    news_item = make_evidence(LONG_ENOUGH, news_source)
    wiki_item = make_evidence(LONG_ENOUGH + " It is 330 metres tall.", wikipedia_source)

    result = aggregator.aggregate(CLAIM, [[news_item], [wiki_item]])

    news_score = 0.8 * 1.1
    wiki_score = min(0.9 * 1.1 * 1.1, 0.95)
    expected = 0.7 * (news_score + wiki_score) / 2 + 0.3 * (2 / 5)
    assert result.reliability_score == pytest.approx(expected)
    assert 0.0 <= result.reliability_score <= 1.0


def test_adjusted_score_boosts_are_capped(aggregator, wikipedia_source, make_evidence):
    """Each boost is individually capped at 0.95."""
    item = make_evidence(LONG_ENOUGH, wikipedia_source, is_biographical=True, is_primary_source=True)

    assert aggregator.adjusted_score(item) == pytest.approx(0.95)


def test_custom_limits(registry, clock, news_source, make_evidence):
    """Limits can be tightened per deployment."""
    aggregator = EvidenceAggregator(registry, limits=AggregationLimits(min_content_length=100), clock=clock)

    result = aggregator.aggregate(CLAIM, [[make_evidence(LONG_ENOUGH, news_source)]])

    assert result.evidence == []
