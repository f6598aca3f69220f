"""Tests for the NewsAPI evidence provider."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from claim_verifier.domain.models.evidence import NewsEvidence
from claim_verifier.domain.models.source import SourceType
from claim_verifier.domain.services.evidence_aggregator import EvidenceAggregator
from claim_verifier.domain.services.source_registry import SourceRegistry
from claim_verifier.infrastructure.providers.news_provider import NewsConfig, NewsEvidenceProvider

TOWER_CLAIM = "The Eiffel Tower is located in Paris"
HANKS_CLAIM = "Tom Hanks is an American actor"


def _article(title: str, content: str, outlet: str = "Daily Planet") -> dict:
    return {
        "source": {"id": None, "name": outlet},
        "title": title,
        "content": content,
        "url": "https://dailyplanet.example/story",
        "publishedAt": "2025-05-30T10:00:00Z",
    }


@pytest.fixture
def news_provider() -> NewsEvidenceProvider:
    """Create a provider without a client."""
    return NewsEvidenceProvider(NewsConfig(api_key="test-key"))


def test_build_query_quotes_names():
    """Names are quoted and their words are not repeated as terms."""
    assert NewsEvidenceProvider.build_query(HANKS_CLAIM) == '"Tom Hanks" OR american OR actor'
    assert NewsEvidenceProvider.build_query(TOWER_CLAIM) == '"The Eiffel Tower" OR located OR paris'


def test_build_query_empty_claim():
    """Claims with nothing searchable give an empty query."""
    assert NewsEvidenceProvider.build_query("it is so") == ""


def test_extract_relevant_section_prefers_full_match():
    """The paragraph holding every term wins."""
    text = "Tourism news roundup.\n\nThe Eiffel Tower is located in Paris and draws millions."

    section = NewsEvidenceProvider.extract_relevant_section(text, ["eiffel", "tower", "located", "paris"])

    assert section == "The Eiffel Tower is located in Paris and draws millions."


def test_extract_relevant_section_falls_back_to_first_paragraph():
    """Without a paragraph covering every term the first one is used."""
    text = "Tourism news roundup.\n\nThe tower opened late today."

    assert NewsEvidenceProvider.extract_relevant_section(text, ["eiffel", "tower"]) == "Tourism news roundup."
    assert NewsEvidenceProvider.extract_relevant_section("", ["eiffel"]) == ""


def test_to_evidence_filters_irrelevant_and_short(news_provider):
    """Only relevant articles with a usable excerpt become evidence."""
    articles = [
        _article("Paris landmarks", "Tourism news roundup.\n\nThe Eiffel Tower is located in Paris and draws millions."),
        _article("Stock markets rally", "Shares rose sharply on Tuesday."),
        _article("Weather", "Paris."),
    ]

    evidence = news_provider.to_evidence(TOWER_CLAIM, articles)

    assert len(evidence) == 1
    item = evidence[0]
    assert isinstance(item, NewsEvidence)
    assert item.content == "The Eiffel Tower is located in Paris and draws millions."
    assert item.headline == "Paris landmarks"
    assert item.published_at.year == 2025
    assert item.source.id == "news-daily-planet"
    assert item.source.name == "Daily Planet"
    assert item.source.type == SourceType.NEWS
    assert item.source.last_verified_at > item.published_at
    assert not item.flags.is_biographical


def test_biographical_claims_need_repeated_mentions(news_provider):
    """A person must be mentioned often enough for the article to count."""
    passing = _article(
        "Tom Hanks returns",
        "Tom Hanks stars again. Critics say Tom Hanks has never been better, and Tom Hanks agrees.",
    )
    single_mention = _article("Hollywood roundup", "Tom Hanks attended a premiere with other American actors.")

    evidence = news_provider.to_evidence(HANKS_CLAIM, [passing, single_mention])

    assert len(evidence) == 1
    assert evidence[0].headline == "Tom Hanks returns"
    assert evidence[0].flags.is_biographical


def test_missing_outlet_and_date(news_provider):
    """Articles without an outlet or date still produce evidence."""
    article = {"title": "Eiffel Tower news", "description": "The Eiffel Tower is located in Paris, France."}

    item = news_provider.to_evidence(TOWER_CLAIM, [article])[0]

    assert item.source.name == "Unknown outlet"
    assert item.source.id == "news-unknown-outlet"
    assert item.published_at is not None


@pytest.mark.asyncio
async def test_provide_queries_everything_endpoint(news_provider):
    """Claims are searched by relevancy on the everything endpoint."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"articles": [
            _article("Paris landmarks", "The Eiffel Tower is located in Paris and draws millions."),
        ]})

    news_provider._client = httpx.AsyncClient(
        base_url="https://newsapi.org/v2",
        transport=httpx.MockTransport(handler),
    )
    await news_provider.initialize()

    evidence = await news_provider.provide(TOWER_CLAIM)

    assert len(evidence) == 1
    assert requests[0].url.path == "/v2/everything"
    assert requests[0].url.params["q"] == '"The Eiffel Tower" OR located OR paris'
    assert requests[0].url.params["sortBy"] == "relevancy"
    await news_provider.shutdown()
    assert not news_provider.is_available


@pytest.mark.asyncio
async def test_provide_swallows_http_errors(news_provider):
    """Rate limits and outages give no evidence."""
    news_provider._client = httpx.AsyncClient(
        base_url="https://newsapi.org/v2",
        transport=httpx.MockTransport(lambda request: httpx.Response(429)),
    )
    await news_provider.initialize()

    assert await news_provider.provide(TOWER_CLAIM) == []


@pytest.mark.asyncio
async def test_initialize_requires_api_key():
    """Without a key the provider refuses to start."""
    with pytest.raises(ConnectionError):
        await NewsEvidenceProvider().initialize()


def test_outlet_stays_fresh_across_batches(news_provider):
    """An old first article from an outlet does not hide its later ones."""
    aggregator = EvidenceAggregator(SourceRegistry())
    old = _article("Paris landmarks", "The Eiffel Tower is located in Paris and draws millions.")
    old["publishedAt"] = (datetime.now(timezone.utc) - timedelta(days=40)).isoformat()
    fresh = _article("Paris today", "The Eiffel Tower is located in Paris and reopened this week.")
    fresh["publishedAt"] = datetime.now(timezone.utc).isoformat()

    first = aggregator.aggregate(TOWER_CLAIM, [news_provider.to_evidence(TOWER_CLAIM, [old])])
    second = aggregator.aggregate(TOWER_CLAIM, [news_provider.to_evidence(TOWER_CLAIM, [fresh])])

    assert len(first.evidence) == 1
    assert len(second.evidence) == 1
    assert second.evidence[0].headline == "Paris today"
