"""Tests for evidence collection metrics."""

import pytest

from claim_verifier.domain.models.source import SourceType
from claim_verifier.domain.services.evidence_metrics import (
    contradiction_ratio,
    is_encyclopedic,
    source_consistency,
    source_type_diversity,
)


def test_empty_evidence_scores_zero():
    """Every metric is 0 for an empty collection."""
    assert contradiction_ratio([]) == 0.0
    assert source_type_diversity([]) == 0.0
    assert source_consistency([]) == 0.0


def test_contradiction_ratio_bounds(news_source, make_evidence):
    """No contradictions gives 0, all contradictory gives 1."""
    supporting = [make_evidence(f"Supporting report {i}", news_source) for i in range(3)]
    contradicting = [
        make_evidence(f"Contradicting report {i}", news_source, is_contradictory=True) for i in range(3)
    ]

    assert contradiction_ratio(supporting) == 0.0
    assert contradiction_ratio(contradicting) == 1.0
    assert contradiction_ratio(supporting + contradicting[:1]) == pytest.approx(1 / 4)


def test_source_type_diversity(news_source, wikipedia_source, fact_checker_source, make_evidence):
    """Diversity counts distinct source types out of all known types."""
    evidence = [
        make_evidence("News report", news_source),
        make_evidence("Encyclopedia entry", wikipedia_source),
        make_evidence("Fact check", fact_checker_source),
    ]

    assert source_type_diversity(evidence[:1]) == pytest.approx(1 / len(SourceType))
    assert source_type_diversity(evidence) == pytest.approx(2 / len(SourceType))


def test_source_consistency(news_source, wikipedia_source, make_evidence):
    """Consistency is distinct sources per item."""
    distinct = [make_evidence("News report", news_source), make_evidence("Encyclopedia entry", wikipedia_source)]
    repeated = [make_evidence(f"News report {i}", news_source) for i in range(4)]

    assert source_consistency(distinct) == 1.0
    assert source_consistency(repeated) == pytest.approx(1 / 4)


def test_is_encyclopedic(news_source, wikipedia_source, fact_checker_source):
    """Only the Wikipedia reference source counts as encyclopedic."""
    assert is_encyclopedic(wikipedia_source)
    assert not is_encyclopedic(fact_checker_source)
    assert not is_encyclopedic(news_source)
