"""Measurements over collections of evidence."""

from typing import Sequence

from ..models.evidence import Evidence
from ..models.source import Source, SourceType


def is_encyclopedic(source: Source) -> bool:
    """Check if a source is the Wikipedia reference source."""
    return source.type == SourceType.REFERENCE and "wikipedia" in source.name.lower()


def contradiction_ratio(evidence: Sequence[Evidence]) -> float:
    """Fraction of evidence items flagged as contradicting the claim, 0 when empty."""
    if not evidence:
        return 0.0
    contradictory = sum(1 for item in evidence if item.flags.is_contradictory)
    return contradictory / len(evidence)


def source_type_diversity(evidence: Sequence[Evidence]) -> float:
    """Distinct source types seen, as a fraction of all known types."""
    if not evidence:
        return 0.0
    return len({item.source.type for item in evidence}) / len(SourceType)


def source_consistency(evidence: Sequence[Evidence]) -> float:
    """Distinct sources per evidence item; 1.0 means no source repeats."""
    if not evidence:
        return 0.0
    return len({item.source.id for item in evidence}) / len(evidence)
