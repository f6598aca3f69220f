"""Shared text helpers for claim and evidence analysis."""

import re
from typing import List, Optional

STOPWORDS = frozenset({
    "is", "a", "an", "the", "and", "or", "but", "in", "on", "at",
    "to", "for", "of", "with", "by", "was", "are", "were", "has",
    "had", "have", "that", "this", "from", "its", "his", "her",
})

CURRENT_EVENT_INDICATORS = (
    "current", "currently", "now", "present", "recent", "recently",
    "this year", "this month", "this week", "today", "yesterday",
    "announced", "reported", "declared", "confirmed", "stated",
    "according to", "as of", "latest", "new", "update", "breaking",
    "potus", "us president", "american president",
    "president of the united states", "president of the us",
)

POLITICAL_POSITIONS = (
    "president", "prime minister", "chancellor", "premier", "mayor", "governor",
    "senator", "representative", "congressman", "congresswoman", "minister",
    "secretary", "speaker", "leader", "chair", "chairperson", "commissioner",
)

PAST_MARKERS = re.compile(r"\b(?:former|was|previous|past)\b|\bex-", re.IGNORECASE)

_PUNCTUATION = "\"'.,;:!?()[]{}"


def contains_phrase(text: str, phrase: str) -> bool:
    """Check for a phrase bounded by non-word characters."""
    return re.search(rf"(?<!\w){re.escape(phrase)}(?!\w)", text) is not None


def extract_key_terms(text: Optional[str]) -> List[str]:
    """Extract the content-bearing terms of a claim.

    Terms are lower-cased whitespace tokens with surrounding punctuation
    stripped, excluding stopwords and anything of two characters or fewer.
    """
    if not text:
        return []
    terms = []
    for token in text.lower().split():
        token = token.strip(_PUNCTUATION)
        if len(token) > 2 and token not in STOPWORDS:
            terms.append(token)
    return terms


def term_coverage(terms: List[str], content: str) -> float:
    """Fraction of terms found as substrings of the content."""
    if not terms:
        return 0.0
    lowered = content.lower()
    return sum(1 for term in terms if term in lowered) / len(terms)


def is_current_event_claim(text: Optional[str], current_year: int) -> bool:
    """Check if a claim is about something that is true right now."""
    if not text:
        return False
    lowered = text.lower()

    if re.search(rf"\b{current_year}\b", lowered):
        return True

    if not PAST_MARKERS.search(lowered):
        if any(contains_phrase(lowered, position) for position in POLITICAL_POSITIONS):
            return True

    if re.search(r"\bis (?:the )?current", lowered):
        return True

    return any(contains_phrase(lowered, indicator) for indicator in CURRENT_EVENT_INDICATORS)
