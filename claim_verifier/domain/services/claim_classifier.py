"""Rule-based claim classification."""

import logging
import re
from typing import List, Optional

from ..models.claim import ClaimProfile

logger = logging.getLogger(__name__)

_PROFESSIONS = r"(?:actor|actress|musician|singer|writer|director|producer|author|rapper|comedian)"
_NATIONALITIES = (
    r"(?:American|British|English|Scottish|Irish|Canadian|Australian|French|German|"
    r"Italian|Spanish|Japanese|Chinese|Indian|Russian|Mexican|Brazilian)"
)

TEMPORAL_KEYWORDS = (
    "is", "was", "will be", "going to", "current", "currently",
    "former", "previous", "now", "then", "future", "past",
)

FACTUAL_KEYWORDS = (
    "is", "was", "are", "were", "has", "had", "contains", "includes",
    "consists of", "located in", "based in",
)

PREDICTIVE_KEYWORDS = (
    "will", "going to", "plan to", "intend to", "expected to",
    "likely to", "may", "might", "could",
)

BIOGRAPHICAL_PATTERNS = [
    re.compile(r"\bborn\s+(?:on\s+|in\s+)?\w+\s+\d{1,2},?\s+\d{4}", re.IGNORECASE),
    re.compile(r"\bborn\s+in\s+\d{4}", re.IGNORECASE),
    re.compile(rf"\bis\s+an?\s+(?:\w+\s+)?{_PROFESSIONS}", re.IGNORECASE),
    re.compile(r"\b\d{4}\s*-\s*present\b", re.IGNORECASE),
    re.compile(rf"\b{_PROFESSIONS}\s+(?:known|famous|renowned|celebrated)", re.IGNORECASE),
    re.compile(r"\b(?:starred|appeared|performed|released)\s+in\b", re.IGNORECASE),
    re.compile(rf"\bis\s+an?\s+{_NATIONALITIES}\s+{_PROFESSIONS}", re.IGNORECASE),
]

HISTORICAL_KEYWORDS = (
    "napoleon", "bonaparte", "emperor", "king", "queen", "century",
    "ancient", "medieval", "renaissance", "revolution", "war", "battle",
    "dynasty", "monarchy", "empire",
)

# keyword -> categories added when it appears
CATEGORY_RULES = [
    (("president", "prime minister", "chancellor"), ("politics", "government")),
    (("actor", "actress"), ("entertainment", "film")),
    (("musician", "singer"), ("music", "entertainment")),
    (("study", "studies", "research", "researchers"), ("research", "academic")),
]


def _has_keyword(lowered: str, keywords) -> bool:
    return any(re.search(rf"\b{re.escape(keyword)}\b", lowered) for keyword in keywords)


class ClaimClassifier:
    """Labels claims from their wording alone.

    Classification is total: any string, including an empty one, produces
    a profile and nothing is raised.
    """

    def classify(self, text: Optional[str]) -> ClaimProfile:
        """Classify a claim.

        Args:
            text: Claim text

        Returns:
            Profile with type flags and topic categories
        """
        if not text or not text.strip():
            return ClaimProfile(raw_text=text or "")

        lowered = text.lower()
        is_biographical = self.is_biographical(text)
        profile = ClaimProfile(
            raw_text=text,
            is_temporal=_has_keyword(lowered, TEMPORAL_KEYWORDS),
            is_factual=is_biographical or _has_keyword(lowered, FACTUAL_KEYWORDS),
            is_predictive=self.is_predictive(text),
            is_biographical=is_biographical,
            is_historical=self.is_historical(text),
            categories=self.categories(text),
        )
        logger.debug(f"🏷️ Classified claim: {profile}")
        return profile

    def is_biographical(self, text: str) -> bool:
        """Check for birth dates, professions, career spans and similar."""
        return any(pattern.search(text) for pattern in BIOGRAPHICAL_PATTERNS)

    def is_predictive(self, text: str) -> bool:
        """Check for future-intent wording outside a biographical context."""
        if self.is_biographical(text):
            return False
        return _has_keyword(text.lower(), PREDICTIVE_KEYWORDS)

    def is_historical(self, text: str) -> bool:
        """Check for historical eras, monarchies and wars."""
        return _has_keyword(text.lower(), HISTORICAL_KEYWORDS)

    def categories(self, text: str) -> List[str]:
        """Collect non-exclusive topic categories in first-seen order."""
        lowered = text.lower()
        found: List[str] = []

        def add(*names: str) -> None:
            for name in names:
                if name not in found:
                    found.append(name)

        for keywords, names in CATEGORY_RULES:
            if _has_keyword(lowered, keywords):
                add(*names)
        if self.is_biographical(text):
            add("biography", "person")
        if self.is_historical(text):
            add("history")
        return found
