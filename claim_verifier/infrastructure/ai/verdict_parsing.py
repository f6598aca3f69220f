"""Parsing of the "Verdict / Confidence / Reasoning" reply format."""

import json
import re
from typing import Optional, Tuple

from ...domain.exceptions import ParseFailureError
from ...domain.ports.ai_judge import JudgeLabel

VERDICT_PATTERN = re.compile(r"Verdict:\s*(TRUE|FALSE|DISPUTED)", re.IGNORECASE)
CONFIDENCE_PATTERN = re.compile(r"Confidence:\s*(\d+(?:\.\d+)?|\.\d+)\s*(%)?", re.IGNORECASE)
REASONING_PATTERN = re.compile(r"Reasoning:\s*([\s\S]+)", re.IGNORECASE)
JSON_BLOCK_PATTERN = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$")

VERDICT_LABELS = {
    "TRUE": JudgeLabel.ENTAILMENT,
    "FALSE": JudgeLabel.CONTRADICTION,
    "DISPUTED": JudgeLabel.NEUTRAL,
}

VERDICT_PROMPT_FORMAT = (
    "Respond in the following format:\n"
    "Verdict: [TRUE/FALSE/DISPUTED]\n"
    "Confidence: [0-1]\n"
    "Reasoning: [Your explanation]"
)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _confidence(value: float, percent: bool = False) -> float:
    """Read values above 1 or marked with % as percentages, then clamp."""
    if percent or value > 1.0:
        value /= 100.0
    return _clamp(value)


def parse_verdict_text(text: str) -> Tuple[str, Optional[float], str]:
    """Parse a reply into (verdict, confidence, reasoning).

    Accepts either the plain-text format or a fenced JSON block with
    ``verdict``/``isTrue``, ``confidence`` and ``reasoning``/``explanation``.

    Raises:
        ParseFailureError: If no verdict can be found
    """
    text = (text or "").strip()

    block = JSON_BLOCK_PATTERN.match(text)
    if block:
        try:
            data = json.loads(block.group(1))
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            verdict = None
            if isinstance(data.get("isTrue"), bool):
                verdict = "TRUE" if data["isTrue"] else "FALSE"
            elif isinstance(data.get("verdict"), str) and data["verdict"].upper() in VERDICT_LABELS:
                verdict = data["verdict"].upper()
            if verdict is not None:
                confidence = None
                try:
                    confidence = _confidence(float(data["confidence"]))
                except (KeyError, TypeError, ValueError):
                    pass
                reasoning = data.get("reasoning") or data.get("explanation") or ""
                return verdict, confidence, str(reasoning).strip()

    verdict_match = VERDICT_PATTERN.search(text)
    if not verdict_match:
        raise ParseFailureError(f"No verdict in response: {text[:100]!r}")

    confidence = None
    confidence_match = CONFIDENCE_PATTERN.search(text)
    if confidence_match:
        try:
            confidence = _confidence(
                float(confidence_match.group(1)), percent=bool(confidence_match.group(2))
            )
        except ValueError:
            confidence = None

    reasoning_match = REASONING_PATTERN.search(text)
    reasoning = reasoning_match.group(1).strip() if reasoning_match else ""
    return verdict_match.group(1).upper(), confidence, reasoning
