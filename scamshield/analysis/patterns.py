"""Text pattern analyzer.

Scores the title and description of a posting against:
1. A fixed, ordered list of scam phrasings
2. Artificial-urgency vocabulary
3. Common grammar errors seen in fraudulent postings

Pure and deterministic: no I/O, no error conditions.
"""

import logging
import re
from typing import List, Pattern, Tuple

from scamshield.domain.models import JobPosting, TextSignal

logger = logging.getLogger(__name__)

PATTERN_WEIGHT = 0.3
URGENCY_WEIGHT = 0.2
GRAMMAR_WEIGHT = 0.15
URGENCY_THRESHOLD = 2
GRAMMAR_THRESHOLD = 3
TEXT_CONFIDENCE = 0.9

URGENCY_FLAG = "excessive artificial urgency"
GRAMMAR_FLAG = "multiple grammar issues"

# Order matters: evidence labels refer to the 1-based position in this list.
SCAM_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"work from home.*\$\d{3,4}.*week",
        r"no experience.*high pay",
        r"urgent.*immediate start",
        r"pay.*training fee",
        r"western union.*money transfer",
        r"package forwarding",
        r"mystery shopper",
        r"envelope stuffing",
        r"data entry.*\$\d+.*hour",
        r"earn.*\$\d+.*day.*guaranteed",
    )
)

URGENCY_RE = re.compile(r"urgent|immediate|asap|today only|limited time")

GRAMMAR_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"\b(recieve|recive)\b",
        r"\b(seperate)\b",
        r"\b(loose)\b",
        r"\b(your)\s+(hired|selected)\b",
        r"\b(its)\s+(a)\s+(great)\b",
    )
)


def pattern_label(index: int) -> str:
    """Evidence label for the scam pattern at 0-based ``index``."""
    return f"suspicious pattern #{index + 1}"


class PatternAnalyzer:
    """Scores posting text against known scam phrasings."""

    def __init__(self, logger_instance: logging.Logger = None):
        self.logger = logger_instance or logger

    def analyze(self, posting: JobPosting) -> TextSignal:
        """Analyze the posting's title and description.

        Args:
            posting: Posting to analyze

        Returns:
            TextSignal with clamped score and ordered evidence labels
        """
        return self.analyze_text(f"{posting.title} {posting.description}")

    def analyze_text(self, text: str) -> TextSignal:
        text = (text or "").lower()

        score = 0.0
        evidence: List[str] = []

        for index, pattern in enumerate(SCAM_PATTERNS):
            if pattern.search(text):
                score += PATTERN_WEIGHT
                evidence.append(pattern_label(index))

        urgency_count = len(URGENCY_RE.findall(text))
        if urgency_count > URGENCY_THRESHOLD:
            score += URGENCY_WEIGHT
            evidence.append(URGENCY_FLAG)

        grammar_issue_count = sum(len(p.findall(text)) for p in GRAMMAR_PATTERNS)
        if grammar_issue_count > GRAMMAR_THRESHOLD:
            score += GRAMMAR_WEIGHT
            evidence.append(GRAMMAR_FLAG)

        self.logger.debug(
            f"Text analysis matched {len(evidence)} indicators",
            extra={
                "event": "analysis.text.completed",
                "matched_patterns": evidence,
                "urgency_count": urgency_count,
                "grammar_issue_count": grammar_issue_count,
            },
        )

        return TextSignal(
            score=score,
            confidence=TEXT_CONFIDENCE,
            matched_patterns=tuple(evidence),
            urgency_count=urgency_count,
            grammar_issue_count=grammar_issue_count,
            urgency_score=urgency_count / 10,
            grammar_score=grammar_issue_count / 20,
        )
