"""Salary plausibility analyzer.

Infers a seniority tier from the job title and checks the largest figure in
the salary text against a plausible annual range for that tier. Absence of
a salary is never treated as evidence of fraud.
"""

import re
from typing import Dict, Optional, Tuple

from scamshield.domain.models import JobTier, SalarySignal

# (min, max) plausible annual salary per tier
TIER_RANGES: Dict[JobTier, Tuple[int, int]] = {
    JobTier.ENTRY: (25_000, 45_000),
    JobTier.MID: (45_000, 85_000),
    JobTier.SENIOR: (75_000, 150_000),
    JobTier.EXECUTIVE: (120_000, 300_000),
}

# Checked in order; the first matching tier wins.
TIER_KEYWORDS: Tuple[Tuple[JobTier, re.Pattern], ...] = (
    (JobTier.SENIOR, re.compile(r"senior|lead|principal|director|manager", re.IGNORECASE)),
    (JobTier.ENTRY, re.compile(r"junior|entry|intern|assistant", re.IGNORECASE)),
    (JobTier.EXECUTIVE, re.compile(r"executive|vp|president|ceo|cto|cfo", re.IGNORECASE)),
)

HOURLY_RE = re.compile(r"hour|hr|/h", re.IGNORECASE)
NUMBER_RE = re.compile(r"\d+")
THOUSANDS_SEPARATOR_RE = re.compile(r"(?<=\d),(?=\d{3})")

MAX_ENTRY_HOURLY_RATE = 100

# Longer digit runs are clamped to FIGURE_CEILING instead of converted.
MAX_FIGURE_DIGITS = 12
FIGURE_CEILING = 10**MAX_FIGURE_DIGITS
ANNUAL_CEILING_MULTIPLIER = 2

HOURLY_REASON = "implausible hourly rate"
ANNUAL_REASON = "excessive annual salary"


def infer_tier(title: Optional[str]) -> JobTier:
    """Infer the seniority tier of a job title (mid-level when nothing matches)."""
    for tier, pattern in TIER_KEYWORDS:
        if title and pattern.search(title):
            return tier
    return JobTier.MID


def extract_figure(salary_text: str) -> Optional[int]:
    """Largest integer in the text, with thousands separators folded.

    Runs of more than MAX_FIGURE_DIGITS digits count as FIGURE_CEILING.

    Example:
        >>> extract_figure("$130,000 - $150,000/year")
        150000
    """
    folded = THOUSANDS_SEPARATOR_RE.sub("", salary_text)
    numbers = [
        int(n) if len(n) <= MAX_FIGURE_DIGITS else FIGURE_CEILING
        for n in NUMBER_RE.findall(folded)
    ]
    return max(numbers) if numbers else None


class SalaryAnalyzer:
    """Checks stated pay against the plausible range for the inferred tier."""

    def analyze(self, salary_text: Optional[str], title: Optional[str] = None) -> SalarySignal:
        if not salary_text or not salary_text.strip():
            return SalarySignal(score=0.0, confidence=0.5, realistic=True)

        figure = extract_figure(salary_text)
        if figure is None:
            return SalarySignal(score=0.0, confidence=0.3, realistic=True)

        tier = infer_tier(title)
        hourly = bool(HOURLY_RE.search(salary_text))
        _, tier_max = TIER_RANGES[tier]

        if hourly and figure > MAX_ENTRY_HOURLY_RATE and tier == JobTier.ENTRY:
            return SalarySignal(
                score=1.0,
                confidence=0.9,
                realistic=False,
                reason=HOURLY_REASON,
                tier=tier,
                figure=figure,
                hourly=hourly,
            )

        if not hourly and figure > tier_max * ANNUAL_CEILING_MULTIPLIER:
            return SalarySignal(
                score=1.0,
                confidence=0.8,
                realistic=False,
                reason=ANNUAL_REASON,
                tier=tier,
                figure=figure,
                hourly=hourly,
            )

        return SalarySignal(
            score=0.0, confidence=0.7, realistic=True, tier=tier, figure=figure, hourly=hourly
        )
