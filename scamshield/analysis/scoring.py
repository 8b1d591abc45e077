"""Composite risk scoring.

Turns the four analyzer signals into one risk value, a confidence, and an
ordered list of evidence flags. Text and external signals are continuous and
used directly; company and salary are pass/fail checks and contribute a flat
penalty when they fail.

    risk = text * 0.30
         + (0 if company verified else 0.4) * 0.25
         + (0 if salary realistic else 0.6) * 0.20
         + external * 0.25
"""

from typing import List

from scamshield.domain.models import ExternalSignal, SubScores
from scamshield.utils.numbers import clamp_unit

TEXT_WEIGHT = 0.30
COMPANY_WEIGHT = 0.25
SALARY_WEIGHT = 0.20
EXTERNAL_WEIGHT = 0.25

UNVERIFIED_COMPANY_PENALTY = 0.4
UNREALISTIC_SALARY_PENALTY = 0.6

DEFAULT_CONFIDENCE = 0.8

GENERIC_COMPANY_FLAG = "generic/suspicious company name"
UNVERIFIED_COMPANY_FLAG = "employer not verified"


def compute_composite_risk(sub_scores: SubScores) -> float:
    company_penalty = 0.0 if sub_scores.company_verified else UNVERIFIED_COMPANY_PENALTY
    salary_penalty = 0.0 if sub_scores.salary_realistic else UNREALISTIC_SALARY_PENALTY

    risk = (
        sub_scores.text_score * TEXT_WEIGHT
        + company_penalty * COMPANY_WEIGHT
        + salary_penalty * SALARY_WEIGHT
        + sub_scores.external_risk_score * EXTERNAL_WEIGHT
    )
    return clamp_unit(risk)


def resolve_confidence(external: ExternalSignal) -> float:
    """External classifier confidence when it reported one, else the default."""
    if external.confidence > 0:
        return external.confidence
    return DEFAULT_CONFIDENCE


def build_flags(sub_scores: SubScores) -> List[str]:
    """Evidence strings in analyzer order: text, company, salary, external."""
    flags = list(sub_scores.pattern_matches)

    if sub_scores.company.is_generic:
        flags.append(GENERIC_COMPANY_FLAG)
    if not sub_scores.company_verified:
        flags.append(UNVERIFIED_COMPANY_FLAG)

    if not sub_scores.salary_realistic:
        flags.append(f"unrealistic salary: {sub_scores.salary.reason or 'unspecified'}")

    external = sub_scores.external
    if external.available and external.reasoning:
        flags.append(f"external model: {external.reasoning}")

    return flags
