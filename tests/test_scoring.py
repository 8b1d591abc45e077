"""Unit tests for composite risk scoring."""

import pytest

from scamshield.analysis.scoring import (
    DEFAULT_CONFIDENCE,
    GENERIC_COMPANY_FLAG,
    UNVERIFIED_COMPANY_FLAG,
    build_flags,
    compute_composite_risk,
    resolve_confidence,
)
from scamshield.domain.models import (
    CompanySignal,
    ExternalSignal,
    SalarySignal,
    SubScores,
    TextSignal,
)


def make_sub_scores(
    text_score=0.0,
    patterns=(),
    verified=True,
    generic=False,
    realistic=True,
    reason=None,
    external=None,
):
    return SubScores(
        text=TextSignal(score=text_score, confidence=0.9, matched_patterns=patterns),
        company=CompanySignal(
            score=0.0 if verified else 1.0,
            confidence=0.7,
            verified=verified,
            is_generic=generic,
        ),
        salary=SalarySignal(
            score=0.0 if realistic else 1.0, confidence=0.7, realistic=realistic, reason=reason
        ),
        external=external or ExternalSignal.unavailable("classifier not configured"),
    )


class TestCompositeRisk:
    """Tests for compute_composite_risk()."""

    def test_all_clear_is_zero(self):
        assert compute_composite_risk(make_sub_scores()) == 0.0

    def test_weights(self):
        sub_scores = make_sub_scores(
            text_score=0.5,
            verified=False,
            realistic=False,
            external=ExternalSignal(score=0.8, confidence=0.9, reasoning="x"),
        )

        expected = 0.5 * 0.30 + 0.4 * 0.25 + 0.6 * 0.20 + 0.8 * 0.25
        assert compute_composite_risk(sub_scores) == pytest.approx(expected)

    def test_unverified_company_penalty(self):
        assert compute_composite_risk(make_sub_scores(verified=False)) == pytest.approx(0.1)

    def test_unrealistic_salary_penalty(self):
        assert compute_composite_risk(make_sub_scores(realistic=False)) == pytest.approx(0.12)

    def test_maximum_risk_stays_within_bounds(self):
        sub_scores = make_sub_scores(
            text_score=1.0,
            verified=False,
            realistic=False,
            external=ExternalSignal(score=1.0, confidence=1.0),
        )

        risk = compute_composite_risk(sub_scores)

        assert 0.0 <= risk <= 1.0
        assert risk == pytest.approx(0.77)


class TestConfidence:
    """Tests for resolve_confidence()."""

    def test_external_confidence_is_used(self):
        assert resolve_confidence(ExternalSignal(score=0.2, confidence=0.65)) == 0.65

    def test_unavailable_classifier_uses_default(self):
        assert resolve_confidence(ExternalSignal.unavailable("timeout")) == DEFAULT_CONFIDENCE

    def test_zero_confidence_uses_default(self):
        assert resolve_confidence(ExternalSignal(score=0.7, confidence=0.0)) == 0.8


class TestFlags:
    """Tests for build_flags()."""

    def test_no_flags_for_clean_posting(self):
        assert build_flags(make_sub_scores()) == []

    def test_flag_order(self):
        sub_scores = make_sub_scores(
            patterns=("suspicious pattern #1", "excessive artificial urgency"),
            verified=False,
            generic=True,
            realistic=False,
            reason="implausible hourly rate",
            external=ExternalSignal(score=0.9, confidence=0.8, reasoning="too good to be true"),
        )

        assert build_flags(sub_scores) == [
            "suspicious pattern #1",
            "excessive artificial urgency",
            GENERIC_COMPANY_FLAG,
            UNVERIFIED_COMPANY_FLAG,
            "unrealistic salary: implausible hourly rate",
            "external model: too good to be true",
        ]

    def test_empty_reasoning_adds_no_external_flag(self):
        sub_scores = make_sub_scores(external=ExternalSignal(score=0.4, confidence=0.8))

        assert build_flags(sub_scores) == []

    def test_degraded_classifier_adds_no_external_flag(self):
        sub_scores = make_sub_scores(external=ExternalSignal.unavailable("HTTP 500"))

        assert not any(flag.startswith("external model") for flag in build_flags(sub_scores))
