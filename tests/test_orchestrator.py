"""Unit tests for the risk orchestrator."""

import logging
import threading
from unittest.mock import Mock

import pytest

from scamshield.adapters import ClassifierTimeoutError, ExternalClassifier
from scamshield.analysis import CompanyVerifier, PatternAnalyzer, RiskOrchestrator, SalaryAnalyzer
from scamshield.analysis.salary import ANNUAL_REASON, FIGURE_CEILING
from scamshield.analysis.scoring import DEFAULT_CONFIDENCE
from scamshield.domain.models import ANALYSIS_ERROR_FLAG, JobPosting
from scamshield.logging.config import ContextualFilter

from tests.helpers import (
    FailingCacheStore,
    FakeClassifierClient,
    StalledClassifierClient,
    load_fixture_posting,
)


class TestRiskOrchestrator:
    """Tests for RiskOrchestrator.analyze()."""

    def test_result_carries_posting_fields(self, orchestrator_factory, clock):
        posting = load_fixture_posting("senior_engineer")

        result = orchestrator_factory().analyze(posting)

        assert result.fingerprint == posting.fingerprint
        assert result.job_title == "Senior Software Engineer"
        assert result.salary == "$130,000/year"
        assert result.url == "https://jobs.example.com/acme/123"
        assert result.site == "linkedin"
        assert result.timestamp == clock.now
        assert result.failed is False
        assert result.error is None

    def test_sub_scores_are_preserved(self, orchestrator_factory, classifier_client):
        posting = load_fixture_posting("work_from_home_scam")

        result = orchestrator_factory(classifier_client).analyze(posting)

        assert result.sub_scores.text_score == 1.0
        assert result.sub_scores.company_verified is False
        assert result.sub_scores.salary_realistic is True
        assert result.sub_scores.external_risk_score == pytest.approx(0.9)
        assert "suspicious pattern #1" in result.sub_scores.pattern_matches

    def test_confidence_comes_from_classifier(self, orchestrator_factory, classifier_client):
        result = orchestrator_factory(classifier_client).analyze(
            load_fixture_posting("senior_engineer")
        )

        assert result.confidence == pytest.approx(0.85)

    def test_degraded_classifier_uses_default_confidence(self, orchestrator_factory):
        client = FakeClassifierClient(error=ClassifierTimeoutError("timed out", url="u"))

        result = orchestrator_factory(client).analyze(load_fixture_posting("work_from_home_scam"))

        assert result.failed is False
        assert result.confidence == DEFAULT_CONFIDENCE
        assert result.sub_scores.external_risk_score == 0.0
        assert not any(flag.startswith("external model") for flag in result.flags)
        # text 1.0 * 0.3 + unverified employer 0.4 * 0.25
        assert result.risk == pytest.approx(0.4)

    def test_oversized_salary_is_scored_not_failed(self, orchestrator_factory, classifier_client):
        posting = load_fixture_posting("work_from_home_scam", salary="$" + "9" * 5000 + "/year")

        result = orchestrator_factory(classifier_client).analyze(posting)

        assert result.failed is False
        assert result.sub_scores.salary.figure == FIGURE_CEILING
        assert f"unrealistic salary: {ANNUAL_REASON}" in result.flags
        # 0.625 plus unrealistic salary 0.6 * 0.2
        assert result.risk == pytest.approx(0.745)

    def test_stalled_classifier_is_cut_off_at_deadline(self, clock, caplog):
        client = StalledClassifierClient({"riskScore": 0.9, "confidence": 0.85, "reasoning": "late"})
        classifier = ExternalClassifier(client)
        orchestrator = RiskOrchestrator(
            PatternAnalyzer(),
            CompanyVerifier(),
            SalaryAnalyzer(),
            classifier,
            clock=clock,
            classifier_deadline=0.05,
        )

        try:
            with caplog.at_level(logging.WARNING):
                result = orchestrator.analyze(load_fixture_posting("work_from_home_scam"))
        finally:
            client.release.set()
            orchestrator.close()

        assert result.failed is False
        assert result.sub_scores.external.available is False
        assert result.sub_scores.external.error == "classifier deadline exceeded"
        assert result.sub_scores.external.model == classifier.model
        assert result.confidence == DEFAULT_CONFIDENCE
        assert result.risk == pytest.approx(0.4)
        assert any(
            getattr(r, "event", None) == "classifier.deadline_exceeded" for r in caplog.records
        )

    def test_deadline_does_not_cut_off_prompt_classifier(self, clock, classifier_client):
        with RiskOrchestrator(
            PatternAnalyzer(),
            CompanyVerifier(),
            SalaryAnalyzer(),
            ExternalClassifier(classifier_client),
            clock=clock,
            classifier_deadline=5,
        ) as orchestrator:
            result = orchestrator.analyze(load_fixture_posting("work_from_home_scam"))

        assert result.sub_scores.external.available is True
        assert result.confidence == pytest.approx(0.85)

    def test_cache_outage_does_not_fail_analysis(self, orchestrator_factory):
        result = orchestrator_factory(store=FailingCacheStore()).analyze(
            load_fixture_posting("senior_engineer")
        )

        assert result.failed is False
        assert result.sub_scores.company_verified is True
        assert result.sub_scores.company.error == "cache unavailable"

    def test_analyzers_run_on_worker_threads(self, clock):
        seen = []

        def record(posting):
            seen.append(threading.current_thread().name)
            return PatternAnalyzer().analyze(posting)

        text = Mock(spec=PatternAnalyzer)
        text.analyze.side_effect = record
        classifier = ExternalClassifier(None)

        with RiskOrchestrator(text, CompanyVerifier(), SalaryAnalyzer(), classifier, clock=clock) as orch:
            orch.analyze(JobPosting(title="Clerk", description="Filing"))

        assert seen and seen[0].startswith("scamshield-analysis")

    def test_analyzer_defect_returns_fail_safe_result(self, clock, caplog):
        broken = Mock(spec=SalaryAnalyzer)
        broken.analyze.side_effect = ZeroDivisionError("division by zero")
        posting = JobPosting(title="Clerk", description="Filing", company="Acme Corp.")

        with RiskOrchestrator(
            PatternAnalyzer(), CompanyVerifier(), broken, Mock(), clock=clock
        ) as orchestrator:
            with caplog.at_level(logging.ERROR):
                result = orchestrator.analyze(posting)

        assert result.failed is True
        assert result.risk == 0.0
        assert result.confidence == 0.0
        assert result.flags == (ANALYSIS_ERROR_FLAG,)
        assert result.error == "division by zero"
        assert result.sub_scores is None
        assert result.company == "Acme Corp."
        assert any(getattr(r, "event", None) == "analysis.failed" for r in caplog.records)

    def test_closed_orchestrator_returns_fail_safe_result(self, orchestrator_factory):
        orchestrator = orchestrator_factory()
        orchestrator.close()

        result = orchestrator.analyze(JobPosting(title="Clerk", description="Filing"))

        assert result.failed is True

    def test_worker_log_records_carry_fingerprint(self, orchestrator_factory, caplog):
        posting = JobPosting(title="Clerk", description="Filing", id="fp-123")
        caplog.handler.addFilter(ContextualFilter(environment="test"))

        with caplog.at_level(logging.DEBUG):
            orchestrator_factory().analyze(posting)

        worker_records = [
            r for r in caplog.records if getattr(r, "event", None) == "analysis.text.completed"
        ]
        assert worker_records
        assert worker_records[0].fingerprint == "fp-123"
        assert worker_records[0].analysis_id
