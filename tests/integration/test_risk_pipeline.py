"""Integration tests: full risk pipeline over a SQLite database."""

import pytest

from scamshield.adapters import ClassifierHTTPError, ExternalClassifier
from scamshield.analysis import CompanyVerifier, PatternAnalyzer, RiskOrchestrator, SalaryAnalyzer
from scamshield.analysis.scoring import DEFAULT_CONFIDENCE, GENERIC_COMPANY_FLAG, UNVERIFIED_COMPANY_FLAG
from scamshield.cache import DatabaseCacheStore, VerificationCache
from scamshield.config import AppConfig, EnvironmentConfig
from scamshield.domain.models import AnalysisResult
from scamshield.persistence import close_database, get_session, init_database
from scamshield.persistence.schema import AnalysisModel, VerificationCacheModel
from scamshield.pipeline import AnalysisService, DatabaseAnalysisIndex, ReportingService
from scamshield.service import build_service

from tests.helpers import FakeClassifierClient, load_fixture_posting, load_fixture_postings


@pytest.fixture
def database(tmp_path):
    init_database(f"sqlite:///{tmp_path / 'integration.db'}")
    yield
    close_database()


@pytest.fixture
def pipeline(database, clock):
    """Analysis service wired to database-backed stores and a fake classifier."""
    created = []

    def factory(client=None):
        orchestrator = RiskOrchestrator(
            pattern_analyzer=PatternAnalyzer(),
            company_verifier=CompanyVerifier(VerificationCache(DatabaseCacheStore(clock=clock))),
            salary_analyzer=SalaryAnalyzer(),
            classifier=ExternalClassifier(client),
            clock=clock,
        )
        created.append(orchestrator)
        return AnalysisService(orchestrator, DatabaseAnalysisIndex(), clock=clock)

    yield factory

    for orchestrator in created:
        orchestrator.close()


class TestScenarios:
    """End-to-end verdicts for representative postings."""

    def test_work_from_home_scam(self, pipeline, classifier_client):
        result = pipeline(classifier_client).get_or_analyze(load_fixture_posting("work_from_home_scam"))

        assert result.risk == pytest.approx(0.625)
        assert result.confidence == pytest.approx(0.85)
        assert result.flags[0] == "suspicious pattern #1"
        assert GENERIC_COMPANY_FLAG in result.flags
        assert UNVERIFIED_COMPANY_FLAG in result.flags
        assert result.flags[-1] == "external model: unrealistic pay for no experience"

    def test_established_employer(self, pipeline):
        client = FakeClassifierClient({"riskScore": 0.05, "confidence": 0.95, "reasoning": "normal posting"})

        result = pipeline(client).get_or_analyze(load_fixture_posting("senior_engineer"))

        assert result.sub_scores.company_verified is True
        assert result.sub_scores.salary_realistic is True
        assert result.risk == pytest.approx(0.0125)
        assert result.flags == ("external model: normal posting",)

    def test_unrealistic_hourly_rate(self, pipeline):
        result = pipeline().get_or_analyze(load_fixture_posting("data_entry_clerk"))

        assert result.sub_scores.salary_realistic is False
        assert result.sub_scores.salary.confidence == pytest.approx(0.9)
        assert any(flag.startswith("unrealistic salary: ") for flag in result.flags)
        assert result.confidence == DEFAULT_CONFIDENCE
        # verified employer, unrealistic salary 0.6 * 0.2
        assert result.risk == pytest.approx(0.12)

    def test_missing_employer(self, pipeline):
        result = pipeline().get_or_analyze(load_fixture_posting("anonymous_employer"))

        assert UNVERIFIED_COMPANY_FLAG in result.flags
        with get_session() as session:
            assert session.query(VerificationCacheModel).count() == 0


class TestPersistentDeduplication:
    """Stored verdicts survive service instances and window expiry."""

    def test_stored_verdict_is_returned_bit_identical(self, pipeline, classifier_client):
        posting = load_fixture_posting("work_from_home_scam")

        first = pipeline(classifier_client).get_or_analyze(posting)
        second = pipeline(FakeClassifierClient()).get_or_analyze(posting)

        assert second.model_dump_json() == first.model_dump_json()
        with get_session() as session:
            assert session.query(AnalysisModel).count() == 1

    def test_expired_verdict_is_replaced(self, pipeline, classifier_client, clock):
        posting = load_fixture_posting("work_from_home_scam")

        first = pipeline(classifier_client).get_or_analyze(posting)
        clock.advance(days=2)
        second = pipeline(FakeClassifierClient()).get_or_analyze(posting)

        assert second.timestamp > first.timestamp
        assert second.risk == pytest.approx(0.4)
        with get_session() as session:
            assert session.query(AnalysisModel).count() == 1

    def test_corrupt_stored_verdict_is_reanalyzed(self, pipeline, classifier_client):
        posting = load_fixture_posting("work_from_home_scam")
        first = pipeline(classifier_client).get_or_analyze(posting)
        with get_session() as session:
            session.get(AnalysisModel, first.fingerprint).result_json = "{not json"

        second = pipeline(classifier_client).get_or_analyze(posting)

        assert second.failed is False
        assert second.risk == pytest.approx(first.risk)
        with get_session() as session:
            stored = session.get(AnalysisModel, first.fingerprint).result_json
        assert AnalysisResult.model_validate_json(stored) == second

    def test_employer_verdict_is_cached_across_postings(self, pipeline):
        service = pipeline()
        service.get_or_analyze(load_fixture_posting("data_entry_clerk"))

        result = service.get_or_analyze(
            load_fixture_posting("data_entry_clerk", title="Data Entry Specialist")
        )

        assert result.sub_scores.company.cached is True

    def test_failed_classifier_is_not_a_failed_analysis(self, pipeline, clock):
        client = FakeClassifierClient(error=ClassifierHTTPError("bad gateway", status_code=502, url="u"))

        result = pipeline(client).get_or_analyze(load_fixture_posting("work_from_home_scam"))

        assert result.failed is False
        assert result.sub_scores.external.available is False
        assert ReportingService(clock=clock).get_stats().total_analyses == 1


def test_batch_and_stats(pipeline, classifier_client, clock):
    postings = list(load_fixture_postings().values()) + [{"title": "broken"}]

    batch = pipeline(classifier_client).analyze_batch(postings)
    stats = ReportingService(clock=clock).get_stats()

    assert batch.analyzed_count == 4
    assert batch.rejected_count == 1
    assert stats.total_analyses == 4
    assert stats.scams_detected == 1


def test_build_service_without_api_key_degrades(database):
    app_config = AppConfig.model_validate({})

    with build_service(app_config, EnvironmentConfig()) as engine:
        assert engine.classifier.available is False
        assert engine.orchestrator.classifier_deadline == 30.0
        result = engine.analysis.analyze_payload(
            {"title": "Clerk", "description": "Filing", "company": "Acme Corp."}
        )

    assert result.failed is False
    assert result.sub_scores.external.error == "classifier not configured"
    assert result.confidence == DEFAULT_CONFIDENCE
