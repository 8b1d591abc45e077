"""Unit tests for feedback reports and statistics."""

from datetime import timedelta

import pytest

from scamshield.domain.models import AnalysisResult, ReportType
from scamshield.persistence import (
    AnalysisRepository,
    DatabaseConnectionError,
    RecordNotFoundError,
    close_database,
    get_session,
)
from scamshield.pipeline import ReportingService


@pytest.fixture
def reporting(memory_database, clock):
    return ReportingService(clock=clock)


def store(fingerprint, risk, timestamp):
    result = AnalysisResult(fingerprint=fingerprint, risk=risk, confidence=0.8, timestamp=timestamp)
    with get_session() as session:
        AnalysisRepository(session).upsert(fingerprint, result)


class TestRecordReport:
    """Tests for ReportingService.record_report()."""

    def test_scam_report(self, reporting, clock):
        report = reporting.record_report("fp-1", "scam", feedback="  asked for a deposit  ")

        assert report.scam_reports == 1
        assert report.false_positives == 0
        assert report.last_reported_at == clock.now
        assert report.last_feedback == "asked for a deposit"

    def test_false_positive_report(self, reporting):
        reporting.record_report("fp-1", ReportType.SCAM)
        report = reporting.record_report("fp-1", ReportType.FALSE_POSITIVE)

        assert report.scam_reports == 1
        assert report.false_positives == 1
        assert reporting.get_report("fp-1") == report

    def test_reports_do_not_touch_stored_analysis(self, reporting, clock):
        store("fp-1", 0.7, clock.now)

        reporting.record_report("fp-1", "false_positive")

        with get_session() as session:
            assert AnalysisRepository(session).find_recent("fp-1", clock.now).risk == pytest.approx(0.7)

    def test_unknown_report_type_rejected(self, reporting):
        with pytest.raises(ValueError):
            reporting.record_report("fp-1", "spam")

    def test_blank_fingerprint_rejected(self, reporting):
        with pytest.raises(ValueError, match="fingerprint"):
            reporting.record_report("   ", "scam")

    def test_requires_database(self):
        close_database()

        with pytest.raises(DatabaseConnectionError):
            ReportingService().record_report("fp-1", "scam")


class TestGetReport:
    """Tests for ReportingService.get_report()."""

    def test_returns_accumulated_counters(self, reporting):
        reporting.record_report("fp-1", "scam", feedback="wanted gift cards")
        reporting.record_report("fp-1", "scam")

        report = reporting.get_report(" fp-1 ")

        assert report.scam_reports == 2
        assert report.last_feedback == "wanted gift cards"

    def test_unreported_posting_raises_not_found(self, reporting):
        with pytest.raises(RecordNotFoundError, match="fp-unknown"):
            reporting.get_report("fp-unknown")


class TestGetStats:
    """Tests for ReportingService.get_stats()."""

    def test_counts_within_window(self, reporting, clock):
        store("a", 0.2, clock.now - timedelta(days=1))
        store("b", 0.65, clock.now - timedelta(days=2))
        store("c", 0.85, clock.now - timedelta(days=29))
        store("d", 0.95, clock.now - timedelta(days=31))

        stats = reporting.get_stats()

        assert stats.window_days == 30
        assert stats.total_analyses == 3
        assert stats.scams_detected == 2
        assert stats.high_risk_jobs == 1
        assert stats.avg_risk_score == pytest.approx(0.5667, abs=1e-4)
        assert stats.failed_analyses == 0

    def test_custom_window(self, reporting, clock):
        store("a", 0.2, clock.now - timedelta(days=1))
        store("b", 0.65, clock.now - timedelta(days=2))

        stats = reporting.get_stats(days=1)

        assert stats.total_analyses == 1

    def test_threshold_is_exclusive(self, memory_database, clock):
        store("a", 0.6, clock.now)

        stats = ReportingService(scam_threshold=0.6, clock=clock).get_stats()

        assert stats.scams_detected == 0

    def test_empty_database(self, reporting):
        stats = reporting.get_stats(days=7)

        assert stats.total_analyses == 0
        assert stats.avg_risk_score == 0.0

    def test_non_positive_days_rejected(self, reporting):
        with pytest.raises(ValueError):
            reporting.get_stats(days=0)
