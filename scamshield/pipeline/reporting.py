"""User feedback reports and aggregate statistics.

Report counters are informational: nothing here feeds back into scoring.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from scamshield.domain.models import AnalysisStats, PostingReport, ReportType
from scamshield.logging import get_logger
from scamshield.persistence import (
    AnalysisRepository,
    RecordNotFoundError,
    ReportRepository,
    get_session,
)
from scamshield.utils.timestamps import utc_now

logger = get_logger(__name__, component="reporting")

DEFAULT_STATS_DAYS = 30
DEFAULT_SCAM_THRESHOLD = 0.6
DEFAULT_HIGH_RISK_THRESHOLD = 0.8


class ReportingService:
    """Records user feedback and summarizes stored analyses.

    Requires ``init_database()``; persistence errors propagate to the caller.
    """

    def __init__(
        self,
        scam_threshold: float = DEFAULT_SCAM_THRESHOLD,
        high_risk_threshold: float = DEFAULT_HIGH_RISK_THRESHOLD,
        default_days: int = DEFAULT_STATS_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.scam_threshold = scam_threshold
        self.high_risk_threshold = high_risk_threshold
        self.default_days = default_days
        self.clock = clock

    def record_report(
        self,
        fingerprint: str,
        report_type: Union[ReportType, str],
        feedback: Optional[str] = None,
    ) -> PostingReport:
        """Increment the scam or false-positive counter of a posting.

        Args:
            fingerprint: Posting fingerprint the report refers to
            report_type: ``scam`` or ``false_positive``
            feedback: Optional free-text comment from the reporter

        Returns:
            Updated counters for the fingerprint

        Raises:
            ValueError: If the fingerprint is blank or the report type unknown
            PersistenceError: If the report cannot be stored
        """
        if not fingerprint or not fingerprint.strip():
            raise ValueError("fingerprint cannot be empty")

        report_type = ReportType(report_type)
        feedback = feedback.strip() if feedback and feedback.strip() else None

        with get_session() as session:
            report = ReportRepository(session).increment(
                fingerprint.strip(), report_type, reported_at=self.clock(), feedback=feedback
            )

        logger.info(
            f"Recorded {report_type.value} report",
            extra={
                "event": "report.recorded",
                "fingerprint": report.fingerprint,
                "report_type": report_type.value,
                "scam_reports": report.scam_reports,
                "false_positives": report.false_positives,
            },
        )
        return report

    def get_report(self, fingerprint: str) -> PostingReport:
        """Current feedback counters of a posting.

        Raises:
            RecordNotFoundError: If nobody has reported the posting yet
            PersistenceError: If the reports cannot be read
        """
        with get_session() as session:
            report = ReportRepository(session).get(fingerprint.strip())

        if report is None:
            raise RecordNotFoundError(f"No reports recorded for posting {fingerprint}")
        return report

    def get_stats(self, days: Optional[int] = None) -> AnalysisStats:
        """Aggregate analyses stored within the last ``days`` days.

        Raises:
            ValueError: If days is not positive
            PersistenceError: If the analyses cannot be read
        """
        days = days if days is not None else self.default_days
        if days < 1:
            raise ValueError(f"days must be at least 1, got {days}")

        since = self.clock() - timedelta(days=days)

        with get_session() as session:
            summary = AnalysisRepository(session).summarize_since(
                since, self.scam_threshold, self.high_risk_threshold
            )

        stats = AnalysisStats(
            window_days=days,
            total_analyses=summary["total"],
            scams_detected=summary["scams"],
            high_risk_jobs=summary["high_risk"],
            avg_risk_score=round(summary["avg_risk"], 4),
            failed_analyses=summary["failed"],
        )

        logger.debug(
            "Computed analysis statistics",
            extra={"event": "stats.computed", **stats.model_dump()},
        )
        return stats
