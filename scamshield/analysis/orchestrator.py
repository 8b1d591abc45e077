"""Risk orchestration: concurrent fan-out of the four analyzers."""

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

from scamshield.adapters.classifier import ExternalClassifier
from scamshield.domain.models import AnalysisResult, ExternalSignal, JobPosting, SubScores
from scamshield.logging import get_logger
from scamshield.logging.context import log_context, run_in_current_context
from scamshield.utils.timestamps import utc_now

from .company import CompanyVerifier
from .patterns import PatternAnalyzer
from .salary import SalaryAnalyzer
from .scoring import build_flags, compute_composite_risk, resolve_confidence

logger = get_logger(__name__, component="orchestrator")

DEFAULT_MAX_WORKERS = 4


class RiskOrchestrator:
    """
    Runs the text, company, salary and external analyses concurrently and
    combines them into one AnalysisResult.

    Each analyzer isolates its own failures, so the join normally cannot
    fail; anything that still escapes is a defect and produces the fail-safe
    result (``failed=True``) instead of propagating to the caller.

    The external classification is bounded by ``classifier_deadline``: when it
    has not answered in time the analysis proceeds with an unavailable
    external signal and the late call is left to finish on its worker.
    """

    def __init__(
        self,
        pattern_analyzer: PatternAnalyzer,
        company_verifier: CompanyVerifier,
        salary_analyzer: SalaryAnalyzer,
        classifier: ExternalClassifier,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], datetime] = utc_now,
        classifier_deadline: Optional[float] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            pattern_analyzer: Text pattern analyzer
            company_verifier: Employer verifier (with its cache)
            salary_analyzer: Salary plausibility analyzer
            classifier: External classifier adapter
            max_workers: Thread pool size shared by all analyses
            clock: Source of result timestamps
            classifier_deadline: Seconds to wait for the external classifier,
                counted from submission (None waits indefinitely)
        """
        self.pattern_analyzer = pattern_analyzer
        self.company_verifier = company_verifier
        self.salary_analyzer = salary_analyzer
        self.classifier = classifier
        self.clock = clock
        self.classifier_deadline = classifier_deadline
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="scamshield-analysis"
        )

    def analyze(self, posting: JobPosting) -> AnalysisResult:
        """
        Analyze one posting.

        Returns:
            AnalysisResult; the fail-safe result if the pipeline itself broke
        """
        fingerprint = posting.fingerprint
        started = time.monotonic()

        with log_context(fingerprint=fingerprint, analysis_id=uuid4().hex):
            logger.info("Analysis started", extra={"event": "analysis.started"})

            try:
                result = self._run(posting, fingerprint)
            except Exception as e:
                logger.error(
                    f"Analysis failed, returning fail-safe result: {e}",
                    exc_info=True,
                    extra={"event": "analysis.failed", "error_type": type(e).__name__},
                )
                return AnalysisResult.failure(posting, str(e) or type(e).__name__, timestamp=self.clock())

            logger.info(
                "Analysis completed",
                extra={
                    "event": "analysis.completed",
                    "risk": result.risk,
                    "confidence": result.confidence,
                    "flag_count": len(result.flags),
                    "duration_ms": int((time.monotonic() - started) * 1000),
                },
            )
            return result

    def _run(self, posting: JobPosting, fingerprint: str) -> AnalysisResult:
        submit = self._executor.submit

        text_future = submit(run_in_current_context(self.pattern_analyzer.analyze), posting)
        company_future = submit(run_in_current_context(self.company_verifier.verify), posting.company)
        salary_future = submit(
            run_in_current_context(self.salary_analyzer.analyze), posting.salary, posting.title
        )
        submitted = time.monotonic()
        external_future = submit(run_in_current_context(self.classifier.classify), posting)

        sub_scores = SubScores(
            text=text_future.result(),
            company=company_future.result(),
            salary=salary_future.result(),
            external=self._await_external(external_future, submitted),
        )

        return AnalysisResult(
            fingerprint=fingerprint,
            risk=compute_composite_risk(sub_scores),
            confidence=resolve_confidence(sub_scores.external),
            flags=tuple(build_flags(sub_scores)),
            sub_scores=sub_scores,
            job_title=posting.title,
            company=posting.company,
            location=posting.location,
            salary=posting.salary,
            url=posting.url,
            site=posting.site,
            timestamp=self.clock(),
        )

    def _await_external(self, future, submitted: float) -> ExternalSignal:
        if self.classifier_deadline is None:
            return future.result()

        remaining = self.classifier_deadline - (time.monotonic() - submitted)
        try:
            return future.result(timeout=max(remaining, 0.0))
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                f"Classifier did not answer within {self.classifier_deadline}s, continuing without it",
                extra={"event": "classifier.deadline_exceeded"},
            )
            return ExternalSignal.unavailable(
                "classifier deadline exceeded", model=getattr(self.classifier, "model", None)
            )

    def close(self, wait: bool = True) -> None:
        """Shut down the worker pool; further analyses return the fail-safe result."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "RiskOrchestrator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
