"""Analysis deduplication layer: the public entry point of the risk engine."""

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Union

from scamshield.analysis.orchestrator import RiskOrchestrator
from scamshield.domain.exceptions import InvalidPostingError
from scamshield.domain.models import AnalysisResult, JobPosting
from scamshield.logging import get_logger
from scamshield.logging.context import log_context
from scamshield.utils.timestamps import utc_now, window_start

from .index import AnalysisIndex, AnalysisIndexError
from .models import BatchItem, BatchResult

logger = get_logger(__name__, component="pipeline")

DEFAULT_DEDUP_WINDOW_SECONDS = 24 * 3600


class AnalysisService:
    """
    Returns a recent stored verdict for a posting when one exists, otherwise
    runs the orchestrator and stores the new verdict.

    Within the window, repeated calls for one fingerprint return the stored
    result verbatim. The check-then-act sequence is not atomic: two
    concurrent misses may both analyze, and the last write wins.
    """

    def __init__(
        self,
        orchestrator: RiskOrchestrator,
        index: AnalysisIndex,
        dedup_window_seconds: int = DEFAULT_DEDUP_WINDOW_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the service.

        Args:
            orchestrator: Runs a fresh analysis on a miss
            index: Store of recent verdicts
            dedup_window_seconds: How long a stored verdict stays current
            clock: Source of "now" for the window predicate
        """
        if dedup_window_seconds <= 0:
            raise ValueError(f"dedup_window_seconds must be positive, got {dedup_window_seconds}")

        self.orchestrator = orchestrator
        self.index = index
        self.dedup_window_seconds = dedup_window_seconds
        self.clock = clock

    def get_or_analyze(self, posting: JobPosting) -> AnalysisResult:
        """
        Return the current verdict for a posting.

        Index failures are logged and treated as a miss (on read) or a
        skipped write. Fail-safe results are returned but never stored.
        """
        fingerprint = posting.fingerprint

        with log_context(fingerprint=fingerprint):
            since = window_start(self.clock(), self.dedup_window_seconds)

            try:
                stored = self.index.find(fingerprint, since)
            except AnalysisIndexError as e:
                logger.warning(
                    f"Analysis index read failed, analyzing afresh: {e}",
                    extra={"event": "dedup.read_failed", "error_type": type(e).__name__},
                )
                stored = None

            if stored is not None:
                logger.info("Returning stored analysis", extra={"event": "dedup.hit"})
                return stored

            logger.debug("No recent analysis stored", extra={"event": "dedup.miss"})
            result = self.orchestrator.analyze(posting)

            if result.failed:
                logger.warning(
                    "Not storing fail-safe result",
                    extra={"event": "dedup.store_skipped", "error": result.error},
                )
                return result

            try:
                self.index.upsert(fingerprint, result)
            except AnalysisIndexError as e:
                logger.warning(
                    f"Analysis index write failed, result not stored: {e}",
                    extra={"event": "dedup.write_failed", "error_type": type(e).__name__},
                )

            return result

    def analyze_payload(self, payload: Mapping[str, Any]) -> AnalysisResult:
        """
        Validate a raw posting payload and analyze it.

        Raises:
            InvalidPostingError: If title or description is missing or blank
        """
        return self.get_or_analyze(JobPosting.from_payload(payload))

    def analyze_batch(
        self, postings: Iterable[Union[JobPosting, Mapping[str, Any]]]
    ) -> BatchResult:
        """
        Analyze several postings independently.

        A rejected or broken posting is recorded on its item and never
        stops the rest of the batch.
        """
        items = []

        for position, entry in enumerate(postings):
            try:
                posting = entry if isinstance(entry, JobPosting) else JobPosting.from_payload(entry)
                items.append(BatchItem(index=position, result=self.get_or_analyze(posting)))
            except InvalidPostingError as e:
                logger.warning(
                    f"Rejected posting #{position}: {e}",
                    extra={"event": "batch.item.rejected", "index": position},
                )
                items.append(BatchItem(index=position, error=str(e)))
            except Exception as e:
                logger.error(
                    f"Unexpected error analyzing posting #{position}: {e}",
                    exc_info=True,
                    extra={"event": "batch.item.failed", "index": position},
                )
                items.append(BatchItem(index=position, error=str(e) or type(e).__name__))

        batch = BatchResult(items=items)
        logger.info(
            "Batch analysis completed",
            extra={
                "event": "batch.completed",
                "analyzed_count": batch.analyzed_count,
                "rejected_count": batch.rejected_count,
                "failed_count": batch.failed_count,
            },
        )
        return batch
