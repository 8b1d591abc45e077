"""Data models for batch analysis reporting."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scamshield.domain.models import AnalysisResult


@dataclass
class BatchItem:
    """
    Outcome for one posting of a batch.

    Attributes:
        index: Position of the posting in the submitted batch
        result: Analysis result, None when the posting was rejected
        error: Validation or processing error for a rejected posting
    """

    index: int
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    def to_payload(self) -> Dict[str, Any]:
        if self.result is not None:
            return self.result.to_payload()
        return {"index": self.index, "error": self.error}


@dataclass
class BatchResult:
    """
    Aggregate outcome of analyze_batch.

    Attributes:
        items: Per-posting outcomes in submission order
        analyzed_count: Postings that produced a result (fresh or cached)
        rejected_count: Postings rejected before analysis
        failed_count: Results that are fail-safe verdicts (``failed=True``)
    """

    items: List[BatchItem] = field(default_factory=list)
    analyzed_count: int = 0
    rejected_count: int = 0
    failed_count: int = 0

    def __post_init__(self):
        """Compute counters from items if not already set."""
        if self.items and self.analyzed_count == 0 and self.rejected_count == 0:
            self.analyzed_count = sum(1 for item in self.items if item.ok)
            self.rejected_count = sum(1 for item in self.items if not item.ok)
            self.failed_count = sum(1 for item in self.items if item.ok and item.result.failed)

    @property
    def had_errors(self) -> bool:
        return self.rejected_count > 0 or self.failed_count > 0
