"""Deduplicated analysis entry point, feedback reports and statistics."""

from .index import AnalysisIndex, AnalysisIndexError, DatabaseAnalysisIndex, InMemoryAnalysisIndex
from .models import BatchItem, BatchResult
from .reporting import ReportingService
from .service import DEFAULT_DEDUP_WINDOW_SECONDS, AnalysisService

__all__ = [
    "AnalysisService",
    "DEFAULT_DEDUP_WINDOW_SECONDS",
    "AnalysisIndex",
    "AnalysisIndexError",
    "InMemoryAnalysisIndex",
    "DatabaseAnalysisIndex",
    "BatchItem",
    "BatchResult",
    "ReportingService",
]
