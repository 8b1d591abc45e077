"""Domain models for the ScamShield risk engine."""

from .exceptions import InvalidPostingError
from .models import (
    ANALYSIS_ERROR_FLAG,
    AnalysisResult,
    AnalysisStats,
    CompanySignal,
    CompanyVerdict,
    ExternalSignal,
    JobPosting,
    JobTier,
    PostingReport,
    ReportType,
    SalarySignal,
    SubScores,
    SubSignal,
    TextSignal,
)

__all__ = [
    "ANALYSIS_ERROR_FLAG",
    "AnalysisResult",
    "AnalysisStats",
    "CompanySignal",
    "CompanyVerdict",
    "ExternalSignal",
    "InvalidPostingError",
    "JobPosting",
    "JobTier",
    "PostingReport",
    "ReportType",
    "SalarySignal",
    "SubScores",
    "SubSignal",
    "TextSignal",
]
