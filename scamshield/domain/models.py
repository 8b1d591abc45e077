"""Core domain models for postings, analyzer signals, and analysis results.

This module defines the data structures used throughout the application:
- JobPosting: the immutable input to the pipeline
- SubSignal and its subclasses: the bounded output of one analyzer
- CompanyVerdict: the value stored in the verification cache
- AnalysisResult: the composite verdict returned to callers and persisted
- PostingReport, AnalysisStats: user feedback and aggregate statistics
"""

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from scamshield.utils.hashing import compute_fingerprint
from scamshield.utils.numbers import clamp_unit
from scamshield.utils.timestamps import ensure_utc, utc_now

from .exceptions import InvalidPostingError

ANALYSIS_ERROR_FLAG = "analysis error"


class JobTier(str, Enum):
    """Seniority tiers used by salary plausibility checks."""

    ENTRY = "entry-level"
    MID = "mid-level"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class ReportType(str, Enum):
    """Kinds of user feedback that can be filed against a posting."""

    SCAM = "scam"
    FALSE_POSITIVE = "false_positive"


class JobPosting(BaseModel):
    """A job posting submitted for analysis.

    Title and description are required; everything else is optional because
    the scraping layer cannot always find it. The pipeline never mutates a
    posting.
    """

    title: str = Field(..., description="Job title")
    description: str = Field(..., description="Full job description text")
    company: Optional[str] = Field(None, description="Employer name")
    location: Optional[str] = Field(None, description="Job location")
    salary: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("salary", "salaryText", "salary_text"),
        description="Free-form salary text (hourly or annual)",
    )
    url: Optional[str] = Field(None, description="Link to the posting")
    site: Optional[str] = Field(None, description="Origin site identifier")
    id: Optional[str] = Field(None, description="Caller-supplied fingerprint")

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "json_schema_extra": {"example": {
            "title": "Senior Software Engineer",
            "description": "We are looking for a talented engineer...",
            "company": "Acme Corp.",
            "location": "Austin, TX",
            "salary": "$130,000/year",
            "url": "https://jobs.example.com/123",
            "site": "linkedin",
        }},
    }

    @field_validator("title", "description")
    @classmethod
    def require_text(cls, v: str) -> str:
        """Strip whitespace from required string fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, v: Any) -> Any:
        """Accept integer ids from scrapers that number their postings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("company", "location", "salary", "url", "site", "id")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        """Strip optional fields, mapping blank strings to None."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    @property
    def fingerprint(self) -> str:
        """The supplied id, or a stable hash of title + company."""
        return self.id or compute_fingerprint(self.title, self.company)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "JobPosting":
        """Validate a raw request payload into a posting.

        Args:
            payload: Mapping with at least ``title`` and ``description``

        Returns:
            Validated JobPosting

        Raises:
            InvalidPostingError: If the payload is not a mapping or required
                fields are missing or blank
        """
        if not isinstance(payload, Mapping):
            raise InvalidPostingError(
                f"Posting payload must be an object, got {type(payload).__name__}"
            )

        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field_path = " -> ".join(str(loc) for loc in error["loc"])
                if error["type"] == "missing":
                    errors.append(f"Missing required field: {field_path}")
                else:
                    errors.append(f"{field_path}: {error['msg']}")
            raise InvalidPostingError("Incomplete job data", errors=errors) from e


class SubSignal(BaseModel):
    """Bounded output of a single analyzer.

    ``score`` is risk-oriented (higher means more suspicious) and, like
    ``confidence``, is clamped into [0, 1] whatever the analyzer produced.
    """

    score: float = Field(0.0, description="Risk contribution in [0, 1]")
    confidence: float = Field(0.0, description="Analyzer confidence in [0, 1]")

    model_config = {"frozen": True}

    @field_validator("score", "confidence", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> float:
        return clamp_unit(v)


class TextSignal(SubSignal):
    """Pattern analyzer output."""

    matched_patterns: Tuple[str, ...] = Field(
        default=(), description="Ordered, human-readable evidence labels"
    )
    urgency_count: int = Field(0, ge=0, description="Urgency vocabulary occurrences")
    grammar_issue_count: int = Field(0, ge=0, description="Known grammar-error occurrences")
    urgency_score: float = Field(0.0, description="urgency_count / 10, clamped")
    grammar_score: float = Field(0.0, description="grammar_issue_count / 20, clamped")

    @field_validator("urgency_score", "grammar_score", mode="before")
    @classmethod
    def clamp_ratios(cls, v: Any) -> float:
        return clamp_unit(v)


class CompanyVerdict(BaseModel):
    """Employer legitimacy verdict as stored in the verification cache."""

    verified: bool
    confidence: float
    is_generic: bool = False

    model_config = {"frozen": True}

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> float:
        return clamp_unit(v)


class CompanySignal(SubSignal):
    """Company verifier output."""

    verified: bool = False
    is_generic: bool = False
    cached: bool = Field(False, description="Whether the verdict came from the cache")
    error: Optional[str] = Field(None, description="Cache degradation cause, if any")

    @classmethod
    def from_verdict(
        cls, verdict: CompanyVerdict, cached: bool = False, error: Optional[str] = None
    ) -> "CompanySignal":
        return cls(
            score=0.0 if verdict.verified else 1.0,
            confidence=verdict.confidence,
            verified=verdict.verified,
            is_generic=verdict.is_generic,
            cached=cached,
            error=error,
        )

    @classmethod
    def unknown_employer(cls) -> "CompanySignal":
        """Verdict for postings that name no employer at all."""
        return cls(score=1.0, confidence=0.0, verified=False, is_generic=False)


class SalarySignal(SubSignal):
    """Salary plausibility analyzer output."""

    realistic: bool = True
    reason: Optional[str] = None
    tier: Optional[JobTier] = None
    figure: Optional[int] = Field(None, description="Largest number found in the salary text")
    hourly: bool = False


class ExternalSignal(SubSignal):
    """External classifier output. ``score`` carries the model's riskScore."""

    reasoning: str = ""
    model: Optional[str] = None
    available: bool = Field(True, description="False when the classifier degraded")
    error: Optional[str] = None

    @property
    def risk_score(self) -> float:
        return self.score

    @classmethod
    def unavailable(cls, error: str, model: Optional[str] = None) -> "ExternalSignal":
        """Neutral, zero-confidence signal used whenever classification fails."""
        return cls(
            score=0.0,
            confidence=0.0,
            reasoning="classification unavailable",
            model=model,
            available=False,
            error=error,
        )


class SubScores(BaseModel):
    """Per-analyzer signals preserved on a result for audit and debugging."""

    text: TextSignal
    company: CompanySignal
    salary: SalarySignal
    external: ExternalSignal

    model_config = {"frozen": True}

    @property
    def text_score(self) -> float:
        return self.text.score

    @property
    def company_verified(self) -> bool:
        return self.company.verified

    @property
    def salary_realistic(self) -> bool:
        return self.salary.realistic

    @property
    def pattern_matches(self) -> Tuple[str, ...]:
        return self.text.matched_patterns

    @property
    def external_risk_score(self) -> float:
        return self.external.score


class AnalysisResult(BaseModel):
    """Composite fraud-risk verdict for one posting.

    Immutable once produced and persisted as-is. ``failed`` marks the
    fail-safe result produced when the pipeline itself broke; such a result
    reports zero risk and must not be read as a genuine low-risk verdict.
    """

    fingerprint: str = Field(..., description="Posting fingerprint this verdict belongs to")
    risk: float = Field(..., description="Composite risk in [0, 1]")
    confidence: float = Field(..., description="Verdict confidence in [0, 1]")
    flags: Tuple[str, ...] = Field(default=(), description="Ordered evidence strings")
    sub_scores: Optional[SubScores] = Field(None, description="Per-analyzer signals")
    job_title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    url: Optional[str] = None
    site: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now, description="Creation instant (UTC)")
    failed: bool = Field(False, description="True for the fail-safe result of a pipeline defect")
    error: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("risk", "confidence", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> float:
        return clamp_unit(v)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @classmethod
    def failure(
        cls, posting: JobPosting, error: str, timestamp: Optional[datetime] = None
    ) -> "AnalysisResult":
        """Fail-safe result for an unexpected pipeline defect."""
        return cls(
            fingerprint=posting.fingerprint,
            risk=0.0,
            confidence=0.0,
            flags=(ANALYSIS_ERROR_FLAG,),
            sub_scores=None,
            job_title=posting.title,
            company=posting.company,
            location=posting.location,
            salary=posting.salary,
            url=posting.url,
            site=posting.site,
            timestamp=timestamp or utc_now(),
            failed=True,
            error=error,
        )

    def to_payload(self) -> dict:
        """JSON-compatible representation for callers."""
        return self.model_dump(mode="json")


class PostingReport(BaseModel):
    """Accumulated user feedback for a posting fingerprint."""

    fingerprint: str
    scam_reports: int = Field(0, ge=0)
    false_positives: int = Field(0, ge=0)
    last_reported_at: Optional[datetime] = None
    last_feedback: Optional[str] = None

    @field_validator("last_reported_at")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class AnalysisStats(BaseModel):
    """Aggregate statistics over recently stored analyses."""

    window_days: int
    total_analyses: int = 0
    scams_detected: int = 0
    high_risk_jobs: int = 0
    avg_risk_score: float = 0.0
    failed_analyses: int = 0
