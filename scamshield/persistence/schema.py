"""Database schema definition and ORM models.

Three tables back the risk engine:
- analyses: the latest stored verdict per posting fingerprint
- verification_cache: employer verdicts with an expiry instant
- posting_reports: accumulated user feedback per fingerprint

Timestamps are stored as ISO 8601 strings with microseconds and a 'Z'
suffix, so lexicographic order equals chronological order.
"""

import logging

from sqlalchemy import Boolean, Column, Float, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from scamshield.domain.models import AnalysisResult, PostingReport
from scamshield.utils.timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

Base = declarative_base()


class AnalysisModel(Base):
    """ORM model for the analyses table.

    The full result is kept as JSON in ``result_json`` so a stored verdict is
    returned exactly as it was produced; the scalar columns exist for
    filtering and aggregate statistics.
    """

    __tablename__ = "analyses"

    fingerprint = Column(String(128), primary_key=True, nullable=False)
    created_at = Column(String(50), nullable=False)

    risk_score = Column(Float, nullable=False)
    confidence = Column(Float, nullable=False)
    failed = Column(Boolean, nullable=False, default=False)

    job_title = Column(Text, nullable=True)
    company = Column(String(255), nullable=True)
    site = Column(String(100), nullable=True)

    result_json = Column(Text, nullable=False)

    __table_args__ = (Index("idx_analyses_created_at", "created_at"),)

    def to_domain(self) -> AnalysisResult:
        return AnalysisResult.model_validate_json(self.result_json)

    def apply(self, result: AnalysisResult) -> None:
        """Overwrite every column from a domain result."""
        self.created_at = format_timestamp(result.timestamp)
        self.risk_score = result.risk
        self.confidence = result.confidence
        self.failed = result.failed
        self.job_title = result.job_title
        self.company = result.company
        self.site = result.site
        self.result_json = result.model_dump_json()

    @classmethod
    def from_domain(cls, fingerprint: str, result: AnalysisResult) -> "AnalysisModel":
        model = cls(fingerprint=fingerprint)
        model.apply(result)
        return model


class VerificationCacheModel(Base):
    """ORM model for the verification_cache table."""

    __tablename__ = "verification_cache"

    cache_key = Column(String(512), primary_key=True, nullable=False)
    value_json = Column(Text, nullable=False)
    stored_at = Column(String(50), nullable=False)
    expires_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_verification_cache_expires_at", "expires_at"),)


class PostingReportModel(Base):
    """ORM model for the posting_reports table."""

    __tablename__ = "posting_reports"

    fingerprint = Column(String(128), primary_key=True, nullable=False)
    scam_reports = Column(Integer, nullable=False, default=0)
    false_positives = Column(Integer, nullable=False, default=0)
    last_reported_at = Column(String(50), nullable=True)
    last_feedback = Column(Text, nullable=True)

    def to_domain(self) -> PostingReport:
        return PostingReport(
            fingerprint=self.fingerprint,
            scam_reports=self.scam_reports or 0,
            false_positives=self.false_positives or 0,
            last_reported_at=parse_timestamp(self.last_reported_at),
            last_feedback=self.last_feedback,
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
