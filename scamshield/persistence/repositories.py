"""Data access layer (repositories) for persistence operations.

This module provides repository classes for stored analyses, the employer
verification cache, and user feedback reports. Repositories encapsulate
database operations and return domain models or plain values rather than
ORM models.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from scamshield.domain.models import AnalysisResult, PostingReport, ReportType
from scamshield.utils.timestamps import format_timestamp

from .exceptions import DataIntegrityError, PersistenceError
from .schema import AnalysisModel, PostingReportModel, VerificationCacheModel

logger = logging.getLogger(__name__)


class AnalysisRepository:
    """Repository for stored analysis results."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def find_recent(self, fingerprint: str, since: datetime) -> Optional[AnalysisResult]:
        """Retrieve the stored result for a fingerprint if it is not older than ``since``.

        Args:
            fingerprint: Posting fingerprint
            since: Earliest acceptable creation instant (UTC)

        Returns:
            AnalysisResult exactly as it was stored, or None if absent or stale

        Raises:
            DataIntegrityError: If the stored row cannot be decoded
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(AnalysisModel).where(
                AnalysisModel.fingerprint == fingerprint,
                AnalysisModel.created_at >= format_timestamp(since),
            )
            model = self.session.execute(stmt).scalar_one_or_none()

            if model is None:
                return None

            return model.to_domain()

        except ValidationError as e:
            logger.error(f"Stored analysis {fingerprint} cannot be decoded: {e}")
            raise DataIntegrityError(f"Stored analysis {fingerprint} is corrupt: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving analysis {fingerprint}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve analysis: {e}") from e

    def upsert(self, fingerprint: str, result: AnalysisResult) -> None:
        """Insert or replace the stored result for a fingerprint.

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(AnalysisModel, fingerprint)

            if existing:
                existing.apply(result)
            else:
                self.session.add(AnalysisModel.from_domain(fingerprint, result))

            self.session.flush()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting analysis {fingerprint}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to upsert analysis due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting analysis {fingerprint}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert analysis: {e}") from e

    def summarize_since(
        self, since: datetime, scam_threshold: float, high_risk_threshold: float
    ) -> Dict[str, Any]:
        """Aggregate analyses created at or after ``since``.

        Args:
            since: Start of the statistics window (UTC)
            scam_threshold: Risk strictly above which a posting counts as a scam
            high_risk_threshold: Risk strictly above which a posting is high risk

        Returns:
            Dictionary with total, scams, high_risk, avg_risk and failed counts

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(
                func.count(AnalysisModel.fingerprint),
                func.sum(case((AnalysisModel.risk_score > scam_threshold, 1), else_=0)),
                func.sum(case((AnalysisModel.risk_score > high_risk_threshold, 1), else_=0)),
                func.avg(AnalysisModel.risk_score),
                func.sum(case((AnalysisModel.failed.is_(True), 1), else_=0)),
            ).where(AnalysisModel.created_at >= format_timestamp(since))

            total, scams, high_risk, avg_risk, failed = self.session.execute(stmt).one()

            return {
                "total": total or 0,
                "scams": int(scams or 0),
                "high_risk": int(high_risk or 0),
                "avg_risk": float(avg_risk or 0.0),
                "failed": int(failed or 0),
            }

        except SQLAlchemyError as e:
            logger.error(f"Error summarizing analyses: {e}", exc_info=True)
            raise PersistenceError(f"Failed to summarize analyses: {e}") from e


class VerificationCacheRepository:
    """Repository for employer verification cache rows.

    Values are opaque JSON strings; expiry is decided by comparing the
    stored ``expires_at`` with the instant passed in by the caller.
    """

    def __init__(self, session: Session):
        self.session = session

    def get(self, cache_key: str, now: datetime) -> Optional[str]:
        """Return the stored value if the entry exists and has not expired.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(VerificationCacheModel.value_json).where(
                VerificationCacheModel.cache_key == cache_key,
                VerificationCacheModel.expires_at > format_timestamp(now),
            )
            return self.session.execute(stmt).scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error reading cache key {cache_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to read cache entry: {e}") from e

    def set(self, cache_key: str, value_json: str, stored_at: datetime, expires_at: datetime) -> None:
        """Insert or overwrite a cache entry (last write wins).

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(VerificationCacheModel, cache_key)

            if existing:
                existing.value_json = value_json
                existing.stored_at = format_timestamp(stored_at)
                existing.expires_at = format_timestamp(expires_at)
            else:
                self.session.add(
                    VerificationCacheModel(
                        cache_key=cache_key,
                        value_json=value_json,
                        stored_at=format_timestamp(stored_at),
                        expires_at=format_timestamp(expires_at),
                    )
                )

            self.session.flush()

        except SQLAlchemyError as e:
            logger.error(f"Error writing cache key {cache_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to write cache entry: {e}") from e

    def purge_expired(self, now: datetime) -> int:
        """Delete entries whose expiry is at or before ``now``.

        Returns:
            Number of deleted rows

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = delete(VerificationCacheModel).where(
                VerificationCacheModel.expires_at <= format_timestamp(now)
            )
            result = self.session.execute(stmt)
            self.session.flush()

            deleted_count = result.rowcount
            logger.info(f"Purged {deleted_count} expired cache entries")
            return deleted_count

        except SQLAlchemyError as e:
            logger.error(f"Error purging cache entries: {e}", exc_info=True)
            raise PersistenceError(f"Failed to purge cache entries: {e}") from e


class ReportRepository:
    """Repository for user feedback counters."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, fingerprint: str) -> Optional[PostingReport]:
        """Retrieve the feedback counters for a fingerprint, if any.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(PostingReportModel, fingerprint)
            return model.to_domain() if model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving report {fingerprint}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve report: {e}") from e

    def increment(
        self,
        fingerprint: str,
        report_type: ReportType,
        reported_at: datetime,
        feedback: Optional[str] = None,
    ) -> PostingReport:
        """Increment one counter for a fingerprint, creating the record when absent.

        Args:
            fingerprint: Posting fingerprint
            report_type: Which counter to increment
            reported_at: Report instant (UTC)
            feedback: Optional free-text feedback; replaces the previous one

        Returns:
            Updated PostingReport

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(PostingReportModel, fingerprint)

            if model is None:
                model = PostingReportModel(fingerprint=fingerprint, scam_reports=0, false_positives=0)
                self.session.add(model)

            if report_type == ReportType.SCAM:
                model.scam_reports = (model.scam_reports or 0) + 1
            else:
                model.false_positives = (model.false_positives or 0) + 1

            model.last_reported_at = format_timestamp(reported_at)
            if feedback:
                model.last_feedback = feedback

            self.session.flush()
            return model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error recording report for {fingerprint}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to record report: {e}") from e
