"""Persistence layer for database operations using SQLAlchemy (SQLite by default).

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - AnalysisRepository: stored verdicts per posting fingerprint
    - VerificationCacheRepository: employer verdict cache rows
    - ReportRepository: user feedback counters

Example usage:
    >>> from scamshield.persistence import init_database, get_session, AnalysisRepository
    >>>
    >>> init_database("sqlite:///./data/scamshield.db")
    >>>
    >>> with get_session() as session:
    ...     repo = AnalysisRepository(session)
    ...     result = repo.find_recent(fingerprint, since)
"""

from .database import close_database, get_engine, get_session, init_database, is_initialized
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import AnalysisRepository, ReportRepository, VerificationCacheRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "is_initialized",
    # Repositories
    "AnalysisRepository",
    "VerificationCacheRepository",
    "ReportRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
