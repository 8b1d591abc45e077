"""Engine and session lifecycle for the ScamShield database.

One engine per process, created by ``init_database()``. Analyses, the
verification cache and feedback reports all go through ``get_session()``.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from scamshield.logging import get_logger

from .exceptions import DatabaseConnectionError, PersistenceError

_engine: Engine | None = None
_session_factory: sessionmaker | None = None

logger = get_logger(__name__, component="database")


def init_database(database_url: str) -> None:
    """Create the engine, check connectivity and create missing tables.

    Calling it again replaces the previous engine. SQLite gets foreign keys,
    WAL journaling and a 30 second busy timeout.

    In-memory SQLite databases share a single connection across threads so
    that the orchestrator's worker threads see the same data.

    Args:
        database_url: Database connection URL (e.g., "sqlite:///./data/scamshield.db")

    Raises:
        DatabaseConnectionError: If database initialization fails
    """
    global _engine, _session_factory

    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    if _engine is not None:
        close_database()

    try:
        logger.info(
            "Initializing database",
            extra={
                "event": "database.initializing",
                "database_url": _redact_url(database_url),
            },
        )

        is_sqlite = database_url.startswith("sqlite")
        is_memory = is_sqlite and (":memory:" in database_url or database_url == "sqlite://")

        if database_url.startswith("sqlite:///") and not is_memory:
            db_file = Path(database_url.replace("sqlite:///", "", 1))
            if not db_file.parent.exists():
                logger.info(f"Creating database directory: {db_file.parent}")
                db_file.parent.mkdir(parents=True, exist_ok=True)

        engine_kwargs = {"echo": False, "pool_pre_ping": True, "future": True}
        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if is_memory:
            engine_kwargs["poolclass"] = StaticPool

        _engine = create_engine(database_url, **engine_kwargs)

        if is_sqlite:
            _configure_sqlite(_engine)

        _validate_connection(_engine)

        _session_factory = sessionmaker(
            bind=_engine,
            autocommit=False,
            autoflush=True,
            expire_on_commit=False,
            future=True,
        )

        from .schema import create_schema

        create_schema(_engine)

        logger.info(
            "Database initialized successfully",
            extra={
                "event": "database.initialised",
                "database_url": _redact_url(database_url),
            },
        )

    except DatabaseConnectionError:
        _engine = None
        _session_factory = None
        raise
    except Exception as e:
        _engine = None
        _session_factory = None
        error_msg = f"Failed to initialize database: {e}"
        logger.error(error_msg, exc_info=True)
        raise DatabaseConnectionError(error_msg) from e


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys and Write-Ahead Logging on every new connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def _validate_connection(engine: Engine) -> None:
    """Validate database connection by executing a test query.

    Raises:
        DatabaseConnectionError: If connection test fails
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.debug("Database connection validated successfully")
    except Exception as e:
        raise DatabaseConnectionError(f"Failed to validate database connection: {e}") from e


def _redact_url(url: str) -> str:
    """Redact the password of a database URL for logging.

    Example:
        >>> _redact_url("postgresql://user:secret@db:5432/scamshield")
        'postgresql://user:***@db:5432/scamshield'
    """
    if url.startswith("sqlite"):
        return url

    if "@" in url and "://" in url:
        credentials, host = url.rsplit("@", 1)
        scheme, _, userinfo = credentials.partition("://")
        user = userinfo.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"

    return url


def is_initialized() -> bool:
    """Whether init_database() has completed successfully."""
    return _session_factory is not None


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Provide a database session with automatic transaction management.

    Commits on successful exit, rolls back on exception, always closes.
    SQLAlchemy errors, including those raised by the commit itself, are
    re-raised as PersistenceError.

    Yields:
        Session: SQLAlchemy session for database operations

    Raises:
        DatabaseConnectionError: If database not initialized
        PersistenceError: If a database operation or the commit fails
        Exception: Any exception from operations within the context

    Example:
        >>> with get_session() as session:
        ...     repo = AnalysisRepository(session)
        ...     result = repo.find_recent(fingerprint, since)
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
        logger.debug(
            "Database session committed",
            extra={"event": "database.session.committed"},
        )
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning(
            f"Database transaction failed, rolled back: {e}",
            extra={
                "event": "database.session.failed",
                "error_type": type(e).__name__,
            },
        )
        raise PersistenceError(f"Database transaction failed: {e}") from e
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Database session rolled back due to exception: {e}",
            extra={
                "event": "database.session.rolled_back",
                "error_type": type(e).__name__,
            },
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """Get the database engine instance.

    Raises:
        DatabaseConnectionError: If database not initialized
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )

    return _engine


def close_database() -> None:
    """Close database connections and cleanup resources."""
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database connections", extra={"event": "database.closing"})
        _engine.dispose()
        _engine = None
        _session_factory = None
