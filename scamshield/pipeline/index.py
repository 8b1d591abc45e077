"""Recent analysis index: the latest verdict per posting fingerprint.

Staleness is decided at read time by the ``since`` predicate; old entries
are never swept, they simply stop being returned.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from scamshield.domain.models import AnalysisResult
from scamshield.persistence import AnalysisRepository, PersistenceError, get_session
from scamshield.utils.timestamps import ensure_utc


class AnalysisIndexError(Exception):
    """Raised when the index backend cannot be read or written."""

    pass


class AnalysisIndex(ABC):
    """Interface of the recent analysis store."""

    @abstractmethod
    def find(self, fingerprint: str, since: datetime) -> Optional[AnalysisResult]:
        """Return the stored result if its timestamp is at or after ``since``.

        Raises:
            AnalysisIndexError: If the backend is unavailable
        """

    @abstractmethod
    def upsert(self, fingerprint: str, result: AnalysisResult) -> None:
        """Store ``result`` as the current verdict for ``fingerprint``.

        Raises:
            AnalysisIndexError: If the backend is unavailable
        """


class InMemoryAnalysisIndex(AnalysisIndex):
    """Process-local index, mainly for tests and one-shot CLI runs."""

    def __init__(self):
        self._results: Dict[str, AnalysisResult] = {}
        self._lock = threading.Lock()

    def find(self, fingerprint: str, since: datetime) -> Optional[AnalysisResult]:
        with self._lock:
            result = self._results.get(fingerprint)
        if result is None or result.timestamp < ensure_utc(since):
            return None
        return result

    def upsert(self, fingerprint: str, result: AnalysisResult) -> None:
        with self._lock:
            self._results[fingerprint] = result

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


class DatabaseAnalysisIndex(AnalysisIndex):
    """Index backed by the analyses table (requires ``init_database()``)."""

    def find(self, fingerprint: str, since: datetime) -> Optional[AnalysisResult]:
        try:
            with get_session() as session:
                return AnalysisRepository(session).find_recent(fingerprint, since)
        except PersistenceError as e:
            raise AnalysisIndexError(f"Index read failed for {fingerprint}: {e}") from e

    def upsert(self, fingerprint: str, result: AnalysisResult) -> None:
        try:
            with get_session() as session:
                AnalysisRepository(session).upsert(fingerprint, result)
        except PersistenceError as e:
            raise AnalysisIndexError(f"Index write failed for {fingerprint}: {e}") from e
