"""Key-value stores with per-entry time-to-live.

Two backends share the ``CacheStore`` interface:
- InMemoryCacheStore: process-local dict, expired entries dropped lazily on read
- DatabaseCacheStore: verification_cache table, survives restarts

Any backend failure surfaces as ``CacheStoreError`` so callers can degrade
with a single except clause.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from scamshield.logging import get_logger
from scamshield.persistence import PersistenceError, VerificationCacheRepository, get_session
from scamshield.utils.timestamps import utc_now

logger = get_logger(__name__, component="cache")

Clock = Callable[[], datetime]


class CacheStoreError(Exception):
    """Raised when a cache backend cannot be read or written."""

    pass


class CacheStore(ABC):
    """Interface of a TTL key-value store holding string values."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value for ``key``, or None if absent or expired.

        Raises:
            CacheStoreError: If the backend is unavailable
        """

    @abstractmethod
    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds`` (last write wins).

        Raises:
            CacheStoreError: If the backend is unavailable
        """


class InMemoryCacheStore(CacheStore):
    """Thread-safe in-process store."""

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= now:
                del self._entries[key]
                return None
            return value

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._entries[key] = (value, expires_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class DatabaseCacheStore(CacheStore):
    """Store backed by the verification_cache table.

    Requires ``init_database()`` to have been called. Expired rows stay in
    the table until ``purge_expired()`` runs but are never returned by ``get``.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock

    def get(self, key: str) -> Optional[str]:
        try:
            with get_session() as session:
                return VerificationCacheRepository(session).get(key, self._clock())
        except PersistenceError as e:
            raise CacheStoreError(f"Cache read failed for {key}: {e}") from e

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        try:
            with get_session() as session:
                VerificationCacheRepository(session).set(
                    key, value, stored_at=now, expires_at=now + timedelta(seconds=ttl_seconds)
                )
        except PersistenceError as e:
            raise CacheStoreError(f"Cache write failed for {key}: {e}") from e

    def purge_expired(self) -> int:
        """Delete expired rows.

        Returns:
            Number of rows deleted

        Raises:
            CacheStoreError: If the table cannot be cleaned
        """
        try:
            with get_session() as session:
                deleted = VerificationCacheRepository(session).purge_expired(self._clock())
        except PersistenceError as e:
            raise CacheStoreError(f"Cache purge failed: {e}") from e

        logger.info(
            f"Purged {deleted} expired verification cache entries",
            extra={"event": "cache.purged", "deleted_count": deleted},
        )
        return deleted
