"""TTL stores and the employer verification cache."""

from .store import CacheStore, CacheStoreError, DatabaseCacheStore, InMemoryCacheStore
from .verification import DEFAULT_TTL_SECONDS, VerificationCache

__all__ = [
    "CacheStore",
    "CacheStoreError",
    "InMemoryCacheStore",
    "DatabaseCacheStore",
    "VerificationCache",
    "DEFAULT_TTL_SECONDS",
]
