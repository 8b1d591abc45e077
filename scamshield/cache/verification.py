"""Employer verification cache.

Maps a normalized employer name to a previously computed CompanyVerdict.
Concurrent misses for the same name may both write; the verdict is a pure
function of the key, so whichever write lands last is correct.
"""

from typing import Optional

from pydantic import ValidationError

from scamshield.domain.models import CompanyVerdict
from scamshield.logging import get_logger
from scamshield.utils.hashing import company_cache_key

from .store import CacheStore

logger = get_logger(__name__, component="cache")

DEFAULT_TTL_SECONDS = 24 * 3600


class VerificationCache:
    """Read-through cache of employer verdicts on top of a CacheStore."""

    def __init__(self, store: CacheStore, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.store = store
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key_for(company: str) -> str:
        return company_cache_key(company)

    def get(self, company: str) -> Optional[CompanyVerdict]:
        """Return the cached verdict for ``company``, or None on a miss.

        An undecodable stored value is treated as a miss.

        Raises:
            CacheStoreError: If the backing store is unavailable
        """
        key = self.key_for(company)
        raw = self.store.get(key)
        if raw is None:
            logger.debug("Cache miss", extra={"event": "cache.miss", "cache_key": key})
            return None

        try:
            verdict = CompanyVerdict.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Discarding undecodable cache entry: {e}",
                extra={"event": "cache.corrupt_entry", "cache_key": key},
            )
            return None

        logger.debug("Cache hit", extra={"event": "cache.hit", "cache_key": key})
        return verdict

    def put(self, company: str, verdict: CompanyVerdict) -> None:
        """Store ``verdict`` for ``company`` with the configured TTL.

        Raises:
            CacheStoreError: If the backing store is unavailable
        """
        key = self.key_for(company)
        self.store.set_with_ttl(key, verdict.model_dump_json(), self.ttl_seconds)
        logger.debug(
            "Cache entry stored",
            extra={"event": "cache.stored", "cache_key": key, "ttl_seconds": self.ttl_seconds},
        )
