"""Employer identity verification.

A name is "generic" when it reads like a staffing or hiring-now front, and
carries "legitimacy indicators" when it looks like a real incorporated
entity. Verdicts are computed from the normalized name and memoized in the
VerificationCache; cache failures degrade to an uncached verdict.
"""

import logging
import re
from typing import Optional

from scamshield.cache import CacheStoreError, VerificationCache
from scamshield.domain.models import CompanySignal, CompanyVerdict
from scamshield.utils.hashing import normalize_text

logger = logging.getLogger(__name__)

GENERIC_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"hiring now",
        r"work from home",
        r"remote work",
        r"online jobs",
        r"employment agency",
        r"staffing",
        r"^job",
        r"^work",
    )
)

LEGITIMACY_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\.com$",
        r"inc\.|llc|ltd\.|corp\.",
        r"founded in \d{4}",
        r"headquarters",
        r"employees",
    )
)

VERIFIED_CONFIDENCE = 0.7
UNVERIFIED_CONFIDENCE = 0.3


def evaluate_company(name: str) -> CompanyVerdict:
    """Compute the verdict for an employer name without touching any cache.

    Example:
        >>> evaluate_company("Acme Corp.").verified
        True
        >>> evaluate_company("Hiring Now LLC").is_generic
        True
    """
    normalized = normalize_text(name)
    is_generic = any(p.search(normalized) for p in GENERIC_PATTERNS)
    has_legit_indicators = any(p.search(normalized) for p in LEGITIMACY_PATTERNS)

    return CompanyVerdict(
        verified=not is_generic and has_legit_indicators,
        confidence=VERIFIED_CONFIDENCE if has_legit_indicators else UNVERIFIED_CONFIDENCE,
        is_generic=is_generic,
    )


class CompanyVerifier:
    """Read-through employer verification on top of a VerificationCache."""

    def __init__(self, cache: Optional[VerificationCache] = None, logger_instance: logging.Logger = None):
        """Initialize CompanyVerifier.

        Args:
            cache: Verification cache; None disables caching entirely
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.cache = cache
        self.logger = logger_instance or logger

    def verify(self, company: Optional[str]) -> CompanySignal:
        """Verify an employer name.

        Empty or blank names short-circuit to an unverified, zero-confidence
        signal without reading or writing the cache.

        Args:
            company: Employer name as it appeared on the posting

        Returns:
            CompanySignal; never raises on cache failure
        """
        if not company or not company.strip():
            return CompanySignal.unknown_employer()

        if self.cache is None:
            return CompanySignal.from_verdict(evaluate_company(company))

        try:
            cached = self.cache.get(company)
        except CacheStoreError as e:
            self.logger.warning(
                f"Verification cache read failed, computing without cache: {e}",
                extra={"event": "cache.read_failed", "error_type": type(e).__name__},
            )
            return CompanySignal.from_verdict(evaluate_company(company), error=str(e))

        if cached is not None:
            return CompanySignal.from_verdict(cached, cached=True)

        verdict = evaluate_company(company)

        try:
            self.cache.put(company, verdict)
        except CacheStoreError as e:
            self.logger.warning(
                f"Verification cache write failed, returning uncached verdict: {e}",
                extra={"event": "cache.write_failed", "error_type": type(e).__name__},
            )
            return CompanySignal.from_verdict(verdict, error=str(e))

        return CompanySignal.from_verdict(verdict)
