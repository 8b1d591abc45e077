"""Hashing and key-normalization utilities.

This module provides deterministic helpers for:
- posting fingerprints: the deduplication key derived from title + company
- cache keys: normalized employer names for the verification cache
"""

import hashlib
import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Normalize text for consistent hashing and keying.

    Normalization steps:
    1. Treat None as empty
    2. Convert to lowercase
    3. Strip leading/trailing whitespace
    4. Replace runs of whitespace with a single space

    Args:
        text: Text to normalize

    Returns:
        Normalized text string
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.lower().strip())


def compute_fingerprint(title: str, company: Optional[str] = None) -> str:
    """Compute the deduplication fingerprint of a job posting.

    The fingerprint is a SHA256 hash of ``normalized_title\\nnormalized_company``.
    Cosmetic differences (case, surrounding or repeated whitespace) map to the
    same fingerprint; any change in wording does not.

    Args:
        title: Job title
        company: Employer name (may be missing)

    Returns:
        Hexadecimal SHA256 digest (64 characters)

    Example:
        >>> compute_fingerprint("Data Entry Clerk", "Acme") == compute_fingerprint(" data  entry clerk", "ACME")
        True
    """
    composite = f"{normalize_text(title)}\n{normalize_text(company)}"
    return hash_string(composite)


def company_cache_key(company: str) -> str:
    """Build the verification-cache key for an employer name.

    Args:
        company: Employer name as it appeared on the posting

    Returns:
        Key of the form ``company:<normalized name>``
    """
    return f"company:{normalize_text(company)}"


def hash_string(value: str) -> str:
    """Compute SHA256 hash of a string value.

    Args:
        value: String to hash

    Returns:
        Hexadecimal string representation of SHA256 hash (64 characters)
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
