"""Utility functions for hashing, time handling, and numeric bounds."""

from .hashing import company_cache_key, compute_fingerprint, hash_string, normalize_text
from .numbers import clamp_unit
from .timestamps import ensure_utc, format_timestamp, parse_timestamp, utc_now, window_start

__all__ = [
    # Hashing
    "compute_fingerprint",
    "company_cache_key",
    "hash_string",
    "normalize_text",
    # Numbers
    "clamp_unit",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "window_start",
    "format_timestamp",
    "parse_timestamp",
]
