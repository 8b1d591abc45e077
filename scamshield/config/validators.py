"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration

SHORT_CACHE_TTL_SECONDS = 3600
LONG_CLASSIFIER_TIMEOUT_SECONDS = 60
DEFAULT_CLASSIFIER_TIMEOUT_SECONDS = 15


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    cache = config_dict.get("cache", {})
    if isinstance(cache, dict):
        ttl = cache.get("ttl")
        if isinstance(ttl, str):
            try:
                if parse_duration(ttl) < SHORT_CACHE_TTL_SECONDS:
                    warning_messages.append(
                        f"Short cache ttl ({ttl}) will re-verify employers frequently"
                    )
            except DurationParseError:
                pass  # reported by model validation

    classifier = config_dict.get("classifier", {})
    if isinstance(classifier, dict):
        if classifier.get("enabled") is False:
            warning_messages.append(
                "External classifier is disabled; its risk contribution will always be 0"
            )
        timeout = classifier.get("timeout_seconds")
        if isinstance(timeout, (int, float)) and timeout > LONG_CLASSIFIER_TIMEOUT_SECONDS:
            warning_messages.append(
                f"Long classifier timeout ({timeout}s) delays every uncached analysis"
            )
        deadline = classifier.get("deadline_seconds")
        if isinstance(deadline, (int, float)):
            effective_timeout = (
                timeout if isinstance(timeout, (int, float)) else DEFAULT_CLASSIFIER_TIMEOUT_SECONDS
            )
            if deadline < effective_timeout:
                warning_messages.append(
                    f"Classifier deadline ({deadline}s) is shorter than its request timeout "
                    f"({effective_timeout}s); slow answers will be discarded"
                )

    analysis = config_dict.get("analysis", {})
    if isinstance(analysis, dict):
        workers = analysis.get("max_workers")
        if isinstance(workers, int) and 0 < workers < 4:
            warning_messages.append(
                f"max_workers={workers} is below the number of analyzers (4); "
                "sub-analyses will not all run concurrently"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
