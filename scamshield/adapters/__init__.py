"""External classifier adapter and its HTTP transport."""

from .classifier import ExternalClassifier, build_prompt, parse_response
from .client import ClassifierClient
from .exceptions import (
    ClassifierConfigurationError,
    ClassifierError,
    ClassifierHTTPError,
    ClassifierResponseError,
    ClassifierTimeoutError,
)

__all__ = [
    "ExternalClassifier",
    "ClassifierClient",
    "build_prompt",
    "parse_response",
    "ClassifierError",
    "ClassifierHTTPError",
    "ClassifierTimeoutError",
    "ClassifierResponseError",
    "ClassifierConfigurationError",
]
