"""Custom exceptions for the external classifier transport."""

from typing import Optional


class ClassifierError(Exception):
    """Base exception for all classifier errors.

    ExternalClassifier catches this at its boundary and turns it into a
    degraded signal; it never reaches the orchestrator.
    """

    pass


class ClassifierHTTPError(ClassifierError):
    """Request failed with a 4xx/5xx status or a connection error (status 0)."""

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ClassifierTimeoutError(ClassifierError):
    """Request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class ClassifierResponseError(ClassifierError):
    """Response could not be parsed into a classification.

    Raised for invalid JSON bodies, missing completion choices, and
    completions that contain no JSON object.
    """

    def __init__(self, message: str, content: Optional[str] = None) -> None:
        super().__init__(message)
        self.content = content


class ClassifierConfigurationError(ClassifierError):
    """Invalid classifier configuration (missing API key, bad timeout, ...)."""

    pass
