"""Exceptions raised at the domain boundary."""

from typing import List, Optional


class InvalidPostingError(ValueError):
    """Raised when a posting payload is missing required fields.

    Input validation happens before a posting enters the analysis pipeline,
    so this error always reaches the caller instead of being degraded into
    a fail-safe result.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        details = f" ({'; '.join(self.errors)})" if self.errors else ""
        super().__init__(f"{message}{details}")
