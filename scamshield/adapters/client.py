"""HTTP transport for an OpenAI-compatible chat completions API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from scamshield.logging import get_logger

from .exceptions import (
    ClassifierConfigurationError,
    ClassifierHTTPError,
    ClassifierResponseError,
    ClassifierTimeoutError,
)

logger = get_logger(__name__, component="classifier")


class ClassifierClient:
    """Thin requests-based client for ``POST {base_url}/chat/completions``.

    Attributes:
        base_url: API root, without trailing slash
        timeout: Request timeout in seconds
        user_agent: User-Agent header for requests
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 15.0,
        user_agent: str = "ScamShield/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize client.

        Args:
            api_key: Bearer token for the API
            base_url: API root URL
            timeout: Request timeout in seconds (0 < timeout <= 120)
            user_agent: User-Agent header
            session: Optional pre-built session (tests inject mocks here)

        Raises:
            ClassifierConfigurationError: If the key is empty or timeout is out of range
        """
        if not api_key or not api_key.strip():
            raise ClassifierConfigurationError("api_key cannot be empty")
        if not 0 < timeout <= 120:
            raise ClassifierConfigurationError(
                f"Timeout must be between 0 and 120 seconds, got: {timeout}"
            )

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": user_agent,
                "Authorization": f"Bearer {api_key.strip()}",
                "Content-Type": "application/json",
            }
        )

    def complete(
        self,
        messages: List[Dict[str, str]],
        model: str,
        max_tokens: int = 200,
        temperature: float = 0.1,
    ) -> str:
        """Request a chat completion and return the first choice's content.

        Raises:
            ClassifierHTTPError: On 4xx/5xx status or connection failure
            ClassifierTimeoutError: On request timeout
            ClassifierResponseError: On invalid JSON or a response without content
        """
        data = self._make_request(
            f"{self.base_url}/chat/completions",
            json_data={
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
        )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ClassifierResponseError(f"Completion response has no message content: {e}") from e

        if not isinstance(content, str):
            raise ClassifierResponseError("Completion content is not a string")

        return content

    def close(self) -> None:
        self._session.close()

    def _make_request(self, url: str, json_data: Dict[str, Any]) -> Dict[str, Any]:
        """POST JSON and return the decoded body, mapping failures to ClassifierError."""
        try:
            logger.debug(
                f"HTTP POST request to {url}",
                extra={
                    "event": "classifier.request",
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.post(url, json=json_data, timeout=self.timeout)

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500 or response.status_code == 429
                logger.log(
                    logging.WARNING if is_retryable else logging.ERROR,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "classifier.retryable_error" if is_retryable else "classifier.error",
                        "status_code": response.status_code,
                        "url": url,
                    },
                )
                raise ClassifierHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                data = response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={"event": "classifier.error", "error_type": "JSONDecodeError", "url": url},
                )
                raise ClassifierResponseError(f"Failed to parse JSON response from {url}: {e}") from e

            logger.debug(
                "HTTP request succeeded",
                extra={"event": "classifier.succeeded", "status_code": response.status_code},
            )
            return data

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "classifier.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise ClassifierTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "classifier.error", "error_type": type(e).__name__, "url": url},
            )
            raise ClassifierHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e
