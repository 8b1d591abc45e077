"""External semantic classifier.

Asks a chat-completions model to rate a posting and parses its bounded JSON
answer. Every failure (missing credentials, transport error, timeout,
unparseable answer) is absorbed here and reported as a degraded
``ExternalSignal``; ``classify`` never raises.
"""

import json
from typing import Any, Dict, Optional

from scamshield.domain.models import ExternalSignal, JobPosting
from scamshield.logging import get_logger

from .client import ClassifierClient
from .exceptions import ClassifierError, ClassifierResponseError

logger = get_logger(__name__, component="classifier")

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_CONFIDENCE = 0.5

PROMPT_TEMPLATE = """Analyze this job posting and decide whether it is likely a scam.

Title: {title}
Company: {company}
Description: {description}
Salary: {salary}
Location: {location}

Evaluate:
1. How realistic the offer is (0-1)
2. How legitimate the employer looks (0-1)
3. How consistent the information is (0-1)
4. Any red flags you detect

Answer with JSON only: {{"riskScore": 0-1, "confidence": 0-1, "reasoning": "short explanation"}}"""


def build_prompt(posting: JobPosting) -> str:
    return PROMPT_TEMPLATE.format(
        title=posting.title,
        company=posting.company or "not specified",
        description=posting.description,
        salary=posting.salary or "not specified",
        location=posting.location or "not specified",
    )


def parse_response(content: str) -> Dict[str, Any]:
    """Extract the JSON object embedded in a completion.

    Models often wrap the object in prose or code fences, so everything
    outside the first ``{`` and the last ``}`` is ignored.

    Raises:
        ClassifierResponseError: If no JSON object can be decoded
    """
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end <= start:
        raise ClassifierResponseError("Completion contains no JSON object", content=content)

    try:
        data = json.loads(content[start : end + 1])
    except ValueError as e:
        raise ClassifierResponseError(f"Completion JSON is malformed: {e}", content=content) from e

    if not isinstance(data, dict):
        raise ClassifierResponseError("Completion JSON is not an object", content=content)

    return data


def _coerce_score(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError as e:
        raise ClassifierResponseError(f"Non-numeric score in completion: {value!r}") from e


class ExternalClassifier:
    """Failure-isolated wrapper around ClassifierClient."""

    def __init__(
        self,
        client: Optional[ClassifierClient],
        model: str = DEFAULT_MODEL,
        max_tokens: int = 200,
        temperature: float = 0.1,
        enabled: bool = True,
    ):
        """Initialize ExternalClassifier.

        Args:
            client: HTTP client; None when no credentials are configured
            model: Model name sent with every request
            max_tokens: Completion token budget
            temperature: Sampling temperature
            enabled: False turns every call into a degraded signal without I/O
        """
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.enabled = enabled

    @property
    def available(self) -> bool:
        return self.enabled and self.client is not None

    def classify(self, posting: JobPosting) -> ExternalSignal:
        if not self.enabled:
            return ExternalSignal.unavailable("classifier disabled", model=self.model)
        if self.client is None:
            return ExternalSignal.unavailable("classifier not configured", model=self.model)

        try:
            content = self.client.complete(
                [{"role": "user", "content": build_prompt(posting)}],
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            data = parse_response(content)

            signal = ExternalSignal(
                score=_coerce_score(data.get("riskScore"), 0.0),
                confidence=_coerce_score(data.get("confidence"), DEFAULT_CONFIDENCE),
                reasoning=str(data.get("reasoning") or ""),
                model=self.model,
            )

        except ClassifierError as e:
            logger.warning(
                f"External classification degraded: {e}",
                extra={"event": "classifier.degraded", "error_type": type(e).__name__},
            )
            return ExternalSignal.unavailable(str(e), model=self.model)
        except Exception as e:
            logger.error(
                f"Unexpected classifier failure: {e}",
                exc_info=True,
                extra={"event": "classifier.degraded", "error_type": type(e).__name__},
            )
            return ExternalSignal.unavailable(str(e), model=self.model)

        logger.debug(
            "External classification completed",
            extra={
                "event": "classifier.completed",
                "risk_score": signal.score,
                "confidence": signal.confidence,
            },
        )
        return signal

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
