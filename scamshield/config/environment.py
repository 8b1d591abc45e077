"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/scamshield.db"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        classifier_base_url: Optional[str] = None,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.openai_api_key = openai_api_key
        self.classifier_base_url = classifier_base_url
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level
        self.environment = environment or "local"

    @property
    def classifier_configured(self) -> bool:
        """Whether credentials for the external classifier are present."""
        return bool(self.openai_api_key)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - OPENAI_API_KEY: credential for the external classifier; without it the
      classifier runs in degraded mode
    - CLASSIFIER_BASE_URL: override for classifier.base_url
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/scamshield.db)
    - LOG_LEVEL: override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: environment label attached to every log record

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    openai_api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
    classifier_base_url = (os.getenv("CLASSIFIER_BASE_URL") or "").strip() or None
    database_url = (os.getenv("DATABASE_URL") or "").strip() or None
    log_level = (os.getenv("LOG_LEVEL") or "").strip() or None
    environment = (os.getenv("ENVIRONMENT") or "").strip() or None

    if classifier_base_url and not classifier_base_url.startswith(("http://", "https://")):
        errors.append(
            f"Invalid CLASSIFIER_BASE_URL: '{classifier_base_url}'. "
            "Must start with http:// or https://"
        )

    if database_url and "://" not in database_url:
        errors.append(
            f"Invalid DATABASE_URL: '{database_url}'. "
            "Expected a SQLAlchemy URL such as sqlite:///./data/scamshield.db"
        )

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your settings",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        openai_api_key=openai_api_key,
        classifier_base_url=classifier_base_url,
        database_url=database_url,
        log_level=log_level,
        environment=environment,
    )
