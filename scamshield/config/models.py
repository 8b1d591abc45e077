"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

MIN_WINDOW_SECONDS = 60  # 1 minute
MAX_WINDOW_SECONDS = 30 * 86400  # 30 days


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class CacheBackend(str, Enum):
    """Storage backends for the verification cache."""

    MEMORY = "memory"
    DATABASE = "database"


def _validate_window(value: str, label: str) -> str:
    try:
        seconds = parse_duration(value)
        validate_duration_range(
            seconds, min_seconds=MIN_WINDOW_SECONDS, max_seconds=MAX_WINDOW_SECONDS, label=label
        )
    except DurationParseError as e:
        raise ValueError(str(e)) from e
    return value


class ClassifierConfig(BaseModel):
    """External text-classification service settings."""

    enabled: bool = Field(True, description="Call the external classifier at all")
    base_url: str = Field(
        "https://api.openai.com/v1",
        min_length=1,
        description="Base URL of an OpenAI-compatible chat completions API",
    )
    model: str = Field("gpt-3.5-turbo", min_length=1, description="Model name")
    timeout_seconds: float = Field(
        15.0, gt=0, le=120, description="Request timeout for one classification call"
    )
    deadline_seconds: float = Field(
        30.0,
        gt=0,
        le=300,
        description="Longest an analysis waits for the classifier before continuing without it",
    )
    max_tokens: int = Field(200, ge=16, le=4096, description="Completion token budget")
    temperature: float = Field(0.1, ge=0.0, le=2.0, description="Sampling temperature")
    user_agent: str = Field("ScamShield/1.0", min_length=1, description="User-Agent header")

    model_config = {"protected_namespaces": ()}

    @field_validator("base_url", "model", "user_agent")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got: {v}")
        return v.rstrip("/")


class CacheConfig(BaseModel):
    """Verification cache settings."""

    backend: CacheBackend = Field(CacheBackend.DATABASE, description="memory or database")
    ttl: str = Field("24h", description="How long an employer verdict stays valid")

    # Computed field
    ttl_seconds: Optional[int] = None

    model_config = {"use_enum_values": True, "validate_default": True}

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, v: str) -> str:
        return _validate_window(v, "Cache TTL")

    @model_validator(mode="after")
    def compute_ttl_seconds(self):
        self.ttl_seconds = parse_duration(self.ttl)
        return self


class AnalysisConfig(BaseModel):
    """Risk pipeline settings."""

    dedup_window: str = Field(
        "24h", description="How long a stored verdict is returned instead of re-analyzing"
    )
    max_workers: int = Field(4, ge=1, le=16, description="Thread pool size for sub-analyses")

    # Computed field
    dedup_window_seconds: Optional[int] = None

    @field_validator("dedup_window")
    @classmethod
    def validate_dedup_window(cls, v: str) -> str:
        return _validate_window(v, "Deduplication window")

    @model_validator(mode="after")
    def compute_window_seconds(self):
        self.dedup_window_seconds = parse_duration(self.dedup_window)
        return self


class StatsConfig(BaseModel):
    """Aggregate statistics settings."""

    window_days: int = Field(30, ge=1, le=365, description="Default statistics window")
    scam_threshold: float = Field(0.6, ge=0.0, le=1.0, description="Risk above which a posting counts as a scam")
    high_risk_threshold: float = Field(0.8, ge=0.0, le=1.0, description="Risk above which a posting is high risk")

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.high_risk_threshold < self.scam_threshold:
            raise ValueError(
                "high_risk_threshold must be greater than or equal to scam_threshold"
            )
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the ScamShield risk engine.

    Every section has defaults, so an empty mapping is a valid configuration.
    """

    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
