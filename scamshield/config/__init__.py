"""Configuration management module for the ScamShield risk engine."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_app_config
from .models import (
    AnalysisConfig,
    AppConfig,
    CacheBackend,
    CacheConfig,
    ClassifierConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StatsConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "parse_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "ClassifierConfig",
    "CacheConfig",
    "AnalysisConfig",
    "StatsConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "CacheBackend",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
