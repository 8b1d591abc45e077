"""Unit tests for configuration loading and validation."""

import warnings

import pytest
from pydantic import ValidationError

from scamshield.config import (
    AppConfig,
    CacheConfig,
    ClassifierConfig,
    ConfigurationError,
    StatsConfig,
    load_config,
    load_environment_config,
    parse_app_config,
)
from scamshield.config.duration import (
    DurationParseError,
    parse_duration,
    seconds_to_human_readable,
    validate_duration_range,
)
from scamshield.config.environment import DEFAULT_DATABASE_URL
from scamshield.config.validators import check_for_warnings

ENV_VARS = ("OPENAI_API_KEY", "CLASSIFIER_BASE_URL", "DATABASE_URL", "LOG_LEVEL", "ENVIRONMENT")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDuration:
    """Tests for duration parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("30s", 30),
            ("15m", 900),
            ("24h", 86400),
            ("1d12h", 129600),
            ("1h 30m", 5400),
            ("PT24H", 86400),
            ("P1D", 86400),
            ("pt90m", 5400),
            ("P1DT1H", 90000),
        ],
    )
    def test_parse_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "   ", "24hours", "abc", "0h", "P", "PT", 24])
    def test_parse_invalid(self, value):
        with pytest.raises(DurationParseError):
            parse_duration(value)

    def test_validate_range(self):
        validate_duration_range(3600, min_seconds=60, max_seconds=86400)

        with pytest.raises(DurationParseError, match="too short"):
            validate_duration_range(30, min_seconds=60, max_seconds=86400, label="TTL")
        with pytest.raises(DurationParseError, match="too long"):
            validate_duration_range(90000, min_seconds=60, max_seconds=86400)

    def test_seconds_to_human_readable(self):
        assert seconds_to_human_readable(1) == "1 second"
        assert seconds_to_human_readable(120) == "2 minutes"
        assert seconds_to_human_readable(7200) == "2 hours"
        assert seconds_to_human_readable(86400) == "1 day"


class TestAppConfig:
    """Tests for the configuration models."""

    def test_empty_mapping_uses_defaults(self):
        config = AppConfig.model_validate({})

        assert config.classifier.enabled is True
        assert config.classifier.model == "gpt-3.5-turbo"
        assert config.cache.backend == "database"
        assert config.cache.ttl_seconds == 86400
        assert config.analysis.dedup_window_seconds == 86400
        assert config.analysis.max_workers == 4
        assert config.stats.window_days == 30
        assert config.logging.level == "INFO"
        assert config.logging.format == "key-value"

    def test_base_url_is_normalized(self):
        config = ClassifierConfig(base_url="  https://llm.internal/v1/  ")

        assert config.base_url == "https://llm.internal/v1"

    def test_base_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            ClassifierConfig(base_url="llm.internal/v1")

    def test_cache_ttl_bounds(self):
        assert CacheConfig(ttl="1h").ttl_seconds == 3600

        with pytest.raises(ValidationError):
            CacheConfig(ttl="30s")
        with pytest.raises(ValidationError):
            CacheConfig(ttl="60d")

    def test_high_risk_threshold_not_below_scam_threshold(self):
        with pytest.raises(ValidationError):
            StatsConfig(scam_threshold=0.7, high_risk_threshold=0.5)

    def test_classifier_deadline_default_and_bounds(self):
        assert ClassifierConfig().deadline_seconds == 30.0

        with pytest.raises(ValidationError):
            ClassifierConfig(deadline_seconds=0)

    def test_parse_app_config_collects_errors(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_app_config(
                {
                    "classifier": {"timeout_seconds": "soon"},
                    "analysis": {"max_workers": 0},
                    "cache": {"backend": "redis"},
                }
            )

        errors = exc_info.value.errors
        assert len(errors) == 3
        assert any("classifier -> timeout_seconds" in error for error in errors)
        assert any("analysis -> max_workers" in error for error in errors)
        assert "Suggestions" in str(exc_info.value)


class TestWarnings:
    """Tests for check_for_warnings()."""

    def test_default_config_has_no_warnings(self):
        assert check_for_warnings({}) == []

    def test_suspicious_settings(self):
        messages = check_for_warnings(
            {
                "cache": {"ttl": "10m"},
                "classifier": {"enabled": False, "timeout_seconds": 90},
                "analysis": {"max_workers": 2},
            }
        )

        assert len(messages) == 4

    def test_deadline_shorter_than_timeout(self):
        messages = check_for_warnings({"classifier": {"deadline_seconds": 5}})

        assert len(messages) == 1
        assert "shorter than its request timeout (15s)" in messages[0]


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_from_explicit_path(self, tmp_path, clean_env):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "classifier:\n  model: gpt-4o-mini\nanalysis:\n  dedup_window: 12h\n"
        )

        app_config, env_config = load_config(config_file)

        assert app_config.classifier.model == "gpt-4o-mini"
        assert app_config.analysis.dedup_window_seconds == 43200
        assert env_config.database_url == DEFAULT_DATABASE_URL

    def test_load_from_current_directory(self, tmp_path, clean_env):
        (tmp_path / "config.yaml").write_text("{}\n")
        clean_env.chdir(tmp_path)

        app_config, _ = load_config()

        assert app_config == AppConfig()

    def test_missing_file(self, tmp_path, clean_env):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_no_candidate_found(self, tmp_path, clean_env):
        clean_env.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert len(exc_info.value.errors) == 2

    @pytest.mark.parametrize(
        "content, message",
        [
            ("", "empty"),
            ("- a\n- b\n", "mapping"),
            ("classifier: [unclosed\n", "parse YAML"),
        ],
    )
    def test_bad_documents(self, tmp_path, clean_env, content, message):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(content)

        with pytest.raises(ConfigurationError, match=message):
            load_config(config_file)

    def test_warnings_are_emitted(self, tmp_path, clean_env):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("classifier:\n  enabled: false\n")

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            load_config(config_file)

        assert any("disabled" in str(w.message) for w in caught)


class TestEnvironmentConfig:
    """Tests for load_environment_config()."""

    def test_defaults(self, clean_env):
        env = load_environment_config()

        assert env.openai_api_key is None
        assert env.classifier_configured is False
        assert env.database_url == DEFAULT_DATABASE_URL
        assert env.log_level is None
        assert env.environment == "local"

    def test_values_are_read_and_normalized(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "  sk-test  ")
        clean_env.setenv("DATABASE_URL", "sqlite:///:memory:")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("ENVIRONMENT", "staging")

        env = load_environment_config()

        assert env.openai_api_key == "sk-test"
        assert env.classifier_configured is True
        assert env.database_url == "sqlite:///:memory:"
        assert env.log_level == "DEBUG"
        assert env.environment == "staging"

    def test_blank_api_key_means_unconfigured(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "   ")

        assert load_environment_config().classifier_configured is False

    def test_invalid_values_are_all_reported(self, clean_env):
        clean_env.setenv("CLASSIFIER_BASE_URL", "llm.internal")
        clean_env.setenv("DATABASE_URL", "data.db")
        clean_env.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert len(exc_info.value.errors) == 3
