"""Service wiring: builds the risk engine from configuration."""

from dataclasses import dataclass
from typing import Optional

from scamshield.adapters import ClassifierClient, ExternalClassifier
from scamshield.analysis import CompanyVerifier, PatternAnalyzer, RiskOrchestrator, SalaryAnalyzer
from scamshield.cache import CacheStore, DatabaseCacheStore, InMemoryCacheStore, VerificationCache
from scamshield.config.environment import EnvironmentConfig
from scamshield.config.models import AppConfig, CacheBackend
from scamshield.logging import get_logger
from scamshield.pipeline import (
    AnalysisIndex,
    AnalysisService,
    DatabaseAnalysisIndex,
    InMemoryAnalysisIndex,
    ReportingService,
)

logger = get_logger(__name__, component="service")


@dataclass
class ScamShield:
    """Fully wired risk engine.

    Attributes:
        analysis: Deduplicated analysis entry point
        reporting: Feedback reports and statistics
        orchestrator: Shared orchestrator (owns the worker pool)
        classifier: External classifier adapter
        cache_store: Backing store of the verification cache
        index: Recent analysis index
    """

    analysis: AnalysisService
    reporting: ReportingService
    orchestrator: RiskOrchestrator
    classifier: ExternalClassifier
    cache_store: CacheStore
    index: AnalysisIndex

    def close(self) -> None:
        """Stop the worker pool and release the HTTP session."""
        self.orchestrator.close()
        self.classifier.close()

    def __enter__(self) -> "ScamShield":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


def build_classifier(app_config: AppConfig, env_config: EnvironmentConfig) -> ExternalClassifier:
    """
    Build the classifier adapter.

    Without an API key the adapter is still created and every call yields
    the degraded signal.
    """
    settings = app_config.classifier
    client: Optional[ClassifierClient] = None

    if settings.enabled and env_config.classifier_configured:
        client = ClassifierClient(
            api_key=env_config.openai_api_key,
            base_url=env_config.classifier_base_url or settings.base_url,
            timeout=settings.timeout_seconds,
            user_agent=settings.user_agent,
        )
    elif settings.enabled:
        logger.warning(
            "OPENAI_API_KEY not set; external classifier will run in degraded mode",
            extra={"event": "classifier.unconfigured"},
        )

    return ExternalClassifier(
        client,
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        enabled=settings.enabled,
    )


def build_service(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    persistent: bool = True,
) -> ScamShield:
    """
    Construct stores, analyzers, classifier and orchestrator from configuration.

    Args:
        app_config: Validated application configuration
        env_config: Environment configuration
        persistent: Use database-backed stores; requires init_database().
            When False every store is in-memory regardless of configuration.

    Returns:
        Wired ScamShield instance; call close() when done
    """
    if persistent and app_config.cache.backend == CacheBackend.DATABASE.value:
        cache_store: CacheStore = DatabaseCacheStore()
    else:
        cache_store = InMemoryCacheStore()

    index: AnalysisIndex = DatabaseAnalysisIndex() if persistent else InMemoryAnalysisIndex()

    classifier = build_classifier(app_config, env_config)

    orchestrator = RiskOrchestrator(
        pattern_analyzer=PatternAnalyzer(),
        company_verifier=CompanyVerifier(
            VerificationCache(cache_store, ttl_seconds=app_config.cache.ttl_seconds)
        ),
        salary_analyzer=SalaryAnalyzer(),
        classifier=classifier,
        max_workers=app_config.analysis.max_workers,
        classifier_deadline=app_config.classifier.deadline_seconds,
    )

    analysis = AnalysisService(
        orchestrator,
        index,
        dedup_window_seconds=app_config.analysis.dedup_window_seconds,
    )

    reporting = ReportingService(
        scam_threshold=app_config.stats.scam_threshold,
        high_risk_threshold=app_config.stats.high_risk_threshold,
        default_days=app_config.stats.window_days,
    )

    logger.info(
        "Services initialized",
        extra={
            "event": "services.initialized",
            "cache_backend": type(cache_store).__name__,
            "index_backend": type(index).__name__,
            "classifier_available": classifier.available,
            "max_workers": app_config.analysis.max_workers,
        },
    )

    return ScamShield(
        analysis=analysis,
        reporting=reporting,
        orchestrator=orchestrator,
        classifier=classifier,
        cache_store=cache_store,
        index=index,
    )
