"""Shared pytest fixtures."""

import pytest

from scamshield.adapters.classifier import ExternalClassifier
from scamshield.analysis import CompanyVerifier, PatternAnalyzer, RiskOrchestrator, SalaryAnalyzer
from scamshield.cache import InMemoryCacheStore, VerificationCache
from scamshield.logging.context import clear_log_context
from scamshield.persistence import close_database, init_database

from tests.helpers import FakeClassifierClient, FixedClock


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def memory_database():
    """Initialize an in-memory SQLite database for one test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def cache_store(clock):
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def classifier_client():
    """Classifier transport answering with a high risk score."""
    return FakeClassifierClient(
        {"riskScore": 0.9, "confidence": 0.85, "reasoning": "unrealistic pay for no experience"}
    )


@pytest.fixture
def orchestrator_factory(cache_store, clock):
    """Build orchestrators around a given classifier client (None = unconfigured)."""
    created = []

    def factory(client=None, store=None, enabled=True):
        orchestrator = RiskOrchestrator(
            pattern_analyzer=PatternAnalyzer(),
            company_verifier=CompanyVerifier(VerificationCache(store or cache_store)),
            salary_analyzer=SalaryAnalyzer(),
            classifier=ExternalClassifier(client, enabled=enabled),
            clock=clock,
        )
        created.append(orchestrator)
        return orchestrator

    yield factory

    for orchestrator in created:
        orchestrator.close()
