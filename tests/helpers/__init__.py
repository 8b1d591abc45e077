"""Test helper utilities for ScamShield tests."""

from .fakes import (
    FailingAnalysisIndex,
    FailingCacheStore,
    FakeClassifierClient,
    FixedClock,
    RecordingCacheStore,
    StalledClassifierClient,
)
from .postings import load_fixture_posting, load_fixture_postings

__all__ = [
    "FakeClassifierClient",
    "FailingCacheStore",
    "RecordingCacheStore",
    "StalledClassifierClient",
    "FailingAnalysisIndex",
    "FixedClock",
    "load_fixture_postings",
    "load_fixture_posting",
]
