"""Fixture-based postings for deterministic tests.

Postings live in tests/fixtures/postings.yaml keyed by a short name.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from scamshield.domain.models import JobPosting

DEFAULT_FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "postings.yaml"


def load_fixture_postings(fixture_path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Load raw posting payloads from YAML.

    Raises:
        FileNotFoundError: If fixture file doesn't exist
    """
    fixture_path = fixture_path or DEFAULT_FIXTURE_PATH
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return data.get("postings", {})


def load_fixture_posting(name: str, **overrides: Any) -> JobPosting:
    """Build a JobPosting from a named fixture, optionally overriding fields."""
    payload = dict(load_fixture_postings()[name])
    payload.update(overrides)
    return JobPosting.from_payload(payload)
