"""Fixture-based adapter for testing.

This module provides an adapter that loads canonical jobs from a YAML
fixture instead of calling a provider API. Used for deterministic
aggregation and pipeline tests.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from jobmatch.adapters.base import BaseAdapter
from jobmatch.adapters.exceptions import AdapterCredentialsError, AdapterHTTPError
from jobmatch.domain.models import CanonicalJob, JobSource

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
DEFAULT_FIXTURE = FIXTURES_DIR / "jobs.yaml"


def load_fixture_sources(fixture_path: Path) -> Dict[str, Dict[str, Any]]:
    """Load per-source fixture data from a YAML file.

    Raises:
        FileNotFoundError: If fixture file doesn't exist
    """
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return data.get("sources", {})


class FixtureAdapter(BaseAdapter):
    """Adapter that returns jobs from YAML fixtures.

    Each source entry in the fixture may hold:
    - jobs: list of CanonicalJob field mappings (source is filled in)
    - error: message raised as an AdapterHTTPError
    - missing_credentials: true to make the adapter skip itself
    """

    def __init__(self, source: JobSource, fixture_path: Path = DEFAULT_FIXTURE, **kwargs):
        super().__init__(**kwargs)
        self.SOURCE = source
        self.fixture_data = load_fixture_sources(fixture_path).get(source.value, {})
        self.calls: List[Dict[str, Any]] = []

    def fetch_jobs(self, query: str, location: str, remote_only: bool) -> List[CanonicalJob]:
        self.calls.append({"query": query, "location": location, "remote_only": remote_only})

        if self.fixture_data.get("missing_credentials"):
            raise AdapterCredentialsError(f"{self.label} credentials are not set")

        if "error" in self.fixture_data:
            raise AdapterHTTPError(self.fixture_data["error"], status_code=503, url="https://fixture.invalid")

        jobs = [CanonicalJob(source=self.SOURCE, **entry) for entry in self.fixture_data.get("jobs", [])]

        if remote_only:
            jobs = [job for job in jobs if job.remote]

        return jobs
