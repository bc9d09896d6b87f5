"""Shared pytest fixtures."""

import pytest

from jobmatch.domain.models import CanonicalJob, JobSource, SearchProfile

ENV_VARS = (
    "JSEARCH_API_KEY",
    "ADZUNA_APP_ID",
    "ADZUNA_APP_KEY",
    "ADZUNA_COUNTRY",
    "OPENAI_API_KEY",
    "LOG_LEVEL",
    "ENVIRONMENT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the pipeline reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Provide a complete, valid set of credentials."""
    clean_env.setenv("JSEARCH_API_KEY", "test-jsearch-key")
    clean_env.setenv("ADZUNA_APP_ID", "test-app-id")
    clean_env.setenv("ADZUNA_APP_KEY", "test-app-key")
    clean_env.setenv("ADZUNA_COUNTRY", "gb")
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    return clean_env


@pytest.fixture
def make_job():
    """Factory for CanonicalJob instances with sensible defaults."""

    def _make(external_id="job-1", source=JobSource.JSEARCH, **overrides):
        fields = {
            "external_id": external_id,
            "source": source,
            "title": "Backend Engineer",
            "company": "Acme",
            "location": "Austin, TX",
            "description": "Build Python services.",
            "url": f"https://jobs.example.com/{external_id}",
        }
        fields.update(overrides)
        return CanonicalJob(**fields)

    return _make


@pytest.fixture
def profile():
    """A typical candidate profile."""
    return SearchProfile(
        resume_text="Python developer. Reach me at jane.doe@example.com or 555-123-4567.",
        keywords=["python", "backend"],
        preferred_locations=["Austin, TX"],
        remote_preference="hybrid",
        min_salary=120000,
        deal_breakers=["security clearance"],
    )
