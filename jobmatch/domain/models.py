"""Core domain models for jobs, candidate profiles and scores.

This module defines the records that flow through the pipeline:
- CanonicalJob: normalized, source-agnostic listing produced by every adapter
- ScoredJob: a CanonicalJob annotated with a 0-100 match score and reasoning
- SearchProfile: candidate input for one scoring run
- SearchQuery: the (keywords, location, remote_only) tuple sent to adapters
- JobScoreResult: one validated entry of an AI scoring response

All models are frozen. Deduplication and scoring build new records instead
of mutating the ones they receive.
"""

from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobmatch.utils.timestamps import parse_iso_datetime


class JobSource(str, Enum):
    """Known job providers."""

    JSEARCH = "jsearch"
    ADZUNA = "adzuna"
    THEMUSE = "themuse"
    REMOTEOK = "remoteok"

    @property
    def label(self) -> str:
        """Display name used in logs and aggregation error messages."""
        return _SOURCE_LABELS[self]


_SOURCE_LABELS = {
    JobSource.JSEARCH: "JSearch",
    JobSource.ADZUNA: "Adzuna",
    JobSource.THEMUSE: "TheMuse",
    JobSource.REMOTEOK: "RemoteOK",
}


class RemotePreference(str, Enum):
    """Candidate preference for remote work."""

    REMOTE_ONLY = "remote_only"
    HYBRID = "hybrid"
    ONSITE = "onsite"
    NO_PREFERENCE = "no_preference"


def is_absolute_http_url(value: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class CanonicalJob(BaseModel):
    """Normalized job listing, identical in shape for every provider."""

    external_id: str = Field(..., description="Provider-scoped unique identifier")
    source: JobSource = Field(..., description="Provider the listing came from")
    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Hiring company")
    location: str = Field("Unknown", description="Human-readable location")
    description: str = Field("", description="Plain-text description (HTML already stripped)")
    salary: Optional[str] = Field(None, description="Pre-formatted salary, e.g. 'USD 90,000 - 120,000 / year'")
    url: str = Field(..., description="Absolute URL of the listing")
    posted_at: Optional[str] = Field(None, description="ISO-8601 posting timestamp")
    remote: bool = Field(False, description="Best-effort remote flag")

    @field_validator("external_id", "title", "company")
    @classmethod
    def require_text(cls, v: str) -> str:
        """Strip whitespace and reject empty values."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("location")
    @classmethod
    def default_location(cls, v: str) -> str:
        stripped = v.strip() if v else ""
        return stripped or "Unknown"

    @field_validator("salary")
    @classmethod
    def blank_salary_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @field_validator("url")
    @classmethod
    def require_absolute_url(cls, v: str) -> str:
        v = v.strip()
        if not is_absolute_http_url(v):
            raise ValueError(f"url must be an absolute http(s) URL, got: {v!r}")
        return v

    @field_validator("posted_at")
    @classmethod
    def require_iso_timestamp(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if parse_iso_datetime(v) is None:
            raise ValueError(f"posted_at must be an ISO-8601 timestamp, got: {v!r}")
        return v.strip()

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "external_id": "4012345678",
                "source": "adzuna",
                "title": "Backend Engineer",
                "company": "Acme",
                "location": "Austin, TX",
                "description": "Build and operate Python services...",
                "salary": "USD 120,000 - 150,000 / year",
                "url": "https://www.adzuna.com/details/4012345678",
                "posted_at": "2025-11-01T12:00:00Z",
                "remote": False,
            }
        },
    )


class ScoredJob(CanonicalJob):
    """CanonicalJob annotated with an AI match score."""

    score: int = Field(..., ge=0, le=100, description="Match score, 0-100 inclusive")
    reasoning: str = Field(..., description="Short explanation of the score")

    @field_validator("reasoning")
    @classmethod
    def require_reasoning(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("reasoning cannot be empty")
        return v.strip()

    @classmethod
    def from_job(cls, job: CanonicalJob, score: int, reasoning: str) -> "ScoredJob":
        """Build a ScoredJob from a CanonicalJob without mutating the input job."""
        return cls(**job.model_dump(), score=score, reasoning=reasoning)


class JobScoreResult(BaseModel):
    """One accepted score for one job, after clamping."""

    model_config = ConfigDict(frozen=True)

    external_id: str
    score: int = Field(..., ge=0, le=100)
    reasoning: str = Field(..., min_length=1)


def _clean_list(values: List[str]) -> List[str]:
    cleaned = []
    for value in values:
        stripped = value.strip()
        if stripped:
            cleaned.append(stripped)
    return cleaned


class SearchProfile(BaseModel):
    """Candidate profile for one scoring run.

    Supplied by an external collaborator (the profile store); the pipeline
    only reads it.
    """

    model_config = ConfigDict(frozen=True)

    resume_text: str = Field("", description="Free-text resume; PII is scrubbed before use")
    keywords: List[str] = Field(default_factory=list, description="Skills and search keywords")
    preferred_locations: List[str] = Field(default_factory=list, description="Preferred work locations")
    remote_preference: RemotePreference = Field(RemotePreference.NO_PREFERENCE)
    min_salary: Optional[int] = Field(None, ge=0, description="Minimum acceptable yearly salary")
    deal_breakers: List[str] = Field(default_factory=list, description="Phrases that cap the score at 25")

    @field_validator("resume_text", mode="before")
    @classmethod
    def none_resume_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("keywords", "preferred_locations", "deal_breakers")
    @classmethod
    def drop_blank_entries(cls, v: List[str]) -> List[str]:
        return _clean_list(v)


class SearchQuery(BaseModel):
    """Query sent to every source adapter."""

    model_config = ConfigDict(frozen=True)

    keywords: str = Field(..., description="Free-text search keywords")
    location: str = Field("", description="Location filter (may be empty)")
    remote_only: bool = Field(False, description="Restrict results to remote jobs")

    @field_validator("keywords", "location")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @classmethod
    def from_profile(cls, profile: SearchProfile) -> "SearchQuery":
        """Derive a query from a profile's keywords, first location and remote preference."""
        return cls(
            keywords=" ".join(profile.keywords),
            location=profile.preferred_locations[0] if profile.preferred_locations else "",
            remote_only=profile.remote_preference == RemotePreference.REMOTE_ONLY,
        )
