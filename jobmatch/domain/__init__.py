"""Domain models shared by adapters, aggregation and scoring."""

from .models import (
    CanonicalJob,
    JobScoreResult,
    JobSource,
    RemotePreference,
    ScoredJob,
    SearchProfile,
    SearchQuery,
    is_absolute_http_url,
)

__all__ = [
    "CanonicalJob",
    "ScoredJob",
    "JobScoreResult",
    "JobSource",
    "RemotePreference",
    "SearchProfile",
    "SearchQuery",
    "is_absolute_http_url",
]
