"""Aggregation of job listings across providers."""

from .aggregator import JobAggregator
from .dedup import KEY_SEPARATOR, dedupe_key, deduplicate
from .models import AggregationResult, SourceRunStats

__all__ = [
    "JobAggregator",
    "AggregationResult",
    "SourceRunStats",
    "dedupe_key",
    "deduplicate",
    "KEY_SEPARATOR",
]
