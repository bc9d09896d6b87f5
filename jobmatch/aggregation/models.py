"""Data models for aggregation results and per-source reporting."""

from dataclasses import dataclass, field
from typing import List, Optional

from jobmatch.domain.models import CanonicalJob, JobSource


@dataclass
class SourceRunStats:
    """
    Statistics for a single source within one aggregation.

    Attributes:
        source: Provider the adapter talks to
        fetched_count: Number of canonical jobs the adapter returned
        skipped: Whether the adapter skipped itself (credentials absent)
        error_message: Failure cause, or None when the fetch succeeded
        duration_seconds: Wall-clock time spent in the fetch
    """

    source: JobSource
    fetched_count: int = 0
    skipped: bool = False
    error_message: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def had_errors(self) -> bool:
        return self.error_message is not None


@dataclass
class AggregationResult:
    """
    Merged output of one fan-out across every registered adapter.

    Attributes:
        jobs: Deduplicated canonical jobs in registration order
        errors: One "<Label> failed: <cause>" entry per failed source
        source_stats: Per-source statistics in registration order
        total_fetched: Job count before deduplication
    """

    jobs: List[CanonicalJob] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    source_stats: List[SourceRunStats] = field(default_factory=list)
    total_fetched: int = 0

    @property
    def duplicates_removed(self) -> int:
        return self.total_fetched - len(self.jobs)
