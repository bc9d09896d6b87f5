"""Data models for pipeline run reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Union

from jobmatch.aggregation.models import SourceRunStats
from jobmatch.domain.models import CanonicalJob, ScoredJob
from jobmatch.utils.timestamps import to_iso_string


@dataclass
class PipelineRunResult:
    """
    Results of one fetch-then-score run.

    Attributes:
        run_id: Identifier attached to every log record of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        jobs: Scored jobs in aggregation order (unscored when scoring was disabled)
        errors: Labeled source failures from aggregation
        source_stats: Per-source statistics
        total_fetched: Jobs fetched across sources before deduplication
        total_after_dedup: Jobs remaining after deduplication
        fallback_count: Jobs that received the fallback score
        scored: Whether the scoring stage ran
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    jobs: List[Union[ScoredJob, CanonicalJob]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    source_stats: List[SourceRunStats] = field(default_factory=list)
    total_fetched: int = 0
    total_after_dedup: int = 0
    fallback_count: int = 0
    scored: bool = True

    @property
    def total_duration_seconds(self) -> float:
        return (self.run_finished_at - self.run_started_at).total_seconds()

    @property
    def had_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> Dict[str, Any]:
        """Run metadata without the job list, suitable for logging."""
        return {
            "run_id": self.run_id,
            "run_started_at": to_iso_string(self.run_started_at),
            "run_finished_at": to_iso_string(self.run_finished_at),
            "duration_seconds": round(self.total_duration_seconds, 3),
            "total_fetched": self.total_fetched,
            "total_after_dedup": self.total_after_dedup,
            "fallback_count": self.fallback_count,
            "errors": list(self.errors),
        }
