"""Pipeline orchestration: aggregate listings, then score them."""

from typing import Optional
from uuid import uuid4

from jobmatch.aggregation.aggregator import JobAggregator
from jobmatch.domain.models import SearchProfile, SearchQuery
from jobmatch.logging import get_logger
from jobmatch.logging.context import log_context
from jobmatch.scoring.service import ScoringService
from jobmatch.utils.timestamps import utc_now

from .models import PipelineRunResult

logger = get_logger(__name__, component="pipeline")


class MatchPipeline:
    """
    Runs one aggregation followed by one scoring pass.

    The pipeline holds no state between runs. Source and AI failures are
    absorbed by the aggregator and the scoring service; only configuration
    errors propagate out of run().
    """

    def __init__(self, aggregator: JobAggregator, scoring_service: Optional[ScoringService] = None):
        """
        Initialize the pipeline.

        Args:
            aggregator: Aggregator over the configured source adapters
            scoring_service: Scoring service, or None to return unscored jobs
        """
        self.aggregator = aggregator
        self.scoring_service = scoring_service

    def run(self, query: SearchQuery, profile: SearchProfile) -> PipelineRunResult:
        """
        Execute fetch, dedup and scoring for one query.

        Args:
            query: Query sent to every adapter
            profile: Candidate profile used for scoring

        Returns:
            PipelineRunResult with jobs, errors and per-source stats
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        with log_context(run_id=run_id):
            logger.info(
                "Pipeline run started",
                extra={
                    "event": "pipeline.run.started",
                    "query": query.keywords,
                    "location": query.location,
                    "remote_only": query.remote_only,
                    "adapter_count": len(self.aggregator.adapters),
                    "scoring_enabled": self.scoring_service is not None,
                },
            )

            aggregation = self.aggregator.aggregate(query.keywords, query.location, query.remote_only)

            if self.scoring_service is not None:
                report = self.scoring_service.score_with_report(aggregation.jobs, profile)
                jobs = report.jobs
                fallback_count = report.fallback_count
            else:
                jobs = list(aggregation.jobs)
                fallback_count = 0

            result = PipelineRunResult(
                run_id=run_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                jobs=jobs,
                errors=aggregation.errors,
                source_stats=aggregation.source_stats,
                total_fetched=aggregation.total_fetched,
                total_after_dedup=len(aggregation.jobs),
                fallback_count=fallback_count,
                scored=self.scoring_service is not None,
            )

            logger.info(
                "Pipeline run completed",
                extra={
                    "event": "pipeline.run.completed",
                    "duration_ms": int(result.total_duration_seconds * 1000),
                    "total_fetched": result.total_fetched,
                    "total_after_dedup": result.total_after_dedup,
                    "fallback_count": result.fallback_count,
                    "error_count": len(result.errors),
                },
            )

            return result
