"""Batch scoring of canonical jobs against a candidate profile.

score() always returns one ScoredJob per input job, in input order. A batch
whose AI call or response fails is scored with FALLBACK_SCORE instead of
raising, so a flaky AI service degrades scores rather than the run.
"""

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, List, Optional, Sequence

from jobmatch.config.models import ScoringConfig
from jobmatch.domain.models import CanonicalJob, JobScoreResult, ScoredJob, SearchProfile
from jobmatch.logging import get_logger
from jobmatch.logging.context import bind_log_context, log_context

from .client import ScoringClient
from .parsing import parse_score_response
from .prompts import build_system_prompt, build_user_prompt, prepare_job, scoring_key
from .results import (
    FALLBACK_REASONING,
    FALLBACK_SCORE,
    BatchFailure,
    BatchOutcome,
    BatchSuccess,
    ScoringReport,
)

logger = get_logger(__name__, component="scoring")

BatchHandler = Callable[[int, List[CanonicalJob]], BatchOutcome]


class BatchStage:
    """
    Runs batch handlers on a bounded executor and returns outcomes in batch order.

    With max_in_flight=1 (the default) exactly one AI request is in flight at
    any time, which keeps the pipeline under provider rate limits. Raising
    max_in_flight allows bounded concurrency without touching the callers.
    """

    def __init__(self, handler: BatchHandler, max_in_flight: int = 1):
        if max_in_flight < 1:
            raise ValueError(f"max_in_flight must be at least 1, got: {max_in_flight}")
        self.handler = handler
        self.max_in_flight = max_in_flight

    def run(self, batches: Sequence[List[CanonicalJob]]) -> List[BatchOutcome]:
        with ThreadPoolExecutor(max_workers=self.max_in_flight, thread_name_prefix="scoring") as pool:
            futures = [
                pool.submit(bind_log_context(self.handler), index, batch)
                for index, batch in enumerate(batches)
            ]
            return [future.result() for future in futures]


def chunk(jobs: Sequence[CanonicalJob], size: int) -> List[List[CanonicalJob]]:
    """Split jobs into consecutive batches of at most size items."""
    return [list(jobs[i : i + size]) for i in range(0, len(jobs), size)]


class ScoringService:
    """
    Scores jobs in fixed-size batches through a ScoringClient.

    Example:
        >>> service = ScoringService(OpenAIScoringClient.from_config(cfg.scoring, env), cfg.scoring)
        >>> scored = service.score(jobs, profile)
        >>> assert len(scored) == len(jobs)
    """

    def __init__(self, client: ScoringClient, config: Optional[ScoringConfig] = None, max_in_flight: int = 1):
        self.client = client
        self.config = config or ScoringConfig()
        self.max_in_flight = max_in_flight

    def score(self, jobs: Sequence[CanonicalJob], profile: SearchProfile) -> List[ScoredJob]:
        """Score every job; never raises for AI failures."""
        return self.score_with_report(jobs, profile).jobs

    def score_with_report(self, jobs: Sequence[CanonicalJob], profile: SearchProfile) -> ScoringReport:
        """Score every job and report how many batches and jobs fell back."""
        if not jobs:
            logger.info("No jobs to score", extra={"event": "scoring.skipped", "reason": "empty_input"})
            return ScoringReport()

        batches = chunk(jobs, self.config.batch_size)

        logger.info(
            f"Scoring {len(jobs)} jobs in {len(batches)} batch(es) of up to {self.config.batch_size}",
            extra={
                "event": "scoring.started",
                "job_count": len(jobs),
                "batch_count": len(batches),
                "batch_size": self.config.batch_size,
            },
        )

        stage = BatchStage(partial(self._score_batch, profile), max_in_flight=self.max_in_flight)
        outcomes = stage.run(batches)

        report = ScoringReport(batch_count=len(batches))
        for index, (batch, outcome) in enumerate(zip(batches, outcomes), 1):
            if isinstance(outcome, BatchFailure):
                report.failed_batches += 1
                scored = [self._fallback(job) for job in batch]
                report.fallback_count += len(batch)
            else:
                scored, missing = self._merge_batch(index, batch, outcome.results)
                report.fallback_count += missing
            report.jobs.extend(scored)

        logger.info(
            f"Completed scoring for {len(report.jobs)} jobs",
            extra={
                "event": "scoring.completed",
                "job_count": len(report.jobs),
                "failed_batches": report.failed_batches,
                "fallback_count": report.fallback_count,
            },
        )

        return report

    def _score_batch(self, profile: SearchProfile, index: int, batch: List[CanonicalJob]) -> BatchOutcome:
        """Score one batch. Every failure becomes a BatchFailure."""
        batch_number = index + 1

        with log_context(batch=batch_number):
            logger.info(
                f"Processing batch {batch_number} ({len(batch)} jobs)",
                extra={"event": "scoring.batch.started", "job_count": len(batch)},
            )

            try:
                prepared = [prepare_job(job, self.config.max_description_chars) for job in batch]
                response_text = self.client.complete(
                    build_system_prompt(),
                    build_user_prompt(prepared, profile),
                )
                results = parse_score_response(response_text)
            except Exception as e:
                logger.error(
                    f"Batch {batch_number} failed: {e}",
                    extra={
                        "event": "scoring.batch.failed",
                        "error_type": type(e).__name__,
                        "error": str(e),
                        "job_count": len(batch),
                    },
                )
                return BatchFailure(reason=f"{type(e).__name__}: {e}")

            logger.info(
                f"Batch {batch_number} scored",
                extra={"event": "scoring.batch.succeeded", "result_count": len(results)},
            )
            return BatchSuccess(results=results)

    def _merge_batch(
        self,
        batch_number: int,
        batch: List[CanonicalJob],
        results: List[JobScoreResult],
    ) -> tuple[List[ScoredJob], int]:
        """Attach results to the batch's jobs by their scoring key.

        Returns the scored jobs and how many of them fell back because the
        response omitted their id.
        """
        by_id = {result.external_id: result for result in results}
        batch_ids = {scoring_key(job) for job in batch}

        unknown = sorted(set(by_id) - batch_ids)
        if unknown:
            logger.debug(
                "Ignoring scores for ids not in batch",
                extra={"event": "scoring.result.unknown_id", "batch": batch_number, "external_ids": unknown},
            )

        scored = []
        missing = 0
        for job in batch:
            result = by_id.get(scoring_key(job))
            if result is None:
                missing += 1
                logger.warning(
                    "No score returned for job, assigning fallback",
                    extra={"event": "scoring.result.missing", "batch": batch_number, "external_id": scoring_key(job)},
                )
                scored.append(self._fallback(job))
            else:
                scored.append(ScoredJob.from_job(job, result.score, result.reasoning))

        return scored, missing

    @staticmethod
    def _fallback(job: CanonicalJob) -> ScoredJob:
        return ScoredJob.from_job(job, FALLBACK_SCORE, FALLBACK_REASONING)
