"""Concurrent fan-out over source adapters with per-source failure isolation."""

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import List, Optional, Sequence

from jobmatch.adapters.base import BaseAdapter
from jobmatch.adapters.models import FetchOutcome
from jobmatch.logging import get_logger
from jobmatch.logging.context import bind_log_context

from .dedup import deduplicate
from .models import AggregationResult, SourceRunStats

logger = get_logger(__name__, component="aggregator")

# Slack on top of an adapter's own timeout before the join gives up on it
JOIN_GRACE_SECONDS = 2.0


class JobAggregator:
    """
    Runs every registered adapter concurrently and merges their results.

    Adapters run on a thread pool, one worker per adapter unless max_workers
    caps it. The aggregator settles every adapter before merging: one failing
    provider never cancels or hides the others. An adapter that is still
    running past its timeout plus a short grace period is reported as timed
    out, so a provider that trickles its response cannot stall the run.
    Successful results are concatenated in registration order, then
    deduplicated, so the earliest-registered source wins on duplicates.
    """

    def __init__(
        self,
        adapters: Sequence[BaseAdapter],
        max_workers: Optional[int] = None,
        join_grace_seconds: float = JOIN_GRACE_SECONDS,
    ):
        """
        Initialize the aggregator.

        Args:
            adapters: Adapters in registration order
            max_workers: Thread pool size (default: one per adapter)
            join_grace_seconds: Seconds past an adapter's timeout before it is abandoned
        """
        self.adapters = list(adapters)
        self.max_workers = max_workers
        self.join_grace_seconds = join_grace_seconds

    def aggregate(self, query: str, location: str = "", remote_only: bool = False) -> AggregationResult:
        """
        Fetch from all adapters and merge the results.

        Never raises for provider failures: each failure becomes one
        "<Label> failed: <cause>" entry in the result's errors.

        Returns:
            AggregationResult with deduplicated jobs, errors and per-source stats
        """
        if not self.adapters:
            logger.warning("No adapters registered", extra={"event": "aggregation.no_adapters"})
            return AggregationResult()

        outcomes = self._run_all(query, location, remote_only)

        merged = []
        errors: List[str] = []
        source_stats: List[SourceRunStats] = []

        for adapter, outcome in zip(self.adapters, outcomes):
            stats = SourceRunStats(
                source=adapter.source,
                fetched_count=len(outcome.jobs),
                skipped=outcome.skipped,
                error_message=outcome.error,
                duration_seconds=outcome.duration_seconds,
            )
            source_stats.append(stats)

            if outcome.error is not None:
                errors.append(f"{adapter.label} failed: {outcome.error}")
            else:
                merged.extend(outcome.jobs)

            logger.info(
                f"{adapter.label}: {stats.fetched_count} jobs",
                extra={
                    "event": "aggregation.source.completed",
                    "source": adapter.source.value,
                    "count": stats.fetched_count,
                    "skipped": stats.skipped,
                    "had_errors": stats.had_errors,
                    "duration_ms": int(stats.duration_seconds * 1000),
                },
            )

        jobs = deduplicate(merged)
        result = AggregationResult(
            jobs=jobs,
            errors=errors,
            source_stats=source_stats,
            total_fetched=len(merged),
        )

        logger.info(
            f"Aggregated {result.total_fetched} jobs, {len(jobs)} after deduplication",
            extra={
                "event": "aggregation.completed",
                "total_before_dedup": result.total_fetched,
                "total_after_dedup": len(jobs),
                "duplicates_removed": result.duplicates_removed,
                "error_count": len(errors),
            },
        )

        return result

    def _run_all(self, query: str, location: str, remote_only: bool) -> List[FetchOutcome]:
        """
        Run every adapter and collect one outcome per adapter, in registration order.

        Each adapter gets a wall-clock deadline: its own timeout, multiplied by
        its queue position when workers are capped, plus the join grace period.
        An adapter still running at its deadline is recorded as timed out and
        abandoned: its worker thread is not waited for.
        """
        workers = self.max_workers or len(self.adapters)

        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="adapter")
        try:
            futures = []
            for index, adapter in enumerate(self.adapters):
                started = time.monotonic()
                deadline = started + (index // workers + 1) * adapter.timeout + self.join_grace_seconds
                future = pool.submit(bind_log_context(adapter.fetch_outcome), query, location, remote_only)
                futures.append((adapter, future, started, deadline))

            outcomes = []
            for adapter, future, started, deadline in futures:
                try:
                    outcomes.append(future.result(timeout=max(0.0, deadline - time.monotonic())))
                except FuturesTimeoutError:
                    future.cancel()
                    logger.warning(
                        f"{adapter.label} did not finish within {adapter.timeout}s",
                        extra={
                            "event": "aggregation.source.timed_out",
                            "source": adapter.source.value,
                            "timeout": adapter.timeout,
                        },
                    )
                    outcomes.append(
                        FetchOutcome(
                            source=adapter.source,
                            error=f"timed out after {adapter.timeout}s",
                            duration_seconds=time.monotonic() - started,
                        )
                    )
                except Exception as e:
                    # fetch_outcome() does not raise; this covers adapters that override it
                    logger.error(
                        f"{adapter.label} adapter raised: {e}",
                        extra={
                            "event": "aggregation.source.failed",
                            "source": adapter.source.value,
                            "error_type": type(e).__name__,
                            "error": str(e),
                        },
                        exc_info=True,
                    )
                    outcomes.append(
                        FetchOutcome(
                            source=adapter.source,
                            error=str(e) or type(e).__name__,
                            duration_seconds=time.monotonic() - started,
                        )
                    )
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        return outcomes
