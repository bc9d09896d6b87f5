"""Explicit result types for one scoring batch."""

from dataclasses import dataclass, field
from typing import List, Union

from jobmatch.domain.models import JobScoreResult, ScoredJob

FALLBACK_SCORE = 50
FALLBACK_REASONING = "Scoring temporarily unavailable. Default score assigned."


@dataclass(frozen=True)
class BatchSuccess:
    """The AI service returned a valid score array for the batch."""

    results: List[JobScoreResult]


@dataclass(frozen=True)
class BatchFailure:
    """The batch could not be scored; every job in it gets the fallback."""

    reason: str


BatchOutcome = Union[BatchSuccess, BatchFailure]


@dataclass
class ScoringReport:
    """
    Scored jobs plus bookkeeping for one score() call.

    Attributes:
        jobs: One ScoredJob per input job, in input order
        batch_count: Number of AI requests attempted
        failed_batches: Number of batches that fell back entirely
        fallback_count: Number of jobs carrying the fallback score
    """

    jobs: List[ScoredJob] = field(default_factory=list)
    batch_count: int = 0
    failed_batches: int = 0
    fallback_count: int = 0
