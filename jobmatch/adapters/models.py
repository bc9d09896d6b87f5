"""Result type returned by every adapter fetch."""

from dataclasses import dataclass, field
from typing import List, Optional

from jobmatch.domain.models import CanonicalJob, JobSource


@dataclass(frozen=True)
class FetchOutcome:
    """Outcome of one adapter fetch.

    Exactly one of three shapes:
    - success: error is None, skipped is False, jobs may be empty
    - skipped: credentials absent, jobs empty, no error
    - failed: error holds the cause, jobs empty

    Attributes:
        source: Provider that produced this outcome
        jobs: Canonical jobs fetched (empty unless successful)
        error: Human-readable failure cause, or None
        skipped: True when the adapter was not configured for this run
        duration_seconds: Wall-clock time spent in the fetch
    """

    source: JobSource
    jobs: List[CanonicalJob] = field(default_factory=list)
    error: Optional[str] = None
    skipped: bool = False
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        """Whether the fetch completed without error (skips count as ok)."""
        return self.error is None
