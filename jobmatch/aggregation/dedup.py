"""Cross-source deduplication of canonical jobs.

Two listings are considered duplicates when their titles and companies match
after lowercasing and whitespace normalization. The location is not part of
the key, so one employer posting the same title in two cities collapses to a
single listing.
"""

from typing import Iterable, List

from jobmatch.domain.models import CanonicalJob
from jobmatch.logging import get_logger
from jobmatch.utils.text import normalize_for_key

logger = get_logger(__name__, component="dedup")

# Unit separator; whitespace normalization turns it into a space, so it can
# never occur inside a normalized title or company.
KEY_SEPARATOR = "\x1f"


def dedupe_key(job: CanonicalJob) -> str:
    """
    Build the duplicate-detection key for a job.

    Example:
        >>> dedupe_key(job)  # title="Backend  Engineer", company="ACME"
        'backend engineer\\x1facme'
    """
    return f"{normalize_for_key(job.title)}{KEY_SEPARATOR}{normalize_for_key(job.company)}"


def deduplicate(jobs: Iterable[CanonicalJob]) -> List[CanonicalJob]:
    """
    Remove duplicate jobs, keeping the first occurrence of each key.

    Input order is preserved and the input is not modified. Applying the
    function to its own output returns the same list.
    """
    seen = set()
    unique: List[CanonicalJob] = []

    for job in jobs:
        key = dedupe_key(job)
        if key in seen:
            logger.debug(
                "Dropping duplicate job",
                extra={
                    "event": "dedup.duplicate",
                    "external_id": job.external_id,
                    "job_source": job.source.value,
                },
            )
            continue
        seen.add(key)
        unique.append(job)

    return unique
