"""Exceptions raised inside the scoring stage.

ScoringService converts every one of these into a fallback score for the
affected batch; none of them reaches the caller of score().
"""


class ScoringError(Exception):
    """Base exception for scoring errors."""

    pass


class ScoringClientError(ScoringError):
    """The AI service call failed (network, authentication, rate limit, ...)."""

    pass


class ScoringResponseError(ScoringError):
    """The AI service answered, but not with a usable JSON score array."""

    pass
