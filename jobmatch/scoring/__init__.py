"""AI scoring of canonical jobs against a candidate profile."""

from .client import OpenAIScoringClient, ScoringClient
from .exceptions import ScoringClientError, ScoringError, ScoringResponseError
from .parsing import clamp_score, parse_score_response, strip_code_fences
from .prompts import build_system_prompt, build_user_prompt, prepare_job, scoring_key
from .results import (
    FALLBACK_REASONING,
    FALLBACK_SCORE,
    BatchFailure,
    BatchOutcome,
    BatchSuccess,
    ScoringReport,
)
from .service import BatchStage, ScoringService

__all__ = [
    # Service
    "ScoringService",
    "BatchStage",
    "ScoringReport",
    # Clients
    "ScoringClient",
    "OpenAIScoringClient",
    # Batch results
    "BatchSuccess",
    "BatchFailure",
    "BatchOutcome",
    "FALLBACK_SCORE",
    "FALLBACK_REASONING",
    # Prompts and parsing
    "build_system_prompt",
    "build_user_prompt",
    "prepare_job",
    "scoring_key",
    "parse_score_response",
    "strip_code_fences",
    "clamp_score",
    # Exceptions
    "ScoringError",
    "ScoringClientError",
    "ScoringResponseError",
]
