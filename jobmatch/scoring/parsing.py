"""Parsing and validation of AI scoring responses.

The AI service is expected to answer with a JSON array of
``{"externalId": ..., "score": ..., "reasoning": ...}`` objects, sometimes
wrapped in a markdown code fence. Anything else is a ScoringResponseError.
"""

import json
import re
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from jobmatch.domain.models import JobScoreResult

from .exceptions import ScoringResponseError

_FENCE_START_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END_RE = re.compile(r"\s*```$")

# Length of the response excerpt kept in error messages
ERROR_EXCERPT_CHARS = 300


class RawScoreEntry(BaseModel):
    """One element of the AI response array, before clamping."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    external_id: str = Field(..., alias="externalId")
    score: float = Field(..., allow_inf_nan=False)
    reasoning: str

    @field_validator("external_id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, v: Any) -> Any:
        # Models occasionally echo numeric ids without quotes
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("score", mode="before")
    @classmethod
    def require_number(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"score must be a number, got {type(v).__name__}")
        return v

    @field_validator("reasoning")
    @classmethod
    def require_reasoning(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("reasoning cannot be empty")
        return v.strip()


_ENTRIES_ADAPTER = TypeAdapter(List[RawScoreEntry])


def strip_code_fences(text: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    cleaned = _FENCE_START_RE.sub("", text.strip())
    cleaned = _FENCE_END_RE.sub("", cleaned)
    return cleaned.strip()


def clamp_score(value: float) -> int:
    """Round a score and clamp it to the closed interval [0, 100]."""
    return max(0, min(100, int(round(value))))


def parse_score_response(text: str) -> List[JobScoreResult]:
    """
    Parse an AI response into clamped score results.

    Args:
        text: Raw text returned by the AI service

    Returns:
        One JobScoreResult per array element, in response order

    Raises:
        ScoringResponseError: If the text is not a JSON array of valid entries

    Example:
        >>> parse_score_response('```json\\n[{"externalId": "a1", "score": 140, "reasoning": "ok"}]\\n```')
        [JobScoreResult(external_id='a1', score=100, reasoning='ok')]
    """
    cleaned = strip_code_fences(text)

    try:
        payload = json.loads(cleaned)
    except ValueError as e:
        raise ScoringResponseError(
            f"Failed to parse scoring response as JSON: {cleaned[:ERROR_EXCERPT_CHARS]}"
        ) from e

    try:
        entries = _ENTRIES_ADAPTER.validate_python(payload)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ())) or "(root)"
        raise ScoringResponseError(
            f"Scoring response validation failed: {e.error_count()} error(s), "
            f"first: {location}: {first.get('msg', str(e))}"
        ) from e

    return [
        JobScoreResult(
            external_id=entry.external_id,
            score=clamp_score(entry.score),
            reasoning=entry.reasoning,
        )
        for entry in entries
    ]
