"""Pipeline orchestration for fetching and scoring job listings."""

from .models import PipelineRunResult
from .runner import MatchPipeline

__all__ = [
    "MatchPipeline",
    "PipelineRunResult",
]
