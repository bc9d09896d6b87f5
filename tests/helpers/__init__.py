"""Test helpers."""

from .fixture_adapter import FixtureAdapter, load_fixture_sources
from .scoring_client import FakeScoringClient, batch_ids, score_all

__all__ = ["FixtureAdapter", "load_fixture_sources", "FakeScoringClient", "batch_ids", "score_all"]
