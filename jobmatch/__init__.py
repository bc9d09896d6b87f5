"""JobMatch pipeline: multi-source job aggregation, deduplication and AI scoring."""

__version__ = "0.1.0"
