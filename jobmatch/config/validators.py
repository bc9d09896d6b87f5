"""Soft checks on raw configuration that warn instead of failing."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Inspect a raw configuration mapping for settings that are legal but risky.

    Args:
        config_dict: Configuration as parsed from YAML, before validation

    Returns:
        List of warning messages (empty when nothing looks suspicious)
    """
    warning_messages = []

    for source in config_dict.get("sources") or []:
        if isinstance(source, dict) and not source.get("enabled", True):
            warning_messages.append(
                f"Source '{source.get('type', 'unknown')}' is disabled and will be skipped"
            )

    scoring = config_dict.get("scoring") or {}
    if isinstance(scoring, dict):
        batch_size = scoring.get("batch_size")
        if isinstance(batch_size, int) and batch_size > 10:
            warning_messages.append(
                f"Large scoring batch_size ({batch_size}) increases prompt size and the "
                "number of jobs that fall back together when a batch fails"
            )

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        timeout = advanced.get("http_request_timeout")
        if isinstance(timeout, int) and timeout > 60:
            warning_messages.append(
                f"Long http_request_timeout ({timeout}s) lets a hung provider delay every run"
            )

        max_jobs = advanced.get("max_jobs_per_source")
        if isinstance(max_jobs, int) and (max_jobs == 0 or max_jobs > 500):
            warning_messages.append(
                f"max_jobs_per_source={max_jobs} may send a very large number of jobs to scoring"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages through the warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
