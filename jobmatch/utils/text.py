"""Plain-text helpers shared by adapters, deduplication and prompts."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every run of whitespace to a single space and strip the ends."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_for_key(text: str) -> str:
    """Lowercase and whitespace-normalize text for use in comparison keys."""
    return collapse_whitespace(text).lower()


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to max_length characters of content, then append suffix.

    Unlike a display truncation, the suffix is not counted against
    max_length, so the amount of content sent to the AI service stays exact.

    Example:
        >>> truncate_text("abcdef", 3, suffix="...[truncated]")
        'abc...[truncated]'
    """
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + suffix
