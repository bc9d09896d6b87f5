"""PII scrubbing for text that is about to leave the system boundary.

Rules run in order and each later rule sees the output of the earlier ones.
Placeholders contain no digits and no '@', so no later rule can match inside
a placeholder and partially re-expose what it replaced.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

SSN_PLACEHOLDER = "[SSN REDACTED]"
EMAIL_PLACEHOLDER = "[EMAIL REDACTED]"
PHONE_PLACEHOLDER = "[PHONE REDACTED]"


@dataclass(frozen=True)
class RedactionRule:
    """A named pattern and the placeholder that replaces its matches."""

    name: str
    pattern: Pattern[str]
    placeholder: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.placeholder, text)


REDACTION_RULES: Tuple[RedactionRule, ...] = (
    # Email first: digits inside an address must not be split off by the SSN rule
    RedactionRule(
        "email",
        re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}"),
        EMAIL_PLACEHOLDER,
    ),
    # 123-45-6789, 123 45 6789, 123456789
    RedactionRule("ssn", re.compile(r"\b\d{3}[-\s]?\d{2}[-\s]?\d{4}\b"), SSN_PLACEHOLDER),
    # (123) 456-7890, 123-456-7890, 123.456.7890, +1 123 456 7890
    RedactionRule(
        "phone",
        re.compile(r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b"),
        PHONE_PLACEHOLDER,
    ),
)


def scrub_pii(text: str) -> str:
    """Replace SSN-like sequences, email addresses and phone numbers with placeholders.

    Pure and total: empty input is returned unchanged.

    Example:
        >>> scrub_pii("Reach jane.doe@example.com or 555-123-4567")
        'Reach [EMAIL REDACTED] or [PHONE REDACTED]'
    """
    if not text:
        return text or ""

    scrubbed = text
    for rule in REDACTION_RULES:
        scrubbed = rule.apply(scrubbed)
    return scrubbed
