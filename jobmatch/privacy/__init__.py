"""Privacy helpers applied before data is sent to external services."""

from .pii import (
    EMAIL_PLACEHOLDER,
    PHONE_PLACEHOLDER,
    REDACTION_RULES,
    SSN_PLACEHOLDER,
    scrub_pii,
)

__all__ = [
    "scrub_pii",
    "REDACTION_RULES",
    "SSN_PLACEHOLDER",
    "EMAIL_PLACEHOLDER",
    "PHONE_PLACEHOLDER",
]
