"""Environment variable loading and validation.

Provider credentials are optional: an adapter without credentials skips itself
at fetch time. Only the AI credential is required, and only when a scoring
client is actually built (see jobmatch.scoring.client).
"""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Adzuna country codes supported by its search API
ADZUNA_COUNTRIES = {"at", "au", "be", "br", "ca", "ch", "de", "es", "fr", "gb", "in", "it", "mx", "nl", "nz", "pl", "sg", "us", "za"}


class EnvironmentConfig:
    """Credentials and environment-level overrides."""

    def __init__(
        self,
        jsearch_api_key: Optional[str] = None,
        adzuna_app_id: Optional[str] = None,
        adzuna_app_key: Optional[str] = None,
        adzuna_country: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.jsearch_api_key = jsearch_api_key
        self.adzuna_app_id = adzuna_app_id
        self.adzuna_app_key = adzuna_app_key
        self.adzuna_country = (adzuna_country or "us").lower()
        self.openai_api_key = openai_api_key
        self.log_level = log_level
        self.environment = environment or "local"

    def __repr__(self) -> str:
        # Never render secret values
        configured = [
            name
            for name in ("jsearch_api_key", "adzuna_app_id", "adzuna_app_key", "openai_api_key")
            if getattr(self, name)
        ]
        return f"EnvironmentConfig(configured={configured}, adzuna_country={self.adzuna_country!r})"


def _getenv(name: str) -> Optional[str]:
    """Read an environment variable, treating blank values as unset."""
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_environment_config() -> EnvironmentConfig:
    """Load and validate environment variables.

    Recognized variables (all optional):
    - JSEARCH_API_KEY: RapidAPI key for JSearch
    - ADZUNA_APP_ID / ADZUNA_APP_KEY: Adzuna credential pair (both or neither)
    - ADZUNA_COUNTRY: Adzuna country code (default: us)
    - OPENAI_API_KEY: credential for the AI scoring service
    - LOG_LEVEL: override log level
    - ENVIRONMENT: environment label attached to log records

    Returns:
        EnvironmentConfig with validated values

    Raises:
        ConfigurationError: If any variable is set to an invalid value
    """
    errors = []

    adzuna_app_id = _getenv("ADZUNA_APP_ID")
    adzuna_app_key = _getenv("ADZUNA_APP_KEY")
    adzuna_country = _getenv("ADZUNA_COUNTRY")
    log_level = _getenv("LOG_LEVEL")

    if bool(adzuna_app_id) != bool(adzuna_app_key):
        errors.append(
            "ADZUNA_APP_ID and ADZUNA_APP_KEY must be set together (only one of them is set)."
        )

    if adzuna_country and adzuna_country.lower() not in ADZUNA_COUNTRIES:
        errors.append(
            f"Invalid ADZUNA_COUNTRY: '{adzuna_country}'. "
            f"Must be one of: {', '.join(sorted(ADZUNA_COUNTRIES))}"
        )

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Unset variables you do not use instead of leaving them half-configured",
            ],
        )

    return EnvironmentConfig(
        jsearch_api_key=_getenv("JSEARCH_API_KEY"),
        adzuna_app_id=adzuna_app_id,
        adzuna_app_key=adzuna_app_key,
        adzuna_country=adzuna_country,
        openai_api_key=_getenv("OPENAI_API_KEY"),
        log_level=log_level.upper() if log_level else None,
        environment=_getenv("ENVIRONMENT"),
    )
